"""
Associator - IoU matching of a frame's detections to live tracks.

Per frame:
  - Tracks unmatched for max_age or longer are expired and are not candidates.
  - Each detection, in input order, takes the unclaimed live track with the
    highest IoU at or above the threshold. Equal IoU goes to the lowest id.
  - Unmatched detections start new tracks.
  - Unclaimed live tracks carry forward unchanged.

stage() computes the outcome without touching the registry; commit() applies
it in one step. associate() does both.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field, replace

from ..models import Detection, Track, TrackedDetection
from ..utils.constants import DEFAULT_IOU_THRESHOLD
from .geometry import iou
from .registry import TrackRegistry

logger = logging.getLogger(__name__)


@dataclass
class AssociationResult:
    """
    Outcome of associating one frame.

    `tracks` is the track set as it stands once the outcome is committed.
    """

    detections: list[TrackedDetection] = field(default_factory=list)
    tracks: dict[int, Track] = field(default_factory=dict)
    matched: list[int] = field(default_factory=list)
    created: list[int] = field(default_factory=list)
    expired: list[int] = field(default_factory=list)
    matched_tracks: list[Track] = field(default_factory=list, repr=False)
    created_tracks: list[Track] = field(default_factory=list, repr=False)


class Associator:
    """Matches detections to the tracks held by a TrackRegistry."""

    def __init__(self, registry: TrackRegistry, iou_threshold: float = DEFAULT_IOU_THRESHOLD):
        if not 0.0 < iou_threshold <= 1.0:
            raise ValueError(f"iou_threshold must be in (0, 1], got {iou_threshold}")
        self.registry = registry
        self.iou_threshold = iou_threshold

    def associate(self, detections: Sequence[Detection], now: float) -> AssociationResult:
        """
        Run association for one frame and commit the result.

        Args:
            detections: Validated detections for the frame
            now: Frame timestamp in seconds

        Returns:
            AssociationResult with tagged detections and the committed track set
        """
        staged = self.stage(detections, now)
        self.commit(staged)
        return staged

    def stage(self, detections: Sequence[Detection], now: float) -> AssociationResult:
        """
        Compute one frame's association without changing the registry.

        New tracks get the next unissued ids; they are only issued when the
        result is passed to commit().
        """
        expired = self.registry.age(now)
        candidates = [
            track
            for track_id, track in sorted(self.registry.tracks.items())
            if track_id not in expired
        ]

        claimed: set[int] = set()
        matched: list[Track] = []
        created: list[Track] = []
        tagged: list[TrackedDetection] = []
        next_id = self.registry.next_track_id

        for det in detections:
            best = self._best_match(det, candidates, claimed)

            if best is not None:
                track = replace(best)
                track.associate(det.bbox, now, det.class_name)
                claimed.add(track.track_id)
                matched.append(track)
            else:
                track = Track(
                    track_id=next_id,
                    bbox=det.bbox,
                    frames_detected=1,
                    last_seen=now,
                    class_name=det.class_name,
                )
                next_id += 1
                created.append(track)

            tagged.append(
                TrackedDetection(
                    detection=det,
                    track_id=track.track_id,
                    frames_detected=track.frames_detected,
                    last_seen=track.last_seen,
                )
            )

        tracks = {tid: t for tid, t in self.registry.tracks.items() if tid not in expired}
        tracks.update((t.track_id, t) for t in matched)
        tracks.update((t.track_id, t) for t in created)

        return AssociationResult(
            detections=tagged,
            tracks=tracks,
            matched=[t.track_id for t in matched],
            created=[t.track_id for t in created],
            expired=sorted(expired),
            matched_tracks=matched,
            created_tracks=created,
        )

    def commit(self, staged: AssociationResult) -> None:
        """Apply a staged result to the registry."""
        self.registry.commit(staged.matched_tracks, staged.created_tracks, staged.expired)

        if staged.expired:
            logger.debug(f"Expired tracks: {staged.expired}")

    def _best_match(
        self, det: Detection, candidates: list[Track], claimed: set[int]
    ) -> Track | None:
        """Highest-IoU unclaimed track at or above threshold; candidates are id-ordered."""
        best_track = None
        best_iou = 0.0

        for track in candidates:
            if track.track_id in claimed:
                continue

            overlap = iou(det.bbox, track.bbox)
            if overlap >= self.iou_threshold and overlap > best_iou:
                best_track = track
                best_iou = overlap

        return best_track
