"""
TrackRegistry - Owns the live track set for one video source.

Holds track identity, last box, association count and last-seen time across
frames. Reads are free; the only mutation after initialize() is commit()
(plus allocate_id() for callers that issue ids up front).
"""

import logging
from collections.abc import Iterable

from ..models import Track
from ..utils.constants import DEFAULT_ASSUMED_FPS, DEFAULT_MAX_AGE_FRAMES

logger = logging.getLogger(__name__)


def max_age_seconds(
    max_age_frames: int = DEFAULT_MAX_AGE_FRAMES, fps: float = DEFAULT_ASSUMED_FPS
) -> float:
    """Convert a frame-count retention window into seconds."""
    if fps <= 0:
        raise ValueError(f"fps must be positive, got {fps}")
    return max_age_frames / fps


class TrackRegistry:
    """
    Live tracks keyed by track_id.

    Invariants:
        - track ids are issued in increasing order and never reused
        - next_track_id == 1 + highest id ever issued
    """

    def __init__(self, max_age: float | None = None):
        """
        Args:
            max_age: Seconds a track may go unmatched before it is dropped.
                Defaults to 5 frames at 30 fps.
        """
        self.max_age = max_age if max_age is not None else max_age_seconds()
        if self.max_age < 0:
            raise ValueError(f"max_age must be >= 0, got {self.max_age}")
        self._tracks: dict[int, Track] = {}
        self._next_track_id = 1
        self.initialize()

    def initialize(self) -> None:
        """Reset to an empty track set with ids restarting at 1."""
        self._tracks = {}
        self._next_track_id = 1

    @property
    def next_track_id(self) -> int:
        return self._next_track_id

    @property
    def tracks(self) -> dict[int, Track]:
        """Shallow copy of the committed track set."""
        return dict(self._tracks)

    def get(self, track_id: int) -> Track | None:
        return self._tracks.get(track_id)

    def __len__(self) -> int:
        return len(self._tracks)

    def __contains__(self, track_id: object) -> bool:
        return track_id in self._tracks

    def is_expired(self, track: Track, now: float) -> bool:
        return now - track.last_seen >= self.max_age

    def age(self, now: float) -> set[int]:
        """
        Find tracks that have gone unmatched for at least max_age.

        Pure: nothing is removed until commit().

        Returns:
            Ids eligible for removal
        """
        return {tid for tid, track in self._tracks.items() if self.is_expired(track, now)}

    def live_tracks(self, now: float) -> list[Track]:
        """Tracks still eligible for matching, in ascending id order."""
        expired = self.age(now)
        return [self._tracks[tid] for tid in sorted(self._tracks) if tid not in expired]

    def allocate_id(self) -> int:
        """Issue the next track id."""
        track_id = self._next_track_id
        self._next_track_id += 1
        return track_id

    def commit(
        self,
        matched: Iterable[Track],
        created: Iterable[Track],
        expired: Iterable[int],
    ) -> None:
        """
        Apply one frame's association outcome.

        A created track either carries an id from allocate_id() or is staged
        with the next unissued id (next_track_id, next_track_id + 1, ... in
        order). Staged ids are issued here, so nothing changes if the caller
        never commits.

        Args:
            matched: Existing tracks with their updated state
            created: New tracks
            expired: Ids to drop

        Raises:
            ValueError: A created track reuses an id or was not issued here
        """
        matched = list(matched)
        created = list(created)
        expired = set(expired)

        next_id = self._next_track_id
        seen: set[int] = set()
        for track in created:
            track_id = track.track_id
            if track_id in self._tracks or track_id in seen:
                raise ValueError(f"Track id {track_id} is already in use")
            if track_id == next_id:
                next_id += 1
            elif track_id >= self._next_track_id:
                raise ValueError(f"Track id {track_id} was not allocated by this registry")
            seen.add(track_id)

        for track_id in expired:
            self._tracks.pop(track_id, None)

        for track in matched:
            self._tracks[track.track_id] = track

        for track in created:
            self._tracks[track.track_id] = track

        self._next_track_id = next_id

        if expired or created:
            logger.debug(
                f"Tracks: +{len(created)} -{len(expired)} live={len(self._tracks)} "
                f"next_id={self._next_track_id}"
            )
