"""
FramePipeline - per-source tracking, lane and risk pipeline.

One instance per video source: it owns that source's TrackRegistry, so
independent streams never share mutable state. Each call to run_frame()
processes exactly one frame:

    raw detections -> validation -> staged association
                   -> lane estimate + risk records + traffic flow
                   -> alert emitters -> registry commit -> FrameResult

run_frame() never raises. A failure is logged and reported on the returned
FrameResult so the caller's loop can move on to the next frame; the registry
is only committed once every stage has succeeded.
"""

import logging
import math
from collections.abc import Iterable, Sequence
from typing import Any

from .analysis import LaneEstimator, RiskAnalyzer, analyze_traffic_flow, make_jitter
from .analysis.jitter import JitterSource
from .config.schemas import Config
from .core import Associator, TrackRegistry
from .emitters import build_active_emitters
from .models import (
    Detection,
    Detector,
    FrameGeometry,
    FrameResult,
    InvalidBoxError,
    InvalidDetectionError,
    LaneModel,
    RiskModel,
)

logger = logging.getLogger(__name__)


def as_geometry(geometry: FrameGeometry | Sequence[float]) -> FrameGeometry:
    """Accept a FrameGeometry or a (width, height) pair."""
    if isinstance(geometry, FrameGeometry):
        return geometry
    width, height = geometry
    return FrameGeometry(width=width, height=height)


class FramePipeline:
    """Runs the per-frame pipeline for a single video source."""

    def __init__(
        self,
        config: Config | None = None,
        jitter: JitterSource | None = None,
        lane_model: LaneModel | None = None,
        risk_model: RiskModel | None = None,
        emitters: list | None = None,
        source_id: str = "default",
    ):
        """
        Args:
            config: Validated configuration (defaults when None)
            jitter: Randomness for simulated signals; seeded from config when None
            lane_model: Lane estimator override
            risk_model: Risk estimator override
            emitters: Alert emitters; built from config.alerts when None
            source_id: Label used in log messages
        """
        self.config = config or Config()
        self.source_id = source_id
        self.jitter = jitter if jitter is not None else make_jitter(self.config.jitter.seed)

        tracking = self.config.tracking
        self.registry = TrackRegistry(max_age=tracking.max_age_seconds)
        self.associator = Associator(self.registry, iou_threshold=tracking.iou_threshold)
        self.min_confidence = tracking.min_confidence

        self.lane_model = lane_model or LaneEstimator(
            brightness_threshold=self.config.lane.brightness_threshold,
            left_boundary_pct=self.config.lane.left_boundary_pct,
            right_boundary_pct=self.config.lane.right_boundary_pct,
            jitter=self.jitter,
        )
        self.risk_model = risk_model or RiskAnalyzer(
            vehicle_classes=self.config.risk.vehicle_classes,
            min_distance=self.config.risk.min_distance,
            max_distance=self.config.risk.max_distance,
            jitter=self.jitter,
        )
        self.emitters = (
            emitters if emitters is not None else build_active_emitters(self.config.alerts)
        )

        self.frame_index = 0

    def reset(self) -> None:
        """Forget all tracks, e.g. when the source restarts."""
        self.registry.initialize()
        self.frame_index = 0
        logger.info(f"[{self.source_id}] Pipeline reset")

    def parse_detections(self, raw: Iterable[Any] | None) -> tuple[list[Detection], int]:
        """
        Validate inbound detections.

        Malformed entries are dropped and counted; entries below the
        confidence floor are dropped silently.

        Returns:
            Tuple of (valid detections with sequence ids, rejected count)
        """
        detections: list[Detection] = []
        rejected = 0

        for item in raw or ():
            try:
                det = Detection.from_dict(item, detection_id=len(detections))
            except (InvalidDetectionError, InvalidBoxError) as e:
                rejected += 1
                logger.debug(f"[{self.source_id}] Rejected detection: {e}")
                continue

            if det.confidence < self.min_confidence:
                continue
            detections.append(det)

        if rejected:
            logger.warning(
                f"[{self.source_id}] Frame {self.frame_index}: rejected {rejected} malformed detection(s)"
            )

        return detections, rejected

    def run_frame(
        self,
        raw_detections: Iterable[Any] | None,
        geometry: FrameGeometry | Sequence[float],
        now: float,
        scan_line: Sequence[float] | None = None,
    ) -> FrameResult:
        """
        Process one frame.

        Args:
            raw_detections: Detection dicts from the detector (None = none)
            geometry: Frame dimensions
            now: Frame timestamp in seconds
            scan_line: Optional luminance samples for the lane heuristic

        Returns:
            FrameResult; `error` is set if the frame failed
        """
        result = FrameResult(frame_index=self.frame_index, timestamp=now)
        self.frame_index += 1

        try:
            if not isinstance(now, (int, float)) or not math.isfinite(now):
                raise ValueError(f"Frame timestamp must be a finite number, got {now!r}")
            frame_geometry = as_geometry(geometry)

            detections, result.rejected = self.parse_detections(raw_detections)

            association = self.associator.stage(detections, now)
            frame = FrameResult(
                frame_index=result.frame_index,
                timestamp=now,
                detections=association.detections,
                live_tracks=len(association.tracks),
                rejected=result.rejected,
            )

            frame.lane = self.lane_model.estimate(frame.detections, frame_geometry, scan_line)
            frame.risks = self.risk_model.estimate(frame.detections, frame_geometry)
            frame.traffic = analyze_traffic_flow(
                frame.detections, self.config.risk.vehicle_classes
            )

            for emitter in self.emitters:
                frame.events.extend(emitter.process(frame))

            self.associator.commit(association)
            return frame

        except Exception as e:
            result.error = f"{type(e).__name__}: {e}"
            logger.error(
                f"[{self.source_id}] Frame {result.frame_index} failed: {result.error}",
                exc_info=True,
            )

        return result

    def run_detector(
        self,
        detector: Detector,
        frame: Any,
        geometry: FrameGeometry | Sequence[float],
        now: float,
        scan_line: Sequence[float] | None = None,
    ) -> FrameResult:
        """
        Invoke the detector, then process the frame.

        A detector failure counts as a frame with zero detections, so
        existing tracks age normally instead of being cleared.
        """
        try:
            raw = detector.detect(frame)
        except Exception as e:
            logger.warning(
                f"[{self.source_id}] Detector failed on frame {self.frame_index}: {e}"
            )
            raw = []

        return self.run_frame(raw, geometry, now, scan_line)
