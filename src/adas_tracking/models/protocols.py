"""
Protocols - narrow interfaces for the pipeline's external and swappable parts.

The detector is an external capability: anything that turns a frame into a
list of raw detection dicts can drive the pipeline. Lane and risk estimation
sit behind their own protocols so a calibrated geometric model can replace
the frame-position heuristics without touching association or the registry.
"""

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from .analysis import LaneState, RiskRecord
from .detection import FrameGeometry, TrackedDetection


@runtime_checkable
class Detector(Protocol):
    """
    Protocol for detection backends.

    Example:
        detections = detector.detect(frame)
        result = pipeline.run_frame(detections, geometry, now)
    """

    def detect(self, frame: Any) -> list[dict[str, Any]]:
        """
        Detect objects in a single frame.

        Args:
            frame: Frame in whatever form the backend consumes

        Returns:
            Raw detections, each `{class, confidence, bbox: [x, y, w, h]}`
        """
        ...


@runtime_checkable
class LaneModel(Protocol):
    """Produces a LaneState from one frame's detections."""

    def estimate(
        self,
        detections: Sequence[TrackedDetection],
        geometry: FrameGeometry,
        scan_line: Sequence[float] | None = None,
    ) -> LaneState: ...


@runtime_checkable
class RiskModel(Protocol):
    """Produces one RiskRecord per vehicle detection."""

    def estimate(
        self,
        detections: Sequence[TrackedDetection],
        geometry: FrameGeometry,
    ) -> list[RiskRecord]: ...
