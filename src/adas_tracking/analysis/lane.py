"""
Lane Estimator - scan-line heuristic for lane position and recommendation.

This is a stand-in for real lane-marking detection. Bright samples on one
horizontal scan-line near the bottom of the frame are counted in a left,
center and right region; the region with the most marking evidence is taken
as the current lane. The recommended lane comes from where vehicles sit
relative to it.

Stateless: every call recomputes the LaneState from its inputs alone.
"""

import logging
import math
from collections.abc import Sequence

import numpy as np

from ..core.geometry import clamp, relative_center_x
from ..models import FrameGeometry, LaneState
from ..models.analysis import LanePosition
from ..utils.constants import (
    DEFAULT_BRIGHTNESS_THRESHOLD,
    DEFAULT_SCAN_LINE_PCT,
    LANE_VEHICLE_CLASSES,
    LEFT_REGION_PCT,
    RIGHT_REGION_PCT,
)
from .jitter import JitterSource, make_jitter

logger = logging.getLogger(__name__)

# Lane membership for vehicles ahead, as fractions of frame width.
# Regions overlap so a vehicle straddling a boundary blocks both lanes.
LEFT_LANE_MAX_X = 0.4
CENTER_LANE_MIN_X = 0.3
CENTER_LANE_MAX_X = 0.7
RIGHT_LANE_MIN_X = 0.6

MIN_OFF_IDEAL_SCORE = 60
MAX_OFF_IDEAL_SCORE = 99


def sample_scan_line(frame: np.ndarray, row_pct: float = DEFAULT_SCAN_LINE_PCT) -> np.ndarray:
    """
    Luminance of one frame row, as the mean over color channels.

    Args:
        frame: HxW grayscale or HxWxC color image
        row_pct: Row position as percentage of frame height

    Returns:
        1-D float array, one sample per pixel column
    """
    if frame is None or frame.ndim not in (2, 3) or frame.shape[0] == 0:
        raise ValueError("frame must be a non-empty 2-D or 3-D array")

    height = frame.shape[0]
    row = min(height - 1, max(0, int(height * row_pct / 100)))
    pixels = frame[row].astype(np.float64)

    if pixels.ndim == 2:
        return pixels.mean(axis=1)
    return pixels


class LaneEstimator:
    """Estimates lane position, recommended lane and discipline score."""

    def __init__(
        self,
        brightness_threshold: float = DEFAULT_BRIGHTNESS_THRESHOLD,
        left_boundary_pct: float = LEFT_REGION_PCT,
        right_boundary_pct: float = RIGHT_REGION_PCT,
        lane_classes: Sequence[str] = LANE_VEHICLE_CLASSES,
        jitter: JitterSource | None = None,
    ):
        if not 0 < left_boundary_pct < right_boundary_pct < 100:
            raise ValueError("Lane boundaries must satisfy 0 < left < right < 100")
        self.brightness_threshold = brightness_threshold
        self.left_boundary = left_boundary_pct / 100
        self.right_boundary = right_boundary_pct / 100
        self.lane_classes = {c.lower() for c in lane_classes}
        self.jitter = jitter if jitter is not None else make_jitter()

    def estimate(
        self,
        detections: Sequence,
        geometry: FrameGeometry,
        scan_line: Sequence[float] | None = None,
    ) -> LaneState:
        """
        Build the LaneState for one frame.

        Args:
            detections: Frame detections (anything with .bbox and .class_name)
            geometry: Frame dimensions
            scan_line: Luminance samples across the frame width, or None

        Returns:
            LaneState with score clamped to 0-100
        """
        left, center, right = self.region_confidences(scan_line)
        position, confidence = self._classify(left, center, right)
        deviation = self._deviation(position)
        ideal = self.ideal_position(position, detections, geometry)

        if position == ideal:
            score = 100
        else:
            drop = math.floor(self.jitter.random() * (MAX_OFF_IDEAL_SCORE - MIN_OFF_IDEAL_SCORE + 1))
            score = int(clamp(MAX_OFF_IDEAL_SCORE - drop, MIN_OFF_IDEAL_SCORE, MAX_OFF_IDEAL_SCORE))

        return LaneState(
            position=position,
            confidence=clamp(confidence, 0.0, 1.0),
            deviation=deviation,
            ideal_position=ideal,
            score=int(clamp(score, 0, 100)),
        )

    def region_confidences(
        self, scan_line: Sequence[float] | None
    ) -> tuple[float, float, float]:
        """
        Share of bright samples falling in the left, center and right regions.

        All zeros when there is no scan-line or no bright sample.
        """
        if scan_line is None:
            return 0.0, 0.0, 0.0

        samples = np.asarray(scan_line, dtype=np.float64).ravel()
        n = samples.size
        if n == 0:
            return 0.0, 0.0, 0.0

        bright = samples > self.brightness_threshold
        left_end = int(n * self.left_boundary)
        right_start = int(n * self.right_boundary)

        left = int(bright[:left_end].sum())
        center = int(bright[left_end : right_start + 1].sum())
        right = int(bright[right_start + 1 :].sum())

        total = max(1, left + center + right)
        return left / total, center / total, right / total

    @staticmethod
    def _classify(left: float, center: float, right: float) -> tuple[LanePosition, float]:
        """Strict plurality wins; any tie resolves to centered."""
        if left > center and left > right:
            return "left", left
        if right > center and right > left:
            return "right", right
        return "centered", center

    def _deviation(self, position: LanePosition) -> int:
        # Placeholder offset until a real lane-center measurement exists
        u = self.jitter.random()
        if position == "centered":
            return math.floor(u * 6) - 3
        return math.floor(u * 10) - 5

    def ideal_position(
        self,
        position: LanePosition,
        detections: Sequence,
        geometry: FrameGeometry,
    ) -> LanePosition:
        """
        Recommend a lane.

        With a vehicle ahead in the current lane: move to the center from
        either side lane, or from the center to the side with fewer
        detections (left on ties). With the lane clear: keep right.
        """
        blocking = [
            d
            for d in detections
            if d.class_name.lower() in self.lane_classes
            and self._in_lane(position, relative_center_x(d.bbox, geometry))
        ]

        if not blocking:
            return "right"

        if position in ("left", "right"):
            return "centered"

        xs = [relative_center_x(d.bbox, geometry) for d in detections]
        left_count = sum(1 for x in xs if x < LEFT_LANE_MAX_X)
        right_count = sum(1 for x in xs if x > RIGHT_LANE_MIN_X)
        return "left" if left_count <= right_count else "right"

    @staticmethod
    def _in_lane(position: LanePosition, rel_x: float) -> bool:
        if position == "left":
            return rel_x < LEFT_LANE_MAX_X
        if position == "right":
            return rel_x > RIGHT_LANE_MIN_X
        return CENTER_LANE_MIN_X < rel_x < CENTER_LANE_MAX_X
