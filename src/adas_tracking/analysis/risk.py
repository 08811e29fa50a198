"""
Risk & Flow Analyzer - per-vehicle collision risk and traffic summary.

Distance comes from apparent size (bigger box = closer), trajectory from
where the box sits vertically (lower = nearer the camera). Both are
uncalibrated monocular heuristics.
"""

import logging
import math
from collections.abc import Sequence

from ..core.geometry import clamp, relative_area, relative_center_y
from ..models import FrameGeometry, RiskRecord, TrafficFlow
from ..models.analysis import Congestion, Trajectory
from ..utils.constants import (
    APPROACHING_RISK_MULTIPLIER,
    DEFAULT_MAX_DISTANCE,
    DEFAULT_MIN_DISTANCE,
    DENSITY_SATURATION_COUNT,
    FREE_FLOW_SPEED,
    HIGH_CONGESTION_DENSITY,
    MEDIUM_CONGESTION_DENSITY,
    MIN_FLOW_SPEED,
    RISK_SIZE_FACTOR,
    VEHICLE_CLASSES,
)
from .jitter import JitterSource, make_jitter

logger = logging.getLogger(__name__)

APPROACHING_MIN_Y = 0.5
PARALLEL_MIN_Y = 0.3

# Simulated speed range (km/h) until tracks carry real motion
SIM_SPEED_MIN = 30.0
SIM_SPEED_SPAN = 40.0


def classify_trajectory(rel_y: float) -> Trajectory:
    """Lower half approaching, 30-50% parallel, upper 30% departing."""
    if rel_y > APPROACHING_MIN_Y:
        return "approaching"
    if rel_y > PARALLEL_MIN_Y:
        return "parallel"
    return "departing"


def is_vehicle(class_name: str, vehicle_classes=VEHICLE_CLASSES) -> bool:
    return class_name.lower() in vehicle_classes


class RiskAnalyzer:
    """Produces a RiskRecord for every vehicle-class detection."""

    def __init__(
        self,
        vehicle_classes: Sequence[str] = VEHICLE_CLASSES,
        min_distance: float = DEFAULT_MIN_DISTANCE,
        max_distance: float = DEFAULT_MAX_DISTANCE,
        jitter: JitterSource | None = None,
    ):
        if min_distance < 0 or max_distance < min_distance:
            raise ValueError("Distances must satisfy 0 <= min_distance <= max_distance")
        self.vehicle_classes = tuple(c.lower() for c in vehicle_classes)
        self.min_distance = min_distance
        self.max_distance = max_distance
        self.jitter = jitter if jitter is not None else make_jitter()

    def estimate(self, detections: Sequence, geometry: FrameGeometry) -> list[RiskRecord]:
        """
        Score each vehicle detection.

        Args:
            detections: Frame detections (anything with .id, .bbox, .class_name;
                .track_id is used when present)
            geometry: Frame dimensions

        Returns:
            One RiskRecord per vehicle, in input order
        """
        records = []

        for det in detections:
            if not is_vehicle(det.class_name, self.vehicle_classes):
                continue

            ratio = relative_area(det.bbox, geometry)
            trajectory = classify_trajectory(relative_center_y(det.bbox, geometry))

            risk = ratio * RISK_SIZE_FACTOR
            if trajectory == "approaching":
                risk *= APPROACHING_RISK_MULTIPLIER

            records.append(
                RiskRecord(
                    detection_id=det.id,
                    track_id=getattr(det, "track_id", None),
                    vehicle_type=det.class_name.lower(),
                    bbox=det.bbox,
                    distance=self.estimate_distance(ratio),
                    speed=SIM_SPEED_MIN + self.jitter.random() * SIM_SPEED_SPAN,
                    trajectory=trajectory,
                    collision_risk=clamp(risk, 0.0, 1.0),
                )
            )

        return records

    def estimate_distance(self, ratio: float) -> float:
        """Distance from relative box area, never below min_distance."""
        ratio = clamp(ratio, 0.0, 1.0)
        return max(self.min_distance, self.max_distance * (1 - math.sqrt(ratio)))


def congestion_level(density: float) -> Congestion:
    if density > HIGH_CONGESTION_DENSITY:
        return "high"
    if density > MEDIUM_CONGESTION_DENSITY:
        return "medium"
    return "low"


def analyze_traffic_flow(detections: Sequence, vehicle_classes=VEHICLE_CLASSES) -> TrafficFlow:
    """
    Summarize traffic from the vehicle count in one frame.

    Speed is inferred from density alone (denser traffic = slower).
    """
    classes = tuple(c.lower() for c in vehicle_classes)
    vehicle_count = sum(1 for d in detections if is_vehicle(d.class_name, classes))

    density = clamp(vehicle_count / DENSITY_SATURATION_COUNT, 0.0, 1.0)
    speed = max(MIN_FLOW_SPEED, FREE_FLOW_SPEED - density * 70)

    return TrafficFlow(
        vehicle_count=vehicle_count,
        density=density,
        speed=speed,
        congestion=congestion_level(density),
    )
