"""
Analysis data models - lane state, risk records, traffic flow, frame results.

All records are recomputed every frame and carry no cross-frame memory.
"""

from dataclasses import dataclass, field
from typing import Any, Literal

from ..utils.constants import HIGH_RISK_THRESHOLD, MEDIUM_RISK_THRESHOLD
from .detection import BoundingBox, TrackedDetection

LanePosition = Literal["left", "centered", "right"]
Trajectory = Literal["approaching", "departing", "parallel"]
Congestion = Literal["low", "medium", "high"]
RiskLevel = Literal["low", "medium", "high"]


@dataclass(frozen=True)
class LaneState:
    """
    Lane position estimate for one frame.

    Attributes:
        position: Lane the vehicle currently occupies
        confidence: Share of lane-marking evidence supporting `position`
        deviation: Signed offset from the lane center
        ideal_position: Recommended lane
        score: Lane discipline score, 0-100
    """

    position: LanePosition = "centered"
    confidence: float = 0.0
    deviation: int = 0
    ideal_position: LanePosition = "centered"
    score: int = 100

    @property
    def lane_change_suggested(self) -> bool:
        return self.position != self.ideal_position

    def to_dict(self) -> dict[str, Any]:
        return {
            "position": self.position,
            "confidence": self.confidence,
            "deviation": self.deviation,
            "ideal_position": self.ideal_position,
            "score": self.score,
        }


def risk_level(collision_risk: float) -> RiskLevel:
    """Bucket a collision risk into the levels shown to the driver."""
    if collision_risk > HIGH_RISK_THRESHOLD:
        return "high"
    if collision_risk > MEDIUM_RISK_THRESHOLD:
        return "medium"
    return "low"


@dataclass(frozen=True)
class RiskRecord:
    """Per-vehicle distance, speed, trajectory and collision risk."""

    detection_id: int
    track_id: int | None
    vehicle_type: str
    bbox: BoundingBox
    distance: float
    speed: float
    trajectory: Trajectory
    collision_risk: float

    @property
    def risk_level(self) -> RiskLevel:
        return risk_level(self.collision_risk)

    def to_dict(self) -> dict[str, Any]:
        return {
            "detection_id": self.detection_id,
            "track_id": self.track_id,
            "type": self.vehicle_type,
            "bbox": self.bbox.as_list(),
            "distance": self.distance,
            "speed": self.speed,
            "trajectory": self.trajectory,
            "collision_risk": self.collision_risk,
            "risk_level": self.risk_level,
        }


@dataclass(frozen=True)
class TrafficFlow:
    """Aggregate traffic summary for one frame."""

    vehicle_count: int = 0
    density: float = 0.0
    speed: float = 80.0
    congestion: Congestion = "low"

    def to_dict(self) -> dict[str, Any]:
        return {
            "vehicles": self.vehicle_count,
            "density": self.density,
            "speed": self.speed,
            "congestion": self.congestion,
        }


@dataclass
class FrameResult:
    """
    Everything the pipeline publishes for one frame.

    `error` is set when the frame failed; apart from `rejected` the other
    fields then hold the defaults and the track registry is unchanged.
    """

    frame_index: int
    timestamp: float
    detections: list[TrackedDetection] = field(default_factory=list)
    lane: LaneState = field(default_factory=LaneState)
    traffic: TrafficFlow = field(default_factory=TrafficFlow)
    risks: list[RiskRecord] = field(default_factory=list)
    events: list[dict] = field(default_factory=list)
    live_tracks: int = 0
    rejected: int = 0
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def high_risk(self) -> list[RiskRecord]:
        return [r for r in self.risks if r.risk_level == "high"]

    def to_dict(self) -> dict[str, Any]:
        return {
            "frame_index": self.frame_index,
            "timestamp": self.timestamp,
            "detections": [d.to_dict() for d in self.detections],
            "lane": self.lane.to_dict(),
            "traffic": self.traffic.to_dict(),
            "risks": [r.to_dict() for r in self.risks],
            "events": self.events,
            "live_tracks": self.live_tracks,
            "rejected": self.rejected,
            "error": self.error,
        }
