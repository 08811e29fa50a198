"""
Pydantic schemas for configuration validation.

Provides type-safe, declarative validation with clear error messages.
Every section has defaults, so an empty config is a valid config.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from ..utils.constants import (
    DEFAULT_ALERT_COOLDOWN,
    DEFAULT_ASSUMED_FPS,
    DEFAULT_BRIGHTNESS_THRESHOLD,
    DEFAULT_IOU_THRESHOLD,
    DEFAULT_MAX_AGE_FRAMES,
    DEFAULT_MAX_DISTANCE,
    DEFAULT_MIN_CONFIDENCE,
    DEFAULT_MIN_DISTANCE,
    DEFAULT_SCAN_LINE_PCT,
    HIGH_RISK_THRESHOLD,
    LEFT_REGION_PCT,
    RIGHT_REGION_PCT,
    VEHICLE_CLASSES,
)
from ..utils.event_schema import ALL_EVENT_TYPES


class StrictModel(BaseModel):
    """Base model that rejects unknown fields."""

    model_config = ConfigDict(extra="forbid")


class TrackingConfig(StrictModel):
    """Association and track retention settings."""

    iou_threshold: float = Field(
        default=DEFAULT_IOU_THRESHOLD, gt=0.0, le=1.0, description="Minimum IoU to reuse a track"
    )
    max_age_frames: int = Field(
        default=DEFAULT_MAX_AGE_FRAMES, ge=0, description="Frames a track survives unmatched"
    )
    assumed_fps: float = Field(
        default=DEFAULT_ASSUMED_FPS, gt=0, description="Frame rate used to convert frames to seconds"
    )
    min_confidence: float = Field(
        default=DEFAULT_MIN_CONFIDENCE, ge=0.0, le=1.0, description="Drop detections below this score"
    )

    @property
    def max_age_seconds(self) -> float:
        return self.max_age_frames / self.assumed_fps


class LaneConfig(StrictModel):
    """Scan-line lane heuristic settings."""

    brightness_threshold: float = Field(default=DEFAULT_BRIGHTNESS_THRESHOLD, ge=0, le=255)
    scan_line_pct: float = Field(default=DEFAULT_SCAN_LINE_PCT, ge=0, le=100)
    left_boundary_pct: float = Field(default=LEFT_REGION_PCT, gt=0, lt=100)
    right_boundary_pct: float = Field(default=RIGHT_REGION_PCT, gt=0, lt=100)

    @model_validator(mode="after")
    def validate_boundaries(self):
        if self.left_boundary_pct >= self.right_boundary_pct:
            raise ValueError("right_boundary_pct must be > left_boundary_pct")
        return self


class RiskConfig(StrictModel):
    """Risk analyzer settings."""

    vehicle_classes: list[str] = Field(default_factory=lambda: list(VEHICLE_CLASSES))
    min_distance: float = Field(default=DEFAULT_MIN_DISTANCE, ge=0)
    max_distance: float = Field(default=DEFAULT_MAX_DISTANCE, gt=0)

    @field_validator("vehicle_classes")
    @classmethod
    def normalize_classes(cls, v: list[str]) -> list[str]:
        classes = [c.strip().lower() for c in v if c and c.strip()]
        if not classes:
            raise ValueError("vehicle_classes must not be empty")
        return classes

    @model_validator(mode="after")
    def validate_distances(self):
        if self.max_distance < self.min_distance:
            raise ValueError("max_distance must be >= min_distance")
        return self


class AlertsConfig(StrictModel):
    """Alert emitter settings."""

    enabled: list[Literal["COLLISION_RISK", "LANE_ADVISORY"]] = Field(
        default_factory=lambda: list(ALL_EVENT_TYPES)
    )
    collision_risk_threshold: float = Field(default=HIGH_RISK_THRESHOLD, ge=0.0, le=1.0)
    cooldown_seconds: float = Field(default=DEFAULT_ALERT_COOLDOWN, ge=0)


class JitterConfig(StrictModel):
    """Randomness for simulated signals."""

    seed: int | None = Field(default=None, description="Seed for reproducible runs")


class SourceConfig(StrictModel):
    """Input locations."""

    detections: str | None = Field(default=None, description="JSONL detection log")
    video: str | None = Field(default=None, description="Video file for scan-line sampling")


class OutputConfig(StrictModel):
    """Output settings."""

    json_dir: str = "data"
    console_level: Literal["detailed", "summary", "silent"] = "detailed"


class Config(StrictModel):
    """Complete configuration schema."""

    tracking: TrackingConfig = Field(default_factory=TrackingConfig)
    lane: LaneConfig = Field(default_factory=LaneConfig)
    risk: RiskConfig = Field(default_factory=RiskConfig)
    alerts: AlertsConfig = Field(default_factory=AlertsConfig)
    jitter: JitterConfig = Field(default_factory=JitterConfig)
    source: SourceConfig = Field(default_factory=SourceConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


def validate_config_pydantic(config: dict | None) -> tuple[Config | None, list[str]]:
    """
    Validate config dict using Pydantic schemas.

    Args:
        config: Raw configuration dictionary (None is treated as empty)

    Returns:
        Tuple of (parsed Config or None, list of error messages)
    """
    try:
        return Config.model_validate(config or {}), []
    except ValidationError as e:
        errors = []
        for err in e.errors():
            loc = ".".join(str(x) for x in err["loc"])
            msg = err["msg"]
            errors.append(f"{loc}: {msg}" if loc else msg)
        return None, errors
