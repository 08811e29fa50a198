"""
ADAS Tracking

Per-frame object tracking, lane-position and collision-risk pipeline for
driver-assistance video. Consumes detector output (boxes + class +
confidence) and produces stable track identities, a lane estimate and a
risk / traffic-flow summary.

Package structure:
  core/       - Geometry, track registry, associator
  analysis/   - Lane estimator, risk and traffic-flow analyzer
  emitters/   - Alert events raised from frame results
  config/     - Configuration loading and validation
  models/     - Data models and protocols
  output/     - JSONL result writer
  utils/      - Constants, event schema, queue protocol
"""

__version__ = "1.0.0"

from .analysis import FixedJitter, LaneEstimator, RiskAnalyzer, analyze_traffic_flow
from .config import Config, ConfigValidationError, load_config, validate_config_full
from .core import Associator, TrackRegistry, iou
from .models import (
    BoundingBox,
    Detection,
    FrameGeometry,
    FrameResult,
    LaneState,
    RiskRecord,
    Track,
    TrafficFlow,
)
from .pipeline import FramePipeline

__all__ = [
    "Associator",
    "BoundingBox",
    # Config
    "Config",
    "ConfigValidationError",
    "Detection",
    "FixedJitter",
    "FrameGeometry",
    # Pipeline
    "FramePipeline",
    "FrameResult",
    "LaneEstimator",
    "LaneState",
    "RiskAnalyzer",
    "RiskRecord",
    "Track",
    # Core
    "TrackRegistry",
    "TrafficFlow",
    "analyze_traffic_flow",
    "iou",
    "load_config",
    "validate_config_full",
]
