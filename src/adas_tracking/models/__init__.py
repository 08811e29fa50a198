"""
Consolidated data models for the tracking pipeline.

This package contains all core data structures used across the application.
"""

from .analysis import (
    FrameResult,
    LaneState,
    RiskRecord,
    TrafficFlow,
    risk_level,
)
from .detection import (
    BoundingBox,
    Detection,
    FrameGeometry,
    InvalidBoxError,
    InvalidDetectionError,
    TrackedDetection,
)
from .protocols import Detector, LaneModel, RiskModel
from .tracking import Track

__all__ = [
    # Detection models
    "BoundingBox",
    "Detection",
    # Protocols
    "Detector",
    "FrameGeometry",
    # Analysis models
    "FrameResult",
    "InvalidBoxError",
    "InvalidDetectionError",
    "LaneModel",
    "LaneState",
    "RiskModel",
    "RiskRecord",
    # Tracking models
    "Track",
    "TrackedDetection",
    "TrafficFlow",
    "risk_level",
]
