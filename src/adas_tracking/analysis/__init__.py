"""
Frame analysis - lane position and collision/traffic estimation.
"""

from .jitter import FixedJitter, JitterSource, SequenceJitter, make_jitter
from .lane import LaneEstimator, sample_scan_line
from .risk import (
    RiskAnalyzer,
    analyze_traffic_flow,
    classify_trajectory,
    congestion_level,
)

__all__ = [
    "FixedJitter",
    "JitterSource",
    "LaneEstimator",
    "RiskAnalyzer",
    "SequenceJitter",
    "analyze_traffic_flow",
    "classify_trajectory",
    "congestion_level",
    "make_jitter",
    "sample_scan_line",
]
