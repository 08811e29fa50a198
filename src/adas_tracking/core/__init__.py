"""
Core tracking components.

Geometry, the per-source track registry and the associator that is its sole
writer. Frame-level orchestration lives in pipeline.py.
"""

from .associator import AssociationResult, Associator
from .geometry import box_center, clamp, iou
from .registry import TrackRegistry, max_age_seconds

__all__ = [
    "AssociationResult",
    "Associator",
    "TrackRegistry",
    "box_center",
    "clamp",
    "iou",
    "max_age_seconds",
]
