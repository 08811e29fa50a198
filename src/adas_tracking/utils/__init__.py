"""
Utility modules for constants, event schema and transport abstractions.
"""

from .constants import (
    ENV_DETECTIONS_PATH,
    ENV_JITTER_SEED,
    STATUS_REPORT_INTERVAL,
    SUMMARY_EVENT_INTERVAL,
    VEHICLE_CLASSES,
)
from .event_schema import (
    ALL_EVENT_TYPES,
    EVENT_TYPE_COLLISION_RISK,
    EVENT_TYPE_LANE_ADVISORY,
    get_event_summary,
    is_valid_event,
)
from .queue_protocol import CallbackQueueAdapter, EventQueue

__all__ = [
    "ALL_EVENT_TYPES",
    "ENV_DETECTIONS_PATH",
    "ENV_JITTER_SEED",
    # Event schema
    "EVENT_TYPE_COLLISION_RISK",
    "EVENT_TYPE_LANE_ADVISORY",
    "STATUS_REPORT_INTERVAL",
    "SUMMARY_EVENT_INTERVAL",
    "VEHICLE_CLASSES",
    "CallbackQueueAdapter",
    # Queue abstraction for alert consumers
    "EventQueue",
    "get_event_summary",
    "is_valid_event",
]
