"""
Event Schema - Contract between the pipeline and alert consumers.

Events are plain dicts so they can go through any EventQueue (local queue,
callback, JSONL file).

Event Types:
    COLLISION_RISK: A vehicle's collision risk crossed the alert threshold
    LANE_ADVISORY: The recommended lane differs from the current one
"""

from typing import Literal, TypedDict

# Event type constants
EVENT_TYPE_COLLISION_RISK = "COLLISION_RISK"
EVENT_TYPE_LANE_ADVISORY = "LANE_ADVISORY"

EventType = Literal["COLLISION_RISK", "LANE_ADVISORY"]

ALL_EVENT_TYPES: tuple[str, ...] = (EVENT_TYPE_COLLISION_RISK, EVENT_TYPE_LANE_ADVISORY)


class BaseEvent(TypedDict, total=False):
    """
    Common fields present in all events.

    Required fields:
        event_type: Type of event
        frame_index: Index of the frame that raised it
        timestamp: Frame timestamp in seconds
    """

    event_type: EventType
    frame_index: int
    timestamp: float


class CollisionRiskEvent(BaseEvent):
    """
    COLLISION_RISK event - a vehicle is large, close or approaching.

    Additional fields:
        track_id: Identity of the vehicle
        vehicle_type: Class label (car, truck, ...)
        distance: Estimated distance
        speed: Estimated speed (km/h)
        trajectory: approaching / parallel / departing
        collision_risk: Risk in [0, 1]
        bbox: (x, y, w, h)
    """

    track_id: int | None
    vehicle_type: str
    distance: float
    speed: float
    trajectory: str
    collision_risk: float
    bbox: list[float]


class LaneAdvisoryEvent(BaseEvent):
    """
    LANE_ADVISORY event - a lane change is suggested.

    Additional fields:
        position: Current lane
        ideal_position: Suggested lane
        score: Lane discipline score
    """

    position: str
    ideal_position: str
    score: int


REQUIRED_FIELDS: dict[str, tuple[str, ...]] = {
    EVENT_TYPE_COLLISION_RISK: ("track_id", "vehicle_type", "collision_risk"),
    EVENT_TYPE_LANE_ADVISORY: ("position", "ideal_position", "score"),
}


def is_valid_event(event: dict) -> bool:
    """
    Validate that an event has the required fields for its type.

    Args:
        event: Event dictionary to validate

    Returns:
        True if event is valid, False otherwise
    """
    if not isinstance(event, dict):
        return False

    event_type = event.get("event_type")
    if event_type not in REQUIRED_FIELDS:
        return False

    if "frame_index" not in event or "timestamp" not in event:
        return False

    return all(f in event for f in REQUIRED_FIELDS[event_type])


def get_event_summary(event: dict) -> str:
    """
    Generate human-readable summary of an event.

    Args:
        event: Event dictionary

    Returns:
        Summary string like "Track 3 (car) risk 0.82 approaching at 12.5m"
    """
    event_type = event.get("event_type", "UNKNOWN")

    if event_type == EVENT_TYPE_COLLISION_RISK:
        track_id = event.get("track_id")
        track_str = f"Track {track_id}" if track_id is not None else "Untracked"
        return (
            f"{track_str} ({event.get('vehicle_type', '?')}) "
            f"risk {event.get('collision_risk', 0):.2f} "
            f"{event.get('trajectory', '')} at {event.get('distance', 0):.1f}m"
        )

    if event_type == EVENT_TYPE_LANE_ADVISORY:
        return (
            f"Suggest {event.get('position', '?')} -> {event.get('ideal_position', '?')} "
            f"(score {event.get('score', 0)})"
        )

    return f"{event_type} event"
