"""
LaneAdvisoryEmitter - Suggests a lane change when the recommended lane
differs from the current one.

Emits only when the advice changes, not on every frame it holds.
"""

from typing import TYPE_CHECKING

from ..utils.event_schema import EVENT_TYPE_LANE_ADVISORY
from .registry import register

if TYPE_CHECKING:
    from ..config.schemas import AlertsConfig
    from ..models import FrameResult


@register(EVENT_TYPE_LANE_ADVISORY)
class LaneAdvisoryEmitter:
    """Emits LANE_ADVISORY events on new lane-change suggestions."""

    event_type = EVENT_TYPE_LANE_ADVISORY

    def __init__(self, _alerts: "AlertsConfig"):
        self._last_advice: tuple[str, str] | None = None

    def process(self, result: "FrameResult") -> list[dict]:
        lane = result.lane

        if not lane.lane_change_suggested:
            self._last_advice = None
            return []

        advice = (lane.position, lane.ideal_position)
        if advice == self._last_advice:
            return []
        self._last_advice = advice

        return [
            {
                "event_type": EVENT_TYPE_LANE_ADVISORY,
                "frame_index": result.frame_index,
                "timestamp": result.timestamp,
                "position": lane.position,
                "ideal_position": lane.ideal_position,
                "score": lane.score,
            }
        ]
