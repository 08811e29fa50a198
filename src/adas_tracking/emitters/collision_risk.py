"""
CollisionRiskEmitter - Alerts on vehicles above the collision-risk threshold.

Rate-limited per track so a vehicle that stays close does not raise an
alert every frame.
"""

from typing import TYPE_CHECKING

from ..utils.event_schema import EVENT_TYPE_COLLISION_RISK
from .registry import register

if TYPE_CHECKING:
    from ..config.schemas import AlertsConfig
    from ..models import FrameResult


@register(EVENT_TYPE_COLLISION_RISK)
class CollisionRiskEmitter:
    """Emits COLLISION_RISK events for high-risk vehicles."""

    event_type = EVENT_TYPE_COLLISION_RISK

    def __init__(self, alerts: "AlertsConfig"):
        self.threshold = alerts.collision_risk_threshold
        self.cooldown = alerts.cooldown_seconds
        self._last_alert: dict[int, float] = {}  # track_id -> timestamp

    def process(self, result: "FrameResult") -> list[dict]:
        """
        Check the frame's risk records and emit events.

        Args:
            result: Frame result with risk records filled in

        Returns:
            List of COLLISION_RISK events
        """
        events = []
        now = result.timestamp
        live_ids = {d.track_id for d in result.detections}

        for record in result.risks:
            if record.collision_risk <= self.threshold:
                continue

            if record.track_id is not None:
                last = self._last_alert.get(record.track_id)
                if last is not None and now - last < self.cooldown:
                    continue
                self._last_alert[record.track_id] = now

            events.append(
                {
                    "event_type": EVENT_TYPE_COLLISION_RISK,
                    "frame_index": result.frame_index,
                    "timestamp": now,
                    "track_id": record.track_id,
                    "vehicle_type": record.vehicle_type,
                    "distance": record.distance,
                    "speed": record.speed,
                    "trajectory": record.trajectory,
                    "collision_risk": record.collision_risk,
                    "bbox": record.bbox.as_list(),
                }
            )

        # Forget cooldowns for tracks no longer in view
        for track_id in list(self._last_alert):
            if track_id not in live_ids and now - self._last_alert[track_id] >= self.cooldown:
                del self._last_alert[track_id]

        return events
