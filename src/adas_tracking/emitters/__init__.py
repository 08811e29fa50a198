"""
Alert Emitters - registry-based dispatch for frame alerts.

Each emitter handles a single event type. The registry maps event types
to emitter classes. Active emitters are determined from config at startup.
"""

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from .registry import EMITTER_REGISTRY, build_active_emitters, register

if TYPE_CHECKING:
    from ..models import FrameResult

__all__ = ["EMITTER_REGISTRY", "Emitter", "build_active_emitters", "register"]


@runtime_checkable
class Emitter(Protocol):
    """Protocol for alert emitters."""

    event_type: str  # The single event type this emitter produces

    def process(self, result: "FrameResult") -> list[dict]:
        """
        Inspect one frame's result and emit events.

        Args:
            result: Completed frame result (detections, lane, risks, traffic)

        Returns:
            List of event dicts to publish
        """
        ...
