"""
Emitter Registry - Maps event types to emitter classes.

Registry is populated by emitter modules. Active emitters are built
from the alerts section of the config at startup.
"""

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..config.schemas import AlertsConfig

logger = logging.getLogger(__name__)

# Registry: event_type -> emitter class
EMITTER_REGISTRY: dict[str, type] = {}


def register(event_type: str):
    """Decorator to register an emitter class for an event type."""

    def decorator(cls):
        EMITTER_REGISTRY[event_type] = cls
        return cls

    return decorator


def build_active_emitters(alerts: "AlertsConfig") -> list:
    """
    Build emitters for the event types enabled in config.

    Args:
        alerts: Alerts configuration

    Returns:
        List of configured emitter instances, in the order they are enabled
    """
    # Import emitters to populate registry (decorators register on import)
    from . import collision_risk, lane_advisory  # noqa: F401

    active_emitters = []
    for event_type in dict.fromkeys(alerts.enabled):
        if event_type not in EMITTER_REGISTRY:
            logger.warning(f"No emitter registered for event type: {event_type}")
            continue

        emitter_class = EMITTER_REGISTRY[event_type]
        active_emitters.append(emitter_class(alerts))
        logger.info(f"Activated emitter: {emitter_class.__name__} -> {event_type}")

    return active_emitters
