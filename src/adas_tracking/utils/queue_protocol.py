"""
Event Queue Protocol - Abstract interface for alert transport.

The frame loop only ever calls put(); anything with that method can receive
alert events: a queue.Queue, a multiprocessing.Queue, or a callback wrapped
in CallbackQueueAdapter.

Usage:
    from queue import Queue
    sink: EventQueue = Queue()

    sink = CallbackQueueAdapter(lambda event: print(event))
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class EventQueue(Protocol):
    """Protocol for event sinks."""

    def put(self, event: dict[str, Any]) -> None:
        """
        Send an event to the queue.

        Args:
            event: Event dictionary to send
        """
        ...


class CallbackQueueAdapter:
    """
    Adapter that wraps a callback function as an EventQueue.

    Useful for alert collaborators that react to events directly
    (e.g., an emergency handler) rather than reading from a queue.

    Example:
        def on_alert(event):
            if event["event_type"] == "COLLISION_RISK":
                start_recording()

        sink = CallbackQueueAdapter(on_alert)
        sink.put({"event_type": "COLLISION_RISK", ...})  # Calls on_alert
    """

    def __init__(self, callback):
        """
        Create adapter from callback function.

        Args:
            callback: Function that accepts event dict
        """
        self._callback = callback

    def put(self, event: dict[str, Any]) -> None:
        """Forward event to callback."""
        self._callback(event)
