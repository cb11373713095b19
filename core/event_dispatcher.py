# file: core/event_dispatcher.py

import logging
from collections import defaultdict
from typing import Callable, Any, Dict, List


class EventDispatcher:
    """
    A synchronous event bus for decoupled component communication.

    Listeners run immediately, in the publisher's thread, when an event is
    published. A listener subscribed to a dotted prefix also receives the
    sub-events: "COMMAND_EVENT" hears "COMMAND_EVENT.EXECUTED".
    """

    def __init__(self):
        # A dictionary mapping event_type (str) to a list of listeners (Callable)
        self._listeners: Dict[str, List[Callable[..., Any]]] = defaultdict(list)
        self.logger = logging.getLogger(self.__class__.__name__)

    def _matching_types(self, event_type: str) -> List[str]:
        """
        Lists the subscription keys an event is delivered to, most specific first.
        e.g., "COMMAND_EVENT.EXECUTED" yields "COMMAND_EVENT.EXECUTED", then "COMMAND_EVENT".
        """
        parts = event_type.split('.')
        return [".".join(parts[:i]) for i in range(len(parts), 0, -1)]

    def subscribe(self, event_type: str, listener: Callable[..., Any]):
        """
        Subscribes a listener function to a specific event type.

        Args:
            event_type (str): The event to listen for (e.g., "COMMAND_EVENT.UNDONE").
            listener (Callable): The function to call when the event is published.
        """
        self._listeners[event_type].append(listener)

    def unsubscribe(self, event_type: str, listener: Callable[..., Any]):
        """Removes a specific listener from an event type."""
        if event_type in self._listeners:
            try:
                self._listeners[event_type].remove(listener)
            except ValueError:
                # Listener was not found, which is fine
                pass

    def publish(self, event_type: str, **kwargs) -> int:
        """
        Publishes an event to every matching listener.

        A failing listener is logged and does not prevent the others from
        running. Returns the number of listeners that were called.
        """
        called = 0
        for key in self._matching_types(event_type):
            # Copy so listeners may unsubscribe while being notified
            for listener in list(self._listeners.get(key, [])):
                called += 1
                try:
                    listener(event_type=event_type, **kwargs)
                except Exception as e:
                    self.logger.error(f"Error in listener for {event_type}: {e}", exc_info=True)
        return called
