"""
EventBus - Synchronous listener registry for progress events.

Listeners are called in subscription order. A listener that raises is
logged and skipped; the remaining listeners still run.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional

from .errors import ListenerError


logger = logging.getLogger(__name__)

Listener = Callable[[str, Any, Any], None]


@dataclass(eq=False)
class Subscription:
    """One registered listener, optionally limited to some event names."""
    callback: Listener
    events: Optional[frozenset[str]] = None

    def accepts(self, event: str) -> bool:
        return self.events is None or event in self.events


class EventBus:
    """Observer registry with per-listener error isolation."""

    def __init__(self):
        self._subscriptions: list[Subscription] = []

    def __len__(self) -> int:
        return len(self._subscriptions)

    def subscribe(
        self,
        callback: Listener,
        events: Optional[Iterable[str]] = None,
    ) -> Callable[[], None]:
        """
        Register a listener.

        Args:
            callback: Called as callback(event_name, payload, state)
            events: Optional event names to filter on (default: all events)

        Returns:
            A function that removes exactly this subscription
        """
        names = None
        if events is not None:
            names = frozenset(str(getattr(e, "value", e)) for e in events)
        subscription = Subscription(callback=callback, events=names)
        self._subscriptions.append(subscription)

        def unsubscribe():
            try:
                self._subscriptions.remove(subscription)
            except ValueError:
                pass  # already removed

        return unsubscribe

    def publish(self, event: str, payload: Any = None, state: Any = None) -> list[ListenerError]:
        """
        Deliver an event to every matching listener.

        Returns:
            Errors raised by listeners (already logged)
        """
        errors = []
        # Copy so listeners may unsubscribe while being notified
        for subscription in list(self._subscriptions):
            if not subscription.accepts(event):
                continue
            try:
                subscription.callback(event, payload, state)
            except Exception as e:
                error = ListenerError(event, subscription.callback, e)
                logger.error(str(error), exc_info=e)
                errors.append(error)
        return errors

    def clear(self):
        self._subscriptions.clear()
