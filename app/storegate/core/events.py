"""Publish/subscribe channel for whitelist notifications.

Delivery is synchronous and at-most-once: an event reaches only the
subscribers registered when it is published. Nothing is queued or
replayed, so a late subscriber must read current state itself.
"""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class WhitelistChanged:
    """Raised after the stored whitelist was replaced.

    Attributes:
        entries: The new entry set.
        previous: The entry set before the replace.
    """

    entries: frozenset[str]
    previous: frozenset[str]

    @property
    def added(self) -> frozenset[str]:
        """Entries present now but not before."""
        return self.entries - self.previous

    @property
    def removed(self) -> frozenset[str]:
        """Entries present before but not now."""
        return self.previous - self.entries


Subscriber = Callable[[WhitelistChanged], None]


class EventBus:
    """In-process event channel with no replay."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._subscribers: list[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback.

        Args:
            callback: Called with each event published after registration.

        Returns:
            Function that removes the subscription.
        """
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def publish(self, event: WhitelistChanged) -> int:
        """Deliver an event to the current subscribers.

        A failing subscriber is logged and does not stop delivery to the
        others.

        Returns:
            Number of subscribers the event was delivered to.
        """
        with self._lock:
            subscribers = list(self._subscribers)

        delivered = 0
        for callback in subscribers:
            try:
                callback(event)
            except Exception:
                logger.exception("Whitelist subscriber %r failed", callback)
                continue
            delivered += 1
        return delivered
