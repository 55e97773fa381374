"""
Ordered, synchronous callback lists.

Used instead of an event bus: each publisher owns a ``CallbackList`` and
hands out ``Subscription`` handles.
"""

import logging
from typing import Callable, Generic, List, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Subscription:
    """Handle returned by ``CallbackList.subscribe``."""

    def __init__(self, owner: "CallbackList", callback: Callable):
        self._owner = owner
        self.callback = callback
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self._owner._remove(self)
            self.active = False


class CallbackList(Generic[T]):
    """Callbacks invoked synchronously, in registration order."""

    def __init__(self, name: str):
        self.name = name
        self._subscriptions: List[Subscription] = []

    def __len__(self) -> int:
        return len(self._subscriptions)

    def subscribe(self, callback: Callable[[T], None]) -> Subscription:
        subscription = Subscription(self, callback)
        self._subscriptions.append(subscription)
        return subscription

    def _remove(self, subscription: Subscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)

    def clear(self) -> None:
        for subscription in list(self._subscriptions):
            subscription.unsubscribe()

    def dispatch(self, value: T) -> None:
        """
        Call every subscriber with ``value``. A failing subscriber is
        logged and does not stop later subscribers.
        """
        for subscription in list(self._subscriptions):
            try:
                subscription.callback(value)
            except Exception:
                logger.exception("Subscriber to %s failed", self.name)
