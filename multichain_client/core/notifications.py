"""Fan-out of id-less inbound frames to registered listeners."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from loguru import logger

NotificationCallback = Callable[[Any], None]


class _Subscription:
    __slots__ = ("callback",)

    def __init__(self, callback: NotificationCallback):
        self.callback = callback


class NotificationRouter:
    """Ordered listener registry with per-listener isolation."""

    def __init__(self) -> None:
        self._subscriptions: list[_Subscription] = []

    def __len__(self) -> int:
        return len(self._subscriptions)

    def subscribe(self, callback: NotificationCallback) -> Callable[[], None]:
        """Register `callback`; the returned function removes exactly this registration."""
        entry = _Subscription(callback)
        self._subscriptions.append(entry)

        def unsubscribe() -> None:
            for i, existing in enumerate(self._subscriptions):
                if existing is entry:
                    del self._subscriptions[i]
                    return

        return unsubscribe

    def dispatch(self, frame: Any) -> int:
        """Deliver `frame` to every listener in registration order; returns delivery count."""
        delivered = 0
        for entry in list(self._subscriptions):
            try:
                entry.callback(frame)
                delivered += 1
            except Exception:
                logger.exception("Notification listener {!r} failed", entry.callback)
        return delivered

    def clear(self) -> None:
        self._subscriptions.clear()
