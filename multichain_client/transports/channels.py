"""Capability interfaces for the physical channels a transport drives.

The core never touches page globals; hosts adapt their messaging surface to one of these.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class MessageEvent:
    """One window message as delivered to listeners."""

    data: Any
    origin: str


@runtime_checkable
class PortChannel(Protocol):
    """Extension-port style channel: one connection per `open()`."""

    def open(self, extension_id: str) -> None:
        """Open the port to `extension_id`. May raise if the platform refuses."""
        ...

    def send(self, message: dict[str, Any]) -> None:
        ...

    def on_message(self, callback: Callable[[Any], None]) -> None:
        ...

    def on_close(self, callback: Callable[[], None]) -> None:
        ...

    def close(self) -> None:
        ...


@runtime_checkable
class PostMessageChannel(Protocol):
    """Window-messaging style channel shared with other page traffic."""

    @property
    def origin(self) -> str:
        """The page's own origin; used both as target origin and as the inbound filter."""
        ...

    def send(self, message: dict[str, Any], target_origin: str) -> None:
        ...

    def on_message(self, callback: Callable[[MessageEvent], None]) -> Callable[[], None]:
        """Register a listener; returns a function that removes it."""
        ...

    def on_close(self, callback: Callable[[], None]) -> Callable[[], None]:
        ...
