"""Transport over window messaging, for hosts without extension ports."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from loguru import logger

from multichain_client.core.ids import RequestIdGenerator
from multichain_client.core.retry import NO_TIMEOUT
from multichain_client.transports.base import Transport
from multichain_client.transports.channels import MessageEvent, PostMessageChannel
from multichain_client.transports.constants import CONTENT_SCRIPT, INPAGE, MULTICHAIN_SUBSTREAM_NAME


def unwrap_substream_message(event: MessageEvent, *, origin: str, stream_name: str) -> Any | None:
    """
    Return the inner payload of a content-script message on `stream_name`, else None.

    The window is shared with arbitrary page traffic, so origin, target and stream name must
    all match exactly.
    """
    if event.origin != origin:
        return None
    data = event.data
    if not isinstance(data, dict) or data.get("target") != INPAGE:
        return None
    stream = data.get("data")
    if not isinstance(stream, dict) or stream.get("name") != stream_name:
        return None
    return stream.get("data")


def wrap_substream_message(payload: Any, *, stream_name: str) -> dict[str, Any]:
    return {"target": CONTENT_SCRIPT, "data": {"name": stream_name, "data": payload}}


class WindowPostMessageTransport(Transport):
    """Talks to the wallet's content script over a `PostMessageChannel`."""

    name = "window-post-message"

    def __init__(
        self,
        channel: PostMessageChannel,
        *,
        default_timeout_ms: int = NO_TIMEOUT,
        ids: RequestIdGenerator | None = None,
    ):
        super().__init__(default_timeout_ms=default_timeout_ms, ids=ids)
        self._channel = channel
        self._unsubscribers: list[Callable[[], None]] = []

    async def _open(self, generation: int) -> None:
        self._release_listeners()
        self._unsubscribers.append(self._channel.on_message(lambda event: self._on_window_message(event, generation)))
        self._unsubscribers.append(self._channel.on_close(lambda: self._handle_channel_closed(generation)))

    def _on_window_message(self, event: MessageEvent, generation: int) -> None:
        envelope = unwrap_substream_message(event, origin=self._channel.origin, stream_name=MULTICHAIN_SUBSTREAM_NAME)
        if envelope is None:
            return
        logger.debug("[{}] inbound frame id={}", self.name, envelope.get("id") if isinstance(envelope, dict) else None)
        self._handle_envelope(envelope, generation)

    def _release_listeners(self) -> None:
        while self._unsubscribers:
            self._unsubscribers.pop()()

    def _close(self) -> None:
        self._release_listeners()

    def _post(self, envelope: dict[str, Any]) -> None:
        self._channel.send(wrap_substream_message(envelope, stream_name=MULTICHAIN_SUBSTREAM_NAME), self._channel.origin)
