"""Transport contract and the connection lifecycle shared by every channel variant."""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Callable
from enum import Enum
from typing import Any

from loguru import logger

from multichain_client.core.correlator import RequestCorrelator
from multichain_client.core.ids import RequestIdGenerator
from multichain_client.core.notifications import NotificationCallback, NotificationRouter
from multichain_client.core.protocol import RpcResponse
from multichain_client.core.retry import NO_TIMEOUT
from multichain_client.core.serialization import is_notification
from multichain_client.utils.exceptions import RequestValidationError, TransportError


class TransportState(str, Enum):
    """Connection lifecycle states."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class Transport(ABC):
    """
    Owns one physical channel and drives request correlation and notification fan-out from it.

    State transitions are the only place connection side effects happen:
    - DISCONNECTED --connect()--> CONNECTING --ok--> CONNECTED, --failure--> DISCONNECTED
    - CONNECTED --channel closed / disconnect()--> DISCONNECTED (pending requests rejected,
      listeners cleared)

    Every connection attempt gets a new generation number; channel callbacks carry the
    generation they were registered under, and callbacks from an ended generation are ignored.

    Subclasses implement `_open`, `_close` and `_post`.
    """

    name = "transport"

    def __init__(self, *, default_timeout_ms: int = NO_TIMEOUT, ids: RequestIdGenerator | None = None):
        self.default_timeout_ms = default_timeout_ms
        self._state = TransportState.DISCONNECTED
        self._generation = 0
        self._connect_task: asyncio.Task[None] | None = None
        self._closed_while_connecting = False
        self._correlator = RequestCorrelator(self._post, ids)
        self._notifications = NotificationRouter()

    @property
    def state(self) -> TransportState:
        return self._state

    @property
    def pending_count(self) -> int:
        return len(self._correlator)

    @property
    def listener_count(self) -> int:
        return len(self._notifications)

    def is_connected(self) -> bool:
        return self._state is TransportState.CONNECTED

    async def connect(self) -> None:
        """Open the channel. Concurrent callers share one in-flight attempt."""
        if self._state is TransportState.CONNECTED:
            return
        if self._connect_task is None:
            self._generation += 1
            self._state = TransportState.CONNECTING
            self._closed_while_connecting = False
            self._connect_task = asyncio.create_task(self._run_connect(self._generation))
        await asyncio.shield(self._connect_task)

    async def disconnect(self) -> None:
        """Tear down the channel; outstanding requests fail with a transport error."""
        if self._state is TransportState.DISCONNECTED and self._connect_task is None:
            self._notifications.clear()
            return
        try:
            self._close()
        finally:
            self._teardown()
        logger.info("[{}] disconnected", self.name)

    async def request(self, request: dict[str, Any], *, timeout_ms: int | None = None) -> RpcResponse:
        """Send `{"method", "params"?}` and wait for the correlated response."""
        if self._state is not TransportState.CONNECTED:
            raise TransportError("Transport not connected")
        method = request.get("method") if isinstance(request, dict) else None
        if not isinstance(method, str) or not method:
            raise RequestValidationError("request method must be a non-empty string", field="method")
        timeout = self.default_timeout_ms if timeout_ms is None else timeout_ms
        params = request.get("params")
        if params is None:
            return await self._correlator.send(method, timeout_ms=timeout)
        return await self._correlator.send(method, params, timeout_ms=timeout)

    def on_notification(self, callback: NotificationCallback) -> Callable[[], None]:
        """Register a listener for id-less frames; returns its unsubscribe function."""
        return self._notifications.subscribe(callback)

    async def _run_connect(self, generation: int) -> None:
        logger.debug("[{}] connecting", self.name)
        try:
            await self._open(generation)
        except Exception as e:
            if generation == self._generation:
                self._state = TransportState.DISCONNECTED
                self._connect_task = None
            logger.warning("[{}] connection attempt failed: {}", self.name, e)
            if isinstance(e, TransportError):
                raise
            raise TransportError("Failed to connect", e) from e

        if generation != self._generation:
            # disconnect() ran while the channel was opening.
            if self._state is TransportState.DISCONNECTED:
                self._close()
            raise TransportError("Connection attempt abandoned")

        self._state = TransportState.CONNECTED
        self._connect_task = None
        logger.info("[{}] connected", self.name)

    def _teardown(self) -> None:
        self._generation += 1
        self._state = TransportState.DISCONNECTED
        self._connect_task = None
        rejected = self._correlator.reject_all(lambda: TransportError("Transport disconnected"))
        self._notifications.clear()
        if rejected:
            logger.debug("[{}] rejected {} pending request(s) on teardown", self.name, rejected)

    def _handle_envelope(self, envelope: Any, generation: int) -> None:
        """Route one inner frame: id-less frames to listeners, the rest to the correlator."""
        if generation != self._generation:
            return
        if not isinstance(envelope, dict):
            logger.debug("[{}] dropping non-object frame {!r}", self.name, envelope)
            return
        if is_notification(envelope):
            self._notifications.dispatch(envelope)
        else:
            self._correlator.resolve(envelope)

    def _handle_channel_closed(self, generation: int) -> None:
        """The channel reported closure on its own."""
        if generation != self._generation:
            return
        if self._state is TransportState.CONNECTING:
            self._closed_while_connecting = True
            return
        if self._state is TransportState.CONNECTED:
            logger.warning("[{}] channel closed by remote end", self.name)
            try:
                self._close()
            except Exception as e:
                logger.debug("[{}] releasing closed channel failed: {}", self.name, e)
            finally:
                self._teardown()

    @abstractmethod
    async def _open(self, generation: int) -> None:
        """Open the physical channel and register callbacks tagged with `generation`."""
        raise NotImplementedError

    @abstractmethod
    def _close(self) -> None:
        """Release the physical channel. Must tolerate being called when not open."""
        raise NotImplementedError

    @abstractmethod
    def _post(self, envelope: dict[str, Any]) -> None:
        """Wrap `envelope` in the channel's outer frame and send it."""
        raise NotImplementedError
