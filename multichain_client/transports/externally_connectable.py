"""Transport over an extension port (the externally_connectable messaging surface)."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

from loguru import logger

from multichain_client.core.ids import RequestIdGenerator
from multichain_client.core.retry import NO_TIMEOUT
from multichain_client.transports.base import Transport
from multichain_client.transports.channels import PortChannel
from multichain_client.transports.constants import CAIP_348_TYPE
from multichain_client.utils.exceptions import TransportError

ExtensionIdResolver = Callable[[], Awaitable[str | None]]

DEFAULT_CONNECT_GRACE_MS = 10


class ExternallyConnectableTransport(Transport):
    """
    Talks to the wallet extension through a `PortChannel`.

    Opening a port can be followed almost at once by a close signal when the extension
    refuses the connection, so `connect()` waits `connect_grace_ms` after opening and treats a
    close inside that window as a failed attempt. The window is a heuristic; raise it on slow
    hosts.
    """

    name = "externally-connectable"

    def __init__(
        self,
        port: PortChannel,
        *,
        extension_id: str | None = None,
        extension_id_resolver: ExtensionIdResolver | None = None,
        default_timeout_ms: int = NO_TIMEOUT,
        connect_grace_ms: int = DEFAULT_CONNECT_GRACE_MS,
        ids: RequestIdGenerator | None = None,
    ):
        super().__init__(default_timeout_ms=default_timeout_ms, ids=ids)
        self._port = port
        self._explicit_extension_id = extension_id
        self._detected_extension_id: str | None = None
        self._resolver = extension_id_resolver
        self.connect_grace_ms = connect_grace_ms

    @property
    def extension_id(self) -> str | None:
        return self._explicit_extension_id or self._detected_extension_id

    def clear_extension_id(self) -> None:
        """Forget the auto-detected id so the next connect() resolves it again."""
        self._detected_extension_id = None

    async def _resolve_extension_id(self) -> str:
        if self.extension_id:
            return self.extension_id
        if self._resolver is None:
            raise TransportError("MetaMask extension id not found")
        try:
            detected = await self._resolver()
        except TransportError:
            raise
        except Exception as e:
            raise TransportError("MetaMask extension id not found", e) from e
        if not detected:
            raise TransportError("MetaMask extension id not found")
        self._detected_extension_id = detected
        return detected

    async def _open(self, generation: int) -> None:
        extension_id = await self._resolve_extension_id()
        logger.debug("[{}] opening port to {}", self.name, extension_id)
        try:
            self._port.open(extension_id)
            self._port.on_close(lambda: self._handle_channel_closed(generation))
            self._port.on_message(lambda message: self._on_port_message(message, generation))
        except Exception as e:
            raise TransportError("Failed to connect to MetaMask", e) from e

        await asyncio.sleep(max(0, self.connect_grace_ms) / 1000.0)
        if self._closed_while_connecting and generation == self._generation:
            raise TransportError("Failed to connect to MetaMask: port closed right after opening")

    def _on_port_message(self, message: Any, generation: int) -> None:
        if not isinstance(message, dict) or message.get("type") != CAIP_348_TYPE:
            logger.debug("[{}] ignoring non-multichain port message", self.name)
            return
        self._handle_envelope(message.get("data"), generation)

    def _close(self) -> None:
        self._port.close()

    def _post(self, envelope: dict[str, Any]) -> None:
        self._port.send({"type": CAIP_348_TYPE, "data": envelope})
