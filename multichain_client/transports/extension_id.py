"""Detect the MetaMask extension id over window messaging."""

from __future__ import annotations

import asyncio
from typing import Any

from loguru import logger

from multichain_client.core.retry import with_timeout
from multichain_client.core.serialization import safe_dict
from multichain_client.transports.channels import MessageEvent, PostMessageChannel
from multichain_client.transports.constants import (
    METAMASK_EXTENSION_CONNECT_CAN_RETRY,
    METAMASK_PROVIDER_STREAM_NAME,
)
from multichain_client.transports.window_post_message import unwrap_substream_message, wrap_substream_message
from multichain_client.utils.exceptions import TransportError

GET_PROVIDER_STATE = "metamask_getProviderState"


async def detect_extension_id(channel: PostMessageChannel, *, timeout_ms: int = 10000) -> str:
    """
    Ask the content script for provider state and return its `extensionId`.

    A METAMASK_EXTENSION_CONNECT_CAN_RETRY message means the extension missed the request,
    so it is sent again.
    """
    loop = asyncio.get_running_loop()
    found: asyncio.Future[str] = loop.create_future()

    def request_provider_state() -> None:
        channel.send(
            wrap_substream_message({"method": GET_PROVIDER_STATE}, stream_name=METAMASK_PROVIDER_STREAM_NAME),
            channel.origin,
        )

    def on_message(event: MessageEvent) -> None:
        payload: Any = unwrap_substream_message(event, origin=channel.origin, stream_name=METAMASK_PROVIDER_STREAM_NAME)
        if payload is None or found.done():
            return
        row = safe_dict(payload)
        if row.get("method") == METAMASK_EXTENSION_CONNECT_CAN_RETRY:
            logger.debug("Provider asked to retry getProviderState")
            request_provider_state()
            return
        extension_id = safe_dict(row.get("result")).get("extensionId")
        if isinstance(extension_id, str) and extension_id:
            found.set_result(extension_id)

    unsubscribe = channel.on_message(on_message)
    try:
        request_provider_state()
        extension_id = await with_timeout(found, timeout_ms, lambda: TransportError("MetaMask extension not found"))
    finally:
        unsubscribe()
    logger.debug("Detected MetaMask extension id {}", extension_id)
    return extension_id
