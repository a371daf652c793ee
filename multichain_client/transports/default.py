"""Pick a transport for whatever channels the host can offer."""

from __future__ import annotations

from functools import partial

from loguru import logger

from multichain_client.config.schema import ClientConfig
from multichain_client.transports.extension_id import detect_extension_id
from multichain_client.transports.base import Transport
from multichain_client.transports.channels import PortChannel, PostMessageChannel
from multichain_client.transports.externally_connectable import ExternallyConnectableTransport
from multichain_client.transports.window_post_message import WindowPostMessageTransport
from multichain_client.utils.exceptions import TransportError


def get_default_transport(
    *,
    port_channel: PortChannel | None = None,
    window_channel: PostMessageChannel | None = None,
    config: ClientConfig | None = None,
) -> Transport:
    """Prefer an extension port when the host has one; fall back to window messaging."""
    config = config or ClientConfig()
    if port_channel is not None:
        resolver = None
        if window_channel is not None:
            resolver = partial(detect_extension_id, window_channel, timeout_ms=config.extension_detect_timeout_ms)
        logger.debug("Using extension port transport")
        return ExternallyConnectableTransport(
            port_channel,
            extension_id=config.extension_id,
            extension_id_resolver=resolver,
            default_timeout_ms=config.default_timeout_ms,
            connect_grace_ms=config.connect_grace_ms,
        )
    if window_channel is not None:
        logger.debug("Using window messaging transport")
        return WindowPostMessageTransport(window_channel, default_timeout_ms=config.default_timeout_ms)
    raise TransportError("No messaging channel available for a wallet transport")
