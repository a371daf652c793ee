"""Transports: one physical channel each, sharing the connection lifecycle in Transport."""

from multichain_client.transports.base import Transport, TransportState
from multichain_client.transports.channels import MessageEvent, PortChannel, PostMessageChannel
from multichain_client.transports.constants import (
    CAIP_348_TYPE,
    CONTENT_SCRIPT,
    INPAGE,
    METAMASK_EXTENSION_CONNECT_CAN_RETRY,
    METAMASK_PROVIDER_STREAM_NAME,
    MULTICHAIN_SUBSTREAM_NAME,
)
from multichain_client.transports.externally_connectable import ExternallyConnectableTransport
from multichain_client.transports.window_post_message import WindowPostMessageTransport
from multichain_client.transports.extension_id import detect_extension_id
from multichain_client.transports.default import get_default_transport

__all__ = [
    "CAIP_348_TYPE",
    "CONTENT_SCRIPT",
    "INPAGE",
    "METAMASK_EXTENSION_CONNECT_CAN_RETRY",
    "METAMASK_PROVIDER_STREAM_NAME",
    "MULTICHAIN_SUBSTREAM_NAME",
    "ExternallyConnectableTransport",
    "MessageEvent",
    "PortChannel",
    "PostMessageChannel",
    "Transport",
    "TransportState",
    "WindowPostMessageTransport",
    "detect_extension_id",
    "get_default_transport",
]
