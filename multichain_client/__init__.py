"""
Public API:
- MultichainClient: session lifecycle + method invocation over a Transport
- ExternallyConnectableTransport, WindowPostMessageTransport: the two channel variants
- get_default_transport: pick a transport for the channels a host offers
- PortChannel, PostMessageChannel, MessageEvent: capability interfaces hosts implement
- RetryPolicy, with_retry, with_timeout: retry/timeout combinators
- TransportError, TransportTimeoutError, MultichainApiError: error taxonomy
"""

from multichain_client.client import MultichainClient
from multichain_client.config import ClientConfig, load_config
from multichain_client.core import (
    NotificationRouter,
    RequestCorrelator,
    RequestIdGenerator,
    RetryPolicy,
    RpcError,
    RpcResponse,
    with_retry,
    with_timeout,
)
from multichain_client.session import CreateSessionParams, InvokeMethodParams, ScopeObject, SessionData
from multichain_client.transports import (
    ExternallyConnectableTransport,
    MessageEvent,
    PortChannel,
    PostMessageChannel,
    Transport,
    TransportState,
    WindowPostMessageTransport,
    detect_extension_id,
    get_default_transport,
)
from multichain_client.utils.exceptions import (
    InvalidParamsError,
    MultichainApiError,
    MultichainClientError,
    OperationTimeoutError,
    RequestValidationError,
    TransportError,
    TransportTimeoutError,
)

__all__ = [
    "ClientConfig",
    "CreateSessionParams",
    "ExternallyConnectableTransport",
    "InvalidParamsError",
    "InvokeMethodParams",
    "MessageEvent",
    "MultichainApiError",
    "MultichainClient",
    "MultichainClientError",
    "NotificationRouter",
    "OperationTimeoutError",
    "RequestValidationError",
    "PortChannel",
    "PostMessageChannel",
    "RequestCorrelator",
    "RequestIdGenerator",
    "RetryPolicy",
    "RpcError",
    "RpcResponse",
    "ScopeObject",
    "SessionData",
    "Transport",
    "TransportError",
    "TransportState",
    "TransportTimeoutError",
    "WindowPostMessageTransport",
    "detect_extension_id",
    "get_default_transport",
    "load_config",
    "with_retry",
    "with_timeout",
]

__version__ = "0.1.0"
