"""Transport correlation core: ids, pending requests, notifications, combinators."""

from .correlator import RequestCorrelator
from .ids import RequestIdGenerator, shared_id_generator
from .notifications import NotificationCallback, NotificationRouter
from .protocol import JSONRPC_VERSION, RpcError, RpcRequest, RpcResponse
from .retry import NO_TIMEOUT, RetryPolicy, with_retry, with_timeout
from .serialization import (
    build_request,
    decode_response_payload,
    encode_request_frame,
    is_notification,
    normalize_rpc_error,
    safe_dict,
)

__all__ = [
    "JSONRPC_VERSION",
    "NO_TIMEOUT",
    "NotificationCallback",
    "NotificationRouter",
    "RequestCorrelator",
    "RequestIdGenerator",
    "RetryPolicy",
    "RpcError",
    "RpcRequest",
    "RpcResponse",
    "build_request",
    "decode_response_payload",
    "encode_request_frame",
    "is_notification",
    "normalize_rpc_error",
    "safe_dict",
    "shared_id_generator",
    "with_retry",
    "with_timeout",
]
