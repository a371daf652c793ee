"""Serialization helpers for multichain RPC frames."""

from __future__ import annotations

from typing import Any

from .protocol import JSONRPC_VERSION, RpcError, RpcRequest, RpcResponse

_UNSET = object()


def safe_dict(value: Any) -> dict[str, Any]:
    """Return the value when dict-like, otherwise an empty dict."""
    return value if isinstance(value, dict) else {}


def build_request(request_id: int, method: str, params: Any = _UNSET) -> RpcRequest:
    """Build a request; params stay absent from the frame unless explicitly passed."""
    if params is _UNSET or params is None:
        return RpcRequest(id=request_id, method=method)
    return RpcRequest(id=request_id, method=method, params=params, has_params=True)


def encode_request_frame(request: RpcRequest) -> dict[str, Any]:
    """Encode a request into the JSON-RPC envelope sent over the channel."""
    frame: dict[str, Any] = {"jsonrpc": JSONRPC_VERSION, "id": request.id, "method": request.method}
    if request.has_params:
        frame["params"] = request.params
    return frame


def is_notification(frame: Any) -> bool:
    """Id-less frames are notifications; everything else correlates to a request."""
    return isinstance(frame, dict) and frame.get("id") is None


def normalize_rpc_error(error: Any) -> RpcError:
    """Normalize unknown error payloads into RpcError."""
    row = safe_dict(error)
    code = row.get("code")
    stack = row.get("stack")
    return RpcError(
        code=code if isinstance(code, int) and not isinstance(code, bool) else -32603,
        message=str(row.get("message") or "rpc failed"),
        stack=stack if isinstance(stack, str) else None,
        data=row.get("data"),
    )


def decode_response_payload(payload: Any) -> RpcResponse:
    """Decode a raw response frame into RpcResponse; `error` wins over `result`."""
    row = safe_dict(payload)
    if row.get("error") is not None:
        return RpcResponse(id=row.get("id"), error=normalize_rpc_error(row.get("error")), raw=row)
    return RpcResponse(id=row.get("id"), result=row.get("result"), raw=row)
