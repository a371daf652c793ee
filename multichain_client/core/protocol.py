"""Wire protocol models shared by every transport."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

JSONRPC_VERSION = "2.0"


@dataclass(slots=True)
class RpcError:
    """Normalized remote error payload."""

    code: int
    message: str
    stack: str | None = None
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        row: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.stack is not None:
            row["stack"] = self.stack
        if self.data is not None:
            row["data"] = self.data
        return row


@dataclass(slots=True)
class RpcRequest:
    """JSON-RPC request frame (inner envelope, before channel wrapping)."""

    id: int
    method: str
    params: Any = None
    has_params: bool = False


@dataclass(slots=True)
class RpcResponse:
    """Decoded response frame correlated to one request id."""

    id: int
    result: Any = None
    error: RpcError | None = None
    raw: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.error is None
