"""
Exception hierarchy for multichain_client.

Provides:
- Transport-level errors (channel failures, timeouts)
- Remote errors reported by the wallet in a response frame
- Error categorization so callers can tell retryable from fatal failures
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCategory(Enum):
    """Error categories for classification."""
    RECOVERABLE = "recoverable"
    RETRYABLE = "retryable"
    FATAL = "fatal"
    VALIDATION = "validation"
    TIMEOUT = "timeout"


class MultichainClientError(Exception):
    """Base exception for all multichain_client errors."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        category: ErrorCategory = ErrorCategory.FATAL,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "category": self.category.value,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class RequestValidationError(MultichainClientError):
    """Malformed request caught locally, before anything reaches the channel."""

    def __init__(self, message: str, field: str | None = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", category=ErrorCategory.VALIDATION, details=details)
        self.field = field


class TransportError(MultichainClientError):
    """Channel-level failure: connect failed, not connected, channel torn down."""

    def __init__(
        self,
        message: str,
        original_error: BaseException | None = None,
        *,
        code: str = "TRANSPORT_ERROR",
        category: ErrorCategory = ErrorCategory.RECOVERABLE,
    ):
        details = {"cause": repr(original_error)} if original_error is not None else {}
        super().__init__(message, code=code, category=category, details=details)
        self.original_error = original_error


class TransportTimeoutError(TransportError):
    """A request (or the warm-up probe) exceeded its deadline."""

    def __init__(self, message: str = "Transport request timed out", original_error: BaseException | None = None):
        super().__init__(message, original_error, code="TRANSPORT_TIMEOUT", category=ErrorCategory.TIMEOUT)


class OperationTimeoutError(MultichainClientError):
    """Default error produced by with_timeout when no factory is given."""

    def __init__(self, timeout_ms: int):
        super().__init__(
            f"Timeout reached after {timeout_ms}ms",
            code="TIMEOUT",
            category=ErrorCategory.TIMEOUT,
            details={"timeout_ms": timeout_ms},
        )
        self.timeout_ms = timeout_ms


class MultichainApiError(MultichainClientError):
    """The wallet answered, but with an error payload. Never retried automatically."""

    def __init__(self, error: dict[str, Any] | None = None):
        row = error if isinstance(error, dict) else {}
        message = str(row.get("message") or "Multichain API request failed")
        super().__init__(message, code="MULTICHAIN_API_ERROR", category=ErrorCategory.FATAL, details=dict(row))
        self.remote_code = row.get("code")
        self.stack = row.get("stack")
        self.data = row.get("data")

    def __str__(self) -> str:
        if self.remote_code is not None:
            return f"[{self.code}:{self.remote_code}] {self.message}"
        return super().__str__()


class InvalidParamsError(MultichainApiError):
    """Locally detected malformed request envelope (JSON-RPC -32602)."""

    def __init__(self, message: str, field: str | None = None):
        error: dict[str, Any] = {"code": -32602, "message": message}
        if field:
            error["data"] = {"field": field}
        super().__init__(error)
        self.category = ErrorCategory.VALIDATION
