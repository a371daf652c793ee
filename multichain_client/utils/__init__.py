"""Utility types for multichain_client."""

from multichain_client.utils.exceptions import (
    ErrorCategory,
    InvalidParamsError,
    MultichainApiError,
    MultichainClientError,
    OperationTimeoutError,
    RequestValidationError,
    TransportError,
    TransportTimeoutError,
)

__all__ = [
    "ErrorCategory",
    "InvalidParamsError",
    "MultichainApiError",
    "MultichainClientError",
    "OperationTimeoutError",
    "RequestValidationError",
    "TransportError",
    "TransportTimeoutError",
]
