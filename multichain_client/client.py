"""Multichain API client: session lifecycle and method invocation over one Transport."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

from loguru import logger
from pydantic import BaseModel, ValidationError

from multichain_client.config.schema import ClientConfig
from multichain_client.core.notifications import NotificationCallback
from multichain_client.core.protocol import RpcResponse
from multichain_client.core.retry import RetryPolicy, with_retry
from multichain_client.session import CreateSessionParams, InvokeMethodParams
from multichain_client.transports.base import Transport
from multichain_client.utils.exceptions import (
    InvalidParamsError,
    MultichainApiError,
    RequestValidationError,
    TransportError,
    TransportTimeoutError,
)

WALLET_CREATE_SESSION = "wallet_createSession"
WALLET_GET_SESSION = "wallet_getSession"
WALLET_REVOKE_SESSION = "wallet_revokeSession"
WALLET_INVOKE_METHOD = "wallet_invokeMethod"


class MultichainClient:
    """
    Wraps a Transport so that connecting and initializing happen at most once at a time.

    Initialization is a wallet_getSession warm-up probe with retries: right after the
    channel opens, the wallet may not answer yet even though messages go through.
    Both steps are memoized as shared tasks; revoke_session() and disconnect() reset them.
    """

    def __init__(self, transport: Transport, *, config: ClientConfig | None = None):
        self.transport = transport
        self.config = config or ClientConfig()
        self._connection: asyncio.Task[None] | None = None
        self._initialization: asyncio.Task[None] | None = None

    def is_connected(self) -> bool:
        return self.transport.is_connected()

    async def connect(self) -> None:
        await self.ensure_connected()

    async def disconnect(self) -> None:
        self._reset()
        await self.transport.disconnect()

    def on_notification(self, callback: NotificationCallback) -> Callable[[], None]:
        return self.transport.on_notification(callback)

    async def ensure_connected(self) -> None:
        if self.transport.is_connected():
            return
        if self._connection is None or self._connection.done():
            self._connection = asyncio.create_task(self.transport.connect())
        await asyncio.shield(self._connection)

    async def ensure_initialized(self) -> None:
        task = self._initialization
        if task is not None and task.done():
            if task.cancelled() or task.exception() is not None or not self.transport.is_connected():
                task = None
        if task is None:
            task = asyncio.create_task(self._initialize())
            self._initialization = task
        await asyncio.shield(task)

    async def _initialize(self) -> None:
        await self.ensure_connected()
        policy = RetryPolicy(
            max_retries=self.config.warmup_max_retries,
            retry_delay_ms=self.config.warmup_retry_delay_ms,
            retryable_error=TransportError,
            immediate_error=TransportTimeoutError,
            abort_if=lambda _exc: not self.transport.is_connected(),
        )

        async def warm_up() -> RpcResponse:
            try:
                return await self._request({"method": WALLET_GET_SESSION}, timeout_ms=self.config.warmup_timeout_ms)
            except TransportError as e:
                logger.warning("Warm-up {} failed: {}", WALLET_GET_SESSION, e)
                raise

        await with_retry(warm_up, policy)
        logger.debug("Multichain client initialized")

    async def create_session(self, params: CreateSessionParams | dict[str, Any]) -> Any:
        if isinstance(params, BaseModel):
            params = params.model_dump(by_alias=True, exclude_none=True)
        await self.ensure_initialized()
        return await self._call(WALLET_CREATE_SESSION, params)

    async def get_session(self) -> Any:
        await self.ensure_initialized()
        return await self._call(WALLET_GET_SESSION)

    async def revoke_session(self, params: dict[str, Any] | None = None) -> None:
        """Revoke, then always disconnect, even when the revoke request fails.

        Only a connection is needed; the warm-up is skipped.
        """
        try:
            await self.ensure_connected()
            await self._call(WALLET_REVOKE_SESSION, params or {})
        except Exception as e:
            logger.warning("{} failed, disconnecting anyway: {}", WALLET_REVOKE_SESSION, e)
            raise
        finally:
            await self.disconnect()

    async def invoke_method(self, params: InvokeMethodParams | dict[str, Any]) -> Any:
        envelope = self._validate_invoke_envelope(params)
        await self.ensure_initialized()
        return await self._call(WALLET_INVOKE_METHOD, envelope)

    @staticmethod
    def _validate_invoke_envelope(params: InvokeMethodParams | dict[str, Any]) -> dict[str, Any]:
        """Check only the {scope, request: {method, params}} shape; method params are opaque."""
        if isinstance(params, InvokeMethodParams):
            return params.model_dump(exclude_none=True)
        try:
            InvokeMethodParams.model_validate(params)
        except ValidationError as e:
            errors = e.errors()
            field = ".".join(str(p) for p in errors[0]["loc"]) if errors else None
            raise InvalidParamsError("invalid wallet_invokeMethod envelope", field=field) from e
        return params

    async def _call(self, method: str, params: Any = None) -> Any:
        request: dict[str, Any] = {"method": method}
        if params is not None:
            request["params"] = params
        return self._unwrap(await self._request(request))

    async def _request(self, request: dict[str, Any], *, timeout_ms: int | None = None) -> RpcResponse:
        """Issue one transport request; foreign exceptions become TransportError."""
        try:
            return await self.transport.request(request, timeout_ms=timeout_ms)
        except (TransportError, MultichainApiError, RequestValidationError):
            raise
        except Exception as e:
            raise TransportError(f"{request['method']} request failed", e) from e

    @staticmethod
    def _unwrap(response: RpcResponse) -> Any:
        if response.error is not None:
            raise MultichainApiError(response.error.to_dict())
        return response.result

    def _reset(self) -> None:
        self._connection = None
        self._initialization = None
