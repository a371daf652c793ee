"""Pending-request table: matches asynchronous responses to outstanding requests by id."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

from loguru import logger

from multichain_client.core.ids import RequestIdGenerator, shared_id_generator
from multichain_client.core.protocol import RpcResponse
from multichain_client.core.retry import NO_TIMEOUT, with_timeout
from multichain_client.core.serialization import build_request, decode_response_payload, encode_request_frame
from multichain_client.utils.exceptions import TransportError, TransportTimeoutError

_NO_PARAMS = object()


class RequestCorrelator:
    """Tracks in-flight requests and settles each exactly once.

    `post` hands one request envelope to the channel; it must not block.
    """

    def __init__(self, post: Callable[[dict[str, Any]], None], ids: RequestIdGenerator | None = None):
        self._post = post
        self._ids = ids or shared_id_generator
        self._pending: dict[int, asyncio.Future[RpcResponse]] = {}

    def __len__(self) -> int:
        return len(self._pending)

    def __contains__(self, request_id: object) -> bool:
        return request_id in self._pending

    async def send(self, method: str, params: Any = _NO_PARAMS, timeout_ms: int = NO_TIMEOUT) -> RpcResponse:
        """Send one request and wait for its response or its deadline."""
        request_id = self._ids.next_id()
        if params is _NO_PARAMS:
            request = build_request(request_id, method)
        else:
            request = build_request(request_id, method, params)
        frame = encode_request_frame(request)

        fut: asyncio.Future[RpcResponse] = asyncio.get_running_loop().create_future()
        self._pending[request_id] = fut
        try:
            try:
                self._post(frame)
            except TransportError:
                raise
            except Exception as e:
                raise TransportError(f"Failed to send {method} request", e) from e
            return await with_timeout(fut, timeout_ms, TransportTimeoutError)
        finally:
            self._pending.pop(request_id, None)

    def resolve(self, frame: dict[str, Any]) -> bool:
        """Settle the pending request matching `frame["id"]`. Unknown ids are dropped."""
        request_id = frame.get("id")
        if not isinstance(request_id, int) or isinstance(request_id, bool):
            logger.debug("Dropping response with non-integer id {!r}", request_id)
            return False
        fut = self._pending.pop(request_id, None)
        if fut is None:
            logger.debug("Dropping response for unknown or expired request id {}", request_id)
            return False
        if not fut.done():
            fut.set_result(decode_response_payload(frame))
        return True

    def reject_all(self, error_factory: Callable[[], BaseException]) -> int:
        """Fail every outstanding request with a fresh error; returns how many were settled."""
        doomed = list(self._pending.items())
        self._pending.clear()
        settled = 0
        for _, fut in doomed:
            if not fut.done():
                fut.set_exception(error_factory())
                settled += 1
        return settled
