"""Tests for the window messaging transport."""

import asyncio

import pytest

from fakes import PAGE_ORIGIN
from multichain_client.core.ids import RequestIdGenerator
from multichain_client.transports import TransportState, WindowPostMessageTransport
from multichain_client.transports.constants import CONTENT_SCRIPT, INPAGE, MULTICHAIN_SUBSTREAM_NAME
from multichain_client.utils.exceptions import (
    MultichainApiError,
    RequestValidationError,
    TransportError,
    TransportTimeoutError,
)


def _transport(window, **kwargs) -> WindowPostMessageTransport:
    return WindowPostMessageTransport(window, ids=RequestIdGenerator(seed=1000), **kwargs)


@pytest.mark.asyncio
async def test_request_frame_is_wrapped_for_content_script(window):
    transport = _transport(window)
    await transport.connect()

    task = asyncio.create_task(transport.request({"method": "wallet_getSession"}))
    await asyncio.sleep(0)

    assert window.sent == [
        (
            {
                "target": CONTENT_SCRIPT,
                "data": {
                    "name": MULTICHAIN_SUBSTREAM_NAME,
                    "data": {"jsonrpc": "2.0", "id": 1000, "method": "wallet_getSession"},
                },
            },
            PAGE_ORIGIN,
        )
    ]

    window.respond({"id": 1000, "jsonrpc": "2.0", "result": {"sessionScopes": {}}})
    response = await task
    assert response.result == {"sessionScopes": {}}
    assert transport.pending_count == 0


@pytest.mark.asyncio
async def test_request_params_are_forwarded(window):
    transport = _transport(window)
    await transport.connect()

    params = {"optionalScopes": {"eip155:1": {"methods": [], "notifications": []}}}
    task = asyncio.create_task(transport.request({"method": "wallet_createSession", "params": params}))
    await asyncio.sleep(0)
    assert window.sent_envelopes()[0]["params"] == params

    window.respond({"id": 1000, "jsonrpc": "2.0", "result": {"sessionScopes": {}}})
    await task


@pytest.mark.asyncio
async def test_foreign_window_traffic_is_ignored(window):
    transport = _transport(window)
    await transport.connect()
    task = asyncio.create_task(transport.request({"method": "wallet_getSession"}))
    await asyncio.sleep(0)

    reply = {"id": 1000, "jsonrpc": "2.0", "result": "ok"}
    inner = {"name": MULTICHAIN_SUBSTREAM_NAME, "data": reply}
    window.emit({"target": INPAGE, "data": inner}, origin="https://evil.example")
    window.emit({"target": CONTENT_SCRIPT, "data": inner})
    window.emit({"target": INPAGE, "data": {"name": "metamask-provider", "data": reply}})
    window.emit("plain string message")
    await asyncio.sleep(0)
    assert not task.done()

    window.respond(reply)
    assert (await task).result == "ok"


@pytest.mark.asyncio
async def test_notifications_reach_listeners(window):
    transport = _transport(window)
    await transport.connect()
    seen = []
    transport.on_notification(seen.append)

    notification = {"jsonrpc": "2.0", "method": "wallet_sessionChanged", "params": {"sessionScopes": {}}}
    window.respond(notification)
    assert seen == [notification]


@pytest.mark.asyncio
async def test_request_before_connect_fails(window):
    transport = _transport(window)
    with pytest.raises(TransportError, match="Transport not connected"):
        await transport.request({"method": "wallet_getSession"})
    assert window.sent == []


@pytest.mark.asyncio
async def test_request_without_method_is_rejected(window):
    transport = _transport(window)
    await transport.connect()
    with pytest.raises(RequestValidationError) as excinfo:
        await transport.request({"params": {}})
    assert excinfo.value.field == "method"
    assert not isinstance(excinfo.value, (MultichainApiError, TransportError))
    assert window.sent == []


@pytest.mark.asyncio
async def test_timeout_rejects_and_frees_slot(window):
    transport = _transport(window)
    await transport.connect()

    with pytest.raises(TransportTimeoutError):
        await transport.request({"method": "wallet_getSession"}, timeout_ms=10)
    assert transport.pending_count == 0
    assert transport.is_connected()


@pytest.mark.asyncio
async def test_default_timeout_applies_when_caller_passes_none(window):
    transport = _transport(window, default_timeout_ms=10)
    await transport.connect()
    with pytest.raises(TransportTimeoutError):
        await transport.request({"method": "wallet_getSession"})


@pytest.mark.asyncio
async def test_disconnect_rejects_pending_and_clears_listeners(window):
    transport = _transport(window)
    await transport.connect()
    transport.on_notification(lambda _frame: None)
    tasks = [asyncio.create_task(transport.request({"method": "wallet_getSession"})) for _ in range(2)]
    await asyncio.sleep(0)
    assert transport.pending_count == 2

    await transport.disconnect()

    results = await asyncio.gather(*tasks, return_exceptions=True)
    assert all(isinstance(r, TransportError) and "Transport disconnected" in str(r) for r in results)
    assert transport.state is TransportState.DISCONNECTED
    assert transport.pending_count == 0
    assert transport.listener_count == 0
    assert window.message_listeners == []
    assert window.close_listeners == []


@pytest.mark.asyncio
async def test_disconnect_when_never_connected_is_noop(window):
    transport = _transport(window)
    transport.on_notification(lambda _frame: None)
    await transport.disconnect()
    assert transport.state is TransportState.DISCONNECTED
    assert transport.listener_count == 0


@pytest.mark.asyncio
async def test_connect_is_idempotent(window):
    transport = _transport(window)
    await asyncio.gather(transport.connect(), transport.connect())
    await transport.connect()
    assert transport.is_connected()
    assert len(window.message_listeners) == 1


@pytest.mark.asyncio
async def test_reconnect_after_disconnect_uses_fresh_listeners(window):
    transport = _transport(window)
    await transport.connect()
    await transport.disconnect()
    await transport.connect()
    assert len(window.message_listeners) == 1

    task = asyncio.create_task(transport.request({"method": "wallet_getSession"}))
    await asyncio.sleep(0)
    window.respond({"id": 1000, "jsonrpc": "2.0", "result": None})
    assert (await task).result is None


@pytest.mark.asyncio
async def test_channel_close_tears_down(window):
    transport = _transport(window)
    await transport.connect()
    task = asyncio.create_task(transport.request({"method": "wallet_getSession"}))
    await asyncio.sleep(0)

    window.close()

    with pytest.raises(TransportError, match="Transport disconnected"):
        await task
    assert transport.state is TransportState.DISCONNECTED
    assert window.message_listeners == []


@pytest.mark.asyncio
async def test_channel_close_rejects_every_pending_request_and_clears_listeners(window):
    transport = _transport(window)
    await transport.connect()
    seen = []
    transport.on_notification(seen.append)
    tasks = [asyncio.create_task(transport.request({"method": "wallet_getSession"})) for _ in range(3)]
    await asyncio.sleep(0)
    assert transport.pending_count == 3

    window.close()

    results = await asyncio.gather(*tasks, return_exceptions=True)
    assert all(isinstance(r, TransportError) and "Transport disconnected" in str(r) for r in results)
    assert len({id(r) for r in results}) == 3
    assert transport.pending_count == 0
    assert transport.listener_count == 0
    assert window.close_listeners == []


@pytest.mark.asyncio
async def test_malformed_response_id_does_not_break_the_channel(window):
    transport = _transport(window)
    await transport.connect()
    task = asyncio.create_task(transport.request({"method": "wallet_getSession"}))
    await asyncio.sleep(0)

    window.respond({"id": [1000], "jsonrpc": "2.0", "result": "spurious"})
    window.respond({"id": True, "jsonrpc": "2.0", "result": "spurious"})
    await asyncio.sleep(0)
    assert not task.done()

    window.respond({"id": 1000, "jsonrpc": "2.0", "result": "real"})
    assert (await task).result == "real"
