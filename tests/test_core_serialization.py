from multichain_client.core.serialization import (
    build_request,
    decode_response_payload,
    encode_request_frame,
    is_notification,
    normalize_rpc_error,
)


def test_encode_request_frame_shape():
    frame = encode_request_frame(build_request(7, "wallet_revokeSession", {}))
    assert frame == {"jsonrpc": "2.0", "id": 7, "method": "wallet_revokeSession", "params": {}}


def test_is_notification_by_missing_or_null_id():
    assert is_notification({"id": None, "method": "accountsChanged"})
    assert is_notification({"method": "accountsChanged"})
    assert not is_notification({"id": 0, "result": None})
    assert not is_notification("not a frame")


def test_decode_error_wins_over_result():
    response = decode_response_payload({"id": 3, "result": {"x": 1}, "error": {"code": 4001, "message": "rejected"}})
    assert response.error is not None
    assert response.error.code == 4001
    assert response.result is None
    assert response.raw["id"] == 3


def test_normalize_rpc_error_with_non_dict_payload():
    err = normalize_rpc_error("boom")
    assert err.code == -32603
    assert err.message == "rpc failed"
    assert err.to_dict() == {"code": -32603, "message": "rpc failed"}
