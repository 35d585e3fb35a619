import json

import pytest

from ringsnode.rpc_request import (
    CallMessage,
    ClientError,
    JsonRpcError,
    NotifyMessage,
    RequestBuilder,
    ResponseParseError,
    RpcError,
    parse_response,
)


def test_single_request_wire_format():
    builder = RequestBuilder()
    request_id, body = builder.single_request("listPeers", [])
    assert request_id == 0
    assert body == '{"jsonrpc":"2.0","method":"listPeers","params":[],"id":0}'


def test_ids_increase():
    builder = RequestBuilder()
    first, _ = builder.single_request("a", None)
    second, body = builder.single_request("b", None)
    assert second == first + 1
    assert json.loads(body)["id"] == second


def test_call_request_carries_method_and_params():
    builder = RequestBuilder()
    msg = CallMessage("sendTo", {"destination": "did", "text": "hi"})
    _, body = builder.call_request(msg)
    loaded = json.loads(body)
    assert loaded["method"] == "sendTo"
    assert loaded["params"] == {"destination": "did", "text": "hi"}
    assert loaded["jsonrpc"] == "2.0"


def test_none_params_serialize_as_null():
    _, body = RequestBuilder().single_request("createOffer", None)
    loaded = json.loads(body)
    assert "params" in loaded
    assert loaded["params"] is None


def test_subscribe_request_is_single_request():
    _, body = RequestBuilder().subscribe_request("sub", ["topic"])
    assert json.loads(body)["params"] == ["topic"]


@pytest.mark.parametrize("sid", [7, "abc"])
def test_unsubscribe_request_params(sid):
    _, body = RequestBuilder().unsubscribe_request("unsub", sid)
    loaded = json.loads(body)
    assert loaded["method"] == "unsub"
    assert loaded["params"] == [sid]


def test_notification_has_no_id():
    body = RequestBuilder().notification(NotifyMessage("pollMessage", [True]))
    loaded = json.loads(body)
    assert set(loaded) == {"jsonrpc", "method", "params"}
    assert loaded["params"] == [True]


def test_invalid_params_type():
    with pytest.raises(TypeError):
        RequestBuilder().single_request("x", "text")


def test_parse_success():
    parsed = parse_response('{"jsonrpc":"2.0","result":{"a":1},"id":3}')
    assert parsed.id == 3
    assert parsed.result == {"a": 1}
    assert parsed.error is None
    assert parsed.method is None
    assert parsed.subscription_id is None


def test_parse_success_string_id_without_version():
    parsed = parse_response('{"result":"ok","id":"req"}')
    assert parsed.id == "req"
    assert parsed.result == "ok"


def test_parse_failure():
    parsed = parse_response(
        '{"jsonrpc":"2.0","error":{"code":-32020,"message":"No Permission"},"id":0}'
    )
    assert isinstance(parsed.error, JsonRpcError)
    assert parsed.error.code == -32020
    assert parsed.error.message == "No Permission"
    assert "No Permission" in str(parsed.error)


def test_parse_subscription_result():
    text = json.dumps(
        {"jsonrpc": "2.0", "method": "notice", "params": {"subscription": 5, "result": [1, 2]}}
    )
    parsed = parse_response(text)
    assert parsed.id is None
    assert parsed.method == "notice"
    assert parsed.subscription_id == 5
    assert parsed.result == [1, 2]


def test_parse_subscription_error():
    text = json.dumps(
        {
            "method": "notice",
            "params": {"subscription": "s1", "error": {"code": -32001, "message": "bad"}},
        }
    )
    parsed = parse_response(text)
    assert parsed.subscription_id == "s1"
    assert parsed.error.code == -32001
    assert parsed.error.message == "bad"


def test_parse_subscription_malformed_error_falls_back_to_parse_error():
    text = json.dumps({"method": "n", "params": {"subscription": 1, "error": "nope"}})
    parsed = parse_response(text)
    assert parsed.error.code == -32700


def test_parse_plain_notification_returns_params():
    parsed = parse_response('{"method":"n","params":["x"]}')
    assert parsed.result == ["x"]
    assert parsed.subscription_id is None


def test_parse_notification_without_params():
    parsed = parse_response('{"jsonrpc":"2.0","method":"n"}')
    assert parsed.method == "n"
    assert parsed.result is None


@pytest.mark.parametrize(
    "text",
    [
        "not json",
        '{"jsonrpc":"2.0","result":1,"id":0,"extra":true}',
        '{"jsonrpc":"2.0","result":1,"error":{"code":1,"message":"m"},"id":0}',
        '{"jsonrpc":"2.0","result":1,"id":-1}',
        '{"jsonrpc":"1.0","result":1,"id":0}',
        '{"jsonrpc":"2.0","result":1}',
        "[1, 2]",
    ],
)
def test_parse_rejects_malformed(text):
    with pytest.raises(ResponseParseError):
        parse_response(text)


def test_client_error_message_and_base_class():
    err = ClientError("boom")
    assert str(err) == "Client error: boom"
    assert isinstance(err, RpcError)