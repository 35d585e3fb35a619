import json
from itertools import islice

import pytest
import responses

from ringsnode.cli import Client, ClientOutput
from ringsnode.response import Peer, TransportAndIce
from ringsnode.rpc_request import JsonRpcError

URL = "http://127.0.0.1:50000"
SIGNATURE = "c2lnbmF0dXJl"


def _ok(result):
    return {"jsonrpc": "2.0", "result": result, "id": 0}


def _body(call):
    return json.loads(call.request.body)


def test_connect_peer_via_http_returns_transport_id():
    client = Client(URL, SIGNATURE)
    with responses.RequestsMock() as rsps:
        rsps.post(URL, json=_ok("tid-1"))
        out = client.connect_peer_via_http("http://peer.example.com")
        sent = _body(rsps.calls[0])
        headers = rsps.calls[0].request.headers
    assert out.result == "tid-1"
    assert out.display == "Your transport_id: tid-1"
    assert sent["method"] == "connectPeerViaHttp"
    assert sent["params"] == ["http://peer.example.com"]
    assert headers["X-SIGNATURE"] == SIGNATURE
    assert headers["Content-Type"] == "application/json"


def test_connect_peer_via_http_unexpected_response():
    client = Client(URL, SIGNATURE)
    with responses.RequestsMock() as rsps:
        rsps.post(URL, json=_ok(42))
        with pytest.raises(ValueError, match="Unexpected response"):
            client.connect_peer_via_http("http://peer.example.com")


def test_invalid_signature_rejected():
    with pytest.raises(ValueError):
        Client(URL, "bad\nvalue")


def test_answer_offer():
    client = Client(URL, SIGNATURE)
    with responses.RequestsMock() as rsps:
        rsps.post(URL, json=_ok({"transport_id": "t1", "ice": "abc"}))
        out = client.answer_offer("offer-ice")
        sent = _body(rsps.calls[0])
    assert out.result == TransportAndIce("t1", "abc")
    assert out.display == "transport_id: t1\nice: abc"
    assert sent["method"] == "answerOffer"
    assert sent["params"] == ["offer-ice"]


def test_create_offer_display_starts_with_newline():
    client = Client(URL, SIGNATURE)
    with responses.RequestsMock() as rsps:
        rsps.post(URL, json=_ok({"transport_id": "t2", "ice": "xyz"}))
        out = client.create_offer()
        sent = _body(rsps.calls[0])
    assert out.display == "\ntransport_id: t2\nice: xyz"
    assert sent["params"] == []


def test_accept_answer():
    client = Client(URL, SIGNATURE)
    peer = {"did": "0xabc", "transport_id": "t3", "state": "connected"}
    with responses.RequestsMock() as rsps:
        rsps.post(URL, json=_ok(peer))
        out = client.accept_answer("t3", "ans")
        sent = _body(rsps.calls[0])
    assert out.result == Peer("0xabc", "t3", "connected")
    assert out.display == "transport_id: t3"
    assert sent["params"] == ["t3", "ans"]


def test_list_peers_display():
    client = Client(URL, SIGNATURE)
    peers = [
        {"did": "0xa", "transport_id": "t1", "state": "connected"},
        {"did": "0xb", "transport_id": "t2", "state": "new"},
    ]
    with responses.RequestsMock() as rsps:
        rsps.post(URL, json=_ok(peers))
        out = client.list_peers()
    assert out.display == "Did, TransportId, Status\n0xa, t1, connected\n0xb, t2, new"
    assert [p.did for p in out.result] == ["0xa", "0xb"]


def test_list_pendings_display():
    client = Client(URL, SIGNATURE)
    items = [{"transport_id": "t1", "state": "new"}]
    with responses.RequestsMock() as rsps:
        rsps.post(URL, json=_ok(items))
        out = client.list_pendings()
    assert out.display == "TransportId, Status\nt1, new"
    assert out.result[0].transport_id == "t1"


def test_send_message_uses_named_params():
    client = Client(URL, SIGNATURE)
    with responses.RequestsMock() as rsps:
        rsps.post(URL, json=_ok({"tx_id": "x"}))
        out = client.send_message("0xabc", "hello")
        sent = _body(rsps.calls[0])
    assert sent["method"] == "sendTo"
    assert sent["params"] == {"destination": "0xabc", "text": "hello"}
    assert out.display == "Done."


def test_send_custom_message_params():
    client = Client(URL, SIGNATURE)
    with responses.RequestsMock() as rsps:
        rsps.post(URL, json=_ok({"tx_id": "x"}))
        client.send_custom_message("0xabc", 7, "aGk=")
        sent = _body(rsps.calls[0])
    assert sent["method"] == "sendCustomMessage"
    assert sent["params"] == ["0xabc", 7, "aGk="]


@pytest.mark.parametrize("message_type", [-1, 65536])
def test_send_custom_message_type_out_of_range(message_type):
    client = Client(URL, SIGNATURE)
    with pytest.raises(ValueError):
        client.send_custom_message("0xabc", message_type, "aGk=")


def test_simple_calls_send_their_method():
    client = Client(URL, SIGNATURE)
    with responses.RequestsMock() as rsps:
        for _ in range(5):
            rsps.post(URL, json=_ok({}))
        client.disconnect("0xabc")
        client.close_pending_transport("t1")
        client.send_simple_text_message("0xabc", "hi")
        client.register_service("svc")
        client.publish_message_to_topic("news", "data")
        methods = [_body(call)["method"] for call in rsps.calls]
        params = [_body(call)["params"] for call in rsps.calls]
    assert methods == [
        "disconnect",
        "closePendingTransport",
        "sendSimpleText",
        "registerService",
        "publishMessageToTopic",
    ]
    assert params == [["0xabc"], ["t1"], ["0xabc", "hi"], ["svc"], ["news", "data"]]


def test_lookup_service_joins_dids():
    client = Client(URL, SIGNATURE)
    with responses.RequestsMock() as rsps:
        rsps.post(URL, json=_ok(["0xa", "0xb"]))
        out = client.lookup_service("svc")
    assert out.result == ["0xa", "0xb"]
    assert out.display == "0xa\n0xb"


def test_server_error_raised():
    client = Client(URL, SIGNATURE)
    error = {"jsonrpc": "2.0", "error": {"code": -32020, "message": "No Permission"}, "id": 0}
    with responses.RequestsMock() as rsps:
        rsps.post(URL, json=error)
        with pytest.raises(JsonRpcError) as info:
            client.connect_with_did("0xabc")
    assert info.value.code == -32020
    assert info.value.message == "No Permission"


def test_connect_with_seed_sends_seed(tmp_path):
    seed = {"peers": [{"did": "0xa", "endpoint": "http://a.example.com"}]}
    path = tmp_path / "seed.json"
    path.write_text(json.dumps(seed), encoding="utf-8")
    client = Client(URL, SIGNATURE)
    with responses.RequestsMock() as rsps:
        rsps.post(URL, json=_ok(None))
        out = client.connect_with_seed(path.as_uri())
        sent = _body(rsps.calls[0])
    assert sent["method"] == "connectWithSeed"
    assert sent["params"] == [seed]
    assert out.display == "Successful!"


def test_subscribe_topic_advances_index_and_survives_errors():
    client = Client(URL, SIGNATURE)
    seen = []
    batches = {0: ["m1", "m2"], 2: ["m3"]}

    def callback(request):
        params = json.loads(request.body)["params"]
        seen.append(params)
        if len(seen) == 1:
            return (500, {}, "boom")
        return (200, {}, json.dumps(_ok(batches.get(params[1], []))))

    with responses.RequestsMock() as rsps:
        rsps.add_callback(responses.POST, URL, callback=callback)
        messages = list(islice(client.subscribe_topic("news", interval=0), 3))
    assert messages == ["m1", "m2", "m3"]
    assert seen[0] == ["news", 0]
    assert seen[1] == ["news", 0]
    assert seen[2] == ["news", 2]


def test_show_prints_display(capsys):
    ClientOutput(None, "Done.").show()
    assert capsys.readouterr().out == "Done.\n"