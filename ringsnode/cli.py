"""Command-line client for a node's JSON-RPC backend."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Generic, Iterator, TypeVar

import requests

from .method import Method
from .response import Peer, TransportAndIce, TransportInfo
from .rpc_client import SimpleClient
from .rpc_request import Params, RpcError
from .seed import Seed

log = logging.getLogger(__name__)

T = TypeVar("T")

_MAX_MESSAGE_TYPE = 0xFFFF
_DONE = "Done."
_SUCCESSFUL = "Successful!"


@dataclass
class ClientOutput(Generic[T]):
    """The raw result of a client call with its human-readable display."""

    result: T
    display: str

    def show(self) -> None:
        """Print the display text."""
        print(self.display)


def _check_header_value(value: str) -> str:
    for char in value:
        code = ord(char)
        if char != "\t" and (code < 0x20 or code == 0x7F or code > 0xFF):
            raise ValueError("invalid character in signature header value")
    return value


def _expect_list(value: Any) -> list[Any]:
    if not isinstance(value, list):
        raise ValueError(f"expected a list, got {type(value).__name__}")
    return value


def _expect_strings(value: Any) -> list[str]:
    items = _expect_list(value)
    if not all(isinstance(item, str) for item in items):
        raise ValueError("expected a list of strings")
    return items


class Client:
    """Sends requests to a node's JSON-RPC endpoint, signed with ``signature``."""

    def __init__(
        self, endpoint_url: str, signature: str, timeout: float | None = None
    ) -> None:
        session = requests.Session()
        session.headers["X-SIGNATURE"] = _check_header_value(signature)
        self._client = SimpleClient(endpoint_url, session=session, timeout=timeout)

    def _call(self, method: Method, params: Params) -> Any:
        return self._client.call_method(method.value, params)

    def connect_peer_via_http(self, http_url: str) -> ClientOutput[str]:
        """Connect to the peer served at ``http_url``; return the transport id."""
        resp = self._call(Method.CONNECT_PEER_VIA_HTTP, [http_url])
        if not isinstance(resp, str):
            raise ValueError("Unexpected response")
        return ClientOutput(resp, f"Your transport_id: {resp}")

    def connect_with_seed(self, source: str) -> ClientOutput[None]:
        """Connect to the peers listed in the seed file at URL ``source``."""
        seed = Seed.load(source)
        self._call(Method.CONNECT_WITH_SEED, [seed.to_dict()])
        return ClientOutput(None, _SUCCESSFUL)

    def answer_offer(self, ice_info: str) -> ClientOutput[TransportAndIce]:
        """Answer a remote offer given by its encoded ICE information."""
        resp = self._call(Method.ANSWER_OFFER, [ice_info])
        info = TransportAndIce.from_dict(resp)
        return ClientOutput(info, f"transport_id: {info.transport_id}\nice: {info.ice}")

    def connect_with_did(self, did: str) -> ClientOutput[None]:
        """Connect to the peer with ``did`` found through the DHT."""
        self._call(Method.CONNECT_WITH_DID, [did])
        return ClientOutput(None, _SUCCESSFUL)

    def create_offer(self) -> ClientOutput[TransportAndIce]:
        """Create an offer for a manual handshake."""
        resp = self._call(Method.CREATE_OFFER, [])
        info = TransportAndIce.from_dict(resp)
        return ClientOutput(info, f"\ntransport_id: {info.transport_id}\nice: {info.ice}")

    def accept_answer(self, transport_id: str, ice: str) -> ClientOutput[Peer]:
        """Accept the remote answer for the pending transport ``transport_id``."""
        resp = self._call(Method.ACCEPT_ANSWER, [transport_id, ice])
        peer = Peer.from_dict(resp)
        return ClientOutput(peer, f"transport_id: {peer.transport_id}")

    def list_peers(self) -> ClientOutput[list[Peer]]:
        """List connected peers and their state."""
        resp = self._call(Method.LIST_PEERS, [])
        peers = [Peer.from_dict(item) for item in _expect_list(resp)]
        lines = "\n".join(f"{p.did}, {p.transport_id}, {p.state}" for p in peers)
        return ClientOutput(peers, "Did, TransportId, Status\n" + lines)

    def disconnect(self, did: str) -> ClientOutput[None]:
        """Disconnect from the peer with ``did``."""
        self._call(Method.DISCONNECT, [did])
        return ClientOutput(None, _DONE)

    def list_pendings(self) -> ClientOutput[list[TransportInfo]]:
        """List pending transports and their state."""
        resp = self._call(Method.LIST_PENDINGS, [])
        infos = [TransportInfo.from_dict(item) for item in _expect_list(resp)]
        rows = "".join(f"{i.transport_id}, {i.state}" for i in infos)
        return ClientOutput(infos, "TransportId, Status\n" + rows)

    def close_pending_transport(self, transport_id: str) -> ClientOutput[None]:
        """Close the pending transport ``transport_id``."""
        self._call(Method.CLOSE_PENDING_TRANSPORT, [transport_id])
        return ClientOutput(None, _DONE)

    def send_message(self, did: str, text: str) -> ClientOutput[None]:
        """Send ``text`` to the peer with ``did``."""
        self._call(Method.SEND_TO, {"destination": did, "text": text})
        return ClientOutput(None, _DONE)

    def send_custom_message(
        self, did: str, message_type: int, data: str
    ) -> ClientOutput[None]:
        """Send base64 ``data`` of type ``message_type`` (0 to 65535) to ``did``."""
        if (
            not isinstance(message_type, int)
            or isinstance(message_type, bool)
            or not 0 <= message_type <= _MAX_MESSAGE_TYPE
        ):
            raise ValueError("message_type must be an integer from 0 to 65535")
        self._call(Method.SEND_CUSTOM_MESSAGE, [did, message_type, data])
        return ClientOutput(None, _DONE)

    def send_simple_text_message(self, did: str, text: str) -> ClientOutput[None]:
        """Send a simple text message to ``did``."""
        self._call(Method.SEND_SIMPLE_TEXT, [did, text])
        return ClientOutput(None, _DONE)

    def register_service(self, name: str) -> ClientOutput[None]:
        """Register this node as a provider of service ``name``."""
        self._call(Method.REGISTER_SERVICE, [name])
        return ClientOutput(None, _DONE)

    def lookup_service(self, name: str) -> ClientOutput[list[str]]:
        """Look up the DIDs registered for service ``name``."""
        resp = self._call(Method.LOOKUP_SERVICE, [name])
        dids = _expect_strings(resp)
        return ClientOutput(dids, "\n".join(dids))

    def publish_message_to_topic(self, topic: str, data: str) -> ClientOutput[None]:
        """Append ``data`` to ``topic``."""
        self._call(Method.PUBLISH_MESSAGE_TO_TOPIC, [topic, data])
        return ClientOutput(None, _DONE)

    def subscribe_topic(self, topic: str, interval: float = 5.0) -> Iterator[str]:
        """Yield messages published to ``topic``, polling every ``interval`` seconds.

        Failed or malformed fetches are logged and retried; the iterator never ends.
        """
        index = 0
        while True:
            time.sleep(interval)
            try:
                resp = self._call(Method.FETCH_MESSAGES_OF_TOPIC, [topic, index])
            except RpcError as exc:
                log.error("Failed to fetch messages of topic: %s, %s", topic, exc)
                continue
            try:
                messages = _expect_strings(resp)
            except ValueError as exc:
                log.error("Failed to parse messages of topic: %s, %s", topic, exc)
                continue
            yield from messages
            index += len(messages)