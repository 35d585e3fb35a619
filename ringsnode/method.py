"""Names of the JSON-RPC methods the node serves."""

from __future__ import annotations

from enum import Enum

from .error import ErrorKind, NodeError


class Method(str, Enum):
    """Supported JSON-RPC methods."""

    CONNECT_PEER_VIA_HTTP = "connectPeerViaHttp"
    CONNECT_WITH_DID = "connectWithDid"
    CONNECT_WITH_SEED = "connectWithSeed"
    LIST_PEERS = "listPeers"
    CREATE_OFFER = "createOffer"
    ANSWER_OFFER = "answerOffer"
    ACCEPT_ANSWER = "acceptAnswer"
    SEND_TO = "sendTo"
    DISCONNECT = "disconnect"
    LIST_PENDINGS = "listPendings"
    CLOSE_PENDING_TRANSPORT = "closePendingTransport"
    SEND_SIMPLE_TEXT = "sendSimpleText"
    SEND_HTTP_REQUEST_MESSAGE = "sendHttpRequestMessage"
    SEND_CUSTOM_MESSAGE = "sendCustomMessage"
    PUBLISH_MESSAGE_TO_TOPIC = "publishMessageToTopic"
    FETCH_MESSAGES_OF_TOPIC = "fetchMessagesOfTopic"
    REGISTER_SERVICE = "registerService"
    LOOKUP_SERVICE = "lookupService"
    POLL_MESSAGE = "pollMessage"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: str) -> "Method":
        """Return the method named ``value``; raise NodeError if there is none."""
        try:
            return cls(value)
        except ValueError:
            raise NodeError(ErrorKind.INVALID_METHOD) from None