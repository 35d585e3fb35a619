"""Error kinds reported by the node, with their JSON-RPC error codes."""

from __future__ import annotations

from enum import Enum
from typing import Any

_BASE_CODE = -32000


class ErrorKind(Enum):
    """Every error the node reports, with its code offset and message template."""

    REMOTE_RPC_ERROR = (0, "Connect remote rpc server failed: {}.")
    PENDING_TRANSPORT = (1, "Pending Transport error: {}.")
    TRANSPORT_NOT_FOUND = (2, "Transport not found.")
    NEW_TRANSPORT_ERROR = (3, "Create Transport error.")
    CLOSE_TRANSPORT_ERROR = (4, "Close Transport error: {}.")
    DECODED_ERROR = (5, "Decode error.")
    ENCODED_ERROR = (6, "Encode error.")
    REGISTER_ICE_ERROR = (7, "Register ICE error: {}.")
    CREATE_OFFER = (8, "Create offer info failed: {}.")
    CREATE_ANSWER = (9, "Create answer info failed: {}.")
    INVALID_TRANSPORT_ID = (10, "Invalid transport id.")
    INVALID_DID = (11, "Invalid did.")
    JSON_SERIALIZE_ERROR = (12, "Json serialize error.")
    JSON_DESERIALIZE_ERROR = (13, "Json Deserialize error.")
    INVALID_METHOD = (14, "Invalid method.")
    INTERNAL_ERROR = (15, "Internal error.")
    CONNECT_WITH_DID_ERROR = (16, "Connect with did error, {}")
    CONNECT_ERROR = (17, "Connect error, {}")
    SEND_MESSAGE = (18, "Send message error: {}")
    MESSAGE_PAYLOAD = (19, "Build message body error: {}")
    NO_PERMISSION = (20, "No Permission")
    VNODE_ERROR = (21, "vnode action error: {}")
    JS_ERROR = (22, "JsError: {}")
    HTTP_REQUEST_ERROR = (23, "Invalid http request: {}")
    INVALID_MESSAGE = (24, "Invalid message")
    NOT_SUPPORT_MESSAGE = (25, "Not support message")
    SERIALIZE_ERROR = (26, "Serialize error.")
    DESERIALIZE_ERROR = (27, "Deserialize error.")
    INVALID_URL = (28, "invalid url.")
    INVALID_DATA = (29, "Invalid data")
    INVALID_SERVICE = (30, "Invalid service")
    SERVICE_REGISTER_ERROR = (31, "service register action error: {}")
    INVALID_ADDRESS = (32, "Invalid address")
    INVALID_AUTH_DATA = (33, "Invalid auth data")
    STORAGE = (34, "Storage Error: {}")
    SWARM = (35, "Swarm Error: {}")
    CREATE_FILE_ERROR = (36, "Create File Error: {}")
    OPEN_FILE_ERROR = (37, "Open File Error: {}")

    def __init__(self, offset: int, template: str) -> None:
        self.offset = offset
        self.template = template

    @property
    def code(self) -> int:
        """The JSON-RPC server error code of this kind."""
        return _BASE_CODE - self.offset

    @property
    def takes_detail(self) -> bool:
        """Whether the message of this kind carries a detail text."""
        return "{}" in self.template


class NodeError(Exception):
    """An error raised by the node, carrying an :class:`ErrorKind`."""

    def __init__(self, kind: ErrorKind, detail: Any = None) -> None:
        if kind.takes_detail and detail is None:
            raise TypeError(f"{kind.name} requires a detail")
        if not kind.takes_detail and detail is not None:
            raise TypeError(f"{kind.name} takes no detail")
        self.kind = kind
        self.detail = detail
        message = kind.template.format(detail) if kind.takes_detail else kind.template
        super().__init__(message)

    @property
    def code(self) -> int:
        """The JSON-RPC server error code."""
        return self.kind.code

    def to_rpc_error(self) -> dict[str, Any]:
        """Return the JSON-RPC error object for this error."""
        return {"code": self.code, "message": str(self)}