"""JSON-RPC request building and response parsing."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Union

_VERSION = "2.0"
_PARSE_ERROR_CODE = -32700
_PARSE_ERROR_MESSAGE = "Parse error"
_MAX_U64 = 2**64 - 1

Params = Union[list, dict, None]


class RpcError(Exception):
    """Base class of the errors returned by the JSON-RPC client."""


class JsonRpcError(RpcError):
    """An error object returned by the server."""

    def __init__(self, code: int, message: str, data: Any = None) -> None:
        self.code = code
        self.message = message
        self.data = data
        super().__init__(f"Server returned rpc error {code}: {message}")


class ResponseParseError(RpcError):
    """The server response could not be parsed."""

    def __init__(self, what: str, reason: str) -> None:
        self.what = what
        self.reason = reason
        super().__init__(f"Failed to parse server response as {what}: {reason}")


class RpcTimeout(RpcError):
    """The request timed out."""

    def __init__(self) -> None:
        super().__init__("Request timed out")


class ClientError(RpcError):
    """A general client-side error."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Client error: {detail}")


@dataclass
class CallMessage:
    """An RPC call."""

    method: str
    params: Params = None


@dataclass
class NotifyMessage:
    """An RPC notification."""

    method: str
    params: Params = None


@dataclass
class Subscription:
    """An RPC subscription."""

    subscribe: str
    subscribe_params: Params
    notification: str
    unsubscribe: str


@dataclass
class SubscribeMessage:
    """A request to subscribe to a notification."""

    subscription: Subscription


@dataclass
class ParsedResponse:
    """A parsed server message: either a call output or a notification."""

    id: Any = None
    result: Any = None
    error: JsonRpcError | None = None
    method: str | None = None
    subscription_id: int | str | None = None


def _check_params(params: Any) -> Params:
    if params is None or isinstance(params, (list, dict)):
        return params
    if isinstance(params, tuple):
        return list(params)
    raise TypeError("params must be a list, a dict or None")


def _dumps(obj: Any) -> str:
    return json.dumps(obj, separators=(",", ":"), ensure_ascii=False)


class RequestBuilder:
    """Creates JSON-RPC requests with increasing ids starting at 0."""

    def __init__(self) -> None:
        self._next = 0

    def _next_id(self) -> int:
        current = self._next
        self._next += 1
        return current

    def single_request(self, method: str, params: Params) -> tuple[int, str]:
        """Build a method call with the next id; return the id and the JSON text."""
        params = _check_params(params)
        request_id = self._next_id()
        body = {"jsonrpc": _VERSION, "method": str(method), "params": params, "id": request_id}
        return request_id, _dumps(body)

    def call_request(self, msg: CallMessage) -> tuple[int, str]:
        """Build the request for a call message."""
        return self.single_request(msg.method, msg.params)

    def subscribe_request(self, subscribe: str, subscribe_params: Params) -> tuple[int, str]:
        """Build a subscribe request."""
        return self.single_request(subscribe, subscribe_params)

    def unsubscribe_request(self, unsubscribe: str, sid: int | str) -> tuple[int, str]:
        """Build an unsubscribe request for subscription ``sid``."""
        return self.single_request(unsubscribe, [sid])

    def notification(self, msg: NotifyMessage) -> str:
        """Build a notification, which carries no id."""
        params = _check_params(msg.params)
        return _dumps({"jsonrpc": _VERSION, "method": str(msg.method), "params": params})


def _is_u64(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= _MAX_U64


def _valid_id(value: Any) -> bool:
    return value is None or isinstance(value, str) or _is_u64(value)


def _valid_version(obj: dict) -> bool:
    version = obj.get("jsonrpc")
    return version is None or version == _VERSION


def _error_from_obj(obj: Any) -> JsonRpcError | None:
    if not isinstance(obj, dict):
        return None
    code, message = obj.get("code"), obj.get("message")
    if not isinstance(code, int) or isinstance(code, bool) or not isinstance(message, str):
        return None
    return JsonRpcError(code, message, obj.get("data"))


def _shaped(obj: Any, allowed: set[str], required: set[str]) -> bool:
    return (
        isinstance(obj, dict)
        and set(obj) <= allowed
        and required <= set(obj)
        and _valid_version(obj)
    )


def _as_success(obj: Any) -> ParsedResponse | None:
    if not _shaped(obj, {"jsonrpc", "result", "id"}, {"result", "id"}):
        return None
    if not _valid_id(obj["id"]):
        return None
    return ParsedResponse(id=obj["id"], result=obj["result"])


def _as_failure(obj: Any) -> ParsedResponse | None:
    if not _shaped(obj, {"jsonrpc", "error", "id"}, {"error", "id"}):
        return None
    if not _valid_id(obj["id"]):
        return None
    error = _error_from_obj(obj["error"])
    if error is None:
        return None
    return ParsedResponse(id=obj["id"], error=error)


def _parse_subscription_id(value: Any) -> int | str | None:
    if isinstance(value, str) or _is_u64(value):
        return value
    return None


def _as_notification(obj: Any) -> ParsedResponse | None:
    if not _shaped(obj, {"jsonrpc", "method", "params"}, {"method"}):
        return None
    method = obj["method"]
    params = obj.get("params")
    if not isinstance(method, str) or not (params is None or isinstance(params, (list, dict))):
        return None

    parsed = ParsedResponse(method=method, result=params)
    if isinstance(params, dict) and "subscription" in params:
        parsed.subscription_id = _parse_subscription_id(params["subscription"])
        if "result" in params:
            parsed.result = params["result"]
        elif "error" in params:
            parsed.result = None
            parsed.error = _error_from_obj(params["error"]) or JsonRpcError(
                _PARSE_ERROR_CODE, _PARSE_ERROR_MESSAGE
            )
    return parsed


def parse_response(response: str) -> ParsedResponse:
    """Parse a server message: a success or failure output, or a notification."""
    try:
        obj = json.loads(response)
    except json.JSONDecodeError as exc:
        raise ResponseParseError("JSON", str(exc)) from exc
    for parser in (_as_success, _as_failure, _as_notification):
        parsed = parser(obj)
        if parsed is not None:
            return parsed
    raise ResponseParseError(
        "JSON-RPC response", "data did not match any variant of ClientResponse"
    )