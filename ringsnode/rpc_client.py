"""A simple JSON-RPC client over HTTP."""

from __future__ import annotations

from typing import Any

import requests

from .rpc_request import (
    CallMessage,
    ClientError,
    NotifyMessage,
    Params,
    RequestBuilder,
    SubscribeMessage,
    parse_response,
)

_HEADERS = {"Content-Type": "application/json", "Accept": "application/json"}


class SimpleClient:
    """Sends JSON-RPC requests to the server at ``url``.

    ``session`` may carry default headers; a new session is made when omitted.
    """

    def __init__(
        self,
        url: str,
        session: requests.Session | None = None,
        timeout: float | None = None,
    ) -> None:
        self.url = url
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

    def call_method(self, method: str, params: Params = None) -> Any:
        """Call ``method`` and return its result; raise RpcError on failure."""
        return self._do_request(CallMessage(str(method), params))

    def notify(self, method: str, params: Params = None) -> None:
        """Send a notification for ``method``."""
        self._do_request(NotifyMessage(str(method), params))

    def _do_request(self, msg: CallMessage | NotifyMessage | SubscribeMessage) -> Any:
        builder = RequestBuilder()
        if isinstance(msg, CallMessage):
            _, body = builder.call_request(msg)
        elif isinstance(msg, NotifyMessage):
            body = builder.notification(msg)
        else:
            raise ClientError("Unsupported `RpcMessage` type `Subscribe`.")

        try:
            response = self.session.post(
                self.url,
                data=body.encode("utf-8"),
                headers=_HEADERS,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            raise ClientError(str(exc)) from exc

        parsed = parse_response(response.content.decode("utf-8", errors="replace"))
        if parsed.error is not None:
            raise parsed.error
        return parsed.result