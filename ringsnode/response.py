"""Result objects returned by the JSON-RPC methods."""

from __future__ import annotations

import base64
import json
from dataclasses import asdict, dataclass, fields
from typing import Any

from .error import ErrorKind, NodeError

_UNKNOWN_STATE = "Unknown"


def _string_fields(cls: type, data: Any) -> dict[str, str]:
    if not isinstance(data, dict):
        raise NodeError(ErrorKind.JSON_DESERIALIZE_ERROR)
    values = {}
    for f in fields(cls):
        value = data.get(f.name)
        if not isinstance(value, str):
            raise NodeError(ErrorKind.JSON_DESERIALIZE_ERROR)
        values[f.name] = value
    return values


def _json_bytes(obj: dict[str, Any]) -> bytes:
    return json.dumps(obj, separators=(",", ":")).encode("utf-8")


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


@dataclass
class Peer:
    """A connected peer with its transport and ICE connection state."""

    did: str
    transport_id: str
    state: str | None = None

    def __post_init__(self) -> None:
        if self.state is None:
            self.state = _UNKNOWN_STATE

    @classmethod
    def from_dict(cls, data: Any) -> "Peer":
        """Build from a JSON object; raise NodeError if malformed."""
        return cls(**_string_fields(cls, data))

    def to_json_obj(self) -> dict[str, Any]:
        """Return the JSON object form."""
        return asdict(self)

    def to_json_bytes(self) -> bytes:
        """Return the compact JSON encoding."""
        return _json_bytes(self.to_json_obj())

    def base64_encode(self) -> str:
        """Return the base64 of the compact JSON encoding."""
        return _b64(self.to_json_bytes())


@dataclass
class TransportInfo:
    """A transport and its state."""

    transport_id: str
    state: str | None = None

    def __post_init__(self) -> None:
        if self.state is None:
            self.state = _UNKNOWN_STATE

    @classmethod
    def from_dict(cls, data: Any) -> "TransportInfo":
        """Build from a JSON object; raise NodeError if malformed."""
        return cls(**_string_fields(cls, data))

    def to_json_obj(self) -> dict[str, Any]:
        """Return the JSON object form."""
        return asdict(self)


@dataclass
class TransportAndIce:
    """A transport id together with its encoded handshake information."""

    transport_id: str
    ice: str

    @classmethod
    def from_dict(cls, data: Any) -> "TransportAndIce":
        """Build from a JSON object; raise NodeError if malformed."""
        return cls(**_string_fields(cls, data))

    def to_json_obj(self) -> dict[str, Any]:
        """Return the JSON object form."""
        return asdict(self)

    def to_json_bytes(self) -> bytes:
        """Return the compact JSON encoding."""
        return _json_bytes(self.to_json_obj())

    def base64_encode(self) -> str:
        """Return the base64 of the compact JSON encoding."""
        return _b64(self.to_json_bytes())