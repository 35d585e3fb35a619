"""Seed lists of peers, loaded from a local file or a remote URL."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit
from urllib.request import url2pathname

import requests


@dataclass
class SeedPeer:
    """A peer known by its DID and reachable at ``endpoint``."""

    did: str
    endpoint: str


@dataclass
class Seed:
    """A list of seed peers."""

    peers: list[SeedPeer] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "Seed":
        """Build a seed from its JSON form; raise ValueError if malformed."""
        if not isinstance(data, dict) or not isinstance(data.get("peers"), list):
            raise ValueError("seed must be an object with a list of peers")
        peers = []
        for item in data["peers"]:
            if not isinstance(item, dict):
                raise ValueError("seed peer must be an object")
            did, endpoint = item.get("did"), item.get("endpoint")
            if not isinstance(did, str) or not isinstance(endpoint, str):
                raise ValueError("seed peer needs string fields did and endpoint")
            peers.append(SeedPeer(did=did, endpoint=endpoint))
        return cls(peers=peers)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON form of the seed."""
        return {"peers": [{"did": p.did, "endpoint": p.endpoint} for p in self.peers]}

    @classmethod
    def load(cls, source: str) -> "Seed":
        """Load a seed from a ``file://`` URL or a remote URL."""
        return cls.from_dict(load_resource(source))


def load_resource(source: str) -> Any:
    """Load JSON from a ``file://`` URL or fetch it from a remote URL."""
    parts = urlsplit(source)
    if not parts.scheme:
        raise ValueError(f"relative URL without a base: {source!r}")

    if parts.scheme == "file" and parts.netloc in ("", "localhost"):
        path = Path(url2pathname(parts.path))
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise OSError("Unable to read resource file") from exc
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise ValueError(str(exc)) from exc

    try:
        response = requests.get(source)
    except requests.RequestException as exc:
        raise ConnectionError(f"failed to get resource from {source}") from exc
    try:
        return response.json()
    except ValueError as exc:
        raise ValueError(f"failed to load resource from {source}") from exc