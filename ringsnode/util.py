"""Build information and ICE connection state names."""

from __future__ import annotations

import os
from enum import Enum
from importlib.metadata import PackageNotFoundError, version


class IceConnectionState(Enum):
    """States of an ICE connection."""

    UNSPECIFIED = "unspecified"
    NEW = "new"
    CHECKING = "checking"
    CONNECTED = "connected"
    COMPLETED = "completed"
    FAILED = "failed"
    DISCONNECTED = "disconnected"
    CLOSED = "closed"


_STATE_NAMES = {
    IceConnectionState.NEW: "new",
    IceConnectionState.CHECKING: "checking",
    IceConnectionState.CONNECTED: "connected",
    IceConnectionState.COMPLETED: "completed",
    IceConnectionState.FAILED: "failed",
    IceConnectionState.DISCONNECTED: "disconnected",
    IceConnectionState.CLOSED: "closed",
}
_STATES_BY_NAME = {name: state for state, name in _STATE_NAMES.items()}


def build_version() -> str:
    """Return the package version joined with the git short hash, when known."""
    parts = []
    try:
        parts.append(version("ringsnode"))
    except PackageNotFoundError:
        pass
    git_hash = os.environ.get("GIT_SHORT_HASH")
    if git_hash:
        parts.append(git_hash)
    return "-".join(parts)


def ice_state_to_str(state: IceConnectionState) -> str:
    """Return the wire name of an ICE connection state."""
    return _STATE_NAMES.get(state, "unknown")


def ice_state_from_str(value: str) -> IceConnectionState | None:
    """Return the ICE connection state with wire name ``value``, or None."""
    return _STATES_BY_NAME.get(value)