"""Conversion of caller-supplied values into JSON-RPC params."""

from __future__ import annotations

import math
from typing import Any

from .error import ErrorKind, NodeError


class _NotJson(Exception):
    pass


def _to_json(value: Any) -> Any:
    if value is None or isinstance(value, (bool, int, str)):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise _NotJson
        return value
    if isinstance(value, (list, tuple)):
        return [_to_json(item) for item in value]
    if isinstance(value, dict):
        if not all(isinstance(k, str) for k in value):
            raise _NotJson
        return {k: _to_json(v) for k, v in value.items()}
    raise _NotJson


def parse_params(value: Any) -> list[Any] | dict[str, Any] | None:
    """Turn ``value`` into JSON-RPC params.

    None gives no params; a list gives positional params, dropping items that
    are not JSON; a dict gives named params. Anything else raises NodeError.
    """
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        params = []
        for item in value:
            try:
                params.append(_to_json(item))
            except _NotJson:
                continue
        return params
    if isinstance(value, dict):
        named = {}
        for key, item in value.items():
            try:
                named[str(key)] = _to_json(item)
            except _NotJson:
                raise NodeError(ErrorKind.JS_ERROR, f"invalid value for param {key!s}") from None
        return named
    raise NodeError(ErrorKind.JS_ERROR, "unsupported params")