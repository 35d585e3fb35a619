"""Node configuration, stored as a YAML file."""

from __future__ import annotations

import os
import secrets
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .error import ErrorKind, NodeError

DEFAULT_BIND_ADDRESS = "127.0.0.1:50000"
DEFAULT_ENDPOINT_URL = "http://127.0.0.1:50000"
DEFAULT_ICE_SERVERS = "stun://stun.l.google.com:19302"
DEFAULT_STABILIZE_TIMEOUT = 20
DEFAULT_STORAGE_CAPACITY = 200000000


def get_storage_location(prefix: str | os.PathLike[str], path: str | os.PathLike[str]) -> str:
    """Return ``$HOME/prefix/path``, or ``data/prefix/path`` when HOME is unset."""
    home = os.environ.get("HOME")
    base = Path(home) if home is not None else Path("data")
    return str(base / prefix / path)


def _is_count(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _require(condition: bool) -> None:
    if not condition:
        raise NodeError(ErrorKind.DESERIALIZE_ERROR)


def _require_str(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    _require(isinstance(value, str))
    return value


@dataclass
class StorageConfig:
    """Location and capacity of a persistent store."""

    path: str
    capacity: int

    @classmethod
    def _from_dict(cls, data: Any) -> "StorageConfig":
        _require(isinstance(data, dict))
        capacity = data.get("capacity")
        _require(_is_count(capacity))
        return cls(path=_require_str(data, "path"), capacity=capacity)

    def _to_dict(self) -> dict[str, Any]:
        return {"path": self.path, "capacity": self.capacity}


@dataclass
class HiddenServerConfig:
    """A backend service reachable through the node."""

    name: str
    prefix: str

    @classmethod
    def _from_dict(cls, data: Any) -> "HiddenServerConfig":
        _require(isinstance(data, dict))
        return cls(name=_require_str(data, "name"), prefix=_require_str(data, "prefix"))

    def _to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "prefix": self.prefix}


def _default_data_storage() -> StorageConfig:
    return StorageConfig(get_storage_location(".rings", "data"), DEFAULT_STORAGE_CAPACITY)


def _default_measure_storage() -> StorageConfig:
    return StorageConfig(get_storage_location(".rings", "measure"), DEFAULT_STORAGE_CAPACITY)


def _default_backend() -> list[HiddenServerConfig]:
    return [HiddenServerConfig(name="ipfs", prefix="ipfs://")]


def _expand_home(path: str | os.PathLike[str], kind: ErrorKind) -> Path:
    path = Path(path)
    if path.parts and path.parts[0] == "~":
        home = os.environ.get("HOME")
        if home is None:
            raise NodeError(kind, "HOME is not set")
        return Path(home).joinpath(*path.parts[1:])
    return path


@dataclass
class Config:
    """Settings of a node. ``http_addr`` is stored under the key ``bind``."""

    ecdsa_key: str
    http_addr: str = DEFAULT_BIND_ADDRESS
    endpoint_url: str = DEFAULT_ENDPOINT_URL
    ice_servers: str = DEFAULT_ICE_SERVERS
    stabilize_timeout: int = DEFAULT_STABILIZE_TIMEOUT
    external_ip: str | None = None
    backend: list[HiddenServerConfig] = field(default_factory=_default_backend)
    data_storage: StorageConfig = field(default_factory=_default_data_storage)
    measure_storage: StorageConfig = field(default_factory=_default_measure_storage)

    @classmethod
    def new_with_key(cls, key: str) -> "Config":
        """Return the default configuration using secret key ``key``."""
        return cls(ecdsa_key=key)

    @classmethod
    def generate(cls) -> "Config":
        """Return the default configuration with a freshly generated key."""
        return cls.new_with_key(secrets.token_hex(32))

    def _to_dict(self) -> dict[str, Any]:
        return {
            "bind": self.http_addr,
            "endpoint_url": self.endpoint_url,
            "ecdsa_key": self.ecdsa_key,
            "ice_servers": self.ice_servers,
            "stabilize_timeout": self.stabilize_timeout,
            "external_ip": self.external_ip,
            "backend": [item._to_dict() for item in self.backend],
            "data_storage": self.data_storage._to_dict(),
            "measure_storage": self.measure_storage._to_dict(),
        }

    @classmethod
    def _from_dict(cls, data: Any) -> "Config":
        _require(isinstance(data, dict))
        timeout = data.get("stabilize_timeout")
        _require(_is_count(timeout))
        external_ip = data.get("external_ip")
        _require(external_ip is None or isinstance(external_ip, str))
        backend = data.get("backend")
        _require(isinstance(backend, list))
        return cls(
            ecdsa_key=_require_str(data, "ecdsa_key"),
            http_addr=_require_str(data, "bind"),
            endpoint_url=_require_str(data, "endpoint_url"),
            ice_servers=_require_str(data, "ice_servers"),
            stabilize_timeout=timeout,
            external_ip=external_ip,
            backend=[HiddenServerConfig._from_dict(item) for item in backend],
            data_storage=StorageConfig._from_dict(data.get("data_storage")),
            measure_storage=StorageConfig._from_dict(data.get("measure_storage")),
        )

    def write_fs(self, path: str | os.PathLike[str]) -> str:
        """Write the configuration as YAML to ``path``; return the path written."""
        target = _expand_home(path, ErrorKind.CREATE_FILE_ERROR)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with target.open("w", encoding="utf-8") as fh:
                try:
                    yaml.safe_dump(self._to_dict(), fh, sort_keys=False)
                except yaml.YAMLError:
                    raise NodeError(ErrorKind.SERIALIZE_ERROR) from None
        except OSError as exc:
            raise NodeError(ErrorKind.CREATE_FILE_ERROR, str(exc)) from exc
        return str(target)

    @classmethod
    def read_fs(cls, path: str | os.PathLike[str]) -> "Config":
        """Read a configuration from the YAML file at ``path``."""
        source = _expand_home(path, ErrorKind.OPEN_FILE_ERROR)
        try:
            with source.open("r", encoding="utf-8") as fh:
                try:
                    data = yaml.safe_load(fh)
                except yaml.YAMLError:
                    raise NodeError(ErrorKind.DESERIALIZE_ERROR) from None
        except OSError as exc:
            raise NodeError(ErrorKind.OPEN_FILE_ERROR, str(exc)) from exc
        return cls._from_dict(data)