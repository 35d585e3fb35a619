"""Periodic counters of messages sent to and received from peers."""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable

log = logging.getLogger(__name__)

PERIOD = 60 * 60


class MeasureCounter(Enum):
    """Kinds of peer behaviour that are counted."""

    SENT = "Sent"
    RECEIVED = "Received"


class JsonFileStorage:
    """A small persistent key-value store kept in one JSON file."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def _load(self) -> dict[str, Any]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError(f"storage file {self.path} does not hold an object")
        return data

    def get(self, key: str) -> Any:
        """Return the value stored under ``key``, or None."""
        with self._lock:
            return self._load().get(key)

    def put(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key`` and write the file."""
        with self._lock:
            data = self._load()
            data[key] = value
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(data, fh)
                os.replace(tmp, self.path)
            except BaseException:
                Path(tmp).unlink(missing_ok=True)
                raise


@dataclass
class _PeriodicCounter:
    period: float
    previous: float
    previous_count: int
    count: int = 0
    lock: threading.Lock = field(default_factory=threading.Lock)

    def refresh(self, now: float) -> bool:
        if now - self.previous < self.period:
            return False
        self.previous_count = self.count
        self.count = 0
        self.previous = now
        return True

    def barely_get(self) -> int:
        return self.count if self.previous_count == 0 else self.previous_count

    def incr(self, now: float) -> tuple[int, bool]:
        refreshed = self.refresh(now)
        self.count += 1
        return self.barely_get(), refreshed

    def get(self, now: float) -> tuple[int, bool]:
        refreshed = self.refresh(now)
        return self.barely_get(), refreshed


class PeriodicMeasure:
    """Counts sent and received messages of each peer per period.

    The reported count is the one of the previous period, or the running
    count while the previous period saw nothing.
    """

    def __init__(
        self,
        storage: JsonFileStorage,
        period: float = PERIOD,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.storage = storage
        self.period = period
        self._clock = clock
        self._counters: dict[tuple[str, MeasureCounter], _PeriodicCounter] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _storage_key(did: str, counter: MeasureCounter) -> str:
        return f"PeriodicMeasure/counters/{did}/{counter.value}"

    def _stored_count(self, did: str, counter: MeasureCounter) -> int:
        try:
            value = self.storage.get(self._storage_key(did, counter))
        except (OSError, ValueError) as exc:
            log.error("Failed to get counter: %r", exc)
            return 0
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        return 0

    def _ensure_counter(self, did: str, counter: MeasureCounter) -> _PeriodicCounter:
        with self._lock:
            entry = self._counters.get((did, counter))
            if entry is None:
                entry = _PeriodicCounter(
                    period=self.period,
                    previous=self._clock(),
                    previous_count=self._stored_count(did, counter),
                )
                self._counters[(did, counter)] = entry
            return entry

    def _save_counter(self, did: str, counter: MeasureCounter, count: int) -> None:
        try:
            self.storage.put(self._storage_key(did, counter), count)
        except (OSError, ValueError) as exc:
            log.error("Failed to save counter: %r", exc)

    def incr(self, did: str, counter: MeasureCounter) -> None:
        """Count one more event of kind ``counter`` for peer ``did``."""
        entry = self._ensure_counter(did, counter)
        with entry.lock:
            count, refreshed = entry.incr(self._clock())
        if refreshed:
            self._save_counter(did, counter, count)

    def get_count(self, did: str, counter: MeasureCounter) -> int:
        """Return the count of peer ``did`` for the previous period."""
        entry = self._ensure_counter(did, counter)
        with entry.lock:
            count, refreshed = entry.get(self._clock())
        if refreshed:
            self._save_counter(did, counter, count)
        return count