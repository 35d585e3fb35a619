"""Logging setup for the node: stderr output and an exception hook."""

from __future__ import annotations

import logging
import sys
import traceback
from enum import Enum
from types import TracebackType

log = logging.getLogger(__name__)

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

_MDNS_TARGET = "webrtc_mdns.conn"
_MDNS_NOISY_LINES = frozenset({276, 322})


class LogLevel(Enum):
    """Log levels selectable on the command line."""

    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    TRACE = "trace"

    def to_logging_level(self) -> int:
        """Return the matching level of the logging module."""
        return {
            LogLevel.TRACE: TRACE,
            LogLevel.DEBUG: logging.DEBUG,
            LogLevel.INFO: logging.INFO,
            LogLevel.WARN: logging.WARNING,
            LogLevel.ERROR: logging.ERROR,
        }[self]


def _log_exception(
    exc_type: type[BaseException],
    exc: BaseException,
    tb: TracebackType | None,
) -> None:
    frames = traceback.extract_tb(tb) if tb is not None else []
    extra = {}
    if frames:
        last = frames[-1]
        extra = {
            "panic_file": last.filename,
            "panic_line": last.lineno,
            "panic_column": getattr(last, "colno", None),
        }
    log.error("%s", exc, extra=extra, exc_info=(exc_type, exc, tb))


def install_exception_hook() -> None:
    """Record uncaught exceptions as error log events."""
    sys.excepthook = _log_exception


class _MdnsFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        return not (
            record.name.startswith(_MDNS_TARGET) and record.lineno in _MDNS_NOISY_LINES
        )


class _StderrHandler(logging.StreamHandler):
    pass


def init_logging(level: LogLevel | int) -> logging.Handler:
    """Install the exception hook and a stderr handler at ``level``.

    The first call wins: if a handler is already installed, it is returned unchanged.
    """
    install_exception_hook()
    root = logging.getLogger()
    for handler in root.handlers:
        if isinstance(handler, _StderrHandler):
            return handler

    numeric = level.to_logging_level() if isinstance(level, LogLevel) else int(level)
    handler = _StderrHandler(sys.stderr)
    handler.setLevel(numeric)
    handler.addFilter(_MdnsFilter())
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    root.addHandler(handler)
    if root.level == logging.NOTSET or root.level > numeric:
        root.setLevel(numeric)
    return handler