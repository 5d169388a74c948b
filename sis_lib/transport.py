"""
sis_lib/transport.py

Capabilities the host supplies to the core.

The core never opens sockets. The host owns connection setup and hands the
core a Transport keyed by session key, plus an ErrorSink for per-session
error history.
"""

from __future__ import annotations

import threading
from collections import deque
from typing import Deque, Dict, Protocol, runtime_checkable

from .const import DEFAULT_ERROR_HISTORY


@runtime_checkable
class Transport(Protocol):
    def read_line(self, session_key: str) -> str:
        """Return one reply line. May raise OSError on failure."""
        ...

    def write_line(self, session_key: str, line: str) -> bool:
        """Send one command line; False means the write failed."""
        ...

    def is_connected(self, session_key: str) -> bool:
        ...

    def protocol(self, session_key: str) -> str:
        """"telnet", "ssh" or "serial"."""
        ...


@runtime_checkable
class ErrorSink(Protocol):
    def add_error(self, session_key: str, message: str) -> None:
        ...


class ErrorLog:
    """Bounded in-memory error history per session key."""

    def __init__(self, maxlen: int = DEFAULT_ERROR_HISTORY) -> None:
        self._maxlen = maxlen
        self._lock = threading.Lock()
        self._errors: Dict[str, Deque[str]] = {}

    def add_error(self, session_key: str, message: str) -> None:
        with self._lock:
            history = self._errors.get(session_key)
            if history is None:
                history = deque(maxlen=self._maxlen)
                self._errors[session_key] = history
            history.append(message)

    def errors_for(self, session_key: str) -> list[str]:
        with self._lock:
            return list(self._errors.get(session_key, ()))

    def forget(self, session_key: str) -> None:
        with self._lock:
            self._errors.pop(session_key, None)


__all__ = ["ErrorLog", "ErrorSink", "Transport"]
