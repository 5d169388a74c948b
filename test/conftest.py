from __future__ import annotations

import threading
from collections import deque
from typing import Callable, Iterable, Mapping, Optional

import pytest

from sis_lib import ClientConfig, SisClient

KEY = "admin:secret@10.0.0.5"


class FakeTransport:
    """Scripted host transport.

    Reads come from replies queued by ``responder`` (per written command)
    first, then from the ``lines`` script.
    """

    def __init__(
        self,
        lines: Iterable[str] = (),
        *,
        responder: Optional[Callable[[str], Optional[str]]] = None,
        replies: Optional[Mapping[str, str]] = None,
        connected: bool = True,
        protocol: str = "telnet",
        connect_on_read: bool = False,
    ) -> None:
        self.lines = deque(lines)
        self.pending: deque[str] = deque()
        self.written: list[str] = []
        self.connected = connected
        self._protocol = protocol
        self.connect_on_read = connect_on_read
        self.write_ok = True
        self.read_failures = 0
        self.reads = 0
        self._lock = threading.Lock()
        if responder is None and replies is not None:
            responder = lambda line: replies.get(line)  # noqa: E731
        self.responder = responder

    def read_line(self, session_key: str) -> str:
        with self._lock:
            self.reads += 1
            if self.connect_on_read:
                self.connected = True
            if self.read_failures > 0:
                self.read_failures -= 1
                raise OSError("connection reset")
            if self.pending:
                return self.pending.popleft()
            if self.lines:
                return self.lines.popleft()
            return ""

    def write_line(self, session_key: str, line: str) -> bool:
        with self._lock:
            self.written.append(line)
            if not self.write_ok:
                return False
            if self.responder is not None:
                reply = self.responder(line)
                if reply is not None:
                    self.pending.append(reply)
            return True

    def is_connected(self, session_key: str) -> bool:
        return self.connected

    def protocol(self, session_key: str) -> str:
        return self._protocol


class RecordingSink:
    def __init__(self) -> None:
        self.errors: list[tuple[str, str]] = []

    def add_error(self, session_key: str, message: str) -> None:
        self.errors.append((session_key, message))

    def messages(self) -> list[str]:
        return [message for _, message in self.errors]


def make_client(transport: FakeTransport, sink: RecordingSink | None = None, **overrides) -> SisClient:
    options = {"retry_interval_s": 0.0, "keepalive_enabled": False}
    options.update(overrides)
    return SisClient(
        transport,
        ClientConfig(**options),
        sink=sink,
        sleep=lambda _s: None,
    )


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()
