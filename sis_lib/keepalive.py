"""
sis_lib/keepalive.py

Periodic idle poll that keeps a device connection from timing out.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from .const import UNKNOWN_SENTINEL
from .handlers.common import is_device_error
from .redact import redact_session_key

logger = logging.getLogger(__name__)

PollFn = Callable[[str, str], str]
FailureFn = Callable[[str, str], None]


class KeepalivePoller:
    """
    One background thread per session issuing ``command`` every ``interval_s``.

    The thread exits only when its stop event is set.
    """

    def __init__(
        self,
        session_key: str,
        *,
        poll: PollFn,
        on_failure: FailureFn,
        interval_s: float,
        command: str,
    ) -> None:
        self.session_key = session_key
        self.interval_s = interval_s
        self.command = command
        self._poll = poll
        self._on_failure = on_failure
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self.polls = 0

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive() and not self._stop.is_set()

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(
            target=self._run,
            args=(self._stop,),
            name=f"sis-keepalive-{redact_session_key(self.session_key)}",
            daemon=True,
        )
        self._thread.start()
        logger.info(
            "Keepalive started for %s with interval %ss",
            redact_session_key(self.session_key),
            self.interval_s,
        )

    def stop(self, *, join_timeout_s: float | None = None) -> None:
        self._stop.set()
        thread = self._thread
        if join_timeout_s is not None and thread is not None and thread is not threading.current_thread():
            thread.join(join_timeout_s)
        logger.info("Keepalive stopped for %s", redact_session_key(self.session_key))

    def poll_once(self) -> str:
        reply = self._poll(self.session_key, self.command)
        self.polls += 1
        if not reply or reply == UNKNOWN_SENTINEL or is_device_error(reply):
            self._on_failure(self.session_key, f"unexpected keepalive response: {reply}")
        return reply

    def _run(self, stop: threading.Event) -> None:
        while not stop.wait(self.interval_s):
            try:
                self.poll_once()
            except Exception as exc:
                logger.warning(
                    "Keepalive poll failed for %s: %s",
                    redact_session_key(self.session_key),
                    exc,
                )
                self._on_failure(self.session_key, f"keepalive failed: {exc}")


__all__ = ["KeepalivePoller"]
