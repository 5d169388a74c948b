"""
sis_lib/session.py

SIS session: one logical connection to one device, keyed by session key.

Responsibilities:
- Serialize every write/read pair on the session behind one lock.
- Perform login negotiation when the host reports no live connection.
- Normalize replies: SSH last-line extraction, device error folding, quote stripping.
- Cache device category and model name, mutated only while the lock is held.

Non-responsibilities (explicit):
- Opening sockets (the host transport owns connection setup).
- Retrying (SisClient wraps exchanges in its retry loop).
- Keepalive scheduling (keepalive.KeepalivePoller).
"""

from __future__ import annotations

import logging
import threading
import time
from enum import Enum
from typing import Callable, Optional

from .classifier import categorize_device, parse_banner_model
from .const import (
    LOGIN_SUCCESS_PREFIX,
    PASSWORD_PROMPT,
    PROTOCOL_SSH,
    UNKNOWN_SENTINEL,
)
from .errors import SisTransportError
from .handlers.common import fold_device_error, is_device_error, last_non_empty_line, unquote
from .redact import parse_password, redact_session_key
from .states import SessionRecord
from .transport import ErrorSink, Transport
from .types import ClientConfig, DeviceCategory

logger = logging.getLogger(__name__)

_TRANSPORT_ERRORS = (OSError, SisTransportError)


class SessionState(str, Enum):
    """Connection lifecycle states.

    This is intentionally mechanical and policy-free.
    """

    DISCONNECTED = "disconnected"
    NEGOTIATING = "negotiating"
    READY = "ready"


class Session:
    """
    Serialized command channel for one session key.

    Typical usage:
        s = Session(key, transport, sink=errors, config=cfg)
        reply = s.exchange("Q\\r")      # UNKNOWN_SENTINEL on transport failure
    """

    def __init__(
        self,
        session_key: str,
        transport: Transport,
        *,
        sink: ErrorSink,
        config: ClientConfig | None = None,
        now: Callable[[], float] = time.monotonic,
    ) -> None:
        self.key = session_key
        self.cfg = config or ClientConfig()
        self._transport = transport
        self._sink = sink
        self._now = now
        self._lock = threading.Lock()
        self.record = SessionRecord(session_key=session_key)
        self.state: SessionState = SessionState.DISCONNECTED
        self.last_error: str | None = None

    @property
    def log_key(self) -> str:
        return redact_session_key(self.key)

    @property
    def category(self) -> Optional[DeviceCategory]:
        return self.record.category

    @property
    def model(self) -> Optional[str]:
        return self.record.model

    # --------------------------
    # Public command surface
    # --------------------------

    def exchange(self, command: str) -> str:
        """Write one command line and return its normalized reply."""
        with self._lock:
            return self._exchange_locked(command)

    def classify_once(self, query: str) -> str:
        """
        Query the model description and cache the category from the reply.

        A cached category short-circuits without touching the wire.
        """
        with self._lock:
            if self.record.category is not None:
                logger.debug("Device type for %s found in cache: %s", self.log_key, self.record.category.value)
                return self.record.model_description or ""
            reply = self._exchange_locked(query)
            if reply == UNKNOWN_SENTINEL or is_device_error(reply):
                return reply
            self.record.model_description = reply
            self.record.category = categorize_device(reply)
            logger.info("Device type for %s determined: %s", self.log_key, self.record.category.value)
            return reply

    def ensure_model(self) -> Optional[str]:
        """Return the banner model, logging in first when there is no connection."""
        with self._lock:
            if self.record.model is None:
                self._ensure_ready()
            return self.record.model

    def mark_disconnected(self) -> None:
        with self._lock:
            self.state = SessionState.DISCONNECTED

    # --------------------------
    # Internals (lock held)
    # --------------------------

    def _record_error(self, message: str) -> None:
        self.last_error = message
        self._sink.add_error(self.key, message)

    def _protocol(self) -> str:
        return str(self._transport.protocol(self.key) or "").lower()

    def _exchange_locked(self, command: str) -> str:
        if not self._ensure_ready():
            return UNKNOWN_SENTINEL

        try:
            sent = self._transport.write_line(self.key, command)
        except _TRANSPORT_ERRORS as exc:
            logger.warning("Write failed for %s: %s", self.log_key, exc)
            sent = False
        if not sent:
            self._record_error("error sending command")
            self.state = SessionState.DISCONNECTED
            return UNKNOWN_SENTINEL

        try:
            reply = self._transport.read_line(self.key)
        except _TRANSPORT_ERRORS as exc:
            self._record_error(f"error reading reply: {exc}")
            self.state = SessionState.DISCONNECTED
            return UNKNOWN_SENTINEL
        if reply is None:
            self._record_error("no reply from device")
            self.state = SessionState.DISCONNECTED
            return UNKNOWN_SENTINEL

        reply = reply.rstrip("\r\n")
        if self._protocol() == PROTOCOL_SSH:
            reply = last_non_empty_line(reply)

        device_error = fold_device_error(reply)
        if device_error is not None:
            self._record_error(device_error)
            reply = device_error

        self.record.commands_sent += 1
        self.record.last_reply_at = self._now()
        logger.debug("SIS %s: %r -> %r", self.log_key, command, reply)
        return unquote(reply)

    def _ensure_ready(self) -> bool:
        if self._transport.is_connected(self.key) or self._protocol() == PROTOCOL_SSH:
            self.state = SessionState.READY
            return True

        self.state = SessionState.NEGOTIATING
        if self._negotiate_login():
            self.state = SessionState.READY
            logger.info("Login negotiation complete for %s", self.log_key)
            return True

        self.state = SessionState.DISCONNECTED
        self._record_error("error logging in")
        return False

    def _negotiate_login(self) -> bool:
        """
        Walk the login dialogue for at most ``login_max_lines`` lines.

        The first four-comma line is the banner and carries the model name.
        """
        password = parse_password(self.key)
        logger.debug("Starting login negotiation for %s", self.log_key)

        for _ in range(self.cfg.login_max_lines):
            try:
                line = self._transport.read_line(self.key)
            except _TRANSPORT_ERRORS as exc:
                self._record_error(f"login read failed: {exc}")
                return False
            line = (line or "").rstrip("\r\n")

            if self.record.model is None:
                commas = line.count(",")
                model = parse_banner_model(line)
                if model is not None:
                    self.record.model = model
                    logger.info("Model name for %s: %s", self.log_key, model)
                # Always true; kept so every non-banner line is reported.
                elif commas != 1 or commas != 0:
                    self._record_error(f"does this line contain the model name? {line}")

            logger.debug("Negotiation from %s: %r", self.log_key, line)

            if not password:
                # TODO: walk the no-password dialogue (banner, date, blank line) instead of assuming success.
                self._record_error("unauthenticated login not implemented, please set a password")
                return True

            if PASSWORD_PROMPT in line:
                try:
                    sent = self._transport.write_line(self.key, password + "\r")
                except _TRANSPORT_ERRORS:
                    sent = False
                if not sent:
                    self._record_error("failed to send password")
                    return False
            if line.startswith(LOGIN_SUCCESS_PREFIX):
                logger.debug("Login accepted for %s, prompt %r", self.log_key, line)
                return True

        self._record_error(
            f"stopped login negotiation after {self.cfg.login_max_lines} lines"
        )
        return False


__all__ = ["Session", "SessionState"]
