"""
sis_lib/client.py

Stable client API for hosts.

Responsibilities:
- Route (endpoint, method, session key, up to three args) to a registered handler.
- Classify devices lazily and cache the result per session.
- Wrap every exchange in the bounded retry loop.
- Start keepalive pollers lazily after successful commands.
- Normalize every failure into a typed SisError at the boundary.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

from .catalog import resolve_command
from .const import MODEL_DESCRIPTION_QUERY, PROTOCOL_SSH, UNKNOWN_SENTINEL
from .errors import (
    SisArgumentError,
    SisDeviceError,
    SisError,
    SisErrorContext,
    SisLoginError,
    SisTransportError,
    SisUnsupportedCombination,
)
from .handlers.common import format_value, is_device_error
from .keepalive import KeepalivePoller
from .redact import redact_session_key
from .registry import EndpointRegistry, build_registry
from .session import Session, SessionState
from .store import SessionStore
from .transport import ErrorLog, ErrorSink, Transport
from .types import ClientConfig, DeviceCategory, Method

logger = logging.getLogger(__name__)

T = TypeVar("T")

OK = "ok"


@dataclass(frozen=True, slots=True)
class Result(Generic[T]):
    ok: bool
    data: Optional[T] = None
    error: Optional[SisError] = None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(ok=True, data=value, error=None)

    @classmethod
    def failure(cls, error: SisError) -> "Result[T]":
        return cls(ok=False, data=None, error=error)

    def unwrap(self) -> T:
        if self.ok:
            return self.data  # type: ignore[return-value]
        if self.error is not None:
            raise self.error
        raise SisError("Unknown error.")


_CLIENT_EXCEPTIONS = (
    SisError,
    OSError,
    TimeoutError,
    ValueError,
    TypeError,
    KeyError,
)


def _normalize_error(exc: BaseException) -> SisError:
    if isinstance(exc, SisError):
        return exc
    if isinstance(exc, (OSError, TimeoutError)):
        return SisTransportError(str(exc) or type(exc).__name__, cause=exc)
    if isinstance(exc, (ValueError, TypeError, KeyError)):
        return SisArgumentError(str(exc) or type(exc).__name__, cause=exc)
    return SisError(str(exc) or type(exc).__name__, cause=exc)


class RequestContext:
    """Per-request view of one session handed to endpoint handlers."""

    def __init__(self, client: "SisClient", session_key: str, endpoint: str) -> None:
        self._client = client
        self.session_key = session_key
        self.endpoint = endpoint
        self.session = client.session(session_key)

    def category(self) -> DeviceCategory:
        return self._client.device_category(self.session_key)

    @property
    def model(self) -> Optional[str]:
        """Banner model if already known; never touches the wire."""
        return self.session.model

    def find_model(self) -> str:
        model = self.session.ensure_model()
        if not model and self.session.state is SessionState.DISCONNECTED:
            raise SisLoginError(f"login failed for {redact_session_key(self.session_key)}")
        if not model:
            raise SisUnsupportedCombination(
                f"model name not found for {redact_session_key(self.session_key)}"
            )
        return model

    def command(self, endpoint: str, method: Method, *args: str) -> str:
        return self.send(resolve_command(endpoint, method, self.category(), *args))

    def send(self, command: str) -> str:
        reply = self._client.send_command(self.session_key, command)
        if reply == UNKNOWN_SENTINEL:
            raise SisTransportError(f"no reply for {self.endpoint}: max retries reached")
        if is_device_error(reply):
            raise SisDeviceError(reply, reply=reply)
        return reply


class SisClient:
    """
    Protocol-translation facade over host-owned connections.

    Typical usage:
        client = SisClient(transport)
        value, err = client.dispatch("videoroute", "GET", "admin:pw@10.0.0.5", "1")
    """

    def __init__(
        self,
        transport: Transport,
        config: ClientConfig | None = None,
        *,
        sink: ErrorSink | None = None,
        registry: EndpointRegistry | None = None,
        sleep: Callable[[float], None] = time.sleep,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.cfg = config or ClientConfig()
        self._log = logger or logging.getLogger(__name__)
        self._transport = transport
        self._sink: ErrorSink = sink if sink is not None else ErrorLog(self.cfg.error_history)
        self._sleep = sleep
        self._registry = registry if registry is not None else build_registry()
        self._registry.validate()
        self._store = SessionStore(self._new_session, keepalive_enabled=self.cfg.keepalive_enabled)

    # --------------------------
    # Sessions
    # --------------------------

    @property
    def registry(self) -> EndpointRegistry:
        return self._registry

    @property
    def sink(self) -> ErrorSink:
        return self._sink

    @property
    def store(self) -> SessionStore:
        return self._store

    def _new_session(self, session_key: str) -> Session:
        return Session(session_key, self._transport, sink=self._sink, config=self.cfg)

    def session(self, session_key: str) -> Session:
        return self._store.get(session_key)

    def close_session(self, session_key: str) -> bool:
        """Host tore down the connection: stop polling and forget cached facts."""
        session = self._store.peek(session_key)
        if session is not None:
            session.mark_disconnected()
        removed = self._store.drop(session_key)
        if isinstance(self._sink, ErrorLog):
            self._sink.forget(session_key)
        if removed:
            self._log.info("Session closed for %s", redact_session_key(session_key))
        return removed

    # --------------------------
    # Command execution
    # --------------------------

    def _with_retry(self, session_key: str, attempt: Callable[[], str]) -> str:
        attempts = max(1, self.cfg.retry_attempts)
        reply = UNKNOWN_SENTINEL
        for n in range(1, attempts + 1):
            reply = attempt()
            if reply != UNKNOWN_SENTINEL:
                return reply
            if n < attempts:
                self._log.warning(
                    "Retrying command for %s (attempt %d of %d)",
                    redact_session_key(session_key),
                    n + 1,
                    attempts,
                )
                self._sleep(self.cfg.retry_interval_s)
        self._log.warning("Max retries reached for %s", redact_session_key(session_key))
        self._sink.add_error(session_key, "max retries reached")
        return reply

    def send_command(self, session_key: str, command: str) -> str:
        """Send one command with retry; returns UNKNOWN_SENTINEL when exhausted."""
        session = self.session(session_key)
        reply = self._with_retry(session_key, lambda: session.exchange(command))
        if reply != UNKNOWN_SENTINEL:
            self._maybe_start_keepalive(session_key)
        return reply

    def device_category(self, session_key: str) -> DeviceCategory:
        session = self.session(session_key)
        if session.category is not None:
            return session.category
        reply = self._with_retry(
            session_key, lambda: session.classify_once(MODEL_DESCRIPTION_QUERY)
        )
        if session.category is not None:
            self._maybe_start_keepalive(session_key)
            return session.category
        if reply == UNKNOWN_SENTINEL:
            raise SisTransportError("error getting device type: max retries reached")
        raise SisDeviceError(f"error getting device type: {reply}", reply=reply)

    # --------------------------
    # Keepalive
    # --------------------------

    def _maybe_start_keepalive(self, session_key: str) -> None:
        if not self._store.keepalive_enabled:
            return
        if self.cfg.ssh_per_command and str(self._transport.protocol(session_key)).lower() == PROTOCOL_SSH:
            return
        self._store.ensure_poller(session_key, self._new_poller)

    def _new_poller(self, session_key: str) -> KeepalivePoller:
        return KeepalivePoller(
            session_key,
            poll=self._keepalive_poll,
            on_failure=self._sink.add_error,
            interval_s=self.cfg.keepalive_interval_s,
            command=self.cfg.keepalive_command,
        )

    def _keepalive_poll(self, session_key: str, command: str) -> str:
        session = self._store.peek(session_key)
        if session is None:
            return UNKNOWN_SENTINEL
        return self._with_retry(session_key, lambda: session.exchange(command))

    def stop_keepalive(self, session_key: str) -> bool:
        return self._store.stop_poller(session_key)

    def stop_all_keepalive_polling(self) -> str:
        stopped = self._store.stop_all_pollers()
        self._log.info("Stopped %d keepalive poller(s); polling disabled", stopped)
        return OK

    def restart_keepalive_polling(self) -> str:
        self._store.enable_pollers()
        self._log.info("Keepalive polling will resume on the next command per device")
        return OK

    # --------------------------
    # Dispatch
    # --------------------------

    def endpoints(self, method: Method | str) -> list[str]:
        return self._registry.names(Method.parse(method))

    def execute(
        self,
        endpoint: str,
        method: Method | str,
        session_key: str,
        arg1: str = "",
        arg2: str = "",
        arg3: str = "",
    ) -> Result[str]:
        phase = str(method)
        try:
            try:
                parsed = Method.parse(method)
            except ValueError as exc:
                raise SisArgumentError(f"invalid method: {method}", cause=exc) from exc
            phase = parsed.value
            spec = self._registry.get(endpoint, parsed)
            ctx = RequestContext(self, session_key, endpoint)
            text = format_value(spec.handler(ctx, arg1, arg2, arg3))
            if text == UNKNOWN_SENTINEL:
                raise SisTransportError(f"no reply for {endpoint}")
            return Result.success(text)
        except _CLIENT_EXCEPTIONS as exc:
            err = _normalize_error(exc)
            if err.context is None:
                err.context = SisErrorContext(
                    session_key=redact_session_key(session_key),
                    endpoint=endpoint,
                    phase=phase,
                )
            self._log.warning(
                "%s %s failed for %s: %s",
                phase,
                endpoint,
                redact_session_key(session_key),
                err,
            )
            self._sink.add_error(session_key, f"{phase} {endpoint}: {err}")
            return Result.failure(err)

    def dispatch(
        self,
        endpoint: str,
        method: Method | str,
        session_key: str,
        arg1: str = "",
        arg2: str = "",
        arg3: str = "",
    ) -> tuple[str, Optional[SisError]]:
        """String boundary: (value, None) on success, (message, error) otherwise."""
        result = self.execute(endpoint, method, session_key, arg1, arg2, arg3)
        if result.ok:
            return result.data or "", None
        error = result.error or SisError("Unknown error.")
        return str(error), error

    def diagnostics(self) -> dict[str, Any]:
        from .diagnostics import build_diagnostics

        return build_diagnostics(self)


__all__ = ["RequestContext", "Result", "SisClient"]
