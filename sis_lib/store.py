"""
sis_lib/store.py

Registry of live sessions and their keepalive pollers.

All mutations of the two maps happen under the store lock. Session command
locks are never taken while the store lock is held.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Dict, Optional

from .const import KEEPALIVE_JOIN_TIMEOUT_S
from .keepalive import KeepalivePoller
from .redact import redact_session_key
from .session import Session

logger = logging.getLogger(__name__)

SessionFactory = Callable[[str], Session]
PollerFactory = Callable[[str], KeepalivePoller]


class SessionStore:
    def __init__(self, session_factory: SessionFactory, *, keepalive_enabled: bool = True) -> None:
        self._factory = session_factory
        self._lock = threading.Lock()
        self._sessions: Dict[str, Session] = {}
        self._pollers: Dict[str, KeepalivePoller] = {}
        self._keepalive_enabled = keepalive_enabled

    @property
    def keepalive_enabled(self) -> bool:
        return self._keepalive_enabled

    def get(self, session_key: str) -> Session:
        with self._lock:
            session = self._sessions.get(session_key)
            if session is None:
                session = self._factory(session_key)
                self._sessions[session_key] = session
                logger.debug("Created session for %s", redact_session_key(session_key))
            return session

    def peek(self, session_key: str) -> Optional[Session]:
        with self._lock:
            return self._sessions.get(session_key)

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._sessions)

    def drop(self, session_key: str) -> bool:
        """Forget a session and stop its poller, waiting briefly for an in-flight poll.

        True when something was removed.
        """
        with self._lock:
            session = self._sessions.pop(session_key, None)
            poller = self._pollers.pop(session_key, None)
        if poller is not None:
            poller.stop(join_timeout_s=KEEPALIVE_JOIN_TIMEOUT_S)
        return session is not None or poller is not None

    # --------------------------
    # Keepalive registry
    # --------------------------

    def ensure_poller(self, session_key: str, factory: PollerFactory) -> bool:
        """Start a poller for ``session_key`` unless one exists or polling is off."""
        with self._lock:
            if not self._keepalive_enabled or session_key in self._pollers:
                return False
            poller = factory(session_key)
            self._pollers[session_key] = poller
        poller.start()
        return True

    def poller(self, session_key: str) -> Optional[KeepalivePoller]:
        with self._lock:
            return self._pollers.get(session_key)

    def stop_poller(self, session_key: str) -> bool:
        with self._lock:
            poller = self._pollers.pop(session_key, None)
        if poller is None:
            return False
        poller.stop()
        return True

    def stop_all_pollers(self) -> int:
        """Stop every poller and disable lazy restarts."""
        with self._lock:
            self._keepalive_enabled = False
            pollers = list(self._pollers.values())
            self._pollers.clear()
        for poller in pollers:
            poller.stop()
        return len(pollers)

    def enable_pollers(self) -> None:
        """Re-enable lazy starts; pollers resume on the next command per session."""
        with self._lock:
            self._keepalive_enabled = True

    def running_pollers(self) -> list[str]:
        with self._lock:
            return [key for key, poller in self._pollers.items() if poller.running]
