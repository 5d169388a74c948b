"""Diagnostics export for sis_lib clients."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import fields, is_dataclass
import enum
from typing import TYPE_CHECKING, Any

from .redact import redact_for_diagnostics
from .transport import ErrorLog

if TYPE_CHECKING:
    from .client import SisClient


def build_diagnostics(client: "SisClient") -> dict[str, Any]:
    """Return a JSON-safe snapshot of every live session."""
    store = client.store
    running = set(store.running_pollers())
    sessions = []
    for key in store.keys():
        session = store.peek(key)
        if session is None:
            continue
        entry: dict[str, Any] = {
            "session_key": key,
            "state": session.state,
            "record": session.record,
            "keepalive_running": key in running,
            "last_error": session.last_error,
        }
        if isinstance(client.sink, ErrorLog):
            entry["recent_errors"] = client.sink.errors_for(key)
        sessions.append(entry)

    data = {
        "config": client.cfg,
        "keepalive_enabled": store.keepalive_enabled,
        "endpoints": {
            "GET": client.endpoints("GET"),
            "SET": client.endpoints("SET"),
        },
        "sessions": sessions,
    }
    return redact_for_diagnostics(_to_jsonable(data))


def _to_jsonable(value: Any) -> Any:
    """Normalize snapshots to JSON-safe types."""
    if value is None:
        return None
    if is_dataclass(value) and not isinstance(value, type):
        return {
            field.name: _to_jsonable(getattr(value, field.name))
            for field in fields(value)
        }
    if isinstance(value, Mapping):
        return {str(key): _to_jsonable(val) for key, val in value.items()}
    if isinstance(value, list | tuple):
        return [_to_jsonable(item) for item in value]
    if isinstance(value, set | frozenset):
        return sorted([_to_jsonable(item) for item in value], key=str)
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, (str, int, float, bool)):
        return value
    return str(value)
