"""Redaction helpers for logs and diagnostics."""

from __future__ import annotations

from typing import Any, Mapping

REDACTED = "***"
_SENSITIVE_KEYS = frozenset({"password", "passphrase", "credentials", "secret", "token"})


def parse_password(session_key: str) -> str:
    """
    Extract the password from a "user:password@host" style key.

    Returns "" unless the key has exactly one "@" and the part before it has
    exactly one ":".
    """
    if session_key.count("@") != 1:
        return ""
    credentials = session_key.split("@", 1)[0]
    if credentials.count(":") != 1:
        return ""
    return credentials.split(":", 1)[1]


def redact_session_key(session_key: str) -> str:
    password = parse_password(session_key)
    if not password:
        return session_key
    credentials, host = session_key.split("@", 1)
    user = credentials.split(":", 1)[0]
    return f"{user}:{REDACTED}@{host}"


def redact_for_diagnostics(data: Any) -> Any:
    """Return a copy of ``data`` with credential-like values masked."""
    if isinstance(data, Mapping):
        out: dict[str, Any] = {}
        for key, value in data.items():
            name = str(key)
            if name.lower() in _SENSITIVE_KEYS:
                out[name] = REDACTED
            elif name.lower() == "session_key" and isinstance(value, str):
                out[name] = redact_session_key(value)
            else:
                out[name] = redact_for_diagnostics(value)
        return out
    if isinstance(data, (list, tuple)):
        return [redact_for_diagnostics(item) for item in data]
    return data


__all__ = ["parse_password", "redact_for_diagnostics", "redact_session_key"]
