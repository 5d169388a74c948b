"""
sis_lib/errors.py

Typed failures raised by the core and normalized at the client boundary.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class SisErrorContext:
    session_key: Optional[str] = None
    endpoint: Optional[str] = None
    phase: Optional[str] = None
    detail: Optional[str] = None


class SisError(Exception):
    """Base exception for every failure surfaced by sis_lib."""

    def __init__(
        self,
        message: str,
        *,
        context: SisErrorContext | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.context = context
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return self.message


class SisArgumentError(SisError):
    """Malformed caller input: bad token, non-numeric port, bad state."""


class SisUnsupportedCombination(SisError):
    """No template or map exists for the requested endpoint/device pairing."""


class SisNotImplemented(SisUnsupportedCombination):
    """Endpoint is part of the public surface but has no device behaviour."""


class SisTransportError(SisError):
    """Read/write failed or retries were exhausted."""


class SisLoginError(SisTransportError):
    """Login negotiation did not reach the ready state."""


class SisDeviceError(SisError):
    """Device reported an error code or replied outside the expected shape."""

    def __init__(self, message: str, *, reply: str = "", **kwargs) -> None:
        super().__init__(message, **kwargs)
        self.reply = reply


class SisUnexpectedReply(SisError):
    """Set reply matched neither the success echo nor an error marker."""

    def __init__(self, reply: str, **kwargs) -> None:
        super().__init__(f"unknown response: {reply}", **kwargs)
        self.reply = reply


__all__ = [
    "SisArgumentError",
    "SisDeviceError",
    "SisError",
    "SisErrorContext",
    "SisLoginError",
    "SisNotImplemented",
    "SisTransportError",
    "SisUnexpectedReply",
    "SisUnsupportedCombination",
]
