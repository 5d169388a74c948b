"""
sis_lib: SIS protocol translation for AV switching hardware.

Turns (endpoint, method, args) requests into device command lines and decodes
the replies, over connections owned by the host.
"""

from __future__ import annotations

from .client import RequestContext, Result, SisClient
from .errors import (
    SisArgumentError,
    SisDeviceError,
    SisError,
    SisErrorContext,
    SisLoginError,
    SisNotImplemented,
    SisTransportError,
    SisUnexpectedReply,
    SisUnsupportedCombination,
)
from .mixpoint import MixTable, calculate_mix_point
from .redact import redact_for_diagnostics
from .session import Session, SessionState
from .transport import ErrorLog, ErrorSink, Transport
from .types import ClientConfig, DeviceCategory, Method
from .volume import to_device_units, to_percent

__all__ = [
    "ClientConfig",
    "DeviceCategory",
    "ErrorLog",
    "ErrorSink",
    "Method",
    "MixTable",
    "RequestContext",
    "Result",
    "Session",
    "SessionState",
    "SisArgumentError",
    "SisClient",
    "SisDeviceError",
    "SisError",
    "SisErrorContext",
    "SisLoginError",
    "SisNotImplemented",
    "SisTransportError",
    "SisUnexpectedReply",
    "SisUnsupportedCombination",
    "Transport",
    "calculate_mix_point",
    "redact_for_diagnostics",
    "to_device_units",
    "to_percent",
]
