"""Public types for sis_lib."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from .const import (
    DEFAULT_ERROR_HISTORY,
    DEFAULT_KEEPALIVE_INTERVAL_S,
    DEFAULT_RETRY_ATTEMPTS,
    DEFAULT_RETRY_INTERVAL_S,
    KEEPALIVE_COMMAND,
    LOGIN_MAX_LINES,
)


class DeviceCategory(str, Enum):
    """Coarse hardware class derived from the model description."""

    AUDIO_PROCESSOR = "Audio Processor"
    MATRIX_SWITCHER = "Matrix Switcher"
    SCALER = "Scaler"
    SWITCHER = "Switcher"
    DISTRIBUTION_AMPLIFIER = "Distribution Amplifier"
    COLLABORATION = "Collaboration System"
    STREAMING_MEDIA = "Streaming Media"
    POWER_CONTROLLER = "Power Controller"
    UNKNOWN = "unknown"


class Method(str, Enum):
    GET = "GET"
    SET = "SET"

    @classmethod
    def parse(cls, value: "Method | str") -> "Method":
        if isinstance(value, Method):
            return value
        return cls(str(value).strip().upper())


@dataclass(frozen=True, slots=True)
class ClientConfig:
    """
    Immutable client configuration.

    Provided once at construction time and treated as read-only thereafter.
    """

    retry_attempts: int = DEFAULT_RETRY_ATTEMPTS
    retry_interval_s: float = DEFAULT_RETRY_INTERVAL_S
    keepalive_enabled: bool = True
    keepalive_interval_s: float = DEFAULT_KEEPALIVE_INTERVAL_S
    keepalive_command: str = KEEPALIVE_COMMAND
    login_max_lines: int = LOGIN_MAX_LINES
    ssh_per_command: bool = False  # host opens a fresh SSH channel per command
    error_history: int = DEFAULT_ERROR_HISTORY

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ClientConfig":
        """Build a config from host-supplied options, validating each field."""
        from .validation import validate_client_options

        return cls(**validate_client_options(data))


__all__ = ["ClientConfig", "DeviceCategory", "Method"]
