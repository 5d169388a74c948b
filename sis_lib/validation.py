"""
sis_lib/validation.py

voluptuous schemas for host options and endpoint arguments.

vol.Invalid never escapes this module; callers receive SisArgumentError.
"""

from __future__ import annotations

from typing import Any, Mapping

import voluptuous as vol

from .errors import SisArgumentError


def strip_quotes(value: Any) -> str:
    """Drop surrounding whitespace and double quotes from a caller token."""
    return str(value).strip().strip('"').strip()


def _state_flag(value: Any) -> bool:
    text = strip_quotes(value).lower()
    if text in ("", "null"):
        raise vol.Invalid("state is required")
    if "false" in text:
        return False
    if "true" in text:
        return True
    raise vol.Invalid(f"state must be true or false, got {value!r}")


def _numeric(value: Any) -> int:
    text = strip_quotes(value)
    if text == "":
        raise vol.Invalid("value is required")
    try:
        return int(text)
    except ValueError as exc:
        raise vol.Invalid(f"not a number: {value!r}") from exc


STATE_SCHEMA = vol.Schema(_state_flag)
LEVEL_SCHEMA = vol.Schema(_numeric)
PORT_SCHEMA = vol.Schema(vol.All(strip_quotes, vol.Length(min=1, msg="port is required")))

CLIENT_OPTIONS_SCHEMA = vol.Schema(
    {
        vol.Optional("retry_attempts"): vol.All(vol.Coerce(int), vol.Range(min=1)),
        vol.Optional("retry_interval_s"): vol.All(vol.Coerce(float), vol.Range(min=0)),
        vol.Optional("keepalive_enabled"): vol.Boolean(),
        vol.Optional("keepalive_interval_s"): vol.All(vol.Coerce(float), vol.Range(min=0)),
        vol.Optional("keepalive_command"): vol.All(str, vol.Length(min=1)),
        vol.Optional("login_max_lines"): vol.All(vol.Coerce(int), vol.Range(min=1)),
        vol.Optional("ssh_per_command"): vol.Boolean(),
        vol.Optional("error_history"): vol.All(vol.Coerce(int), vol.Range(min=1)),
    }
)


def _run(schema: vol.Schema, value: Any, what: str) -> Any:
    try:
        return schema(value)
    except vol.Invalid as exc:
        raise SisArgumentError(f"invalid {what}: {exc.msg}", cause=exc) from exc


def parse_state(value: Any) -> bool:
    return _run(STATE_SCHEMA, value, "state")


def parse_level(value: Any) -> int:
    return _run(LEVEL_SCHEMA, value, "level")


def parse_port(value: Any) -> str:
    return _run(PORT_SCHEMA, value, "port")


def validate_client_options(data: Mapping[str, Any]) -> dict[str, Any]:
    return dict(_run(CLIENT_OPTIONS_SCHEMA, dict(data), "client options"))


__all__ = [
    "CLIENT_OPTIONS_SCHEMA",
    "parse_level",
    "parse_port",
    "parse_state",
    "strip_quotes",
    "validate_client_options",
]
