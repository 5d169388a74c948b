"""
sis_lib/handlers/common.py

Shared reply helpers for the decoders.
"""

from __future__ import annotations

import re
from typing import Optional, Union

from sis_lib.const import DEVICE_ERROR_CODES, ERROR_MARKER
from sis_lib.errors import SisDeviceError

Value = Union[bool, int, str]

_GROUP_ECHO = re.compile(r"^GrpmD(\d+)\*([+-]?\d+)$")
_KNOWN_ERROR_PREFIX = f"device returned {ERROR_MARKER}: "
_UNKNOWN_ERROR_PREFIX = f"Device returned unknown {ERROR_MARKER} code: "


def unquote(reply: str) -> str:
    """Strip one leading and one trailing double quote."""
    if reply.startswith('"'):
        reply = reply[1:]
    if reply.endswith('"'):
        reply = reply[:-1]
    return reply


def last_non_empty_line(output: str) -> str:
    for line in reversed(output.replace("\r\n", "\n").split("\n")):
        trimmed = line.strip()
        if trimmed:
            return trimmed
    return ""


def fold_device_error(reply: str) -> Optional[str]:
    """Return an error-flagged message when ``reply`` is a device error code."""
    code = reply.strip().strip('"')
    message = DEVICE_ERROR_CODES.get(code)
    if message is not None:
        return f"{_KNOWN_ERROR_PREFIX}{code}: {message}"
    if len(code) == 3 and code.startswith("E"):
        return f"{_UNKNOWN_ERROR_PREFIX}{code}"
    return None


def is_device_error(reply: str) -> bool:
    """True only for replies produced by fold_device_error."""
    return reply.startswith((_KNOWN_ERROR_PREFIX, _UNKNOWN_ERROR_PREFIX))


def is_error_reply(reply: str) -> bool:
    """Loose marker check for set echoes."""
    return ERROR_MARKER in reply


def decode_flag(char: str) -> bool:
    if char == "1":
        return True
    if char == "0":
        return False
    raise SisDeviceError(f"can't cast to 'true' or 'false': {char!r}", reply=char)


def decode_mute_char(char: str) -> bool:
    """0 unmuted, 1 muted, 2 video and sync muted."""
    if char in ("1", "2"):
        return True
    if char == "0":
        return False
    raise SisDeviceError(f"invalid mute state: {char!r}", reply=char)


def strip_group_echo(reply: str, group: Optional[str] = None) -> str:
    """Reduce "GrpmD<group>*<value>" to <value>; other replies pass through."""
    match = _GROUP_ECHO.match(reply.strip())
    if match is None:
        return reply.strip()
    if group is not None and match.group(1) != group:
        raise SisDeviceError(f"reply for group {match.group(1)}, expected {group}: {reply}", reply=reply)
    return match.group(2)


def format_value(value: Value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
