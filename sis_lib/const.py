"""
sis_lib/const.py

Wire-level constants shared by the session, catalog and decoders.
"""

from __future__ import annotations

from typing import Final, Mapping

ESC: Final = "\x1b"
CR: Final = "\r"

# Reserved retry signal. Replies are unquoted before they leave the session,
# so a quoted value can never collide with a genuine device answer.
UNKNOWN_SENTINEL: Final = '"unknown"'

# Every folded device error carries this marker; set handlers test for it.
ERROR_MARKER: Final = "error"

MODEL_DESCRIPTION_QUERY: Final = "2I\r"
KEEPALIVE_COMMAND: Final = "Q\r"

LOGIN_MAX_LINES: Final = 7
BANNER_COMMA_COUNT: Final = 4
BANNER_MODEL_FIELD: Final = 2
PASSWORD_PROMPT: Final = "Password:"
LOGIN_SUCCESS_PREFIX: Final = "Login"

PROTOCOL_SSH: Final = "ssh"

DEFAULT_RETRY_ATTEMPTS: Final = 2
DEFAULT_RETRY_INTERVAL_S: Final = 1.0
DEFAULT_KEEPALIVE_INTERVAL_S: Final = 30.0
KEEPALIVE_JOIN_TIMEOUT_S: Final = 1.0
DEFAULT_ERROR_HISTORY: Final = 50

DEVICE_ERROR_CODES: Final[Mapping[str, str]] = {
    "E01": "Invalid input number",
    "E06": "Invalid input during auto-input switching",
    "E10": "Invalid command",
    "E11": "Invalid preset number",
    "E12": "Invalid output or port number",
    "E13": "Invalid value / paramater",
    "E14": "Invalid command for this configuration",
    "E17": "Invalid command for signal type",
    "E18": "System timed out",
    "E22": "Busy",
    "E24": "Privilege violation",
    "E25": "Device not present",
    "E26": "Maximum number of connections exceeded",
    "E28": "Bad name or file not found",
    "E31": "Attempt to break port pass-through when not set",
    "E33": "Bad file type for logo",
    "E35": "User account does not exist",
}
