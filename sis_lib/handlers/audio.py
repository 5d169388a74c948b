"""
sis_lib/handlers/audio.py

Decoders for DSP mix-point status and group volume replies.
"""

from __future__ import annotations

import re

from sis_lib.errors import SisArgumentError, SisDeviceError
from sis_lib.handlers.common import decode_flag, strip_group_echo
from sis_lib.volume import to_percent

MUTE_PREFIX = "DsM"
GAIN_PREFIX = "DsG"


def _mix_point_value(reply: str, prefix: str, address: str, value_pattern: str) -> str:
    reply = reply.strip()
    match = re.fullmatch(
        rf"(?:{prefix}{re.escape(address)}\*)?({value_pattern})",
        reply,
    )
    if match is None:
        raise SisDeviceError(f"invalid response for mix point {address}: {reply}", reply=reply)
    return match.group(1)


def decode_matrix_mute(reply: str, address: str) -> bool:
    """Accepts "DsM<address>*<0|1>" or the bare flag."""
    return decode_flag(_mix_point_value(reply, MUTE_PREFIX, address, "[01]"))


def decode_matrix_volume(reply: str, address: str) -> int:
    """Accepts "DsG<address>*<tenthsDb>" or the bare level; returns percent."""
    return to_percent(_mix_point_value(reply, GAIN_PREFIX, address, r"[+-]?\d+"))


def decode_group_volume(reply: str, group: str) -> int:
    value = strip_group_echo(reply, group)
    try:
        return to_percent(value)
    except SisArgumentError as exc:
        raise SisDeviceError(f"invalid group volume reply: {reply}", reply=reply, cause=exc) from exc
