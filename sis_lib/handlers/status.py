"""
sis_lib/handlers/status.py

Input signal-presence decoding.

Reply shapes by hardware class:
- matrix:           "10100000"            one character per input
- scaler:           "1*0*1*0*1"           '*' between inputs
- switcher:         "1 0 1 0*2"           trailing "*<outputs>" marker
- single-input DA:  "1*2"                 presence flag then output count
"""

from __future__ import annotations

from typing import Optional

from sis_lib.errors import SisArgumentError, SisDeviceError, SisUnsupportedCombination
from sis_lib.handlers.common import decode_flag
from sis_lib.io_maps import io_map_for_model


def _is_single_input_da(reply: str) -> bool:
    return reply.count("*") == 1 and len(reply) >= 2 and reply[1] == "*" and reply[0] in "01"


def normalize_input_status(reply: str) -> str:
    reply = reply.replace("\r", "")
    if reply.count("*") == 1:
        if reply.index("*") != len(reply) - 2:
            raise SisDeviceError(f"unexpected input status reply: {reply}", reply=reply)
        reply = reply[:-2]
    return reply.replace("*", "").replace(" ", "")


def decode_input_status(
    reply: str,
    input_label: str,
    *,
    model: Optional[str] = None,
) -> bool:
    """Return signal presence for ``input_label`` from an input status reply."""
    if _is_single_input_da(reply):
        return decode_flag(reply[0])

    flags = normalize_input_status(reply)

    io_map = io_map_for_model(model)
    if io_map is not None:
        index = io_map.inputs.get(input_label)
        if index is None:
            raise SisUnsupportedCombination(
                f"input {input_label!r} is not defined for {io_map.family}"
            )
    else:
        try:
            index = int(input_label) - 1
        except ValueError as exc:
            raise SisArgumentError(f"input {input_label!r} is not a number", cause=exc) from exc
        if index < 0 or index >= len(flags):
            raise SisArgumentError(f"input {input_label!r} is out of range for reply {reply!r}")

    if index >= len(flags):
        raise SisDeviceError(f"input status reply too short for {input_label!r}: {reply}", reply=reply)
    return decode_flag(flags[index])
