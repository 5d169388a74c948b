"""
sis_lib/handlers/mute.py

Mute status decoding for video and audio mute queries.

Replies carry one character per output, optionally space separated:
- "0" / "1" / "2"        single mirrored output (IN16xx, switchers)
- "0 0 0"                IN180x: 1A, 1B, LoopOut
- "0 0 1 0 0 0"          matrix: demultiplexed through the model output map
- "1 0 0 0 0"            DA: odd length means a leading loop-through flag
"""

from __future__ import annotations

import logging
from typing import Optional

from sis_lib.errors import SisArgumentError, SisDeviceError, SisUnsupportedCombination
from sis_lib.handlers.common import decode_mute_char
from sis_lib.io_maps import LOOP_OUT, LOOP_THROUGH, io_map_for_model
from sis_lib.types import DeviceCategory

logger = logging.getLogger(__name__)

_LOOP_OUT_REPLY_LEN = 3
_LOOP_OUT_OFFSET = 2


def _decode_distribution_amp(flags: str, output: str) -> bool:
    has_loop_through = len(flags) % 2 == 1
    if output == LOOP_THROUGH:
        if not has_loop_through:
            raise SisUnsupportedCombination(f"LoopThrough not available on this device: {flags}")
        return decode_mute_char(flags[0])
    if has_loop_through:
        flags = flags[1:]
    try:
        index = int(output) - 1
    except ValueError as exc:
        raise SisArgumentError(f"invalid output number: {output!r}", cause=exc) from exc
    if index < 0 or index >= len(flags):
        raise SisArgumentError(f"output {output!r} is out of range for reply {flags!r}")
    return decode_mute_char(flags[index])


def decode_mute_status(
    reply: str,
    output: str,
    *,
    category: DeviceCategory,
    model: Optional[str] = None,
) -> bool:
    """Return whether ``output`` is muted according to a mute status reply."""
    flags = reply.replace(" ", "").replace('"', "")

    if len(flags) == 1:
        return decode_mute_char(flags)

    if output == LOOP_OUT:
        if len(flags) != _LOOP_OUT_REPLY_LEN:
            raise SisUnsupportedCombination(f"LoopOut is not available on this device: {reply}")
        return decode_mute_char(flags[_LOOP_OUT_OFFSET])

    if category is DeviceCategory.DISTRIBUTION_AMPLIFIER:
        return _decode_distribution_amp(flags, output)

    io_map = io_map_for_model(model)
    if io_map is None:
        raise SisUnsupportedCombination(f"unknown device model: {model!r}")
    index = io_map.outputs.get(output)
    if index is None:
        raise SisUnsupportedCombination(f"output {output!r} is not defined for {io_map.family}")
    if index >= len(flags):
        raise SisDeviceError(f"mute reply too short for output {output!r}: {reply}", reply=reply)
    logger.debug("Output %s of %s is at index %d of %r", output, io_map.family, index, flags)
    return decode_mute_char(flags[index])
