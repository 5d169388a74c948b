"""
sis_lib/mixpoint.py

Audio matrix addressing for DMP-class processors.

A mix point is the numeric address of one crosspoint in one of eight
routing tables: point = base + 100 * row + col. Rows and columns are 0-based;
callers supply 1-based numbers or A-H letters depending on the table.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Callable

from .errors import SisArgumentError

_NUMBER = re.compile(r"[+-]?[0-9]+", re.ASCII)


class MixTable(str, Enum):
    MIC_TO_OUT = "MicToOut"
    VRET_TO_OUT = "VRetToOut"
    EXPIN_TO_OUT = "EXPInToOut"
    MIC_TO_SEND = "MicToSend"
    VRET_TO_SEND = "VRetToSend"
    EXPIN_TO_SEND = "EXPInToSend"
    MIC_TO_EXPOUT = "MicToEXPOut"
    VRET_TO_EXPOUT = "VRetToEXPOut"


def _numbered(token: str, role: str) -> int:
    if _NUMBER.fullmatch(token) is None:
        raise SisArgumentError(f"{role} {token!r} is not a number")
    return int(token) - 1


def _lettered(token: str, role: str) -> int:
    if len(token) != 1 or not ("A" <= token <= "H"):
        raise SisArgumentError(f"{role} A-H expected, got {token!r}")
    return ord(token) - ord("A")


_Index = Callable[[str, str], int]

# table -> (base address, row index, column index)
MIX_TABLES: dict[MixTable, tuple[int, _Index, _Index]] = {
    MixTable.MIC_TO_OUT: (20000, _numbered, _numbered),
    MixTable.VRET_TO_OUT: (21300, _lettered, _numbered),
    MixTable.EXPIN_TO_OUT: (22100, _numbered, _numbered),
    MixTable.MIC_TO_SEND: (20009, _numbered, _lettered),
    MixTable.VRET_TO_SEND: (21309, _lettered, _lettered),
    MixTable.EXPIN_TO_SEND: (22109, _numbered, _lettered),
    MixTable.MIC_TO_EXPOUT: (20018, _numbered, _numbered),
    MixTable.VRET_TO_EXPOUT: (21317, _lettered, _numbered),
}

# Prefix match order.
_PREFIX_ORDER: tuple[MixTable, ...] = tuple(MixTable)


def mix_point_address(table: MixTable, row: int, col: int) -> int:
    base = MIX_TABLES[table][0]
    return base + 100 * row + col


def split_input_token(input_token: str) -> tuple[MixTable, str]:
    for table in _PREFIX_ORDER:
        if input_token.startswith(table.value):
            return table, input_token[len(table.value):]
    raise SisArgumentError(f"unknown input type: {input_token!r}")


def calculate_mix_point(input_token: str, output_token: str) -> str:
    """
    Resolve ("MicToOut3", "4") style tokens into a mix point address.

    Out-of-range magnitudes are not bounds-checked; the device rejects them.
    """
    table, source = split_input_token(str(input_token).strip())
    _, row_index, col_index = MIX_TABLES[table]
    row = row_index(source, "input")
    col = col_index(str(output_token).strip(), "output")
    return str(mix_point_address(table, row, col))


__all__ = ["MIX_TABLES", "MixTable", "calculate_mix_point", "mix_point_address", "split_input_token"]
