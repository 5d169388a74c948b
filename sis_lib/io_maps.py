"""
sis_lib/io_maps.py

Per-model port label maps.

Status replies concatenate one character per port; these maps give the
character offset for a front-panel label such as "3B".
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional

LOOP_OUT = "LoopOut"
LOOP_THROUGH = "LoopThrough"


@dataclass(frozen=True, slots=True)
class IOMap:
    family: str
    inputs: Mapping[str, int]
    outputs: Mapping[str, int]


def _numbered(count: int) -> Mapping[str, int]:
    return MappingProxyType({str(n): n - 1 for n in range(1, count + 1)})


def _labels(*labels: str) -> Mapping[str, int]:
    return MappingProxyType({label: index for index, label in enumerate(labels)})


CROSSPOINT_84 = IOMap(
    family="DTPCP84",
    inputs=_numbered(8),
    outputs=_labels("1", "2", "3A", "3B", "4A", "4B"),
)

CROSSPOINT_86 = IOMap(
    family="DTPCP86",
    inputs=_numbered(8),
    outputs=_labels("1", "2", "3A", "3B", "4A", "4B", "5", "6"),
)

CROSSPOINT_108 = IOMap(
    family="DTPCP108",
    inputs=_numbered(10),
    outputs=_labels("1", "2", "3", "4", "5A", "5B", "6A", "6B", "7", "8"),
)

# LoopOut is read from a fixed offset and is not part of the map.
IN_180X = IOMap(
    family="IN18",
    inputs=_numbered(8),
    outputs=_labels("1A", "1B"),
)

# Checked in order; the first family substring found in the model wins.
MODEL_MAPS: tuple[IOMap, ...] = (CROSSPOINT_108, CROSSPOINT_86, CROSSPOINT_84, IN_180X)

# X46 group numbers on IN160x scalers.
IN160X_VOLUME_GROUPS: Mapping[str, str] = MappingProxyType(
    {"programvolume": "1", "micvolume": "3", "variablevolume": "8"}
)

# X48 group numbers on IN160x scalers.
IN160X_MUTE_GROUPS: Mapping[str, str] = MappingProxyType(
    {"programmute": "2", "micmute": "4", "outputmute": "7"}
)


def io_map_for_model(model: Optional[str]) -> Optional[IOMap]:
    if not model:
        return None
    for io_map in MODEL_MAPS:
        if io_map.family in model:
            return io_map
    return None


def is_in160x(model: Optional[str]) -> bool:
    return bool(model) and "160" in model and "IN" in model
