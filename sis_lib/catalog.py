"""
sis_lib/catalog.py

Command template catalog.

Templates use printf-style ``%s`` slots (``%%`` is a literal percent). The
number of slots decides how many caller arguments are consumed, left to
right. A missing (endpoint, category) pair is a configuration error and is
never retried.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Mapping

from .const import ESC
from .errors import SisUnsupportedCombination
from .types import DeviceCategory, Method

logger = logging.getLogger(__name__)

_MATRIX = DeviceCategory.MATRIX_SWITCHER
_SCALER = DeviceCategory.SCALER
_SWITCHER = DeviceCategory.SWITCHER
_DA = DeviceCategory.DISTRIBUTION_AMPLIFIER
_DSP = DeviceCategory.AUDIO_PROCESSOR

TemplateTable = Mapping[str, Mapping[DeviceCategory, str]]


def _freeze(table: dict[str, dict[DeviceCategory, str]]) -> TemplateTable:
    return MappingProxyType({name: MappingProxyType(row) for name, row in table.items()})


GET_TEMPLATES: TemplateTable = _freeze(
    {
        "inputstatus": {
            _MATRIX: "0LS\r",
            _SCALER: ESC + "0LS\r",
            _DA: ESC + "LS\r",
            _SWITCHER: ESC + "LS\r",
        },
        "videoroute": {
            _MATRIX: "%s%%\r",
            _SCALER: "&\r",
            _SWITCHER: "!\r",
        },
        "audioandvideoroute": {
            _SCALER: "!\r",
        },
        "audiomute": {
            _MATRIX: "%s*B\r",
            _SCALER: ESC + "D%sGRPM\r",
            _SWITCHER: ESC + "AFMT\r",
        },
        "videomute": {
            _MATRIX: ESC + "VM\r",
            _SCALER: "B\r",
            _SWITCHER: "B\r",
            _DA: "B\r",
        },
        "volume": {
            _SCALER: ESC + "D%sGRPM\r",
        },
        "matrixmute": {
            _DSP: ESC + "M%sAU\r",
        },
        "matrixvolume": {
            _DSP: ESC + "G%sAU\r",
        },
    }
)

SET_TEMPLATES: TemplateTable = _freeze(
    {
        "videoroute": {
            _MATRIX: "%s*%s%%\r",
            _SCALER: "%s&\r",
        },
        "audioandvideoroute": {
            _MATRIX: "%s*%s!\r",
            _SCALER: "%s!\r",
            _SWITCHER: "%s!\r",
        },
        "videomute": {
            _MATRIX: "%s*%sB\r",
            _SCALER: "%s*%sB\r",
            _DA: "%s*%sB\r",
            _SWITCHER: "%sB\r",
        },
        "videosyncmute": {
            _MATRIX: "%s*2B\r",
            _SCALER: "%s*2B\r",
            _DA: "%s*2B\r",
            _SWITCHER: "2B\r",
        },
        "audiomute": {
            _SWITCHER: ESC + "%sAFMT\r",
            _SCALER: ESC + "D%s*%sGRPM\r",
            _DA: ESC + "%s*%sAFMT\r",
        },
        "volume": {
            _SCALER: ESC + "D%s*%sGRPM\r",
        },
        "matrixmute": {
            _DSP: ESC + "M%s*%sAU\r",
        },
        "matrixvolume": {
            _DSP: ESC + "G%s*%sAU\r",
        },
    }
)

# Single-template endpoints that work on every model.
PUBLIC_GET_TEMPLATES: Mapping[str, str] = MappingProxyType(
    {
        "firmwareversion": "Q\r",
        "temperature": "W20STAT\r",
        "partnumber": "N\r",
        "modelname": "I\r",
        "modeldescription": "2I\r",
        "systemstatus": "S\r",
        "systemmemoryusage": "3I\r",
        "videooutputmutes": ESC + "VM\r",
        "viewlockstatus": "X\r",
        "serialnumber": "99I\r",
        "macaddress": "98I\r",
        "ipaddress": ESC + "CI\r",
        "openconnections": ESC + "CC\r",
        "systemprocessorusage": "11I\r",
        "viewpowersavemode": ESC + "PSAV\r",
        "viewglobalmute": "B\r",
        "viewloopoutinput": ESC + "LOUT\r",
        "viewinputname": ESC + "%sNI\r",
        "queryhdcpinputstatus": ESC + "I%sHDCP\r",
        "queryhdcpoutputstatus": ESC + "O%sHDCP\r",
    }
)

PUBLIC_SET_TEMPLATES: Mapping[str, str] = MappingProxyType(
    {
        "lockallfrontpanelfunctions": "1X\r",
        "lockadvancedfrontpanelfunctions": "2X\r",
        "unlockallfrontpanelfunctions": "0X\r",
    }
)


def templates_for(method: Method) -> TemplateTable:
    return GET_TEMPLATES if method is Method.GET else SET_TEMPLATES


def public_templates_for(method: Method) -> Mapping[str, str]:
    return PUBLIC_GET_TEMPLATES if method is Method.GET else PUBLIC_SET_TEMPLATES


def slot_count(template: str) -> int:
    return template.replace("%%", "").count("%s")


def format_command(template: str, *args: object) -> str:
    """Fill a template's slots from ``args`` left to right; extras are ignored."""
    slots = slot_count(template)
    if slots == 0:
        return template
    values = [str(arg) for arg in args[:slots]]
    values.extend("" for _ in range(slots - len(values)))
    return template % tuple(values)


def lookup_template(endpoint: str, method: Method, category: DeviceCategory) -> str:
    row = templates_for(method).get(endpoint)
    if row is None:
        raise SisUnsupportedCombination(f"unknown endpoint {endpoint!r} for {method.value}")
    template = row.get(category)
    if template is None:
        raise SisUnsupportedCombination(
            f"{endpoint} {method.value} is not supported for device type {category.value!r}"
        )
    return template


def resolve_command(
    endpoint: str,
    method: Method,
    category: DeviceCategory,
    *args: object,
) -> str:
    command = format_command(lookup_template(endpoint, method, category), *args)
    logger.debug("Resolved %s %s for %s -> %r", method.value, endpoint, category.value, command)
    return command


__all__ = [
    "GET_TEMPLATES",
    "PUBLIC_GET_TEMPLATES",
    "PUBLIC_SET_TEMPLATES",
    "SET_TEMPLATES",
    "format_command",
    "lookup_template",
    "public_templates_for",
    "resolve_command",
    "slot_count",
    "templates_for",
]
