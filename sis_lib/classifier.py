"""
sis_lib/classifier.py

Device classification from the "2I" model description and the login banner.

Rules are evaluated in order and the first match wins, so multi-word phrases
sit ahead of the single words they contain.
"""

from __future__ import annotations

from typing import Callable, Optional

from .const import BANNER_COMMA_COUNT, BANNER_MODEL_FIELD
from .types import DeviceCategory

Rule = Callable[[str], bool]


def _has(*needles: str) -> Rule:
    return lambda text: any(needle in text for needle in needles)


def _is(value: str) -> Rule:
    return lambda text: text == value


def _matrix(text: str) -> bool:
    return ("matrix" in text and "audio" not in text) or "xtp" in text


def _plain_switcher(text: str) -> bool:
    return "switcher" in text and not any(w in text for w in ("scaling", "matrix", "scaler"))


CATEGORY_RULES: tuple[tuple[Rule, DeviceCategory], ...] = (
    (_has("dmp", "digital audio"), DeviceCategory.AUDIO_PROCESSOR),
    (_has("presentation system"), DeviceCategory.COLLABORATION),
    (_matrix, DeviceCategory.MATRIX_SWITCHER),
    (_has("scaling presentation switcher"), DeviceCategory.SCALER),
    (_has("seamless presentation switcher"), DeviceCategory.SCALER),
    (_has("seamless scaling switcher"), DeviceCategory.SCALER),
    (_is("streaming media processor"), DeviceCategory.STREAMING_MEDIA),
    (_is("collaboration switcher"), DeviceCategory.COLLABORATION),
    (_plain_switcher, DeviceCategory.SWITCHER),
    (_has("distribution amplifier"), DeviceCategory.DISTRIBUTION_AMPLIFIER),
    (_has("110v ac"), DeviceCategory.POWER_CONTROLLER),
)


def categorize_device(model_description: str) -> DeviceCategory:
    text = model_description.strip().strip('"').strip().lower()
    for rule, category in CATEGORY_RULES:
        if rule(text):
            return category
    return DeviceCategory.UNKNOWN


def parse_banner_model(line: str) -> Optional[str]:
    """
    Return the model field of a login banner, or None if ``line`` is not one.

    Banner shape: "(c) Copyright 2020, Extron Electronics, DTP CrossPoint 84, V1.00, 60-1234-01"
    """
    if line.count(",") != BANNER_COMMA_COUNT:
        return None
    return line.split(",")[BANNER_MODEL_FIELD].strip()


__all__ = ["CATEGORY_RULES", "categorize_device", "parse_banner_model"]
