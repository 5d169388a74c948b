"""
sis_lib/states.py

Per-session cached device facts.

Pure storage: no I/O, no logging, no protocol knowledge here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .types import DeviceCategory


@dataclass(slots=True)
class SessionRecord:
    session_key: str

    # Filled once by classification; never re-queried while set.
    category: Optional[DeviceCategory] = None
    model_description: Optional[str] = None

    # Model name as printed in the login banner (e.g. "DTPCP84").
    model: Optional[str] = None

    commands_sent: int = 0
    last_reply_at: Optional[float] = None
