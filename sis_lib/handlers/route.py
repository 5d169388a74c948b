"""
sis_lib/handlers/route.py

Reply handling for routing and mute set operations.
"""

from __future__ import annotations

from typing import Iterable

from sis_lib.errors import SisDeviceError, SisUnexpectedReply
from sis_lib.handlers.common import is_error_reply

OK = "ok"


def decode_route(reply: str) -> str:
    """Return the routed input, dropping a single zero pad ("05" -> "5")."""
    reply = reply.strip()
    if len(reply) == 2 and reply[0] == "0":
        return reply[1:]
    return reply


def check_echo(reply: str, *expected: str) -> str:
    """
    Validate a set reply by substring containment.

    Error-flagged replies raise SisDeviceError; replies that contain every
    ``expected`` fragment return "ok"; anything else raises SisUnexpectedReply.
    """
    if is_error_reply(reply):
        raise SisDeviceError(reply, reply=reply)
    if _contains_all(reply, expected):
        return OK
    raise SisUnexpectedReply(reply)


def _contains_all(reply: str, fragments: Iterable[str]) -> bool:
    return all(fragment in reply for fragment in fragments)
