"""
sis_lib/features/system.py

Feature module: model-independent queries and declared-but-unbuilt endpoints.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sis_lib.catalog import format_command, public_templates_for
from sis_lib.errors import SisNotImplemented
from sis_lib.handlers.common import Value
from sis_lib.registry import Handler
from sis_lib.types import Method

if TYPE_CHECKING:
    from sis_lib.client import RequestContext
    from sis_lib.registry import EndpointRegistry

NOT_IMPLEMENTED_GET = ("power", "audioandvideomute", "occupancystatus", "setstate")
NOT_IMPLEMENTED_SET = (
    "power",
    "audioandvideomute",
    "setstate",
    "triggerstate",
    "timedtriggerstate",
)


def make_public_handler(template: str) -> Handler:
    def _handler(ctx: "RequestContext", arg1: str = "", arg2: str = "", arg3: str = "") -> Value:
        return ctx.send(format_command(template, arg1, arg2, arg3))

    return _handler


def make_not_implemented_handler(name: str) -> Handler:
    def _handler(ctx: "RequestContext", arg1: str = "", arg2: str = "", arg3: str = "") -> Value:
        raise SisNotImplemented(f"endpoint '{name}' is not implemented")

    return _handler


def register(registry: "EndpointRegistry") -> None:
    for method in Method:
        for name, template in public_templates_for(method).items():
            registry.register(name, method, make_public_handler(template))

    for name in NOT_IMPLEMENTED_GET:
        registry.register(name, Method.GET, make_not_implemented_handler(name), implemented=False)
    for name in NOT_IMPLEMENTED_SET:
        registry.register(name, Method.SET, make_not_implemented_handler(name), implemented=False)
