"""
sis_lib/registry.py

Closed registry of dispatchable endpoints.

Every declared endpoint must have exactly one handler, and every catalog
template must be reachable from a registered endpoint. validate() checks
both when a client is constructed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Dict, Iterable, Optional, Tuple

from .catalog import GET_TEMPLATES, PUBLIC_GET_TEMPLATES, PUBLIC_SET_TEMPLATES, SET_TEMPLATES
from .errors import SisUnsupportedCombination
from .handlers.common import Value
from .types import Method

if TYPE_CHECKING:
    from .client import RequestContext

Handler = Callable[["RequestContext", str, str, str], Value]


DEVICE_GET_ENDPOINTS: Tuple[str, ...] = (
    "power",
    "volume",
    "videoroute",
    "audioandvideoroute",
    "audiomute",
    "videomute",
    "audioandvideomute",
    "inputstatus",
    "occupancystatus",
    "matrixmute",
    "matrixvolume",
    "setstate",
)

DEVICE_SET_ENDPOINTS: Tuple[str, ...] = (
    "power",
    "volume",
    "videoroute",
    "audioandvideoroute",
    "audiomute",
    "videomute",
    "videosyncmute",
    "audioandvideomute",
    "matrixmute",
    "matrixvolume",
    "setstate",
    "triggerstate",
    "timedtriggerstate",
)


@dataclass(frozen=True, slots=True)
class EndpointSpec:
    name: str
    method: Method
    handler: Handler
    # Catalog row consumed by the handler, if any.
    template_key: Optional[str] = None
    implemented: bool = True


class EndpointRegistry:
    def __init__(self) -> None:
        self._specs: Dict[Tuple[Method, str], EndpointSpec] = {}

    def register(
        self,
        name: str,
        method: Method,
        handler: Handler,
        *,
        template_key: Optional[str] = None,
        implemented: bool = True,
    ) -> None:
        key = (method, name)
        if key in self._specs:
            raise ValueError(f"endpoint {method.value} {name!r} registered twice")
        self._specs[key] = EndpointSpec(
            name=name,
            method=method,
            handler=handler,
            template_key=template_key,
            implemented=implemented,
        )

    def get(self, name: str, method: Method) -> EndpointSpec:
        spec = self._specs.get((method, name))
        if spec is None:
            raise SisUnsupportedCombination(f"no {method.value} function found for endpoint: {name}")
        return spec

    def names(self, method: Method) -> list[str]:
        return sorted(name for (m, name) in self._specs if m is method)

    def specs(self) -> Iterable[EndpointSpec]:
        return tuple(self._specs.values())

    def validate(self) -> None:
        """Raise ValueError when declared endpoints and catalog rows disagree."""
        problems: list[str] = []
        for method, declared, catalog, public in (
            (Method.GET, DEVICE_GET_ENDPOINTS, GET_TEMPLATES, PUBLIC_GET_TEMPLATES),
            (Method.SET, DEVICE_SET_ENDPOINTS, SET_TEMPLATES, PUBLIC_SET_TEMPLATES),
        ):
            registered = set(self.names(method))
            for name in (*declared, *public):
                if name not in registered:
                    problems.append(f"{method.value} {name} has no handler")
            for name in registered - set(declared) - set(public):
                problems.append(f"{method.value} {name} is not a declared endpoint")
            used = {
                spec.template_key
                for spec in self._specs.values()
                if spec.method is method and spec.template_key is not None
            }
            for name in catalog:
                if name not in used:
                    problems.append(f"{method.value} template {name} is unreachable")
            for name in used - set(catalog):
                problems.append(f"{method.value} template {name} does not exist")
        if problems:
            raise ValueError("endpoint registry is inconsistent: " + "; ".join(sorted(problems)))


def build_registry() -> EndpointRegistry:
    from .features import FEATURE_MODULES

    registry = EndpointRegistry()
    for module in FEATURE_MODULES:
        module.register(registry)
    registry.validate()
    return registry


__all__ = [
    "DEVICE_GET_ENDPOINTS",
    "DEVICE_SET_ENDPOINTS",
    "EndpointRegistry",
    "EndpointSpec",
    "build_registry",
]
