"""
sis_lib/features/audio.py

Feature module: group volume, audio mute and DSP mix-point control.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sis_lib.errors import SisUnsupportedCombination
from sis_lib.handlers.audio import decode_group_volume, decode_matrix_mute, decode_matrix_volume
from sis_lib.handlers.common import Value, strip_group_echo
from sis_lib.handlers.mute import decode_mute_status
from sis_lib.handlers.route import check_echo
from sis_lib.io_maps import IN160X_MUTE_GROUPS, IN160X_VOLUME_GROUPS, is_in160x
from sis_lib.mixpoint import calculate_mix_point
from sis_lib.types import DeviceCategory, Method
from sis_lib.validation import parse_level, parse_port, parse_state
from sis_lib.volume import to_device_units

if TYPE_CHECKING:
    from sis_lib.client import RequestContext
    from sis_lib.registry import EndpointRegistry

GROUP_ECHO = "GrpmD"
AUDIO_MUTE_ECHO = "Amt"
MIX_MUTE_ECHO = "DsM"
MIX_GAIN_ECHO = "DsG"


def _volume_group(ctx: "RequestContext", name: str) -> str:
    # Only IN160x group volumes are addressable; IN1804 uses a different scale.
    model = ctx.find_model()
    if not is_in160x(model):
        raise SisUnsupportedCombination(f"model {model} does not support 'volume'")
    group = IN160X_VOLUME_GROUPS.get(name)
    if group is None:
        raise SisUnsupportedCombination(f"no volume group for {name!r} on model {model}")
    return group


def _mute_group(ctx: "RequestContext", name: str) -> str:
    model = ctx.model
    if is_in160x(model) and name in IN160X_MUTE_GROUPS:
        return IN160X_MUTE_GROUPS[name]
    if name.isdigit():
        return name
    raise SisUnsupportedCombination(f"no mute group for {name!r} on model {model}")


def get_volume(ctx: "RequestContext", name: str, _arg2: str = "", _arg3: str = "") -> Value:
    group = _volume_group(ctx, name)
    reply = ctx.command("volume", Method.GET, group)
    return decode_group_volume(reply, group)


def set_volume(ctx: "RequestContext", name: str, level: str, _arg3: str = "") -> Value:
    group = _volume_group(ctx, name)
    tenths = str(to_device_units(level))
    reply = ctx.command("volume", Method.SET, group, tenths)
    return check_echo(reply, f"{GROUP_ECHO}{group}*{tenths}")


def get_audio_mute(ctx: "RequestContext", output: str, _arg2: str = "", _arg3: str = "") -> Value:
    category = ctx.category()
    if category is DeviceCategory.SCALER:
        group = _mute_group(ctx, output)
        reply = strip_group_echo(ctx.command("audiomute", Method.GET, group), group)
    else:
        reply = ctx.command("audiomute", Method.GET, output)
    return decode_mute_status(reply, output, category=category, model=ctx.model)


def set_audio_mute(ctx: "RequestContext", output: str, state: str, _arg3: str = "") -> Value:
    value = "1" if parse_state(state) else "0"
    category = ctx.category()
    if category is DeviceCategory.SWITCHER:
        reply = ctx.command("audiomute", Method.SET, value)
        return check_echo(reply, f"{AUDIO_MUTE_ECHO}{value}")
    if category is DeviceCategory.SCALER:
        group = _mute_group(ctx, output)
        reply = ctx.command("audiomute", Method.SET, group, value)
        return check_echo(reply, f"{GROUP_ECHO}{group}*{value}")
    output = parse_port(output)
    reply = ctx.command("audiomute", Method.SET, output, value)
    return check_echo(reply, f"{AUDIO_MUTE_ECHO}{output}*{value}")


def get_matrix_mute(ctx: "RequestContext", input_: str, output: str, _arg3: str = "") -> Value:
    address = calculate_mix_point(input_, output)
    reply = ctx.command("matrixmute", Method.GET, address)
    return decode_matrix_mute(reply, address)


def get_matrix_volume(ctx: "RequestContext", input_: str, output: str, _arg3: str = "") -> Value:
    address = calculate_mix_point(input_, output)
    reply = ctx.command("matrixvolume", Method.GET, address)
    return decode_matrix_volume(reply, address)


def set_matrix_mute(ctx: "RequestContext", input_: str, output: str, state: str) -> Value:
    address = calculate_mix_point(input_, output)
    value = "1" if parse_state(state) else "0"
    reply = ctx.command("matrixmute", Method.SET, address, value)
    return check_echo(reply, MIX_MUTE_ECHO, address, value)


def set_matrix_volume(ctx: "RequestContext", input_: str, output: str, level: str) -> Value:
    # Level arrives as a 0-100 percent, usually quoted by the host.
    address = calculate_mix_point(input_, output)
    tenths = str(to_device_units(parse_level(level)))
    reply = ctx.command("matrixvolume", Method.SET, address, tenths)
    return check_echo(reply, MIX_GAIN_ECHO, address, tenths)


def register(registry: "EndpointRegistry") -> None:
    registry.register("volume", Method.GET, get_volume, template_key="volume")
    registry.register("audiomute", Method.GET, get_audio_mute, template_key="audiomute")
    registry.register("matrixmute", Method.GET, get_matrix_mute, template_key="matrixmute")
    registry.register("matrixvolume", Method.GET, get_matrix_volume, template_key="matrixvolume")

    registry.register("volume", Method.SET, set_volume, template_key="volume")
    registry.register("audiomute", Method.SET, set_audio_mute, template_key="audiomute")
    registry.register("matrixmute", Method.SET, set_matrix_mute, template_key="matrixmute")
    registry.register("matrixvolume", Method.SET, set_matrix_volume, template_key="matrixvolume")
