"""
sis_lib/features/video.py

Feature module: video routing, video mute and input signal status.

Responsibilities:
- Build routing/mute commands with per-category argument order.
- Decode status replies through sis_lib.handlers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sis_lib.handlers.common import Value
from sis_lib.handlers.mute import decode_mute_status
from sis_lib.handlers.route import check_echo, decode_route
from sis_lib.handlers.status import decode_input_status
from sis_lib.types import DeviceCategory, Method
from sis_lib.validation import parse_port, parse_state

if TYPE_CHECKING:
    from sis_lib.client import RequestContext
    from sis_lib.registry import EndpointRegistry

ROUTE_ECHO = "In"
ALL_ECHO = "All"
VIDEO_MUTE_ECHO = "Vmt"


def get_video_route(ctx: "RequestContext", output: str, _arg2: str = "", _arg3: str = "") -> Value:
    reply = ctx.command("videoroute", Method.GET, output)
    return decode_route(reply)


def get_audio_and_video_route(ctx: "RequestContext", output: str, _arg2: str = "", _arg3: str = "") -> Value:
    reply = ctx.command("audioandvideoroute", Method.GET, output)
    return decode_route(reply)


def set_video_route(ctx: "RequestContext", input_: str, output: str, _arg3: str = "") -> Value:
    # Matrix: "Out4 In6 Vid"; scaler: "In6 RGB"
    input_ = parse_port(input_)
    reply = ctx.command("videoroute", Method.SET, input_, output)
    return check_echo(reply, ROUTE_ECHO, input_)


def set_audio_and_video_route(ctx: "RequestContext", input_: str, output: str, _arg3: str = "") -> Value:
    # Matrix: "Out4 In2 All"; scaler: "In02 All"
    input_ = parse_port(input_)
    reply = ctx.command("audioandvideoroute", Method.SET, input_, output)
    return check_echo(reply, ROUTE_ECHO, input_, ALL_ECHO)


def get_video_mute(ctx: "RequestContext", output: str, _arg2: str = "", _arg3: str = "") -> Value:
    reply = ctx.command("videomute", Method.GET)
    return decode_mute_status(reply, output, category=ctx.category(), model=ctx.model)


def _send_video_mute(ctx: "RequestContext", endpoint: str, output: str, state: str | None) -> Value:
    """Switchers take no output argument; every other class takes output first."""
    if ctx.category() is DeviceCategory.SWITCHER:
        args: tuple[str, ...] = (state,) if state is not None else ()
        reply = ctx.command(endpoint, Method.SET, *args)
        return check_echo(reply, VIDEO_MUTE_ECHO)
    output = parse_port(output)
    args = (output, state) if state is not None else (output,)
    reply = ctx.command(endpoint, Method.SET, *args)
    return check_echo(reply, VIDEO_MUTE_ECHO, output)


def set_video_mute(ctx: "RequestContext", output: str, state: str, _arg3: str = "") -> Value:
    value = "1" if parse_state(state) else "0"
    return _send_video_mute(ctx, "videomute", output, value)


def set_video_sync_mute(ctx: "RequestContext", output: str, state: str, _arg3: str = "") -> Value:
    if parse_state(state):
        return _send_video_mute(ctx, "videosyncmute", output, None)
    return _send_video_mute(ctx, "videomute", output, "0")


def get_input_status(ctx: "RequestContext", input_: str, _arg2: str = "", _arg3: str = "") -> Value:
    reply = ctx.command("inputstatus", Method.GET, input_)
    return decode_input_status(reply, input_, model=ctx.model)


def register(registry: "EndpointRegistry") -> None:
    registry.register("videoroute", Method.GET, get_video_route, template_key="videoroute")
    registry.register(
        "audioandvideoroute", Method.GET, get_audio_and_video_route, template_key="audioandvideoroute"
    )
    registry.register("videomute", Method.GET, get_video_mute, template_key="videomute")
    registry.register("inputstatus", Method.GET, get_input_status, template_key="inputstatus")

    registry.register("videoroute", Method.SET, set_video_route, template_key="videoroute")
    registry.register(
        "audioandvideoroute", Method.SET, set_audio_and_video_route, template_key="audioandvideoroute"
    )
    registry.register("videomute", Method.SET, set_video_mute, template_key="videomute")
    registry.register("videosyncmute", Method.SET, set_video_sync_mute, template_key="videosyncmute")
