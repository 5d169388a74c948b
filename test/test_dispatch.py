from __future__ import annotations

from typing import Mapping, Optional

import pytest

from sis_lib import (
    SisArgumentError,
    SisDeviceError,
    SisLoginError,
    SisNotImplemented,
    SisUnexpectedReply,
    SisUnsupportedCombination,
)
from sis_lib.const import ESC

from conftest import KEY, FakeTransport, RecordingSink, make_client

MATRIX = "DTP CrossPoint 84 4K Matrix Switcher"
SCALER = "IN1606 Scaling Presentation Switcher"
SWITCHER = "SW4 HD 4K PLUS Switcher"
DSP = "DMP 128 Plus"
DA = "HDMI DA4 4K Plus Distribution Amplifier"


def _banner(model: str) -> str:
    return f"(c) Copyright 2020, Extron Electronics, {model}, V1.05, 60-1234-01"


def _device(description: str, replies: Mapping[str, str], *, model: Optional[str] = None):
    """Client bound to one scripted device; a model forces a login first."""
    table = {"2I\r": description, **replies}
    if model is None:
        transport = FakeTransport(replies=table)
    else:
        transport = FakeTransport(
            [_banner(model), "Password:", "Login Administrator"],
            replies=table,
            connected=False,
            connect_on_read=True,
        )
    sink = RecordingSink()
    return make_client(transport, sink), transport, sink


# -------------------------
# routing
# -------------------------

def test_matrix_video_route_get_drops_zero_pad() -> None:
    client, transport, _ = _device(MATRIX, {"4%\r": "05"})

    assert client.dispatch("videoroute", "GET", KEY, "4") == ("5", None)
    assert transport.written == ["2I\r", "4%\r"]


def test_matrix_video_route_set_puts_input_first() -> None:
    client, transport, _ = _device(MATRIX, {"6*4%\r": "Out4 In6 Vid"})

    assert client.dispatch("videoroute", "SET", KEY, "6", "4") == ("ok", None)
    assert transport.written[-1] == "6*4%\r"


def test_scaler_audio_and_video_route_set() -> None:
    client, _, _ = _device(SCALER, {"2!\r": "In02 All"})

    assert client.dispatch("audioandvideoroute", "SET", KEY, "2", "") == ("ok", None)


def test_unmatched_echo_is_unexpected_reply() -> None:
    client, _, sink = _device(MATRIX, {"6*4%\r": "Out4 In7 Vid"})

    value, err = client.dispatch("videoroute", "SET", KEY, "6", "4")

    assert isinstance(err, SisUnexpectedReply)
    assert value == "unknown response: Out4 In7 Vid"
    assert any("unknown response" in m for m in sink.messages())


def test_device_error_on_set_is_reported() -> None:
    client, _, _ = _device(MATRIX, {"9*4%\r": "E01"})

    value, err = client.dispatch("videoroute", "SET", KEY, "9", "4")

    assert isinstance(err, SisDeviceError)
    assert value == "device returned error: E01: Invalid input number"


def test_category_without_template_is_unsupported() -> None:
    client, transport, _ = _device(DA, {})

    value, err = client.dispatch("videoroute", "GET", KEY, "1")

    assert isinstance(err, SisUnsupportedCombination)
    assert "Distribution Amplifier" in value
    assert transport.written == ["2I\r"]


# -------------------------
# mute and status
# -------------------------

def test_matrix_video_mute_reads_model_output_map() -> None:
    client, transport, _ = _device(MATRIX, {ESC + "VM\r": "0 0 0 2 0 0"}, model="DTPCP84")

    assert client.dispatch("videomute", "GET", KEY, "3B") == ("true", None)
    assert client.dispatch("videomute", "GET", KEY, "3A") == ("false", None)
    assert transport.written[0] == "secret\r"
    assert transport.written.count("2I\r") == 1


def test_video_mute_set_argument_order_per_category() -> None:
    client, transport, _ = _device(SWITCHER, {"1B\r": "Vmt1"})
    assert client.dispatch("videomute", "SET", KEY, "", "true") == ("ok", None)
    assert transport.written[-1] == "1B\r"

    client, transport, _ = _device(MATRIX, {"3*0B\r": "Vmt3*0"})
    assert client.dispatch("videomute", "SET", KEY, "3", '"false"') == ("ok", None)
    assert transport.written[-1] == "3*0B\r"


def test_video_sync_mute() -> None:
    client, transport, _ = _device(MATRIX, {"3*2B\r": "Vmt3*2", "3*0B\r": "Vmt3*0"})

    assert client.dispatch("videosyncmute", "SET", KEY, "3", "true") == ("ok", None)
    assert client.dispatch("videosyncmute", "SET", KEY, "3", "false") == ("ok", None)
    assert transport.written[1:] == ["3*2B\r", "3*0B\r"]


def test_bad_state_is_argument_error() -> None:
    client, transport, _ = _device(MATRIX, {})

    _, err = client.dispatch("videomute", "SET", KEY, "3", "maybe")

    assert isinstance(err, SisArgumentError)
    assert transport.written == []


def test_switcher_audio_mute() -> None:
    client, transport, _ = _device(SWITCHER, {ESC + "1AFMT\r": "Amt1", ESC + "AFMT\r": "1"})

    assert client.dispatch("audiomute", "SET", KEY, "", "true") == ("ok", None)
    assert client.dispatch("audiomute", "GET", KEY, "1") == ("true", None)


def test_scaler_audio_mute_uses_group_numbers() -> None:
    client, transport, _ = _device(
        SCALER,
        {ESC + "D2GRPM\r": "GrpmD2*1", ESC + "D2*0GRPM\r": "GrpmD2*0"},
        model="IN1606",
    )

    assert client.dispatch("audiomute", "GET", KEY, "programmute") == ("true", None)
    assert client.dispatch("audiomute", "SET", KEY, "programmute", "false") == ("ok", None)


def test_matrix_input_status() -> None:
    client, _, _ = _device(MATRIX, {"0LS\r": "10000001"}, model="DTPCP84")

    assert client.dispatch("inputstatus", "GET", KEY, "8") == ("true", None)
    assert client.dispatch("inputstatus", "GET", KEY, "2") == ("false", None)


# -------------------------
# audio levels
# -------------------------

def test_in160x_group_volume() -> None:
    client, transport, _ = _device(
        SCALER,
        {ESC + "D1GRPM\r": "GrpmD1*120", ESC + "D1*120GRPM\r": "GrpmD1*120"},
        model="IN1606",
    )

    assert client.dispatch("volume", "GET", KEY, "programvolume") == ("100", None)
    assert client.dispatch("volume", "SET", KEY, "programvolume", "100") == ("ok", None)
    assert transport.written[-1] == ESC + "D1*120GRPM\r"


def test_volume_needs_in160x_model() -> None:
    client, _, _ = _device(SCALER, {}, model="IN1804")

    _, err = client.dispatch("volume", "GET", KEY, "programvolume")

    assert isinstance(err, SisUnsupportedCombination)


def test_volume_reports_failed_login() -> None:
    transport = FakeTransport(["Mon, 01 Jan 2024 10:00:00"] * 8, connected=False)
    client = make_client(transport, RecordingSink())

    _, err = client.dispatch("volume", "GET", KEY, "programvolume")

    assert isinstance(err, SisLoginError)


def test_dsp_mix_point_mute_and_volume() -> None:
    client, transport, _ = _device(
        DSP,
        {
            ESC + "M20203AU\r": "DsM20203*1",
            ESC + "M20203*0AU\r": "DsM20203*0",
            ESC + "G20203AU\r": "DsG20203*120",
            ESC + "G20203*120AU\r": "DsG20203*120",
        },
    )

    assert client.dispatch("matrixmute", "GET", KEY, "MicToOut3", "4") == ("true", None)
    assert client.dispatch("matrixmute", "SET", KEY, "MicToOut3", "4", "false") == ("ok", None)
    assert client.dispatch("matrixvolume", "GET", KEY, "MicToOut3", "4") == ("100", None)
    assert client.dispatch("matrixvolume", "SET", KEY, "MicToOut3", "4", '"100"') == ("ok", None)


def test_bad_mix_point_token_is_argument_error() -> None:
    client, _, _ = _device(DSP, {})

    _, err = client.dispatch("matrixmute", "GET", KEY, "MicToNowhere", "4")

    assert isinstance(err, SisArgumentError)


# -------------------------
# dispatch surface
# -------------------------

def test_public_endpoints_skip_classification() -> None:
    client, transport, _ = _device(MATRIX, {"Q\r": "1.05", ESC + "2NI\r": "Laptop", "1X\r": "Exe1"})

    assert client.dispatch("firmwareversion", "GET", KEY) == ("1.05", None)
    assert client.dispatch("viewinputname", "GET", KEY, "2") == ("Laptop", None)
    assert client.dispatch("lockallfrontpanelfunctions", "SET", KEY) == ("Exe1", None)
    assert "2I\r" not in transport.written


def test_declared_but_unbuilt_endpoint() -> None:
    client, transport, _ = _device(MATRIX, {})

    value, err = client.dispatch("power", "GET", KEY)

    assert isinstance(err, SisNotImplemented)
    assert value == "endpoint 'power' is not implemented"
    assert transport.written == []


@pytest.mark.parametrize(
    ("endpoint", "method", "error_type", "message"),
    [
        ("bogus", "GET", SisUnsupportedCombination, "no GET function found for endpoint: bogus"),
        ("videosyncmute", "GET", SisUnsupportedCombination, "no GET function found for endpoint: videosyncmute"),
        ("videoroute", "PUT", SisArgumentError, "invalid method: PUT"),
    ],
)
def test_unknown_endpoint_or_method(endpoint, method, error_type, message) -> None:
    client, transport, _ = _device(MATRIX, {})

    value, err = client.dispatch(endpoint, method, KEY, "1")

    assert isinstance(err, error_type)
    assert value == message
    assert transport.written == []


def test_execute_attaches_redacted_context() -> None:
    client, _, _ = _device(MATRIX, {})

    result = client.execute("bogus", "set", KEY)

    assert not result.ok
    assert result.error is not None
    assert result.error.context.endpoint == "bogus"
    assert result.error.context.phase == "SET"
    assert "secret" not in result.error.context.session_key
    with pytest.raises(SisUnsupportedCombination):
        result.unwrap()


def test_failed_classification_is_not_cached() -> None:
    client, transport, _ = _device("E10", {})

    _, err = client.dispatch("videoroute", "GET", KEY, "1")
    assert isinstance(err, SisDeviceError)
    _, err = client.dispatch("videoroute", "GET", KEY, "1")
    assert isinstance(err, SisDeviceError)

    assert transport.written == ["2I\r", "2I\r"]


def test_query_replies_mentioning_error_pass_through() -> None:
    client, _, sink = _device(MATRIX, {ESC + "1NI\r": "Terror Cam", ESC + "3NI\r": "E10"})

    assert client.dispatch("viewinputname", "GET", KEY, "1") == ("Terror Cam", None)
    value, err = client.dispatch("viewinputname", "GET", KEY, "3")
    assert isinstance(err, SisDeviceError)
    assert value == "device returned error: E10: Invalid command"
    assert sink.messages().count("device returned error: E10: Invalid command") == 1


def test_model_description_mentioning_error_is_classified() -> None:
    client, transport, _ = _device("Error Correcting HDMI Switcher", {"!\r": "4"})

    assert client.dispatch("videoroute", "GET", KEY, "1") == ("4", None)
    assert transport.written == ["2I\r", "!\r"]


# -------------------------
# remaining per-category paths
# -------------------------

def test_distribution_amp_audio_mute_set_echo() -> None:
    client, transport, _ = _device(DA, {ESC + "2*1AFMT\r": "Amt2*1", ESC + "3*1AFMT\r": "Amt2*1"})

    assert client.dispatch("audiomute", "SET", KEY, "2", "true") == ("ok", None)
    assert transport.written[-1] == ESC + "2*1AFMT\r"
    value, err = client.dispatch("audiomute", "SET", KEY, "3", "true")
    assert isinstance(err, SisUnexpectedReply)
    assert value == "unknown response: Amt2*1"


def test_scaler_audio_and_video_route_get() -> None:
    client, transport, _ = _device(SCALER, {"!\r": "03"})

    assert client.dispatch("audioandvideoroute", "GET", KEY, "1") == ("3", None)
    assert transport.written == ["2I\r", "!\r"]


def test_in160x_unknown_volume_group_is_unsupported() -> None:
    client, transport, _ = _device(SCALER, {}, model="IN1606")

    value, err = client.dispatch("volume", "GET", KEY, "bassvolume")

    assert isinstance(err, SisUnsupportedCombination)
    assert "bassvolume" in value
    assert ESC + "D1GRPM\r" not in transport.written


@pytest.mark.parametrize(
    ("endpoint", "state_or_level", "command", "reply"),
    [
        ("matrixmute", "true", ESC + "M20203*1AU\r", "DsM20204*1"),
        ("matrixvolume", "100", ESC + "G20203*120AU\r", "DsG20203*0"),
    ],
)
def test_mix_point_set_with_unmatched_echo(endpoint, state_or_level, command, reply) -> None:
    client, transport, _ = _device(DSP, {command: reply})

    value, err = client.dispatch(endpoint, "SET", KEY, "MicToOut3", "4", state_or_level)

    assert isinstance(err, SisUnexpectedReply)
    assert value == f"unknown response: {reply}"
    assert transport.written[-1] == command
