from __future__ import annotations

from sis_lib.const import UNKNOWN_SENTINEL
from sis_lib.session import Session, SessionState
from sis_lib.types import ClientConfig

from conftest import KEY, FakeTransport, RecordingSink

BANNER = "(c) Copyright 2020, Extron Electronics, DTPCP84, V1.05, 60-1234-01"
DATE = "Mon, 01 Jan 2024 10:00:00"


def _session(transport: FakeTransport, sink: RecordingSink, key: str = KEY) -> Session:
    return Session(key, transport, sink=sink, config=ClientConfig())


def test_password_login_caches_banner_model(sink) -> None:
    transport = FakeTransport(
        [BANNER, DATE, "Password:", "Login Administrator"],
        replies={"Q\r": "1.05"},
        connected=False,
    )
    session = _session(transport, sink)

    assert session.exchange("Q\r") == "1.05"
    assert session.state is SessionState.READY
    assert session.model == "DTPCP84"
    assert transport.written == ["secret\r", "Q\r"]


def test_non_banner_lines_are_reported(sink) -> None:
    transport = FakeTransport(
        [DATE, "Password:", "Login Administrator"],
        replies={"Q\r": "1.05"},
        connected=False,
    )
    session = _session(transport, sink)

    assert session.exchange("Q\r") == "1.05"
    reports = [m for m in sink.messages() if "does this line contain the model name?" in m]
    assert len(reports) == 3
    assert session.model is None


def test_login_gives_up_after_seven_lines(sink) -> None:
    transport = FakeTransport([BANNER] + ["Password:"] * 10, connected=False)
    session = _session(transport, sink)

    assert session.exchange("Q\r") == UNKNOWN_SENTINEL
    assert transport.reads == 7
    assert "Q\r" not in transport.written
    assert session.state is SessionState.DISCONNECTED
    assert any("after 7 lines" in m for m in sink.messages())


def test_password_write_failure_aborts_login(sink) -> None:
    transport = FakeTransport([BANNER, "Password:"], connected=False)
    transport.write_ok = False
    session = _session(transport, sink)

    assert session.exchange("Q\r") == UNKNOWN_SENTINEL
    assert "failed to send password" in sink.messages()


def test_missing_password_short_circuits_to_ready(sink) -> None:
    transport = FakeTransport([BANNER], replies={"Q\r": "1.05"}, connected=False)
    session = _session(transport, sink, key="10.0.0.5")

    assert session.exchange("Q\r") == "1.05"
    assert session.model == "DTPCP84"
    assert any("unauthenticated login not implemented" in m for m in sink.messages())


def test_ssh_skips_negotiation_and_keeps_last_line(sink) -> None:
    transport = FakeTransport(
        replies={"Q\r": "Welcome to the device\r\n\r\n1.05\r\n"},
        connected=False,
        protocol="ssh",
    )
    session = _session(transport, sink)

    assert session.exchange("Q\r") == "1.05"
    assert transport.written == ["Q\r"]


def test_device_errors_are_folded_and_recorded(sink) -> None:
    transport = FakeTransport(replies={"Z\r": "E10"})
    session = _session(transport, sink)

    reply = session.exchange("Z\r")

    assert reply == "device returned error: E10: Invalid command"
    assert reply in sink.messages()


def test_quotes_are_stripped(sink) -> None:
    transport = FakeTransport(replies={"!\r": '"In2 All"'})
    assert _session(transport, sink).exchange("!\r") == "In2 All"


def test_transport_failures_return_sentinel(sink) -> None:
    transport = FakeTransport()
    transport.write_ok = False
    session = _session(transport, sink)
    assert session.exchange("Q\r") == UNKNOWN_SENTINEL
    assert session.state is SessionState.DISCONNECTED

    transport.write_ok = True
    transport.read_failures = 1
    assert session.exchange("Q\r") == UNKNOWN_SENTINEL
    assert any("connection reset" in m for m in sink.messages())


def test_model_lookup_negotiates_when_disconnected(sink) -> None:
    transport = FakeTransport([BANNER, "Password:", "Login Administrator"], connected=False)
    session = _session(transport, sink)

    assert session.ensure_model() == "DTPCP84"
    assert transport.written == ["secret\r"]
