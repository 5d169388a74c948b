from __future__ import annotations

import dataclasses

import pytest

import sis_lib
from sis_lib import (
    ClientConfig,
    DeviceCategory,
    Method,
    Result,
    SisDeviceError,
    SisError,
    SisLoginError,
    SisNotImplemented,
    SisTransportError,
    SisUnexpectedReply,
    SisUnsupportedCombination,
    Transport,
)

from conftest import FakeTransport


def test_public_names_resolve() -> None:
    for name in sis_lib.__all__:
        assert getattr(sis_lib, name) is not None


def test_config_is_frozen() -> None:
    cfg = ClientConfig()
    with pytest.raises(dataclasses.FrozenInstanceError):
        cfg.retry_attempts = 5  # type: ignore[misc]


def test_enums_are_strings() -> None:
    assert DeviceCategory.SCALER == "Scaler"
    assert Method.parse(" get ") is Method.GET
    with pytest.raises(ValueError):
        Method.parse("DELETE")


def test_error_hierarchy() -> None:
    assert issubclass(SisNotImplemented, SisUnsupportedCombination)
    assert issubclass(SisLoginError, SisTransportError)
    err = SisUnexpectedReply("Vmt9")
    assert isinstance(err, SisError)
    assert str(err) == "unknown response: Vmt9"
    assert err.reply == "Vmt9"


def test_result_helpers() -> None:
    assert Result.success("ok").unwrap() == "ok"
    failure = Result.failure(SisDeviceError("boom", reply="E10"))
    assert not failure.ok
    with pytest.raises(SisDeviceError):
        failure.unwrap()


def test_fake_transport_satisfies_protocol() -> None:
    assert isinstance(FakeTransport(), Transport)
