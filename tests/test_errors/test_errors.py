"""Tests for error classes and pre-defined error instances."""

from __future__ import annotations

import pytest

from solsignal.errors import definitions as defs
from solsignal.errors.alert_errors import (
    AlertError,
    ConfigurationError,
    DeliveryFailure,
    MalformedEvent,
    MalformedRequest,
    RegistryLinkFailure,
    Unauthorized,
)


class TestAlertError:
    def test_default_attributes(self) -> None:
        err = AlertError("something broke")
        assert str(err) == "something broke"
        assert err.message == "something broke"
        assert err.status_code == 500
        assert err.code == "alert-error"

    def test_custom_attributes(self) -> None:
        err = AlertError("bad request", status_code=400, code="bad-req")
        assert err.status_code == 400
        assert err.code == "bad-req"

    def test_is_exception(self) -> None:
        with pytest.raises(AlertError, match="boom"):
            raise AlertError("boom")


@pytest.mark.parametrize(
    ("cls", "status", "code"),
    [
        (MalformedRequest, 400, "malformed-request"),
        (MalformedEvent, 400, "malformed-event"),
        (Unauthorized, 401, "unauthorized"),
        (ConfigurationError, 500, "configuration-error"),
        (DeliveryFailure, 502, "delivery-failure"),
        (RegistryLinkFailure, 502, "registry-link-failure"),
    ],
)
def test_subclass_defaults(cls: type[AlertError], status: int, code: str) -> None:
    err = cls("x")
    assert isinstance(err, AlertError)
    assert err.status_code == status
    assert err.code == code


def test_malformed_event_is_malformed_request() -> None:
    assert issubclass(MalformedEvent, MalformedRequest)


def test_definitions() -> None:
    assert defs.ErrUnauthorized.status_code == 401
    assert defs.ErrBodyNotJSON.status_code == 400
    assert defs.ErrBodyNotJSON.code == "body-not-json"
