"""Tests for security audit events."""

import pytest

from crumbs.security.audit import SecurityEvent, emit_security_event, set_security_event_sink


def test_emit_without_sink_is_noop() -> None:
    set_security_event_sink(None)
    emit_security_event("cookie.test")


def test_sink_receives_structured_event() -> None:
    events: list[SecurityEvent] = []
    set_security_event_sink(events.append)
    try:
        emit_security_event(
            "cookie.rotated",
            cookie_key="vixen",
            cookie_name="__Secure-vixen",
            details={"type": "aes-gcm"},
        )
    finally:
        set_security_event_sink(None)

    (event,) = events
    assert event.name == "cookie.rotated"
    assert event.cookie_key == "vixen"
    assert event.cookie_name == "__Secure-vixen"
    assert event.details == {"type": "aes-gcm"}
    assert event.timestamp > 0


def test_clearing_sink_stops_delivery() -> None:
    events: list[SecurityEvent] = []
    set_security_event_sink(events.append)
    set_security_event_sink(None)
    emit_security_event("cookie.indecipherable")
    assert events == []


def test_event_is_frozen() -> None:
    event = SecurityEvent(name="cookie.rotated")
    assert event.details == {}
    with pytest.raises(AttributeError):
        event.name = "other"  # type: ignore[misc]
