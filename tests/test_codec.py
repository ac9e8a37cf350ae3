"""Tests for the helper line protocol codec."""

from __future__ import annotations

import pytest

from spacemousebridge.protocol import (
    Axis,
    ButtonAction,
    ButtonMessage,
    LedAckMessage,
    LedState,
    MotionMessage,
    ProtocolError,
    StatusMessage,
    decode_line,
    encode_led_command,
    encode_line,
    normalize_motion,
)


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("STATUS:ready", StatusMessage(message="ready")),
        ("STATUS:device_connected\n", StatusMessage(message="device_connected")),
        (b"STATUS:device_disconnected\r\n", StatusMessage(message="device_disconnected")),
        ("MOTION:x=175", MotionMessage(axis=Axis.X, raw_value=175)),
        ("MOTION:rz=-350", MotionMessage(axis=Axis.RZ, raw_value=-350)),
        ("MOTION:ry=+12", MotionMessage(axis=Axis.RY, raw_value=12)),
        ("BUTTON:id=1,state=pressed", ButtonMessage(id=1, action=ButtonAction.PRESSED)),
        ("BUTTON:state=released,id=2", ButtonMessage(id=2, action=ButtonAction.RELEASED)),
        ("LED:state=on,method=1", LedAckMessage(state=LedState.ON, method=1)),
        ("LED:state=off,method=3", LedAckMessage(state=LedState.OFF, method=3)),
    ],
)
def test_decode_valid_lines(line: str | bytes, expected: object) -> None:
    assert decode_line(line) == expected


@pytest.mark.parametrize(
    "line",
    [
        "garbage",
        "",
        "   ",
        "STATUS:",
        "UNKNOWN:thing",
        "MOTION:q=10",
        "MOTION:x",
        "MOTION:x=abc",
        "MOTION:x=1_000",
        "MOTION:x=1.5",
        "BUTTON:id=1",
        "BUTTON:id=x,state=pressed",
        "BUTTON:id=1,state=held",
        "BUTTON:id=1;state=pressed",
        "LED:on",
        "LED:state=unknown,method=1",
        "LED:state=on",
        "motion:x=1",
    ],
)
def test_decode_malformed_lines_never_raise(line: str) -> None:
    result = decode_line(line)
    assert isinstance(result, ProtocolError)
    assert result.raw_line == line.strip()
    assert result.reason


def test_decode_non_ascii_bytes() -> None:
    result = decode_line(b"MOTION:x=\xff\xfe")
    assert isinstance(result, ProtocolError)
    assert result.reason == "line is not ASCII"


def test_protocol_error_keeps_raw_line() -> None:
    result = decode_line("BUTTON:id=7,state=maybe\n")
    assert isinstance(result, ProtocolError)
    assert result.raw_line == "BUTTON:id=7,state=maybe"
    assert "maybe" in result.reason


def test_encode_led_commands() -> None:
    assert encode_led_command(LedState.ON) == "LED:on"
    assert encode_led_command("off") == "LED:off"


def test_encode_led_command_rejects_unknown() -> None:
    with pytest.raises(ValueError):
        encode_led_command(LedState.UNKNOWN)
    with pytest.raises(ValueError):
        encode_led_command("blink")


def test_encode_line_appends_terminator() -> None:
    assert encode_line("LED:on") == b"LED:on\n"
    with pytest.raises(ValueError):
        encode_line("LED:on\nLED:off")


def test_normalize_motion_range() -> None:
    for raw in range(-350, 351):
        value = normalize_motion(raw)
        assert value == raw / 350.0
        assert -1.0 <= value <= 1.0
        if raw > 0:
            assert value > 0
        elif raw < 0:
            assert value < 0
    assert normalize_motion(0) == 0.0
    assert normalize_motion(175) == 0.5
    assert normalize_motion(-350) == -1.0


def test_normalize_motion_clamp_is_opt_in() -> None:
    assert normalize_motion(700) == 2.0
    assert normalize_motion(700, clamp=True) == 1.0
    assert normalize_motion(-1000, clamp=True) == -1.0
    assert normalize_motion(100, clamp=True) == 100 / 350.0
