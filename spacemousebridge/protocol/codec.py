"""Pure encoder/decoder for the helper line protocol.

Grammar (one message per newline-terminated ASCII line)::

    STATUS:<message>
    MOTION:<axis>=<signed int>          axis in x, y, z, rx, ry, rz
    BUTTON:id=<int>,state=pressed|released
    LED:state=on|off,method=<int>

Host to helper commands are ``LED:on`` and ``LED:off``.

Decoding never raises: anything outside the grammar becomes a
:class:`ProtocolError` carrying the offending line.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Final

from .protocol import (
    FIELD_SEPARATOR,
    LED_COMMANDS,
    LINE_ENCODING,
    LINE_TERMINATOR,
    MOTION_RAW_RANGE,
    TAG_SEPARATOR,
    VALUE_SEPARATOR,
    Axis,
    ButtonAction,
    LedState,
    Tag,
)
from .structures import (
    ButtonMessage,
    DecodedLine,
    HelperMessage,
    LedAckMessage,
    MotionMessage,
    ProtocolError,
    StatusMessage,
)

_INT_PATTERN: Final = re.compile(r"[+-]?[0-9]+")


def _parse_int(value: str, name: str) -> int:
    if not _INT_PATTERN.fullmatch(value):
        raise ValueError(f"{name} is not an integer: {value!r}")
    return int(value)


def _parse_fields(body: str) -> dict[str, str]:
    fields: dict[str, str] = {}
    for item in body.split(FIELD_SEPARATOR):
        key, sep, value = item.partition(VALUE_SEPARATOR)
        if not sep or not key:
            raise ValueError(f"malformed field {item!r}")
        fields[key] = value
    return fields


def _require(fields: dict[str, str], name: str) -> str:
    value = fields.get(name)
    if value is None:
        raise ValueError(f"missing field {name!r}")
    return value


def _decode_status(body: str) -> StatusMessage:
    if not body:
        raise ValueError("empty status message")
    return StatusMessage(message=body)


def _decode_motion(body: str) -> MotionMessage:
    axis_name, sep, raw = body.partition(VALUE_SEPARATOR)
    if not sep:
        raise ValueError("motion report without value")
    try:
        axis = Axis(axis_name)
    except ValueError:
        raise ValueError(f"unknown axis {axis_name!r}") from None
    return MotionMessage(axis=axis, raw_value=_parse_int(raw, "motion value"))


def _decode_button(body: str) -> ButtonMessage:
    fields = _parse_fields(body)
    button_id = _parse_int(_require(fields, "id"), "button id")
    state = _require(fields, "state")
    try:
        action = ButtonAction(state)
    except ValueError:
        raise ValueError(f"unknown button state {state!r}") from None
    return ButtonMessage(id=button_id, action=action)


def _decode_led(body: str) -> LedAckMessage:
    fields = _parse_fields(body)
    state = _require(fields, "state")
    if state not in LED_COMMANDS:
        raise ValueError(f"unknown LED state {state!r}")
    method = _parse_int(_require(fields, "method"), "LED method")
    return LedAckMessage(state=LedState(state), method=method)


_DECODERS: Final[dict[str, Callable[[str], HelperMessage]]] = {
    Tag.STATUS: _decode_status,
    Tag.MOTION: _decode_motion,
    Tag.BUTTON: _decode_button,
    Tag.LED: _decode_led,
}


def decode_line(line: str | bytes) -> DecodedLine:
    """Decode one helper line into a message or a :class:`ProtocolError`."""
    if isinstance(line, (bytes, bytearray)):
        try:
            text = bytes(line).decode(LINE_ENCODING)
        except UnicodeDecodeError:
            raw = bytes(line).decode(LINE_ENCODING, errors="replace").strip()
            return ProtocolError(raw_line=raw, reason="line is not ASCII")
    else:
        text = line
    text = text.strip()
    if not text:
        return ProtocolError(raw_line=text, reason="empty line")

    tag, sep, body = text.partition(TAG_SEPARATOR)
    decoder = _DECODERS.get(tag) if sep else None
    if decoder is None:
        return ProtocolError(raw_line=text, reason="unknown message tag")
    try:
        return decoder(body)
    except ValueError as exc:
        return ProtocolError(raw_line=text, reason=str(exc))


def encode_led_command(state: LedState | str) -> str:
    """Return the exact ``LED:on`` / ``LED:off`` command string."""
    command = LedState(state)
    if command not in LED_COMMANDS:
        raise ValueError(f"LED command must be 'on' or 'off', got {state!r}")
    return f"{Tag.LED}{TAG_SEPARATOR}{command}"


def encode_line(text: str) -> bytes:
    """Frame *text* as one wire line."""
    if LINE_TERMINATOR in text or "\r" in text:
        raise ValueError("command must fit on a single line")
    return (text + LINE_TERMINATOR).encode(LINE_ENCODING)


def normalize_motion(raw_value: int, *, clamp: bool = False) -> float:
    """Scale a raw axis value from +-350 hardware units to +-1.0."""
    scaled = raw_value / float(MOTION_RAW_RANGE)
    if clamp:
        return max(-1.0, min(1.0, scaled))
    return scaled


__all__ = [
    "decode_line",
    "encode_led_command",
    "encode_line",
    "normalize_motion",
]
