"""Typed messages decoded from the helper line protocol."""

from __future__ import annotations

import msgspec

from .protocol import Axis, ButtonAction, LedState


class StatusMessage(msgspec.Struct, frozen=True, tag="status"):
    """``STATUS:<message>`` lifecycle notification from the helper."""

    message: str


class MotionMessage(msgspec.Struct, frozen=True, tag="motion"):
    """``MOTION:<axis>=<raw>`` single-axis report in raw hardware units."""

    axis: Axis
    raw_value: int


class ButtonMessage(msgspec.Struct, frozen=True, tag="button"):
    """``BUTTON:id=<usage>,state=pressed|released`` report."""

    id: int
    action: ButtonAction


class LedAckMessage(msgspec.Struct, frozen=True, tag="led_ack"):
    """``LED:state=on|off,method=<n>`` acknowledgement of an LED command."""

    state: LedState
    method: int


class ProtocolError(msgspec.Struct, frozen=True, tag="protocol_error"):
    """A helper line that did not match the grammar."""

    raw_line: str
    reason: str = ""


HelperMessage = StatusMessage | MotionMessage | ButtonMessage | LedAckMessage
DecodedLine = HelperMessage | ProtocolError


__all__ = [
    "ButtonMessage",
    "DecodedLine",
    "HelperMessage",
    "LedAckMessage",
    "MotionMessage",
    "ProtocolError",
    "StatusMessage",
]
