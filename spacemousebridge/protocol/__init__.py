"""Helper line protocol: constants, message types and codec."""

from .codec import decode_line, encode_led_command, encode_line, normalize_motion
from .protocol import (
    LED_COMMANDS,
    MAX_LINE_LENGTH,
    MOTION_RAW_RANGE,
    Axis,
    ButtonAction,
    HelperStatus,
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

__all__ = [
    "Axis",
    "ButtonAction",
    "ButtonMessage",
    "DecodedLine",
    "HelperMessage",
    "HelperStatus",
    "LED_COMMANDS",
    "LedAckMessage",
    "LedState",
    "MAX_LINE_LENGTH",
    "MOTION_RAW_RANGE",
    "MotionMessage",
    "ProtocolError",
    "StatusMessage",
    "Tag",
    "decode_line",
    "encode_led_command",
    "encode_line",
    "normalize_motion",
]
