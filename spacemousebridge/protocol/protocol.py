"""Constants and enumerations of the helper line protocol."""

from __future__ import annotations

from enum import StrEnum
from typing import Final

LINE_ENCODING: Final[str] = "ascii"
LINE_TERMINATOR: Final[str] = "\n"
MAX_LINE_LENGTH: Final[int] = 1024
TAG_SEPARATOR: Final[str] = ":"
FIELD_SEPARATOR: Final[str] = ","
VALUE_SEPARATOR: Final[str] = "="

# Hardware reports translation/rotation in +-350 raw units.
MOTION_RAW_RANGE: Final[int] = 350
MOTION_SCALE: Final[float] = 1.0 / MOTION_RAW_RANGE


class Tag(StrEnum):
    STATUS = "STATUS"
    MOTION = "MOTION"
    BUTTON = "BUTTON"
    LED = "LED"


class HelperStatus(StrEnum):
    READY = "ready"
    DEVICE_CONNECTED = "device_connected"
    DEVICE_DISCONNECTED = "device_disconnected"


class Axis(StrEnum):
    X = "x"
    Y = "y"
    Z = "z"
    RX = "rx"
    RY = "ry"
    RZ = "rz"


class ButtonAction(StrEnum):
    PRESSED = "pressed"
    RELEASED = "released"


class LedState(StrEnum):
    ON = "on"
    OFF = "off"
    UNKNOWN = "unknown"


LED_COMMANDS: Final[frozenset[LedState]] = frozenset({LedState.ON, LedState.OFF})


__all__ = [
    "Axis",
    "ButtonAction",
    "FIELD_SEPARATOR",
    "HelperStatus",
    "LED_COMMANDS",
    "LINE_ENCODING",
    "LINE_TERMINATOR",
    "LedState",
    "MAX_LINE_LENGTH",
    "MOTION_RAW_RANGE",
    "MOTION_SCALE",
    "TAG_SEPARATOR",
    "Tag",
    "VALUE_SEPARATOR",
]
