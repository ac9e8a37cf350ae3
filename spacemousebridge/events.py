"""Public event values delivered to session subscribers.

All events are frozen, tagged msgspec structs so they can be matched on
structurally and serialised with ``msgspec.json.encode``.
"""

from __future__ import annotations

import time

import msgspec
from msgspec import structs

from .platform.base import PlatformInfo
from .protocol.protocol import ButtonAction, LedState
from .state.context import MotionSample


def monotonic_ms() -> int:
    return time.monotonic_ns() // 1_000_000


class DeviceInfo(msgspec.Struct, frozen=True):
    platform: str
    method: str
    version: str
    led_state: LedState
    last_motion: MotionSample
    timestamp: int

    @classmethod
    def build(cls, info: PlatformInfo, led_state: LedState, motion: MotionSample) -> DeviceInfo:
        return cls(
            platform=info.platform,
            method=info.method,
            version=info.version,
            led_state=led_state,
            last_motion=motion,
            timestamp=monotonic_ms(),
        )


class Connected(msgspec.Struct, frozen=True, tag="connected"):
    device_info: DeviceInfo


class Disconnected(msgspec.Struct, frozen=True, tag="disconnected"):
    device_info: DeviceInfo


class Motion(msgspec.Struct, frozen=True, tag="motion"):
    """Full six-axis pose; every axis carries its latest known value."""

    x: float
    y: float
    z: float
    rx: float
    ry: float
    rz: float

    @classmethod
    def from_sample(cls, sample: MotionSample) -> Motion:
        return cls(**structs.asdict(sample))


class Button(msgspec.Struct, frozen=True, tag="button"):
    id: int
    state: ButtonAction


class LedChanged(msgspec.Struct, frozen=True, tag="led_changed"):
    from_: LedState = msgspec.field(name="from")
    to: LedState
    timestamp: int


SessionEvent = Connected | Disconnected | Motion | Button | LedChanged


__all__ = [
    "Button",
    "Connected",
    "DeviceInfo",
    "Disconnected",
    "LedChanged",
    "Motion",
    "SessionEvent",
    "monotonic_ms",
]
