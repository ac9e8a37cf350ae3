"""Platform adapter contract.

An adapter hides how a given operating system reaches the SpaceMouse. The
session only ever talks to this interface: it owns one :class:`AdapterState`
and hands it back on every call, so adapters hold no per-session state of
their own.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass

import msgspec

from ..protocol.protocol import HelperStatus, LedState
from ..protocol.structures import LedAckMessage, StatusMessage
from ..transport.bridge import BridgeEvent, BridgeProcess, ProcessExited

# Receives (monitoring generation, event) for every adapter-level event.
AdapterOwner = Callable[[int, BridgeEvent], None]


class PlatformInfo(msgspec.Struct, frozen=True):
    platform: str
    method: str
    version: str


@dataclass
class AdapterState:
    """Mutable adapter bookkeeping owned by a single session."""

    owner: AdapterOwner
    bridge: BridgeProcess | None = None
    reader: asyncio.Task[None] | None = None
    device_connected: bool = False
    led_state: LedState = LedState.UNKNOWN
    led_method: int | None = None
    generation: int = 0


class PlatformAdapter(ABC):
    """Uniform operation set over one way of reaching the hardware."""

    def init(self, owner: AdapterOwner) -> AdapterState:
        return AdapterState(owner=owner)

    @abstractmethod
    async def start_monitoring(self, state: AdapterState) -> AdapterState:
        """Begin delivering events to ``state.owner``; raise on failure."""

    @abstractmethod
    async def stop_monitoring(self, state: AdapterState) -> None:
        """Stop delivering events. Must tolerate an already-dead backend."""

    @abstractmethod
    async def send_led_command(self, state: AdapterState, command: LedState) -> AdapterState:
        """Ask the hardware to switch the LED on or off."""

    @abstractmethod
    def describe(self) -> PlatformInfo:
        """Static description of this adapter."""

    def get_led_state(self, state: AdapterState) -> LedState:
        return state.led_state

    def is_connected(self, state: AdapterState) -> bool:
        return state.device_connected

    def apply_event(self, state: AdapterState, event: BridgeEvent) -> None:
        """Fold one delivered event into the adapter bookkeeping."""
        match event:
            case StatusMessage(message=HelperStatus.DEVICE_CONNECTED):
                state.device_connected = True
            case StatusMessage(message=HelperStatus.DEVICE_DISCONNECTED):
                state.device_connected = False
                state.led_state = LedState.UNKNOWN
                state.led_method = None
            case LedAckMessage(state=led, method=method):
                state.led_state = led
                state.led_method = method
            case ProcessExited():
                state.bridge = None
                state.device_connected = False
                state.led_state = LedState.UNKNOWN
                state.led_method = None
            case _:
                pass


__all__ = ["AdapterOwner", "AdapterState", "PlatformAdapter", "PlatformInfo"]
