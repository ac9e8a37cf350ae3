"""Shared mocks for SpaceMouse bridge tests."""

from __future__ import annotations

from unittest.mock import MagicMock

from spacemousebridge.errors import DeviceNotConnected, SpaceMouseError
from spacemousebridge.platform.base import (
    AdapterOwner,
    AdapterState,
    PlatformAdapter,
    PlatformInfo,
)
from spacemousebridge.protocol.codec import decode_line
from spacemousebridge.protocol.protocol import LedState
from spacemousebridge.transport.bridge import BridgeEvent, BridgeProcess, ProcessExited


class FakeAdapter(PlatformAdapter):
    """Scripted adapter: tests push helper lines in through :meth:`emit_line`."""

    def __init__(
        self,
        *,
        fail_start: SpaceMouseError | None = None,
        fail_led: SpaceMouseError | None = None,
    ) -> None:
        self.fail_start = fail_start
        self.fail_led = fail_led
        self.start_calls = 0
        self.stop_calls = 0
        self.led_commands: list[LedState] = []
        self.state: AdapterState | None = None
        self.info = PlatformInfo(platform="test", method="fake_helper", version="1.0.0")

    def init(self, owner: AdapterOwner) -> AdapterState:
        self.state = super().init(owner)
        return self.state

    async def start_monitoring(self, state: AdapterState) -> AdapterState:
        self.start_calls += 1
        if self.fail_start is not None:
            raise self.fail_start
        if state.bridge is not None:
            return state
        state.generation += 1
        state.bridge = MagicMock(spec=BridgeProcess)
        return state

    async def stop_monitoring(self, state: AdapterState) -> None:
        self.stop_calls += 1
        state.generation += 1
        state.bridge = None
        state.device_connected = False
        state.led_state = LedState.UNKNOWN

    async def send_led_command(self, state: AdapterState, command: LedState) -> AdapterState:
        if self.fail_led is not None:
            raise self.fail_led
        if not state.device_connected:
            raise DeviceNotConnected("fake device is not connected")
        self.led_commands.append(command)
        state.led_state = command
        return state

    def describe(self) -> PlatformInfo:
        return self.info

    def emit(self, event: BridgeEvent, *, generation: int | None = None) -> None:
        assert self.state is not None, "adapter was never initialised"
        self.state.owner(self.state.generation if generation is None else generation, event)

    def emit_line(self, line: str, *, generation: int | None = None) -> None:
        self.emit(decode_line(line), generation=generation)

    def emit_lines(self, *lines: str) -> None:
        for line in lines:
            self.emit_line(line)

    def exit(self, status: int | None = 0) -> None:
        self.emit(ProcessExited(status=status))
