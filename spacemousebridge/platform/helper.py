"""Adapter that reaches the device through a privileged helper process."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from os import PathLike
from pathlib import Path

from ..config.const import DEFAULT_STOP_TIMEOUT, HELPER_VERSION
from ..errors import AdapterNotAvailable, DeviceNotConnected
from ..protocol.codec import encode_led_command
from ..protocol.protocol import LedState
from ..transport.bridge import BridgeProcess
from .base import AdapterOwner, AdapterState, PlatformAdapter, PlatformInfo

logger = logging.getLogger("spacemousebridge.platform")


class HelperBridgeAdapter(PlatformAdapter):
    """Drive a native helper (e.g. the macOS IOKit reader) over its pipes."""

    def __init__(
        self,
        helper_path: str | PathLike[str],
        *,
        platform: str,
        method: str,
        version: str = HELPER_VERSION,
        args: Sequence[str] = (),
        stop_timeout: float = DEFAULT_STOP_TIMEOUT,
    ) -> None:
        self.helper_path = Path(helper_path)
        self.args = tuple(args)
        self.stop_timeout = stop_timeout
        self._info = PlatformInfo(platform=platform, method=method, version=version)

    def describe(self) -> PlatformInfo:
        return self._info

    async def start_monitoring(self, state: AdapterState) -> AdapterState:
        if state.bridge is not None and state.bridge.running:
            logger.debug("Helper already running (pid %d)", state.bridge.pid)
            return state
        # A bridge whose exit has not been folded in yet is torn down first.
        await self._release(state)

        bridge = await BridgeProcess.spawn(
            self.helper_path,
            args=self.args,
            stop_timeout=self.stop_timeout,
        )
        state.generation += 1
        state.bridge = bridge
        state.device_connected = False
        state.led_state = LedState.UNKNOWN
        state.led_method = None
        state.reader = asyncio.create_task(
            self._forward(state.owner, state.generation, bridge),
            name=f"spacemouse-adapter-reader-{state.generation}",
        )
        return state

    async def stop_monitoring(self, state: AdapterState) -> None:
        state.generation += 1
        state.device_connected = False
        state.led_state = LedState.UNKNOWN
        state.led_method = None
        await self._release(state)

    async def send_led_command(self, state: AdapterState, command: LedState) -> AdapterState:
        if not state.device_connected:
            raise DeviceNotConnected("SpaceMouse is not connected")
        bridge = state.bridge
        if bridge is None or not bridge.running:
            raise AdapterNotAvailable("helper process is not running")
        await bridge.send_line(encode_led_command(command))
        state.led_state = LedState(command)
        return state

    async def _release(self, state: AdapterState) -> None:
        bridge, reader = state.bridge, state.reader
        state.bridge = None
        state.reader = None
        if bridge is not None:
            await bridge.terminate()
        if reader is not None and not reader.done():
            _, pending = await asyncio.wait([reader], timeout=self.stop_timeout)
            for task in pending:
                task.cancel()

    @staticmethod
    async def _forward(owner: AdapterOwner, generation: int, bridge: BridgeProcess) -> None:
        async for event in bridge:
            owner(generation, event)


__all__ = ["HelperBridgeAdapter"]
