"""Tests for BridgeProcess using a Python script as a fake helper."""

from __future__ import annotations

import asyncio
import logging
import sys
import textwrap

import psutil
import pytest

from spacemousebridge.errors import SpawnFailed, WriteFailed
from spacemousebridge.protocol import (
    Axis,
    LedAckMessage,
    LedState,
    MotionMessage,
    ProtocolError,
    StatusMessage,
)
from spacemousebridge.transport.bridge import BridgeEvent, BridgeProcess, ProcessExited


async def _spawn_script(source: str, **kwargs) -> BridgeProcess:
    return await BridgeProcess.spawn(
        sys.executable,
        args=["-c", textwrap.dedent(source)],
        stop_timeout=2.0,
        **kwargs,
    )


async def _collect(bridge: BridgeProcess) -> list[BridgeEvent]:
    async with asyncio.timeout(10):
        return [event async for event in bridge]


async def _next_event(iterator) -> BridgeEvent:
    async with asyncio.timeout(10):
        return await anext(iterator)


@pytest.mark.asyncio
async def test_spawn_missing_executable(tmp_path) -> None:
    with pytest.raises(SpawnFailed):
        await BridgeProcess.spawn(tmp_path / "hid_reader")


@pytest.mark.asyncio
async def test_spawn_directory_is_rejected(tmp_path) -> None:
    with pytest.raises(SpawnFailed):
        await BridgeProcess.spawn(tmp_path)


@pytest.mark.asyncio
async def test_events_are_decoded_and_end_with_exit() -> None:
    bridge = await _spawn_script(
        """
        for line in ("STATUS:ready", "garbage", "MOTION:x=175"):
            print(line, flush=True)
        """
    )
    events = await _collect(bridge)

    assert events == [
        StatusMessage(message="ready"),
        ProtocolError(raw_line="garbage", reason="unknown message tag"),
        MotionMessage(axis=Axis.X, raw_value=175),
        ProcessExited(status=0),
    ]
    assert not bridge.running
    await bridge.terminate()


@pytest.mark.asyncio
async def test_exit_status_is_reported_once() -> None:
    bridge = await _spawn_script("import sys; sys.exit(3)")
    events = await _collect(bridge)

    assert events == [ProcessExited(status=3)]
    assert bridge.returncode == 3
    # The stream stays finished.
    assert await _collect(bridge) == []


@pytest.mark.asyncio
async def test_send_line_reaches_helper() -> None:
    bridge = await _spawn_script(
        """
        import sys
        print("STATUS:ready", flush=True)
        for line in sys.stdin:
            if line.strip() == "LED:on":
                print("LED:state=on,method=2", flush=True)
        """
    )
    stream = bridge.events()
    try:
        assert await _next_event(stream) == StatusMessage(message="ready")
        await bridge.send_line("LED:on")
        assert await _next_event(stream) == LedAckMessage(state=LedState.ON, method=2)
    finally:
        await bridge.terminate()

    assert isinstance(await _next_event(stream), ProcessExited)
    assert not bridge.running


@pytest.mark.asyncio
async def test_send_line_after_exit_fails() -> None:
    bridge = await _spawn_script("pass")
    await _collect(bridge)

    with pytest.raises(WriteFailed):
        await bridge.send_line("LED:on")
    await bridge.terminate()


@pytest.mark.asyncio
async def test_send_line_rejects_embedded_newline() -> None:
    bridge = await _spawn_script("import sys; sys.stdin.read()")
    try:
        with pytest.raises(ValueError):
            await bridge.send_line("LED:on\nLED:off")
    finally:
        await bridge.terminate()


@pytest.mark.asyncio
async def test_overlong_line_is_a_protocol_error() -> None:
    bridge = await _spawn_script(
        """
        print("MOTION:x=" + "1" * 4000, flush=True)
        print("STATUS:ready", flush=True)
        """
    )
    events = await _collect(bridge)

    assert any(isinstance(event, ProtocolError) for event in events)
    assert StatusMessage(message="ready") in events
    assert events[-1] == ProcessExited(status=0)


@pytest.mark.asyncio
async def test_terminate_is_idempotent_and_tolerates_dead_child() -> None:
    bridge = await _spawn_script("import time; time.sleep(60)")
    assert bridge.running

    await bridge.terminate()
    await bridge.terminate()

    assert not bridge.running
    events = await _collect(bridge)
    assert len(events) == 1
    assert isinstance(events[0], ProcessExited)


@pytest.mark.asyncio
async def test_terminate_discards_pending_output() -> None:
    bridge = await _spawn_script(
        """
        import time
        while True:
            print("MOTION:x=1", flush=True)
            time.sleep(0.001)
        """
    )
    stream = bridge.events()
    assert isinstance(await _next_event(stream), MotionMessage)
    await bridge.terminate()

    async with asyncio.timeout(10):
        remaining = [event async for event in stream]
    assert isinstance(remaining[-1], ProcessExited)
    assert sum(isinstance(event, ProcessExited) for event in remaining) == 1


@pytest.mark.asyncio
async def test_terminate_kills_helper_descendants() -> None:
    bridge = await _spawn_script(
        """
        import subprocess, sys, time
        child = subprocess.Popen([sys.executable, "-c", "import time; time.sleep(60)"])
        print(f"CHILD:{child.pid}", flush=True)
        time.sleep(60)
        """
    )
    stream = bridge.events()
    announcement = await _next_event(stream)
    assert isinstance(announcement, ProtocolError)
    child_pid = int(announcement.raw_line.partition(":")[2])

    await bridge.terminate()

    try:
        status = psutil.Process(child_pid).status()
    except psutil.NoSuchProcess:
        return
    assert status == psutil.STATUS_ZOMBIE


@pytest.mark.asyncio
async def test_stderr_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING, logger="spacemousebridge.bridge")
    bridge = await _spawn_script(
        """
        import sys
        print("ERROR:No SpaceMouse found", file=sys.stderr, flush=True)
        """
    )
    await _collect(bridge)
    await bridge.terminate()

    assert "helper: ERROR:No SpaceMouse found" in caplog.text
