"""Tests for the connection state machine and state containers."""

from __future__ import annotations

from spacemousebridge.config.model import SessionConfig
from spacemousebridge.protocol.protocol import Axis, LedState
from spacemousebridge.state.context import (
    ConnectionState,
    ConnectionTracker,
    MotionSample,
    create_session_state,
)


def test_tracker_happy_path() -> None:
    tracker = ConnectionTracker()
    assert tracker.state is ConnectionState.DISCONNECTED

    assert tracker.begin_connecting()
    assert tracker.state is ConnectionState.CONNECTING
    assert tracker.device_attached()
    assert tracker.state is ConnectionState.CONNECTED
    assert tracker.device_detached()
    assert tracker.state is ConnectionState.DISCONNECTED


def test_tracker_ignores_invalid_triggers() -> None:
    tracker = ConnectionTracker()

    assert not tracker.device_detached()
    assert tracker.state is ConnectionState.DISCONNECTED

    tracker.begin_connecting()
    assert not tracker.begin_connecting()
    assert not tracker.device_detached()
    assert tracker.state is ConnectionState.CONNECTING

    tracker.device_attached()
    assert not tracker.device_attached()
    assert not tracker.begin_connecting()
    assert tracker.state is ConnectionState.CONNECTED


def test_tracker_error_and_recovery() -> None:
    tracker = ConnectionTracker()
    tracker.begin_connecting()
    tracker.device_attached()

    assert tracker.fail()
    assert tracker.state is ConnectionState.ERROR
    assert not tracker.device_attached()
    assert tracker.begin_connecting()
    assert tracker.state is ConnectionState.CONNECTING

    assert tracker.halt()
    assert tracker.state is ConnectionState.DISCONNECTED


def test_trackers_are_independent() -> None:
    first, second = ConnectionTracker(), ConnectionTracker()
    first.begin_connecting()

    assert first.state is ConnectionState.CONNECTING
    assert second.state is ConnectionState.DISCONNECTED


def test_motion_sample_updates_single_axis() -> None:
    sample = MotionSample(x=0.5)

    updated = sample.with_axis(Axis.RZ, -0.25)

    assert updated == MotionSample(x=0.5, rz=-0.25)
    assert sample == MotionSample(x=0.5)


def test_create_session_state_uses_config() -> None:
    state = create_session_state(SessionConfig(auto_reconnect=False))

    assert state.connection is ConnectionState.DISCONNECTED
    assert state.led_state is LedState.UNKNOWN
    assert not state.auto_reconnect
    assert state.buttons == {}
    assert state.stats.protocol_errors == 0
