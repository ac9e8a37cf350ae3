"""State container for a SpaceMouse device session."""

from __future__ import annotations

import logging
from collections.abc import Hashable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any

import msgspec
from msgspec import structs
from transitions import Machine

from ..config.model import SessionConfig
from ..platform.base import AdapterState
from ..protocol.protocol import Axis, ButtonAction, LedState

logger = logging.getLogger("spacemousebridge.state")


class ConnectionState(StrEnum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    ERROR = "error"


@dataclass
class ConnectionTracker:
    """Connection lifecycle driven by a ``transitions`` state machine.

    Triggers return ``False`` instead of raising when they do not apply to
    the current state, so callers can tell whether a transition happened.
    """

    fsm_state: str = ConnectionState.DISCONNECTED.value
    _machine: Any = None

    def __post_init__(self) -> None:
        self._machine = Machine(
            model=self,
            states=[state.value for state in ConnectionState],
            initial=ConnectionState.DISCONNECTED.value,
            model_attribute="fsm_state",
            auto_transitions=False,
            ignore_invalid_triggers=True,
        )
        self._machine.add_transition(
            "begin_connecting",
            [ConnectionState.DISCONNECTED.value, ConnectionState.ERROR.value],
            ConnectionState.CONNECTING.value,
        )
        self._machine.add_transition(
            "device_attached",
            [ConnectionState.CONNECTING.value, ConnectionState.DISCONNECTED.value],
            ConnectionState.CONNECTED.value,
        )
        self._machine.add_transition(
            "device_detached",
            ConnectionState.CONNECTED.value,
            ConnectionState.DISCONNECTED.value,
        )
        self._machine.add_transition("fail", "*", ConnectionState.ERROR.value)
        self._machine.add_transition("halt", "*", ConnectionState.DISCONNECTED.value)

    if TYPE_CHECKING:
        def begin_connecting(self) -> bool: ...
        def device_attached(self) -> bool: ...
        def device_detached(self) -> bool: ...
        def fail(self) -> bool: ...
        def halt(self) -> bool: ...

    @property
    def state(self) -> ConnectionState:
        return ConnectionState(self.fsm_state)


class MotionSample(msgspec.Struct, frozen=True):
    """Last known pose, each axis nominally in [-1.0, 1.0]."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    rx: float = 0.0
    ry: float = 0.0
    rz: float = 0.0

    def with_axis(self, axis: Axis, value: float) -> MotionSample:
        return structs.replace(self, **{axis.value: value})


class SessionStats(msgspec.Struct):
    protocol_errors: int = 0
    events_delivered: int = 0
    reconnect_attempts: int = 0
    bridge_exits: int = 0
    dropped_events: int = 0


@dataclass
class SessionState:
    """Everything the session actor owns. Mutated only by the actor."""

    config: SessionConfig
    tracker: ConnectionTracker = field(default_factory=ConnectionTracker)
    motion: MotionSample = field(default_factory=MotionSample)
    buttons: dict[int, ButtonAction] = field(default_factory=dict)
    led_state: LedState = LedState.UNKNOWN
    # dict keys give an insertion-ordered set.
    subscribers: dict[Hashable, None] = field(default_factory=dict)
    adapter_state: AdapterState | None = None
    auto_reconnect: bool = True
    stats: SessionStats = field(default_factory=SessionStats)

    @property
    def connection(self) -> ConnectionState:
        return self.tracker.state


def create_session_state(config: SessionConfig) -> SessionState:
    state = SessionState(config=config, auto_reconnect=config.auto_reconnect)
    logger.debug("Session state created (auto_reconnect=%s)", state.auto_reconnect)
    return state


__all__ = [
    "ConnectionState",
    "ConnectionTracker",
    "MotionSample",
    "SessionState",
    "SessionStats",
    "create_session_state",
]
