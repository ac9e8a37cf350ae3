"""Session state containers."""

from .context import (
    ConnectionState,
    ConnectionTracker,
    MotionSample,
    SessionState,
    SessionStats,
    create_session_state,
)

__all__ = [
    "ConnectionState",
    "ConnectionTracker",
    "MotionSample",
    "SessionState",
    "SessionStats",
    "create_session_state",
]
