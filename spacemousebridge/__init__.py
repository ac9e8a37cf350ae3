"""SpaceMouse Bridge package initialisation."""

__version__ = "0.1.0"

from .api import SpaceMouse
from .config.model import SessionConfig
from .errors import (
    AdapterNotAvailable,
    DeviceNotConnected,
    SpaceMouseError,
    SpawnFailed,
    UnsupportedPlatform,
    WriteFailed,
)
from .services.session import DeviceSession
from .services.subscription import Subscription

__all__ = [
    "AdapterNotAvailable",
    "DeviceNotConnected",
    "DeviceSession",
    "SessionConfig",
    "SpaceMouse",
    "SpaceMouseError",
    "SpawnFailed",
    "Subscription",
    "UnsupportedPlatform",
    "WriteFailed",
]
