"""Exception hierarchy for SpaceMouse Bridge."""

from __future__ import annotations


class SpaceMouseError(Exception):
    """Base class for every error raised by the bridge."""


class DeviceNotConnected(SpaceMouseError):
    """A device command was issued while no SpaceMouse is connected."""


class AdapterNotAvailable(SpaceMouseError):
    """The platform adapter has no live bridge although one was expected."""


class SpawnFailed(SpaceMouseError):
    """The hardware helper executable is missing or could not be started."""


class WriteFailed(SpaceMouseError):
    """A command could not be written to the helper's stdin."""


class UnsupportedPlatform(SpaceMouseError):
    """No platform adapter is available for the running operating system."""


__all__ = [
    "AdapterNotAvailable",
    "DeviceNotConnected",
    "SpaceMouseError",
    "SpawnFailed",
    "UnsupportedPlatform",
    "WriteFailed",
]
