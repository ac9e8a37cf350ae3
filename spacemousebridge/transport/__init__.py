"""Transport layer: the helper subprocess."""

from .bridge import BridgeEvent, BridgeProcess, ProcessExited

__all__ = ["BridgeEvent", "BridgeProcess", "ProcessExited"]
