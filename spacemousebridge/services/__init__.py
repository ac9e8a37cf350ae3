"""Session services: the device actor and its helpers."""

from .reconnect import ReconnectPolicy
from .session import DeviceSession, Subscriber
from .subscription import Subscription

__all__ = ["DeviceSession", "ReconnectPolicy", "Subscriber", "Subscription"]
