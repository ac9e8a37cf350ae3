"""Public entry point for SpaceMouse interaction.

Typical use::

    async with SpaceMouse() as mouse:
        events = Subscription()
        await mouse.subscribe(events)
        await mouse.start_monitoring()
        async for event in events:
            ...

Subscribers receive :mod:`spacemousebridge.events` values: ``Connected``,
``Disconnected``, ``Motion`` (all six axes, scaled to roughly +-1.0),
``Button`` and ``LedChanged``.
"""

from __future__ import annotations

from .config.model import SessionConfig
from .events import SessionEvent
from .platform.base import PlatformAdapter, PlatformInfo
from .protocol.protocol import ButtonAction, LedState
from .services.session import DeviceSession, Subscriber
from .state.context import ConnectionState, MotionSample, SessionStats


class SpaceMouse:
    """Thin facade over a :class:`DeviceSession`."""

    def __init__(
        self,
        config: SessionConfig | None = None,
        *,
        adapter: PlatformAdapter | None = None,
        session: DeviceSession | None = None,
    ) -> None:
        self.session = session if session is not None else DeviceSession(config, adapter)

    async def __aenter__(self) -> SpaceMouse:
        await self.session.__aenter__()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.session.close()

    async def close(self) -> None:
        await self.session.close()

    async def start_monitoring(self) -> None:
        """Start watching for a device.

        Raises :class:`~spacemousebridge.errors.SpawnFailed` when the helper
        cannot be started; the session stays usable and may be retried.
        """
        await self.session.start_monitoring()

    async def stop_monitoring(self) -> None:
        """Disconnect and stop watching. Always succeeds."""
        await self.session.stop_monitoring()

    async def subscribe(self, subscriber: Subscriber) -> None:
        """Register a callable that receives every :data:`SessionEvent`."""
        await self.session.subscribe(subscriber)

    async def unsubscribe(self, subscriber: Subscriber) -> None:
        await self.session.unsubscribe(subscriber)

    async def set_led(self, state: LedState | str) -> None:
        """Switch the LED ``"on"`` or ``"off"``.

        Raises :class:`~spacemousebridge.errors.DeviceNotConnected` unless a
        device is connected.
        """
        await self.session.set_led(state)

    async def set_auto_reconnect(self, enabled: bool) -> None:
        await self.session.set_auto_reconnect(enabled)

    def get_led_state(self) -> LedState:
        return self.session.get_led_state()

    def connected(self) -> bool:
        return self.session.connected()

    def connection_state(self) -> ConnectionState:
        return self.session.connection_state()

    def platform_info(self) -> PlatformInfo:
        return self.session.platform_info()

    def get_motion_state(self) -> MotionSample:
        return self.session.get_motion_state()

    def get_button_state(self) -> dict[int, ButtonAction]:
        return self.session.get_button_state()

    def stats(self) -> SessionStats:
        return self.session.stats()


__all__ = ["SessionEvent", "SpaceMouse"]
