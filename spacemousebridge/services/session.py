"""The device session actor.

A :class:`DeviceSession` owns all mutable device state. Client calls and
adapter events are posted into one inbox and processed one at a time by a
single worker task, so hardware events and commands share a total order and
nothing outside the worker ever mutates the session.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Hashable
from typing import Any

import msgspec
from msgspec import structs

from ..config.model import SessionConfig
from ..errors import DeviceNotConnected, SpaceMouseError
from ..events import (
    Button,
    Connected,
    DeviceInfo,
    Disconnected,
    LedChanged,
    Motion,
    SessionEvent,
    monotonic_ms,
)
from ..platform import select_adapter
from ..platform.base import AdapterState, PlatformAdapter, PlatformInfo
from ..protocol.codec import normalize_motion
from ..protocol.protocol import LED_COMMANDS, ButtonAction, HelperStatus, LedState
from ..protocol.structures import (
    ButtonMessage,
    LedAckMessage,
    MotionMessage,
    ProtocolError,
    StatusMessage,
)
from ..state.context import (
    ConnectionState,
    MotionSample,
    SessionStats,
    create_session_state,
)
from ..transport.bridge import BridgeEvent, ProcessExited
from .reconnect import ReconnectPolicy

logger = logging.getLogger("spacemousebridge.session")

Subscriber = Callable[[SessionEvent], None]


class _Call(msgspec.Struct):
    handler: Callable[..., Awaitable[Any]]
    args: tuple[Any, ...]
    future: asyncio.Future[Any]


class _AdapterEvent(msgspec.Struct, frozen=True):
    generation: int
    event: BridgeEvent


class _ReconnectTick(msgspec.Struct, frozen=True):
    token: int


class _Shutdown(msgspec.Struct, frozen=True):
    pass


_InboxItem = _Call | _AdapterEvent | _ReconnectTick | _Shutdown


class DeviceSession:
    """Single stateful owner of one SpaceMouse connection."""

    def __init__(
        self,
        config: SessionConfig | None = None,
        adapter: PlatformAdapter | None = None,
    ) -> None:
        self.config = config if config is not None else SessionConfig()
        self.adapter = adapter if adapter is not None else select_adapter(self.config)
        self.state = create_session_state(self.config)
        self.state.adapter_state = self.adapter.init(self._on_adapter_event)
        self._policy = ReconnectPolicy(
            self.config.reconnect_delay,
            self.config.reconnect_retry_interval,
        )
        self._inbox: asyncio.Queue[_InboxItem] = asyncio.Queue()
        self._worker: asyncio.Task[None] | None = None
        self._reconnect_handle: asyncio.TimerHandle | None = None
        self._reconnect_token = 0
        self._closed = False
        info = self.adapter.describe()
        logger.info("SpaceMouse session initialised (platform: %s/%s)", info.platform, info.method)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start the worker task. Called implicitly by every operation."""
        if self._closed:
            raise RuntimeError("session is closed")
        if self._worker is None or self._worker.done():
            self._worker = asyncio.create_task(self._run(), name="spacemouse-session")

    async def close(self) -> None:
        """Stop monitoring and shut the worker down."""
        if self._closed:
            return
        try:
            await self.stop_monitoring()
        finally:
            self._closed = True
            self._cancel_reconnect()
            worker, self._worker = self._worker, None
            if worker is not None and not worker.done():
                self._inbox.put_nowait(_Shutdown())
                await worker

    async def drain(self) -> None:
        """Wait until every item queued so far has been processed."""
        self.start()
        await self._inbox.join()

    async def __aenter__(self) -> DeviceSession:
        self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Public operations (serialised through the inbox)
    # ------------------------------------------------------------------

    async def start_monitoring(self) -> None:
        await self._call(self._handle_start_monitoring)

    async def stop_monitoring(self) -> None:
        await self._call(self._handle_stop_monitoring)

    async def subscribe(self, subscriber: Subscriber) -> None:
        if not callable(subscriber) or not isinstance(subscriber, Hashable):
            raise TypeError("subscriber must be a hashable callable")
        await self._call(self._handle_subscribe, subscriber)

    async def unsubscribe(self, subscriber: Subscriber) -> None:
        await self._call(self._handle_unsubscribe, subscriber)

    async def set_led(self, state: LedState | str) -> None:
        command = LedState(state)
        if command not in LED_COMMANDS:
            raise ValueError(f"LED can only be switched on or off, got {state!r}")
        await self._call(self._handle_set_led, command)

    async def set_auto_reconnect(self, enabled: bool) -> None:
        await self._call(self._handle_set_auto_reconnect, bool(enabled))

    # ------------------------------------------------------------------
    # Reads (never block on the adapter)
    # ------------------------------------------------------------------

    def get_led_state(self) -> LedState:
        return self.state.led_state

    def connected(self) -> bool:
        return self.state.connection is ConnectionState.CONNECTED

    def connection_state(self) -> ConnectionState:
        return self.state.connection

    def platform_info(self) -> PlatformInfo:
        return self.adapter.describe()

    def get_motion_state(self) -> MotionSample:
        return self.state.motion

    def get_button_state(self) -> dict[int, ButtonAction]:
        return dict(self.state.buttons)

    def stats(self) -> SessionStats:
        return structs.replace(self.state.stats)

    def auto_reconnect(self) -> bool:
        return self.state.auto_reconnect

    def pending_reconnect_at(self) -> float | None:
        """Event-loop time of the scheduled reconnect attempt, if any."""
        handle = self._reconnect_handle
        return handle.when() if handle is not None else None

    # ------------------------------------------------------------------
    # Worker
    # ------------------------------------------------------------------

    async def _call(self, handler: Callable[..., Awaitable[Any]], *args: Any) -> Any:
        self.start()
        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        self._inbox.put_nowait(_Call(handler=handler, args=args, future=future))
        return await future

    def _on_adapter_event(self, generation: int, event: BridgeEvent) -> None:
        self._inbox.put_nowait(_AdapterEvent(generation=generation, event=event))

    async def _run(self) -> None:
        while True:
            item = await self._inbox.get()
            try:
                match item:
                    case _Shutdown():
                        return
                    case _Call(handler=handler, args=args, future=future):
                        await self._process_call(handler, args, future)
                    case _AdapterEvent(generation=generation, event=event):
                        self._process_adapter_event(generation, event)
                    case _ReconnectTick(token=token):
                        await self._process_reconnect(token)
            except Exception:
                logger.exception("Unhandled error while processing %s", type(item).__name__)
            finally:
                self._inbox.task_done()

    @staticmethod
    async def _process_call(
        handler: Callable[..., Awaitable[Any]],
        args: tuple[Any, ...],
        future: asyncio.Future[Any],
    ) -> None:
        if future.done():
            return
        try:
            result = await handler(*args)
        except Exception as exc:
            if not future.done():
                future.set_exception(exc)
        else:
            if not future.done():
                future.set_result(result)

    @property
    def _adapter_state(self) -> AdapterState:
        assert self.state.adapter_state is not None
        return self.state.adapter_state

    # ------------------------------------------------------------------
    # Call handlers
    # ------------------------------------------------------------------

    async def _handle_start_monitoring(self) -> None:
        if self.state.connection in (ConnectionState.CONNECTING, ConnectionState.CONNECTED):
            logger.debug("start_monitoring ignored while %s", self.state.connection)
            return
        # A caller-initiated start supersedes any automatic retry sequence.
        self._cancel_reconnect()
        self._policy.reset()
        try:
            self.state.adapter_state = await self.adapter.start_monitoring(self._adapter_state)
        except SpaceMouseError as exc:
            logger.error("Failed to start monitoring: %s", exc)
            self.state.tracker.fail()
            raise
        self.state.tracker.begin_connecting()
        logger.info("Monitoring started; waiting for device")

    async def _handle_stop_monitoring(self) -> None:
        self._cancel_reconnect()
        self._policy.reset()
        try:
            await self.adapter.stop_monitoring(self._adapter_state)
        finally:
            self.state.tracker.halt()
            self.state.led_state = LedState.UNKNOWN
        logger.info("Monitoring stopped")

    async def _handle_subscribe(self, subscriber: Subscriber) -> None:
        self.state.subscribers[subscriber] = None
        if self.state.connection is ConnectionState.CONNECTED:
            self._deliver(subscriber, Connected(device_info=self._device_info()))

    async def _handle_unsubscribe(self, subscriber: Subscriber) -> None:
        self.state.subscribers.pop(subscriber, None)

    async def _handle_set_led(self, command: LedState) -> None:
        if self.state.connection is not ConnectionState.CONNECTED:
            raise DeviceNotConnected("SpaceMouse is not connected")
        self.state.adapter_state = await self.adapter.send_led_command(self._adapter_state, command)
        previous = self.state.led_state
        self.state.led_state = command
        if previous != command:
            self._broadcast(LedChanged(from_=previous, to=command, timestamp=monotonic_ms()))

    async def _handle_set_auto_reconnect(self, enabled: bool) -> None:
        self.state.auto_reconnect = enabled
        if not enabled:
            self._cancel_reconnect()
            self._policy.reset()
        logger.info("Auto-reconnect %s", "enabled" if enabled else "disabled")

    # ------------------------------------------------------------------
    # Adapter events
    # ------------------------------------------------------------------

    def _process_adapter_event(self, generation: int, event: BridgeEvent) -> None:
        adapter_state = self._adapter_state
        if generation != adapter_state.generation:
            self.state.stats.dropped_events += 1
            return
        self.adapter.apply_event(adapter_state, event)

        match event:
            case MotionMessage(axis=axis, raw_value=raw_value):
                value = normalize_motion(raw_value, clamp=self.config.clamp_motion)
                self.state.motion = self.state.motion.with_axis(axis, value)
                self._broadcast(Motion.from_sample(self.state.motion))
            case ButtonMessage(id=usage, action=action):
                button_id = self.config.map_button(usage)
                self.state.buttons[button_id] = action
                self._broadcast(Button(id=button_id, state=action))
            case StatusMessage(message=message):
                self._on_status(message)
            case LedAckMessage(state=led, method=method):
                logger.debug("Helper confirmed LED %s (method %d)", led, method)
            case ProtocolError():
                self.state.stats.protocol_errors += 1
            case ProcessExited(status=status):
                self._on_process_exit(status)

    def _on_status(self, message: str) -> None:
        if message == HelperStatus.READY:
            logger.info("HID helper ready")
        elif message == HelperStatus.DEVICE_CONNECTED:
            self._on_device_connected()
        elif message == HelperStatus.DEVICE_DISCONNECTED:
            self._on_device_disconnected()
        else:
            logger.debug("Ignoring helper status %r", message)

    def _on_device_connected(self) -> None:
        if not self.state.tracker.device_attached():
            return
        logger.info("SpaceMouse device connected")
        self._cancel_reconnect()
        self._policy.reset()
        self._broadcast(Connected(device_info=self._device_info()))

    def _on_device_disconnected(self) -> None:
        if not self.state.tracker.device_detached():
            return
        logger.info("SpaceMouse device disconnected")
        self.state.led_state = LedState.UNKNOWN
        self._broadcast(Disconnected(device_info=self._device_info()))
        self._policy.reset()
        self._schedule_reconnect()

    def _on_process_exit(self, status: int | None) -> None:
        self.state.stats.bridge_exits += 1
        previous = self.state.connection
        logger.warning("Helper process exited (status %s) while %s", status, previous)
        if previous is ConnectionState.CONNECTED:
            self._on_device_disconnected()
        elif previous is ConnectionState.CONNECTING:
            self.state.tracker.fail()
            self.state.led_state = LedState.UNKNOWN
            if self._policy.active:
                self._schedule_reconnect()

    # ------------------------------------------------------------------
    # Reconnect
    # ------------------------------------------------------------------

    def _schedule_reconnect(self) -> None:
        if not self.state.auto_reconnect:
            return
        self._cancel_reconnect()
        delay = self._policy.next_delay()
        self._reconnect_token += 1
        tick = _ReconnectTick(token=self._reconnect_token)
        loop = asyncio.get_running_loop()
        self._reconnect_handle = loop.call_later(delay, self._inbox.put_nowait, tick)
        logger.info("Reconnect scheduled in %.1fs", delay)

    def _cancel_reconnect(self) -> None:
        # Bumping the token also invalidates a tick already in the inbox.
        self._reconnect_token += 1
        if self._reconnect_handle is not None:
            self._reconnect_handle.cancel()
            self._reconnect_handle = None

    async def _process_reconnect(self, token: int) -> None:
        if token != self._reconnect_token:
            return
        self._reconnect_handle = None
        if not self.state.auto_reconnect:
            return
        if self.state.connection in (ConnectionState.CONNECTING, ConnectionState.CONNECTED):
            return

        self.state.stats.reconnect_attempts += 1
        logger.info("Attempting to reconnect SpaceMouse (attempt %d)", self._policy.attempt)
        try:
            self.state.adapter_state = await self.adapter.start_monitoring(self._adapter_state)
        except SpaceMouseError as exc:
            logger.warning("Reconnection failed: %s", exc)
            self._schedule_reconnect()
            return
        self.state.tracker.begin_connecting()

    # ------------------------------------------------------------------
    # Fan-out
    # ------------------------------------------------------------------

    def _device_info(self) -> DeviceInfo:
        return DeviceInfo.build(self.adapter.describe(), self.state.led_state, self.state.motion)

    def _broadcast(self, event: SessionEvent) -> None:
        for subscriber in list(self.state.subscribers):
            self._deliver(subscriber, event)

    def _deliver(self, subscriber: Hashable, event: SessionEvent) -> None:
        try:
            subscriber(event)  # type: ignore[operator]
        except Exception:
            logger.exception("Subscriber %r failed to handle %s event", subscriber, type(event).__name__)
        else:
            self.state.stats.events_delivered += 1


__all__ = ["DeviceSession", "Subscriber"]
