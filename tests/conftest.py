"""Pytest configuration for SpaceMouse bridge tests."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator

import pytest
import pytest_asyncio

from spacemousebridge.config.model import SessionConfig
from spacemousebridge.services.session import DeviceSession
from spacemousebridge.services.subscription import Subscription

from mocks import FakeAdapter


@pytest.fixture
def session_config() -> SessionConfig:
    return SessionConfig(helper_path="/nonexistent/hid_reader")


@pytest.fixture
def fast_reconnect_config() -> SessionConfig:
    return SessionConfig(
        helper_path="/nonexistent/hid_reader",
        reconnect_delay=0.01,
        reconnect_retry_interval=0.02,
    )


@pytest.fixture
def fake_adapter() -> FakeAdapter:
    return FakeAdapter()


@pytest_asyncio.fixture
async def session(session_config: SessionConfig, fake_adapter: FakeAdapter) -> AsyncIterator[DeviceSession]:
    async with DeviceSession(session_config, fake_adapter) as active:
        yield active


@pytest_asyncio.fixture
async def events(session: DeviceSession) -> Subscription:
    subscription = Subscription()
    await session.subscribe(subscription)
    return subscription


@pytest.fixture(autouse=True)
def reset_logging_handlers():
    """Close and remove all logging handlers after each test to prevent ResourceWarnings."""
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        try:
            handler.close()
        except (OSError, RuntimeError):
            pass
        root.removeHandler(handler)
