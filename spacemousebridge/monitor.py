"""Command-line monitor: print SpaceMouse events as JSON lines."""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import NoReturn, TextIO

import msgspec
import uvloop
from marshmallow import ValidationError

from .config.logging import configure_logging
from .config.model import SessionConfig
from .config.settings import load_session_config
from .errors import SpaceMouseError
from .services.session import DeviceSession
from .services.subscription import Subscription

logger = logging.getLogger("spacemousebridge.monitor")


async def run_monitor(
    config: SessionConfig,
    *,
    output: TextIO | None = None,
    session: DeviceSession | None = None,
    max_events: int | None = None,
) -> int:
    """Stream events until cancelled (or ``max_events`` were written)."""
    stream = output if output is not None else sys.stdout
    events = Subscription()
    written = 0
    async with session if session is not None else DeviceSession(config) as active:
        await active.subscribe(events)
        await active.start_monitoring()
        info = active.platform_info()
        logger.info("Monitoring SpaceMouse via %s/%s", info.platform, info.method)
        async for event in events:
            stream.write(msgspec.json.encode(event).decode("utf-8") + "\n")
            stream.flush()
            written += 1
            if max_events is not None and written >= max_events:
                break
    return written


def main() -> NoReturn:  # pragma: no cover (Entry point wrapper)
    try:
        config = load_session_config()
    except (ValidationError, ValueError) as exc:
        sys.stderr.write(f"spacemouse-monitor: invalid configuration: {exc}\n")
        sys.exit(2)
    configure_logging(config)

    try:
        asyncio.run(run_monitor(config), loop_factory=uvloop.new_event_loop)
        sys.exit(0)
    except KeyboardInterrupt:
        logger.info("Monitor interrupted by user.")
        sys.exit(0)
    except SpaceMouseError as exc:
        logger.critical("Monitoring aborted: %s", exc)
        sys.exit(1)
    except OSError as exc:
        logger.critical("System/OS error during monitoring: %s", exc, exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
