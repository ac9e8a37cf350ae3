"""Platform adapters and the factory that picks one."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from ..config.const import (
    DEFAULT_MACOS_HELPER,
    EXTERNAL_HELPER_METHOD,
    HELPER_VERSION,
    MACOS_METHOD,
    MACOS_PLATFORM,
)
from ..config.model import SessionConfig
from ..errors import UnsupportedPlatform
from .base import AdapterOwner, AdapterState, PlatformAdapter, PlatformInfo
from .helper import HelperBridgeAdapter

logger = logging.getLogger("spacemousebridge.platform")


def select_adapter(config: SessionConfig, system: str | None = None) -> PlatformAdapter:
    """Return the adapter for this host.

    macOS always goes through the IOKit helper (bundled path unless
    ``helper_path`` overrides it). Other systems are served only when a
    helper speaking the same line protocol is configured explicitly.
    """
    system = sys.platform if system is None else system
    if system == "darwin":
        helper = Path(config.helper_path) if config.helper_path else DEFAULT_MACOS_HELPER
        adapter = HelperBridgeAdapter(
            helper,
            platform=MACOS_PLATFORM,
            method=MACOS_METHOD,
            version=HELPER_VERSION,
            stop_timeout=config.stop_timeout,
        )
    elif config.helper_path:
        adapter = HelperBridgeAdapter(
            config.helper_path,
            platform=system,
            method=EXTERNAL_HELPER_METHOD,
            version=HELPER_VERSION,
            stop_timeout=config.stop_timeout,
        )
    else:
        raise UnsupportedPlatform(f"no SpaceMouse adapter for platform {system!r}")

    info = adapter.describe()
    logger.debug("Selected %s adapter via %s", info.platform, info.method)
    return adapter


__all__ = [
    "AdapterOwner",
    "AdapterState",
    "HelperBridgeAdapter",
    "PlatformAdapter",
    "PlatformInfo",
    "select_adapter",
]
