"""Default values shared across the SpaceMouse bridge."""

from __future__ import annotations

from pathlib import Path
from typing import Final

ENV_PREFIX: Final[str] = "SPACEMOUSE_"

DEFAULT_RECONNECT_DELAY: Final[float] = 2.0
DEFAULT_RECONNECT_RETRY_INTERVAL: Final[float] = 5.0
DEFAULT_AUTO_RECONNECT: Final[bool] = True
DEFAULT_CLAMP_MOTION: Final[bool] = False
DEFAULT_STOP_TIMEOUT: Final[float] = 2.0
DEFAULT_DEBUG_LOGGING: Final[bool] = False
DEFAULT_LOG_SYSLOG: Final[bool] = False

# Upper bounds accepted by configuration validation.
MAX_RECONNECT_SECONDS: Final[float] = 3600.0
MAX_STOP_TIMEOUT: Final[float] = 60.0

PACKAGE_ROOT: Final[Path] = Path(__file__).resolve().parent.parent
DEFAULT_MACOS_HELPER: Final[Path] = PACKAGE_ROOT / "helpers" / "macos" / "hid_reader"

MACOS_PLATFORM: Final[str] = "macos"
MACOS_METHOD: Final[str] = "iokit_hid"
EXTERNAL_HELPER_METHOD: Final[str] = "external_helper"
HELPER_VERSION: Final[str] = "1.0.0"
