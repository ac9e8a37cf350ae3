"""Data model for SpaceMouse session configuration."""

from __future__ import annotations

from dataclasses import dataclass, field

from .const import (
    DEFAULT_AUTO_RECONNECT,
    DEFAULT_CLAMP_MOTION,
    DEFAULT_DEBUG_LOGGING,
    DEFAULT_LOG_SYSLOG,
    DEFAULT_RECONNECT_DELAY,
    DEFAULT_RECONNECT_RETRY_INTERVAL,
    DEFAULT_STOP_TIMEOUT,
)


@dataclass(slots=True)
class SessionConfig:
    """Strongly typed configuration for one device session."""

    helper_path: str | None = None
    auto_reconnect: bool = DEFAULT_AUTO_RECONNECT
    reconnect_delay: float = DEFAULT_RECONNECT_DELAY
    reconnect_retry_interval: float = DEFAULT_RECONNECT_RETRY_INTERVAL
    clamp_motion: bool = DEFAULT_CLAMP_MOTION
    button_map: dict[int, int] = field(default_factory=dict)
    stop_timeout: float = DEFAULT_STOP_TIMEOUT
    debug_logging: bool = DEFAULT_DEBUG_LOGGING
    log_syslog: bool = DEFAULT_LOG_SYSLOG

    def __post_init__(self) -> None:
        self.reconnect_delay = self._require_positive("reconnect_delay", float(self.reconnect_delay))
        self.reconnect_retry_interval = self._require_positive(
            "reconnect_retry_interval", float(self.reconnect_retry_interval)
        )
        self.stop_timeout = self._require_positive("stop_timeout", float(self.stop_timeout))
        if self.helper_path is not None:
            candidate = self.helper_path.strip()
            self.helper_path = candidate or None
        self.button_map = {int(usage): int(target) for usage, target in self.button_map.items()}

    def map_button(self, usage: int) -> int:
        """Translate a HID button usage into the application button id."""
        return self.button_map.get(usage, usage)

    @staticmethod
    def _require_positive(name: str, value: float) -> float:
        if value <= 0.0:
            raise ValueError(f"{name} must be a positive number")
        return value


__all__ = ["SessionConfig"]
