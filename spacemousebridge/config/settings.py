"""Settings loader for SpaceMouse sessions.

Configuration comes from ``SPACEMOUSE_*`` environment variables, one per
:class:`SessionConfig` field (``SPACEMOUSE_HELPER_PATH``,
``SPACEMOUSE_RECONNECT_DELAY``, ...). Unset variables fall back to the
defaults in :mod:`spacemousebridge.config.const`.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping

from .const import ENV_PREFIX
from .model import SessionConfig
from .schema import SessionConfigSchema

logger = logging.getLogger(__name__)


def _collect_environment(environ: Mapping[str, str]) -> dict[str, str]:
    raw: dict[str, str] = {}
    for name in SessionConfigSchema().fields:
        value = environ.get(ENV_PREFIX + name.upper())
        if value is not None:
            raw[name] = value
    return raw


def load_session_config(environ: Mapping[str, str] | None = None) -> SessionConfig:
    """Build a validated :class:`SessionConfig` from the environment.

    Raises :class:`marshmallow.ValidationError` on malformed values.
    """
    raw = _collect_environment(os.environ if environ is None else environ)
    if raw:
        logger.debug("Configuration overrides: %s", sorted(raw))
    config = SessionConfigSchema().load(raw)
    assert isinstance(config, SessionConfig)
    return config


__all__ = ["SessionConfig", "load_session_config"]
