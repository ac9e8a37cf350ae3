"""Configuration helpers for SpaceMouse sessions."""

from .const import *  # noqa: F401, F403
from .model import SessionConfig
from .settings import load_session_config
from . import logging  # noqa: F401  # pyright: ignore[reportUnusedImport]

__all__ = ["SessionConfig", "load_session_config"]
