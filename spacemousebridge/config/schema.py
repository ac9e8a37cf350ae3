"""Marshmallow schema for SessionConfig validation."""

from __future__ import annotations

from typing import Any, Dict

from marshmallow import Schema, ValidationError, fields, post_load, pre_load, validate

from .const import (
    DEFAULT_AUTO_RECONNECT,
    DEFAULT_CLAMP_MOTION,
    DEFAULT_DEBUG_LOGGING,
    DEFAULT_LOG_SYSLOG,
    DEFAULT_RECONNECT_DELAY,
    DEFAULT_RECONNECT_RETRY_INTERVAL,
    DEFAULT_STOP_TIMEOUT,
    MAX_RECONNECT_SECONDS,
    MAX_STOP_TIMEOUT,
)
from .model import SessionConfig


class SessionConfigSchema(Schema):
    """Declarative validation schema for session configuration."""

    helper_path = fields.Str(load_default=None, allow_none=True)
    auto_reconnect = fields.Bool(load_default=DEFAULT_AUTO_RECONNECT)
    reconnect_delay = fields.Float(
        load_default=DEFAULT_RECONNECT_DELAY,
        validate=validate.Range(min=0.0, min_inclusive=False, max=MAX_RECONNECT_SECONDS),
    )
    reconnect_retry_interval = fields.Float(
        load_default=DEFAULT_RECONNECT_RETRY_INTERVAL,
        validate=validate.Range(min=0.0, min_inclusive=False, max=MAX_RECONNECT_SECONDS),
    )
    clamp_motion = fields.Bool(load_default=DEFAULT_CLAMP_MOTION)
    button_map = fields.Dict(
        keys=fields.Int(validate=validate.Range(min=0)),
        values=fields.Int(validate=validate.Range(min=0)),
        load_default=dict,
    )
    stop_timeout = fields.Float(
        load_default=DEFAULT_STOP_TIMEOUT,
        validate=validate.Range(min=0.0, min_inclusive=False, max=MAX_STOP_TIMEOUT),
    )
    debug_logging = fields.Bool(load_default=DEFAULT_DEBUG_LOGGING)
    log_syslog = fields.Bool(load_default=DEFAULT_LOG_SYSLOG)

    @pre_load
    def parse_button_map(self, data: Dict[str, Any], **kwargs: Any) -> Dict[str, Any]:
        # Environment form: "1=10,2=11" (HID usage=application id).
        raw = data.get("button_map")
        if isinstance(raw, str):
            data["button_map"] = self._split_pairs(raw)
        return data

    @pre_load
    def blank_helper_path(self, data: Dict[str, Any], **kwargs: Any) -> Dict[str, Any]:
        if isinstance(data.get("helper_path"), str) and not data["helper_path"].strip():
            data["helper_path"] = None
        return data

    @staticmethod
    def _split_pairs(raw: str) -> dict[str, str]:
        pairs: dict[str, str] = {}
        for item in raw.split(","):
            item = item.strip()
            if not item:
                continue
            usage, sep, target = item.partition("=")
            if not sep:
                raise ValidationError(f"malformed button mapping {item!r}", field_name="button_map")
            pairs[usage.strip()] = target.strip()
        return pairs

    @post_load
    def make_config(self, data: Dict[str, Any], **kwargs: Any) -> SessionConfig:
        return SessionConfig(**data)


__all__ = ["SessionConfigSchema"]
