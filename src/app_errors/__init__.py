from __future__ import annotations

from .app_error import AppError, get_app_err
from .config import Settings, get_settings
from .custom_error import CustomErr, get_custom_err
from .logs import setup_logging
from .trace import (
    TRACE_META_KEY,
    Carrier,
    TraceMeta,
    add_trace_log,
    bind_trace_meta,
    get_trace_meta,
)
from .wrapping import log_and_wrap, wrap_exceptions

__all__ = [
    "AppError",
    "Carrier",
    "CustomErr",
    "Settings",
    "TRACE_META_KEY",
    "TraceMeta",
    "add_trace_log",
    "bind_trace_meta",
    "get_app_err",
    "get_custom_err",
    "get_settings",
    "get_trace_meta",
    "log_and_wrap",
    "setup_logging",
    "wrap_exceptions",
]
