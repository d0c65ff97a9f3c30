"""Per-request trace log carried in the ambient context.

Whoever starts a request installs a :class:`TraceMeta` under
:data:`TRACE_META_KEY` (usually via :func:`bind_trace_meta`). Code further
down reaches it through a carrier, i.e. anything with a mapping-style
``get(key)``: a :class:`contextvars.Context` or a plain ``dict``.

Tracing is optional infrastructure. A missing carrier, a missing key or a
value of the wrong type all yield ``None``; lookups never raise.
"""

from __future__ import annotations

import threading
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, Protocol

from loguru import logger
from pydantic import ValidationError

from .config import get_settings

_invalid_settings_logged = False


class Carrier(Protocol):
    def get(self, key: Any, /) -> Any:  # pragma: no cover - protocol definition
        """Return the value stored under *key* or ``None``."""


@dataclass(slots=True)
class TraceMeta:
    trace: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    identifier_mappings: dict[str, Any] = field(default_factory=dict)
    _lock: threading.Lock = field(
        default_factory=threading.Lock, repr=False, compare=False
    )

    def append_error(self, message: str) -> None:
        with self._lock:
            self.errors.append(message)

    def fork(self) -> TraceMeta:
        """Return an independent copy for a concurrently running branch."""

        with self._lock:
            return TraceMeta(
                trace=list(self.trace),
                errors=list(self.errors),
                identifier_mappings=dict(self.identifier_mappings),
            )


TRACE_META_KEY: ContextVar[TraceMeta | None] = ContextVar("trace_meta", default=None)


def _lookup(ctx: Carrier | None) -> TraceMeta | None:
    if ctx is None:
        return None
    getter = getattr(ctx, "get", None)
    if not callable(getter):
        logger.debug("Carrier {!r} has no get(), trace lookup skipped", type(ctx))
        return None
    try:
        value = getter(TRACE_META_KEY)
    except (LookupError, TypeError):
        logger.debug("Carrier {!r} rejected trace key", type(ctx))
        return None
    if not isinstance(value, TraceMeta):
        return None
    return value


def _trace_enabled() -> bool:
    global _invalid_settings_logged
    try:
        return get_settings().trace_enabled
    except ValidationError as exc:
        if not _invalid_settings_logged:
            _invalid_settings_logged = True
            logger.warning("Invalid app_errors settings, tracing stays enabled: {}", exc)
        return True


def get_trace_meta(ctx: Carrier | None = None) -> TraceMeta | None:
    """Return the trace object held by *ctx* (current context if omitted)."""

    if ctx is None:
        value = TRACE_META_KEY.get()
        return value if isinstance(value, TraceMeta) else None
    return _lookup(ctx)


def bind_trace_meta(trace_meta: TraceMeta | None = None) -> TraceMeta:
    """Install *trace_meta* (or a fresh one) into the current context."""

    trace_meta = trace_meta if trace_meta is not None else TraceMeta()
    TRACE_META_KEY.set(trace_meta)
    return trace_meta


def add_trace_log(ctx: Carrier | None, message: str) -> TraceMeta | None:
    """Append *message* to the error log reachable from *ctx*.

    Returns the mutated :class:`TraceMeta`, or ``None`` when the carrier is
    absent, holds nothing usable under :data:`TRACE_META_KEY`, or tracing is
    disabled in settings.
    """

    if not _trace_enabled():
        return None
    trace_meta = _lookup(ctx)
    if trace_meta is None:
        return None
    trace_meta.append_error(message)
    logger.trace("Trace log appended: {}", message)
    return trace_meta
