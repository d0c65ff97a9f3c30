from collections.abc import Iterator
from contextvars import Context, copy_context

import pytest

from app_errors.config import get_settings
from app_errors.trace import TRACE_META_KEY, TraceMeta


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Drop cached settings and any ambient trace config between tests."""
    monkeypatch.delenv("APP_ERRORS_TRACE_ENABLED", raising=False)
    monkeypatch.delenv("APP_ERRORS_LOG_LEVEL", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def trace_meta() -> TraceMeta:
    return TraceMeta()


@pytest.fixture
def carrier(trace_meta: TraceMeta) -> Context:
    """Return a context snapshot with *trace_meta* installed."""

    def install() -> Context:
        TRACE_META_KEY.set(trace_meta)
        return copy_context()

    return Context().run(install)
