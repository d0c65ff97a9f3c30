from __future__ import annotations

import asyncio
import copy
import functools
import inspect
import traceback
from collections.abc import Callable
from contextvars import copy_context
from typing import Any, NoReturn, ParamSpec, TypeVar

from loguru import logger

from .app_error import AppError, get_app_err
from .custom_error import CustomErr
from .trace import Carrier

P = ParamSpec("P")
R = TypeVar("R")


def _format_tail(exc: BaseException, *, limit: int = 6) -> str:
    tb = traceback.format_exception(type(exc), exc, exc.__traceback__)
    return "".join(tb[-limit:])


def log_and_wrap(
    exc: BaseException,
    custom_err: CustomErr | None,
    http_status: int,
    ctx: Carrier | None = None,
    metadata: Any = None,
) -> NoReturn:
    """Log *exc* with a short traceback and raise it as an :class:`AppError`.

    *ctx* defaults to a snapshot of the current context.
    """

    formatted_tb = _format_tail(exc)
    logger.opt(exception=exc).error("{}", formatted_tb)
    carrier = ctx if ctx is not None else copy_context()
    raise get_app_err(carrier, exc, custom_err, http_status, metadata) from exc


def _evolve(err: AppError, custom_err: CustomErr | None) -> AppError:
    if custom_err is not None:
        err.add_code(custom_err.code)
    logger.debug("AppError passed through layer, codes {}", err.get_codes())
    return err


def wrap_exceptions(
    custom_err: CustomErr | None,
    http_status: int,
    *,
    metadata: Any = None,
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Decorator turning escaping exceptions into :class:`AppError`.

    An :class:`AppError` raised below is re-raised with *custom_err*'s code
    added instead of being wrapped again. Each wrapped error gets a shallow
    copy of *metadata*.
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args: P.args, **kwargs: P.kwargs):  # type: ignore[override]
                try:
                    return await func(*args, **kwargs)
                except asyncio.CancelledError:
                    raise
                except AppError as err:
                    raise _evolve(err, custom_err)
                except Exception as exc:
                    log_and_wrap(exc, custom_err, http_status, metadata=copy.copy(metadata))

            return async_wrapper  # type: ignore[return-value]

        @functools.wraps(func)
        def sync_wrapper(*args: P.args, **kwargs: P.kwargs):  # type: ignore[override]
            try:
                return func(*args, **kwargs)
            except AppError as err:
                raise _evolve(err, custom_err)
            except Exception as exc:
                log_and_wrap(exc, custom_err, http_status, metadata=copy.copy(metadata))

        return sync_wrapper  # type: ignore[return-value]

    return decorator
