from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .custom_error import CustomErr
from .trace import Carrier, add_trace_log


def _message_of(err: BaseException | None) -> str:
    if err is None:
        return ""
    return str(err)


@dataclass(eq=False)
class AppError(Exception):
    """Structured error wrapping an underlying failure.

    Attributes:
        underlying: The wrapped failure, may be ``None``.
        definition: Owned copy of the :class:`CustomErr` the error was built from.
        codes: Every code the error has carried, oldest first. The last entry
            added through :meth:`add_code` is also the primary code.
        http_status: HTTP-shaped status code, not validated.
        metadata: Opaque payload for the response layer.

    Mutators return the instance itself so calls can be chained; the instance
    is meant to be owned by a single handling path.
    """

    underlying: BaseException | None = None
    definition: CustomErr = field(default_factory=CustomErr)
    codes: list[str] = field(default_factory=list)
    http_status: int = 0
    metadata: Any = None

    def __post_init__(self) -> None:
        self.__cause__ = self.underlying

    def __str__(self) -> str:
        return self.to_message()

    def to_message(self) -> str:
        """Return the underlying failure's message, ``""`` if there is none."""

        return _message_of(self.underlying)

    def get_err(self) -> BaseException | None:
        return self.underlying

    def set_err(self, err: BaseException | None) -> BaseException | None:
        self.underlying = err
        self.__cause__ = err
        return self.underlying

    def get_msg(self) -> str:
        return self.definition.message

    def set_msg(self, message: str) -> AppError:
        self.definition.message = message
        return self

    def get_code(self) -> str:
        return self.definition.code

    def set_code(self, code: str) -> AppError:
        """Replace the primary code. The code history is left as is."""

        self.definition.code = code
        return self

    def get_codes(self) -> list[str]:
        return self.codes

    def add_code(self, code: str) -> AppError:
        """Make *code* the primary code and append it to the history.

        Empty codes are ignored.
        """

        if code:
            self.definition.code = code
            self.codes.append(code)
        return self

    def get_http_status(self) -> int:
        return self.http_status

    def set_http_status(self, http_status: int) -> AppError:
        self.http_status = http_status
        return self

    def get_metadata(self) -> Any:
        return self.metadata

    def set_metadata(self, metadata: Any) -> AppError:
        self.metadata = metadata
        return self

    def is_retryable(self) -> bool:
        return self.definition.retryable


def get_app_err(
    ctx: Carrier | None,
    err: BaseException | None,
    custom_err: CustomErr | None,
    http_status: int,
    metadata: Any = None,
) -> AppError:
    """Build an :class:`AppError` and record *err* in the request trace log.

    The definition is copied, so *custom_err* can be reused as a template.
    Without *custom_err* the error starts with empty code and message and an
    empty code history.
    """

    add_trace_log(ctx, _message_of(err))

    app_err = AppError(underlying=err, http_status=http_status, metadata=metadata)
    if custom_err is not None:
        app_err.definition = custom_err.copy()
        app_err.codes.append(custom_err.code)
    return app_err
