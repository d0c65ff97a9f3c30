from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(slots=True)
class CustomErr:
    """Reusable description of an error category.

    Attributes:
        code: Stable machine-readable code, the one reported to API clients.
        message: Human-readable message.
        retryable: Whether the failure may succeed on retry. Advisory only,
            nothing in this package acts on it.
    """

    code: str = ""
    message: str = ""
    retryable: bool = False

    def copy(self) -> CustomErr:
        return replace(self)


def get_custom_err(code: str, message: str, retryable: bool) -> CustomErr:
    """Return a new :class:`CustomErr`; definitions are never shared."""

    return CustomErr(code=code, message=message, retryable=retryable)
