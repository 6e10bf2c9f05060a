"""
Action Results

Every service operation returns an ActionResult instead of raising for
expected failures. Callers check ``result.ok`` and read either ``data`` or
``error``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Generic, TypeVar

T = TypeVar("T")


class ErrorCode(StrEnum):
    """Failure categories surfaced to callers."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    INTERNAL_ERROR = "INTERNAL_ERROR"


@dataclass(frozen=True)
class ActionError:
    """Error payload; ``message`` is shown to the user verbatim."""

    message: str
    code: ErrorCode = ErrorCode.INTERNAL_ERROR


@dataclass(frozen=True)
class ActionResult(Generic[T]):
    """Discriminated success/failure wrapper."""

    data: T | None = None
    error: ActionError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the data, raising if this result is a failure."""
        if self.error is not None:
            raise RuntimeError(f"{self.error.code}: {self.error.message}")
        return self.data  # type: ignore[return-value]


def success(data: T) -> ActionResult[T]:
    return ActionResult(data=data)


def failure(message: str, code: ErrorCode = ErrorCode.INTERNAL_ERROR) -> ActionResult[T]:
    return ActionResult(error=ActionError(message=message, code=code))
