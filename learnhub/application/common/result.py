"""
Result type for engine operation outcomes.

Engine operations never raise for domain errors; they return ``Success`` or
``Failure`` so that the caller must look at the outcome.

Example:
    result = await coordinator.add("42", ItemKind.COURSE, "favorites")
    if result.is_failure:
        show_error(result.unwrap_error())
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")  # Success value type
E = TypeVar("E")  # Error type


@dataclass(frozen=True)
class Success(Generic[T]):
    """A successful outcome carrying a value."""

    value: T

    @property
    def is_success(self) -> bool:
        return True

    @property
    def is_failure(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_error(self) -> None:
        raise ValueError("Cannot get error from Success result")


@dataclass(frozen=True)
class Failure(Generic[E]):
    """A failed outcome carrying the error."""

    error: E

    @property
    def is_success(self) -> bool:
        return False

    @property
    def is_failure(self) -> bool:
        return True

    def unwrap(self) -> None:
        raise ValueError("Cannot get value from Failure result")

    def unwrap_error(self) -> E:
        return self.error


Result = Success[T] | Failure[E]
