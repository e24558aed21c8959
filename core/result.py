"""
Result pattern for explicit error handling.

Service-level operations return either a Success or a Failure value instead
of letting exceptions escape, so callers such as the CLI decide how an error
is rendered.

Example:
    >>> def halve(amount: Decimal) -> Result[Decimal, str]:
    ...     if amount < 0:
    ...         return Failure("Amount must be non-negative")
    ...     return Success(amount / 2)
    ...
    >>> result = halve(Decimal("10"))
    >>> if result.is_success():
    ...     print(f"Half: {result.unwrap()}")
    ... else:
    ...     print(f"Error: {result.error}")
    Half: 5
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Never

if TYPE_CHECKING:
    from collections.abc import Callable


@dataclass(frozen=True, slots=True)
class Success[T]:
    """
    Represents a successful result containing a value.

    Attributes:
        value: The success value.
    """

    value: T

    def is_success(self) -> bool:
        """Return True if this is a Success."""
        return True

    def is_failure(self) -> bool:
        """Return False if this is a Success."""
        return False

    def unwrap(self) -> T:
        """Return the success value."""
        return self.value

    def unwrap_or(self, _default: T) -> T:
        """Return the success value, ignoring the default."""
        return self.value

    def map[U](self, func: Callable[[T], U]) -> Success[U]:
        """
        Apply a function to the success value.

        Args:
            func: Function to apply to the value.

        Returns:
            New Success with the mapped value.
        """
        return Success(func(self.value))


@dataclass(frozen=True, slots=True)
class Failure[E]:
    """
    Represents a failed result containing an error.

    Attributes:
        error: The error value.
    """

    error: E

    def is_success(self) -> bool:
        """Return False if this is a Failure."""
        return False

    def is_failure(self) -> bool:
        """Return True if this is a Failure."""
        return True

    def unwrap(self) -> Never:
        """
        Raise since a Failure has no success value.

        Raises:
            The contained error when it is an exception, ValueError otherwise.
        """
        if isinstance(self.error, BaseException):
            raise self.error
        raise ValueError(f"Cannot unwrap Failure: {self.error}")

    def unwrap_or[T](self, default: T) -> T:
        """Return the default value since this is a Failure."""
        return default

    def map[T, U](self, _func: Callable[[T], U]) -> Failure[E]:
        """Return self unchanged; there is no value to map."""
        return self


# Type alias for Result
type Result[T, E] = Success[T] | Failure[E]


def success[T](value: T) -> Success[T]:
    """Create a Success result."""
    return Success(value)


def failure[E](error: E) -> Failure[E]:
    """Create a Failure result."""
    return Failure(error)
