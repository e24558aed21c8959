"""Error types for tax estimation."""

from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Error codes for tax estimation errors."""

    INVALID_INPUT = "invalid_input"
    INVALID_CONFIGURATION = "invalid_configuration"
    NOT_FOUND = "not_found"


class TaxEstimatorError(Exception):
    """
    Base error for tax estimation.

    Attributes:
        code: Error code identifying the type of error.
        message: Human-readable error message.
        details: Additional error details (optional).
    """

    code: ErrorCode = ErrorCode.INVALID_INPUT

    def __init__(self, message: str, details: str | None = None) -> None:
        """Initialize with error message and optional details."""
        self.message = message
        self.details = details
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.code.value}: {self.message} ({self.details})"
        return f"{self.code.value}: {self.message}"


class InvalidInput(TaxEstimatorError):
    """Income or other user-supplied amount is negative or not a number."""

    code = ErrorCode.INVALID_INPUT


class InvalidConfiguration(TaxEstimatorError):
    """Bracket table is malformed or cannot be loaded."""

    code = ErrorCode.INVALID_CONFIGURATION


class TableNotFound(InvalidConfiguration):
    """No bracket table exists for the requested selection."""

    code = ErrorCode.NOT_FOUND
