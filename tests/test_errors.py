"""Tests for tax estimation error types."""

from __future__ import annotations

from services.taxes.errors import (
    ErrorCode,
    InvalidConfiguration,
    InvalidInput,
    TableNotFound,
    TaxEstimatorError,
)


class TestErrorCode:
    """Tests for ErrorCode enum."""

    def test_error_codes_exist(self) -> None:
        """ErrorCode should have all expected values."""
        assert ErrorCode.INVALID_INPUT.value == "invalid_input"
        assert ErrorCode.INVALID_CONFIGURATION.value == "invalid_configuration"
        assert ErrorCode.NOT_FOUND.value == "not_found"


class TestTaxEstimatorError:
    """Tests for the error hierarchy."""

    def test_attributes(self) -> None:
        """Errors keep their message and details."""
        error = InvalidInput("income must be a number", details="'abc'")

        assert error.message == "income must be a number"
        assert error.details == "'abc'"
        assert error.code == ErrorCode.INVALID_INPUT

    def test_str_without_details(self) -> None:
        """__str__ prefixes the code."""
        error = InvalidConfiguration("Bracket table is empty")

        assert str(error) == "invalid_configuration: Bracket table is empty"

    def test_str_with_details(self) -> None:
        """__str__ appends details in parentheses."""
        error = InvalidInput("income cannot be negative", details="-5")

        assert str(error) == "invalid_input: income cannot be negative (-5)"

    def test_hierarchy(self) -> None:
        """TableNotFound is a configuration error with its own code."""
        error = TableNotFound("No bracket table for xx/2024/single")

        assert isinstance(error, InvalidConfiguration)
        assert isinstance(error, TaxEstimatorError)
        assert isinstance(error, Exception)
        assert error.code == ErrorCode.NOT_FOUND
