"""Tax estimation service."""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from core.config import get_settings
from core.logging import get_logger
from core.result import Result, failure, success
from services.taxes.calculator import compute_tax
from services.taxes.errors import InvalidInput, TaxEstimatorError
from services.taxes.loader import BracketRepository
from services.taxes.money import ZERO, round_currency, to_non_negative
from services.taxes.types import EstimateRequest, TaxEstimate, TaxSummary

if TYPE_CHECKING:
    from core.config import Settings
    from services.taxes.brackets import BracketTable
    from services.taxes.money import Amount

logger = get_logger(__name__)

HUNDRED = Decimal("100")


class TaxEstimatorService:
    """
    Service for estimating income taxes.

    Looks up bracket tables through a BracketRepository and applies them
    with compute_tax. Errors come back as Failure values.
    """

    def __init__(
        self,
        repository: BracketRepository | None = None,
        settings: Settings | None = None,
    ) -> None:
        """
        Initialize the tax estimator service.

        Args:
            repository: Source of bracket tables (default: configured directory).
            settings: Settings providing default table selection.
        """
        self._settings = settings or get_settings()
        self._repository = repository or BracketRepository(self._settings.brackets_dir)

    @property
    def repository(self) -> BracketRepository:
        """Bracket table source."""
        return self._repository

    def table(
        self,
        jurisdiction: str | None = None,
        year: int | None = None,
        filing_status: str | None = None,
    ) -> Result[BracketTable, TaxEstimatorError]:
        """Return the selected table, filling unset fields from settings."""
        try:
            return success(self._table(jurisdiction, year, filing_status))
        except TaxEstimatorError as exc:
            logger.warning("Bracket table unavailable", error=str(exc))
            return failure(exc)

    def estimate_tax(
        self,
        income: Amount,
        jurisdiction: str | None = None,
        year: int | None = None,
        filing_status: str | None = None,
    ) -> Result[TaxEstimate, TaxEstimatorError]:
        """
        Estimate tax on a taxable income.

        Args:
            income: Taxable income.
            jurisdiction: Table jurisdiction (default from settings).
            year: Tax year (default from settings).
            filing_status: Filing status (default from settings).

        Returns:
            Result containing TaxEstimate or TaxEstimatorError.
        """
        try:
            amount = to_non_negative(income, name="income")
        except TaxEstimatorError as exc:
            logger.warning("Tax estimate failed", error=str(exc))
            return failure(exc)

        return self.table(jurisdiction, year, filing_status).map(
            lambda table: compute_tax(amount, table)
        )

    def estimate(self, request: EstimateRequest) -> Result[TaxSummary, TaxEstimatorError]:
        """
        Estimate federal and state tax and net income for a request.

        Args:
            request: Income profile and table selection.

        Returns:
            Result containing TaxSummary or TaxEstimatorError.
        """
        logger.debug(
            "Estimating taxes",
            gross_income=str(request.gross_income),
            jurisdiction=request.jurisdiction,
            year=request.year,
        )
        try:
            return success(self._summarize(request))
        except TaxEstimatorError as exc:
            logger.warning("Tax summary failed", error=str(exc))
            return failure(exc)

    def estimate_batch(
        self,
        requests: list[EstimateRequest],
    ) -> list[Result[TaxSummary, TaxEstimatorError]]:
        """Estimate each request independently, one Result per request."""
        return [self.estimate(req) for req in requests]

    def _summarize(self, request: EstimateRequest) -> TaxSummary:
        gross = to_non_negative(request.gross_income, name="gross_income")
        deductions = to_non_negative(request.pre_tax_deductions, name="pre_tax_deductions")
        taxable = max(ZERO, gross - deductions)

        if request.state_rate_percent is not None and request.state_jurisdiction:
            raise InvalidInput("Give either a state rate or a state jurisdiction, not both")

        federal = compute_tax(
            taxable,
            self._table(request.jurisdiction, request.year, request.filing_status),
        )

        state: TaxEstimate | None = None
        if request.state_jurisdiction:
            state = compute_tax(
                taxable,
                self._table(request.state_jurisdiction, request.year, request.filing_status),
            )
            state_tax = state.total
        elif request.state_rate_percent is not None:
            state_tax = flat_tax(taxable, request.state_rate_percent)
        else:
            state_tax = ZERO

        return TaxSummary(
            gross_income=gross,
            pre_tax_deductions=deductions,
            taxable_income=taxable,
            federal=federal,
            state_tax=state_tax,
            state=state,
        )

    def _table(
        self,
        jurisdiction: str | None,
        year: int | None,
        filing_status: str | None,
    ) -> BracketTable:
        return self._repository.get(
            jurisdiction or self._settings.default_jurisdiction,
            year if year is not None else self._settings.default_year,
            filing_status or self._settings.default_filing_status,
        )


def flat_tax(taxable: Amount, rate_percent: Amount) -> Decimal:
    """
    Apply a flat percentage rate, rounded half-up to the cent.

    Raises:
        InvalidInput: If the rate is outside [0, 100] or income is negative.
    """
    amount = to_non_negative(taxable, name="taxable income")
    percent = to_non_negative(rate_percent, name="state rate")
    if percent > HUNDRED:
        raise InvalidInput("state rate cannot exceed 100%", details=str(percent))
    return round_currency(amount * percent / HUNDRED)
