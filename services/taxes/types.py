"""Types for tax estimation service."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING

from services.taxes.money import ZERO

if TYPE_CHECKING:
    from services.taxes.brackets import TaxBracket
    from services.taxes.money import Amount

RATE_QUANTUM = Decimal("0.0001")


@dataclass(frozen=True, slots=True)
class BracketShare:
    """
    Portion of income taxed inside one bracket.

    Attributes:
        bracket: The bracket the portion falls in.
        taxable_portion: Income inside the bracket.
        tax: Unrounded tax contributed by the portion.
    """

    bracket: TaxBracket
    taxable_portion: Decimal
    tax: Decimal


@dataclass(frozen=True, slots=True)
class TaxEstimate:
    """
    Result of applying a bracket table to one income.

    Attributes:
        income: Taxable income the estimate is for.
        total: Tax owed, rounded half-up to the cent.
        shares: Per-bracket breakdown for every bracket the income reaches.
        marginal_rate: Rate applied to the last unit of income, 0 for no income.
        table_label: Name of the bracket table used.
    """

    income: Decimal
    total: Decimal
    shares: tuple[BracketShare, ...] = ()
    marginal_rate: Decimal = ZERO
    table_label: str = "custom"

    @property
    def effective_rate(self) -> Decimal:
        """Total tax as a fraction of income, to four places."""
        if self.income == 0:
            return ZERO
        return (self.total / self.income).quantize(RATE_QUANTUM, rounding=ROUND_HALF_UP)


@dataclass(frozen=True, slots=True)
class EstimateRequest:
    """
    Request for a full income tax estimate.

    Table selection fields left as None fall back to configured defaults.
    State tax is either a flat percentage or a second bracket table, not both.

    Attributes:
        gross_income: Gross yearly income.
        pre_tax_deductions: Amount removed before tax (retirement, HSA, ...).
        jurisdiction: Bracket table jurisdiction for the main income tax.
        year: Tax year.
        filing_status: Filing status, e.g. "single".
        state_rate_percent: Flat state tax rate in percent, e.g. 4.75.
        state_jurisdiction: Jurisdiction of a state bracket table.
    """

    gross_income: Amount
    pre_tax_deductions: Amount = ZERO
    jurisdiction: str | None = None
    year: int | None = None
    filing_status: str | None = None
    state_rate_percent: Amount | None = None
    state_jurisdiction: str | None = None


@dataclass(frozen=True, slots=True)
class TaxSummary:
    """
    Breakdown of income, taxes and what is left over.

    Attributes:
        gross_income: Gross yearly income.
        pre_tax_deductions: Deductions applied before tax.
        taxable_income: Gross income less deductions, never below 0.
        federal: Estimate from the main bracket table.
        state_tax: State tax owed, rounded to the cent.
        state: Estimate from a state bracket table, when one was used.
    """

    gross_income: Decimal
    pre_tax_deductions: Decimal
    taxable_income: Decimal
    federal: TaxEstimate
    state_tax: Decimal
    state: TaxEstimate | None = None

    @property
    def federal_tax(self) -> Decimal:
        """Tax owed under the main bracket table."""
        return self.federal.total

    @property
    def total_tax(self) -> Decimal:
        """Federal plus state tax."""
        return self.federal.total + self.state_tax

    @property
    def net_income(self) -> Decimal:
        """Income left after deductions and taxes."""
        return self.gross_income - self.pre_tax_deductions - self.total_tax
