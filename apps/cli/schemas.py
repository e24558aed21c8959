"""JSON output schemas for the command line interface."""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from pydantic import BaseModel

if TYPE_CHECKING:
    from services.taxes.brackets import BracketTable
    from services.taxes.types import BracketShare, TaxEstimate, TaxSummary


class BracketOut(BaseModel):
    """One bracket of a table."""

    lower_bound: Decimal
    upper_bound: Decimal | None
    rate: Decimal
    cumulative_previous_tax: Decimal | None = None


class BracketTableOut(BaseModel):
    """A bracket table with its metadata."""

    jurisdiction: str | None
    year: int | None
    filing_status: str | None
    currency: str
    brackets: list[BracketOut]

    @classmethod
    def from_table(cls, table: BracketTable) -> BracketTableOut:
        """Serialize a BracketTable."""
        return cls(
            jurisdiction=table.jurisdiction,
            year=table.year,
            filing_status=table.filing_status,
            currency=table.currency,
            brackets=[
                BracketOut(
                    lower_bound=b.lower_bound,
                    upper_bound=b.upper_bound,
                    rate=b.rate,
                    cumulative_previous_tax=b.cumulative_previous_tax,
                )
                for b in table
            ],
        )


class BracketShareOut(BaseModel):
    """Income and tax inside one bracket."""

    lower_bound: Decimal
    upper_bound: Decimal | None
    rate: Decimal
    taxable_portion: Decimal
    tax: Decimal

    @classmethod
    def from_share(cls, share: BracketShare) -> BracketShareOut:
        """Serialize a BracketShare."""
        return cls(
            lower_bound=share.bracket.lower_bound,
            upper_bound=share.bracket.upper_bound,
            rate=share.bracket.rate,
            taxable_portion=share.taxable_portion,
            tax=share.tax,
        )


class TaxEstimateOut(BaseModel):
    """Tax owed on one income under one table."""

    table: str
    income: Decimal
    total: Decimal
    marginal_rate: Decimal
    effective_rate: Decimal
    brackets: list[BracketShareOut]

    @classmethod
    def from_estimate(cls, estimate: TaxEstimate) -> TaxEstimateOut:
        """Serialize a TaxEstimate."""
        return cls(
            table=estimate.table_label,
            income=estimate.income,
            total=estimate.total,
            marginal_rate=estimate.marginal_rate,
            effective_rate=estimate.effective_rate,
            brackets=[BracketShareOut.from_share(s) for s in estimate.shares],
        )


class TaxSummaryOut(BaseModel):
    """Income, taxes and net income."""

    gross_income: Decimal
    pre_tax_deductions: Decimal
    taxable_income: Decimal
    federal: TaxEstimateOut
    state_tax: Decimal
    state: TaxEstimateOut | None
    total_tax: Decimal
    net_income: Decimal

    @classmethod
    def from_summary(cls, summary: TaxSummary) -> TaxSummaryOut:
        """Serialize a TaxSummary."""
        return cls(
            gross_income=summary.gross_income,
            pre_tax_deductions=summary.pre_tax_deductions,
            taxable_income=summary.taxable_income,
            federal=TaxEstimateOut.from_estimate(summary.federal),
            state_tax=summary.state_tax,
            state=TaxEstimateOut.from_estimate(summary.state) if summary.state else None,
            total_tax=summary.total_tax,
            net_income=summary.net_income,
        )
