"""Progressive marginal tax computation."""

from __future__ import annotations

from typing import TYPE_CHECKING

from services.taxes.brackets import BracketTable
from services.taxes.money import ZERO, round_currency, to_non_negative
from services.taxes.types import BracketShare, TaxEstimate

if TYPE_CHECKING:
    from collections.abc import Iterable

    from services.taxes.brackets import TaxBracket
    from services.taxes.money import Amount


def compute_tax(
    income: Amount,
    brackets: BracketTable | Iterable[TaxBracket],
) -> TaxEstimate:
    """
    Compute tax owed on ``income`` under progressive brackets.

    Each bracket's rate applies only to the part of income inside it. The
    sum is kept exact and rounded half-up to the cent once at the end.

    Args:
        income: Taxable income (>= 0).
        brackets: A BracketTable, or brackets to validate into one.

    Returns:
        TaxEstimate with the rounded total and per-bracket breakdown.

    Raises:
        InvalidInput: If income is negative or not a number.
        InvalidConfiguration: If the brackets do not form a valid table.
    """
    amount = to_non_negative(income, name="income")
    table = brackets if isinstance(brackets, BracketTable) else BracketTable(tuple(brackets))

    shares: list[BracketShare] = []
    tax = ZERO
    for bracket in table:
        if bracket.lower_bound >= amount:
            break
        upper = amount if bracket.upper_bound is None else min(amount, bracket.upper_bound)
        portion = max(ZERO, upper - bracket.lower_bound)
        contribution = portion * bracket.rate
        shares.append(BracketShare(bracket=bracket, taxable_portion=portion, tax=contribution))
        tax += contribution

    total = round_currency(tax)
    marginal_rate = shares[-1].bracket.rate if shares else ZERO

    return TaxEstimate(
        income=amount,
        total=total,
        shares=tuple(shares),
        marginal_rate=marginal_rate,
        table_label=table.label,
    )
