"""Plain text rendering of estimates and tables."""

from __future__ import annotations

from typing import TYPE_CHECKING

from services.taxes.money import format_percent, round_currency

if TYPE_CHECKING:
    from decimal import Decimal

    from services.taxes.brackets import BracketTable
    from services.taxes.loader import TableKey
    from services.taxes.types import TaxEstimate, TaxSummary


def money(value: Decimal) -> str:
    """Format an amount as dollars and cents, rounding half-up."""
    rounded = round_currency(value)
    sign = "-" if rounded < 0 else ""
    return f"{sign}${abs(rounded):,.2f}"


def percent(rate: Decimal) -> str:
    """Format a fractional rate as a percentage."""
    return f"{format_percent(rate)}%"


def render_estimate(estimate: TaxEstimate, *, breakdown: bool = False) -> str:
    """Render a TaxEstimate, optionally with the per-bracket breakdown."""
    lines = [
        f"Table:          {estimate.table_label}",
        f"Taxable income: {money(estimate.income)}",
        f"Tax owed:       {money(estimate.total)}",
        f"Marginal rate:  {percent(estimate.marginal_rate)}",
        f"Effective rate: {percent(estimate.effective_rate)}",
    ]
    if breakdown:
        lines.append("")
        lines.append(f"  {'Bracket':<32} {'Portion':>14} {'Tax':>12}")
        for share in estimate.shares:
            lines.append(
                f"  {str(share.bracket):<32} "
                f"{money(share.taxable_portion):>14} {money(share.tax):>12}"
            )
    return "\n".join(lines)


def render_summary(summary: TaxSummary) -> str:
    """Render a TaxSummary."""
    lines = [
        f"Gross income:       {money(summary.gross_income)}",
        f"Pre-tax deductions: {money(summary.pre_tax_deductions)}",
        f"Taxable income:     {money(summary.taxable_income)}",
        f"Federal tax:        {money(summary.federal_tax)}  ({summary.federal.table_label})",
    ]
    if summary.state is not None:
        lines.append(f"State tax:          {money(summary.state_tax)}  ({summary.state.table_label})")
    else:
        lines.append(f"State tax:          {money(summary.state_tax)}")
    lines.extend(
        [
            f"Total tax:          {money(summary.total_tax)}",
            f"Net income:         {money(summary.net_income)}",
        ]
    )
    return "\n".join(lines)


def render_table(table: BracketTable) -> str:
    """Render every bracket of a table with the tax owed below it."""
    lines = [f"{table.label} ({table.currency})"]
    for bracket in table:
        below = bracket.cumulative_previous_tax
        suffix = f"  tax below: {money(below)}" if below is not None else ""
        lines.append(f"  {str(bracket):<32}{suffix}")
    return "\n".join(lines)


def render_keys(keys: list[TableKey]) -> str:
    """Render a list of table keys, one per line."""
    return "\n".join(str(key) for key in keys)
