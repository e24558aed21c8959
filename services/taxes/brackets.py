"""Progressive tax brackets and validated bracket tables."""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from typing import TYPE_CHECKING

from services.taxes.errors import InvalidConfiguration
from services.taxes.money import (
    ZERO,
    format_percent,
    round_currency,
    to_decimal,
    to_non_negative,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from services.taxes.money import Amount


@dataclass(frozen=True, slots=True)
class TaxBracket:
    """
    One marginal rate band.

    Income ``x`` falls in the bracket when ``lower_bound <= x < upper_bound``.

    Attributes:
        lower_bound: Inclusive lower threshold.
        upper_bound: Exclusive upper threshold, None for the top bracket.
        rate: Fractional marginal rate, e.g. 0.22 for 22%.
        cumulative_previous_tax: Tax owed by all lower brackets when filled.
            Filled in by BracketTable; a supplied value is checked against it.
    """

    lower_bound: Decimal
    upper_bound: Decimal | None
    rate: Decimal
    cumulative_previous_tax: Decimal | None = None

    def __post_init__(self) -> None:
        """Coerce fields to Decimal and validate the band."""
        lower = to_non_negative(
            self.lower_bound, name="lower_bound", error=InvalidConfiguration
        )
        upper = (
            None
            if self.upper_bound is None
            else to_decimal(self.upper_bound, name="upper_bound", error=InvalidConfiguration)
        )
        rate = to_non_negative(self.rate, name="rate", error=InvalidConfiguration)
        cumulative = (
            None
            if self.cumulative_previous_tax is None
            else to_non_negative(
                self.cumulative_previous_tax,
                name="cumulative_previous_tax",
                error=InvalidConfiguration,
            )
        )

        if rate >= 1:
            raise InvalidConfiguration("rate must be below 1", details=str(rate))
        if upper is not None and upper <= lower:
            raise InvalidConfiguration(
                f"Bracket minimum {lower} is >= bracket maximum {upper}"
            )

        object.__setattr__(self, "lower_bound", lower)
        object.__setattr__(self, "upper_bound", upper)
        object.__setattr__(self, "rate", rate)
        object.__setattr__(self, "cumulative_previous_tax", cumulative)

    @property
    def is_unbounded(self) -> bool:
        """True for the top bracket."""
        return self.upper_bound is None

    @property
    def width(self) -> Decimal | None:
        """Amount of income the bracket spans, None when unbounded."""
        if self.upper_bound is None:
            return None
        return self.upper_bound - self.lower_bound

    @property
    def max_tax(self) -> Decimal | None:
        """Tax owed when the bracket is completely filled."""
        width = self.width
        return None if width is None else width * self.rate

    def contains(self, income: Decimal) -> bool:
        """Whether ``income`` falls inside this bracket."""
        if income < self.lower_bound:
            return False
        return self.upper_bound is None or income < self.upper_bound

    def __str__(self) -> str:
        """Return a readable description of the band."""
        upper = "inf" if self.upper_bound is None else f"{self.upper_bound:,}"
        return f"[{self.lower_bound:,}, {upper}) @ {format_percent(self.rate)}%"


@dataclass(frozen=True, slots=True)
class BracketTable:
    """
    Ordered, contiguous set of brackets for one jurisdiction and year.

    The first bracket starts at 0, each bracket starts where the previous
    one ends and only the last one is unbounded. Construction fails with
    InvalidConfiguration otherwise; brackets are not re-sorted.

    Attributes:
        brackets: Brackets ascending by lower_bound.
        jurisdiction: Taxing authority, e.g. "us-federal".
        year: Tax year the rates apply to.
        filing_status: Filing status, e.g. "single".
        currency: ISO currency code of the thresholds.
    """

    brackets: tuple[TaxBracket, ...]
    jurisdiction: str | None = None
    year: int | None = None
    filing_status: str | None = None
    currency: str = "USD"

    def __post_init__(self) -> None:
        """Validate the table and tabulate cumulative taxes."""
        brackets = tuple(self.brackets)
        _validate(brackets)
        object.__setattr__(self, "brackets", _tabulate(brackets))

    @classmethod
    def from_rates(
        cls,
        rates: Iterable[tuple[Amount, Amount | None, Amount]],
        **metadata: object,
    ) -> BracketTable:
        """
        Build a table from ``(lower, upper, rate)`` triples.

        Example:
            >>> BracketTable.from_rates([(0, 10000, "0.10"), (10000, None, "0.20")])
        """
        brackets = tuple(TaxBracket(lower, upper, rate) for lower, upper, rate in rates)
        return cls(brackets, **metadata)  # type: ignore[arg-type]

    def __iter__(self) -> Iterator[TaxBracket]:
        """Iterate brackets in ascending order."""
        return iter(self.brackets)

    def __len__(self) -> int:
        """Return the number of brackets."""
        return len(self.brackets)

    def __getitem__(self, index: int) -> TaxBracket:
        """Return the bracket at ``index``."""
        return self.brackets[index]

    @property
    def label(self) -> str:
        """Human-readable table name."""
        parts = [self.jurisdiction, self.year, self.filing_status]
        named = [str(p) for p in parts if p is not None]
        return " ".join(named) if named else "custom"

    def bracket_for(self, income: Amount) -> TaxBracket:
        """
        Return the bracket containing ``income``.

        Raises:
            InvalidInput: If income is negative or not a number.
        """
        amount = to_non_negative(income, name="income")
        for bracket in reversed(self.brackets):
            if amount >= bracket.lower_bound:
                return bracket
        # First bracket starts at 0 so this is unreachable for valid tables.
        return self.brackets[0]

    def marginal_rate(self, income: Amount) -> Decimal:
        """Rate applied to the next unit of income above ``income``."""
        return self.bracket_for(income).rate


def _validate(brackets: tuple[TaxBracket, ...]) -> None:
    if not brackets:
        raise InvalidConfiguration("Bracket table is empty")

    for bracket in brackets:
        if not isinstance(bracket, TaxBracket):
            raise InvalidConfiguration(
                "Bracket table entries must be TaxBracket", details=repr(bracket)
            )

    for previous, current in zip(brackets, brackets[1:], strict=False):
        if current.lower_bound < previous.lower_bound:
            raise InvalidConfiguration(
                "Brackets are not sorted by lower_bound",
                details=f"{current} listed after {previous}",
            )

    first = brackets[0]
    if first.lower_bound != ZERO:
        raise InvalidConfiguration(
            "First bracket must start at 0", details=str(first)
        )

    for previous, current in zip(brackets, brackets[1:], strict=False):
        if previous.upper_bound is None:
            raise InvalidConfiguration(
                "Only the top bracket may be unbounded", details=str(previous)
            )
        if previous.upper_bound > current.lower_bound:
            raise InvalidConfiguration(
                f"Overlap of bracket {current} and {previous}"
            )
        if previous.upper_bound < current.lower_bound:
            raise InvalidConfiguration(
                f"Gap between bracket {previous} and {current}"
            )

    last = brackets[-1]
    if last.upper_bound is not None:
        raise InvalidConfiguration(
            "Top bracket must be unbounded", details=str(last)
        )


def _tabulate(brackets: tuple[TaxBracket, ...]) -> tuple[TaxBracket, ...]:
    """Fill in cumulative_previous_tax, checking any supplied values to the cent."""
    tabulated: list[TaxBracket] = []
    running = ZERO
    for bracket in brackets:
        supplied = bracket.cumulative_previous_tax
        if supplied is not None and round_currency(supplied) != round_currency(running):
            raise InvalidConfiguration(
                f"Cumulative tax given for bracket {bracket} is {supplied}, "
                f"calculated {round_currency(running)}"
            )
        tabulated.append(replace(bracket, cumulative_previous_tax=running))
        max_tax = bracket.max_tax
        if max_tax is not None:
            running += max_tax
    return tuple(tabulated)
