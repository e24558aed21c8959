"""Loading bracket tables from JSON files."""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from core.logging import get_logger
from services.taxes.brackets import BracketTable, TaxBracket
from services.taxes.errors import InvalidConfiguration, InvalidInput, TableNotFound

logger = get_logger(__name__)

DEFAULT_BRACKETS_DIR = Path(__file__).resolve().parent / "data"

_KEY_PATTERN = re.compile(r"^[a-z0-9][a-z0-9_-]*$")


class BracketEntry(BaseModel):
    """One bracket as written in a bracket file."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    lower_bound: Decimal = Field(ge=0)
    upper_bound: Decimal | None = None
    rate: Decimal = Field(ge=0, lt=1)
    cumulative_previous_tax: Decimal | None = Field(default=None, ge=0)


class BracketFile(BaseModel):
    """
    Schema of a bracket file.

    Example:
        {
          "jurisdiction": "us-federal",
          "year": 2024,
          "filing_status": "single",
          "brackets": [
            {"lower_bound": 0, "upper_bound": 11600, "rate": "0.10"},
            {"lower_bound": 11600, "upper_bound": null, "rate": "0.12"}
          ]
        }
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    jurisdiction: str = Field(min_length=1)
    year: int = Field(ge=1900, le=2200)
    filing_status: str = Field(min_length=1)
    currency: str = Field(default="USD", min_length=3, max_length=3)
    brackets: list[BracketEntry] = Field(min_length=1)

    def to_table(self) -> BracketTable:
        """Sort the entries by lower bound and build a validated table."""
        ordered = sorted(self.brackets, key=lambda entry: entry.lower_bound)
        return BracketTable(
            tuple(
                TaxBracket(
                    lower_bound=entry.lower_bound,
                    upper_bound=entry.upper_bound,
                    rate=entry.rate,
                    cumulative_previous_tax=entry.cumulative_previous_tax,
                )
                for entry in ordered
            ),
            jurisdiction=self.jurisdiction.strip().lower(),
            year=self.year,
            filing_status=self.filing_status.strip().lower(),
            currency=self.currency.upper(),
        )


@dataclass(frozen=True, slots=True, order=True)
class TableKey:
    """Identifies one bracket table."""

    jurisdiction: str
    year: int
    filing_status: str

    def __str__(self) -> str:
        """Return the key in path form."""
        return f"{self.jurisdiction}/{self.year}/{self.filing_status}"


def load_bracket_table(path: Path | str) -> BracketTable:
    """
    Read a bracket file and build a validated BracketTable.

    Brackets may be listed in any order; they are sorted by lower bound
    before validation.

    Raises:
        TableNotFound: If the file does not exist.
        InvalidConfiguration: If the file is unreadable, does not match the
            schema or describes an invalid table.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise TableNotFound(f"The file {file_path} does not exist")

    try:
        raw = file_path.read_bytes()
    except OSError as exc:
        raise InvalidConfiguration(f"Cannot read {file_path}", details=str(exc)) from exc

    try:
        parsed = BracketFile.model_validate_json(raw)
    except ValidationError as exc:
        raise InvalidConfiguration(
            f"Invalid bracket file {file_path}",
            details=f"{exc.error_count()} validation error(s): {exc.errors()[0]['msg']}",
        ) from exc

    try:
        table = parsed.to_table()
    except InvalidConfiguration as exc:
        raise InvalidConfiguration(
            f"Invalid bracket table in {file_path}: {exc.message}",
            details=exc.details,
        ) from exc

    logger.info(
        "Loaded bracket table",
        path=str(file_path),
        table=table.label,
        brackets=len(table),
    )
    return table


class BracketRepository:
    """
    Bracket tables stored as ``<jurisdiction>/<year>/<filing_status>.json``.

    Tables are loaded on first use and cached per key.
    """

    def __init__(self, directory: Path | str | None = None, use_cache: bool = True) -> None:
        """
        Initialize the repository.

        Args:
            directory: Root directory of bracket files (default: bundled data).
            use_cache: Whether to cache loaded tables (default True).
        """
        self._directory = Path(directory) if directory is not None else DEFAULT_BRACKETS_DIR
        self._use_cache = use_cache
        self._cache: dict[TableKey, BracketTable] = {}

    @property
    def directory(self) -> Path:
        """Root directory of bracket files."""
        return self._directory

    def key(self, jurisdiction: str, year: int, filing_status: str) -> TableKey:
        """
        Normalize a selection into a TableKey.

        Raises:
            InvalidInput: If a name contains anything but letters, digits,
                dashes and underscores.
        """
        return TableKey(
            jurisdiction=_normalize("jurisdiction", jurisdiction),
            year=_normalize_year(year),
            filing_status=_normalize("filing_status", filing_status),
        )

    def path_for(self, key: TableKey) -> Path:
        """Return the file path a key is stored at."""
        return self._directory / key.jurisdiction / str(key.year) / f"{key.filing_status}.json"

    def get(self, jurisdiction: str, year: int, filing_status: str) -> BracketTable:
        """
        Return the table for a selection.

        Raises:
            InvalidInput: If the selection is malformed.
            TableNotFound: If no file exists for the selection.
            InvalidConfiguration: If the file is invalid or its contents
                describe a different table than its location.
        """
        key = self.key(jurisdiction, year, filing_status)

        if self._use_cache and key in self._cache:
            logger.debug("Bracket table cache hit", table=str(key))
            return self._cache[key]

        path = self.path_for(key)
        if not path.is_file():
            raise TableNotFound(f"No bracket table for {key}", details=str(path))

        table = load_bracket_table(path)
        stored = TableKey(
            jurisdiction=table.jurisdiction or "",
            year=table.year or 0,
            filing_status=table.filing_status or "",
        )
        if stored != key:
            raise InvalidConfiguration(
                f"Bracket file {path} describes {stored}, expected {key}"
            )

        if self._use_cache:
            self._cache[key] = table
        return table

    def available(self) -> list[TableKey]:
        """List every table stored under the directory, sorted."""
        if not self._directory.is_dir():
            return []

        keys: list[TableKey] = []
        for path in self._directory.glob("*/*/*.json"):
            year_dir = path.parent
            if not year_dir.name.isdigit():
                continue
            keys.append(
                TableKey(
                    jurisdiction=year_dir.parent.name,
                    year=int(year_dir.name),
                    filing_status=path.stem,
                )
            )
        return sorted(keys)

    def clear_cache(self) -> None:
        """Clear the table cache."""
        self._cache.clear()


def _normalize(name: str, value: str) -> str:
    text = str(value).strip().lower()
    if not _KEY_PATTERN.match(text):
        raise InvalidInput(f"Invalid {name}", details=repr(value))
    return text


def _normalize_year(value: int | str) -> int:
    try:
        year = int(value)
    except (TypeError, ValueError):
        raise InvalidInput("year must be an integer", details=repr(value)) from None
    if not 1900 <= year <= 2200:
        raise InvalidInput("year is out of range", details=str(year))
    return year
