"""
Pytest configuration and fixtures for the test suite.

This module contains shared fixtures used across all tests.
"""

from __future__ import annotations

import json
import os
from typing import TYPE_CHECKING

import pytest

from core.config import Settings, get_settings
from core.logging import clear_context, configure_logging
from services.taxes import BracketRepository, BracketTable, TaxEstimatorService

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from pathlib import Path


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep TAX_ESTIMATOR_* variables and cached settings out of tests."""
    for key in list(os.environ):
        if key.startswith("TAX_ESTIMATOR_"):
            monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    configure_logging(log_level="WARNING")
    yield
    clear_context()
    get_settings.cache_clear()


@pytest.fixture()
def two_bracket_table() -> BracketTable:
    """[0, 10000) at 10%, [10000, inf) at 20%."""
    return BracketTable.from_rates([(0, 10_000, "0.10"), (10_000, None, "0.20")])


@pytest.fixture()
def three_bracket_table() -> BracketTable:
    """[0, 10000) at 10%, [10000, 50000) at 25%, [50000, inf) at 45%."""
    return BracketTable.from_rates(
        [(0, 10_000, "0.10"), (10_000, 50_000, "0.25"), (50_000, None, "0.45")]
    )


@pytest.fixture()
def write_table(tmp_path: Path) -> Callable[..., Path]:
    """Return a helper writing a bracket file under tmp_path/brackets."""

    def _write(
        brackets: list[dict[str, object]],
        *,
        jurisdiction: str = "test-land",
        year: int = 2024,
        filing_status: str = "single",
        **extra: object,
    ) -> Path:
        path = tmp_path / "brackets" / jurisdiction / str(year) / f"{filing_status}.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        document = {
            "jurisdiction": jurisdiction,
            "year": year,
            "filing_status": filing_status,
            "brackets": brackets,
            **extra,
        }
        path.write_text(json.dumps(document), encoding="utf-8")
        return path

    return _write


@pytest.fixture()
def brackets_dir(tmp_path: Path, write_table: Callable[..., Path]) -> Path:
    """Directory holding a two-bracket test-land/2024/single table."""
    write_table(
        [
            {"lower_bound": 0, "upper_bound": 10000, "rate": "0.10"},
            {"lower_bound": 10000, "upper_bound": None, "rate": "0.20"},
        ]
    )
    return tmp_path / "brackets"


@pytest.fixture()
def test_settings() -> Settings:
    """Settings with defaults pointing at the bundled 2024 federal table."""
    return Settings()


@pytest.fixture()
def tax_service(test_settings: Settings) -> TaxEstimatorService:
    """Create a service over the bundled bracket files."""
    return TaxEstimatorService(
        repository=BracketRepository(use_cache=False),
        settings=test_settings,
    )
