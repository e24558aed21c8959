"""
Command line entry point for income tax estimates.

Usage:
    tax-estimate bracket --income 85000 [--year 2023] [--breakdown]
    tax-estimate summary --gross 95000 --pre-tax-deductions 6000 --state-rate 4.75
    tax-estimate tables
    tax-estimate show --jurisdiction us-federal --year 2022
"""

from __future__ import annotations

import argparse
import sys
from typing import TYPE_CHECKING

from pydantic import ValidationError

from apps.cli.formatting import render_estimate, render_keys, render_summary, render_table
from apps.cli.schemas import BracketTableOut, TaxEstimateOut, TaxSummaryOut
from core.config import LOG_LEVELS, get_settings
from core.logging import bind_context, clear_context, configure_from_settings, get_logger
from services.taxes.errors import ErrorCode, TaxEstimatorError
from services.taxes.loader import BracketRepository
from services.taxes.service import TaxEstimatorService
from services.taxes.types import EstimateRequest

if TYPE_CHECKING:
    from collections.abc import Sequence

    from core.config import Settings

logger = get_logger(__name__)

# argparse exits with 2 on usage errors.
EXIT_OK = 0
EXIT_INVALID_INPUT = 1
EXIT_INVALID_CONFIGURATION = 3

EXIT_CODES: dict[ErrorCode, int] = {
    ErrorCode.INVALID_INPUT: EXIT_INVALID_INPUT,
    ErrorCode.INVALID_CONFIGURATION: EXIT_INVALID_CONFIGURATION,
    ErrorCode.NOT_FOUND: EXIT_INVALID_CONFIGURATION,
}


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    """Build the argument parser, using settings for selection defaults."""
    parser = argparse.ArgumentParser(
        prog="tax-estimate",
        description="Estimate income tax with progressive tax brackets.",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=None,
        help="Override the configured log level",
    )
    parser.add_argument("--log-json", action="store_true", help="Write logs as JSON")
    parser.add_argument(
        "--brackets-dir",
        default=None,
        help="Directory of <jurisdiction>/<year>/<filing_status>.json bracket files",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    selection = argparse.ArgumentParser(add_help=False)
    selection.add_argument(
        "--jurisdiction",
        default=settings.default_jurisdiction,
        help="Bracket table jurisdiction (default: %(default)s)",
    )
    selection.add_argument(
        "--year", type=int, default=settings.default_year, help="Tax year (default: %(default)s)"
    )
    selection.add_argument(
        "--filing-status",
        default=settings.default_filing_status,
        help="Filing status, e.g. single or married_joint (default: %(default)s)",
    )

    output = argparse.ArgumentParser(add_help=False)
    output.add_argument("--json", action="store_true", help="Print JSON instead of text")

    bracket = subparsers.add_parser(
        "bracket",
        parents=[selection, output],
        help="Tax owed on a taxable income",
    )
    bracket.add_argument("--income", required=True, help="Taxable income")
    bracket.add_argument(
        "--breakdown", action="store_true", help="Show income and tax per bracket"
    )
    bracket.set_defaults(handler=run_bracket)

    summary = subparsers.add_parser(
        "summary",
        parents=[selection, output],
        help="Federal and state tax and net income",
    )
    summary.add_argument("--gross", required=True, help="Gross yearly income")
    summary.add_argument(
        "--pre-tax-deductions", default="0", help="Deductions taken before tax (default: 0)"
    )
    state = summary.add_mutually_exclusive_group()
    state.add_argument("--state-rate", default=None, help="Flat state tax rate in percent")
    state.add_argument(
        "--state-jurisdiction", default=None, help="Jurisdiction of a state bracket table"
    )
    summary.set_defaults(handler=run_summary)

    tables = subparsers.add_parser("tables", help="List available bracket tables")
    tables.set_defaults(handler=run_tables)

    show = subparsers.add_parser(
        "show", parents=[selection, output], help="Print one bracket table"
    )
    show.set_defaults(handler=run_show)

    return parser


def run_bracket(args: argparse.Namespace, service: TaxEstimatorService) -> int:
    """Print the tax owed on ``--income``."""
    result = service.estimate_tax(
        args.income,
        jurisdiction=args.jurisdiction,
        year=args.year,
        filing_status=args.filing_status,
    )
    if result.is_failure():
        return _report(result.error)

    estimate = result.unwrap()
    if args.json:
        print(TaxEstimateOut.from_estimate(estimate).model_dump_json(indent=2))
    else:
        print(render_estimate(estimate, breakdown=args.breakdown))
    return EXIT_OK


def run_summary(args: argparse.Namespace, service: TaxEstimatorService) -> int:
    """Print federal tax, state tax and net income for ``--gross``."""
    request = EstimateRequest(
        gross_income=args.gross,
        pre_tax_deductions=args.pre_tax_deductions,
        jurisdiction=args.jurisdiction,
        year=args.year,
        filing_status=args.filing_status,
        state_rate_percent=args.state_rate,
        state_jurisdiction=args.state_jurisdiction,
    )
    result = service.estimate(request)
    if result.is_failure():
        return _report(result.error)

    summary = result.unwrap()
    if args.json:
        print(TaxSummaryOut.from_summary(summary).model_dump_json(indent=2))
    else:
        print(render_summary(summary))
    return EXIT_OK


def run_tables(_args: argparse.Namespace, service: TaxEstimatorService) -> int:
    """Print every available table key."""
    keys = service.repository.available()
    if not keys:
        print(f"No bracket tables found in {service.repository.directory}")
        return EXIT_OK
    print(render_keys(keys))
    return EXIT_OK


def run_show(args: argparse.Namespace, service: TaxEstimatorService) -> int:
    """Print the selected table."""
    result = service.table(args.jurisdiction, args.year, args.filing_status)
    if result.is_failure():
        return _report(result.error)

    table = result.unwrap()
    if args.json:
        print(BracketTableOut.from_table(table).model_dump_json(indent=2))
    else:
        print(render_table(table))
    return EXIT_OK


def _report(error: TaxEstimatorError) -> int:
    print(f"error: {error}", file=sys.stderr)
    return EXIT_CODES.get(error.code, EXIT_INVALID_INPUT)


def main(argv: Sequence[str] | None = None) -> int:
    """
    Run the CLI.

    Args:
        argv: Arguments without the program name (default: sys.argv[1:]).

    Returns:
        Process exit code.
    """
    try:
        settings = get_settings()
    except ValidationError as exc:
        print(f"error: invalid settings: {exc}", file=sys.stderr)
        return EXIT_INVALID_CONFIGURATION

    args = build_parser(settings).parse_args(argv)

    settings = settings.model_copy(
        update={
            "log_json": settings.log_json or args.log_json,
            "log_level": args.log_level or settings.log_level,
        }
    )
    configure_from_settings(settings)
    bind_context(command=args.command)
    try:
        repository = BracketRepository(args.brackets_dir or settings.brackets_dir)
        service = TaxEstimatorService(repository=repository, settings=settings)
        exit_code: int = args.handler(args, service)
        logger.debug("Command finished", exit_code=exit_code)
        return exit_code
    finally:
        clear_context()
