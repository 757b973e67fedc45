"""Command-line interface for debt-manager.

Commands:

- ``accrue``  compute the amount owed on a single obligation
- ``preview`` split a value into monthly installments and evaluate them
- ``seed``    generate a synthetic portfolio and export it to JSON
- ``summary`` print dashboard statistics of a synthetic portfolio
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from decimal import Decimal

from debt_manager.config import AccrualConfig, DebtManagerConfig
from debt_manager.dates import parse_date
from debt_manager.exceptions import DebtManagerError
from debt_manager.logging import setup_logging
from debt_manager.mapping import title_to_response
from debt_manager.money import to_decimal
from debt_manager.rates import parse_rate_unit, percent_to_fraction
from debt_manager.scenarios import DebtPortfolioScenario
from debt_manager.services import DebtTitleService, build_summary, preview_installment_plan
from debt_manager.sinks import ConsoleSink, JsonFileSink

logger = logging.getLogger(__name__)


def _date_arg(value: str) -> date:
    try:
        return parse_date(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _decimal_arg(value: str) -> Decimal:
    try:
        return to_decimal(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="debt-manager",
        description="Debt title accrual, previews and portfolio statistics",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Log level (default: LOG_LEVEL env or INFO)",
    )
    parser.add_argument(
        "--log-format",
        choices=["standard", "json"],
        default=None,
        help="Log format (default: LOG_FORMAT env or standard)",
    )
    parser.add_argument(
        "--rate-unit",
        choices=["day", "month"],
        default=None,
        help="Unit of stored interest rates (default: ACCRUAL_RATE_UNIT env or day)",
    )
    parser.add_argument(
        "--reference-date",
        type=_date_arg,
        default=None,
        help="Date to evaluate at, YYYY-MM-DD (default: today)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    accrue = subparsers.add_parser("accrue", help="Compute accrual for one obligation")
    accrue.add_argument("--principal", type=_decimal_arg, required=True, help="Original value")
    accrue.add_argument("--due-date", type=_date_arg, required=True, help="Due date, YYYY-MM-DD")
    accrue.add_argument(
        "--interest-rate",
        type=str,
        default="0",
        help="Interest rate in percent per rate unit (default: 0)",
    )
    accrue.add_argument(
        "--penalty-rate",
        type=str,
        default="0",
        help="Flat penalty in percent (default: 0)",
    )
    accrue.add_argument("--paid", action="store_true", help="Obligation is already paid")

    preview = subparsers.add_parser("preview", help="Preview an installment plan")
    preview.add_argument("--value", type=_decimal_arg, required=True, help="Title value")
    preview.add_argument("--installments", type=int, required=True, help="Number of installments")
    preview.add_argument("--first-due-date", type=_date_arg, required=True, help="First due date")
    preview.add_argument("--interest-rate", type=str, default="0", help="Percent per rate unit")
    preview.add_argument("--penalty-rate", type=str, default="0", help="Flat penalty percent")

    seed = subparsers.add_parser("seed", help="Generate a portfolio and export it to JSON")
    seed.add_argument("--titles", type=int, default=50, help="Number of titles (default: 50)")
    seed.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility")
    seed.add_argument("--output", type=str, default=None, help="Output directory (default: OUTPUT_DIR env)")
    seed.add_argument("--pretty", action="store_true", help="Pretty-print JSON")

    summary = subparsers.add_parser("summary", help="Print statistics of a generated portfolio")
    summary.add_argument("--titles", type=int, default=50, help="Number of titles (default: 50)")
    summary.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility")

    return parser


def _run_accrue(args: argparse.Namespace, config: DebtManagerConfig, reference: date) -> None:
    result = config.accrual.calculator().compute(
        args.principal,
        args.due_date,
        reference,
        percent_to_fraction(args.interest_rate, "interestRate"),
        percent_to_fraction(args.penalty_rate, "penaltyRate"),
        args.paid,
    )
    ConsoleSink(pretty=True).write_record(
        {
            "referenceDate": reference,
            "principal": result.principal,
            "interest": result.interest,
            "penalty": result.penalty,
            "total": result.total,
            "daysOverdue": result.days_overdue,
            "isOverdue": result.is_overdue,
        }
    )


def _run_preview(args: argparse.Namespace, config: DebtManagerConfig, reference: date) -> None:
    plan = preview_installment_plan(
        args.value,
        args.installments,
        args.first_due_date,
        args.interest_rate,
        args.penalty_rate,
        reference,
        config.accrual.calculator(),
    )
    sink = ConsoleSink(pretty=False)
    sink.write_batch(
        "installment_preview",
        [
            {
                "installmentNumber": line.installment_number,
                "dueDate": line.due_date,
                "value": line.value,
                "updatedValue": line.accrual.total,
                "daysOverdue": line.accrual.days_overdue,
            }
            for line in plan.lines
        ],
    )
    print(f"Total: {plan.original_value} -> {plan.updated_value}")


def _portfolio(args: argparse.Namespace, config: DebtManagerConfig, reference: date) -> DebtTitleService:
    seed = args.seed if args.seed is not None else config.seed
    scenario = DebtPortfolioScenario(num_titles=args.titles, seed=seed, config=config)
    scenario.generate(reference)
    return scenario.titles


def _run_seed(args: argparse.Namespace, config: DebtManagerConfig, reference: date) -> None:
    titles = _portfolio(args, config, reference)
    responses = [title_to_response(e) for e in titles.evaluate_all(reference)]
    sink = JsonFileSink(
        args.output or config.output.json_output_dir,
        pretty=args.pretty or config.output.pretty_json,
    )
    sink.write_batch("debt_titles", responses)
    sink.write_batch("events", titles.store.events)
    sink.close()


def _run_summary(args: argparse.Namespace, config: DebtManagerConfig, reference: date) -> None:
    titles = _portfolio(args, config, reference)
    ConsoleSink(pretty=True).write_record(build_summary(titles.evaluate_all(reference)))


COMMANDS = {
    "accrue": _run_accrue,
    "preview": _run_preview,
    "seed": _run_seed,
    "summary": _run_summary,
}


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    try:
        config = DebtManagerConfig.from_env()
        if args.rate_unit:
            config.accrual = AccrualConfig(rate_unit=parse_rate_unit(args.rate_unit))
        setup_logging(
            level=args.log_level or config.log_level,
            format_type=args.log_format or config.log_format,
        )
        reference = args.reference_date or date.today()
        COMMANDS[args.command](args, config, reference)
    except DebtManagerError as exc:
        logger.error("%s failed: %s", args.command, exc)
        for error in getattr(exc, "errors", []):
            logger.error("  %s: %s", error.field, error.message)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
