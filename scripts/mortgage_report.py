#!/usr/bin/env python3
"""Run one of the mortgage engines and write its CSV report.

Usage:
    python scripts/mortgage_report.py schedule --home-price 400000 --down 80000 --rate 6.5 --years 30
    python scripts/mortgage_report.py schedule --balance 250000 --rate 4.25 --payment 1500 --extra-monthly 200
    python scripts/mortgage_report.py points --amount 300000 --years 30 \\
        --scenario "No points" 7.0 0 --scenario "1.5 points" 6.75 1.5
    python scripts/mortgage_report.py refinance --balance 300000 --rate 7 --payment 1996.27 \\
        --new-rate 6 --new-years 30 --closing-costs 3000

The report goes to stdout unless ``--out`` is given; ``--out`` without a
file name writes a timestamped file under ``settings.REPORT_DIR``.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from mortgage_analyzer.config import settings
from mortgage_analyzer.models.loan import (
    BiWeekly,
    DoubleMonthly,
    ExtraAnnual,
    ExtraMonthly,
    LoanParameters,
    LoanType,
    NoPaydown,
)
from mortgage_analyzer.models.points import PointsScenario
from mortgage_analyzer.models.refinance import RefinanceInputs
from mortgage_analyzer.services.export import (
    mortgage_report_csv,
    points_report_csv,
    refinance_report_csv,
    report_filename,
    write_schedule_workbook,
)
from mortgage_analyzer.services.formatting import format_break_even, format_currency
from mortgage_analyzer.services.points_comparison import compare_points_scenarios
from mortgage_analyzer.services.refinance_analysis import analyze_refinance
from mortgage_analyzer.services.validation import (
    ValidationResult,
    validate_loan_parameters,
    validate_points_inputs,
    validate_refinance_inputs,
    validate_scenario_set,
)
from mortgage_analyzer.simulation.amortization import generate_schedules

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s  %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def _check(result: ValidationResult) -> None:
    if result.is_valid:
        return
    for error in result.errors:
        logger.error(error)
    sys.exit(1)


def _emit(text: str, out: str | None, kind: str) -> None:
    if out is None:
        sys.stdout.write(text)
        return
    path = Path(out) if out else Path(settings.REPORT_DIR) / report_filename(kind)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    logger.info("Wrote %s", path)


def _strategy(args):
    if args.extra_monthly:
        return ExtraMonthly(amount=args.extra_monthly)
    if args.extra_annual:
        return ExtraAnnual(amount=args.extra_annual)
    if args.double_monthly:
        return DoubleMonthly()
    if args.bi_weekly:
        return BiWeekly()
    return NoPaydown()


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------
def run_schedule(args) -> None:
    if args.balance is not None:
        params = LoanParameters(
            principal=args.balance,
            annual_rate=args.rate,
            term_months=args.years * 12,
            loan_type=LoanType.existing,
            original_principal=args.original_principal,
            monthly_payment=args.payment,
            pmi_amount=args.pmi_amount,
        )
        kind = "strategies"
    elif args.home_price is not None:
        params = LoanParameters.for_purchase(
            args.home_price,
            args.down,
            args.rate,
            args.years,
            annual_property_tax=args.property_tax,
            annual_home_insurance=args.insurance,
            pmi_rate=args.pmi_rate,
        )
        kind = "calculator"
    else:
        logger.error("Either --home-price or --balance is required")
        sys.exit(1)

    _check(validate_loan_parameters(params))
    strategy = _strategy(args)

    if args.xlsx:
        standard, paydown = generate_schedules(params, strategy)
        compare_to = None if isinstance(strategy, NoPaydown) else standard
        write_schedule_workbook(args.xlsx, paydown, standard=compare_to)
        logger.info("Wrote %s (%d rows)", args.xlsx, paydown.months)

    _emit(mortgage_report_csv(params, strategy), args.out, kind)


def run_points(args) -> None:
    _check(validate_points_inputs(args.amount, args.years))
    baseline = args.baseline or args.scenario[0][0]
    scenarios = [
        PointsScenario(
            id=str(i),
            name=name,
            rate=float(rate),
            points=float(points),
            is_baseline=(name == baseline),
        )
        for i, (name, rate, points) in enumerate(args.scenario, start=1)
    ]
    _check(validate_scenario_set(scenarios))

    results = compare_points_scenarios(scenarios, args.amount, args.years)
    for r in results:
        logger.info(
            "%-20s P&I %s  break-even %s",
            r.scenario.name, format_currency(r.monthly_pi), format_break_even(r.break_even_months),
        )
    _emit(points_report_csv(results, args.amount, args.years), args.out, "points")


def run_refinance(args) -> None:
    inputs = RefinanceInputs(
        current_balance=args.balance,
        current_rate=args.rate,
        current_monthly_payment=args.payment,
        new_rate=args.new_rate,
        new_term_years=args.new_years,
        closing_costs=args.closing_costs,
        cash_out=args.cash_out,
        new_points=args.points,
        finance_closing_costs=args.finance_closing_costs,
    )
    _check(validate_refinance_inputs(inputs))

    result = analyze_refinance(inputs)
    logger.info(
        "Recommendation: %s (%s)", result.recommendation.tier.value, result.recommendation.message,
    )
    _emit(refinance_report_csv(inputs, result), args.out, "refinance")


def main():
    parser = argparse.ArgumentParser(description="Mortgage schedule, points and refinance reports")
    parser.add_argument("--out", nargs="?", const="", default=None,
                        help="Write the CSV report to a file (default: stdout; "
                             "no value: timestamped file in REPORT_DIR)")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("schedule", help="Amortization schedule, optionally with a paydown strategy")
    p.add_argument("--home-price", type=float, help="Purchase price (new loan)")
    p.add_argument("--down", type=float, default=0.0, help="Down payment (new loan)")
    p.add_argument("--balance", type=float, help="Current balance (existing loan)")
    p.add_argument("--original-principal", type=float, help="Original principal (existing loan)")
    p.add_argument("--payment", type=float, help="Current monthly P&I (existing loan)")
    p.add_argument("--rate", type=float, required=True, help="Annual rate in percent")
    p.add_argument("--years", type=int, default=30, help="Term in years (default: 30)")
    p.add_argument("--property-tax", type=float, default=0.0, help="Annual property tax")
    p.add_argument("--insurance", type=float, default=0.0, help="Annual home insurance")
    p.add_argument("--pmi-rate", type=float, default=0.0, help="Annual PMI rate in percent (new loan)")
    p.add_argument("--pmi-amount", type=float, default=0.0, help="Monthly PMI (existing loan)")
    strategy = p.add_mutually_exclusive_group()
    strategy.add_argument("--extra-monthly", type=float, help="Extra principal every month")
    strategy.add_argument("--extra-annual", type=float, help="Extra principal every 12th month")
    strategy.add_argument("--double-monthly", action="store_true", help="Double the principal portion")
    strategy.add_argument("--bi-weekly", action="store_true", help="Half payment every two weeks")
    p.add_argument("--xlsx", help="Also write the schedule to this Excel workbook")
    p.set_defaults(func=run_schedule)

    p = sub.add_parser("points", help="Compare rate / points offers")
    p.add_argument("--amount", type=float, required=True, help="Loan amount")
    p.add_argument("--years", type=int, default=30, help="Term in years (default: 30)")
    p.add_argument("--scenario", nargs=3, action="append", required=True,
                   metavar=("NAME", "RATE", "POINTS"), help="Offer; repeat for each scenario")
    p.add_argument("--baseline", help="Name of the baseline scenario (default: the first)")
    p.set_defaults(func=run_points)

    p = sub.add_parser("refinance", help="Analyze replacing the current loan")
    p.add_argument("--balance", type=float, required=True, help="Current balance")
    p.add_argument("--rate", type=float, required=True, help="Current annual rate in percent")
    p.add_argument("--payment", type=float, required=True, help="Current monthly P&I")
    p.add_argument("--new-rate", type=float, required=True, help="New annual rate in percent")
    p.add_argument("--new-years", type=int, default=30, help="New term in years (default: 30)")
    p.add_argument("--closing-costs", type=float, default=0.0)
    p.add_argument("--cash-out", type=float, default=0.0)
    p.add_argument("--points", type=float, default=0.0, help="Points on the new loan")
    p.add_argument("--finance-closing-costs", action="store_true",
                   help="Roll closing costs into the new loan")
    p.set_defaults(func=run_refinance)

    args = parser.parse_args()
    args.func(args)


if __name__ == "__main__":
    main()
