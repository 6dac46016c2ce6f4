"""Tabular export of engine results to pandas frames and CSV or Excel reports.

Only consumes the engines' output models; nothing here feeds back into a
calculation.
"""
from __future__ import annotations

import csv
import io
import logging
from datetime import date, datetime
from typing import BinaryIO, Union
from pathlib import Path

import pandas as pd

from mortgage_analyzer.models.loan import BiWeekly, DoubleMonthly, LoanParameters, NoPaydown, PaydownStrategy
from mortgage_analyzer.models.points import ComparisonResult
from mortgage_analyzer.models.refinance import RefinanceInputs, RefinanceResult
from mortgage_analyzer.models.schedule import AmortizationSchedule
from mortgage_analyzer.services.formatting import (
    format_break_even,
    format_currency,
    format_percentage,
)
from mortgage_analyzer.simulation.amortization import compare_schedules, generate_schedules
from mortgage_analyzer.simulation.constants import BIWEEKLY_PERIODS_PER_YEAR
from mortgage_analyzer.simulation.metrics import loan_metrics

logger = logging.getLogger(__name__)

SCHEDULE_COLUMNS = [
    "month",
    "payment",
    "principal",
    "interest",
    "extra_principal",
    "balance",
    "total_interest",
    "pmi",
    "escrow",
]

_REPORT_PREFIXES = {
    "calculator": "new-mortgage",
    "strategies": "existing-mortgage",
    "points": "points-analysis",
    "refinance": "refinance-analysis",
}

Row = list[Union[str, int, float]]


# ---------------------------------------------------------------------------
# Frames
# ---------------------------------------------------------------------------
def schedule_to_dataframe(schedule: AmortizationSchedule) -> pd.DataFrame:
    """One row per schedule entry, columns in SCHEDULE_COLUMNS order."""
    if not schedule.entries:
        return pd.DataFrame({
            col: pd.Series(dtype="int64" if col == "month" else "float64")
            for col in SCHEDULE_COLUMNS
        })
    return pd.DataFrame([e.model_dump() for e in schedule.entries])[SCHEDULE_COLUMNS]


def comparison_dataframe(
    standard: AmortizationSchedule, paydown: AmortizationSchedule,
) -> pd.DataFrame:
    """Standard and paydown schedules side by side, month by month.

    After the paydown schedule ends its columns are empty and its balance is
    zero; ``interest_savings`` is the cumulative interest avoided so far.
    """
    std = schedule_to_dataframe(standard).add_prefix("standard_")
    pay = schedule_to_dataframe(paydown).add_prefix("paydown_")
    df = std.merge(
        pay, how="left", left_on="standard_month", right_on="paydown_month",
    ).rename(columns={"standard_month": "month"}).drop(columns=["paydown_month"])

    df["paydown_balance"] = df["paydown_balance"].fillna(0.0)
    # Running totals; bi-weekly row interest is a doubled half-month figure
    df["interest_savings"] = (
        df["standard_total_interest"] - df["paydown_total_interest"].ffill().fillna(0.0)
    )
    return df


# ---------------------------------------------------------------------------
# CSV helpers
# ---------------------------------------------------------------------------
def rows_to_csv(rows: list[Row]) -> str:
    """Serialize ragged report rows; fields with commas, quotes or newlines are quoted."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerows(rows)
    return buf.getvalue()


def payment_date(start: date, month: int) -> str:
    return (pd.Timestamp(start) + pd.DateOffset(months=month)).strftime("%b %Y")


def report_filename(kind: str, now: datetime | None = None) -> str:
    now = now or datetime.now()
    prefix = _REPORT_PREFIXES.get(kind, "mortgage-data")
    return f"{prefix}-{now:%Y-%m-%d}-{now:%H-%M-%S}.csv"


def _header(title: str, generated_at: datetime) -> list[Row]:
    return [[title], [f"Generated on: {generated_at:%Y-%m-%d %H:%M:%S}"], [""]]


def _strategy_rows(strategy: PaydownStrategy, params: LoanParameters, monthly_pi: float) -> list[Row]:
    if isinstance(strategy, BiWeekly):
        return [
            ["Strategy", "Bi-Weekly Payments"],
            ["Bi-Weekly Payment Amount", format_currency(monthly_pi / 2)],
            ["Annual Payment Total", format_currency(monthly_pi / 2 * BIWEEKLY_PERIODS_PER_YEAR)],
        ]
    if isinstance(strategy, DoubleMonthly):
        first_principal = monthly_pi - params.principal * (params.annual_rate / 100 / 12)
        return [
            ["Strategy", "Double Monthly Principal"],
            ["Extra Principal Payment", format_currency(first_principal)],
            ["Total Monthly Payment", format_currency(monthly_pi + first_principal)],
        ]
    label = "Extra Monthly Principal" if strategy.kind == "extra_monthly" else "Extra Annual Payment"
    return [["Strategy", "Extra Payments"], [label, format_currency(strategy.amount)]]


def _schedule_rows(schedule: AmortizationSchedule, start: date, with_pmi: bool) -> list[Row]:
    headers: Row = [
        "Payment #", "Date", "Payment Amount", "Principal", "Interest",
        "Remaining Balance", "Total Interest Paid",
    ]
    if with_pmi:
        headers.append("PMI")
    rows = [headers]
    for e in schedule.entries:
        row: Row = [
            e.month,
            payment_date(start, e.month),
            format_currency(e.payment),
            format_currency(e.principal),
            format_currency(e.interest),
            format_currency(e.balance),
            format_currency(e.total_interest),
        ]
        if with_pmi:
            row.append(format_currency(e.pmi) if e.pmi > 0 else "-")
        rows.append(row)
    return rows


def _comparison_rows(
    standard: AmortizationSchedule, paydown: AmortizationSchedule, start: date, with_pmi: bool,
) -> list[Row]:
    df = comparison_dataframe(standard, paydown)
    headers: Row = [
        "Payment #", "Date",
        "Standard Payment", "Standard Principal", "Standard Interest", "Standard Balance",
        "Paydown Payment", "Paydown Principal", "Paydown Interest", "Paydown Balance",
        "Interest Savings",
    ]
    if with_pmi:
        headers.insert(6, "Standard PMI")
        headers.insert(11, "Paydown PMI")
    rows = [headers]

    for r in df.itertuples(index=False):
        paid_off = pd.isna(r.paydown_payment)
        row: Row = [
            int(r.month),
            payment_date(start, int(r.month)),
            format_currency(r.standard_payment),
            format_currency(r.standard_principal),
            format_currency(r.standard_interest),
            format_currency(r.standard_balance),
            "PAID OFF" if paid_off else format_currency(r.paydown_payment),
            "-" if paid_off else format_currency(r.paydown_principal),
            "-" if paid_off else format_currency(r.paydown_interest),
            format_currency(r.paydown_balance),
            format_currency(r.interest_savings),
        ]
        if with_pmi:
            row.insert(6, format_currency(r.standard_pmi) if r.standard_pmi > 0 else "-")
            paydown_pmi = "-" if paid_off or not r.paydown_pmi > 0 else format_currency(r.paydown_pmi)
            row.insert(11, paydown_pmi)
        rows.append(row)
    return rows


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------
def mortgage_report_csv(
    params: LoanParameters,
    strategy: PaydownStrategy | None = None,
    generated_at: datetime | None = None,
    start: date | None = None,
) -> str:
    """Loan summary plus the amortization schedule (or a standard-vs-paydown comparison)."""
    generated_at = generated_at or datetime.now()
    start = start or generated_at.date()
    strategy = strategy or NoPaydown()
    has_paydown = not isinstance(strategy, NoPaydown)

    metrics = loan_metrics(params)
    standard, paydown = generate_schedules(params, strategy)

    rows = _header("Mortgage Calculator Export", generated_at)
    rows.append(["LOAN DETAILS"])
    if not params.is_existing and params.home_price:
        rows.append(["Home Price", format_currency(params.home_price)])
        rows.append(["Down Payment", format_currency(params.home_price - params.principal)])
    rows.extend([
        ["Loan Amount", format_currency(metrics.loan_amount)],
        ["Interest Rate", format_percentage(params.annual_rate)],
        ["Loan Term", f"{metrics.total_payments} months"],
        ["Monthly P&I", format_currency(metrics.monthly_pi)],
    ])
    if not params.is_existing:
        rows.append(["Property Tax (Annual)", format_currency(params.annual_property_tax)])
        rows.append(["Home Insurance (Annual)", format_currency(params.annual_home_insurance)])
    if metrics.monthly_pmi > 0:
        rows.append(["PMI (Monthly)", format_currency(metrics.monthly_pmi)])
    if not params.is_existing:
        rows.append(["Total Monthly Payment", format_currency(metrics.total_monthly_payment)])

    if has_paydown:
        savings = compare_schedules(standard, paydown)
        rows.extend([[""], ["PAYDOWN STRATEGY"]])
        rows.extend(_strategy_rows(strategy, params, metrics.monthly_pi))
        rows.extend([
            [""],
            ["SAVINGS SUMMARY"],
            ["Original Payoff Time", f"{savings.standard_months} months"],
            ["New Payoff Time", f"{savings.paydown_months} months"],
            ["Time Saved", f"{savings.months_saved} months"],
            ["Interest Saved", format_currency(savings.interest_saved)],
            ["New Payoff Date", payment_date(start, savings.paydown_months)],
        ])
    else:
        rows.extend([
            [""],
            ["LOAN SUMMARY"],
            ["Total Payments", f"{standard.months} months"],
            ["Total Interest", format_currency(standard.total_interest)],
            ["Total Cost", format_currency(metrics.loan_amount + standard.total_interest)],
            ["Payoff Date", payment_date(start, standard.months)],
        ])

    with_pmi = metrics.monthly_pmi > 0
    rows.extend([[""], ["AMORTIZATION SCHEDULE" + (" COMPARISON" if has_paydown else "")]])
    if has_paydown:
        rows.extend(_comparison_rows(standard, paydown, start, with_pmi))
    else:
        rows.extend(_schedule_rows(standard, start, with_pmi))

    logger.info("Built mortgage report: %d rows", len(rows))
    return rows_to_csv(rows)


def points_report_csv(
    results: list[ComparisonResult],
    loan_amount: float,
    term_years: int,
    generated_at: datetime | None = None,
) -> str:
    rows = _header("Mortgage Points Analysis Export", generated_at or datetime.now())
    rows.extend([
        ["LOAN DETAILS"],
        ["Loan Amount", format_currency(loan_amount)],
        ["Loan Term", f"{term_years} years"],
        [""],
        ["SCENARIOS COMPARISON"],
        [
            "Scenario Name", "Interest Rate", "Points", "Point Cost", "Monthly P&I",
            "Break-even (Months)", "Monthly Savings", "Total Cost (5 Years)",
            "Total Cost (10 Years)", "Total Cost (Full Term)",
        ],
    ])
    for r in results:
        rows.append([
            r.scenario.name,
            format_percentage(r.scenario.rate),
            f"{r.scenario.points:.2f}",
            format_currency(r.point_cost),
            format_currency(r.monthly_pi),
            format_break_even(r.break_even_months),
            format_currency(r.monthly_savings),
            format_currency(r.total_cost_at_5_years),
            format_currency(r.total_cost_at_10_years),
            format_currency(r.total_cost_at_full_term),
        ])
    return rows_to_csv(rows)


def refinance_report_csv(
    inputs: RefinanceInputs,
    result: RefinanceResult,
    generated_at: datetime | None = None,
) -> str:
    rows = _header("Refinance Analysis Export", generated_at or datetime.now())
    rows.extend([
        ["CURRENT LOAN DETAILS"],
        ["Current Balance", format_currency(inputs.current_balance)],
        ["Current Rate", format_percentage(inputs.current_rate)],
        ["Current Monthly Payment", format_currency(inputs.current_monthly_payment)],
        ["Remaining Months", f"{result.current_remaining_months} months"],
        [""],
        ["NEW LOAN DETAILS"],
        ["New Rate", format_percentage(inputs.new_rate)],
        ["New Term", f"{inputs.new_term_years} years"],
        ["Closing Costs", format_currency(inputs.closing_costs)],
        ["Closing Costs Financed", "Yes" if inputs.finance_closing_costs else "No"],
        ["Cash Out", format_currency(inputs.cash_out)],
        ["Points", f"{inputs.new_points:.2f}"],
        [""],
        ["REFINANCE ANALYSIS"],
        ["New Loan Amount", format_currency(result.new_loan_amount)],
        ["New Monthly Payment", format_currency(result.new_monthly_payment)],
        ["Monthly Savings", format_currency(result.monthly_savings)],
        ["Break-even Point", format_break_even(result.break_even_months)],
        ["Term Reduction", f"{result.term_reduction_months} months"],
        ["Interest Savings", format_currency(result.interest_savings)],
        ["Net Savings", format_currency(result.net_savings)],
        [""],
        ["COST COMPARISON"],
        ["Cost at 5 Years", format_currency(result.cost_at_5_years)],
        ["Cost at 10 Years", format_currency(result.cost_at_10_years)],
        ["Cost at Full Term", format_currency(result.cost_at_full_term)],
        [""],
        ["RECOMMENDATION"],
        [result.recommendation.tier.value, result.recommendation.analysis_type.value],
        [result.recommendation.message],
    ])
    return rows_to_csv(rows)


def write_schedule_workbook(
    target: Union[str, Path, BinaryIO],
    schedule: AmortizationSchedule,
    standard: AmortizationSchedule | None = None,
) -> None:
    """Write a schedule (and optionally its comparison to ``standard``) to .xlsx."""
    with pd.ExcelWriter(target, engine="openpyxl") as writer:
        schedule_to_dataframe(schedule).to_excel(writer, sheet_name="Schedule", index=False)
        if standard is not None:
            comparison_dataframe(standard, schedule).to_excel(
                writer, sheet_name="Comparison", index=False,
            )
