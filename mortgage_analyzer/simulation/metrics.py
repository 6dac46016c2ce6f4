"""Single-point loan formulas: rate, annuity payment, LTV, PMI, escrow.

Every engine in the package takes its payment and rate from here so there is
exactly one annuity formula.
"""
from __future__ import annotations

import math

from mortgage_analyzer.models.loan import LoanMetrics, LoanParameters
from mortgage_analyzer.simulation.constants import (
    MAX_ITERATIONS,
    MONTHS_PER_YEAR,
    PMI_LTV_THRESHOLD,
)

# Solved terms within this of a whole month round down to it
_TERM_EPSILON = 1e-6


def monthly_rate(annual_rate_pct: float | None) -> float:
    """Annual percentage rate -> periodic monthly rate (6.0 -> 0.005)."""
    return (annual_rate_pct or 0.0) / 100.0 / MONTHS_PER_YEAR


def monthly_payment(principal: float, rate: float, total_periods: int) -> float:
    """Standard annuity payment for a fully amortizing loan.

    PMT = P * r * (1+r)^n / ((1+r)^n - 1), or P / n when r == 0.

    Raises ValueError if ``total_periods`` is not positive.
    """
    if total_periods <= 0:
        raise ValueError(f"total_periods must be positive, got {total_periods}")
    if rate == 0:
        return principal / total_periods
    power = (1.0 + rate) ** total_periods
    return principal * (rate * power) / (power - 1.0)


def ltv(balance: float, basis: float | None) -> float:
    """Loan-to-value as a percentage; 0 when there is no usable basis."""
    if not basis or basis <= 0:
        return 0.0
    return balance / basis * 100.0


def loan_ltv(params: LoanParameters, balance: float | None = None) -> float:
    """LTV of a loan snapshot. Existing loans carry no LTV in this model."""
    if params.is_existing:
        return 0.0
    return ltv(params.principal if balance is None else balance, params.home_price)


def monthly_pmi(params: LoanParameters, loan_amount: float, ltv_ratio: float) -> float:
    """Monthly PMI charge at origination.

    New loans pay ``pmi_rate`` percent of the loan per year while LTV is above
    the threshold; existing loans pay the flat ``pmi_amount``.
    """
    if params.is_existing:
        return params.pmi_amount or 0.0
    if ltv_ratio > PMI_LTV_THRESHOLD:
        return loan_amount * ((params.pmi_rate or 0.0) / 100.0) / MONTHS_PER_YEAR
    return 0.0


def monthly_escrow(params: LoanParameters) -> float:
    """Property tax plus home insurance per month; not tracked for existing loans."""
    if params.is_existing:
        return 0.0
    return ((params.annual_property_tax or 0.0) + (params.annual_home_insurance or 0.0)) / MONTHS_PER_YEAR


def total_monthly_payment(monthly_pi: float, pmi: float, escrow: float) -> float:
    return monthly_pi + pmi + escrow


def solve_remaining_months(balance: float, rate: float, payment: float) -> int:
    """Months needed to retire ``balance`` at a fixed payment.

    Inverts the annuity formula, n = ln(PMT / (PMT - B*r)) / ln(1 + r), rounded
    up. Returns MAX_ITERATIONS when the payment never covers the interest.
    """
    if balance <= 0:
        return 0
    if payment <= 0:
        return MAX_ITERATIONS
    if rate == 0:
        return min(math.ceil(balance / payment - _TERM_EPSILON), MAX_ITERATIONS)
    if payment <= balance * rate:
        return MAX_ITERATIONS
    n = math.log(payment / (payment - balance * rate)) / math.log(1.0 + rate)
    return min(math.ceil(n - _TERM_EPSILON), MAX_ITERATIONS)


def loan_metrics(params: LoanParameters) -> LoanMetrics:
    """Compute all single-point metrics for a loan snapshot at once.

    For an existing loan with a known ``monthly_payment`` the payment is taken
    as given and the number of remaining payments is solved from it.
    """
    rate = monthly_rate(params.annual_rate)
    if params.is_existing and params.monthly_payment:
        pi = params.monthly_payment
        total_payments = solve_remaining_months(params.principal, rate, pi)
    else:
        total_payments = params.term_months
        pi = monthly_payment(params.principal, rate, total_payments)

    ltv_ratio = loan_ltv(params)
    pmi = monthly_pmi(params, params.principal, ltv_ratio)
    escrow = monthly_escrow(params)

    return LoanMetrics(
        loan_amount=params.principal,
        monthly_rate=rate,
        total_payments=total_payments,
        monthly_pi=pi,
        ltv_ratio=ltv_ratio,
        monthly_pmi=pmi,
        monthly_escrow=escrow,
        total_monthly_payment=total_monthly_payment(pi, pmi, escrow),
    )
