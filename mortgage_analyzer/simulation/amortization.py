"""Amortization engine: month-by-month balance projection per paydown strategy.

Produces an AmortizationSchedule of ScheduleEntry rows for one loan snapshot
and one strategy. Runs stop on payoff (balance <= MINIMUM_BALANCE), when the
payment no longer covers interest, or when the period bound is hit; the
reason is reported on the schedule rather than raised.
"""
from __future__ import annotations

import logging

from mortgage_analyzer.models.loan import (
    BiWeekly,
    DoubleMonthly,
    ExtraAnnual,
    ExtraMonthly,
    LoanMetrics,
    LoanParameters,
    NoPaydown,
    PaydownStrategy,
)
from mortgage_analyzer.models.schedule import (
    AmortizationSchedule,
    InterestAccumulation,
    ScheduleEntry,
    ScheduleSavings,
    TerminationReason,
)
from mortgage_analyzer.simulation.constants import (
    BIWEEKLY_PERIODS_PER_YEAR,
    MAX_ITERATIONS,
    MINIMUM_BALANCE,
    MONTHS_PER_YEAR,
)
from mortgage_analyzer.simulation.metrics import loan_metrics
from mortgage_analyzer.simulation.pmi import PmiPolicy, pmi_for_balance, pmi_policy_for

logger = logging.getLogger(__name__)


def _extra_principal(strategy: PaydownStrategy, month: int, base_principal: float) -> float:
    """Extra principal a strategy adds on top of the scheduled portion."""
    if isinstance(strategy, ExtraMonthly):
        return strategy.amount
    if isinstance(strategy, ExtraAnnual):
        return strategy.amount if month % MONTHS_PER_YEAR == 0 else 0.0
    if isinstance(strategy, DoubleMonthly):
        return base_principal
    return 0.0


def _final_termination(balance: float, termination: TerminationReason) -> TerminationReason:
    if termination == TerminationReason.paid_off and balance > MINIMUM_BALANCE:
        return TerminationReason.iteration_capped
    return termination


def _monthly_schedule(
    metrics: LoanMetrics,
    strategy: PaydownStrategy,
    policy: PmiPolicy,
) -> AmortizationSchedule:
    balance = metrics.loan_amount
    rate = metrics.monthly_rate
    pmt = metrics.monthly_pi
    max_months = min(metrics.total_payments, MAX_ITERATIONS)

    entries: list[ScheduleEntry] = []
    total_interest = 0.0
    termination = TerminationReason.paid_off

    for month in range(1, max_months + 1):
        if balance <= MINIMUM_BALANCE:
            break

        interest = balance * rate
        base_principal = pmt - interest
        if base_principal <= 0:
            logger.warning(
                "Payment %.2f does not cover interest %.2f at month %d, stopping",
                pmt, interest, month,
            )
            termination = TerminationReason.non_amortizing
            break

        extra = _extra_principal(strategy, month, base_principal)
        # Never pay past the remaining balance
        principal = min(base_principal + extra, balance)
        extra_applied = max(principal - base_principal, 0.0)

        balance -= principal
        total_interest += interest

        entries.append(ScheduleEntry(
            month=month,
            payment=principal + interest,
            principal=principal,
            interest=interest,
            extra_principal=extra_applied,
            balance=balance,
            total_interest=total_interest,
            pmi=pmi_for_balance(policy, balance),
            escrow=metrics.monthly_escrow,
        ))

    termination = _final_termination(balance, termination)
    if termination == TerminationReason.iteration_capped:
        logger.warning("Schedule hit %d-month bound with %.2f outstanding", max_months, balance)

    return AmortizationSchedule(
        strategy=strategy,
        starting_balance=metrics.loan_amount,
        entries=entries,
        termination=termination,
    )


def _biweekly_schedule(
    params: LoanParameters,
    metrics: LoanMetrics,
    strategy: BiWeekly,
    policy: PmiPolicy,
) -> AmortizationSchedule:
    """Half payments every two weeks, reported as monthly-equivalent rows.

    Each emitted row doubles the principal and interest of the period that
    closes it, so rows stay comparable with a monthly schedule. The final row
    is emitted even when payoff lands on an odd period.
    """
    balance = metrics.loan_amount
    rate = (params.annual_rate or 0.0) / 100.0 / BIWEEKLY_PERIODS_PER_YEAR
    payment = metrics.monthly_pi / 2.0
    max_periods = min(metrics.total_payments * 2, MAX_ITERATIONS)

    entries: list[ScheduleEntry] = []
    total_interest = 0.0
    last_reported_balance = balance
    termination = TerminationReason.paid_off

    for period in range(1, max_periods + 1):
        if balance <= MINIMUM_BALANCE:
            break

        interest = balance * rate
        principal = payment - interest
        if principal <= 0:
            logger.warning(
                "Bi-weekly payment %.2f does not cover interest %.2f at period %d, stopping",
                payment, interest, period,
            )
            termination = TerminationReason.non_amortizing
            break

        principal = min(principal, balance)
        balance -= principal
        total_interest += interest

        if period % 2 == 0 or balance <= MINIMUM_BALANCE:
            reported_principal = min(principal * 2.0, last_reported_balance - balance)
            reported_interest = interest * 2.0
            entries.append(ScheduleEntry(
                month=(period + 1) // 2,
                payment=reported_principal + reported_interest,
                principal=reported_principal,
                interest=reported_interest,
                extra_principal=0.0,
                balance=balance,
                total_interest=total_interest,
                pmi=pmi_for_balance(policy, balance),
                escrow=metrics.monthly_escrow,
            ))
            last_reported_balance = balance

    termination = _final_termination(balance, termination)
    if termination == TerminationReason.iteration_capped:
        logger.warning("Bi-weekly schedule hit %d-period bound with %.2f outstanding", max_periods, balance)

    return AmortizationSchedule(
        strategy=strategy,
        starting_balance=metrics.loan_amount,
        entries=entries,
        termination=termination,
    )


def generate_schedule(
    params: LoanParameters,
    strategy: PaydownStrategy | None = None,
    metrics: LoanMetrics | None = None,
) -> AmortizationSchedule:
    """Project the loan period by period under one paydown strategy.

    Args:
        params: Loan snapshot.
        strategy: Paydown strategy; defaults to the standard schedule.
        metrics: Precomputed metrics for ``params``, if the caller has them.

    Returns:
        AmortizationSchedule with one row per month (or monthly equivalent).
    """
    strategy = strategy or NoPaydown()
    metrics = metrics or loan_metrics(params)
    policy = pmi_policy_for(params)

    if isinstance(strategy, BiWeekly):
        schedule = _biweekly_schedule(params, metrics, strategy, policy)
    else:
        schedule = _monthly_schedule(metrics, strategy, policy)

    logger.debug(
        "%s schedule: %d rows, interest %.2f, %s",
        strategy.kind, schedule.months, schedule.total_interest, schedule.termination.value,
    )
    return schedule


def generate_schedules(
    params: LoanParameters,
    strategy: PaydownStrategy | None = None,
) -> tuple[AmortizationSchedule, AmortizationSchedule]:
    """Standard schedule and the schedule under ``strategy``, sharing one metrics pass."""
    metrics = loan_metrics(params)
    standard = generate_schedule(params, NoPaydown(), metrics)
    paydown = generate_schedule(params, strategy, metrics)
    return standard, paydown


def compare_schedules(
    standard: AmortizationSchedule, paydown: AmortizationSchedule,
) -> ScheduleSavings:
    return ScheduleSavings(
        standard_months=standard.months,
        paydown_months=paydown.months,
        months_saved=standard.months - paydown.months,
        interest_saved=standard.total_interest - paydown.total_interest,
    )


def accumulate_interest(
    balance: float,
    rate: float,
    payment: float,
    max_periods: int,
) -> InterestAccumulation:
    """Run the amortization loop keeping only totals.

    Same stopping rules as the schedule engine: payoff at MINIMUM_BALANCE,
    abort when the payment does not cover interest, at most
    min(max_periods, MAX_ITERATIONS) periods.
    """
    limit = min(max_periods, MAX_ITERATIONS)
    total_interest = 0.0
    total_paid = 0.0
    periods = 0
    termination = TerminationReason.paid_off

    for _ in range(limit):
        if balance <= MINIMUM_BALANCE:
            break
        interest = balance * rate
        principal = payment - interest
        if principal <= 0:
            logger.warning(
                "Payment %.2f does not cover interest %.2f, stopping accumulation",
                payment, interest,
            )
            termination = TerminationReason.non_amortizing
            break
        principal = min(principal, balance)
        balance -= principal
        total_interest += interest
        total_paid += principal + interest
        periods += 1

    return InterestAccumulation(
        total_interest=total_interest,
        total_paid=total_paid,
        periods=periods,
        final_balance=balance,
        termination=_final_termination(balance, termination),
    )
