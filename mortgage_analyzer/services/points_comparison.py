"""Points comparison: break-even and horizon costs of rate/points offers.

Each scenario is priced with the shared annuity formula and the totals-only
amortization loop, then compared against the single baseline scenario.
"""
from __future__ import annotations

import logging

from mortgage_analyzer.models.points import BreakEvenStatus, ComparisonResult, PointsScenario
from mortgage_analyzer.simulation.amortization import accumulate_interest
from mortgage_analyzer.simulation.constants import TIME_HORIZON_5_YEARS, TIME_HORIZON_10_YEARS
from mortgage_analyzer.simulation.metrics import monthly_payment, monthly_rate

logger = logging.getLogger(__name__)


def cost_at_horizon(
    loan_amount: float,
    rate: float,
    payment: float,
    upfront_cost: float,
    horizon_months: int,
    total_periods: int,
) -> float:
    """Upfront cost plus every payment made within the first ``horizon_months``.

    The horizon is bounded by the loan's own term; payments are counted from
    the same loop that produces the schedule, so a loan that pays off early
    stops accruing cost.
    """
    run = accumulate_interest(loan_amount, rate, payment, min(horizon_months, total_periods))
    return upfront_cost + run.total_paid


def scenario_metrics(
    scenario: PointsScenario, loan_amount: float, term_years: int,
) -> ComparisonResult:
    """Price one scenario on its own, before comparing against the baseline."""
    rate = monthly_rate(scenario.rate)
    total_periods = term_years * 12
    pi = monthly_payment(loan_amount, rate, total_periods)
    point_cost = loan_amount * (scenario.points / 100.0)

    total_interest = accumulate_interest(loan_amount, rate, pi, total_periods).total_interest
    total_cost = point_cost + pi * total_periods

    return ComparisonResult(
        scenario=scenario,
        monthly_pi=pi,
        point_cost=point_cost,
        total_interest=total_interest,
        total_cost=total_cost,
        total_cost_at_5_years=cost_at_horizon(
            loan_amount, rate, pi, point_cost, TIME_HORIZON_5_YEARS, total_periods,
        ),
        total_cost_at_10_years=cost_at_horizon(
            loan_amount, rate, pi, point_cost, TIME_HORIZON_10_YEARS, total_periods,
        ),
        total_cost_at_full_term=total_cost,
    )


def break_even_against(result: ComparisonResult, baseline: ComparisonResult) -> ComparisonResult:
    """Attach monthly savings and break-even months relative to the baseline.

    Break-even is only defined when the scenario both costs more upfront and
    saves money every month; every other combination gets a status and no
    month count.
    """
    point_cost_diff = result.point_cost - baseline.point_cost
    monthly_savings = baseline.monthly_pi - result.monthly_pi

    if monthly_savings > 0 and point_cost_diff > 0:
        status = BreakEvenStatus.recoups
        months = point_cost_diff / monthly_savings
    elif monthly_savings > 0:
        status = BreakEvenStatus.no_upfront_premium
        months = None
    elif point_cost_diff > 0:
        status = BreakEvenStatus.never_recoups
        months = None
    else:
        status = BreakEvenStatus.not_favorable
        months = None

    return result.model_copy(update={
        "monthly_savings": monthly_savings,
        "break_even_months": months,
        "break_even": status,
    })


def compare_points_scenarios(
    scenarios: list[PointsScenario], loan_amount: float, term_years: int,
) -> list[ComparisonResult]:
    """Compare every scenario against the baseline, preserving input order.

    Returns an empty list when no scenario is marked as baseline. Raises
    ValueError when more than one is.
    """
    baselines = [s for s in scenarios if s.is_baseline]
    if not baselines:
        logger.info("No baseline scenario among %d, nothing to compare", len(scenarios))
        return []
    if len(baselines) > 1:
        raise ValueError(
            f"Exactly one baseline scenario is allowed, got {len(baselines)}: "
            f"{[s.id for s in baselines]}"
        )

    baseline_result = scenario_metrics(baselines[0], loan_amount, term_years)
    results = []
    for scenario in scenarios:
        if scenario.is_baseline:
            results.append(baseline_result)
            continue
        result = scenario_metrics(scenario, loan_amount, term_years)
        results.append(break_even_against(result, baseline_result))
    return results
