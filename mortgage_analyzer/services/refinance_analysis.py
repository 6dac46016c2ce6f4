"""Refinance analysis: should the borrower replace the current loan?

The current loan's remaining term is solved in closed form from its balance,
rate and payment. Both loans are then run through the shared totals-only
amortization loop, and a rule cascade turns break-even, term reduction and
interest savings into a recommendation.
"""
from __future__ import annotations

import logging
import math

from mortgage_analyzer.config import settings
from mortgage_analyzer.models.points import BreakEvenStatus
from mortgage_analyzer.models.refinance import (
    AnalysisType,
    Recommendation,
    RecommendationPolicy,
    RecommendationTier,
    RefinanceInputs,
    RefinanceResult,
)
from mortgage_analyzer.services.points_comparison import cost_at_horizon
from mortgage_analyzer.simulation.amortization import accumulate_interest
from mortgage_analyzer.simulation.constants import (
    MAX_ITERATIONS,
    TIME_HORIZON_5_YEARS,
    TIME_HORIZON_10_YEARS,
)
from mortgage_analyzer.simulation.metrics import (
    monthly_payment,
    monthly_rate,
    solve_remaining_months,
)

logger = logging.getLogger(__name__)


def _years(months: float) -> int:
    return round(months / 12)


def recommend(
    break_even_months: float,
    monthly_savings: float,
    term_reduction_months: int,
    interest_savings: float,
    policy: RecommendationPolicy | None = None,
) -> Recommendation:
    """Classify a refinance. Rules are checked in order; the first match wins."""
    p = policy or settings.RECOMMENDATION_POLICY

    if break_even_months < p.break_even_excellent_months:
        return Recommendation(
            tier=RecommendationTier.excellent,
            analysis_type=AnalysisType.break_even,
            message="Excellent! You'll break even in less than 2 years. "
                    "This refinance is highly recommended.",
        )
    if (term_reduction_months >= p.term_reduction_major_months
            and interest_savings >= p.interest_savings_excellent):
        return Recommendation(
            tier=RecommendationTier.excellent,
            analysis_type=AnalysisType.time_savings,
            message=f"Excellent! You'll pay off {_years(term_reduction_months)} years sooner "
                    f"and save ${interest_savings:,.0f} in interest.",
        )
    if (term_reduction_months >= p.term_reduction_major_months
            and interest_savings >= p.interest_savings_good):
        return Recommendation(
            tier=RecommendationTier.good,
            analysis_type=AnalysisType.time_savings,
            message=f"Good opportunity. You'll pay off {_years(term_reduction_months)} years sooner "
                    f"and save ${interest_savings:,.0f} in interest.",
        )
    if break_even_months < p.break_even_good_months and monthly_savings > 0:
        return Recommendation(
            tier=RecommendationTier.good,
            analysis_type=AnalysisType.break_even,
            message=f"Good opportunity. You'll break even in {_years(break_even_months)} years. "
                    "Worth refinancing if you plan to stay longer.",
        )
    if term_reduction_months >= p.term_reduction_minor_months and interest_savings > 0:
        return Recommendation(
            tier=RecommendationTier.marginal,
            analysis_type=AnalysisType.time_savings,
            message=f"Marginal benefit. You'll pay off {term_reduction_months} months sooner "
                    f"and save ${interest_savings:,.0f} in interest.",
        )
    if break_even_months < p.break_even_marginal_months and monthly_savings > 0:
        return Recommendation(
            tier=RecommendationTier.marginal,
            analysis_type=AnalysisType.break_even,
            message=f"Marginal benefit. Break-even takes {_years(break_even_months)} years. "
                    "Only refinance if you're certain you'll keep the loan that long.",
        )
    if monthly_savings < 0 and term_reduction_months < p.term_reduction_minor_months:
        return Recommendation(
            tier=RecommendationTier.not_recommended,
            analysis_type=AnalysisType.break_even,
            message="Not recommended. Your monthly payment would increase. "
                    "Only consider if you need cash-out or to shorten the term.",
        )
    if math.isinf(break_even_months):
        return Recommendation(
            tier=RecommendationTier.not_recommended,
            analysis_type=AnalysisType.break_even,
            message="Not recommended. The new loan never recovers its closing costs.",
        )
    return Recommendation(
        tier=RecommendationTier.not_recommended,
        analysis_type=AnalysisType.break_even,
        message="Not recommended. The break-even period is too long to justify the closing costs.",
    )


def analyze_refinance(
    inputs: RefinanceInputs, policy: RecommendationPolicy | None = None,
) -> RefinanceResult:
    """Compare the current loan with the proposed refinance.

    Points are charged on the current balance and always rolled into the new
    loan; closing costs are rolled in only when ``finance_closing_costs`` is
    set, otherwise they are paid upfront. ``net_savings`` credits the cash-out
    received back to the borrower.
    """
    points_cost = inputs.current_balance * (inputs.new_points / 100.0)
    financed_closing = inputs.closing_costs if inputs.finance_closing_costs else 0.0
    upfront_costs = 0.0 if inputs.finance_closing_costs else inputs.closing_costs
    new_loan_amount = inputs.current_balance + inputs.cash_out + points_cost + financed_closing
    total_closing_costs = inputs.closing_costs + points_cost

    new_rate = monthly_rate(inputs.new_rate)
    new_term_months = inputs.new_term_months
    new_payment = monthly_payment(new_loan_amount, new_rate, new_term_months)
    monthly_savings = inputs.current_monthly_payment - new_payment

    if monthly_savings > 0:
        break_even_months = total_closing_costs / monthly_savings
        break_even = (BreakEvenStatus.recoups if total_closing_costs > 0
                      else BreakEvenStatus.no_upfront_premium)
    else:
        break_even_months = math.inf
        break_even = BreakEvenStatus.never_recoups

    current_rate = monthly_rate(inputs.current_rate)
    remaining_months = solve_remaining_months(
        inputs.current_balance, current_rate, inputs.current_monthly_payment,
    )
    if remaining_months >= MAX_ITERATIONS:
        logger.warning(
            "Current payment %.2f never retires balance %.2f at %.3f%%",
            inputs.current_monthly_payment, inputs.current_balance, inputs.current_rate,
        )

    current_run = accumulate_interest(
        inputs.current_balance, current_rate, inputs.current_monthly_payment, remaining_months,
    )
    new_run = accumulate_interest(new_loan_amount, new_rate, new_payment, new_term_months)

    current_total_cost = current_run.total_paid
    new_total_cost = upfront_costs + new_run.total_paid
    interest_savings = current_run.total_interest - new_run.total_interest
    term_reduction = remaining_months - new_term_months

    recommendation = recommend(
        break_even_months, monthly_savings, term_reduction, interest_savings, policy,
    )
    logger.debug(
        "Refinance: savings %.2f/mo, break-even %.1f mo, term reduction %d mo -> %s",
        monthly_savings, break_even_months, term_reduction, recommendation.tier.value,
    )

    return RefinanceResult(
        new_loan_amount=new_loan_amount,
        new_monthly_payment=new_payment,
        monthly_savings=monthly_savings,
        points_cost=points_cost,
        total_closing_costs=total_closing_costs,
        upfront_costs=upfront_costs,
        break_even_months=break_even_months,
        break_even=break_even,
        current_remaining_months=remaining_months,
        new_term_months=new_term_months,
        term_reduction_months=term_reduction,
        current_total_interest=current_run.total_interest,
        new_total_interest=new_run.total_interest,
        interest_savings=interest_savings,
        current_total_cost=current_total_cost,
        new_total_cost=new_total_cost,
        net_savings=current_total_cost - new_total_cost + inputs.cash_out,
        current_cost_at_5_years=cost_at_horizon(
            inputs.current_balance, current_rate, inputs.current_monthly_payment, 0.0,
            TIME_HORIZON_5_YEARS, remaining_months,
        ),
        current_cost_at_10_years=cost_at_horizon(
            inputs.current_balance, current_rate, inputs.current_monthly_payment, 0.0,
            TIME_HORIZON_10_YEARS, remaining_months,
        ),
        cost_at_5_years=cost_at_horizon(
            new_loan_amount, new_rate, new_payment, upfront_costs,
            TIME_HORIZON_5_YEARS, new_term_months,
        ),
        cost_at_10_years=cost_at_horizon(
            new_loan_amount, new_rate, new_payment, upfront_costs,
            TIME_HORIZON_10_YEARS, new_term_months,
        ),
        cost_at_full_term=new_total_cost,
        recommendation=recommendation,
    )
