from enum import Enum

from pydantic import BaseModel, ConfigDict

from mortgage_analyzer.models.points import BreakEvenStatus
from mortgage_analyzer.simulation.constants import (
    BREAK_EVEN_EXCELLENT,
    BREAK_EVEN_GOOD,
    BREAK_EVEN_MARGINAL,
    INTEREST_SAVINGS_EXCELLENT,
    INTEREST_SAVINGS_GOOD,
    TERM_REDUCTION_MAJOR,
    TERM_REDUCTION_MINOR,
)


class RecommendationTier(str, Enum):
    excellent = "excellent"
    good = "good"
    marginal = "marginal"
    not_recommended = "not_recommended"


class AnalysisType(str, Enum):
    """Which criterion drove the recommendation."""
    break_even = "break_even"
    time_savings = "time_savings"


class RecommendationPolicy(BaseModel):
    """Thresholds for the refinance recommendation cascade."""
    model_config = ConfigDict(frozen=True)

    break_even_excellent_months: float = BREAK_EVEN_EXCELLENT
    break_even_good_months: float = BREAK_EVEN_GOOD
    break_even_marginal_months: float = BREAK_EVEN_MARGINAL
    term_reduction_major_months: int = TERM_REDUCTION_MAJOR
    term_reduction_minor_months: int = TERM_REDUCTION_MINOR
    interest_savings_excellent: float = INTEREST_SAVINGS_EXCELLENT
    interest_savings_good: float = INTEREST_SAVINGS_GOOD


class RefinanceInputs(BaseModel):
    """Current loan snapshot plus the proposed replacement loan."""
    model_config = ConfigDict(frozen=True)

    current_balance: float
    current_rate: float             # annual percent
    current_monthly_payment: float  # P&I
    new_rate: float                 # annual percent
    new_term_years: int
    closing_costs: float = 0.0
    cash_out: float = 0.0
    new_points: float = 0.0         # percent of current balance
    finance_closing_costs: bool = False

    @property
    def new_term_months(self) -> int:
        return self.new_term_years * 12


class Recommendation(BaseModel):
    tier: RecommendationTier
    analysis_type: AnalysisType
    message: str


class RefinanceResult(BaseModel):
    """Derived figures for a proposed refinance.

    ``break_even_months`` is ``inf`` when the new loan saves nothing monthly;
    ``current_remaining_months`` equals the iteration cap when the current
    payment never retires the balance.
    """
    model_config = ConfigDict(ser_json_inf_nan="constants")

    new_loan_amount: float
    new_monthly_payment: float
    monthly_savings: float
    points_cost: float
    total_closing_costs: float
    upfront_costs: float
    break_even_months: float
    break_even: BreakEvenStatus
    current_remaining_months: int
    new_term_months: int
    term_reduction_months: int
    current_total_interest: float
    new_total_interest: float
    interest_savings: float
    current_total_cost: float
    new_total_cost: float
    net_savings: float
    current_cost_at_5_years: float
    current_cost_at_10_years: float
    cost_at_5_years: float
    cost_at_10_years: float
    cost_at_full_term: float
    recommendation: Recommendation
