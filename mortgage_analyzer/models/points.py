from enum import Enum
from typing import Optional

from pydantic import BaseModel


class PointsScenario(BaseModel):
    """A rate / points offer. Exactly one scenario in a set is the baseline."""
    id: str
    name: str
    rate: float    # annual percent
    points: float  # percent of principal paid upfront
    is_baseline: bool = False


class BreakEvenStatus(str, Enum):
    """How an upfront cost difference relates to the monthly savings."""
    baseline = "baseline"
    recoups = "recoups"                        # finite break-even month count
    no_upfront_premium = "no_upfront_premium"  # saves monthly with nothing to recoup
    never_recoups = "never_recoups"            # pays more upfront, saves nothing monthly
    not_favorable = "not_favorable"            # no monthly savings and no premium


class ComparisonResult(BaseModel):
    """Costs of one scenario, compared against the baseline."""
    scenario: PointsScenario
    monthly_pi: float
    point_cost: float
    total_interest: float
    total_cost: float
    break_even_months: Optional[float] = None
    break_even: BreakEvenStatus = BreakEvenStatus.baseline
    monthly_savings: float = 0.0
    total_cost_at_5_years: float
    total_cost_at_10_years: float
    total_cost_at_full_term: float
