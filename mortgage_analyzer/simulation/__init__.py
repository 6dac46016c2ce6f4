"""Simulation core: loan metrics, PMI policies, and the amortization engine."""
from mortgage_analyzer.simulation.metrics import (
    loan_metrics,
    ltv,
    monthly_escrow,
    monthly_payment,
    monthly_pmi,
    monthly_rate,
    solve_remaining_months,
    total_monthly_payment,
)
from mortgage_analyzer.simulation.pmi import LtvThresholdPmi, UntilPayoffPmi, pmi_policy_for
from mortgage_analyzer.simulation.amortization import (
    accumulate_interest,
    compare_schedules,
    generate_schedule,
    generate_schedules,
)

__all__ = [
    "loan_metrics",
    "ltv",
    "monthly_escrow",
    "monthly_payment",
    "monthly_pmi",
    "monthly_rate",
    "solve_remaining_months",
    "total_monthly_payment",
    "LtvThresholdPmi",
    "UntilPayoffPmi",
    "pmi_policy_for",
    "accumulate_interest",
    "compare_schedules",
    "generate_schedule",
    "generate_schedules",
]
