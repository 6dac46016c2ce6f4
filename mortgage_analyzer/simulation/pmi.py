"""PMI policies: decide, period by period, whether mortgage insurance is charged.

The amortization loop only asks a policy for the LTV-style basis of the
current balance and whether PMI is active at that basis, so it never
branches on new vs existing loans itself.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from mortgage_analyzer.models.loan import LoanParameters
from mortgage_analyzer.simulation.constants import MINIMUM_BALANCE, PMI_LTV_THRESHOLD
from mortgage_analyzer.simulation.metrics import loan_ltv, ltv, monthly_pmi


class PmiPolicy(Protocol):
    monthly_amount: float

    def compute_basis(self, balance: float) -> float: ...

    def is_active(self, ltv_ratio: float) -> bool: ...


@dataclass(frozen=True)
class LtvThresholdPmi:
    """New loans: PMI until balance / home price drops to the threshold."""
    monthly_amount: float
    home_price: float | None
    threshold: float = PMI_LTV_THRESHOLD

    def compute_basis(self, balance: float) -> float:
        return ltv(balance, self.home_price)

    def is_active(self, ltv_ratio: float) -> bool:
        return ltv_ratio > self.threshold


@dataclass(frozen=True)
class UntilPayoffPmi:
    """Existing loans: a flat PMI amount charged while any balance remains."""
    monthly_amount: float
    original_principal: float

    def compute_basis(self, balance: float) -> float:
        if balance <= MINIMUM_BALANCE:
            return 0.0
        return ltv(balance, self.original_principal)

    def is_active(self, ltv_ratio: float) -> bool:
        return ltv_ratio > 0.0


def pmi_policy_for(params: LoanParameters) -> PmiPolicy:
    """Pick the PMI policy matching a loan's classification."""
    if params.is_existing:
        return UntilPayoffPmi(
            monthly_amount=monthly_pmi(params, params.principal, 0.0),
            original_principal=params.original_principal or params.principal,
        )
    return LtvThresholdPmi(
        monthly_amount=monthly_pmi(params, params.principal, loan_ltv(params)),
        home_price=params.home_price,
    )


def pmi_for_balance(policy: PmiPolicy, balance: float) -> float:
    """PMI charged for a period that ends at ``balance``."""
    if policy.monthly_amount <= 0:
        return 0.0
    return policy.monthly_amount if policy.is_active(policy.compute_basis(balance)) else 0.0
