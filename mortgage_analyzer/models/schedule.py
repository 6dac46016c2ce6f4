from enum import Enum

from pydantic import BaseModel

from mortgage_analyzer.models.loan import NoPaydown, PaydownStrategy


class TerminationReason(str, Enum):
    """Why an amortization loop stopped."""
    paid_off = "paid_off"
    non_amortizing = "non_amortizing"      # payment does not cover interest
    iteration_capped = "iteration_capped"  # period bound hit with balance left


class ScheduleEntry(BaseModel):
    """One (monthly-equivalent) row of an amortization schedule.

    ``principal`` is the total principal applied in the period, including
    ``extra_principal``. ``total_interest`` is interest paid to date.
    """
    month: int
    payment: float
    principal: float
    interest: float
    extra_principal: float
    balance: float
    total_interest: float
    pmi: float
    escrow: float


class AmortizationSchedule(BaseModel):
    """Ordered schedule produced by one engine run."""
    strategy: PaydownStrategy = NoPaydown()
    starting_balance: float
    entries: list[ScheduleEntry]
    termination: TerminationReason

    @property
    def months(self) -> int:
        return len(self.entries)

    @property
    def total_interest(self) -> float:
        return self.entries[-1].total_interest if self.entries else 0.0

    @property
    def final_balance(self) -> float:
        return self.entries[-1].balance if self.entries else self.starting_balance

    @property
    def paid_off(self) -> bool:
        return self.termination == TerminationReason.paid_off


class InterestAccumulation(BaseModel):
    """Totals-only result of the bounded interest loop."""
    total_interest: float
    total_paid: float
    periods: int
    final_balance: float
    termination: TerminationReason


class ScheduleSavings(BaseModel):
    """What a paydown strategy saves relative to the standard schedule."""
    standard_months: int
    paydown_months: int
    months_saved: int
    interest_saved: float
