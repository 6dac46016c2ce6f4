"""Input validation: range and consistency checks run before the engines.

The engines assume valid inputs and do not re-check ranges; callers collect
every problem with the ``validate_*`` functions and decide how to report it.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from mortgage_analyzer.models.loan import LoanParameters
from mortgage_analyzer.models.points import PointsScenario
from mortgage_analyzer.models.refinance import RefinanceInputs
from mortgage_analyzer.simulation.constants import (
    MAX_CASH_OUT_RATIO,
    MAX_CLOSING_COSTS,
    MAX_INTEREST_RATE,
    MAX_LOAN_AMOUNT,
    MAX_LOAN_TERM,
    MAX_POINTS,
    MAX_SCENARIO_NAME_LENGTH,
    MIN_CLOSING_COSTS,
    MIN_INTEREST_RATE,
    MIN_LOAN_AMOUNT,
    MIN_LOAN_TERM,
)
from mortgage_analyzer.simulation.metrics import monthly_payment, monthly_rate

# Payments within 1% of the interest due are treated as rounding, not shortfall
_PAYMENT_TOLERANCE = 0.99


class InvalidInputError(ValueError):
    """Raised by ValidationResult.raise_if_invalid()."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("; ".join(errors))


class ValidationResult(BaseModel):
    is_valid: bool
    errors: list[str]

    def raise_if_invalid(self) -> None:
        if not self.is_valid:
            raise InvalidInputError(self.errors)


def _result(errors: list[str]) -> ValidationResult:
    return ValidationResult(is_valid=not errors, errors=errors)


def _check_rate(errors: list[str], rate: float, label: str = "Interest rate") -> None:
    if rate < MIN_INTEREST_RATE:
        errors.append(f"{label} cannot be negative")
    if rate > MAX_INTEREST_RATE:
        errors.append(f"{label} cannot exceed {MAX_INTEREST_RATE:g}%")


def _check_amount(errors: list[str], amount: float, label: str) -> None:
    if amount < MIN_LOAN_AMOUNT:
        errors.append(f"{label} must be at least ${MIN_LOAN_AMOUNT:,.0f}")
    if amount > MAX_LOAN_AMOUNT:
        errors.append(f"{label} cannot exceed ${MAX_LOAN_AMOUNT:,.0f}")


def _check_term_years(errors: list[str], years: float, label: str = "Loan term") -> None:
    if years < MIN_LOAN_TERM:
        errors.append(f"{label} must be at least {MIN_LOAN_TERM} year")
    if years > MAX_LOAN_TERM:
        errors.append(f"{label} cannot exceed {MAX_LOAN_TERM} years")


def _check_points(errors: list[str], points: float) -> None:
    if points < 0:
        errors.append("Points cannot be negative")
    if points > MAX_POINTS:
        errors.append(f"Points cannot exceed {MAX_POINTS:g}%")


def is_valid_principal_payment(payment: float, balance: float, rate: float) -> bool:
    """True when ``payment`` retires some principal at periodic ``rate``.

    With a zero rate any positive payment on a positive balance qualifies.
    """
    if rate == 0:
        return payment > 0 and balance > 0
    return payment - balance * rate > 0


def validate_mortgage_inputs(
    loan_amount: float,
    interest_rate: float,
    loan_term_years: float,
    home_price: Optional[float] = None,
    down_payment: Optional[float] = None,
) -> ValidationResult:
    errors: list[str] = []
    _check_amount(errors, loan_amount, "Loan amount")
    _check_rate(errors, interest_rate)
    _check_term_years(errors, loan_term_years)

    if home_price is not None and down_payment is not None:
        if home_price <= 0:
            errors.append("Home price must be greater than $0")
        if down_payment < 0:
            errors.append("Down payment cannot be negative")
        if down_payment > home_price:
            errors.append("Down payment cannot exceed home price")
    return _result(errors)


def validate_loan_parameters(params: LoanParameters) -> ValidationResult:
    """Validate a LoanParameters snapshot, including its escrow and PMI inputs."""
    errors: list[str] = []
    _check_amount(errors, params.principal, "Loan amount")
    _check_rate(errors, params.annual_rate)
    if params.term_months < 1:
        errors.append("Loan term must be at least 1 month")
    if params.term_months > MAX_LOAN_TERM * 12:
        errors.append(f"Loan term cannot exceed {MAX_LOAN_TERM} years")
    if params.annual_property_tax < 0:
        errors.append("Property tax cannot be negative")
    if params.annual_home_insurance < 0:
        errors.append("Home insurance cannot be negative")
    if params.pmi_rate < 0 or params.pmi_amount < 0:
        errors.append("PMI cannot be negative")
    if params.home_price is not None and params.home_price <= 0:
        errors.append("Home price must be greater than $0")
    if params.monthly_payment is not None and not is_valid_principal_payment(
        params.monthly_payment, params.principal, monthly_rate(params.annual_rate),
    ):
        errors.append(
            f"Monthly payment (${params.monthly_payment:,.2f}) is too low to reduce the balance"
        )
    return _result(errors)


def validate_existing_mortgage_inputs(
    original_principal: float,
    current_balance: float,
    payments_made: int,
    loan_term_years: float,
    interest_rate: float,
    extra_monthly_principal: Optional[float] = None,
    extra_annual_payment: Optional[float] = None,
) -> ValidationResult:
    errors: list[str] = []
    _check_amount(errors, original_principal, "Original principal")

    if current_balance < 0:
        errors.append("Current balance cannot be negative")
    if current_balance > original_principal:
        errors.append("Current balance cannot exceed original principal")

    total_payments = int(loan_term_years * 12)
    if payments_made < 0:
        errors.append("Payments made cannot be negative")
    if payments_made > total_payments:
        errors.append(f"Payments made cannot exceed total loan payments ({total_payments})")

    _check_rate(errors, interest_rate)

    if extra_monthly_principal is not None and extra_monthly_principal < 0:
        errors.append("Extra monthly principal cannot be negative")
    if extra_annual_payment is not None and extra_annual_payment < 0:
        errors.append("Extra annual payment cannot be negative")
    if extra_monthly_principal and extra_monthly_principal > current_balance:
        errors.append("Extra monthly principal cannot exceed current balance")
    if extra_annual_payment and extra_annual_payment > current_balance:
        errors.append("Extra annual payment cannot exceed current balance")
    return _result(errors)


def validate_points_inputs(loan_amount: float, loan_term_years: float) -> ValidationResult:
    errors: list[str] = []
    _check_amount(errors, loan_amount, "Loan amount")
    _check_term_years(errors, loan_term_years)
    return _result(errors)


def validate_points_scenario(scenario: PointsScenario) -> ValidationResult:
    errors: list[str] = []
    if not scenario.name or not scenario.name.strip():
        errors.append("Scenario name cannot be empty")
    if len(scenario.name) > MAX_SCENARIO_NAME_LENGTH:
        errors.append(f"Scenario name cannot exceed {MAX_SCENARIO_NAME_LENGTH} characters")
    _check_rate(errors, scenario.rate)
    _check_points(errors, scenario.points)
    return _result(errors)


def validate_scenario_set(scenarios: list[PointsScenario]) -> ValidationResult:
    """Each scenario must be valid and exactly one must be the baseline."""
    errors: list[str] = []
    baselines = sum(1 for s in scenarios if s.is_baseline)
    if baselines != 1:
        errors.append(f"Exactly one scenario must be the baseline (found {baselines})")
    for scenario in scenarios:
        errors.extend(f"{scenario.name or scenario.id}: {e}"
                      for e in validate_points_scenario(scenario).errors)
    return _result(errors)


def validate_refinance_inputs(inputs: RefinanceInputs) -> ValidationResult:
    errors: list[str] = []
    _check_amount(errors, inputs.current_balance, "Current balance")
    _check_rate(errors, inputs.current_rate, "Current interest rate")

    if inputs.current_monthly_payment <= 0:
        errors.append("Current monthly payment must be greater than $0")
    if inputs.current_monthly_payment > inputs.current_balance:
        errors.append("Current monthly payment cannot exceed current balance")

    min_required = inputs.current_balance * monthly_rate(inputs.current_rate)
    if inputs.current_monthly_payment < min_required * _PAYMENT_TOLERANCE:
        errors.append(
            f"Current monthly payment (${inputs.current_monthly_payment:,.2f}) is too low to cover "
            f"interest (${min_required:,.2f}). This would cause the loan balance to grow "
            "instead of decrease."
        )

    _check_rate(errors, inputs.new_rate, "New interest rate")
    _check_term_years(errors, inputs.new_term_years, "New loan term")

    if inputs.closing_costs < MIN_CLOSING_COSTS:
        errors.append("Closing costs cannot be negative")
    if inputs.closing_costs > MAX_CLOSING_COSTS:
        errors.append(f"Closing costs cannot exceed ${MAX_CLOSING_COSTS:,.0f}")

    if inputs.cash_out < 0:
        errors.append("Cash out amount cannot be negative")
    if inputs.cash_out > inputs.current_balance * MAX_CASH_OUT_RATIO:
        errors.append("Cash out amount cannot exceed 80% of current balance (typical lending limit)")

    _check_points(errors, inputs.new_points)

    new_rate = monthly_rate(inputs.new_rate)
    new_amount = (inputs.current_balance + inputs.cash_out
                  + inputs.current_balance * inputs.new_points / 100.0)
    if new_rate > 0 and new_amount > 0 and inputs.new_term_months > 0:
        new_payment = monthly_payment(new_amount, new_rate, inputs.new_term_months)
        if new_payment < new_amount * new_rate * _PAYMENT_TOLERANCE:
            errors.append(
                "The new loan terms would result in negative principal payments. "
                "Please adjust the interest rate, loan amount, or term."
            )
    return _result(errors)
