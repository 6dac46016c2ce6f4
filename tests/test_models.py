"""Tests for pydantic model validation and serialization round-trips."""
import pytest
from pydantic import TypeAdapter, ValidationError

from mortgage_analyzer.models.loan import (
    BiWeekly,
    ExtraAnnual,
    ExtraMonthly,
    LoanParameters,
    LoanType,
    NoPaydown,
    PaydownStrategy,
)
from mortgage_analyzer.models.points import PointsScenario
from mortgage_analyzer.models.schedule import AmortizationSchedule
from mortgage_analyzer.simulation.amortization import generate_schedule

_strategy_adapter = TypeAdapter(PaydownStrategy)


def test_for_purchase_derives_principal():
    params = LoanParameters.for_purchase(400_000, 80_000, 6.5, 30, pmi_rate=0.5)
    assert params.principal == 320_000
    assert params.term_months == 360
    assert params.home_price == 400_000
    assert params.loan_type == LoanType.new
    assert not params.is_existing


def test_loan_parameters_are_frozen():
    params = LoanParameters(principal=300_000, annual_rate=6.5, term_months=360)
    with pytest.raises(ValidationError):
        params.principal = 1.0


def test_loan_parameters_round_trip():
    params = LoanParameters(
        principal=250_000, annual_rate=4.25, term_months=300,
        loan_type=LoanType.existing, original_principal=300_000,
        monthly_payment=1_500, pmi_amount=80,
    )
    restored = LoanParameters.model_validate_json(params.model_dump_json())
    assert restored == params
    assert restored.is_existing


@pytest.mark.parametrize("payload, expected", [
    ({"kind": "none"}, NoPaydown()),
    ({"kind": "extra_monthly", "amount": 200}, ExtraMonthly(amount=200)),
    ({"kind": "extra_annual", "amount": 5000}, ExtraAnnual(amount=5000)),
    ({"kind": "bi_weekly"}, BiWeekly()),
])
def test_strategy_discriminator(payload, expected):
    assert _strategy_adapter.validate_python(payload) == expected


def test_strategy_unknown_kind_rejected():
    with pytest.raises(ValidationError):
        _strategy_adapter.validate_python({"kind": "weekly"})


def test_strategy_negative_amount_rejected():
    with pytest.raises(ValidationError):
        ExtraMonthly(amount=-1)


def test_schedule_round_trip_keeps_strategy():
    schedule = generate_schedule(
        LoanParameters(principal=50_000, annual_rate=5.0, term_months=60), ExtraAnnual(amount=1_000),
    )
    restored = AmortizationSchedule.model_validate_json(schedule.model_dump_json())
    assert restored == schedule
    assert isinstance(restored.strategy, ExtraAnnual)


def test_points_scenario_defaults_to_non_baseline():
    scenario = PointsScenario(id="x", name="X", rate=6.0, points=1.0)
    assert scenario.is_baseline is False
