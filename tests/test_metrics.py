"""Tests for the single-point loan formulas: rate, PMT, LTV, PMI, escrow, term solve."""
import math

import pytest

from mortgage_analyzer.models.loan import LoanParameters, LoanType
from mortgage_analyzer.simulation.constants import MAX_ITERATIONS
from mortgage_analyzer.simulation.metrics import (
    loan_ltv,
    loan_metrics,
    ltv,
    monthly_escrow,
    monthly_payment,
    monthly_pmi,
    monthly_rate,
    solve_remaining_months,
    total_monthly_payment,
)


def _make_params(**overrides) -> LoanParameters:
    defaults = dict(
        principal=300_000.0,
        annual_rate=6.5,
        term_months=360,
    )
    defaults.update(overrides)
    return LoanParameters(**defaults)


# --- Rate and PMT ---


def test_monthly_rate_converts_percent():
    assert monthly_rate(6.0) == pytest.approx(0.005)
    assert monthly_rate(0.0) == 0.0


def test_pmt_known_value():
    # $300k at 6.5% for 360 months ≈ $1,896.20
    assert monthly_payment(300_000, monthly_rate(6.5), 360) == pytest.approx(1896.20, abs=0.01)


def test_pmt_200k_at_6_percent():
    assert monthly_payment(200_000, 0.005, 360) == pytest.approx(1199.10, abs=0.01)


def test_pmt_zero_rate_is_straight_line():
    assert monthly_payment(120_000, 0.0, 360) == pytest.approx(120_000 / 360)


def test_pmt_rejects_non_positive_periods():
    with pytest.raises(ValueError):
        monthly_payment(100_000, 0.005, 0)
    with pytest.raises(ValueError):
        monthly_payment(100_000, 0.005, -12)


def test_pmt_retires_principal_exactly():
    """PV of the payment stream at the loan rate equals the principal."""
    r = monthly_rate(5.25)
    pmt = monthly_payment(250_000, r, 180)
    pv = sum(pmt / (1 + r) ** t for t in range(1, 181))
    assert pv == pytest.approx(250_000, rel=1e-9)


# --- LTV ---


def test_ltv_percentage():
    assert ltv(240_000, 300_000) == pytest.approx(80.0)


def test_ltv_without_basis_is_zero():
    assert ltv(240_000, None) == 0.0
    assert ltv(240_000, 0.0) == 0.0


def test_loan_ltv_existing_loan_is_zero():
    params = _make_params(loan_type=LoanType.existing, home_price=400_000)
    assert loan_ltv(params) == 0.0


def test_loan_ltv_at_explicit_balance():
    params = _make_params(home_price=400_000)
    assert loan_ltv(params) == pytest.approx(75.0)
    assert loan_ltv(params, balance=200_000) == pytest.approx(50.0)


# --- PMI and escrow ---


def test_pmi_charged_above_threshold():
    params = _make_params(principal=320_000, home_price=400_000, pmi_rate=0.5)
    assert monthly_pmi(params, 320_000, 80.0) == pytest.approx(320_000 * 0.005 / 12)


def test_pmi_not_charged_at_threshold():
    params = _make_params(principal=312_000, home_price=400_000, pmi_rate=0.5)
    assert monthly_pmi(params, 312_000, 78.0) == 0.0


def test_pmi_existing_loan_is_flat_amount():
    params = _make_params(loan_type=LoanType.existing, pmi_amount=95.0, pmi_rate=1.0)
    assert monthly_pmi(params, 300_000, 0.0) == 95.0


def test_escrow_new_loan():
    params = _make_params(annual_property_tax=4_800, annual_home_insurance=1_200)
    assert monthly_escrow(params) == pytest.approx(500.0)


def test_escrow_existing_loan_is_zero():
    params = _make_params(
        loan_type=LoanType.existing, annual_property_tax=4_800, annual_home_insurance=1_200,
    )
    assert monthly_escrow(params) == 0.0


def test_total_monthly_payment_sums_components():
    assert total_monthly_payment(1_000.0, 50.0, 400.0) == pytest.approx(1_450.0)


# --- Remaining term solve ---


def test_solve_recovers_original_term():
    r = monthly_rate(7.0)
    pmt = monthly_payment(300_000, r, 360)
    assert solve_remaining_months(300_000, r, pmt) == 360


def test_solve_rounds_up_partial_month():
    r = monthly_rate(7.0)
    pmt = monthly_payment(300_000, r, 360)
    # A cent short of the full payment needs one more (partial) month
    assert solve_remaining_months(300_000, r, pmt - 0.01) == 361


def test_solve_slightly_higher_payment_stays_within_term():
    assert solve_remaining_months(300_000, monthly_rate(7.0), 1996.27) == 360


def test_solve_zero_rate():
    assert solve_remaining_months(12_000, 0.0, 1_000) == 12
    assert solve_remaining_months(12_001, 0.0, 1_000) == 13


def test_solve_payment_below_interest_returns_cap():
    assert solve_remaining_months(300_000, monthly_rate(7.0), 1_000) == MAX_ITERATIONS
    assert solve_remaining_months(300_000, monthly_rate(7.0), 1_750) == MAX_ITERATIONS


def test_solve_zero_balance():
    assert solve_remaining_months(0.0, 0.005, 1_000) == 0


@pytest.mark.parametrize("annual_rate", [0.0, 1.0, 6.5, 30.0])
def test_solve_inverts_exact_payment_for_every_term(annual_rate):
    r = monthly_rate(annual_rate)
    for n in range(1, 601):
        pmt = monthly_payment(300_000, r, n)
        assert solve_remaining_months(300_000, r, pmt) == n, f"term {n} at {annual_rate}%"


def test_solve_zero_rate_capped():
    assert solve_remaining_months(300_000, 0.0, 20.0) == MAX_ITERATIONS


# --- loan_metrics ---


def test_loan_metrics_purchase(purchase_loan):
    m = loan_metrics(purchase_loan)
    assert m.loan_amount == pytest.approx(320_000)
    assert m.total_payments == 360
    assert m.ltv_ratio == pytest.approx(80.0)
    assert m.monthly_pmi == pytest.approx(320_000 * 0.005 / 12)
    assert m.monthly_escrow == pytest.approx(500.0)
    assert m.total_monthly_payment == pytest.approx(m.monthly_pi + m.monthly_pmi + m.monthly_escrow)


def test_loan_metrics_existing_uses_given_payment(existing_loan):
    m = loan_metrics(existing_loan)
    assert m.monthly_pi == 1_500.0
    assert m.ltv_ratio == 0.0
    assert m.monthly_escrow == 0.0
    expected = solve_remaining_months(250_000, monthly_rate(4.25), 1_500.0)
    assert m.total_payments == expected
    assert 0 < expected < MAX_ITERATIONS


def test_loan_metrics_existing_without_payment_amortizes_term():
    params = _make_params(loan_type=LoanType.existing, term_months=240)
    m = loan_metrics(params)
    assert m.total_payments == 240
    assert m.monthly_pi == pytest.approx(monthly_payment(300_000, monthly_rate(6.5), 240))


def test_loan_metrics_values_are_finite():
    m = loan_metrics(_make_params(annual_rate=0.0))
    for value in m.model_dump().values():
        assert math.isfinite(value)
