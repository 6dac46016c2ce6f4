"""Invariant tests: properties that must hold for every generated schedule.

Covers balance monotonicity, accounting identities, PMI cancellation, and
the determinism of recomputation from an immutable snapshot.
"""
import pytest

from mortgage_analyzer.models.loan import (
    BiWeekly,
    DoubleMonthly,
    ExtraAnnual,
    ExtraMonthly,
    LoanParameters,
    NoPaydown,
)
from mortgage_analyzer.simulation.amortization import generate_schedule
from mortgage_analyzer.simulation.constants import MINIMUM_BALANCE
from mortgage_analyzer.services.validation import is_valid_principal_payment

STRATEGIES = [
    NoPaydown(),
    ExtraMonthly(amount=250),
    ExtraAnnual(amount=5_000),
    DoubleMonthly(),
    BiWeekly(),
]

LOANS = [
    dict(principal=300_000.0, annual_rate=6.5, term_months=360),
    dict(principal=1_000.0, annual_rate=30.0, term_months=12),
    dict(principal=85_000.0, annual_rate=0.0, term_months=180),
    dict(principal=2_500_000.0, annual_rate=3.125, term_months=600),
    dict(principal=150_000.0, annual_rate=9.99, term_months=1),
]


def _make_params(**overrides) -> LoanParameters:
    defaults = dict(
        principal=300_000.0,
        annual_rate=6.5,
        term_months=360,
    )
    defaults.update(overrides)
    return LoanParameters(**defaults)


# ---------------------------------------------------------------------------
# Accounting identities
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("loan", LOANS)
def test_standard_schedule_pays_off_exactly(loan):
    """Final balance under the minimum, principal portions sum to the loan."""
    schedule = generate_schedule(_make_params(**loan))
    assert schedule.final_balance < MINIMUM_BALANCE
    assert sum(e.principal for e in schedule.entries) == pytest.approx(loan["principal"], abs=0.01)
    assert schedule.months == loan["term_months"]


@pytest.mark.parametrize("strategy", STRATEGIES, ids=lambda s: s.kind)
@pytest.mark.parametrize("loan", LOANS)
def test_balance_non_increasing_and_interest_non_decreasing(loan, strategy):
    schedule = generate_schedule(_make_params(**loan), strategy)
    prev_balance = loan["principal"]
    prev_interest = 0.0
    for e in schedule.entries:
        assert e.balance <= prev_balance, f"Balance rose at month {e.month}"
        assert e.total_interest >= prev_interest, f"Interest fell at month {e.month}"
        prev_balance = e.balance
        prev_interest = e.total_interest


@pytest.mark.parametrize("strategy", STRATEGIES, ids=lambda s: s.kind)
def test_principal_never_exceeds_prior_balance(strategy):
    schedule = generate_schedule(_make_params(), strategy)
    prev_balance = 300_000.0
    for e in schedule.entries:
        assert e.principal <= prev_balance + 1e-9
        assert e.extra_principal <= e.principal + 1e-9
        assert e.balance >= 0.0
        prev_balance = e.balance


@pytest.mark.parametrize("strategy", [s for s in STRATEGIES if s.kind != "bi_weekly"],
                         ids=lambda s: s.kind)
def test_cumulative_interest_is_running_sum(strategy):
    schedule = generate_schedule(_make_params(), strategy)
    running = 0.0
    for e in schedule.entries:
        running += e.interest
        assert e.total_interest == pytest.approx(running)
        assert e.payment == pytest.approx(e.principal + e.interest)


@pytest.mark.parametrize("strategy", STRATEGIES, ids=lambda s: s.kind)
def test_months_are_consecutive(strategy):
    schedule = generate_schedule(_make_params(), strategy)
    assert [e.month for e in schedule.entries] == list(range(1, schedule.months + 1))


# ---------------------------------------------------------------------------
# Zero rate
# ---------------------------------------------------------------------------


def test_zero_rate_payment_is_exact_and_interest_free():
    schedule = generate_schedule(_make_params(principal=90_000.0, annual_rate=0.0, term_months=360))
    assert schedule.entries[0].payment == 90_000.0 / 360
    assert all(e.interest == 0.0 for e in schedule.entries)


# ---------------------------------------------------------------------------
# Strategy ordering on the reference loan
# ---------------------------------------------------------------------------


def test_reference_loan_standard_schedule():
    schedule = generate_schedule(_make_params())
    assert schedule.months == 360
    assert schedule.total_interest == pytest.approx(382_633, abs=5)


@pytest.mark.parametrize("strategy", [BiWeekly(), DoubleMonthly(), ExtraAnnual(amount=5_000)],
                         ids=lambda s: s.kind)
def test_paydown_strategies_shorten_reference_loan(strategy):
    assert generate_schedule(_make_params(), strategy).months < 360


def test_extra_annual_december_entries_include_extra():
    schedule = generate_schedule(_make_params(), ExtraAnnual(amount=5_000))
    decembers = [e for e in schedule.entries[:-1] if e.month % 12 == 0]
    assert decembers
    for e in decembers:
        assert e.extra_principal == pytest.approx(5_000.0)
        assert e.principal >= 5_000.0


# ---------------------------------------------------------------------------
# PMI
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("strategy", STRATEGIES, ids=lambda s: s.kind)
def test_pmi_cancels_permanently(strategy):
    params = LoanParameters.for_purchase(350_000, 17_500, 6.5, 30, pmi_rate=0.6)
    schedule = generate_schedule(params, strategy)
    assert schedule.entries[0].pmi > 0
    cancelled = False
    for e in schedule.entries:
        if e.pmi == 0.0:
            cancelled = True
        elif cancelled:
            pytest.fail(f"PMI reappeared at month {e.month}")
        if e.balance / 350_000 * 100 <= 78.0:
            assert e.pmi == 0.0
    assert cancelled


# ---------------------------------------------------------------------------
# Determinism
# ---------------------------------------------------------------------------


def test_recalculation_is_idempotent():
    params = _make_params()
    first = generate_schedule(params, ExtraMonthly(amount=150))
    second = generate_schedule(params, ExtraMonthly(amount=150))
    assert first == second


# ---------------------------------------------------------------------------
# Principal payment predicate
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("payment, balance, rate, expected", [
    (1_000.0, 200_000.0, 0.005, False),   # exactly the interest
    (999.0, 200_000.0, 0.005, False),
    (1_000.01, 200_000.0, 0.005, True),
    (1.0, 1.0, 0.0, True),
    (0.0, 1_000.0, 0.0, False),
    (500.0, 0.0, 0.0, False),
])
def test_is_valid_principal_payment(payment, balance, rate, expected):
    assert is_valid_principal_payment(payment, balance, rate) is expected
