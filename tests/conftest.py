import pytest

from mortgage_analyzer.models.loan import LoanParameters, LoanType


@pytest.fixture
def purchase_loan() -> LoanParameters:
    """$400k home, 20% down, 6.5% over 30 years, with escrow and PMI at 80% LTV."""
    return LoanParameters.for_purchase(
        400_000.0, 80_000.0, 6.5, 30,
        annual_property_tax=4_800.0,
        annual_home_insurance=1_200.0,
        pmi_rate=0.5,
    )


@pytest.fixture
def existing_loan() -> LoanParameters:
    return LoanParameters(
        principal=250_000.0,
        annual_rate=4.25,
        term_months=300,
        loan_type=LoanType.existing,
        original_principal=300_000.0,
        monthly_payment=1_500.0,
    )
