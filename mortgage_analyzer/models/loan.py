from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class LoanType(str, Enum):
    """Whether the loan is being originated or is already on the books."""
    new = "new"
    existing = "existing"


class LoanParameters(BaseModel):
    """Immutable snapshot of one loan, as consumed by the engines.

    Rates are annual percentages (6.5 means 6.5%). For new loans the LTV basis
    is ``home_price`` and PMI is ``pmi_rate`` percent of the principal per
    year. For existing loans PMI is the flat monthly ``pmi_amount`` and, when
    ``monthly_payment`` is given, the remaining term is solved from it.
    """
    model_config = ConfigDict(frozen=True)

    principal: float
    annual_rate: float
    term_months: int
    loan_type: LoanType = LoanType.new
    home_price: Optional[float] = None
    original_principal: Optional[float] = None
    monthly_payment: Optional[float] = None
    annual_property_tax: float = 0.0
    annual_home_insurance: float = 0.0
    pmi_rate: float = 0.0
    pmi_amount: float = 0.0

    @property
    def is_existing(self) -> bool:
        return self.loan_type == LoanType.existing

    @classmethod
    def for_purchase(
        cls,
        home_price: float,
        down_payment: float,
        annual_rate: float,
        term_years: int,
        **kwargs,
    ) -> "LoanParameters":
        """Build a new-loan snapshot whose principal is price minus down payment."""
        return cls(
            principal=home_price - down_payment,
            annual_rate=annual_rate,
            term_months=term_years * 12,
            loan_type=LoanType.new,
            home_price=home_price,
            **kwargs,
        )


class NoPaydown(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["none"] = "none"


class ExtraMonthly(BaseModel):
    """Fixed extra principal every month."""
    model_config = ConfigDict(frozen=True)
    kind: Literal["extra_monthly"] = "extra_monthly"
    amount: float = Field(ge=0)


class ExtraAnnual(BaseModel):
    """Fixed extra principal every twelfth month."""
    model_config = ConfigDict(frozen=True)
    kind: Literal["extra_annual"] = "extra_annual"
    amount: float = Field(ge=0)


class DoubleMonthly(BaseModel):
    """Pay the scheduled principal portion twice each month."""
    model_config = ConfigDict(frozen=True)
    kind: Literal["double_monthly"] = "double_monthly"


class BiWeekly(BaseModel):
    """Half the monthly payment every two weeks (26 payments a year)."""
    model_config = ConfigDict(frozen=True)
    kind: Literal["bi_weekly"] = "bi_weekly"


PaydownStrategy = Annotated[
    Union[NoPaydown, ExtraMonthly, ExtraAnnual, DoubleMonthly, BiWeekly],
    Field(discriminator="kind"),
]


class LoanMetrics(BaseModel):
    """Single-point figures derived from a LoanParameters snapshot."""
    loan_amount: float
    monthly_rate: float
    total_payments: int
    monthly_pi: float
    ltv_ratio: float
    monthly_pmi: float
    monthly_escrow: float
    total_monthly_payment: float
