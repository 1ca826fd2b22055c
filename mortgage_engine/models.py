"""
Domain models for the mortgage calculation engine.

Inputs (LoanTerms) and outputs (ScheduleItem, AmortizationSchedule,
ScheduleResult) are frozen dataclasses. A calculation never mutates them;
callers wanting different numbers build new LoanTerms and run the engine again.
"""

from dataclasses import dataclass
from typing import Optional, Tuple
import enum


class RateKind(str, enum.Enum):
    """How the annual interest rate is quoted."""
    NOMINAL = "NOMINAL"  # TNA
    EFFECTIVE = "EFFECTIVE"  # TEA


class GraceKind(str, enum.Enum):
    """Grace period treatment."""
    NONE = "NONE"
    TOTAL = "TOTAL"  # no payment, interest capitalizes
    PARTIAL = "PARTIAL"  # interest-only payments


class Currency(str, enum.Enum):
    """Loan currency. Carried as metadata, never converted."""
    PEN = "PEN"
    USD = "USD"


class CashFlowVariant(str, enum.Enum):
    """Which installment column feeds a cash-flow vector."""
    BASE = "BASE"
    WITH_CHARGES = "WITH_CHARGES"


@dataclass(frozen=True)
class LoanTerms:
    """Validated loan parameters handed to the engine."""

    property_price: float
    down_payment: float
    loan_amount: float
    annual_interest_rate: float
    rate_kind: RateKind
    term_periods: int
    subsidy_amount: float = 0.0  # Bono Techo Propio
    grace_periods: int = 0
    grace_kind: GraceKind = GraceKind.NONE
    payment_frequency_days: int = 30
    days_in_year: int = 360

    # Per-period charges
    administration_fee: float = 0.0
    portes_fee: float = 0.0
    additional_monthly_costs: float = 0.0
    life_insurance_rate: float = 0.0  # periodic, applied to balance
    property_insurance_rate: float = 0.0  # annual, applied to property price

    # One-time commissions, deducted from the disbursement
    evaluation_fee: float = 0.0
    disbursement_fee: float = 0.0

    npv_discount_rate_annual: Optional[float] = None
    currency: Currency = Currency.PEN
    term_years: int = 0

    @property
    def principal_financed(self) -> float:
        return self.loan_amount - self.subsidy_amount

    @property
    def periods_per_year(self) -> float:
        """Payment periods per year, e.g. 12.0 for a 30/360 convention."""
        if self.payment_frequency_days <= 0:
            return 0.0
        return self.days_in_year / self.payment_frequency_days

    @property
    def upfront_charges(self) -> float:
        return self.evaluation_fee + self.disbursement_fee


@dataclass(frozen=True)
class ScheduleItem:
    """One row of the payment schedule."""

    period: int
    year_number: int
    periodic_rate_applied: float
    installment: float  # base installment, no charges
    total_installment: float
    interest: float
    amortization: float
    life_insurance: float
    property_insurance: float
    administration_fee: float
    portes_fee: float
    additional_costs: float
    remaining_balance: float
    is_grace_period: bool
    grace_kind_applied: GraceKind

    @property
    def charges(self) -> float:
        return self.total_installment - self.installment


@dataclass(frozen=True)
class AmortizationSchedule:
    """Output of the schedule generator, before any profitability metric."""

    principal_financed: float
    adjusted_principal: float
    periodic_rate: float
    fixed_installment: float
    periods_per_year: float
    grace_periods: int
    items: Tuple[ScheduleItem, ...]
    total_interest_paid: float
    total_paid_base: float
    total_paid_with_charges: float
    total_charges: float
    total_insurance: float
    total_administrative: float


@dataclass(frozen=True)
class ScheduleResult:
    """Complete result of a mortgage calculation."""

    principal_financed: float
    adjusted_principal: float
    periodic_rate: float
    fixed_installment: float
    periods_per_year: float
    term_periods: int
    grace_periods: int
    items: Tuple[ScheduleItem, ...]
    total_interest_paid: float
    total_paid_base: float
    total_paid_with_charges: float
    total_charges: float
    total_insurance: float
    total_administrative: float
    irr_base: float
    irr_with_charges: float
    tcea: float
    tea: float
    npv: Optional[float] = None

    @property
    def first_total_installment(self) -> float:
        if not self.items:
            return self.fixed_installment
        return self.items[0].total_installment
