"""
Loan Amortization Calculations

French method (constant installment, paid in arrears) with optional
total or partial grace periods and per-period ancillary charges.
"""

from dataclasses import dataclass
from typing import List
import math

from mortgage_engine.errors import InvalidGracePeriod, InvalidTerm
from mortgage_engine.models import (
    AmortizationSchedule,
    GraceKind,
    LoanTerms,
    ScheduleItem,
)

# Balances closer to zero than this are floating-point residue
BALANCE_EPSILON = 0.01


@dataclass(frozen=True)
class GraceAdjustment:
    """Principal the fixed installment is computed on, after grace."""

    adjusted_principal: float
    grace_periods: int  # 0 when the grace kind is NONE
    grace_kind: GraceKind

    def is_grace_period(self, period: int) -> bool:
        return self.grace_periods > 0 and period <= self.grace_periods


def adjust_principal_for_grace(
    principal: float,
    rate: float,
    grace_periods: int,
    grace_kind: GraceKind,
    term_periods: int,
) -> GraceAdjustment:
    """
    Apply grace-period semantics to the financed principal.

    TOTAL grace capitalizes interest: P * (1 + i)^g. PARTIAL grace pays
    interest only, so the principal is untouched. NONE ignores grace_periods.

    Raises:
        InvalidGracePeriod: If grace_periods is negative or >= term_periods
    """
    if grace_periods < 0:
        raise InvalidGracePeriod("grace periods cannot be negative")
    if grace_periods >= term_periods:
        raise InvalidGracePeriod("grace periods must be less than term periods")

    if grace_kind == GraceKind.NONE or grace_periods == 0:
        return GraceAdjustment(principal, 0, GraceKind.NONE)

    if grace_kind == GraceKind.TOTAL:
        adjusted = principal * (1 + rate) ** grace_periods
        return GraceAdjustment(adjusted, grace_periods, grace_kind)

    return GraceAdjustment(principal, grace_periods, grace_kind)


def calculate_fixed_installment(
    principal: float, rate: float, normal_periods: int
) -> float:
    """
    Calculate the constant installment of the amortizing phase.

    Uses A = P * i(1+i)^n / ((1+i)^n - 1), or P / n when the rate is zero.

    Raises:
        InvalidTerm: If there are no amortizing periods
    """
    if normal_periods <= 0:
        raise InvalidTerm("term periods must be greater than grace periods")

    if rate == 0:
        return principal / normal_periods

    factor = (1 + rate) ** normal_periods
    return principal * (rate * factor) / (factor - 1)


def generate_payment_schedule(
    terms: LoanTerms,
    rate: float,
    grace: GraceAdjustment,
    fixed_installment: float,
) -> AmortizationSchedule:
    """
    Generate the full payment schedule, one item per period.

    The balance starts at the unadjusted financed principal; during TOTAL
    grace it grows by the capitalized interest until it reaches the
    adjusted principal the installment was computed on.

    Args:
        terms: Loan parameters (charges, property price, term)
        rate: Periodic effective rate
        grace: Result of adjust_principal_for_grace
        fixed_installment: Installment for the amortizing phase

    Returns:
        AmortizationSchedule with items and aggregated totals
    """
    principal = terms.principal_financed
    periods_per_year = terms.periods_per_year
    property_insurance = terms.property_price * (
        terms.property_insurance_rate / periods_per_year
    )

    items: List[ScheduleItem] = []
    balance = principal

    for period in range(1, terms.term_periods + 1):
        is_grace = grace.is_grace_period(period)
        interest = balance * rate

        if is_grace and grace.grace_kind == GraceKind.TOTAL:
            installment = 0.0
            amortization = 0.0
            balance += interest
        elif is_grace and grace.grace_kind == GraceKind.PARTIAL:
            installment = interest
            amortization = 0.0
        else:
            installment = fixed_installment
            amortization = installment - interest
            balance -= amortization

        if -BALANCE_EPSILON < balance < BALANCE_EPSILON:
            balance = 0.0

        life_insurance = balance * terms.life_insurance_rate
        total_installment = (
            installment
            + life_insurance
            + property_insurance
            + terms.administration_fee
            + terms.portes_fee
            + terms.additional_monthly_costs
        )

        items.append(
            ScheduleItem(
                period=period,
                year_number=math.ceil(period / periods_per_year),
                periodic_rate_applied=rate,
                installment=installment,
                total_installment=total_installment,
                interest=interest,
                amortization=amortization,
                life_insurance=life_insurance,
                property_insurance=property_insurance,
                administration_fee=terms.administration_fee,
                portes_fee=terms.portes_fee,
                additional_costs=terms.additional_monthly_costs,
                remaining_balance=balance,
                is_grace_period=is_grace,
                grace_kind_applied=grace.grace_kind if is_grace else GraceKind.NONE,
            )
        )

    return AmortizationSchedule(
        principal_financed=principal,
        adjusted_principal=grace.adjusted_principal,
        periodic_rate=rate,
        fixed_installment=fixed_installment,
        periods_per_year=periods_per_year,
        grace_periods=grace.grace_periods,
        items=tuple(items),
        total_interest_paid=sum(item.interest for item in items),
        total_paid_base=sum(item.installment for item in items),
        total_paid_with_charges=sum(item.total_installment for item in items),
        total_charges=sum(item.charges for item in items),
        total_insurance=sum(
            item.life_insurance + item.property_insurance for item in items
        ),
        total_administrative=sum(
            item.administration_fee + item.portes_fee + item.additional_costs
            for item in items
        ),
    )
