"""
Mortgage Calculation Pipeline

Runs the full French-method calculation for one set of loan terms:
rate conversion, grace adjustment, installment, schedule, cash flows,
NPV, IRR and TCEA. Pure function; no I/O and no logging.
"""

from mortgage_engine.calculations.amortization import (
    adjust_principal_for_grace,
    calculate_fixed_installment,
    generate_payment_schedule,
)
from mortgage_engine.calculations.cashflow import build_cash_flows
from mortgage_engine.calculations.irr import calculate_irr, calculate_npv
from mortgage_engine.calculations.rates import (
    calculate_tcea,
    calculate_tea,
    periodic_rate,
)
from mortgage_engine.errors import InvalidPrincipal
from mortgage_engine.models import CashFlowVariant, LoanTerms, ScheduleResult


def calculate_mortgage(terms: LoanTerms) -> ScheduleResult:
    """
    Calculate the payment schedule and profitability metrics of a loan.

    Args:
        terms: Validated loan parameters

    Returns:
        ScheduleResult, built only once every step has succeeded

    Raises:
        MortgageCalculationError: Any of its subclasses, see mortgage_engine.errors
    """
    principal = terms.principal_financed
    if principal <= 0:
        raise InvalidPrincipal("principal financed must be greater than zero")

    periods_per_year = terms.periods_per_year
    rate = periodic_rate(terms.annual_interest_rate, terms.rate_kind, periods_per_year)

    grace = adjust_principal_for_grace(
        principal, rate, terms.grace_periods, terms.grace_kind, terms.term_periods
    )
    fixed_installment = calculate_fixed_installment(
        grace.adjusted_principal, rate, terms.term_periods - grace.grace_periods
    )
    schedule = generate_payment_schedule(terms, rate, grace, fixed_installment)

    base_flows = build_cash_flows(schedule, CashFlowVariant.BASE)
    charged_flows = build_cash_flows(
        schedule, CashFlowVariant.WITH_CHARGES, terms.upfront_charges
    )

    npv = None
    if terms.npv_discount_rate_annual is not None:
        npv = calculate_npv(
            base_flows, terms.npv_discount_rate_annual, periods_per_year
        )

    irr_base = calculate_irr(base_flows, guess=rate)
    irr_with_charges = calculate_irr(charged_flows, guess=rate)

    return ScheduleResult(
        principal_financed=schedule.principal_financed,
        adjusted_principal=schedule.adjusted_principal,
        periodic_rate=rate,
        fixed_installment=fixed_installment,
        periods_per_year=periods_per_year,
        term_periods=terms.term_periods,
        grace_periods=schedule.grace_periods,
        items=schedule.items,
        total_interest_paid=schedule.total_interest_paid,
        total_paid_base=schedule.total_paid_base,
        total_paid_with_charges=schedule.total_paid_with_charges,
        total_charges=schedule.total_charges,
        total_insurance=schedule.total_insurance,
        total_administrative=schedule.total_administrative,
        irr_base=irr_base,
        irr_with_charges=irr_with_charges,
        tcea=calculate_tcea(irr_with_charges, periods_per_year),
        tea=calculate_tea(rate, periods_per_year),
        npv=npv,
    )
