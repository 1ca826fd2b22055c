"""
Cash Flow Construction

Builds the borrower's signed cash-flow vector from a payment schedule:
the net disbursement at index 0 (inflow) and one outflow per period.
"""

from typing import List, Union

from mortgage_engine.models import AmortizationSchedule, CashFlowVariant, ScheduleResult


def build_cash_flows(
    schedule: Union[AmortizationSchedule, ScheduleResult],
    variant: CashFlowVariant,
    upfront_charges: float = 0.0,
) -> List[float]:
    """
    Build the cash-flow vector consumed by NPV and IRR.

    Args:
        schedule: Generated schedule (or a finished result)
        variant: BASE uses the base installment, WITH_CHARGES the total
            installment and nets upfront_charges out of the disbursement
        upfront_charges: One-time commissions (evaluation + disbursement)

    Returns:
        List of length term_periods + 1
    """
    if variant == CashFlowVariant.WITH_CHARGES:
        flows = [schedule.principal_financed - upfront_charges]
        flows.extend(-item.total_installment for item in schedule.items)
    else:
        flows = [schedule.principal_financed]
        flows.extend(-item.installment for item in schedule.items)
    return flows
