"""
IRR and NPV Calculations

Implements IRR using the Newton-Raphson method over periodic cash flows,
and NPV at an annual discount rate converted to the payment period.
"""

from typing import Sequence

import numpy as np

from mortgage_engine.calculations.rates import periodic_rate
from mortgage_engine.errors import (
    DerivativeZero,
    DidNotConverge,
    Diverged,
    EmptyCashFlow,
)
from mortgage_engine.models import RateKind

MAX_ITERATIONS = 1000
TOLERANCE = 1e-7
FALLBACK_GUESS = 0.01

# Solver domain; an iterate outside it is treated as divergence
MIN_RATE = -1.0
MAX_RATE = 10.0


def _as_array(cash_flows: Sequence[float]) -> np.ndarray:
    flows = np.asarray(cash_flows, dtype=float)
    if flows.size == 0:
        raise EmptyCashFlow("cash flow is empty, payment schedule not calculated")
    return flows


def present_value(cash_flows: Sequence[float], rate: float) -> float:
    """
    Discount cash flows at a periodic rate.

    Returns sum(cf_k / (1 + rate)^k); index 0 is not discounted.
    """
    flows = _as_array(cash_flows)
    periods = np.arange(flows.size)
    return float(np.sum(flows / (1 + rate) ** periods))


def _present_value_derivative(flows: np.ndarray, rate: float) -> float:
    """d/dr of present_value, for Newton-Raphson."""
    periods = np.arange(flows.size)
    return float(np.sum(-periods * flows / ((1 + rate) ** periods * (1 + rate))))


def calculate_npv(
    cash_flows: Sequence[float],
    annual_discount_rate: float,
    periods_per_year: float,
) -> float:
    """
    Calculate NPV (Net Present Value) at an annual discount rate.

    Args:
        cash_flows: Periodic cash flows, index 0 = disbursement
        annual_discount_rate: Annual effective rate (decimal or percentage)
        periods_per_year: Payment periods per year of the schedule

    Returns:
        NPV value

    Raises:
        EmptyCashFlow: If there are no cash flows
        InvalidRate: If the discount rate is negative
    """
    flows = _as_array(cash_flows)
    rate = periodic_rate(annual_discount_rate, RateKind.EFFECTIVE, periods_per_year)
    return present_value(flows, rate)


def calculate_irr(
    cash_flows: Sequence[float],
    guess: float = FALLBACK_GUESS,
    max_iterations: int = MAX_ITERATIONS,
    tolerance: float = TOLERANCE,
) -> float:
    """
    Calculate the periodic IRR (Internal Rate of Return) by Newton-Raphson.

    Iterates r <- r - f(r) / f'(r) until |f(r)| < tolerance.

    Args:
        cash_flows: Periodic cash flows
        guess: Initial rate; zero falls back to 0.01
        max_iterations: Iteration ceiling
        tolerance: Absolute tolerance on the present value

    Returns:
        Periodic IRR as decimal

    Raises:
        EmptyCashFlow: If there are no cash flows
        DerivativeZero: If f'(r) is exactly zero at some iterate
        Diverged: If an iterate leaves [MIN_RATE, MAX_RATE]
        DidNotConverge: If max_iterations are exhausted
    """
    flows = _as_array(cash_flows)
    rate = guess if guess != 0 else FALLBACK_GUESS

    for _ in range(max_iterations):
        npv = present_value(flows, rate)
        if abs(npv) < tolerance:
            return rate

        dnpv = _present_value_derivative(flows, rate)
        if dnpv == 0:
            raise DerivativeZero("cannot calculate IRR, derivative is zero")

        rate = rate - npv / dnpv

        if rate < MIN_RATE or rate > MAX_RATE:
            raise Diverged(f"IRR calculation diverged (rate={rate})")

    raise DidNotConverge(
        f"IRR calculation did not converge after {max_iterations} iterations"
    )
