"""
Mortgage Calculation Engine

French-method amortization, cash flows, NPV/IRR and annualized cost rates.
All functions are pure and raise typed errors from mortgage_engine.errors.
"""

from mortgage_engine.calculations import rates, amortization, cashflow, irr, engine
from mortgage_engine.calculations.engine import calculate_mortgage

__all__ = ["rates", "amortization", "cashflow", "irr", "engine", "calculate_mortgage"]
