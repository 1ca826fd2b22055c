"""
Typed failures raised by the calculation engine.

All errors derive from ValueError so callers that already treat a bad
calculation input as a ValueError keep working.
"""


class MortgageCalculationError(ValueError):
    """Base class for every engine failure."""


class InvalidPrincipal(MortgageCalculationError):
    """Financed principal (loan amount minus subsidy) is not positive."""


class InvalidRate(MortgageCalculationError):
    """Negative annual rate or non-positive periods per year."""


class InvalidGracePeriod(MortgageCalculationError):
    """Grace periods are negative or not shorter than the term."""


class InvalidTerm(MortgageCalculationError):
    """No amortizing periods left after the grace phase."""


class EmptyCashFlow(MortgageCalculationError):
    """NPV or IRR requested over an empty cash-flow vector."""


class IRRSolverError(MortgageCalculationError):
    """Newton-Raphson could not produce an internal rate of return."""


class DerivativeZero(IRRSolverError):
    pass


class Diverged(IRRSolverError):
    pass


class DidNotConverge(IRRSolverError):
    pass
