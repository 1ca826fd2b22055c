"""
Rate Conversions

Converts quoted annual rates (TNA/TEA) to periodic effective rates and
compounds periodic rates back to annual equivalents (TEA, TCEA).
"""

from mortgage_engine.errors import InvalidRate
from mortgage_engine.models import RateKind

DEFAULT_PERIODS_PER_YEAR = 12.0


def normalize_annual_rate(annual_rate: float) -> float:
    """
    Return the annual rate as a decimal.

    Values greater than 1 are read as percentages (12 -> 0.12). A genuine
    decimal rate above 100% is therefore misread; callers must pass such
    rates as percentages.
    """
    if annual_rate > 1:
        return annual_rate / 100.0
    return annual_rate


def periodic_rate(
    annual_rate: float, rate_kind: RateKind, periods_per_year: float
) -> float:
    """
    Convert an annual rate to the effective rate of one payment period.

    Args:
        annual_rate: Annual rate, decimal or percentage (see normalize_annual_rate)
        rate_kind: NOMINAL divides evenly, EFFECTIVE takes the compounding root
        periods_per_year: Payment periods per year (12.0 for monthly 30/360)

    Returns:
        Periodic effective rate as decimal

    Raises:
        InvalidRate: If the rate is negative or periods_per_year is not positive
    """
    if annual_rate < 0:
        raise InvalidRate("interest rate cannot be negative")
    if periods_per_year <= 0:
        raise InvalidRate("periods per year must be greater than zero")

    rate = normalize_annual_rate(annual_rate)

    if rate_kind == RateKind.NOMINAL:
        return rate / periods_per_year
    if rate_kind == RateKind.EFFECTIVE:
        return (1 + rate) ** (1 / periods_per_year) - 1

    raise InvalidRate(f"invalid rate kind: {rate_kind!r}")


def annualize_rate(periodic: float, periods_per_year: float) -> float:
    """Compound a periodic rate over a year: (1 + i)^m - 1."""
    if periods_per_year <= 0:
        periods_per_year = DEFAULT_PERIODS_PER_YEAR
    return (1 + periodic) ** periods_per_year - 1


def calculate_tcea(periodic_irr: float, periods_per_year: float) -> float:
    """Annual effective cost rate from the charge-inclusive periodic IRR."""
    return annualize_rate(periodic_irr, periods_per_year)


def calculate_tea(periodic: float, periods_per_year: float) -> float:
    """Effective annual rate equivalent to the loan's periodic rate."""
    return annualize_rate(periodic, periods_per_year)
