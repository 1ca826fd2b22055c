"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os
from dataclasses import replace

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from mortgage_engine.models import GraceKind, LoanTerms, RateKind


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "integration: marks integration tests")


# 200,000 property, 20,000 down, 180,000 loan at 10% TEA, 15 years monthly
SCENARIO_TERMS = LoanTerms(
    property_price=200000,
    down_payment=20000,
    loan_amount=180000,
    subsidy_amount=0,
    annual_interest_rate=0.10,
    rate_kind=RateKind.EFFECTIVE,
    term_periods=180,
    grace_periods=0,
    grace_kind=GraceKind.NONE,
    payment_frequency_days=30,
    days_in_year=360,
)


@pytest.fixture
def scenario_terms():
    """Reference 15-year monthly loan without grace or charges."""
    return SCENARIO_TERMS


@pytest.fixture
def make_terms():
    """Factory building LoanTerms from the reference scenario with overrides."""

    def _make(**overrides):
        return replace(SCENARIO_TERMS, **overrides)

    return _make


@pytest.fixture
def charged_terms(make_terms):
    """Reference loan with insurance, periodic fees and commissions."""
    return make_terms(
        administration_fee=10.0,
        portes_fee=3.5,
        additional_monthly_costs=5.0,
        life_insurance_rate=0.00028,
        property_insurance_rate=0.0003,
        evaluation_fee=250.0,
        disbursement_fee=100.0,
    )
