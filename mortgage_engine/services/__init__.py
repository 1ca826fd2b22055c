"""
Application services module.
"""

from mortgage_engine.services.mortgage_service import MortgageService, get_mortgage_service

__all__ = ["MortgageService", "get_mortgage_service"]
