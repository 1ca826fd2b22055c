"""
Mortgage schedule and cost-rate calculator (French method).
"""

__version__ = "0.1.0"
