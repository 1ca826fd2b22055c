"""
Mortgage calculation service.

Turns requests into LoanTerms, runs the engine and maps the result to a
response. Updates are applied to a snapshot of the current terms and the
whole calculation is run again.
"""

import logging
from typing import Tuple

from mortgage_engine.calculations.engine import calculate_mortgage
from mortgage_engine.errors import MortgageCalculationError
from mortgage_engine.models import LoanTerms, ScheduleResult
from mortgage_engine.schemas import (
    CalculateMortgageRequest,
    MortgageResponse,
    UpdateMortgageRequest,
)

logger = logging.getLogger(__name__)


class MortgageService:
    """Entry point for callers holding a request rather than LoanTerms."""

    def run(self, terms: LoanTerms) -> ScheduleResult:
        """
        Run the engine on validated terms.

        Raises:
            MortgageCalculationError: Logged and re-raised unchanged
        """
        logger.info(
            "Calculating mortgage: amount=%.2f currency=%s rate=%s %s "
            "term=%d grace=%d %s",
            terms.loan_amount,
            terms.currency.value,
            terms.annual_interest_rate,
            terms.rate_kind.value,
            terms.term_periods,
            terms.grace_periods,
            terms.grace_kind.value,
        )
        try:
            result = calculate_mortgage(terms)
        except MortgageCalculationError as exc:
            logger.warning("Mortgage calculation failed (%s): %s", type(exc).__name__, exc)
            raise

        logger.debug(
            "Mortgage calculated: installment=%.2f irr=%.8f tcea=%.6f",
            result.fixed_installment,
            result.irr_with_charges,
            result.tcea,
        )
        return result

    def calculate(self, request: CalculateMortgageRequest) -> MortgageResponse:
        """Calculate a new mortgage from a validated request."""
        terms, result = self.calculate_terms(request)
        return MortgageResponse.from_result(terms, result)

    def calculate_terms(
        self, request: CalculateMortgageRequest
    ) -> Tuple[LoanTerms, ScheduleResult]:
        """Like calculate, but returns the engine types."""
        terms = request.to_loan_terms()
        return terms, self.run(terms)

    def recalculate(
        self, terms: LoanTerms, update: UpdateMortgageRequest
    ) -> Tuple[LoanTerms, MortgageResponse]:
        """
        Apply an update to existing terms and calculate again.

        Returns:
            The new LoanTerms and the response for them. The previous
            result should be discarded by the caller.
        """
        new_terms = update.apply_to(terms)
        logger.info(
            "Recalculating mortgage with updated fields: %s",
            sorted(update.model_dump(exclude_none=True)),
        )
        result = self.run(new_terms)
        return new_terms, MortgageResponse.from_result(new_terms, result)


def get_mortgage_service() -> MortgageService:
    """Get a mortgage service instance."""
    return MortgageService()
