"""
Tests for request validation, update patches and response mapping.
"""

import pytest
from pydantic import ValidationError

from mortgage_engine.calculations.engine import calculate_mortgage
from mortgage_engine.models import Currency, GraceKind, LoanTerms, RateKind
from mortgage_engine.schemas import (
    CalculateMortgageRequest,
    MortgageResponse,
    MortgageSummaryResource,
    PaymentFrequency,
    UpdateMortgageRequest,
    round_half_up,
    term_from_years,
)


@pytest.fixture
def payload():
    """Calculation payload using the localized field names."""
    return {
        "precio_venta": 200000,
        "cuota_inicial": 20000,
        "monto_prestamo": 180000,
        "bono_techo_propio": 0,
        "tasa_anual": 10,
        "tipo_tasa": "EFFECTIVE",
        "dias_anio": 360,
        "plazo_meses": 180,
        "meses_gracia": 0,
        "tipo_gracia": "NONE",
        "moneda": "PEN",
    }


class TestCalculateMortgageRequest:
    """Test request validation and conversion to LoanTerms."""

    def test_localized_payload(self, payload):
        """Localized aliases populate the canonical fields."""
        request = CalculateMortgageRequest.model_validate(payload)
        assert request.property_price == 200000
        assert request.rate_kind == RateKind.EFFECTIVE
        assert request.term_periods == 180

    def test_canonical_names(self):
        """Canonical field names are accepted too."""
        request = CalculateMortgageRequest(
            property_price=200000,
            loan_amount=180000,
            annual_interest_rate=0.10,
            rate_kind="NOMINAL",
            term_periods=120,
        )
        assert request.rate_kind == RateKind.NOMINAL

    def test_defaults(self, payload):
        """Frequency, days in year and currency default from settings."""
        del payload["dias_anio"]
        del payload["moneda"]
        request = CalculateMortgageRequest.model_validate(payload)
        assert request.payment_frequency_days == 30
        assert request.days_in_year == 360
        assert request.currency == Currency.PEN

    def test_named_frequency(self, payload):
        """A named frequency maps to its day count."""
        payload["frecuencia"] = "TRIMESTRAL"
        request = CalculateMortgageRequest.model_validate(payload)
        assert request.payment_frequency_days == 90

    def test_explicit_frequency_days_win(self, payload):
        """frecuencia_pago overrides the named frequency."""
        payload["frecuencia"] = "TRIMESTRAL"
        payload["frecuencia_pago"] = 60
        request = CalculateMortgageRequest.model_validate(payload)
        assert request.payment_frequency_days == 60

    def test_term_from_years(self, payload):
        """Without plazo_meses the term is derived from years."""
        del payload["plazo_meses"]
        payload["numero_anios"] = 15
        request = CalculateMortgageRequest.model_validate(payload)
        assert request.term_periods == 180

    def test_term_from_years_bimonthly(self, payload):
        """Years are converted with the payment frequency."""
        payload["plazo_meses"] = 0
        payload["numero_anios"] = 10
        payload["frecuencia"] = "BIMESTRAL"
        request = CalculateMortgageRequest.model_validate(payload)
        assert request.term_periods == 60

    def test_missing_term_fails(self, payload):
        """A term is required, as periods or years."""
        del payload["plazo_meses"]
        with pytest.raises(ValidationError):
            CalculateMortgageRequest.model_validate(payload)

    def test_grace_not_shorter_than_term_fails(self, payload):
        """Grace must be shorter than the term."""
        payload["meses_gracia"] = 180
        with pytest.raises(ValidationError):
            CalculateMortgageRequest.model_validate(payload)

    @pytest.mark.parametrize(
        "field,value",
        [
            ("precio_venta", 0),
            ("monto_prestamo", -1),
            ("tasa_anual", -0.5),
            ("tipo_tasa", "SIMPLE"),
            ("tipo_gracia", "FULL"),
            ("moneda", "EUR"),
            ("frecuencia", "SEMANAL"),
            ("portes", -3),
            ("seguro_desgravamen", -0.001),
            ("comision_evaluacion", -10),
        ],
    )
    def test_invalid_values(self, payload, field, value):
        """Out-of-range amounts and unknown enum values are rejected."""
        payload[field] = value
        with pytest.raises(ValidationError):
            CalculateMortgageRequest.model_validate(payload)

    def test_cok_takes_precedence(self, payload):
        """cok wins over tasa_descuento."""
        payload["tasa_descuento"] = 8
        payload["cok"] = 12
        request = CalculateMortgageRequest.model_validate(payload)
        assert request.to_loan_terms().npv_discount_rate_annual == 12

    def test_zero_discount_rate_means_no_npv(self, payload):
        """A zero discount rate is treated as not provided."""
        payload["tasa_descuento"] = 0
        assert CalculateMortgageRequest.model_validate(payload).to_loan_terms().npv_discount_rate_annual is None

    def test_to_loan_terms(self, payload):
        """The request becomes immutable LoanTerms."""
        payload.update({"meses_gracia": 6, "tipo_gracia": "TOTAL", "comision_desembolso": 100})
        terms = CalculateMortgageRequest.model_validate(payload).to_loan_terms()
        assert isinstance(terms, LoanTerms)
        assert terms.grace_kind == GraceKind.TOTAL
        assert terms.grace_periods == 6
        assert terms.upfront_charges == 100
        assert terms.principal_financed == 180000


class TestTermHelpers:
    """Test term conversion helpers."""

    def test_round_half_up(self):
        """Halves round away from zero."""
        assert round_half_up(182.5) == 183
        assert round_half_up(182.4) == 182
        assert round_half_up(2.5) == 3

    def test_term_from_years(self):
        """Years times periods per year."""
        assert term_from_years(15, 360, 30) == 180
        assert term_from_years(10, 360, 60) == 60
        assert term_from_years(5, 360, 90) == 20

    def test_frequency_days(self):
        """Named frequencies map to 30/60/90 days."""
        assert PaymentFrequency.MENSUAL.days == 30
        assert PaymentFrequency.BIMESTRAL.days == 60
        assert PaymentFrequency.TRIMESTRAL.days == 90


class TestUpdateMortgageRequest:
    """Test sparse updates applied to existing terms."""

    def test_empty_update_fails(self):
        """At least one field must be provided."""
        with pytest.raises(ValidationError):
            UpdateMortgageRequest()

    def test_currency_change_requires_amounts(self):
        """Changing the currency alone is rejected."""
        with pytest.raises(ValidationError):
            UpdateMortgageRequest(currency="USD")

    def test_currency_change_with_amounts(self, scenario_terms):
        """Currency moves together with the amounts."""
        update = UpdateMortgageRequest(
            currency="USD", property_price=55000, down_payment=5000, loan_amount=50000
        )
        terms = update.apply_to(scenario_terms)
        assert terms.currency == Currency.USD
        assert terms.loan_amount == 50000

    def test_only_provided_fields_change(self, scenario_terms):
        """Fields left out keep their current values."""
        terms = UpdateMortgageRequest(tasa_anual=12).apply_to(scenario_terms)
        assert terms.annual_interest_rate == 12
        assert terms.loan_amount == scenario_terms.loan_amount
        assert terms.term_periods == scenario_terms.term_periods
        assert terms.rate_kind == scenario_terms.rate_kind
        assert scenario_terms.annual_interest_rate == 0.10

    def test_years_update_rederives_term(self, scenario_terms):
        """Updating years without periods recomputes the term."""
        terms = UpdateMortgageRequest(term_years=20).apply_to(scenario_terms)
        assert terms.term_years == 20
        assert terms.term_periods == 240

    def test_frequency_update(self, scenario_terms):
        """A named frequency replaces the current day count."""
        terms = UpdateMortgageRequest(payment_frequency="BIMESTRAL", term_periods=90).apply_to(
            scenario_terms
        )
        assert terms.payment_frequency_days == 60
        assert terms.periods_per_year == 6

    def test_cok_update(self, make_terms):
        """A new cok replaces the stored discount rate."""
        terms = UpdateMortgageRequest(cok=15).apply_to(make_terms(npv_discount_rate_annual=0.08))
        assert terms.npv_discount_rate_annual == 15

    def test_inconsistent_merge_fails(self, scenario_terms):
        """The merged terms are validated as a whole."""
        with pytest.raises(ValidationError):
            UpdateMortgageRequest(grace_periods=200).apply_to(scenario_terms)

    def test_update_then_recalculate(self, scenario_terms):
        """A fresh calculation reflects the updated terms."""
        before = calculate_mortgage(scenario_terms)
        after = calculate_mortgage(UpdateMortgageRequest(loan_amount=150000).apply_to(scenario_terms))
        assert after.principal_financed == 150000
        assert after.fixed_installment < before.fixed_installment


class TestMortgageResponse:
    """Test mapping results to the response shape."""

    def test_localized_dump(self, charged_terms):
        """Serializing by alias gives the localized names."""
        result = calculate_mortgage(charged_terms)
        data = MortgageResponse.from_result(charged_terms, result).model_dump(by_alias=True)
        assert data["saldo_financiar"] == 180000
        assert data["cuota_fija"] == result.fixed_installment
        assert data["cuota_total"] == result.items[0].total_installment
        assert data["tir"] == result.irr_base
        assert data["tir_flujo"] == result.irr_with_charges
        assert data["tcea"] == result.tcea
        assert data["cuotas_por_anio"] == 12
        assert data["numero_cuotas"] == 180
        assert data["van"] is None
        assert len(data["cronograma_pagos"]) == 180

    def test_schedule_rows(self, make_terms):
        """Grace kind is only reported on grace rows."""
        terms = make_terms(grace_periods=3, grace_kind=GraceKind.PARTIAL)
        response = MortgageResponse.from_result(terms, calculate_mortgage(terms))
        rows = response.model_dump(by_alias=True)["cronograma_pagos"]
        assert rows[0]["periodo"] == 1
        assert rows[0]["es_periodo_gracia"] is True
        assert rows[0]["tipo_gracia"] == GraceKind.PARTIAL
        assert rows[3]["es_periodo_gracia"] is False
        assert rows[3]["tipo_gracia"] is None

    def test_summary(self, scenario_terms):
        """The summary carries the headline figures."""
        result = calculate_mortgage(scenario_terms)
        summary = MortgageSummaryResource.from_result(scenario_terms, result)
        assert summary.fixed_installment == result.fixed_installment
        assert summary.model_dump(by_alias=True)["plazo_meses"] == 180
