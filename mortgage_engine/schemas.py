"""
Boundary models for the mortgage engine.

Requests are validated here and turned into immutable LoanTerms; results are
mapped back to response shapes. Field aliases follow the localized payload
names (precio_venta, cuota_fija, ...); canonical names are accepted as well.
"""

import enum
import math
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from mortgage_engine.config import get_settings
from mortgage_engine.models import (
    Currency,
    GraceKind,
    LoanTerms,
    RateKind,
    ScheduleItem,
    ScheduleResult,
)


class PaymentFrequency(str, enum.Enum):
    """Named payment frequencies."""
    MENSUAL = "MENSUAL"
    BIMESTRAL = "BIMESTRAL"
    TRIMESTRAL = "TRIMESTRAL"

    @property
    def days(self) -> int:
        return FREQUENCY_DAYS[self]


FREQUENCY_DAYS = {
    PaymentFrequency.MENSUAL: 30,
    PaymentFrequency.BIMESTRAL: 60,
    PaymentFrequency.TRIMESTRAL: 90,
}


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero (182.5 -> 183)."""
    return int(math.floor(value + 0.5))


def term_from_years(term_years: int, days_in_year: int, payment_frequency_days: int) -> int:
    """Number of payment periods in term_years."""
    return round_half_up(term_years * (days_in_year / payment_frequency_days))


def _default_days_in_year() -> int:
    return get_settings().default_days_in_year


def _default_currency() -> Currency:
    return Currency(get_settings().default_currency)


class CalculateMortgageRequest(BaseModel):
    """Input for a mortgage calculation."""

    model_config = ConfigDict(populate_by_name=True)

    # Amounts
    property_price: float = Field(..., gt=0, alias="precio_venta")
    down_payment: float = Field(0.0, ge=0, alias="cuota_inicial")
    loan_amount: float = Field(..., gt=0, alias="monto_prestamo")
    subsidy_amount: float = Field(0.0, ge=0, alias="bono_techo_propio")

    # Rate
    annual_interest_rate: float = Field(..., ge=0, alias="tasa_anual")
    rate_kind: RateKind = Field(..., alias="tipo_tasa")

    # Frequency and term (0 means "not provided")
    payment_frequency: Optional[PaymentFrequency] = Field(None, alias="frecuencia")
    payment_frequency_days: Optional[int] = Field(None, ge=0, alias="frecuencia_pago")
    days_in_year: int = Field(default_factory=_default_days_in_year, gt=0, alias="dias_anio")
    term_periods: Optional[int] = Field(None, ge=0, alias="plazo_meses")
    term_years: int = Field(0, ge=0, alias="numero_anios")

    # Grace
    grace_periods: int = Field(0, ge=0, alias="meses_gracia")
    grace_kind: GraceKind = Field(GraceKind.NONE, alias="tipo_gracia")

    currency: Currency = Field(default_factory=_default_currency, alias="moneda")

    # NPV discount rate; cok takes precedence over tasa_descuento
    npv_discount_rate: Optional[float] = Field(None, ge=0, alias="tasa_descuento")
    cok: Optional[float] = Field(None, ge=0)

    # Charges
    portes_fee: float = Field(0.0, ge=0, alias="portes")
    administration_fee: float = Field(0.0, ge=0, alias="gastos_administrativos")
    life_insurance_rate: float = Field(0.0, ge=0, alias="seguro_desgravamen")
    property_insurance_rate: float = Field(0.0, ge=0, alias="seguro_inmueble_anual")
    evaluation_fee: float = Field(0.0, ge=0, alias="comision_evaluacion")
    disbursement_fee: float = Field(0.0, ge=0, alias="comision_desembolso")
    additional_monthly_costs: float = Field(
        0.0, ge=0, alias="costos_mensuales_adicionales"
    )

    @model_validator(mode="after")
    def resolve_term(self) -> "CalculateMortgageRequest":
        if not self.payment_frequency_days:
            if self.payment_frequency is not None:
                self.payment_frequency_days = self.payment_frequency.days
            else:
                self.payment_frequency_days = get_settings().default_payment_frequency_days

        if not self.term_periods and self.term_years > 0:
            self.term_periods = term_from_years(
                self.term_years, self.days_in_year, self.payment_frequency_days
            )
        if not self.term_periods:
            raise ValueError("term periods must be greater than zero")

        if self.grace_periods >= self.term_periods:
            raise ValueError("grace periods must be less than term periods")
        return self

    @property
    def resolved_npv_discount_rate(self) -> Optional[float]:
        """Annual NPV discount rate, or None when no NPV is requested."""
        rate = self.cok or self.npv_discount_rate
        return rate or None

    def to_loan_terms(self) -> LoanTerms:
        return LoanTerms(
            property_price=self.property_price,
            down_payment=self.down_payment,
            loan_amount=self.loan_amount,
            subsidy_amount=self.subsidy_amount,
            annual_interest_rate=self.annual_interest_rate,
            rate_kind=self.rate_kind,
            term_periods=self.term_periods,
            grace_periods=self.grace_periods,
            grace_kind=self.grace_kind,
            payment_frequency_days=self.payment_frequency_days,
            days_in_year=self.days_in_year,
            administration_fee=self.administration_fee,
            portes_fee=self.portes_fee,
            additional_monthly_costs=self.additional_monthly_costs,
            life_insurance_rate=self.life_insurance_rate,
            property_insurance_rate=self.property_insurance_rate,
            evaluation_fee=self.evaluation_fee,
            disbursement_fee=self.disbursement_fee,
            npv_discount_rate_annual=self.resolved_npv_discount_rate,
            currency=self.currency,
            term_years=self.term_years,
        )

    @classmethod
    def from_loan_terms(cls, terms: LoanTerms) -> "CalculateMortgageRequest":
        """Snapshot existing terms as a request (used to apply updates)."""
        return cls(
            property_price=terms.property_price,
            down_payment=terms.down_payment,
            loan_amount=terms.loan_amount,
            subsidy_amount=terms.subsidy_amount,
            annual_interest_rate=terms.annual_interest_rate,
            rate_kind=terms.rate_kind,
            payment_frequency_days=terms.payment_frequency_days,
            days_in_year=terms.days_in_year,
            term_periods=terms.term_periods,
            term_years=terms.term_years,
            grace_periods=terms.grace_periods,
            grace_kind=terms.grace_kind,
            currency=terms.currency,
            npv_discount_rate=terms.npv_discount_rate_annual,
            portes_fee=terms.portes_fee,
            administration_fee=terms.administration_fee,
            life_insurance_rate=terms.life_insurance_rate,
            property_insurance_rate=terms.property_insurance_rate,
            evaluation_fee=terms.evaluation_fee,
            disbursement_fee=terms.disbursement_fee,
            additional_monthly_costs=terms.additional_monthly_costs,
        )


class UpdateMortgageRequest(BaseModel):
    """Sparse update: only the provided fields change."""

    model_config = ConfigDict(populate_by_name=True)

    property_price: Optional[float] = Field(None, gt=0, alias="precio_venta")
    down_payment: Optional[float] = Field(None, ge=0, alias="cuota_inicial")
    loan_amount: Optional[float] = Field(None, gt=0, alias="monto_prestamo")
    subsidy_amount: Optional[float] = Field(None, ge=0, alias="bono_techo_propio")
    annual_interest_rate: Optional[float] = Field(None, ge=0, alias="tasa_anual")
    rate_kind: Optional[RateKind] = Field(None, alias="tipo_tasa")
    payment_frequency: Optional[PaymentFrequency] = Field(None, alias="frecuencia")
    payment_frequency_days: Optional[int] = Field(None, gt=0, alias="frecuencia_pago")
    days_in_year: Optional[int] = Field(None, gt=0, alias="dias_anio")
    term_periods: Optional[int] = Field(None, gt=0, alias="plazo_meses")
    term_years: Optional[int] = Field(None, ge=0, alias="numero_anios")
    grace_periods: Optional[int] = Field(None, ge=0, alias="meses_gracia")
    grace_kind: Optional[GraceKind] = Field(None, alias="tipo_gracia")
    currency: Optional[Currency] = Field(None, alias="moneda")
    npv_discount_rate: Optional[float] = Field(None, ge=0, alias="tasa_descuento")
    cok: Optional[float] = Field(None, ge=0)
    portes_fee: Optional[float] = Field(None, ge=0, alias="portes")
    administration_fee: Optional[float] = Field(None, ge=0, alias="gastos_administrativos")
    life_insurance_rate: Optional[float] = Field(None, ge=0, alias="seguro_desgravamen")
    property_insurance_rate: Optional[float] = Field(
        None, ge=0, alias="seguro_inmueble_anual"
    )
    evaluation_fee: Optional[float] = Field(None, ge=0, alias="comision_evaluacion")
    disbursement_fee: Optional[float] = Field(None, ge=0, alias="comision_desembolso")
    additional_monthly_costs: Optional[float] = Field(
        None, ge=0, alias="costos_mensuales_adicionales"
    )

    @model_validator(mode="after")
    def check_update(self) -> "UpdateMortgageRequest":
        if not self.model_dump(exclude_none=True):
            raise ValueError("at least one field must be provided for update")

        # Amounts are denominated in the loan currency
        if self.currency is not None and (
            self.property_price is None
            or self.down_payment is None
            or self.loan_amount is None
        ):
            raise ValueError(
                "when changing currency, you must update all monetary amounts "
                "(property_price, down_payment, loan_amount)"
            )
        return self

    def apply_to(self, terms: LoanTerms) -> LoanTerms:
        """
        Merge this update over a full snapshot of terms.

        The merged values are validated again as a complete request, so the
        returned LoanTerms is ready for a fresh calculation.

        Raises:
            pydantic.ValidationError: If the merged terms are inconsistent
        """
        snapshot = CalculateMortgageRequest.from_loan_terms(terms).model_dump()
        changes = self.model_dump(exclude_none=True)

        if "term_years" in changes and "term_periods" not in changes:
            snapshot["term_periods"] = None
        if "payment_frequency" in changes and "payment_frequency_days" not in changes:
            snapshot["payment_frequency_days"] = None
        if "cok" in changes:
            snapshot["npv_discount_rate"] = None

        snapshot.update(changes)
        return CalculateMortgageRequest.model_validate(snapshot).to_loan_terms()


class PaymentScheduleItemResource(BaseModel):
    """One schedule row in response shape."""

    model_config = ConfigDict(populate_by_name=True)

    period: int = Field(alias="periodo")
    year_number: int = Field(alias="numero_anio")
    periodic_rate: float = Field(alias="tasa_periodo")
    installment: float = Field(alias="cuota")
    total_installment: float = Field(alias="cuota_total")
    interest: float = Field(alias="interes")
    amortization: float = Field(alias="amortizacion")
    portes_fee: float = Field(alias="portes")
    administration_fee: float = Field(alias="gastos_administrativos")
    life_insurance: float = Field(alias="seguro_desgravamen")
    property_insurance: float = Field(alias="seguro_inmueble")
    additional_costs: float = Field(alias="costos_adicionales")
    remaining_balance: float = Field(alias="saldo_final")
    is_grace_period: bool = Field(alias="es_periodo_gracia")
    grace_kind: Optional[GraceKind] = Field(None, alias="tipo_gracia")

    @classmethod
    def from_item(cls, item: ScheduleItem) -> "PaymentScheduleItemResource":
        return cls(
            period=item.period,
            year_number=item.year_number,
            periodic_rate=item.periodic_rate_applied,
            installment=item.installment,
            total_installment=item.total_installment,
            interest=item.interest,
            amortization=item.amortization,
            portes_fee=item.portes_fee,
            administration_fee=item.administration_fee,
            life_insurance=item.life_insurance,
            property_insurance=item.property_insurance,
            additional_costs=item.additional_costs,
            remaining_balance=item.remaining_balance,
            is_grace_period=item.is_grace_period,
            grace_kind=item.grace_kind_applied if item.is_grace_period else None,
        )


class MortgageResponse(BaseModel):
    """Full calculation response: echoed inputs, schedule and metrics."""

    model_config = ConfigDict(populate_by_name=True)

    # Inputs
    property_price: float = Field(alias="precio_venta")
    down_payment: float = Field(alias="cuota_inicial")
    loan_amount: float = Field(alias="monto_prestamo")
    subsidy_amount: float = Field(alias="bono_techo_propio")
    annual_interest_rate: float = Field(alias="tasa_anual")
    rate_kind: RateKind = Field(alias="tipo_tasa")
    term_periods: int = Field(alias="plazo_meses")
    term_years: int = Field(alias="numero_anios")
    grace_periods: int = Field(alias="meses_gracia")
    grace_kind: GraceKind = Field(alias="tipo_gracia")
    currency: Currency = Field(alias="moneda")
    payment_frequency_days: int = Field(alias="frecuencia_pago")
    days_in_year: int = Field(alias="dias_anio")
    portes_fee: float = Field(alias="portes")
    administration_fee: float = Field(alias="gastos_administrativos")
    life_insurance_rate: float = Field(alias="seguro_desgravamen")
    property_insurance_rate: float = Field(alias="seguro_inmueble_anual")
    evaluation_fee: float = Field(alias="comision_evaluacion")
    disbursement_fee: float = Field(alias="comision_desembolso")
    additional_monthly_costs: float = Field(alias="costos_mensuales_adicionales")
    installments_per_year: int = Field(alias="cuotas_por_anio")
    number_of_installments: int = Field(alias="numero_cuotas")

    # Results
    principal_financed: float = Field(alias="saldo_financiar")
    periodic_rate: float = Field(alias="tasa_periodo")
    fixed_installment: float = Field(alias="cuota_fija")
    total_installment: float = Field(alias="cuota_total")
    schedule: List[PaymentScheduleItemResource] = Field(alias="cronograma_pagos")
    total_interest_paid: float = Field(alias="total_intereses")
    total_paid: float = Field(alias="total_pagado")
    total_paid_with_charges: float = Field(alias="total_pagado_con_cargos")
    total_charges: float = Field(alias="total_cargos")
    total_insurance: float = Field(alias="total_seguros")
    total_administrative: float = Field(alias="total_gastos")
    npv: Optional[float] = Field(None, alias="van")
    irr: float = Field(alias="tir")
    flow_irr: float = Field(alias="tir_flujo")
    tea: float
    tcea: float

    @classmethod
    def from_result(cls, terms: LoanTerms, result: ScheduleResult) -> "MortgageResponse":
        return cls(
            property_price=terms.property_price,
            down_payment=terms.down_payment,
            loan_amount=terms.loan_amount,
            subsidy_amount=terms.subsidy_amount,
            annual_interest_rate=terms.annual_interest_rate,
            rate_kind=terms.rate_kind,
            term_periods=terms.term_periods,
            term_years=terms.term_years,
            grace_periods=terms.grace_periods,
            grace_kind=terms.grace_kind,
            currency=terms.currency,
            payment_frequency_days=terms.payment_frequency_days,
            days_in_year=terms.days_in_year,
            portes_fee=terms.portes_fee,
            administration_fee=terms.administration_fee,
            life_insurance_rate=terms.life_insurance_rate,
            property_insurance_rate=terms.property_insurance_rate,
            evaluation_fee=terms.evaluation_fee,
            disbursement_fee=terms.disbursement_fee,
            additional_monthly_costs=terms.additional_monthly_costs,
            installments_per_year=round_half_up(result.periods_per_year),
            number_of_installments=result.term_periods or len(result.items),
            principal_financed=result.principal_financed,
            periodic_rate=result.periodic_rate,
            fixed_installment=result.fixed_installment,
            total_installment=result.first_total_installment,
            schedule=[PaymentScheduleItemResource.from_item(item) for item in result.items],
            total_interest_paid=result.total_interest_paid,
            total_paid=result.total_paid_base,
            total_paid_with_charges=result.total_paid_with_charges,
            total_charges=result.total_charges,
            total_insurance=result.total_insurance,
            total_administrative=result.total_administrative,
            npv=result.npv,
            irr=result.irr_base,
            flow_irr=result.irr_with_charges,
            tea=result.tea,
            tcea=result.tcea,
        )


class MortgageSummaryResource(BaseModel):
    """Short form of a calculation, for listings."""

    model_config = ConfigDict(populate_by_name=True)

    property_price: float = Field(alias="precio_venta")
    loan_amount: float = Field(alias="monto_prestamo")
    currency: Currency = Field(alias="moneda")
    term_periods: int = Field(alias="plazo_meses")
    fixed_installment: float = Field(alias="cuota_fija")
    tcea: float

    @classmethod
    def from_result(
        cls, terms: LoanTerms, result: ScheduleResult
    ) -> "MortgageSummaryResource":
        return cls(
            property_price=terms.property_price,
            loan_amount=terms.loan_amount,
            currency=terms.currency,
            term_periods=terms.term_periods,
            fixed_installment=result.fixed_installment,
            tcea=result.tcea,
        )
