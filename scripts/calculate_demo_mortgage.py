"""
Calculate a demo mortgage and print its schedule summary.
200,000 PEN property, 20,000 down payment, 10% TEA over 15 years.
"""
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from mortgage_engine.config import configure_logging
from mortgage_engine.schemas import CalculateMortgageRequest
from mortgage_engine.services import get_mortgage_service


def main():
    configure_logging()
    service = get_mortgage_service()

    request = CalculateMortgageRequest(
        property_price=200000,
        down_payment=20000,
        loan_amount=180000,
        annual_interest_rate=10,
        rate_kind="EFFECTIVE",
        payment_frequency="MENSUAL",
        term_years=15,
        grace_periods=6,
        grace_kind="PARTIAL",
        npv_discount_rate=12,
        life_insurance_rate=0.00028,
        property_insurance_rate=0.0003,
        administration_fee=10,
        portes_fee=3.5,
        evaluation_fee=250,
        disbursement_fee=100,
    )
    response = service.calculate(request)

    print(f"Principal financed: {response.principal_financed:,.2f} {response.currency.value}")
    print(f"  Periodic rate: {response.periodic_rate:.6%}")
    print(f"  Fixed installment: {response.fixed_installment:,.2f}")
    print(f"  Installments: {response.number_of_installments} ({response.installments_per_year}/year)")
    print(f"  Total interest: {response.total_interest_paid:,.2f}")
    print(f"  Total paid with charges: {response.total_paid_with_charges:,.2f}")
    print(f"  NPV: {response.npv:,.2f}")
    print(f"  TEA: {response.tea:.4%}")
    print(f"  TCEA: {response.tcea:.4%}")

    print("\nFirst periods:")
    for row in response.schedule[:8]:
        grace = f" [{row.grace_kind.value}]" if row.is_grace_period else ""
        print(
            f"  {row.period:>3}  installment={row.installment:>10,.2f}  "
            f"total={row.total_installment:>10,.2f}  "
            f"balance={row.remaining_balance:>12,.2f}{grace}"
        )


if __name__ == "__main__":
    main()
