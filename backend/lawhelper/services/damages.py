# lawhelper/services/damages.py
"""
Damages arithmetic for demand letters (multiplier method).
"""
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from lawhelper.db.schemas import DamagesBreakdown

CENTS = Decimal("0.01")


def _money(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def calculate_damages(
    medical_expenses: Decimal,
    lost_wages: Decimal,
    pain_multiplier: Decimal,
    demand_amount: Optional[Decimal] = None,
) -> DamagesBreakdown:
    """
    Economic damages = medical expenses + lost wages.
    Pain and suffering = medical expenses x multiplier.
    The demand defaults to the computed total unless the attorney set one.
    """
    economic = medical_expenses + lost_wages
    pain_and_suffering = medical_expenses * pain_multiplier
    total = economic + pain_and_suffering
    return DamagesBreakdown(
        medical_expenses=_money(medical_expenses),
        lost_wages=_money(lost_wages),
        economic_damages=_money(economic),
        pain_and_suffering=_money(pain_and_suffering),
        total=_money(total),
        demand_amount=_money(demand_amount if demand_amount is not None else total),
    )
