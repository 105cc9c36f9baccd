"""
Commission calculator - platform commission line items for each party.
"""
from typing import Optional

from .models import CUSTOMER, PROVIDER, CommissionSpec, LineItem
from .totals import total_from_line_items

PROVIDER_COMMISSION_CODE = "line-item/provider-commission"
CUSTOMER_COMMISSION_CODE = "line-item/customer-commission"

_CODES = {
    PROVIDER: PROVIDER_COMMISSION_CODE,
    CUSTOMER: CUSTOMER_COMMISSION_CODE,
}


def commission_line_item(order: LineItem, spec: Optional[CommissionSpec], role: str) -> Optional[LineItem]:
    """
    Build the commission line item for one party, or None without a commission.

    The commission is a percentage of the base order total. Provider
    commission reduces payout, so its percentage is negated; customer
    commission is added on top of the payin.
    """
    if role not in _CODES:
        raise ValueError(f"Unknown commission party: {role}")
    if spec is None or not spec.applies:
        return None

    percentage = -spec.percentage if role == PROVIDER else spec.percentage
    return LineItem(
        code=_CODES[role],
        unit_price=total_from_line_items([order]),
        percentage=percentage,
        include_for=(role,),
    )


def commission_line_items(
    order: LineItem,
    provider_commission: Optional[CommissionSpec],
    customer_commission: Optional[CommissionSpec],
) -> tuple[list[LineItem], list[LineItem]]:
    """Return (provider_items, customer_items), each empty or with one item."""
    provider = commission_line_item(order, provider_commission, PROVIDER)
    customer = commission_line_item(order, customer_commission, CUSTOMER)
    return ([provider] if provider else []), ([customer] if customer else [])
