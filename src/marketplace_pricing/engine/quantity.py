"""
Quantity resolvers - derive the order quantity and any line items tied to
the listing's unit type (discounts for date ranges, delivery fees for items).
"""
from dataclasses import dataclass, field
from typing import Optional

from .dates import count_charged_days, hours_between
from .discounts import resolve_discount
from .models import BOTH_PARTIES, DeliveryMethod, LineItem, ListingPricing, Money, OrderRequest, UnitType
from .totals import calculate_shipping_fee, percentage_of
from ..utils.logger import get_logger

logger = get_logger(__name__)

SHIPPING_FEE_CODE = "line-item/shipping-fee"
PICKUP_FEE_CODE = "line-item/pickup-fee"


@dataclass
class QuantityResult:
    """Quantity for the base line item plus extra line items tied to it."""
    quantity: Optional[float]
    extra_line_items: list[LineItem] = field(default_factory=list)


def discount_code(percentage) -> str:
    return f"line-item/discount-{percentage}%"


def date_range_quantity(pricing: ListingPricing, order: OrderRequest) -> QuantityResult:
    """
    Day and night bookings: count chargeable days and apply the tiered discount.

    The order's booking_end must already be inclusive (see dates.normalize_order).
    """
    if not (order.booking_start and order.booking_end):
        return QuantityResult(quantity=None)

    quantity = count_charged_days(
        order.booking_start,
        order.booking_end,
        order.include_saturday,
        order.include_sunday,
    )
    percentage = resolve_discount(pricing.discount_tiers, quantity)

    extra = []
    if percentage:
        amount = percentage_of(pricing.price.amount * quantity, percentage)
        extra.append(LineItem(
            code=discount_code(percentage),
            unit_price=-Money(amount, pricing.currency),
            quantity=1,
            include_for=BOTH_PARTIES,
        ))
        logger.debug("Discount %s%% on %d days: -%d", percentage, quantity, amount)

    return QuantityResult(quantity=quantity, extra_line_items=extra)


def item_quantity(pricing: ListingPricing, order: OrderRequest) -> QuantityResult:
    """Product purchases: quantity from the stock reservation plus a delivery line item."""
    quantity = order.stock_reservation_quantity
    method = order.delivery_method

    shipping_fee = None
    if method == DeliveryMethod.SHIPPING:
        shipping_fee = calculate_shipping_fee(pricing.shipping_fees, pricing.currency, quantity)

    # Pickup is free by default
    if shipping_fee is not None:
        extra = [LineItem(code=SHIPPING_FEE_CODE, unit_price=shipping_fee, quantity=1)]
    elif method == DeliveryMethod.PICKUP:
        extra = [LineItem(code=PICKUP_FEE_CODE, unit_price=Money(0, pricing.currency), quantity=1)]
    else:
        extra = []

    return QuantityResult(quantity=quantity, extra_line_items=extra)


def hour_quantity(pricing: ListingPricing, order: OrderRequest) -> QuantityResult:
    """Time-based bookings: elapsed hours, fractions kept."""
    if not (order.booking_start and order.booking_end):
        return QuantityResult(quantity=None)
    return QuantityResult(quantity=hours_between(order.booking_start, order.booking_end))


RESOLVERS = {
    UnitType.DAY: date_range_quantity,
    UnitType.NIGHT: date_range_quantity,
    UnitType.HOUR: hour_quantity,
    UnitType.ITEM: item_quantity,
}


def resolve_quantity(pricing: ListingPricing, order: OrderRequest) -> QuantityResult:
    """Dispatch on unit type. Unsupported unit types resolve to no quantity."""
    resolver = RESOLVERS.get(pricing.unit_type)
    if resolver is None:
        logger.warning("Unsupported unit type: %s", pricing.raw_unit_type)
        return QuantityResult(quantity=None)
    return resolver(pricing, order)
