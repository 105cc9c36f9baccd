"""
Pricing Engine - builds the ordered line items for a marketplace transaction.

Pipeline:
1. Normalise the order (exclusive booking end -> inclusive)
2. Resolve quantity and unit-type line items (discount, shipping, pickup)
3. Fail with MissingQuantityError if no positive quantity was found
4. Base order line item: line-item/{unitType} x quantity
5. Provider and customer commissions on the base order total
6. Concatenate: order, extras, provider commission, customer commission

All line items for the customer make the payin total; all line items for
the provider make the payout total. The platform keeps the difference.
"""
from typing import Optional, Union

from ..config.settings import get_settings, Settings
from ..utils.logger import get_logger
from .commissions import commission_line_items
from .dates import normalize_order
from .errors import InvalidLineItemError, MissingQuantityError
from .models import (
    BOTH_PARTIES, CommissionSpec, DeliveryMethod, LineItem, ListingPricing, OrderRequest, Result, UnitType,
)
from .quantity import resolve_quantity
from .totals import line_total, total_for_customer, total_for_provider, validate_line_item

logger = get_logger(__name__)

MAX_LINE_ITEMS = 50

ListingInput = Union[ListingPricing, dict]
OrderInput = Union[OrderRequest, dict, None]
CommissionInput = Union[CommissionSpec, dict, None]


def _as_pricing(listing: ListingInput) -> ListingPricing:
    if isinstance(listing, ListingPricing):
        return listing
    return ListingPricing.from_listing_record(listing)


def _as_order(order: OrderInput) -> OrderRequest:
    if isinstance(order, OrderRequest):
        return order
    return OrderRequest.from_order_data(order)


def _as_commission(commission: CommissionInput) -> Optional[CommissionSpec]:
    if commission is None or isinstance(commission, CommissionSpec):
        return commission
    return CommissionSpec.from_dict(commission)


def transaction_line_items(
    listing: ListingInput,
    order: OrderInput,
    provider_commission: CommissionInput = None,
    customer_commission: CommissionInput = None,
    max_line_items: int = MAX_LINE_ITEMS,
) -> list[LineItem]:
    """
    Return the ordered line items for a transaction.

    Args:
        listing: ListingPricing or a marketplace listing record dict
        order: OrderRequest or a camelCase orderData dict
        provider_commission: CommissionSpec or {"percentage": ...}
        customer_commission: CommissionSpec or {"percentage": ...}

    Raises:
        MissingQuantityError: no positive quantity could be derived
    """
    pricing = _as_pricing(listing)
    request = normalize_order(_as_order(order), pricing.unit_type)

    resolved = resolve_quantity(pricing, request)
    quantity = resolved.quantity
    if not quantity or quantity <= 0:
        raise MissingQuantityError(pricing.raw_unit_type)

    # Base price first; the order only matters for codes a client does not recognise
    base = LineItem(
        code=f"line-item/{pricing.unit_type.value}",
        unit_price=pricing.price,
        quantity=quantity,
        include_for=BOTH_PARTIES,
    )

    # Extra line items (discount, shipping) are not part of the commission base
    provider_items, customer_items = commission_line_items(
        base,
        _as_commission(provider_commission),
        _as_commission(customer_commission),
    )

    line_items = [base, *resolved.extra_line_items, *provider_items, *customer_items]
    if len(line_items) > max_line_items:
        raise InvalidLineItemError(
            f"A transaction can have at most {max_line_items} line items, got {len(line_items)}"
        )

    logger.debug("Line items: %s", [item.code for item in line_items])
    return line_items


class PricingEngine:
    """
    Stateless line item engine with settings-driven commission defaults.

    calculate() returns a traced Result with payin and payout totals;
    line_items() returns just the list the platform expects.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def default_commissions(self) -> tuple[CommissionSpec, CommissionSpec]:
        return (
            CommissionSpec(self.settings.provider_commission_percentage),
            CommissionSpec(self.settings.customer_commission_percentage),
        )

    def _resolve_commissions(self, provider_commission, customer_commission):
        default_provider, default_customer = self.default_commissions()
        provider = _as_commission(provider_commission) or default_provider
        customer = _as_commission(customer_commission) or default_customer
        return provider, customer

    def line_items(
        self,
        listing: ListingInput,
        order: OrderInput,
        provider_commission: CommissionInput = None,
        customer_commission: CommissionInput = None,
    ) -> list[LineItem]:
        provider, customer = self._resolve_commissions(provider_commission, customer_commission)
        return transaction_line_items(
            listing, order, provider, customer,
            max_line_items=self.settings.max_line_items,
        )

    def calculate(
        self,
        listing: ListingInput,
        order: OrderInput,
        provider_commission: CommissionInput = None,
        customer_commission: CommissionInput = None,
    ) -> Result:
        """
        Calculate line items with full traceability.

        Returns:
            Result with lines, payin/payout totals, trace and warnings
        """
        pricing = _as_pricing(listing)
        request = _as_order(order)
        provider, customer = self._resolve_commissions(provider_commission, customer_commission)

        lines = transaction_line_items(
            pricing, request, provider, customer,
            max_line_items=self.settings.max_line_items,
        )
        for line in lines:
            validate_line_item(line)

        base = lines[0]
        result = Result(
            unit_type=pricing.unit_type.value,
            quantity=base.quantity,
            lines=lines,
            payin_total=total_for_customer(lines),
            payout_total=total_for_provider(lines),
        )

        price = pricing.price
        result.add_trace("Unit Type", "Listing priced per", pricing.unit_type.value)
        result.add_trace("Quantity", f"Resolved {pricing.unit_type.value} quantity", str(base.quantity))
        result.add_trace(
            "Base Price",
            f"{base.quantity} × {price.amount} {price.currency}",
            str(line_total(base).amount),
        )
        for line in lines[1:]:
            result.add_trace("Line Item", line.code, str(line_total(line).amount))
        result.add_trace("Payin", "Customer total", str(result.payin_total.amount))
        result.add_trace("Payout", "Provider total", str(result.payout_total.amount))

        if pricing.unit_type.uses_date_range and request.booking_start and request.booking_end:
            span = (request.booking_end.date() - request.booking_start.date()).days
            if span > base.quantity:
                result.add_warning(
                    f"{span - base.quantity} weekend day(s) in the booking are not charged"
                )
        if (
            request.delivery_method == DeliveryMethod.SHIPPING
            and pricing.unit_type == UnitType.ITEM
            and not pricing.shipping_fees.fee_first_item
        ):
            result.add_warning("Shipping requested but the listing has no shipping fee configured")

        return result
