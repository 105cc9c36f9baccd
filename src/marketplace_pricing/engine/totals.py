"""
Money arithmetic for line items.

All amounts stay in integer subunits. Products with fractional quantities
or percentages are computed with Decimal and rounded half away from zero.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

from .errors import InvalidLineItemError
from .models import CUSTOMER, PROVIDER, LineItem, Money, ShippingFees

LINE_ITEM_CODE_PREFIX = "line-item/"
MAX_CODE_LENGTH = 64


def D(value) -> Decimal:
    """Convert to Decimal via str() to avoid binary float artifacts."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_half_up(value) -> int:
    """Round to the nearest integer, ties away from zero."""
    return int(D(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def percentage_of(amount: int, percentage) -> int:
    return round_half_up(D(amount) * D(percentage) / Decimal(100))


def line_total(item: LineItem) -> Money:
    """Total of a single line item in its unit price currency."""
    amount = item.unit_price.amount
    if item.quantity is not None:
        total = round_half_up(D(amount) * D(item.quantity))
    elif item.percentage is not None:
        total = percentage_of(amount, item.percentage)
    elif item.seats is not None and item.units is not None:
        total = round_half_up(D(amount) * D(item.seats) * D(item.units))
    else:
        raise InvalidLineItemError(
            f"Line item {item.code} must have quantity, percentage or both seats and units"
        )
    return Money(total, item.unit_price.currency)


def total_from_line_items(items: Iterable[LineItem]) -> Money:
    """Sum of the line totals. All items must share one currency."""
    items = list(items)
    if not items:
        raise ValueError("Cannot total an empty list of line items")
    total = Money(0, items[0].unit_price.currency)
    for item in items:
        total = total + line_total(item)
    return total


def _total_for(role: str, items: Iterable[LineItem]) -> Money:
    items = list(items)
    included = [item for item in items if role in item.include_for]
    if not included:
        return Money(0, items[0].unit_price.currency) if items else Money(0, "")
    return total_from_line_items(included)


def total_for_customer(items: Iterable[LineItem]) -> Money:
    """Payin total: everything the customer pays."""
    return _total_for(CUSTOMER, items)


def total_for_provider(items: Iterable[LineItem]) -> Money:
    """Payout total: everything the provider receives."""
    return _total_for(PROVIDER, items)


def calculate_shipping_fee(fees: ShippingFees, currency: str, quantity) -> Optional[Money]:
    """
    Shipping fee for a quantity of items.

    The first item costs fee_first_item; every further item adds
    fee_additional_item (treated as 0 when not configured). Returns None
    when no first-item fee is configured.
    """
    if not fees.fee_first_item or not currency or not quantity:
        return None
    additional = fees.fee_additional_item or 0
    extra_items = max(D(quantity) - 1, Decimal(0))
    return Money(round_half_up(D(fees.fee_first_item) + D(additional) * extra_items), currency)


def validate_line_item(item: LineItem):
    """Raise InvalidLineItemError if the item breaks platform constraints."""
    if not item.code.startswith(LINE_ITEM_CODE_PREFIX):
        raise InvalidLineItemError(f"Line item code must start with '{LINE_ITEM_CODE_PREFIX}': {item.code}")
    if len(item.code) > MAX_CODE_LENGTH:
        raise InvalidLineItemError(f"Line item code is longer than {MAX_CODE_LENGTH} characters: {item.code}")
    modes = item.pricing_modes
    if len(modes) != 1:
        raise InvalidLineItemError(
            f"Line item {item.code} must have exactly one of quantity, percentage "
            f"or seats & units (got {modes or 'none'})"
        )
    if not item.include_for or any(role not in (CUSTOMER, PROVIDER) for role in item.include_for):
        raise InvalidLineItemError(f"Line item {item.code} has invalid includeFor {list(item.include_for)}")


def construct_valid_line_items(items: Iterable[LineItem]) -> list[dict]:
    """Validate line items and add lineTotal and reversal, as the platform reports them."""
    valid = []
    for item in items:
        validate_line_item(item)
        data = item.to_dict()
        data["lineTotal"] = line_total(item).to_dict()
        data["reversal"] = False
        valid.append(data)
    return valid
