"""
Line item pipeline: quantity, extras, commissions and their ordering.
"""
import copy
from dataclasses import replace

import pytest

from marketplace_pricing.engine import (
    InvalidLineItemError, Money, MissingQuantityError, PricingEngine, transaction_line_items,
)

DISCOUNTS = dict(discountThreshold1=3, discountPercentage1=10, discountThreshold2=7, discountPercentage2=20)


def codes(lines):
    return [line.code for line in lines]


def test_day_booking_without_discounts(listing_factory):
    lines = transaction_line_items(
        listing_factory("day"),
        {"bookingStart": "2024-01-01", "bookingEnd": "2024-01-04"},
    )
    assert len(lines) == 1
    order = lines[0]
    assert order.code == "line-item/day"
    assert order.unit_price == Money(10000, "USD")
    assert order.quantity == 3
    assert order.include_for == ("customer", "provider")


def test_item_with_shipping(listing_factory):
    listing = listing_factory(
        "item", amount=12000,
        shippingPriceInSubunitsOneItem=500, shippingPriceInSubunitsAdditionalItems=200,
    )
    lines = transaction_line_items(listing, {"stockReservationQuantity": 3, "deliveryMethod": "shipping"})

    assert codes(lines) == ["line-item/item", "line-item/shipping-fee"]
    assert lines[0].quantity == 3
    assert lines[1].unit_price == Money(900, "USD")


def test_line_item_order_with_discount_and_commissions(listing_factory):
    lines = transaction_line_items(
        listing_factory("day", **DISCOUNTS),
        {"bookingStart": "2024-01-01", "bookingEnd": "2024-01-08", "includeSaturday": True, "includeSunday": True},
        {"percentage": 10},
        {"percentage": 15},
    )
    assert codes(lines) == [
        "line-item/day",
        "line-item/discount-20%",
        "line-item/provider-commission",
        "line-item/customer-commission",
    ]
    order, discount, provider, customer = lines
    assert order.quantity == 7
    assert discount.unit_price.amount == -14000
    # Commissions are taken from the base order only, not the discounted total
    assert provider.unit_price == Money(70000, "USD")
    assert provider.percentage == -10
    assert provider.include_for == ("provider",)
    assert customer.unit_price == Money(70000, "USD")
    assert customer.percentage == 15
    assert customer.include_for == ("customer",)


def test_night_booking_counts_nights(listing_factory):
    listing = listing_factory("night", amount=25000, discountThreshold1=7, discountPercentage1=15)
    lines = transaction_line_items(
        listing,
        {"bookingStart": "2024-01-01", "bookingEnd": "2024-01-08", "includeSaturday": True, "includeSunday": True},
    )
    assert lines[0].code == "line-item/night"
    assert lines[0].quantity == 7
    assert lines[1].unit_price.amount == -26250


def test_hour_booking_end_is_not_shifted(listing_factory):
    lines = transaction_line_items(
        listing_factory("hour", amount=4500),
        {"bookingStart": "2024-01-01T09:00:00", "bookingEnd": "2024-01-01T12:00:00"},
    )
    assert codes(lines) == ["line-item/hour"]
    assert lines[0].quantity == 3


@pytest.mark.parametrize("unit_type", ["day", "night", "hour", "item"])
def test_missing_quantity(listing_factory, unit_type):
    with pytest.raises(MissingQuantityError) as exc_info:
        transaction_line_items(listing_factory(unit_type), {})
    error = exc_info.value
    assert error.status == 400
    assert "stockReservationQuantity" in str(error)
    assert "bookingStart & bookingEnd" in str(error)


def test_missing_order_data(listing_factory):
    with pytest.raises(MissingQuantityError):
        transaction_line_items(listing_factory("item"), None)


def test_unknown_unit_type_fails_with_missing_quantity(listing_factory):
    with pytest.raises(MissingQuantityError) as exc_info:
        transaction_line_items(listing_factory("week"), {"stockReservationQuantity": 2})
    assert exc_info.value.data == {"unitType": "week"}


def test_weekend_only_booking_has_no_quantity(listing_factory):
    # Saturday to Monday (exclusive) without weekends charged
    with pytest.raises(MissingQuantityError):
        transaction_line_items(listing_factory("day"), {"bookingStart": "2024-01-06", "bookingEnd": "2024-01-08"})


def test_zero_length_hour_booking(listing_factory):
    with pytest.raises(MissingQuantityError):
        transaction_line_items(
            listing_factory("hour"),
            {"bookingStart": "2024-01-01T09:00:00", "bookingEnd": "2024-01-01T09:00:00"},
        )


def test_order_data_is_not_mutated(listing_factory):
    order_data = {"bookingStart": "2024-01-01", "bookingEnd": "2024-01-04"}
    snapshot = copy.deepcopy(order_data)
    transaction_line_items(listing_factory("day"), order_data)
    assert order_data == snapshot


def test_idempotent(listing_factory):
    listing = listing_factory("day", **DISCOUNTS)
    order_data = {"bookingStart": "2024-01-01", "bookingEnd": "2024-01-08", "includeSaturday": True}
    first = transaction_line_items(listing, order_data, {"percentage": 10}, {"percentage": 5})
    second = transaction_line_items(listing, order_data, {"percentage": 10}, {"percentage": 5})
    assert first == second


def test_line_item_cap(listing_factory):
    listing = listing_factory("item", shippingPriceInSubunitsOneItem=500)
    with pytest.raises(InvalidLineItemError):
        transaction_line_items(
            listing, {"stockReservationQuantity": 1, "deliveryMethod": "shipping"}, max_line_items=1,
        )


class TestPricingEngine:

    def test_default_commissions_from_settings(self, settings, listing_factory):
        engine = PricingEngine(replace(settings, provider_commission_percentage=10, customer_commission_percentage=5))
        lines = engine.line_items(listing_factory("item"), {"stockReservationQuantity": 2})
        assert codes(lines) == ["line-item/item", "line-item/provider-commission", "line-item/customer-commission"]

    def test_explicit_commission_overrides_default(self, settings, listing_factory):
        engine = PricingEngine(replace(settings, provider_commission_percentage=10))
        lines = engine.line_items(listing_factory("item"), {"stockReservationQuantity": 2}, {"percentage": 20})
        assert lines[1].percentage == -20

    def test_calculate_totals(self, engine, listing_factory):
        result = engine.calculate(
            listing_factory("day", **DISCOUNTS),
            {"bookingStart": "2024-01-01", "bookingEnd": "2024-01-08", "includeSaturday": True, "includeSunday": True},
            {"percentage": 10},
            {"percentage": 15},
        )
        # payin: 70000 - 14000 + 10500; payout: 70000 - 14000 - 7000
        assert result.unit_type == "day"
        assert result.quantity == 7
        assert result.payin_total == Money(66500, "USD")
        assert result.payout_total == Money(49000, "USD")
        assert result.commission_total == Money(17500, "USD")
        assert result.warnings == []
        assert "Payin: Customer total = 66500" in result.get_trace_text()

    def test_calculate_warns_about_uncharged_weekend(self, engine, listing_factory):
        result = engine.calculate(listing_factory("day"), {"bookingStart": "2024-01-01", "bookingEnd": "2024-01-08"})
        assert result.quantity == 5
        assert result.warnings == ["2 weekend day(s) in the booking are not charged"]

    def test_calculate_warns_about_missing_shipping_fee(self, engine, listing_factory):
        result = engine.calculate(
            listing_factory("item"), {"stockReservationQuantity": 1, "deliveryMethod": "shipping"},
        )
        assert len(result.lines) == 1
        assert result.warnings == ["Shipping requested but the listing has no shipping fee configured"]

    def test_engine_respects_line_item_cap(self, settings, listing_factory):
        engine = PricingEngine(replace(settings, max_line_items=1))
        with pytest.raises(InvalidLineItemError):
            engine.line_items(listing_factory("item"), {"stockReservationQuantity": 1}, {"percentage": 10})
