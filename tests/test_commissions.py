import pytest

from marketplace_pricing.engine.commissions import commission_line_item, commission_line_items
from marketplace_pricing.engine.models import CommissionSpec, LineItem, Money


@pytest.fixture
def order():
    return LineItem(code="line-item/day", unit_price=Money(10000, "USD"), quantity=3)


def test_provider_commission_is_negative(order):
    item = commission_line_item(order, CommissionSpec(10), "provider")
    assert item.code == "line-item/provider-commission"
    assert item.unit_price == Money(30000, "USD")
    assert item.percentage == -10
    assert item.quantity is None
    assert item.include_for == ("provider",)


def test_customer_commission_is_positive(order):
    item = commission_line_item(order, CommissionSpec(15), "customer")
    assert item.code == "line-item/customer-commission"
    assert item.unit_price == Money(30000, "USD")
    assert item.percentage == 15
    assert item.include_for == ("customer",)


@pytest.mark.parametrize("spec", [None, CommissionSpec(), CommissionSpec(0), CommissionSpec(-5)])
def test_no_commission(order, spec):
    assert commission_line_item(order, spec, "provider") is None


def test_both_parties(order):
    provider, customer = commission_line_items(order, CommissionSpec(10), None)
    assert len(provider) == 1
    assert customer == []


def test_numeric_string_percentage_is_parsed():
    assert CommissionSpec("12.5").percentage == 12.5


def test_non_numeric_percentage_raises():
    with pytest.raises(ValueError):
        CommissionSpec("ten")


def test_unknown_party(order):
    with pytest.raises(ValueError):
        commission_line_item(order, CommissionSpec(10), "operator")
