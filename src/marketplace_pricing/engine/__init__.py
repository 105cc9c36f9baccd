"""Engine subpackage - line item computation."""
from .pricing_engine import PricingEngine, transaction_line_items
from .models import CommissionSpec, LineItem, ListingPricing, Money, OrderRequest, Result, UnitType
from .errors import MissingQuantityError, InvalidLineItemError

__all__ = [
    'PricingEngine', 'transaction_line_items',
    'CommissionSpec', 'LineItem', 'ListingPricing', 'Money', 'OrderRequest', 'Result', 'UnitType',
    'MissingQuantityError', 'InvalidLineItemError',
]
