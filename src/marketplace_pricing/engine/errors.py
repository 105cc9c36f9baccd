"""Errors raised by the pricing engine. Each carries an HTTP-style status."""


class PricingError(Exception):
    """Base class for client-facing pricing errors."""
    status = 400

    def __init__(self, message: str, data: dict = None):
        super().__init__(message)
        self.status_text = message
        self.data = data or {}


class MissingQuantityError(PricingError):
    """No quantity could be derived from the order request."""

    MESSAGE = (
        "Error: transition should contain quantity information: "
        "stockReservationQuantity, quantity, or bookingStart & bookingEnd "
        '(if "line-item/day" or "line-item/night" is used)'
    )

    def __init__(self, unit_type: str = None):
        super().__init__(self.MESSAGE, data={"unitType": unit_type} if unit_type else None)
        self.unit_type = unit_type


class InvalidLineItemError(PricingError):
    """A line item breaks the marketplace platform's line item constraints."""
