"""
Data models for the line-item pricing engine.

Uses dataclasses for structured, type-safe data representation.
Money amounts are always integers in the currency's smallest subunit.
"""
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional


CUSTOMER = "customer"
PROVIDER = "provider"
BOTH_PARTIES = (CUSTOMER, PROVIDER)


def parse_number(value: Any) -> Optional[float]:
    """Parse a numeric config value. Non-numeric, empty and NaN become None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if number != number:  # NaN
        return None
    return int(number) if number.is_integer() else number


def parse_subunits(value: Any, name: str) -> Optional[int]:
    """Parse a money amount in subunits. Fractional amounts raise ValueError."""
    number = parse_number(value)
    if number is None:
        return None
    if not isinstance(number, int):
        raise ValueError(f"{name} must be a whole number of subunits, got {value}")
    return number


def parse_datetime(value: Any) -> Optional[datetime]:
    """Accept datetime, date or ISO-8601 strings (a trailing 'Z' is allowed)."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


@dataclass(frozen=True)
class Money:
    """An integer amount in subunits (e.g. cents) plus an ISO currency code."""
    amount: int
    currency: str

    def __add__(self, other: "Money") -> "Money":
        self._check_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __neg__(self) -> "Money":
        return Money(-self.amount, self.currency)

    def _check_currency(self, other: "Money"):
        if other.currency != self.currency:
            raise ValueError(
                f"Currency mismatch: {self.currency} and {other.currency}"
            )

    def to_dict(self) -> dict:
        return {"amount": self.amount, "currency": self.currency}


class UnitType(str, Enum):
    """Pricing granularity of a listing."""
    DAY = "day"
    NIGHT = "night"
    HOUR = "hour"
    ITEM = "item"

    @classmethod
    def parse(cls, value: Any) -> Optional["UnitType"]:
        """Return the unit type, or None when the value is not supported."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None

    @property
    def uses_date_range(self) -> bool:
        return self in (UnitType.DAY, UnitType.NIGHT)


class DeliveryMethod(str, Enum):
    SHIPPING = "shipping"
    PICKUP = "pickup"
    NONE = "none"

    @classmethod
    def parse(cls, value: Any) -> "DeliveryMethod":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.NONE


@dataclass(frozen=True)
class DiscountTier:
    """Percentage discount applied once a booking reaches threshold_days."""
    threshold_days: Optional[float]
    percentage: Optional[float]

    @property
    def is_valid(self) -> bool:
        return bool(self.threshold_days) and bool(self.percentage)


@dataclass(frozen=True)
class ShippingFees:
    """Shipping fee schedule in subunits of the listing currency."""
    fee_first_item: Optional[int] = None
    fee_additional_item: Optional[int] = None


@dataclass(frozen=True)
class ListingPricing:
    """The pricing configuration of a single listing."""
    price: Money
    unit_type: Optional[UnitType]
    discount_tiers: tuple[DiscountTier, ...] = ()
    shipping_fees: ShippingFees = field(default_factory=ShippingFees)
    raw_unit_type: Optional[str] = None

    MAX_DISCOUNT_TIERS = 4

    @property
    def currency(self) -> str:
        return self.price.currency

    @classmethod
    def from_public_data(cls, price: Money, public_data: Optional[dict]) -> "ListingPricing":
        """Build pricing from a price and the listing's publicData mapping."""
        public_data = public_data or {}
        tiers = tuple(
            DiscountTier(
                threshold_days=parse_number(public_data.get(f"discountThreshold{i}")),
                percentage=parse_number(public_data.get(f"discountPercentage{i}")),
            )
            for i in range(1, cls.MAX_DISCOUNT_TIERS + 1)
        )
        raw_unit_type = public_data.get("unitType")
        return cls(
            price=price,
            unit_type=UnitType.parse(raw_unit_type),
            discount_tiers=tiers,
            shipping_fees=ShippingFees(
                fee_first_item=parse_subunits(
                    public_data.get("shippingPriceInSubunitsOneItem"), "shippingPriceInSubunitsOneItem"
                ),
                fee_additional_item=parse_subunits(
                    public_data.get("shippingPriceInSubunitsAdditionalItems"),
                    "shippingPriceInSubunitsAdditionalItems",
                ),
            ),
            raw_unit_type=None if raw_unit_type is None else str(raw_unit_type),
        )

    @classmethod
    def from_listing_record(cls, listing: dict) -> "ListingPricing":
        """
        Parse a marketplace listing record.

        Expected shape: {"attributes": {"price": {"amount", "currency"},
        "publicData": {...}}}
        """
        if not isinstance(listing, dict):
            raise ValueError("Listing record must be a mapping")
        attributes = listing.get("attributes") or {}
        if not isinstance(attributes, dict):
            raise ValueError("Listing attributes must be a mapping")
        price = attributes.get("price") or {}
        public_data = attributes.get("publicData")
        if public_data is not None and not isinstance(public_data, dict):
            raise ValueError("Listing publicData must be a mapping")

        if isinstance(price, Money):
            money = price
        elif isinstance(price, dict):
            amount = parse_subunits(price.get("amount"), "Listing price amount")
            if amount is None or not price.get("currency"):
                raise ValueError("Listing price must have a numeric amount and a currency")
            money = Money(amount, str(price["currency"]))
        else:
            raise ValueError("Listing price must be a mapping with amount and currency")
        return cls.from_public_data(money, public_data)


@dataclass(frozen=True)
class OrderRequest:
    """Order parameters; which fields matter depends on the listing's unit type."""
    booking_start: Optional[datetime] = None
    booking_end: Optional[datetime] = None
    include_saturday: bool = False
    include_sunday: bool = False
    stock_reservation_quantity: Optional[float] = None
    delivery_method: DeliveryMethod = DeliveryMethod.NONE

    @classmethod
    def from_order_data(cls, order_data: Optional[dict]) -> "OrderRequest":
        """Parse the camelCase orderData mapping sent by the marketplace client."""
        order_data = order_data or {}
        booking_start = parse_datetime(order_data.get("bookingStart"))
        booking_end = parse_datetime(order_data.get("bookingEnd"))
        if booking_start and booking_end and (booking_start.tzinfo is None) != (booking_end.tzinfo is None):
            raise ValueError("bookingStart and bookingEnd must both have a timezone offset or both have none")
        return cls(
            booking_start=booking_start,
            booking_end=booking_end,
            include_saturday=bool(order_data.get("includeSaturday", False)),
            include_sunday=bool(order_data.get("includeSunday", False)),
            stock_reservation_quantity=parse_number(order_data.get("stockReservationQuantity")),
            delivery_method=DeliveryMethod.parse(order_data.get("deliveryMethod")),
        )

    def with_booking_end(self, booking_end: Optional[datetime]) -> "OrderRequest":
        return replace(self, booking_end=booking_end)


@dataclass(frozen=True)
class CommissionSpec:
    """A commission percentage for one party. None or zero means no commission."""
    percentage: Optional[float] = None

    def __post_init__(self):
        if self.percentage is None:
            return
        number = None if isinstance(self.percentage, bool) else parse_number(self.percentage)
        if number is None:
            raise ValueError(f"{self.percentage} is not a number.")
        object.__setattr__(self, "percentage", number)

    @property
    def applies(self) -> bool:
        return self.percentage is not None and float(self.percentage) > 0

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "CommissionSpec":
        if not data:
            return cls()
        return cls(percentage=data.get("percentage"))


@dataclass(frozen=True)
class LineItem:
    """
    One priced component of an order.

    A line item carries exactly one pricing mode: quantity, percentage, or
    the pair (seats, units).
    """
    code: str
    unit_price: Money
    quantity: Optional[float] = None
    percentage: Optional[float] = None
    seats: Optional[int] = None
    units: Optional[int] = None
    include_for: tuple[str, ...] = BOTH_PARTIES

    @property
    def pricing_modes(self) -> list[str]:
        modes = []
        if self.quantity is not None:
            modes.append("quantity")
        if self.percentage is not None:
            modes.append("percentage")
        if self.seats is not None and self.units is not None:
            modes.append("seats_units")
        return modes

    def to_dict(self) -> dict:
        """Serialize to the platform's camelCase line item shape."""
        data = {"code": self.code, "unitPrice": self.unit_price.to_dict()}
        if self.quantity is not None:
            data["quantity"] = self.quantity
        if self.percentage is not None:
            data["percentage"] = self.percentage
        if self.seats is not None:
            data["seats"] = self.seats
        if self.units is not None:
            data["units"] = self.units
        data["includeFor"] = list(self.include_for)
        return data


@dataclass
class TraceStep:
    """A single step in the line item computation trace."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass
class Result:
    """Complete result of a pricing calculation."""
    unit_type: str
    quantity: float
    lines: list[LineItem]
    payin_total: Money
    payout_total: Money
    warnings: list[str] = field(default_factory=list)
    trace: list[TraceStep] = field(default_factory=list)

    def add_trace(self, step: str, description: str, value: str = None):
        self.trace.append(TraceStep(step=step, description=description, value=value))

    def add_warning(self, warning: str):
        if warning not in self.warnings:
            self.warnings.append(warning)

    def get_trace_text(self) -> str:
        """Get human-readable trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"• {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"• {t.step}: {t.description}")
        return "\n".join(lines)

    @property
    def commission_total(self) -> Money:
        """The platform's cut: payin minus payout."""
        return Money(self.payin_total.amount - self.payout_total.amount, self.payin_total.currency)
