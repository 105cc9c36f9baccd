"""
Date helpers: chargeable day counting and booking-range normalisation.
"""
from datetime import date, datetime, timedelta
from typing import Optional, Union

from .models import OrderRequest, UnitType
from ..utils.logger import get_logger

logger = get_logger(__name__)

SATURDAY = 5
SUNDAY = 6

DateLike = Union[date, datetime]


def _as_date(value: DateLike) -> date:
    return value.date() if isinstance(value, datetime) else value


def count_charged_days(
    start: DateLike,
    end: DateLike,
    include_saturday: bool = False,
    include_sunday: bool = False,
) -> int:
    """
    Count calendar days in [start, end], both inclusive.

    Saturdays count only with include_saturday and Sundays only with
    include_sunday. Time of day is ignored. Returns 0 when end < start.
    """
    current = _as_date(start)
    last = _as_date(end)
    count = 0
    while current <= last:
        weekday = current.weekday()
        if (weekday != SUNDAY or include_sunday) and (weekday != SATURDAY or include_saturday):
            count += 1
        current += timedelta(days=1)

    logger.debug(
        "Charged days %s..%s (saturday=%s, sunday=%s): %d",
        start, end, include_saturday, include_sunday, count,
    )
    return count


def hours_between(start: datetime, end: datetime) -> float:
    """Elapsed hours between two datetimes; fractional hours are kept."""
    hours = (end - start).total_seconds() / 3600
    return int(hours) if float(hours).is_integer() else hours


def normalize_order(order: OrderRequest, unit_type: Optional[UnitType]) -> OrderRequest:
    """
    Return a copy of the order with an inclusive booking end.

    Day and night bookings arrive with an exclusive end date; the last
    chargeable day is one day earlier. Other unit types are returned as is.
    """
    if unit_type is None or not unit_type.uses_date_range or order.booking_end is None:
        return order
    adjusted = order.booking_end - timedelta(days=1)
    logger.debug("Adjusted booking end %s -> %s", order.booking_end, adjusted)
    return order.with_booking_end(adjusted)
