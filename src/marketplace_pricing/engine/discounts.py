"""
Discount Resolver - maps a booking length to a tiered discount percentage.
"""
from typing import Iterable

from .models import DiscountTier
from ..utils.logger import get_logger

logger = get_logger(__name__)


def sorted_tiers(tiers: Iterable[DiscountTier]) -> list[DiscountTier]:
    """
    Drop tiers without a threshold or percentage, then order by threshold
    descending. The sort is stable, so equal thresholds keep config order.
    """
    valid = [tier for tier in tiers if tier.is_valid]
    return sorted(valid, key=lambda tier: tier.threshold_days, reverse=True)


def resolve_discount(tiers: Iterable[DiscountTier], total_days) -> float:
    """
    Return the percentage of the highest tier whose threshold is reached.

    Returns 0 when no tier qualifies or total_days is empty/zero.
    """
    candidates = sorted_tiers(tiers)
    if not total_days:
        return 0

    match = next((tier for tier in candidates if tier.threshold_days <= total_days), None)
    logger.debug(
        "Resolving discount for %s days over %d tiers: %s",
        total_days, len(candidates), match,
    )
    return match.percentage if match else 0
