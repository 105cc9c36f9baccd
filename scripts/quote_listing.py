#!/usr/bin/env python
"""
Print the line item breakdown for a catalog listing.

Usage:
    python scripts/quote_listing.py camera-daily --start 2024-01-01 --end 2024-01-04
    python scripts/quote_listing.py tent-sale --quantity 3 --delivery shipping --provider-commission 10
"""
import argparse
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from marketplace_pricing.config.settings import get_settings
from marketplace_pricing.data.listing_catalog import ListingCatalog
from marketplace_pricing.engine import PricingEngine, MissingQuantityError
from marketplace_pricing.utils.logger import configure_logging


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Quote a catalog listing")
    parser.add_argument("listing_id")
    parser.add_argument("--start", help="bookingStart (ISO date or datetime)")
    parser.add_argument("--end", help="bookingEnd, exclusive for day/night listings")
    parser.add_argument("--saturday", action="store_true", help="charge Saturdays")
    parser.add_argument("--sunday", action="store_true", help="charge Sundays")
    parser.add_argument("--quantity", type=int, help="stockReservationQuantity for item listings")
    parser.add_argument("--delivery", choices=["shipping", "pickup", "none"], default="none")
    parser.add_argument("--provider-commission", type=float)
    parser.add_argument("--customer-commission", type=float)
    parser.add_argument("--debug", action="store_true", help="log engine diagnostics")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    settings = get_settings()
    configure_logging("DEBUG" if args.debug else settings.log_level, settings.logging_enabled)

    catalog = ListingCatalog(settings.listing_catalog)
    if args.listing_id not in catalog:
        print(f"ERROR: listing '{args.listing_id}' not in {settings.listing_catalog}")
        sys.exit(1)

    order_data = {
        "bookingStart": args.start,
        "bookingEnd": args.end,
        "includeSaturday": args.saturday,
        "includeSunday": args.sunday,
        "stockReservationQuantity": args.quantity,
        "deliveryMethod": args.delivery,
    }
    provider = {"percentage": args.provider_commission} if args.provider_commission is not None else None
    customer = {"percentage": args.customer_commission} if args.customer_commission is not None else None

    engine = PricingEngine(settings)
    try:
        result = engine.calculate(catalog.listing_record(args.listing_id), order_data, provider, customer)
    except MissingQuantityError as e:
        print(f"❌ {e}")
        sys.exit(1)

    print("=" * 60)
    print(f"LINE ITEMS: {args.listing_id}")
    print("=" * 60)
    print(result.get_trace_text())
    for warning in result.warnings:
        print(f"  ⚠️ {warning}")
    print()
    print(f"Payin:      {result.payin_total.amount} {result.payin_total.currency}")
    print(f"Payout:     {result.payout_total.amount} {result.payout_total.currency}")
    print(f"Commission: {result.commission_total.amount} {result.commission_total.currency}")


if __name__ == "__main__":
    main()
