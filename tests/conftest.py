import os
import sys
from pathlib import Path

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from marketplace_pricing.config.settings import Settings
from marketplace_pricing.engine import PricingEngine


def make_listing(unit_type="day", amount=10000, currency="USD", **public_data):
    """Build a marketplace listing record."""
    public_data["unitType"] = unit_type
    return {
        "id": "listing-1",
        "attributes": {
            "price": {"amount": amount, "currency": currency},
            "publicData": public_data,
        },
    }


@pytest.fixture
def listing_factory():
    return make_listing


@pytest.fixture
def catalog_path():
    return Path(src_path) / 'marketplace_pricing' / 'data' / 'listings.csv'


@pytest.fixture
def settings(catalog_path):
    return Settings(project_root=Path(src_path).parent, listing_catalog=catalog_path)


@pytest.fixture
def engine(settings):
    return PricingEngine(settings)
