"""
Listing Catalog - loads listing pricing configuration from CSV or Excel.

Each row holds the price and publicData pricing fields of one listing.
Numeric columns are coerced; cells that are empty or not numbers are
treated as "not configured" so a bad discount cell excludes the tier.
"""
import pandas as pd
from pathlib import Path
from typing import Optional

from ..engine.models import ListingPricing
from ..utils.logger import get_logger

logger = get_logger(__name__)

PUBLIC_DATA_NUMERIC_COLUMNS = [
    'discountThreshold1', 'discountPercentage1',
    'discountThreshold2', 'discountPercentage2',
    'discountThreshold3', 'discountPercentage3',
    'discountThreshold4', 'discountPercentage4',
    'shippingPriceInSubunitsOneItem',
    'shippingPriceInSubunitsAdditionalItems',
]

REQUIRED_COLUMNS = ['listing_id', 'price_amount', 'currency', 'unitType']


def _subunits(value: float):
    """Whole amounts as int; fractional ones are kept so pricing rejects them."""
    value = float(value)
    return int(value) if value.is_integer() else value


class ListingCatalog:
    """Read-only catalog of listing pricing rows, indexed by listing_id."""

    def __init__(self, catalog_path: Optional[Path] = None):
        self.catalog_path = catalog_path
        self.listings = pd.DataFrame(columns=REQUIRED_COLUMNS).set_index('listing_id')
        self.loaded = False

        if catalog_path and Path(catalog_path).exists():
            self._load(Path(catalog_path))
        elif catalog_path:
            logger.warning("Listing catalog not found at %s", catalog_path)

    def _load(self, path: Path):
        if path.suffix.lower() in ('.xlsx', '.xls'):
            df = pd.read_excel(path, dtype={'listing_id': str})
        else:
            df = pd.read_csv(path, dtype={'listing_id': str})

        df.columns = [str(c).strip() for c in df.columns]
        missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
        if missing:
            raise ValueError(f"Listing catalog {path} is missing columns: {', '.join(missing)}")

        df['listing_id'] = df['listing_id'].astype(str).str.strip()
        df['currency'] = df['currency'].astype(str).str.strip().str.upper()
        df['unitType'] = df['unitType'].astype(str).str.strip()
        df['price_amount'] = pd.to_numeric(df['price_amount'], errors='coerce')
        for col in PUBLIC_DATA_NUMERIC_COLUMNS:
            if col in df.columns:
                df[col] = pd.to_numeric(df[col], errors='coerce')

        invalid = df['price_amount'].isna()
        if invalid.any():
            logger.warning(
                "Skipping %d listing(s) without a numeric price: %s",
                int(invalid.sum()), ", ".join(df.loc[invalid, 'listing_id']),
            )
            df = df[~invalid]

        # Keep the first row for duplicate listing ids
        df = df.drop_duplicates(subset='listing_id', keep='first')

        self.listings = df.set_index('listing_id')
        self.loaded = True
        logger.info("Loaded %d listings from %s", len(self.listings), path)

    def __len__(self) -> int:
        return len(self.listings)

    def __contains__(self, listing_id: str) -> bool:
        return str(listing_id).strip() in self.listings.index

    def listing_ids(self) -> list[str]:
        return self.listings.index.tolist()

    def listing_record(self, listing_id: str) -> dict:
        """
        Return the row in the marketplace listing record shape.

        Raises KeyError if the listing is not in the catalog.
        """
        listing_id = str(listing_id).strip()
        if listing_id not in self.listings.index:
            raise KeyError(f"Listing '{listing_id}' not found in catalog")

        row = self.listings.loc[listing_id]
        public_data = {'unitType': row['unitType']}
        for col in PUBLIC_DATA_NUMERIC_COLUMNS:
            if col in row.index and pd.notna(row[col]):
                value = float(row[col])
                public_data[col] = int(value) if value.is_integer() else value

        attributes = {
            'price': {'amount': _subunits(row['price_amount']), 'currency': row['currency']},
            'publicData': public_data,
        }
        if 'title' in row.index and pd.notna(row['title']):
            attributes['title'] = str(row['title'])

        return {'id': listing_id, 'attributes': attributes}

    def get_pricing(self, listing_id: str) -> ListingPricing:
        """Pricing configuration for a listing. Raises KeyError if unknown."""
        return ListingPricing.from_listing_record(self.listing_record(listing_id))

    def to_records(self) -> list[dict]:
        """All listings in the marketplace record shape."""
        return [self.listing_record(listing_id) for listing_id in self.listing_ids()]
