"""Shared engine and catalog instances for the API."""
from ..config.settings import get_settings
from ..data.listing_catalog import ListingCatalog
from ..engine import PricingEngine
from ..utils.logger import configure_logging

settings = get_settings()
configure_logging(settings.log_level, settings.logging_enabled)

engine = PricingEngine(settings)
catalog = ListingCatalog(settings.listing_catalog)
