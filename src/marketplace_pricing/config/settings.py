"""
Centralized settings and path configuration for the pricing engine.
"""
import os
from pathlib import Path
from dataclasses import dataclass
from typing import Optional


def get_project_root() -> Path:
    """Get the project root directory (where pyproject.toml lives)."""
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / 'pyproject.toml').exists():
            return parent
    # Fallback to 3 levels up from this file
    return Path(__file__).resolve().parent.parent.parent.parent


def _env_float(name: str) -> Optional[float]:
    value = os.environ.get(name, '').strip()
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"{name} must be numeric, got '{value}'")


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name, '').strip()
    if not value:
        return default
    return value.lower() in ('true', '1', 'yes', 'on')


@dataclass(frozen=True)
class Settings:
    """Application settings with sensible defaults."""

    # Project paths
    project_root: Path

    # Listing catalog (CSV or XLSX) used for local quoting
    listing_catalog: Path

    # Default commissions, used when a request does not carry its own
    provider_commission_percentage: Optional[float] = None
    customer_commission_percentage: Optional[float] = None

    # Platform limit on line items per transaction
    max_line_items: int = 50

    # Logging
    log_level: str = 'INFO'
    logging_enabled: bool = True

    @classmethod
    def load(cls, project_root: Optional[Path] = None) -> 'Settings':
        """Load settings from the project structure and PRICING_* environment variables."""
        root = project_root or get_project_root()

        catalog_env = os.environ.get('PRICING_LISTING_CATALOG', '').strip()
        listing_catalog = (
            Path(catalog_env) if catalog_env
            else Path(__file__).resolve().parent.parent / 'data' / 'listings.csv'
        )

        return cls(
            project_root=root,
            listing_catalog=listing_catalog,
            provider_commission_percentage=_env_float('PRICING_PROVIDER_COMMISSION'),
            customer_commission_percentage=_env_float('PRICING_CUSTOMER_COMMISSION'),
            log_level=os.environ.get('PRICING_LOG_LEVEL', 'INFO').strip().upper() or 'INFO',
            logging_enabled=_env_bool('PRICING_LOG_ENABLED', True),
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings
