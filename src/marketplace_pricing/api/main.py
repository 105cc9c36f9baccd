from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, Optional

from marketplace_pricing import __version__
from marketplace_pricing.engine import MissingQuantityError
from marketplace_pricing.engine.errors import PricingError
from marketplace_pricing.engine.totals import construct_valid_line_items, total_for_customer, total_for_provider
from marketplace_pricing.api.state import engine, catalog, settings
from marketplace_pricing.utils.logger import get_logger

logger = get_logger(__name__)

app = FastAPI(
    title="Marketplace Pricing API",
    description="Line item pricing for marketplace transactions",
    version=__version__
)

# Enable CORS for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


class Commission(BaseModel):
    percentage: Optional[float] = None


class LineItemsRequest(BaseModel):
    """Either an inline listing record or a catalog listing id."""
    model_config = ConfigDict(populate_by_name=True)

    listing: Optional[Dict[str, Any]] = None
    listing_id: Optional[str] = Field(default=None, alias="listingId")
    order_data: Dict[str, Any] = Field(default_factory=dict, alias="orderData")
    provider_commission: Optional[Commission] = Field(default=None, alias="providerCommission")
    customer_commission: Optional[Commission] = Field(default=None, alias="customerCommission")


@app.get("/")
async def root():
    return {"status": "online", "message": "Marketplace Pricing API Active"}


@app.post("/api/transaction-line-items")
async def transaction_line_items(req: LineItemsRequest):
    if req.listing is not None:
        listing = req.listing
    elif req.listing_id:
        try:
            listing = catalog.listing_record(req.listing_id)
        except KeyError:
            raise HTTPException(status_code=404, detail=f"Listing '{req.listing_id}' not found")
    else:
        raise HTTPException(status_code=400, detail="Either listing or listingId is required")

    try:
        line_items = engine.line_items(
            listing,
            req.order_data,
            req.provider_commission.model_dump() if req.provider_commission else None,
            req.customer_commission.model_dump() if req.customer_commission else None,
        )
        return {
            "data": construct_valid_line_items(line_items),
            "payinTotal": total_for_customer(line_items).to_dict(),
            "payoutTotal": total_for_provider(line_items).to_dict(),
        }
    except MissingQuantityError as e:
        raise HTTPException(status_code=e.status, detail={"message": e.status_text, "data": e.data})
    except (PricingError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Line item calculation failed")
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/api/listings")
async def list_listings():
    return {"data": catalog.to_records()}


@app.get("/api/listings/{listing_id}")
async def get_listing(listing_id: str):
    try:
        return {"data": catalog.listing_record(listing_id)}
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Listing '{listing_id}' not found")


@app.get("/system/status")
async def get_status():
    return {
        "engine_active": True,
        "catalog_loaded": catalog.loaded,
        "listings_count": len(catalog),
        "provider_commission_percentage": settings.provider_commission_percentage,
        "customer_commission_percentage": settings.customer_commission_percentage,
        "max_line_items": settings.max_line_items,
    }
