from pydantic import BaseModel, Field
from typing import Optional
from app.core.enums import PricingSource


class Coordinates(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class QuoteRequest(BaseModel):
    service_id: str = Field(..., min_length=1)
    coordinates: Optional[Coordinates] = None


class PriceBreakdown(BaseModel):
    base: float
    zone_adjustment: float
    total: float


class QuoteResponse(BaseModel):
    service_id: str
    service_name: str
    base_price: float
    zone_id: Optional[str] = None
    zone_name: Optional[str] = None
    zone_multiplier: Optional[float] = None
    zone_fixed_price: Optional[float] = None
    final_price: float
    reservation_price: float = 0.0
    pricing_source: PricingSource
    price_breakdown: PriceBreakdown
