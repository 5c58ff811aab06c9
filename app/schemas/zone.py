from pydantic import BaseModel, Field, model_validator
from typing import List, Optional, Tuple
from datetime import datetime
from app.core.enums import ZoneType, PricingType


class ZoneBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    description: Optional[str] = None
    color: Optional[str] = None
    is_active: bool = True
    priority: int = 0

    zone_type: ZoneType = ZoneType.CIRCLE
    center_lat: Optional[float] = Field(None, ge=-90, le=90)
    center_lng: Optional[float] = Field(None, ge=-180, le=180)
    radius_meters: Optional[float] = None
    coordinates: Optional[List[Tuple[float, float]]] = None

    pricing_type: PricingType = PricingType.PERCENTAGE
    fixed_price: Optional[float] = None
    multiplier: Optional[float] = None


class ZoneCreate(ZoneBase):

    @model_validator(mode="after")
    def check_geometry_and_rule(self):
        if self.zone_type == ZoneType.CIRCLE:
            if self.center_lat is None or self.center_lng is None:
                raise ValueError("circle zones need center_lat and center_lng")
            if self.radius_meters is None or self.radius_meters <= 0:
                raise ValueError("circle zones need a positive radius_meters")
        elif not self.coordinates or len(self.coordinates) < 3:
            raise ValueError("polygon zones need at least 3 [lng, lat] vertices")

        if self.pricing_type == PricingType.FIXED and self.fixed_price is None:
            raise ValueError("fixed pricing needs fixed_price")
        if self.pricing_type == PricingType.PERCENTAGE and (
            self.multiplier is None or self.multiplier <= 0
        ):
            raise ValueError("percentage pricing needs a positive multiplier")
        return self


class ZoneUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=120)
    description: Optional[str] = None
    color: Optional[str] = None
    is_active: Optional[bool] = None
    priority: Optional[int] = None
    zone_type: Optional[ZoneType] = None
    center_lat: Optional[float] = Field(None, ge=-90, le=90)
    center_lng: Optional[float] = Field(None, ge=-180, le=180)
    radius_meters: Optional[float] = None
    coordinates: Optional[List[Tuple[float, float]]] = None
    pricing_type: Optional[PricingType] = None
    fixed_price: Optional[float] = None
    multiplier: Optional[float] = None


class ZoneOut(ZoneBase):
    id: str
    created_at: datetime
    updated_at: Optional[datetime] = None


class ZoneMatchOut(BaseModel):
    zone: Optional[ZoneOut] = None
