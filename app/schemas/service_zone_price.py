from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class ServiceZonePriceUpsert(BaseModel):
    custom_price: float
    is_active: bool = True


class ServiceZonePriceOut(BaseModel):
    id: str
    service_id: str
    zone_id: str
    custom_price: float
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime] = None
