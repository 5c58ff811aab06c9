from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class ServiceCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    description: Optional[str] = None
    category: Optional[str] = None
    base_price: float = Field(..., ge=0)
    duration_minutes: Optional[int] = Field(None, gt=0)
    reservation_price: Optional[float] = Field(None, ge=0)
    is_active: bool = True


class ServiceUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=120)
    description: Optional[str] = None
    category: Optional[str] = None
    base_price: Optional[float] = Field(None, ge=0)
    duration_minutes: Optional[int] = Field(None, gt=0)
    reservation_price: Optional[float] = Field(None, ge=0)
    is_active: Optional[bool] = None


class ServiceOut(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    base_price: float
    duration_minutes: Optional[int] = None
    reservation_price: Optional[float] = None
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime] = None
