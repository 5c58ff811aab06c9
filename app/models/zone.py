from sqlalchemy import Column, String, Float, Integer, Boolean, Text, JSON, Enum
from app.models.base import BaseModel
from app.core.enums import ZoneType, PricingType

class Zone(BaseModel):
    __tablename__ = "zones"
    
    name = Column(String(120), nullable=False)
    description = Column(Text)
    color = Column(String(20))
    is_active = Column(Boolean, default=True, nullable=False)
    priority = Column(Integer, default=0, nullable=False)
    
    zone_type = Column(Enum(ZoneType), default=ZoneType.CIRCLE, nullable=False)
    center_lat = Column(Float)
    center_lng = Column(Float)
    radius_meters = Column(Float)
    # [[lng, lat], ...]
    coordinates = Column(JSON)
    
    pricing_type = Column(Enum(PricingType), default=PricingType.PERCENTAGE, nullable=False)
    fixed_price = Column(Float)
    multiplier = Column(Float)
