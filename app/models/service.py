from sqlalchemy import Column, String, Float, Integer, Boolean, Text
from app.models.base import BaseModel

class Service(BaseModel):
    __tablename__ = "services"
    name = Column(String(120), nullable=False)
    description = Column(Text)
    category = Column(String(80))
    base_price = Column(Float, nullable=False)
    duration_minutes = Column(Integer)
    reservation_price = Column(Float)
    is_active = Column(Boolean, default=True, nullable=False)
