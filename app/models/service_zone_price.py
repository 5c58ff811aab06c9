from sqlalchemy import Column, Float, Boolean, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from app.models.base import BaseModel

class ServiceZonePrice(BaseModel):
    __tablename__ = "service_zone_prices"
    __table_args__ = (
        UniqueConstraint("service_id", "zone_id", name="uq_service_zone_price"),
    )
    
    service_id = Column(ForeignKey("services.id", ondelete="CASCADE"), nullable=False, index=True)
    zone_id = Column(ForeignKey("zones.id", ondelete="CASCADE"), nullable=False, index=True)
    
    service = relationship("Service")
    zone = relationship("Zone")
    
    custom_price = Column(Float, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
