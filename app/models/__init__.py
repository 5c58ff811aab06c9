from app.models.base import Base
from app.models.service import Service
from app.models.zone import Zone
from app.models.service_zone_price import ServiceZonePrice

__all__ = ["Base", "Service", "Zone", "ServiceZonePrice"]
