"""Data access used by the price resolver"""
import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from fastapi import Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.core.errors import RemoteFailureError
from app.core.metrics import track_db_operation
from app.db.session import get_db
from app.models.service import Service
from app.models.service_zone_price import ServiceZonePrice
from app.models.zone import Zone

logger = logging.getLogger(__name__)


class PricingRepository(ABC):
    """Lookups the resolver needs. Implementations raise RemoteFailureError when the store fails."""

    @abstractmethod
    async def get_service(self, service_id: str) -> Optional[Service]:
        ...

    @abstractmethod
    async def list_active_zones(self) -> List[Zone]:
        ...

    @abstractmethod
    async def get_override(self, service_id: str, zone_id: str) -> Optional[ServiceZonePrice]:
        """Return the active override for the pair, or None."""
        ...


class SqlPricingRepository(PricingRepository):

    def __init__(self, db: AsyncSession):
        self.db = db

    @track_db_operation("select", "services")
    async def get_service(self, service_id: str) -> Optional[Service]:
        try:
            res = await self.db.execute(select(Service).where(Service.id == service_id))
            return res.scalars().first()
        except SQLAlchemyError as e:
            logger.error(f"Service lookup failed for {service_id}: {e}")
            raise RemoteFailureError("get_service", e) from e

    @track_db_operation("select", "zones")
    async def list_active_zones(self) -> List[Zone]:
        try:
            res = await self.db.execute(select(Zone).where(Zone.is_active.is_(True)))
            return list(res.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Active zone listing failed: {e}")
            raise RemoteFailureError("list_active_zones", e) from e

    @track_db_operation("select", "service_zone_prices")
    async def get_override(self, service_id: str, zone_id: str) -> Optional[ServiceZonePrice]:
        try:
            res = await self.db.execute(
                select(ServiceZonePrice).where(
                    ServiceZonePrice.service_id == service_id,
                    ServiceZonePrice.zone_id == zone_id,
                    ServiceZonePrice.is_active.is_(True),
                )
            )
            return res.scalars().first()
        except SQLAlchemyError as e:
            logger.error(f"Override lookup failed for service {service_id}, zone {zone_id}: {e}")
            raise RemoteFailureError("get_override", e) from e


def get_pricing_repository(db: AsyncSession = Depends(get_db)) -> PricingRepository:
    return SqlPricingRepository(db)
