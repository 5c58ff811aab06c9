from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import ValidationError
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from typing import Optional, List
import logging

from app.db.session import get_db
from app.models.zone import Zone
from app.models.service_zone_price import ServiceZonePrice
from app.schemas.zone import ZoneBase, ZoneCreate, ZoneUpdate, ZoneOut, ZoneMatchOut
from app.schemas.quote import Coordinates
from app.repositories.pricing import PricingRepository, get_pricing_repository
from app.services.pricing import find_zone_for_coordinates
from app.core.api_utils import check_not_found
from app.core.response_builders import build_zone_response, build_zone_response_list
from app.utils.price_cache import invalidate_price_cache

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/zones", tags=["zones"])


@router.post("/", response_model=ZoneOut)
async def create_zone(
    payload: ZoneCreate,
    db: AsyncSession = Depends(get_db),
):
    zone = Zone(**payload.model_dump())
    db.add(zone)
    await db.commit()
    await db.refresh(zone)
    await invalidate_price_cache()

    logger.info(f"Created {zone.zone_type} zone {zone.id} ({zone.name})")
    return build_zone_response(zone)


@router.get("/", response_model=List[ZoneOut])
async def list_zones(
    active: Optional[bool] = Query(None),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    q = select(Zone)

    if active is not None:
        q = q.where(Zone.is_active.is_(active))

    q = q.order_by(Zone.priority.desc(), Zone.name).limit(limit).offset(offset)
    res = await db.execute(q)
    zones = res.scalars().all()

    return build_zone_response_list(zones)


@router.get("/match", response_model=ZoneMatchOut)
async def match_zone(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    repository: PricingRepository = Depends(get_pricing_repository),
):
    """Return the active zone that prices the given coordinate, if any"""
    zone = await find_zone_for_coordinates(repository, Coordinates(lat=lat, lng=lng))
    return ZoneMatchOut(zone=build_zone_response(zone) if zone else None)


@router.get("/{zone_id}", response_model=ZoneOut)
async def get_zone(
    zone_id: str,
    db: AsyncSession = Depends(get_db),
):
    res = await db.execute(select(Zone).where(Zone.id == zone_id))
    zone = res.scalars().first()
    check_not_found(zone, "Zone", zone_id)

    return build_zone_response(zone)


@router.put("/{zone_id}", response_model=ZoneOut)
async def update_zone(
    zone_id: str,
    payload: ZoneUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update a zone; the merged zone must still be a valid geometry and rule"""
    res = await db.execute(select(Zone).where(Zone.id == zone_id))
    zone = res.scalars().first()
    check_not_found(zone, "Zone", zone_id)

    merged = {field: getattr(zone, field) for field in ZoneBase.model_fields}
    merged.update(payload.model_dump(exclude_unset=True))
    try:
        validated = ZoneCreate(**merged)
    except ValidationError as e:
        raise HTTPException(
            status_code=422,
            detail=e.errors(include_url=False, include_context=False, include_input=False),
        )

    for field, value in validated.model_dump().items():
        setattr(zone, field, value)

    db.add(zone)
    await db.commit()
    await db.refresh(zone)
    await invalidate_price_cache()

    return build_zone_response(zone)


@router.delete("/{zone_id}")
async def delete_zone(
    zone_id: str,
    db: AsyncSession = Depends(get_db),
):
    res = await db.execute(select(Zone).where(Zone.id == zone_id))
    zone = res.scalars().first()
    check_not_found(zone, "Zone", zone_id)

    await db.execute(delete(ServiceZonePrice).where(ServiceZonePrice.zone_id == zone_id))
    await db.delete(zone)
    await db.commit()
    await invalidate_price_cache()

    return {"deleted": True}
