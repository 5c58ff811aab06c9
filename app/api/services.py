from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import ValidationError
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from typing import Optional, List
import logging

from app.db.session import get_db
from app.models.service import Service
from app.models.zone import Zone
from app.models.service_zone_price import ServiceZonePrice
from app.schemas.service import ServiceCreate, ServiceUpdate, ServiceOut
from app.schemas.service_zone_price import ServiceZonePriceUpsert, ServiceZonePriceOut
from app.core.api_utils import check_not_found
from app.core.response_builders import (
    build_service_response,
    build_service_response_list,
    build_zone_price_response,
    build_zone_price_response_list,
)
from app.utils.price_cache import invalidate_price_cache

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/services", tags=["services"])


@router.post("/", response_model=ServiceOut)
async def create_service(
    payload: ServiceCreate,
    db: AsyncSession = Depends(get_db),
):
    service = Service(**payload.model_dump())
    db.add(service)
    await db.commit()
    await db.refresh(service)
    await invalidate_price_cache()

    logger.info(f"Created service {service.id} ({service.name})")
    return build_service_response(service)


@router.get("/", response_model=List[ServiceOut])
async def list_services(
    active: Optional[bool] = Query(None),
    category: Optional[str] = Query(None),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    q = select(Service)

    if active is not None:
        q = q.where(Service.is_active.is_(active))

    if category:
        q = q.where(Service.category == category)

    q = q.order_by(Service.name).limit(limit).offset(offset)
    res = await db.execute(q)
    services = res.scalars().all()

    return build_service_response_list(services)


@router.get("/{service_id}", response_model=ServiceOut)
async def get_service(
    service_id: str,
    db: AsyncSession = Depends(get_db),
):
    res = await db.execute(select(Service).where(Service.id == service_id))
    service = res.scalars().first()
    check_not_found(service, "Service", service_id)

    return build_service_response(service)


@router.put("/{service_id}", response_model=ServiceOut)
async def update_service(
    service_id: str,
    payload: ServiceUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update a service; the merged service must still be valid"""
    res = await db.execute(select(Service).where(Service.id == service_id))
    service = res.scalars().first()
    check_not_found(service, "Service", service_id)

    merged = {field: getattr(service, field) for field in ServiceCreate.model_fields}
    merged.update(payload.model_dump(exclude_unset=True))
    try:
        validated = ServiceCreate(**merged)
    except ValidationError as e:
        raise HTTPException(
            status_code=422,
            detail=e.errors(include_url=False, include_context=False, include_input=False),
        )

    for field, value in validated.model_dump().items():
        setattr(service, field, value)

    db.add(service)
    await db.commit()
    await db.refresh(service)
    await invalidate_price_cache()

    return build_service_response(service)


@router.delete("/{service_id}")
async def delete_service(
    service_id: str,
    db: AsyncSession = Depends(get_db),
):
    res = await db.execute(select(Service).where(Service.id == service_id))
    service = res.scalars().first()
    check_not_found(service, "Service", service_id)

    await db.execute(delete(ServiceZonePrice).where(ServiceZonePrice.service_id == service_id))
    await db.delete(service)
    await db.commit()
    await invalidate_price_cache()

    return {"deleted": True}


@router.get("/{service_id}/zone-prices", response_model=List[ServiceZonePriceOut])
async def list_zone_prices(
    service_id: str,
    db: AsyncSession = Depends(get_db),
):
    res = await db.execute(select(Service).where(Service.id == service_id))
    check_not_found(res.scalars().first(), "Service", service_id)

    res = await db.execute(
        select(ServiceZonePrice).where(ServiceZonePrice.service_id == service_id)
    )
    return build_zone_price_response_list(res.scalars().all())


@router.put("/{service_id}/zone-prices/{zone_id}", response_model=ServiceZonePriceOut)
async def upsert_zone_price(
    service_id: str,
    zone_id: str,
    payload: ServiceZonePriceUpsert,
    db: AsyncSession = Depends(get_db),
):
    """Set the custom price of a service inside one zone"""
    res = await db.execute(select(Service).where(Service.id == service_id))
    check_not_found(res.scalars().first(), "Service", service_id)
    res = await db.execute(select(Zone).where(Zone.id == zone_id))
    check_not_found(res.scalars().first(), "Zone", zone_id)

    res = await db.execute(
        select(ServiceZonePrice).where(
            ServiceZonePrice.service_id == service_id,
            ServiceZonePrice.zone_id == zone_id,
        )
    )
    price = res.scalars().first()

    if price:
        price.custom_price = payload.custom_price
        price.is_active = payload.is_active
    else:
        price = ServiceZonePrice(
            service_id=service_id,
            zone_id=zone_id,
            custom_price=payload.custom_price,
            is_active=payload.is_active,
        )

    db.add(price)
    await db.commit()
    await db.refresh(price)
    await invalidate_price_cache()

    logger.info(f"Zone price for service {service_id} in zone {zone_id} set to {price.custom_price}")
    return build_zone_price_response(price)


@router.delete("/{service_id}/zone-prices/{zone_id}")
async def delete_zone_price(
    service_id: str,
    zone_id: str,
    db: AsyncSession = Depends(get_db),
):
    res = await db.execute(
        select(ServiceZonePrice).where(
            ServiceZonePrice.service_id == service_id,
            ServiceZonePrice.zone_id == zone_id,
        )
    )
    price = res.scalars().first()
    check_not_found(price, "Zone price")

    await db.delete(price)
    await db.commit()
    await invalidate_price_cache()

    return {"deleted": True}
