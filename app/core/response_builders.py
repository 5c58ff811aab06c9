from app.models.service import Service
from app.models.zone import Zone
from app.models.service_zone_price import ServiceZonePrice
from app.schemas.service import ServiceOut
from app.schemas.zone import ZoneOut
from app.schemas.service_zone_price import ServiceZonePriceOut


def build_service_response(service: Service) -> ServiceOut:
    return ServiceOut(
        id=service.id,
        name=service.name,
        description=service.description,
        category=service.category,
        base_price=service.base_price,
        duration_minutes=service.duration_minutes,
        reservation_price=service.reservation_price,
        is_active=service.is_active,
        created_at=service.created_at,
        updated_at=service.updated_at,
    )


def build_zone_response(zone: Zone) -> ZoneOut:
    return ZoneOut(
        id=zone.id,
        name=zone.name,
        description=zone.description,
        color=zone.color,
        is_active=zone.is_active,
        priority=zone.priority,
        zone_type=zone.zone_type,
        center_lat=zone.center_lat,
        center_lng=zone.center_lng,
        radius_meters=zone.radius_meters,
        coordinates=zone.coordinates,
        pricing_type=zone.pricing_type,
        fixed_price=zone.fixed_price,
        multiplier=zone.multiplier,
        created_at=zone.created_at,
        updated_at=zone.updated_at,
    )


def build_zone_price_response(price: ServiceZonePrice) -> ServiceZonePriceOut:
    return ServiceZonePriceOut(
        id=price.id,
        service_id=price.service_id,
        zone_id=price.zone_id,
        custom_price=price.custom_price,
        is_active=price.is_active,
        created_at=price.created_at,
        updated_at=price.updated_at,
    )


def build_service_response_list(services: list) -> list:
    return [build_service_response(service) for service in services]


def build_zone_response_list(zones: list) -> list:
    return [build_zone_response(zone) for zone in zones]


def build_zone_price_response_list(prices: list) -> list:
    return [build_zone_price_response(price) for price in prices]
