"""Zone-based price resolution.

A quote starts from the service's base price. If the customer's coordinate
falls inside an active zone, either a per-(service, zone) override or the
zone's own rule adjusts it. The breakdown always satisfies
``total == base + zone_adjustment``.
"""
import logging
import math
from typing import Iterable, Optional, Tuple

from app.core.enums import PricingSource, PricingType, ZoneType
from app.core.errors import NotFoundError, PricingError
from app.core.metrics import price_resolution_failures, price_resolutions
from app.repositories.pricing import PricingRepository
from app.schemas.quote import Coordinates, PriceBreakdown, QuoteResponse
from app.services.geo import zone_contains

logger = logging.getLogger(__name__)


def _match_rank(zone) -> Tuple[int, float, str]:
    # higher priority first, then the tighter circle, polygons after circles
    radius = zone.radius_meters if zone.zone_type == ZoneType.CIRCLE and zone.radius_meters else math.inf
    return (-(zone.priority or 0), radius, str(zone.id))


def select_zone(zones: Iterable, coordinates: Coordinates):
    """Pick the zone containing ``coordinates``; the order of ``zones`` does not matter."""
    matches = [z for z in zones if zone_contains(z, coordinates.lat, coordinates.lng)]
    if not matches:
        return None
    if len(matches) > 1:
        logger.debug(f"{len(matches)} zones contain ({coordinates.lat}, {coordinates.lng})")
    return min(matches, key=_match_rank)


def zone_adjustment(base_price: float, zone) -> Tuple[float, PricingSource]:
    if zone.pricing_type == PricingType.FIXED:
        if zone.fixed_price is None:
            return 0.0, PricingSource.ZONE_FIXED
        return zone.fixed_price - base_price, PricingSource.ZONE_FIXED

    if zone.pricing_type == PricingType.PERCENTAGE:
        multiplier = zone.multiplier if zone.multiplier is not None else 1.0
        return base_price * (multiplier - 1), PricingSource.ZONE_PERCENTAGE

    logger.warning(f"Zone {zone.id} has unknown pricing type {zone.pricing_type!r}")
    return 0.0, PricingSource.BASE


async def find_zone_for_coordinates(repository: PricingRepository, coordinates: Coordinates):
    zones = await repository.list_active_zones()
    return select_zone(zones, coordinates)


async def resolve_price(
    repository: PricingRepository,
    service_id: str,
    coordinates: Optional[Coordinates] = None,
) -> QuoteResponse:
    """Compute the quote for ``service_id`` at ``coordinates``.

    Raises NotFoundError for an unknown service and RemoteFailureError when a
    lookup fails. Nothing is retried and no partial result is returned.
    """
    try:
        service = await repository.get_service(service_id)
        if service is None:
            raise NotFoundError("Service", service_id)

        base_price = service.base_price
        adjustment = 0.0
        source = PricingSource.BASE
        zone = None

        if coordinates is not None:
            zone = await find_zone_for_coordinates(repository, coordinates)

        if zone is not None:
            override = await repository.get_override(service_id, zone.id)
            if override is not None:
                adjustment = override.custom_price - base_price
                source = PricingSource.OVERRIDE
            else:
                adjustment, source = zone_adjustment(base_price, zone)
    except PricingError as e:
        price_resolution_failures.labels(error=type(e).__name__).inc()
        raise

    total = base_price + adjustment
    price_resolutions.labels(source=source.value).inc()
    logger.info(
        f"Priced service {service_id} at {total} "
        f"(zone={zone.id if zone else None}, source={source})"
    )

    return QuoteResponse(
        service_id=service.id,
        service_name=service.name,
        base_price=base_price,
        zone_id=zone.id if zone else None,
        zone_name=zone.name if zone else None,
        zone_multiplier=zone.multiplier if zone else None,
        zone_fixed_price=zone.fixed_price if zone else None,
        final_price=total,
        reservation_price=service.reservation_price or 0.0,
        pricing_source=source,
        price_breakdown=PriceBreakdown(
            base=base_price,
            zone_adjustment=adjustment,
            total=total,
        ),
    )
