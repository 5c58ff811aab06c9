"""Geometry helpers for deciding whether a coordinate falls inside a zone."""
import logging
import math
from typing import Optional, Sequence

from app.core.config import settings
from app.core.enums import ZoneType

logger = logging.getLogger(__name__)


def haversine_distance(
    lat1: float,
    lng1: float,
    lat2: float,
    lng2: float,
    radius: Optional[float] = None,
) -> float:
    """Great-circle distance in meters between two points given in degrees."""
    if radius is None:
        radius = settings.EARTH_RADIUS_METERS
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return radius * c


def point_in_circle(lat: float, lng: float, zone) -> bool:
    if zone.center_lat is None or zone.center_lng is None or not zone.radius_meters:
        return False
    distance = haversine_distance(lat, lng, zone.center_lat, zone.center_lng)
    return distance <= zone.radius_meters


def point_in_polygon(lat: float, lng: float, vertices: Optional[Sequence]) -> bool:
    """Even-odd ray casting over ``[lng, lat]`` vertices in planar degrees.

    Points lying exactly on an edge may land on either side.
    """
    if not vertices or len(vertices) < 3:
        return False
    try:
        points = [(float(v[0]), float(v[1])) for v in vertices]
    except (TypeError, ValueError, IndexError):
        logger.warning(f"Ignoring polygon with malformed vertices: {vertices!r}")
        return False

    inside = False
    j = len(points) - 1
    for i in range(len(points)):
        xi, yi = points[i]
        xj, yj = points[j]
        if (yi > lat) != (yj > lat) and lng < (xj - xi) * (lat - yi) / (yj - yi) + xi:
            inside = not inside
        j = i
    return inside


def zone_contains(zone, lat: float, lng: float) -> bool:
    if zone.zone_type == ZoneType.CIRCLE:
        return point_in_circle(lat, lng, zone)
    if zone.zone_type == ZoneType.POLYGON:
        return point_in_polygon(lat, lng, zone.coordinates)
    return False
