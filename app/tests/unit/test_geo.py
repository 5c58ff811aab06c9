import math
import pytest
from types import SimpleNamespace
from app.services.geo import haversine_distance, point_in_circle, point_in_polygon, zone_contains
from app.core.enums import ZoneType

SQUARE = [[-4.0, 40.0], [-3.0, 40.0], [-3.0, 41.0], [-4.0, 41.0]]


def circle(lat=40.0, lng=-3.0, radius=1000.0):
    return SimpleNamespace(zone_type=ZoneType.CIRCLE, center_lat=lat, center_lng=lng,
                           radius_meters=radius, coordinates=None)


@pytest.mark.geo
class TestHaversine:

    def test_same_point_is_zero(self):
        assert haversine_distance(40.4168, -3.7038, 40.4168, -3.7038) == 0.0

    def test_one_degree_of_latitude(self):
        # R * pi / 180
        expected = 6371000.0 * math.pi / 180
        assert haversine_distance(0.0, 0.0, 1.0, 0.0) == pytest.approx(expected)

    def test_symmetric(self):
        a = haversine_distance(40.4168, -3.7038, 41.3874, 2.1686)
        b = haversine_distance(41.3874, 2.1686, 40.4168, -3.7038)
        assert a == pytest.approx(b)
        # Madrid - Barcelona is roughly 505 km
        assert 500_000 < a < 510_000

    def test_custom_radius(self):
        assert haversine_distance(0.0, 0.0, 0.0, 180.0, radius=1.0) == pytest.approx(math.pi)


@pytest.mark.geo
class TestCircle:

    def test_center_is_inside(self):
        assert point_in_circle(40.0, -3.0, circle())

    def test_far_point_is_outside(self):
        assert not point_in_circle(41.0, -3.0, circle())

    def test_boundary_is_inside(self):
        # a zone whose radius is exactly the distance to the point
        distance = haversine_distance(40.0, -3.0, 40.01, -3.0)
        assert point_in_circle(40.01, -3.0, circle(radius=distance))
        assert not point_in_circle(40.01, -3.0, circle(radius=distance * 0.999999))

    @pytest.mark.parametrize("field", ["center_lat", "center_lng", "radius_meters"])
    def test_incomplete_circle_never_matches(self, field):
        zone = circle()
        setattr(zone, field, None)
        assert not point_in_circle(40.0, -3.0, zone)

    def test_center_on_equator_and_meridian(self):
        assert point_in_circle(0.0, 0.0, circle(lat=0.0, lng=0.0, radius=10.0))


@pytest.mark.geo
class TestPolygon:

    def test_inside(self):
        assert point_in_polygon(40.5, -3.5, SQUARE)

    def test_outside(self):
        assert not point_in_polygon(42.0, -3.5, SQUARE)
        assert not point_in_polygon(40.5, -2.0, SQUARE)

    def test_concave_notch(self):
        # U shape opening north; the notch between the arms is outside
        u_shape = [[0, 0], [3, 0], [3, 3], [2, 3], [2, 1], [1, 1], [1, 3], [0, 3]]
        assert point_in_polygon(2.0, 0.5, u_shape)
        assert not point_in_polygon(2.0, 1.5, u_shape)

    @pytest.mark.parametrize("vertices", [None, [], [[0, 0], [1, 1]], [["a", "b"], [1, 1], [2, 2]], [[0], [1], [2]]])
    def test_degenerate_polygons_never_match(self, vertices):
        assert not point_in_polygon(0.5, 0.5, vertices)

    def test_zone_contains_dispatches_on_type(self):
        poly = SimpleNamespace(zone_type=ZoneType.POLYGON, coordinates=SQUARE)
        assert zone_contains(poly, 40.5, -3.5)
        assert zone_contains(circle(), 40.0, -3.0)
        assert zone_contains(SimpleNamespace(zone_type="circle", center_lat=40.0, center_lng=-3.0,
                                             radius_meters=5.0), 40.0, -3.0)
        assert not zone_contains(SimpleNamespace(zone_type="hexagon"), 40.0, -3.0)
