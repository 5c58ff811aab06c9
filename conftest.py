import fnmatch
import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")

import pytest
from types import SimpleNamespace
from typing import List, Optional
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.db.session import get_db
from app.models import Base
from app.core.enums import ZoneType, PricingType
from app.core.errors import RemoteFailureError
from app.repositories.pricing import PricingRepository
from app.core import redis as redis_module


TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")

engine_options = {}
if TEST_DATABASE_URL.startswith("sqlite"):
    # one shared in-memory database across sessions
    engine_options = {"connect_args": {"check_same_thread": False}, "poolclass": StaticPool}

test_engine = create_async_engine(
    TEST_DATABASE_URL,
    echo=False,
    future=True,
    **engine_options,
)

AsyncSessionTest = sessionmaker(
    test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    future=True
)


async def override_get_db():
    async with AsyncSessionTest() as session:
        yield session


@pytest.fixture
async def setup_db():

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await test_engine.dispose()


@pytest.fixture
async def test_client(setup_db):
    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


class InMemoryPricingRepository(PricingRepository):
    """Repository double backed by plain lists"""

    def __init__(self, services=None, zones=None, overrides=None, fail_on: Optional[str] = None):
        self.services = {s.id: s for s in (services or [])}
        self.zones = list(zones or [])
        self.overrides = list(overrides or [])
        self.fail_on = fail_on
        self.calls: List[str] = []

    def _record(self, operation: str):
        self.calls.append(operation)
        if self.fail_on == operation:
            raise RemoteFailureError(operation, ConnectionError("store unreachable"))

    async def get_service(self, service_id):
        self._record("get_service")
        return self.services.get(service_id)

    async def list_active_zones(self):
        self._record("list_active_zones")
        return [z for z in self.zones if z.is_active]

    async def get_override(self, service_id, zone_id):
        self._record("get_override")
        for o in self.overrides:
            if o.service_id == service_id and o.zone_id == zone_id and o.is_active:
                return o
        return None


def make_service(id="svc-1", name="Deep Cleaning", base_price=100.0, reservation_price=None):
    return SimpleNamespace(id=id, name=name, base_price=base_price, reservation_price=reservation_price)


def make_circle_zone(id="zone-1", name="Centro", lat=40.4168, lng=-3.7038, radius=5000.0,
                     pricing_type=PricingType.PERCENTAGE, multiplier=None, fixed_price=None,
                     priority=0, is_active=True):
    return SimpleNamespace(
        id=id, name=name, is_active=is_active, priority=priority,
        zone_type=ZoneType.CIRCLE, center_lat=lat, center_lng=lng, radius_meters=radius,
        coordinates=None, pricing_type=pricing_type, multiplier=multiplier, fixed_price=fixed_price,
    )


def make_polygon_zone(id="zone-poly", name="Square", coordinates=None,
                      pricing_type=PricingType.PERCENTAGE, multiplier=None, fixed_price=None,
                      priority=0, is_active=True):
    if coordinates is None:
        coordinates = [[-4.0, 40.0], [-3.0, 40.0], [-3.0, 41.0], [-4.0, 41.0]]
    return SimpleNamespace(
        id=id, name=name, is_active=is_active, priority=priority,
        zone_type=ZoneType.POLYGON, center_lat=None, center_lng=None, radius_meters=None,
        coordinates=coordinates, pricing_type=pricing_type, multiplier=multiplier, fixed_price=fixed_price,
    )


def make_override(service_id="svc-1", zone_id="zone-1", custom_price=75.0, is_active=True):
    return SimpleNamespace(service_id=service_id, zone_id=zone_id, custom_price=custom_price, is_active=is_active)


class FakeRedis:
    """Enough of redis.asyncio.Redis for the cache and rate limiter"""

    def __init__(self):
        self.store = {}
        self.expiry = {}

    async def get(self, key):
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        self.store[key] = value.encode() if isinstance(value, str) else value
        self.expiry[key] = ex

    async def incr(self, key):
        value = int(self.store.get(key, 0)) + 1
        self.store[key] = str(value).encode()
        return value

    async def delete(self, key):
        return 1 if self.store.pop(key, None) is not None else 0

    async def scan_iter(self, match="*"):
        for key in list(self.store):
            if fnmatch.fnmatch(key, match):
                yield key


class UnreachableRedis:
    """Client whose connection dropped after startup"""

    async def _fail(self, *args, **kwargs):
        raise ConnectionError("redis gone")

    get = set = incr = delete = _fail

    async def scan_iter(self, match="*"):
        raise ConnectionError("redis gone")
        yield


@pytest.fixture
def fake_redis(monkeypatch):
    fake = FakeRedis()
    monkeypatch.setattr(redis_module, "redis", fake)
    return fake


@pytest.fixture
def unreachable_redis(monkeypatch):
    client = UnreachableRedis()
    monkeypatch.setattr(redis_module, "redis", client)
    return client


@pytest.fixture
def pricing_fixtures():
    """Builders for in-memory services, zones and overrides"""
    return SimpleNamespace(
        repository=InMemoryPricingRepository,
        service=make_service,
        circle_zone=make_circle_zone,
        polygon_zone=make_polygon_zone,
        override=make_override,
    )


@pytest.fixture
def valid_service_data():
    return {
        "name": "Deep Cleaning",
        "description": "Full apartment deep clean",
        "category": "cleaning",
        "base_price": 100.0,
        "duration_minutes": 120,
        "reservation_price": 20.0,
    }


@pytest.fixture
def circle_zone_data():
    return {
        "name": "Madrid Centro",
        "zone_type": "circle",
        "center_lat": 40.4168,
        "center_lng": -3.7038,
        "radius_meters": 5000.0,
        "pricing_type": "percentage",
        "multiplier": 1.2,
    }


@pytest.fixture
def polygon_zone_data():
    return {
        "name": "Outskirts",
        "zone_type": "polygon",
        "coordinates": [[-4.0, 40.0], [-3.0, 40.0], [-3.0, 41.0], [-4.0, 41.0]],
        "pricing_type": "fixed",
        "fixed_price": 80.0,
    }


@pytest.fixture
def create_service_factory(test_client, valid_service_data):
    async def _create_service(**kwargs):
        data = dict(valid_service_data)
        data.update(kwargs)
        response = await test_client.post("/services/", json=data)
        return response.json() if response.status_code == 200 else None

    return _create_service


@pytest.fixture
def create_zone_factory(test_client, circle_zone_data):
    async def _create_zone(**kwargs):
        data = dict(circle_zone_data)
        data.update(kwargs)
        response = await test_client.post("/zones/", json=data)
        return response.json() if response.status_code == 200 else None

    return _create_zone


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
    config.addinivalue_line(
        "markers", "pricing: marks tests related to pricing"
    )
    config.addinivalue_line(
        "markers", "geo: marks tests related to zone geometry"
    )
    config.addinivalue_line(
        "markers", "crud: marks tests related to CRUD operations"
    )
