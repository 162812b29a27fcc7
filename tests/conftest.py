"""
Pytest configuration for the sales engine tests.

Every test gets its own file-backed SQLite database so that several
sessions (one per simulated request) can run against it concurrently.
"""

from __future__ import annotations

import uuid
from decimal import Decimal

import httpx
import pytest

from app.core.config import settings
from app.db.base import Base, build_engine, build_session_factory, get_db
from app.domain import Status, Vehicle

API_TOKEN = "test-token"
ACTOR_ID = "rep-1"

_STATUSES = [
    # name, slug, is_default
    ("Available", "available", True),
    ("Reserved", "reserved", False),
    ("Pending", "pending", False),
    ("Sold", "sold", False),
]


@pytest.fixture
async def engine(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'sales.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def statuses(session_factory) -> dict[str, Status]:
    rows = {
        slug: Status(name=name, slug=slug, is_default=is_default, active=True)
        for name, slug, is_default in _STATUSES
    }
    async with session_factory() as session:
        session.add_all(rows.values())
        await session.commit()
    return rows


@pytest.fixture
def make_vehicle(session_factory, statuses):
    """Insert a vehicle on the given status slug (None for no status)."""

    async def _make(status: str | None = "available", acquisition_cost: str | None = "600.00") -> Vehicle:
        vehicle = Vehicle(
            stock_number=f"STK-{uuid.uuid4().hex[:8]}",
            vin="2HGFC2F59JH000001",
            year=2022,
            list_price=Decimal("1000.00"),
            acquisition_cost=Decimal(acquisition_cost) if acquisition_cost else None,
            status_id=statuses[status].id if status else None,
        )
        async with session_factory() as session:
            session.add(vehicle)
            await session.commit()
        return vehicle

    return _make


@pytest.fixture
def load_vehicle(session_factory):
    """Read a vehicle back through a fresh session."""

    async def _load(vehicle_id: str) -> Vehicle:
        async with session_factory() as session:
            return await session.get(Vehicle, vehicle_id)

    return _load


@pytest.fixture
async def app(session_factory, monkeypatch):
    from app.main import app as fastapi_app

    async def _get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    monkeypatch.setattr(settings, "api_tokens", {API_TOKEN: ACTOR_ID})
    fastapi_app.dependency_overrides[get_db] = _get_db
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(
        transport=transport,
        base_url="http://test",
        headers={"Authorization": f"Bearer {API_TOKEN}"},
    ) as client:
        yield client
