"""
Pytest configuration and fixtures for the portfolio engine test suite.
"""
import os

os.environ.setdefault("TESTING", "true")
os.environ.setdefault("STORE_BACKEND", "sql")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import date, datetime, timedelta, timezone
from typing import Dict, List, Optional

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from portfolio_engine.core.config import Settings
from portfolio_engine.core.exceptions import StoreError
from portfolio_engine.db.base import Base
from portfolio_engine import models  # noqa: F401  registers tables
from portfolio_engine.schemas.grouping import SeasonalPreference
from portfolio_engine.schemas.property import InspectionRecord, InspectionReport, Property
from portfolio_engine.services.inspection_store import InspectionStore, SQLAlchemyInspectionStore

FIXED_NOW = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)


class FakeStore(InspectionStore):
    """In-memory store with per-property failure injection."""

    def __init__(self):
        self.properties: Dict[str, Property] = {}
        self.histories: Dict[str, List[InspectionRecord]] = {}
        self.preferences: Dict[tuple, SeasonalPreference] = {}
        self.failing_ids: set = set()
        self.fail_listing = False
        self.fail_preferences = False
        self.history_calls: List[str] = []

    def add(self, prop: Property, history: Optional[List[InspectionRecord]] = None):
        self.properties[prop.id] = prop
        self.histories[prop.id] = history or []

    async def get_inspection_history(self, property_id: str) -> List[InspectionRecord]:
        self.history_calls.append(property_id)
        if property_id in self.failing_ids:
            raise StoreError("get_inspection_history", RuntimeError("connection reset"))
        return list(self.histories.get(property_id, []))

    async def list_properties(self, filters=None) -> List[Property]:
        if self.fail_listing:
            raise StoreError("list_properties", RuntimeError("timeout"))
        return list(self.properties.values())

    async def get_property(self, property_id: str) -> Optional[Property]:
        return self.properties.get(property_id)

    async def get_seasonal_preferences(self, client_id, region) -> Optional[SeasonalPreference]:
        if self.fail_preferences:
            raise StoreError("get_seasonal_preferences", RuntimeError("timeout"))
        return self.preferences.get((client_id, region))


def make_inspection(
    property_id: str,
    days_ago: int,
    notes: str = "",
    weather_damage: Optional[bool] = False,
    priorities: tuple = (),
    property_name: Optional[str] = None,
    weather_conditions: Optional[str] = None,
) -> InspectionRecord:
    return InspectionRecord(
        id=f"{property_id}-insp-{days_ago}",
        property_id=property_id,
        property_name=property_name,
        completed_date=FIXED_NOW - timedelta(days=days_ago),
        status="completed",
        notes=notes,
        weather_conditions=weather_conditions,
        weather_damage=weather_damage,
        reports=[InspectionReport(priority_level=p, findings=f"{p} priority finding") for p in priorities],
    )


def make_property(prop_id: str, lat: Optional[float] = None, lng: Optional[float] = -96.80, **kwargs) -> Property:
    kwargs.setdefault("property_name", f"Property {prop_id}")
    kwargs.setdefault("city", "Dallas")
    kwargs.setdefault("state", "TX")
    return Property(id=prop_id, latitude=lat, longitude=lng if lat is not None else None, **kwargs)


@pytest.fixture
def now():
    return lambda: FIXED_NOW


@pytest.fixture
def test_settings():
    return Settings(TESTING=True, STORE_BACKEND="sql", DATABASE_URL="sqlite://")


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def session_factory():
    """Fresh in-memory SQLite database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield factory
    engine.dispose()


@pytest.fixture
def sql_store(session_factory):
    return SQLAlchemyInspectionStore(session_factory)


@pytest.fixture
def client(fake_store):
    """TestClient with the store dependency pointed at the fake store."""
    from fastapi.testclient import TestClient
    from portfolio_engine.dependencies import get_store
    from portfolio_engine.main import app

    app.dependency_overrides[get_store] = lambda: fake_store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def today():
    return date(2025, 6, 15)
