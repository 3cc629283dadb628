"""
Inspection Store
Read-only access to properties, inspection history and seasonal preferences.

The engine depends only on the InspectionStore interface. Two backends:
  - SQLAlchemyInspectionStore : local SQLite / PostgreSQL read models
  - SupabaseInspectionStore   : the platform's remote store (supabase_store.py)
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError
from sqlalchemy.orm import selectinload, sessionmaker

from portfolio_engine.core.config import get_settings
from portfolio_engine.core.exceptions import StoreError, StoreNotConfiguredError
from portfolio_engine.models.inspection import Inspection
from portfolio_engine.models.roof import Roof
from portfolio_engine.models.seasonal import SeasonalPreference as SeasonalPreferenceRow
from portfolio_engine.schemas.grouping import SeasonalPreference
from portfolio_engine.schemas.property import InspectionRecord, InspectionReport, Property

logger = logging.getLogger(__name__)


class InspectionStore(ABC):
    """Interface the engine reads through. All methods may raise StoreError."""

    @abstractmethod
    async def get_inspection_history(self, property_id: str) -> List[InspectionRecord]:
        """Completed inspections for a property, newest first."""

    @abstractmethod
    async def list_properties(self, filters: Optional[Dict[str, Any]] = None) -> List[Property]:
        """All properties, optionally filtered by exact column values."""

    @abstractmethod
    async def get_property(self, property_id: str) -> Optional[Property]:
        """A single property, or None when it does not exist."""

    @abstractmethod
    async def get_seasonal_preferences(
        self, client_id: Optional[str], region: Optional[str]
    ) -> Optional[SeasonalPreference]:
        """Stored preference for a client/region pair, or None."""


class SQLAlchemyInspectionStore(InspectionStore):
    """Store backed by the SQLAlchemy read models in portfolio_engine.models."""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    async def get_inspection_history(self, property_id: str) -> List[InspectionRecord]:
        return await self._run("get_inspection_history", self._inspection_history, property_id)

    async def list_properties(self, filters: Optional[Dict[str, Any]] = None) -> List[Property]:
        return await self._run("list_properties", self._list_properties, filters or {})

    async def get_property(self, property_id: str) -> Optional[Property]:
        return await self._run("get_property", self._get_property, property_id)

    async def get_seasonal_preferences(
        self, client_id: Optional[str], region: Optional[str]
    ) -> Optional[SeasonalPreference]:
        return await self._run("get_seasonal_preferences", self._seasonal_preferences, client_id, region)

    # ─────────────────────────── Internals ───────────────────────────

    async def _run(self, operation: str, func, *args):
        """Run a blocking query in a worker thread, wrapping driver errors."""
        try:
            return await asyncio.to_thread(func, *args)
        except StoreError:
            raise
        except Exception as exc:
            logger.error(f"[STORE] {operation} failed: {exc}")
            raise StoreError(operation, exc) from exc

    def _inspection_history(self, property_id: str) -> List[InspectionRecord]:
        with self.session_factory() as db:
            rows = (
                db.query(Inspection)
                .options(selectinload(Inspection.reports), selectinload(Inspection.roof))
                .filter(
                    Inspection.roof_id == property_id,
                    Inspection.completed_date.isnot(None),
                )
                .order_by(Inspection.completed_date.desc())
                .all()
            )
            return [self._record_from_row(row) for row in rows]

    def _list_properties(self, filters: Dict[str, Any]) -> List[Property]:
        with self.session_factory() as db:
            query = db.query(Roof)
            for column, value in filters.items():
                if not hasattr(Roof, column):
                    logger.warning(f"[STORE] Ignoring unknown property filter '{column}'")
                    continue
                query = query.filter(getattr(Roof, column) == value)
            return properties_from_rows(query.order_by(Roof.property_name).all())

    def _get_property(self, property_id: str) -> Optional[Property]:
        with self.session_factory() as db:
            row = db.query(Roof).filter(Roof.id == property_id).first()
            return Property.model_validate(row) if row else None

    def _seasonal_preferences(
        self, client_id: Optional[str], region: Optional[str]
    ) -> Optional[SeasonalPreference]:
        with self.session_factory() as db:
            row = (
                db.query(SeasonalPreferenceRow)
                .filter(
                    SeasonalPreferenceRow.client_id == client_id,
                    SeasonalPreferenceRow.region == region,
                )
                .first()
            )
            return SeasonalPreference.model_validate(row) if row else None

    @staticmethod
    def _record_from_row(row: Inspection) -> InspectionRecord:
        return InspectionRecord(
            id=row.id,
            property_id=row.roof_id,
            property_name=row.roof.property_name if row.roof else None,
            completed_date=row.completed_date,
            inspection_type=row.inspection_type,
            status=row.status,
            notes=row.notes,
            weather_conditions=row.weather_conditions,
            weather_damage=row.weather_damage,
            reports=[InspectionReport.model_validate(r) for r in row.reports],
        )


def properties_from_rows(rows: Iterable[Any]) -> List[Property]:
    """Validate rows one by one; a malformed row is logged and skipped."""
    properties: List[Property] = []
    for row in rows:
        try:
            properties.append(Property.model_validate(row))
        except ValidationError as exc:
            row_id = row.get("id") if isinstance(row, dict) else getattr(row, "id", None)
            logger.warning(f"[STORE] Skipping malformed property {row_id}: {exc.error_count()} validation errors")
    return properties


def get_store(config=None) -> InspectionStore:
    """Build the store selected by STORE_BACKEND."""
    if config is None:
        config = get_settings()

    backend = config.store_backend
    if backend == "supabase":
        if not config.supabase_configured:
            raise StoreNotConfiguredError("STORE_BACKEND=supabase requires SUPABASE_URL and SUPABASE_KEY")
        from portfolio_engine.services.supabase_store import SupabaseInspectionStore

        return SupabaseInspectionStore(config.SUPABASE_URL, config.SUPABASE_KEY)
    if backend == "sql":
        from portfolio_engine.database import SessionLocal

        return SQLAlchemyInspectionStore(SessionLocal)
    raise StoreNotConfiguredError(f"Unknown STORE_BACKEND '{config.STORE_BACKEND}'")


__all__ = [
    "InspectionStore",
    "SQLAlchemyInspectionStore",
    "get_store",
    "properties_from_rows",
]
