"""
Supabase Inspection Store
Reads properties (roofs), completed inspections and seasonal preferences
from the platform's Supabase project.
"""
import logging
from typing import Any, Dict, List, Optional

from supabase import AsyncClient, acreate_client

from portfolio_engine.core.exceptions import StoreError
from portfolio_engine.schemas.grouping import SeasonalPreference
from portfolio_engine.schemas.property import InspectionRecord, InspectionReport, Property
from portfolio_engine.services.inspection_store import InspectionStore, properties_from_rows

logger = logging.getLogger(__name__)

INSPECTION_HISTORY_SELECT = """
    id,
    completed_date,
    inspection_type,
    status,
    notes,
    weather_conditions,
    roof_id,
    roofs!roof_id(property_name),
    inspection_reports(findings, recommendations, priority_level, estimated_cost)
"""


class SupabaseInspectionStore(InspectionStore):
    """InspectionStore over the Supabase REST API (async client)"""

    def __init__(self, url: str, key: str):
        self.url = url
        self.key = key
        self._client: Optional[AsyncClient] = None

    async def _get_client(self) -> AsyncClient:
        """Create the async client on first use"""
        if self._client is None:
            try:
                self._client = await acreate_client(self.url, self.key)
                logger.info("[STORE] Supabase client initialized successfully")
            except Exception as e:
                logger.error(f"[STORE] Failed to initialize Supabase client: {e}")
                raise StoreError("connect", e) from e
        return self._client

    async def get_inspection_history(self, property_id: str) -> List[InspectionRecord]:
        """
        Completed inspections for a roof, newest first

        Args:
            property_id: Roof ID

        Returns:
            Inspection records with their linked reports
        """
        client = await self._get_client()
        try:
            response = await (
                client.table("inspections")
                .select(INSPECTION_HISTORY_SELECT)
                .eq("roof_id", property_id)
                .not_.is_("completed_date", "null")
                .order("completed_date", desc=True)
                .execute()
            )
        except Exception as e:
            logger.error(f"[STORE] Inspection history fetch failed for {property_id}: {e}")
            raise StoreError("get_inspection_history", e) from e

        return [self._record_from_row(row) for row in response.data or []]

    async def list_properties(self, filters: Optional[Dict[str, Any]] = None) -> List[Property]:
        """
        All roofs, optionally filtered

        Args:
            filters: Column/value pairs matched with equality

        Returns:
            Property records
        """
        client = await self._get_client()
        try:
            query = client.table("roofs").select("*").not_.is_("id", "null")
            for column, value in (filters or {}).items():
                query = query.eq(column, value)
            response = await query.execute()
        except Exception as e:
            logger.error(f"[STORE] Property listing failed: {e}")
            raise StoreError("list_properties", e) from e

        return properties_from_rows(response.data or [])

    async def get_property(self, property_id: str) -> Optional[Property]:
        """Single roof by ID"""
        client = await self._get_client()
        try:
            response = await (
                client.table("roofs").select("*").eq("id", property_id).limit(1).execute()
            )
        except Exception as e:
            logger.error(f"[STORE] Property fetch failed for {property_id}: {e}")
            raise StoreError("get_property", e) from e

        rows = response.data or []
        return Property.model_validate(rows[0]) if rows else None

    async def get_seasonal_preferences(
        self, client_id: Optional[str], region: Optional[str]
    ) -> Optional[SeasonalPreference]:
        """Stored seasonal preference for a client/region pair"""
        client = await self._get_client()
        try:
            query = client.table("seasonal_preferences").select("*")
            query = query.eq("client_id", client_id) if client_id else query.is_("client_id", "null")
            query = query.eq("region", region) if region else query.is_("region", "null")
            response = await query.execute()
        except Exception as e:
            logger.error(f"[STORE] Seasonal preference fetch failed: {e}")
            raise StoreError("get_seasonal_preferences", e) from e

        rows = response.data or []
        return SeasonalPreference.model_validate(rows[0]) if rows else None

    @staticmethod
    def _record_from_row(row: Dict[str, Any]) -> InspectionRecord:
        roof = row.get("roofs") or {}
        return InspectionRecord(
            id=row["id"],
            property_id=row["roof_id"],
            property_name=roof.get("property_name"),
            completed_date=row["completed_date"],
            inspection_type=row.get("inspection_type"),
            status=row.get("status"),
            notes=row.get("notes"),
            weather_conditions=row.get("weather_conditions"),
            weather_damage=row.get("weather_damage"),
            reports=[InspectionReport.model_validate(r) for r in row.get("inspection_reports") or []],
        )
