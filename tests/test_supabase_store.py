"""
Supabase store tests with a recording stand-in for the query builder.
"""
from types import SimpleNamespace

import pytest

from portfolio_engine.core.exceptions import StoreError
from portfolio_engine.services.risk_analysis import RiskAnalysisEngine
from portfolio_engine.services.supabase_store import INSPECTION_HISTORY_SELECT, SupabaseInspectionStore


class RecordingQuery:
    """Fluent builder that records every call and returns canned rows."""

    def __init__(self, table, rows, error=None):
        self.table_name = table
        self.rows = rows
        self.error = error
        self.calls = []

    @property
    def not_(self):
        self.calls.append(("not_",))
        return self

    def __getattr__(self, name):
        def _record(*args, **kwargs):
            self.calls.append((name, *args, *sorted(kwargs.items())))
            return self
        return _record

    async def execute(self):
        if self.error:
            raise self.error
        return SimpleNamespace(data=self.rows)


class RecordingClient:
    def __init__(self, rows_by_table, error=None):
        self.rows_by_table = rows_by_table
        self.error = error
        self.queries = []

    def table(self, name):
        query = RecordingQuery(name, self.rows_by_table.get(name, []), self.error)
        self.queries.append(query)
        return query


def _store(rows_by_table, error=None):
    store = SupabaseInspectionStore("https://example.supabase.co", "anon-key")
    store._client = RecordingClient(rows_by_table, error)
    return store


async def test_inspection_history_maps_rows():
    store = _store({
        "inspections": [
            {
                "id": "i1",
                "roof_id": "r1",
                "completed_date": "2025-05-01T10:00:00+00:00",
                "notes": "Loose flashing",
                "weather_damage": None,
                "roofs": {"property_name": "Oak Plaza"},
                "inspection_reports": [{"findings": "Flashing loose", "priority_level": "low"}],
            }
        ]
    })

    history = await store.get_inspection_history("r1")

    assert history[0].property_name == "Oak Plaza"
    assert history[0].reports[0].priority_level == "low"
    query = store._client.queries[0]
    assert query.table_name == "inspections"
    assert ("eq", "roof_id", "r1") in query.calls
    assert ("is_", "completed_date", "null") in query.calls
    assert ("order", "completed_date", ("desc", True)) in query.calls


async def test_list_properties_applies_filters():
    store = _store({"roofs": [{"id": "r1", "property_name": "Oak Plaza", "extra_column": 1}]})

    properties = await store.list_properties({"region": "north"})

    assert [p.id for p in properties] == ["r1"]
    assert ("eq", "region", "north") in store._client.queries[0].calls


async def test_get_property_missing():
    assert await _store({"roofs": []}).get_property("nope") is None


async def test_seasonal_preferences_null_region():
    store = _store({"seasonal_preferences": [{"client_id": "c1", "preferred_months": [4], "avoid_conditions": []}]})

    preference = await store.get_seasonal_preferences("c1", None)

    assert preference.preferred_months == [4]
    calls = store._client.queries[0].calls
    assert ("eq", "client_id", "c1") in calls
    assert ("is_", "region", "null") in calls


async def test_errors_are_wrapped():
    store = _store({}, error=ConnectionError("refused"))
    with pytest.raises(StoreError) as exc_info:
        await store.get_inspection_history("r1")
    assert exc_info.value.operation == "get_inspection_history"
    assert isinstance(exc_info.value.cause, ConnectionError)


# ── Rows shaped like the platform tables ────────────────────────────────────

def _platform_roof(roof_id, **overrides):
    row = {
        "id": roof_id,
        "property_name": f"Roof {roof_id}",
        "address": "100 Main St",
        "city": "Dallas",
        "state": "TX",
        "client_id": None,
        "latitude": 32.78,
        "longitude": -96.80,
        "roof_area": 12500.5,
        "roof_area_unit": "sq ft",
        "roof_type": "TPO",
        "roof_rating": 6.5,
        "safety_concerns": None,
        "customer_sensitivity": None,
        "has_solar": None,
        "is_deleted": False,
        "install_year": 2004,
        "last_inspection_date": "2024-09-12",
        "property_manager_name": None,
        "property_manager_mobile": None,
        "created_at": "2024-01-01T00:00:00+00:00",
        "updated_at": "2024-01-01T00:00:00+00:00",
    }
    row.update(overrides)
    return row


def _platform_inspection(inspection_id, roof_id, completed_date, notes=None, weather_conditions=None):
    # inspections has no weather_damage column
    return {
        "id": inspection_id,
        "roof_id": roof_id,
        "completed_date": completed_date,
        "inspection_type": "annual",
        "status": "completed",
        "notes": notes,
        "weather_conditions": weather_conditions,
        "roofs": {"property_name": f"Roof {roof_id}"},
        "inspection_reports": [],
    }


def test_history_select_only_requests_existing_columns():
    columns = {c.strip() for c in INSPECTION_HISTORY_SELECT.split(",")}
    assert "weather_damage" not in columns
    assert {"notes", "weather_conditions", "completed_date", "roof_id"} <= columns


async def test_weather_damage_derived_from_conditions_text():
    store = _store({
        "inspections": [
            _platform_inspection("i1", "r1", "2025-05-01T10:00:00+00:00", weather_conditions="Post hail storm"),
        ]
    })

    history = await store.get_inspection_history("r1")

    assert history[0].weather_damage is None
    assert RiskAnalysisEngine.has_weather_damage(history[0]) is True


async def test_nullable_and_fractional_roof_columns():
    store = _store({"roofs": [_platform_roof("r1")]})

    properties = await store.list_properties()

    assert properties[0].safety_concerns is False
    assert properties[0].roof_rating == 6.5
    assert properties[0].roof_area == 12500.5


async def test_malformed_roof_row_is_skipped():
    store = _store({
        "roofs": [
            _platform_roof("r1"),
            _platform_roof("r2", latitude="north of the river"),
            _platform_roof("r3", safety_concerns=True, roof_rating=3),
        ]
    })

    properties = await store.list_properties()

    assert [p.id for p in properties] == ["r1", "r3"]


async def test_sweep_survives_one_malformed_roof(now, test_settings):
    store = _store({
        "roofs": [
            _platform_roof("r1"),
            _platform_roof("bad", longitude={"lng": -96.8}),
        ],
        "inspections": [
            _platform_inspection("i2", "r1", "2025-05-01T10:00:00+00:00", notes="Minor wear at seams"),
            _platform_inspection("i1", "r1", "2024-05-01T10:00:00+00:00", notes="Roof in good condition"),
        ],
    })
    engine = RiskAnalysisEngine(store, test_settings, now=now)

    analyses = await engine.analyze_portfolio()

    assert [a.property_id for a in analyses] == ["r1"]
    assert analyses[0].property_name == "Roof r1"
