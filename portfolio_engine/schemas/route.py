"""
Route Schemas
"""
from datetime import date
from typing import List
from pydantic import BaseModel, Field

from portfolio_engine.schemas.property import Property


class RouteResult(BaseModel):
    """Visiting order produced by the nearest-neighbor optimizer."""
    order: List[Property] = []
    total_distance: float = 0.0      # miles
    estimated_minutes: float = 0.0
    skipped: List[Property] = []     # no coordinates, never routed


class RouteOptimization(BaseModel):
    """Route plan in the shape the scheduling layer persists."""
    inspector_id: str
    route_date: date
    property_sequence: List[str] = []
    estimated_travel_time: float = 0.0   # minutes
    total_distance: float = 0.0          # miles
    optimization_score: float = 100.0
    skipped_property_ids: List[str] = []


# ============================================
# REQUEST SCHEMAS
# ============================================

class RouteRequest(BaseModel):
    properties: List[Property]
    start_lat: float = Field(..., ge=-90, le=90)
    start_lng: float = Field(..., ge=-180, le=180)


class RoutePlanRequest(RouteRequest):
    inspector_id: str
    route_date: date
