"""
Grouping Schemas
Property groups, custom grouping rules and seasonal scheduling tables.
"""
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional
from pydantic import BaseModel, Field

from portfolio_engine.schemas.property import Property


class GroupType(str, Enum):
    GEOGRAPHIC = "geographic"
    PROPERTY_MANAGER = "property_manager"
    SEASONAL = "seasonal"
    RISK_BASED = "risk_based"
    CUSTOM = "custom"


class GroupMetadata(BaseModel):
    center_lat: Optional[float] = None
    center_lng: Optional[float] = None
    total_area: Optional[float] = None
    average_distance: Optional[float] = None     # miles, member -> centroid
    property_manager: Optional[str] = None
    risk_score: Optional[float] = None           # mean member score
    optimization_score: Optional[float] = None   # 0-100, informational


class PropertyGroup(BaseModel):
    id: str
    name: str
    group_type: GroupType
    properties: List[Property]
    metadata: GroupMetadata = Field(default_factory=GroupMetadata)
    created_at: datetime
    updated_at: datetime


class GroupingResponse(BaseModel):
    """Groups plus the properties that could not be placed in any of them."""
    groups: List[PropertyGroup] = []
    excluded_property_ids: List[str] = []   # no coordinates


# --- Custom rules ---

class SeasonalRestrictions(BaseModel):
    avoid_months: List[int] = []
    preferred_months: List[int] = []


class GroupingRules(BaseModel):
    max_group_size: int = Field(8, ge=1)
    max_distance_miles: float = Field(25.0, gt=0)
    prefer_same_pm: bool = False
    priority_by_risk: bool = False
    avoid_weather_conditions: List[str] = []
    seasonal_restrictions: SeasonalRestrictions = Field(default_factory=SeasonalRestrictions)


class GroupingConfiguration(BaseModel):
    id: Optional[str] = None
    client_id: Optional[str] = None
    name: str = "Custom"
    rules: GroupingRules = Field(default_factory=GroupingRules)
    is_active: bool = True
    priority: int = 1


# --- Seasonal scheduling ---

class SeasonalPreference(BaseModel):
    client_id: Optional[str] = None
    region: Optional[str] = None
    season: Optional[str] = None
    preferred_months: List[int] = []
    avoid_conditions: List[str] = []
    optimal_temperature_range: Optional[Dict[str, float]] = None

    model_config = {"from_attributes": True}


class MonthRecommendation(BaseModel):
    month: int = Field(..., ge=1, le=12)
    recommended: bool
    conditions: List[str] = []


# ============================================
# REQUEST SCHEMAS
# ============================================

class GeographicGroupingRequest(BaseModel):
    properties: List[Property]
    max_group_size: Optional[int] = Field(None, ge=1)
    max_distance: Optional[float] = Field(None, gt=0)


class ManagerGroupingRequest(BaseModel):
    properties: List[Property]


class RiskGroupingRequest(BaseModel):
    properties: List[Property]
    risk_scores: Optional[Dict[str, float]] = None


class CustomGroupingRequest(BaseModel):
    properties: List[Property]
    configuration: GroupingConfiguration = Field(default_factory=GroupingConfiguration)
    risk_scores: Optional[Dict[str, float]] = None
    target_month: Optional[int] = Field(None, ge=1, le=12)
