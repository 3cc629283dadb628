from portfolio_engine.schemas.property import Property, InspectionRecord, InspectionReport
from portfolio_engine.schemas.risk import (
    RiskAnalysis, Recommendation, TrendAnalysis,
    RiskLevel, Priority, RecommendationType, TrendDirection, PRIORITY_RANK,
)
from portfolio_engine.schemas.grouping import (
    PropertyGroup, GroupingResponse, GroupMetadata, GroupType, GroupingRules, GroupingConfiguration,
    SeasonalRestrictions, SeasonalPreference, MonthRecommendation,
    GeographicGroupingRequest, ManagerGroupingRequest, RiskGroupingRequest, CustomGroupingRequest,
)
from portfolio_engine.schemas.route import RouteResult, RouteOptimization, RouteRequest, RoutePlanRequest

__all__ = [
    "Property",
    "InspectionRecord",
    "InspectionReport",
    "RiskAnalysis",
    "Recommendation",
    "TrendAnalysis",
    "RiskLevel",
    "Priority",
    "RecommendationType",
    "TrendDirection",
    "PRIORITY_RANK",
    "PropertyGroup",
    "GroupingResponse",
    "GroupMetadata",
    "GroupType",
    "GroupingRules",
    "GroupingConfiguration",
    "SeasonalRestrictions",
    "SeasonalPreference",
    "MonthRecommendation",
    "GeographicGroupingRequest",
    "ManagerGroupingRequest",
    "RiskGroupingRequest",
    "CustomGroupingRequest",
    "RouteResult",
    "RouteOptimization",
    "RouteRequest",
    "RoutePlanRequest",
]
