from portfolio_engine.services.geo import distance, has_coordinates
from portfolio_engine.services.inspection_store import InspectionStore, SQLAlchemyInspectionStore, get_store
from portfolio_engine.services.risk_analysis import RiskAnalysisEngine
from portfolio_engine.services.grouping_service import GroupingService
from portfolio_engine.services.route_optimizer import RouteOptimizer

__all__ = [
    "distance",
    "has_coordinates",
    "InspectionStore",
    "SQLAlchemyInspectionStore",
    "get_store",
    "RiskAnalysisEngine",
    "GroupingService",
    "RouteOptimizer",
]
