"""
FastAPI dependencies wiring the services to the configured store.
"""
from functools import lru_cache

from fastapi import Depends

from portfolio_engine.core.config import settings
from portfolio_engine.services.grouping_service import GroupingService
from portfolio_engine.services.inspection_store import InspectionStore, get_store as build_store
from portfolio_engine.services.risk_analysis import RiskAnalysisEngine
from portfolio_engine.services.route_optimizer import RouteOptimizer


@lru_cache()
def get_store() -> InspectionStore:
    """Process-wide store built from settings; override in tests."""
    return build_store(settings)


def get_risk_engine(store: InspectionStore = Depends(get_store)) -> RiskAnalysisEngine:
    return RiskAnalysisEngine(store, settings)


def get_grouping_service(store: InspectionStore = Depends(get_store)) -> GroupingService:
    return GroupingService(store, settings)


def get_route_optimizer() -> RouteOptimizer:
    return RouteOptimizer(settings)
