"""
Routing Routes - nearest-neighbor visiting order for one inspector
"""
from fastapi import APIRouter, Depends

from portfolio_engine.dependencies import get_route_optimizer
from portfolio_engine.schemas.route import RouteOptimization, RoutePlanRequest, RouteRequest, RouteResult
from portfolio_engine.services.route_optimizer import RouteOptimizer

router = APIRouter(tags=["routes"])


@router.post("/optimize", response_model=RouteResult)
def optimize_route(
    request: RouteRequest,
    optimizer: RouteOptimizer = Depends(get_route_optimizer),
):
    return optimizer.optimize_route(request.properties, request.start_lat, request.start_lng)


@router.post("/plan", response_model=RouteOptimization)
def plan_route(
    request: RoutePlanRequest,
    optimizer: RouteOptimizer = Depends(get_route_optimizer),
):
    return optimizer.plan_route(
        request.inspector_id,
        request.route_date,
        request.properties,
        request.start_lat,
        request.start_lng,
    )
