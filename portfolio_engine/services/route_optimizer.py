"""
Route Optimizer
Greedy nearest-neighbor visiting order for a single inspector.

Estimated time = total_distance / speed_mph × 60 + stops × on_site_minutes
(defaults: 30 mph, 45 minutes per stop). No backtracking, time windows or
traffic; this is a fast heuristic, not a tour solver.
"""
import logging
import math
from datetime import date
from typing import List, Optional

from portfolio_engine.core.config import Settings, get_settings
from portfolio_engine.schemas.property import Property
from portfolio_engine.schemas.route import RouteOptimization, RouteResult
from portfolio_engine.services.geo import distance, split_by_coordinates

logger = logging.getLogger(__name__)


class RouteOptimizer:
    """Nearest-neighbor route construction."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def optimize_route(
        self,
        properties: List[Property],
        start_lat: float,
        start_lng: float,
    ) -> RouteResult:
        """
        Order properties by repeatedly travelling to the closest unvisited one.

        Ties go to the property listed first. Properties without coordinates
        are returned in ``skipped`` and never placed in the order.
        """
        unvisited, skipped = split_by_coordinates(properties)
        if skipped:
            logger.warning(
                f"[ROUTE] {len(skipped)} properties lack coordinates and were left off the route"
            )

        order: List[Property] = []
        total_distance = 0.0
        current_lat, current_lng = start_lat, start_lng

        while unvisited:
            nearest_index = 0
            nearest_distance = math.inf
            for index, prop in enumerate(unvisited):
                leg = distance(current_lat, current_lng, prop.latitude, prop.longitude)
                if leg < nearest_distance:
                    nearest_distance = leg
                    nearest_index = index

            nearest = unvisited.pop(nearest_index)
            order.append(nearest)
            total_distance += nearest_distance
            current_lat, current_lng = nearest.latitude, nearest.longitude

        return RouteResult(
            order=order,
            total_distance=total_distance,
            estimated_minutes=self.estimate_minutes(total_distance, len(order)),
            skipped=skipped,
        )

    def estimate_minutes(self, total_distance: float, stops: int) -> float:
        travel = total_distance / self.settings.AVERAGE_TRAVEL_SPEED_MPH * 60
        return travel + stops * self.settings.ON_SITE_MINUTES

    def plan_route(
        self,
        inspector_id: str,
        route_date: date,
        properties: List[Property],
        start_lat: float,
        start_lng: float,
    ) -> RouteOptimization:
        """Optimize and package the result as a persistable route plan."""
        result = self.optimize_route(properties, start_lat, start_lng)
        return RouteOptimization(
            inspector_id=inspector_id,
            route_date=route_date,
            property_sequence=[p.id for p in result.order],
            estimated_travel_time=result.estimated_minutes,
            total_distance=result.total_distance,
            optimization_score=self.workday_fit_score(result.estimated_minutes),
            skipped_property_ids=[p.id for p in result.skipped],
        )

    def workday_fit_score(self, estimated_minutes: float) -> float:
        """100 when the route fits in one workday, scaled down proportionally beyond it."""
        if estimated_minutes <= 0:
            return 100.0
        return round(100 * min(1.0, self.settings.WORKDAY_MINUTES / estimated_minutes), 1)
