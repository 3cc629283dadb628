"""
Grouping Routes - build inspection batches from a property list
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends

from portfolio_engine.dependencies import get_grouping_service
from portfolio_engine.schemas.grouping import (
    CustomGroupingRequest,
    GeographicGroupingRequest,
    GroupingResponse,
    ManagerGroupingRequest,
    MonthRecommendation,
    PropertyGroup,
    RiskGroupingRequest,
)
from portfolio_engine.services.grouping_service import GroupingService

logger = logging.getLogger(__name__)
router = APIRouter(tags=["groups"])


@router.post("/geographic", response_model=GroupingResponse)
def group_geographic(
    request: GeographicGroupingRequest,
    service: GroupingService = Depends(get_grouping_service),
):
    """Proximity groups; properties without coordinates come back in excluded_property_ids."""
    groups = service.group_by_geographic_proximity(
        request.properties,
        max_group_size=request.max_group_size,
        max_distance=request.max_distance,
    )
    return GroupingResponse(groups=groups, excluded_property_ids=service.unlocated_ids(request.properties))


@router.post("/manager", response_model=List[PropertyGroup])
def group_by_manager(
    request: ManagerGroupingRequest,
    service: GroupingService = Depends(get_grouping_service),
):
    return service.group_by_property_manager(request.properties)


@router.post("/risk", response_model=List[PropertyGroup])
def group_by_risk(
    request: RiskGroupingRequest,
    service: GroupingService = Depends(get_grouping_service),
):
    return service.group_by_risk(request.properties, risk_scores=request.risk_scores)


@router.post("/custom", response_model=GroupingResponse)
def group_by_custom_rules(
    request: CustomGroupingRequest,
    service: GroupingService = Depends(get_grouping_service),
):
    config = request.configuration
    if not config.is_active:
        logger.info(f"[GROUPING] Configuration '{config.name}' is inactive; returning no groups")
        return GroupingResponse()
    groups = service.group_by_custom_rules(
        request.properties,
        rules=config.rules,
        risk_scores=request.risk_scores,
        target_month=request.target_month,
        name=config.name,
    )
    return GroupingResponse(groups=groups, excluded_property_ids=service.unlocated_ids(request.properties))


@router.get("/seasonal", response_model=List[MonthRecommendation])
async def seasonal_recommendations(
    client_id: Optional[str] = None,
    region: Optional[str] = None,
    service: GroupingService = Depends(get_grouping_service),
):
    """Month-by-month scheduling table for a client/region."""
    return await service.get_seasonal_recommendations(client_id, region)
