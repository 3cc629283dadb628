"""
Risk Routes - per-property and portfolio risk analysis
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from portfolio_engine.dependencies import get_risk_engine
from portfolio_engine.schemas.risk import RiskAnalysis
from portfolio_engine.services.risk_analysis import RiskAnalysisEngine

logger = logging.getLogger(__name__)
router = APIRouter(tags=["risk"])


@router.get("/portfolio", response_model=List[RiskAnalysis])
async def analyze_portfolio(engine: RiskAnalysisEngine = Depends(get_risk_engine)):
    """All analyzable properties, highest risk first."""
    return await engine.analyze_portfolio()


@router.get("/properties/{property_id}", response_model=RiskAnalysis)
async def analyze_property(
    property_id: str,
    engine: RiskAnalysisEngine = Depends(get_risk_engine),
):
    """Risk analysis for one property; 404 when it has no completed inspections."""
    analysis = await engine.analyze_property(property_id)
    if analysis is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No completed inspections for this property",
        )
    return analysis
