"""
Risk Analysis Schemas
Derived, ephemeral outputs of the risk analysis engine.
"""
from datetime import datetime
from enum import Enum
from typing import List
from pydantic import BaseModel, Field


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class RecommendationType(str, Enum):
    PREVENTIVE = "preventive"
    CORRECTIVE = "corrective"
    EMERGENCY = "emergency"


class TrendDirection(str, Enum):
    IMPROVING = "improving"
    STABLE = "stable"
    DECLINING = "declining"


PRIORITY_RANK = {
    Priority.CRITICAL: 4,
    Priority.HIGH: 3,
    Priority.MEDIUM: 2,
    Priority.LOW: 1,
}


class Recommendation(BaseModel):
    id: str
    type: RecommendationType
    priority: Priority
    description: str
    estimated_cost: float
    timeframe: str                                  # e.g. "3-6 months"
    risk_reduction: float = Field(..., ge=0, le=100)


class TrendAnalysis(BaseModel):
    metric: str
    direction: TrendDirection
    change_rate: float                              # percent
    timeframe: str
    significance_level: float = Field(..., ge=0, le=1)


class RiskAnalysis(BaseModel):
    property_id: str
    property_name: str
    risk_score: float = Field(..., ge=0, le=100)
    risk_level: RiskLevel
    predicted_maintenance_date: datetime
    recommendations: List[Recommendation] = []
    trends: List[TrendAnalysis] = []
    cost_estimate: float
    confidence_score: float = Field(..., ge=0, le=1)
