# Import all models in dependency order so relationships resolve
from portfolio_engine.models.roof import Roof
from portfolio_engine.models.inspection import Inspection, InspectionReport, InspectionStatus
from portfolio_engine.models.seasonal import SeasonalPreference

__all__ = [
    "Roof",
    "Inspection",
    "InspectionReport",
    "InspectionStatus",
    "SeasonalPreference",
]
