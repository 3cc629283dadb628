"""
Property & Inspection Schemas
Typed input records supplied by the inspection store.
"""
from datetime import date, datetime
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator


class Property(BaseModel):
    """A roof/property in the managed portfolio."""
    id: str
    property_name: str = "Unknown Property"
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    roof_area: Optional[float] = None
    roof_type: Optional[str] = None
    roof_age: Optional[int] = None       # years since install
    roof_rating: Optional[float] = None  # 1-10, lower is worse

    property_manager_name: Optional[str] = None
    property_manager_email: Optional[str] = None
    property_manager_phone: Optional[str] = None

    safety_concerns: bool = False
    customer_sensitivity: Optional[str] = None  # High | Medium | Low

    warranty_expiration: Optional[date] = None
    last_inspection_date: Optional[date] = None
    last_maintenance_date: Optional[date] = None

    market: Optional[str] = None
    region: Optional[str] = None
    client_id: Optional[str] = None

    model_config = {"from_attributes": True}

    @field_validator("safety_concerns", mode="before")
    @classmethod
    def null_safety_concerns(cls, v):
        # boolean | null on the platform; unknown means none recorded
        return False if v is None else v

    @field_validator("property_name", mode="before")
    @classmethod
    def default_property_name(cls, v):
        return v or "Unknown Property"


class InspectionReport(BaseModel):
    """Structured report attached to a completed inspection."""
    findings: Optional[str] = None
    recommendations: Optional[str] = None
    priority_level: Optional[str] = None  # high | medium | low
    estimated_cost: Optional[float] = None

    model_config = {"from_attributes": True}


class InspectionRecord(BaseModel):
    """One completed inspection of a property."""
    id: str
    property_id: str
    property_name: Optional[str] = None
    completed_date: datetime
    inspection_type: Optional[str] = None
    status: Optional[str] = None
    notes: Optional[str] = None
    weather_conditions: Optional[str] = None
    weather_damage: Optional[bool] = None  # None = derive from notes/weather
    reports: List[InspectionReport] = Field(default_factory=list)

    model_config = {"from_attributes": True}

    @property
    def findings(self) -> List[str]:
        """Notes followed by the findings text of every linked report."""
        items = [self.notes] if self.notes else []
        items.extend(r.findings for r in self.reports if r.findings)
        return items
