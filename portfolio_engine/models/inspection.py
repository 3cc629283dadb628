"""
Inspection Models - completed inspection events and their linked reports.
"""
from datetime import datetime
from enum import Enum
from sqlalchemy import (
    Column, String, DateTime, Float, Text, Boolean, ForeignKey, Index
)
from sqlalchemy.orm import relationship
import uuid

from portfolio_engine.db.base import Base


class InspectionStatus(str, Enum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Inspection(Base):
    __tablename__ = "inspections"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    roof_id = Column(String(36), ForeignKey("roofs.id"), nullable=False)
    inspection_type = Column(String(30), nullable=True)
    status = Column(String(20), nullable=False, default=InspectionStatus.SCHEDULED.value)
    scheduled_date = Column(DateTime(timezone=True), nullable=True)
    completed_date = Column(DateTime(timezone=True), nullable=True)
    notes = Column(Text, nullable=True)
    weather_conditions = Column(String(255), nullable=True)
    weather_damage = Column(Boolean, nullable=True)  # null = not recorded

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    roof = relationship("Roof", back_populates="inspections")
    reports = relationship("InspectionReport", back_populates="inspection", cascade="all, delete-orphan")

    __table_args__ = (
        Index("idx_inspections_roof", "roof_id"),
        Index("idx_inspections_completed", "completed_date"),
    )


class InspectionReport(Base):
    __tablename__ = "inspection_reports"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    inspection_id = Column(String(36), ForeignKey("inspections.id", ondelete="CASCADE"), nullable=False)
    findings = Column(Text, nullable=True)
    recommendations = Column(Text, nullable=True)
    priority_level = Column(String(10), nullable=True)  # high | medium | low
    estimated_cost = Column(Float, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    inspection = relationship("Inspection", back_populates="reports")

    __table_args__ = (
        Index("idx_inspection_reports_inspection", "inspection_id"),
    )
