"""
Roof Model - read model of the platform's `roofs` table.
One row per inspected property; the engine treats it as immutable input.
"""
from datetime import datetime
from sqlalchemy import Column, String, Date, DateTime, Integer, Float, Boolean, Index
from sqlalchemy.orm import relationship
import uuid

from portfolio_engine.db.base import Base


class Roof(Base):
    __tablename__ = "roofs"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    client_id = Column(String(36), nullable=True)

    property_name = Column(String(255), nullable=False)
    address = Column(String(500), nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(50), nullable=True)
    market = Column(String(100), nullable=True)
    region = Column(String(100), nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    roof_area = Column(Float, nullable=True)  # square feet
    roof_type = Column(String(50), nullable=True)  # asphalt, metal, tile, slate, rubber
    roof_age = Column(Integer, nullable=True)  # years since install
    roof_rating = Column(Float, nullable=True)  # 1-10

    property_manager_name = Column(String(255), nullable=True)
    property_manager_email = Column(String(255), nullable=True)
    property_manager_phone = Column(String(50), nullable=True)

    safety_concerns = Column(Boolean, default=False, nullable=False)
    customer_sensitivity = Column(String(20), nullable=True)  # High | Medium | Low

    warranty_expiration = Column(Date, nullable=True)
    last_inspection_date = Column(Date, nullable=True)
    last_maintenance_date = Column(Date, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    inspections = relationship("Inspection", back_populates="roof")

    __table_args__ = (
        Index("idx_roofs_client", "client_id"),
        Index("idx_roofs_region", "region"),
    )
