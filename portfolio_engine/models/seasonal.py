"""
Seasonal scheduling preferences per client and region.
"""
from datetime import datetime
from sqlalchemy import Column, String, DateTime, JSON, Index
import uuid

from portfolio_engine.db.base import Base


class SeasonalPreference(Base):
    __tablename__ = "seasonal_preferences"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    client_id = Column(String(36), nullable=True)
    region = Column(String(100), nullable=True)
    season = Column(String(10), nullable=True)  # spring | summer | fall | winter
    preferred_months = Column(JSON, nullable=False, default=list)  # [1..12]
    avoid_conditions = Column(JSON, nullable=False, default=list)
    optimal_temperature_range = Column(JSON, nullable=True)  # {"min": 40, "max": 85}

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index("idx_seasonal_client_region", "client_id", "region"),
    )
