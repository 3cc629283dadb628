# portfolio_engine/db/base.py

"""
Database Base Class - single source of truth for the read models.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy read models."""
    pass
