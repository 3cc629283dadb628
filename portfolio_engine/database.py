"""
Database engine and session factory for the SQL-backed inspection store.
"""
import logging

from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker

from portfolio_engine.core.config import settings
from portfolio_engine.db.base import Base

logger = logging.getLogger(__name__)

DATABASE_URL = settings.DATABASE_URL

if not DATABASE_URL:
    raise ValueError("[ERROR] DATABASE_URL not found!")


def build_engine(url: str):
    """Create an engine with per-dialect connection arguments."""
    if "sqlite" in url.lower():
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            echo=False,
        )
    return create_engine(
        url,
        connect_args={
            "connect_timeout": 10,
            "options": "-c statement_timeout=30000",  # 30s query timeout
        },
        echo=False,
        pool_pre_ping=True,
        pool_size=3,
        max_overflow=10,
        pool_recycle=3600,
        pool_timeout=30,
    )


engine = build_engine(DATABASE_URL)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


def test_connection() -> bool:
    """Test database connection - NON-BLOCKING."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1")).fetchone()
        safe_url = DATABASE_URL.split("@")[1] if "@" in DATABASE_URL else DATABASE_URL.split("/")[-1]
        logger.info(f"[DB] Connected: {safe_url}")
        return True
    except Exception as e:
        logger.warning(f"[DB] Connection failed (continuing): {e}")
        return False


def init_db() -> bool:
    """Create the read-model tables when they are missing - NON-BLOCKING."""
    try:
        # Register models with Base
        from portfolio_engine.models import roof, inspection, seasonal  # noqa: F401

        Base.metadata.create_all(bind=engine)
        logger.info("[DB] Tables initialized")
        return True
    except Exception as e:
        logger.warning(f"[DB] Init warning: {e}")
        return False


def close_db_connection() -> None:
    """Close database connections."""
    try:
        engine.dispose()
        logger.info("[DB] Connections closed")
    except Exception as e:
        logger.warning(f"[DB] Error closing connections: {e}")
