from portfolio_engine.db.base import Base

__all__ = ["Base"]
