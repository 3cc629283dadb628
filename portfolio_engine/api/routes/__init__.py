from portfolio_engine.api.routes.risk import router as risk_router
from portfolio_engine.api.routes.groups import router as groups_router
from portfolio_engine.api.routes.routing import router as routing_router

__all__ = [
    "risk_router",
    "groups_router",
    "routing_router",
]
