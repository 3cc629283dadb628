"""
Portfolio Engine API - Main Application
FastAPI application exposing risk analysis, grouping and route planning
to the scheduling layer.
"""
from contextlib import asynccontextmanager
from datetime import datetime
import logging
import traceback

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from portfolio_engine.api.routes import groups_router, risk_router, routing_router
from portfolio_engine.core.config import settings
from portfolio_engine.core.exceptions import PortfolioEngineError
from portfolio_engine.database import close_db_connection, init_db, test_connection


# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown hooks"""
    logger.info("=" * 70)
    logger.info(f"Starting {settings.PROJECT_NAME} v{settings.VERSION}")
    logger.info(f"Store backend: {settings.store_backend}")
    logger.info("=" * 70)

    if settings.store_backend == "sql":
        # NON-BLOCKING: a missing database degrades /health, it does not stop startup
        if test_connection():
            init_db()
        else:
            logger.warning("[WARN] Database unavailable - continuing in degraded mode")

    yield

    logger.info("Shutting down application...")
    if settings.store_backend == "sql":
        close_db_connection()


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description=settings.PROJECT_DESCRIPTION,
    docs_url=f"{settings.API_PREFIX}/docs",
    redoc_url=f"{settings.API_PREFIX}/redoc",
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    max_age=3600,
)


# ==================== ROUTERS ====================

app.include_router(risk_router, prefix=f"{settings.API_PREFIX}/risk", tags=["Risk Analysis"])
app.include_router(groups_router, prefix=f"{settings.API_PREFIX}/groups", tags=["Grouping"])
app.include_router(routing_router, prefix=f"{settings.API_PREFIX}/routes", tags=["Routing"])


# ==================== ERROR HANDLERS ====================

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle validation errors with detailed response"""
    logger.warning(f"Validation error on {request.url}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "success": False,
            "detail": "Validation error",
            "errors": exc.errors(),
        },
    )


@app.exception_handler(PortfolioEngineError)
async def engine_exception_handler(request: Request, exc: PortfolioEngineError):
    """Store misconfiguration or outage reached the HTTP layer"""
    logger.error(f"Engine error on {request.url}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "success": False,
            "detail": str(exc),
            "timestamp": datetime.utcnow().isoformat(),
        },
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle all unhandled exceptions"""
    logger.error(f"Unhandled exception: {exc}\n{traceback.format_exc()}")
    error_message = str(exc) if settings.DEBUG else "Internal server error"
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "detail": error_message,
            "timestamp": datetime.utcnow().isoformat(),
        },
    )


# ==================== HEALTH & STATUS ENDPOINTS ====================

@app.get("/", tags=["System"])
async def root():
    """Root endpoint - API information"""
    return {
        "success": True,
        "app_name": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "docs": f"{settings.API_PREFIX}/docs",
        "status": "operational",
    }


@app.get("/health", tags=["System"])
async def health_check():
    """Health check endpoint for monitoring"""
    store_ok = test_connection() if settings.store_backend == "sql" else settings.supabase_configured
    return {
        "success": True,
        "status": "healthy" if store_ok else "degraded",
        "store": settings.store_backend,
        "timestamp": datetime.utcnow().isoformat(),
    }
