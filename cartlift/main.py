"""CartLift — FastAPI Application Entry Point.

Retail-media profitability calculator.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cartlift.config import settings
from cartlift.database import init_db
from cartlift.api.calculator_routes import router as calculator_router
from cartlift.api.trend_routes import router as trend_router
from cartlift.api.storage_routes import router as storage_router
from cartlift.core.logging import get_logger
from cartlift.core.metric_registry import CAMPAIGN_METRICS

logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    logger.info("CartLift starting up...")
    if not init_db():
        logger.error("Database NOT connected — saved calculations will fail")
    yield
    logger.info("CartLift shut down")


app = FastAPI(
    title="CartLift",
    description="Retail-media profitability calculator — ROAS, margin, unit economics, portfolio roll-ups and trends.",
    version=settings.schema_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(calculator_router)
app.include_router(trend_router)
app.include_router(storage_router)


@app.get("/health", tags=["System"])
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "cartlift",
        "version": settings.schema_version,
    }


@app.get("/metrics", tags=["System"])
async def list_metrics():
    """Describe every campaign metric the calculator produces."""
    return [
        {
            "name": m.name,
            "type": m.metric_type.value,
            "unit": m.unit.value,
            "label": m.label,
            "description": m.description,
        }
        for m in CAMPAIGN_METRICS.values()
    ]
