"""CartLift — Historical Trend API Routes."""

from typing import List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from cartlift.analyzer.trend_engine import (
    DEFAULT_LOOKBACK,
    compare_periods,
    create_snapshot,
    extract_trend,
    get_product_snapshots,
    identify_trend,
)
from cartlift.core.logging import get_logger
from cartlift.models.history_models import (
    PeriodComparison,
    Product,
    ProductSnapshot,
    TrendMetric,
    TrendPoint,
    TrendSummary,
)

logger = get_logger("api.trends")

router = APIRouter(prefix="/trends", tags=["Trends"])


class SnapshotRequest(BaseModel):
    product: Product
    date: Optional[str] = None
    """Snapshot date in YYYY-MM-DD format; defaults to today (UTC)."""
    notes: Optional[str] = None


class ExtractRequest(BaseModel):
    snapshots: List[ProductSnapshot]
    metric: TrendMetric
    product_id: Optional[str] = None
    """Restrict to one product, ordered oldest first."""


class IdentifyRequest(BaseModel):
    snapshots: List[ProductSnapshot]
    product_id: str
    lookback_weeks: int = DEFAULT_LOOKBACK


class CompareRequest(BaseModel):
    current: List[ProductSnapshot]
    previous: List[ProductSnapshot]
    metrics: List[TrendMetric] = [TrendMetric.ROAS, TrendMetric.PROFIT, TrendMetric.SALES]


@router.post("/snapshot", response_model=ProductSnapshot)
async def snapshot(request: SnapshotRequest):
    """Capture a product at a point in time."""
    try:
        return create_snapshot(request.product, request.date, request.notes)
    except ValueError as e:
        logger.error(f"Snapshot failed: {e}", extra={"endpoint": "/trends/snapshot"})
        raise HTTPException(status_code=400, detail=f"Invalid snapshot date: {e}")


@router.post("/extract", response_model=List[TrendPoint])
async def extract(request: ExtractRequest):
    snapshots = request.snapshots
    if request.product_id:
        snapshots = get_product_snapshots(snapshots, request.product_id)
    return extract_trend(snapshots, request.metric)


@router.post("/identify", response_model=TrendSummary)
async def identify(request: IdentifyRequest):
    """Classify a product as improving, declining or stable."""
    return identify_trend(request.snapshots, request.product_id, request.lookback_weeks)


@router.post("/compare", response_model=List[PeriodComparison])
async def compare(request: CompareRequest):
    return compare_periods(request.current, request.previous, request.metrics)
