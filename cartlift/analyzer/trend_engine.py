"""CartLift — Historical & Trend Engine.

Builds immutable product snapshots and reads history back out of them:
per-metric time series, least-squares trend classification and
period-over-period comparison.

Series values default missing metrics to 0 for charting. This differs from
the campaign engine, which keeps them ``None``.
"""

import uuid
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Sequence, Union

from cartlift.core.logging import get_logger
from cartlift.core.metric_registry import CAMPAIGN_METRICS
from cartlift.core.percentages import normalize_percentage
from cartlift.models.history_models import (
    GrowthMetric,
    PeriodComparison,
    PeriodTrend,
    Product,
    ProductSnapshot,
    TrendDirection,
    TrendMetric,
    TrendPoint,
    TrendSummary,
)

logger = get_logger("analyzer.trend")

DATE_FORMAT = "%Y-%m-%d"
DEFAULT_LOOKBACK = 4
# Mean of ROAS and profit slopes beyond ±this classifies the trend
TREND_SLOPE_THRESHOLD = 0.05
# Relative change (in %) inside ±this band is "flat"
PERIOD_DEADBAND_PCT = 2

TREND_LABELS: Dict[TrendMetric, str] = {
    TrendMetric.ROAS: CAMPAIGN_METRICS["roas"].label,
    TrendMetric.PROFIT: CAMPAIGN_METRICS["profit_after_ads"].label,
    TrendMetric.SALES: "Sales",
    TrendMetric.SPEND: "Spend",
    TrendMetric.MARGIN: CAMPAIGN_METRICS["margin_after_ads_percent"].label,
    TrendMetric.CTR: CAMPAIGN_METRICS["ctr"].label,
    TrendMetric.NTB: "NTB %",
}


# ─────────────────────────────────────────────
# SNAPSHOTS
# ─────────────────────────────────────────────


def date_to_timestamp(date: str) -> int:
    """Epoch milliseconds of UTC midnight for a YYYY-MM-DD date.

    Raises ValueError for malformed dates.
    """
    day = datetime.strptime(date, DATE_FORMAT).replace(tzinfo=timezone.utc)
    return int(day.timestamp() * 1000)


def _today() -> str:
    return datetime.now(timezone.utc).strftime(DATE_FORMAT)


def create_snapshot(
    product: Product,
    date: Optional[str] = None,
    notes: Optional[str] = None,
) -> ProductSnapshot:
    """Capture a product's current inputs and metrics.

    Inputs and metrics are copied into frozen models, so later edits to the
    live product never reach the snapshot and the snapshot cannot be edited.
    """
    snapshot_date = date or _today()
    timestamp = date_to_timestamp(snapshot_date)
    created_ms = int(datetime.now(timezone.utc).timestamp() * 1000)
    snapshot = ProductSnapshot(
        id=f"snapshot-{created_ms}-{uuid.uuid4().hex[:9]}",
        product_id=product.id,
        product_name=product.name,
        date=snapshot_date,
        timestamp=timestamp,
        inputs=product.inputs,
        metrics=product.metrics,
        notes=notes,
    )
    logger.info(
        f"Created snapshot for {product.name} on {snapshot_date}",
        extra={"product_id": product.id, "snapshot_id": snapshot.id},
    )
    return snapshot


def get_product_snapshots(
    snapshots: Sequence[ProductSnapshot], product_id: str
) -> List[ProductSnapshot]:
    """Snapshots of one product, oldest first."""
    matching = [s for s in snapshots if s.product_id == product_id]
    return sorted(matching, key=lambda s: s.timestamp)


def snapshots_in_range(
    snapshots: Sequence[ProductSnapshot], start_date: str, end_date: str
) -> List[ProductSnapshot]:
    """Snapshots dated within [start_date, end_date]."""
    start = date_to_timestamp(start_date)
    end = date_to_timestamp(end_date)
    return [s for s in snapshots if start <= s.timestamp <= end]


def latest_snapshots(snapshots: Sequence[ProductSnapshot]) -> List[ProductSnapshot]:
    """The most recent snapshot of each product."""
    latest: Dict[str, ProductSnapshot] = {}
    for snapshot in snapshots:
        existing = latest.get(snapshot.product_id)
        if existing is None or snapshot.timestamp > existing.timestamp:
            latest[snapshot.product_id] = snapshot
    return list(latest.values())


def group_snapshots_by_week(
    snapshots: Sequence[ProductSnapshot],
) -> Dict[str, List[ProductSnapshot]]:
    """Group by the Sunday starting each snapshot's week (UTC)."""
    weeks: Dict[str, List[ProductSnapshot]] = defaultdict(list)
    for snapshot in snapshots:
        day = datetime.fromtimestamp(snapshot.timestamp / 1000, tz=timezone.utc)
        days_since_sunday = (day.weekday() + 1) % 7
        week_start = day - timedelta(days=days_since_sunday)
        weeks[week_start.strftime(DATE_FORMAT)].append(snapshot)
    return dict(weeks)


# ─────────────────────────────────────────────
# SERIES
# ─────────────────────────────────────────────


def _metric_value(snapshot: ProductSnapshot, metric: TrendMetric) -> float:
    """Chart value of a metric; percentages are scaled to 0–100."""
    metrics = snapshot.metrics
    inputs = snapshot.inputs
    if metric == TrendMetric.ROAS:
        return metrics.roas or 0
    if metric == TrendMetric.PROFIT:
        return metrics.profit_after_ads or 0
    if metric == TrendMetric.SALES:
        return inputs.attributed_sales or 0
    if metric == TrendMetric.SPEND:
        return inputs.ad_spend or 0
    if metric == TrendMetric.MARGIN:
        return (metrics.margin_after_ads_percent or 0) * 100
    if metric == TrendMetric.CTR:
        return (metrics.ctr or 0) * 100
    # A stored 1 reads as 100%, consistent with normalize_percentage
    return (normalize_percentage(inputs.ntb_percent) or 0) * 100


def extract_trend(
    snapshots: Sequence[ProductSnapshot],
    metric: Union[str, TrendMetric],
) -> List[TrendPoint]:
    """Map snapshots to ``{date, value, label}`` points, in input order."""
    metric = TrendMetric(metric)
    return [
        TrendPoint(
            date=s.date,
            value=_metric_value(s, metric),
            label=s.product_name,
        )
        for s in snapshots
    ]


def growth_rate(
    current: ProductSnapshot,
    previous: ProductSnapshot,
    metric: Union[str, GrowthMetric],
) -> float:
    """Percent change between two snapshots; 0 when the baseline is 0."""
    trend_metric = TrendMetric(GrowthMetric(metric).value)
    current_value = _metric_value(current, trend_metric)
    previous_value = _metric_value(previous, trend_metric)
    if previous_value == 0:
        return 0.0
    return (current_value - previous_value) / previous_value * 100


# ─────────────────────────────────────────────
# TREND CLASSIFICATION
# ─────────────────────────────────────────────


def calculate_slope(values: Sequence[float]) -> float:
    """Least-squares slope of ``values`` against index 0..n-1.

    Time gaps between points are ignored.
    """
    n = len(values)
    if n < 2:
        return 0.0
    x_sum = n * (n - 1) / 2
    x2_sum = n * (n - 1) * (2 * n - 1) / 6
    y_sum = sum(values)
    xy_sum = sum(x * y for x, y in enumerate(values))
    return (n * xy_sum - x_sum * y_sum) / (n * x2_sum - x_sum * x_sum)


def identify_trend(
    snapshots: Sequence[ProductSnapshot],
    product_id: str,
    lookback_weeks: int = DEFAULT_LOOKBACK,
) -> TrendSummary:
    """Classify a product's recent ROAS and profit trajectory.

    Uses the last ``lookback_weeks`` snapshots (all of them when the window
    is not positive). Fewer than two points is "stable" with zero slopes.
    """
    history = get_product_snapshots(snapshots, product_id)
    if lookback_weeks > 0:
        history = history[-lookback_weeks:]

    if len(history) < 2:
        return TrendSummary()

    roas_trend = calculate_slope([s.metrics.roas or 0 for s in history])
    profit_trend = calculate_slope([s.metrics.profit_after_ads or 0 for s in history])
    avg_trend = (roas_trend + profit_trend) / 2

    if avg_trend > TREND_SLOPE_THRESHOLD:
        direction = TrendDirection.IMPROVING
    elif avg_trend < -TREND_SLOPE_THRESHOLD:
        direction = TrendDirection.DECLINING
    else:
        direction = TrendDirection.STABLE

    logger.debug(
        f"Trend for {product_id}: {direction.value} over {len(history)} snapshots",
        extra={"product_id": product_id},
    )
    return TrendSummary(trend=direction, roas_trend=roas_trend, profit_trend=profit_trend)


# ─────────────────────────────────────────────
# PERIOD COMPARISON
# ─────────────────────────────────────────────


def _direction(change: float, change_pct: float) -> PeriodTrend:
    if abs(change_pct) > PERIOD_DEADBAND_PCT:
        return PeriodTrend.UP if change > 0 else PeriodTrend.DOWN
    return PeriodTrend.FLAT


def _mean(points: List[TrendPoint]) -> float:
    return sum(p.value for p in points) / (len(points) or 1)


def compare_periods(
    current_snapshots: Sequence[ProductSnapshot],
    previous_snapshots: Sequence[ProductSnapshot],
    metrics: Sequence[Union[str, TrendMetric]],
) -> List[PeriodComparison]:
    """Compare the mean of each metric across two snapshot sets.

    An empty set averages to 0. A zero previous mean reports 0% change.
    """
    comparisons: List[PeriodComparison] = []
    for name in metrics:
        metric = TrendMetric(name)
        current = _mean(extract_trend(current_snapshots, metric))
        previous = _mean(extract_trend(previous_snapshots, metric))
        change = current - previous
        change_pct = change / previous * 100 if previous != 0 else 0.0
        comparisons.append(
            PeriodComparison(
                metric=metric,
                label=TREND_LABELS[metric],
                current=current,
                previous=previous,
                change=change,
                change_percent=change_pct,
                trend=_direction(change, change_pct),
            )
        )

    logger.info(f"Compared {len(comparisons)} metrics across periods")
    return comparisons
