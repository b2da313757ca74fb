"""CartLift — UPC (SKU) Metrics Engine.

Total-oriented counterpart of the campaign engine: absent inputs count as 0
so every SKU row can be summed, and commission is modeled per SKU.
"""

from typing import List, Optional

from cartlift.analyzer.ranking import SortDirection, UPCSortKey, sort_by
from cartlift.core.logging import get_logger
from cartlift.core.percentages import normalize_or_zero
from cartlift.models.input_models import UPCData
from cartlift.models.metric_models import UPCMetrics, UPCTotals

logger = get_logger("analyzer.upc")


def compute_upc_metrics(upc: UPCData) -> UPCMetrics:
    """Compute all metrics for a single SKU."""
    units_sold = upc.units_sold or 0.0
    ad_spend = upc.ad_spend or 0.0
    attributed_sales = upc.attributed_sales or 0.0
    margin_pct = normalize_or_zero(upc.gross_margin_percent)
    commission_pct = normalize_or_zero(upc.instacart_commission_percent)

    gross_margin_dollars = attributed_sales * margin_pct
    commission_dollars = attributed_sales * commission_pct
    profit_after_ads = gross_margin_dollars - commission_dollars - ad_spend

    has_units = units_sold != 0
    return UPCMetrics(
        id=upc.id,
        upc_code=upc.upc_code,
        product_name=upc.product_name,
        units_sold=units_sold,
        ad_spend=ad_spend,
        attributed_sales=attributed_sales,
        gross_margin_percent=margin_pct,
        roas=attributed_sales / ad_spend if ad_spend != 0 else None,
        gross_margin_dollars=gross_margin_dollars,
        instacart_commission_dollars=commission_dollars,
        profit_after_ads=profit_after_ads,
        margin_percent=profit_after_ads / attributed_sales if attributed_sales != 0 else None,
        revenue_per_unit=attributed_sales / units_sold if has_units else None,
        cost_per_unit=ad_spend / units_sold if has_units else None,
        profit_per_unit=profit_after_ads / units_sold if has_units else None,
    )


def compute_all_upc_metrics(upcs: List[UPCData]) -> List[UPCMetrics]:
    """Compute metrics for every SKU, preserving order."""
    return [compute_upc_metrics(upc) for upc in upcs]


def aggregate_upcs(upc_metrics: List[UPCMetrics]) -> UPCTotals:
    """Sum SKU rows into campaign totals."""
    totals = UPCTotals()
    for upc in upc_metrics:
        totals.total_ad_spend += upc.ad_spend
        totals.total_attributed_sales += upc.attributed_sales
        totals.total_units += upc.units_sold
        totals.total_gross_margin += upc.gross_margin_dollars or 0
        totals.total_commission += upc.instacart_commission_dollars or 0
        totals.total_profit += upc.profit_after_ads or 0

    logger.debug(
        f"Aggregated {len(upc_metrics)} UPCs",
        extra={"entity_count": len(upc_metrics)},
    )
    return totals


def upc_portfolio_roas(totals: UPCTotals) -> Optional[float]:
    if totals.total_ad_spend == 0:
        return None
    return totals.total_attributed_sales / totals.total_ad_spend


def upc_portfolio_margin(totals: UPCTotals) -> Optional[float]:
    if totals.total_attributed_sales == 0:
        return None
    return totals.total_profit / totals.total_attributed_sales


def weighted_margin(upc_metrics: List[UPCMetrics]) -> Optional[float]:
    """Sales-weighted average of SKU margin %, ``None`` without sales."""
    total_sales = sum(upc.attributed_sales for upc in upc_metrics)
    if total_sales == 0:
        return None
    return sum(
        (upc.margin_percent or 0) * upc.attributed_sales / total_sales
        for upc in upc_metrics
    )


def top_upcs(upc_metrics: List[UPCMetrics], count: int = 5) -> List[UPCMetrics]:
    """Most profitable SKUs first."""
    return sort_by(upc_metrics, UPCSortKey.PROFIT, SortDirection.DESC)[:count]


def underperforming_upcs(upc_metrics: List[UPCMetrics]) -> List[UPCMetrics]:
    """SKUs losing money after ads."""
    return [upc for upc in upc_metrics if (upc.profit_after_ads or 0) < 0]
