"""CartLift — Alerts Engine.

Flags performance issues and opportunities:
- Losing money / ROAS under 1 → act now
- Thin margins, weak CTR, low-ROAS SKUs → optimize
- Strong ROAS with profit → scale
"""

from typing import List

from cartlift.analyzer.upc_engine import top_upcs, underperforming_upcs
from cartlift.core.formatting import format_currency, format_percent, format_ratio
from cartlift.core.logging import get_logger
from cartlift.models.analysis_models import Alert, AlertLevel
from cartlift.models.metric_models import CalculatedMetrics, UPCMetrics

logger = get_logger("analyzer.alerts")

# Thresholds
LOW_ROAS = 2.0
STRONG_ROAS = 5.0
SCALE_ROAS = 3.0
THIN_MARGIN = 0.05  # Margin after ads, decimal
LOW_CTR = 0.005
EXCELLENT_CTR = 0.05
DOMINANT_PROFIT_SHARE = 50  # %


def _campaign_alerts(metrics: CalculatedMetrics) -> List[Alert]:
    alerts: List[Alert] = []
    roas = metrics.roas
    profit = metrics.profit_after_ads
    margin = metrics.margin_after_ads_percent
    ctr = metrics.ctr

    if profit is not None and profit < 0:
        alerts.append(
            Alert(
                level=AlertLevel.ERROR,
                title="Campaign is Unprofitable",
                message=f"You're losing {format_currency(abs(profit))} on this campaign.",
                action="Consider pausing or optimizing immediately",
            )
        )

    if roas is not None and roas < 1.0:
        alerts.append(
            Alert(
                level=AlertLevel.ERROR,
                title="ROAS Below 1.0x",
                message=f"Current ROAS: {format_ratio(roas)}x. You're spending more than you're earning!",
                action="Immediate action required",
            )
        )
    elif roas is not None and roas < LOW_ROAS:
        alerts.append(
            Alert(
                level=AlertLevel.WARNING,
                title="Low ROAS",
                message=f"ROAS of {format_ratio(roas)}x is below typical profitable thresholds.",
                action="Consider optimizing targeting or creative",
            )
        )

    if margin is not None and 0 < margin < THIN_MARGIN:
        alerts.append(
            Alert(
                level=AlertLevel.WARNING,
                title="Thin Profit Margins",
                message=f"Only {format_percent(margin, 2)} profit margin. Small changes could make this unprofitable.",
                action="Monitor closely",
            )
        )

    if ctr is not None and ctr < LOW_CTR:
        alerts.append(
            Alert(
                level=AlertLevel.WARNING,
                title="Low Click-Through Rate",
                message=f"CTR of {format_percent(ctr, 2)} is below industry average (1-2%).",
                action="Test new creative or improve product images",
            )
        )
    if ctr is not None and ctr > EXCELLENT_CTR:
        alerts.append(
            Alert(
                level=AlertLevel.SUCCESS,
                title="Excellent CTR",
                message=f"CTR of {format_percent(ctr, 2)} is outstanding!",
                action="Creative is performing well",
            )
        )

    if roas is not None and roas > STRONG_ROAS:
        alerts.append(
            Alert(
                level=AlertLevel.SUCCESS,
                title="Strong ROAS",
                message=f"{format_ratio(roas)}x ROAS is excellent. Consider increasing budget!",
                action="Opportunity to scale",
            )
        )
    return alerts


def _upc_alerts(metrics: CalculatedMetrics, upc_metrics: List[UPCMetrics]) -> List[Alert]:
    alerts: List[Alert] = []
    if not upc_metrics:
        return alerts

    losing = underperforming_upcs(upc_metrics)
    if losing:
        total_loss = sum(abs(u.profit_after_ads or 0) for u in losing)
        alerts.append(
            Alert(
                level=AlertLevel.ERROR,
                title="Unprofitable UPCs Detected",
                message=f"{len(losing)} UPC(s) losing money. Total loss: {format_currency(total_loss)}",
                action="Review UPC analysis and consider pausing these products",
            )
        )

    best = top_upcs(upc_metrics, count=1)[0]
    campaign_profit = metrics.profit_after_ads
    if (best.profit_after_ads or 0) > 0 and campaign_profit:
        share = best.profit_after_ads / campaign_profit * 100
        if share > DOMINANT_PROFIT_SHARE:
            alerts.append(
                Alert(
                    level=AlertLevel.INFO,
                    title="Dominant Product",
                    message=f"{best.product_name} generates {share:.0f}% of total profit.",
                    action="High dependency - consider diversifying or scaling this winner",
                )
            )

    low_roas = [u for u in upc_metrics if u.roas is not None and u.roas < LOW_ROAS]
    if 0 < len(low_roas) < len(upc_metrics):
        alerts.append(
            Alert(
                level=AlertLevel.WARNING,
                title="Low ROAS Products",
                message=f"{len(low_roas)} UPC(s) with ROAS below {LOW_ROAS:.1f}x",
                action="Optimize or consider pausing",
            )
        )
    return alerts


def generate_alerts(
    metrics: CalculatedMetrics,
    upc_metrics: List[UPCMetrics],
) -> List[Alert]:
    """Detect alerts for a campaign and its SKU breakdown."""
    alerts = _campaign_alerts(metrics) + _upc_alerts(metrics, upc_metrics)

    roas = metrics.roas
    profit = metrics.profit_after_ads
    if profit is not None and profit > 0 and roas is not None and roas > SCALE_ROAS:
        alerts.append(
            Alert(
                level=AlertLevel.SUCCESS,
                title="Scale Opportunity",
                message=f"Strong performance ({format_ratio(roas)}x ROAS, {format_currency(profit)} profit). Consider increasing budget!",
                action="Growth opportunity",
            )
        )

    logger.info(f"Generated {len(alerts)} alerts")
    return alerts
