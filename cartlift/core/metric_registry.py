"""CartLift — Unified Metric Registry.

Defines the canonical set of campaign and SKU metrics, their classification
and display unit. Export and the HTTP surface read labels and units from here
so a metric is described in exactly one place.
"""

from enum import Enum
from typing import Dict


class MetricType(str, Enum):
    """How a metric is categorised."""

    PROFITABILITY = "profitability"  # Margin, profit, breakeven
    EFFICIENCY = "efficiency"  # ROAS, investment rate
    UNIT = "unit"  # Per-unit economics
    COST = "cost"  # Cost breakdown totals
    COMPARISON = "comparison"  # Against a target
    ENGAGEMENT = "engagement"  # CTR, CPC, CPM, conversion
    CUSTOMER = "customer"  # New-to-brand and repeat


class MetricUnit(str, Enum):
    """How a metric value is rendered."""

    CURRENCY = "currency"
    PERCENT = "%"  # Stored as a decimal, rendered ×100
    RATIO = "ratio"
    COUNT = "count"
    TEXT = "text"


class MetricDefinition:
    """Describes a single metric."""

    def __init__(
        self,
        name: str,
        metric_type: MetricType,
        unit: MetricUnit,
        label: str,
        description: str = "",
    ):
        self.name = name
        self.metric_type = metric_type
        self.unit = unit
        self.label = label
        self.description = description

    def __repr__(self) -> str:
        return f"<Metric {self.name} ({self.metric_type.value})>"


def _define(
    name: str, metric_type: MetricType, unit: MetricUnit, label: str, description: str
) -> tuple[str, MetricDefinition]:
    return name, MetricDefinition(name, metric_type, unit, label, description)


# ─────────────────────────────────────────────
# CAMPAIGN METRICS — CalculatedMetrics fields, in display order
# ─────────────────────────────────────────────

CAMPAIGN_METRICS: Dict[str, MetricDefinition] = dict(
    [
        # Efficiency
        _define("roas", MetricType.EFFICIENCY, MetricUnit.RATIO, "ROAS", "Attributed sales / ad spend"),
        _define("investment_rate", MetricType.EFFICIENCY, MetricUnit.PERCENT, "Investment Rate", "Ad spend / attributed sales"),
        # Profitability
        _define("effective_margin_percent", MetricType.PROFITABILITY, MetricUnit.PERCENT, "Effective Margin", "Gross margin minus other costs, clamped to [0, 1]"),
        _define("gross_margin_dollars", MetricType.PROFITABILITY, MetricUnit.CURRENCY, "Gross Margin $", "Attributed sales × effective margin"),
        _define("profit_after_ads", MetricType.PROFITABILITY, MetricUnit.CURRENCY, "Profit After Ads", "Gross margin $ − ad spend − promo costs"),
        _define("margin_after_ads_percent", MetricType.PROFITABILITY, MetricUnit.PERCENT, "Margin After Ads", "Profit after ads / attributed sales"),
        _define("breakeven_roas", MetricType.PROFITABILITY, MetricUnit.RATIO, "Breakeven ROAS", "1 / effective margin"),
        _define("margin_per_dollar_spend", MetricType.PROFITABILITY, MetricUnit.CURRENCY, "Margin per $1 Spend", "Gross margin $ / ad spend"),
        # Unit economics
        _define("cost_per_unit", MetricType.UNIT, MetricUnit.CURRENCY, "Cost per Unit", "Ad spend / units sold"),
        _define("revenue_per_unit", MetricType.UNIT, MetricUnit.CURRENCY, "Revenue per Unit", "Attributed sales / units sold"),
        _define("profit_per_unit_after_ads", MetricType.UNIT, MetricUnit.CURRENCY, "Profit per Unit", "Profit after ads / units sold"),
        _define("margin_per_unit", MetricType.UNIT, MetricUnit.CURRENCY, "Margin per Unit", "Gross margin $ / units sold"),
        # Cost breakdown
        _define("instacart_commission_dollars", MetricType.COST, MetricUnit.CURRENCY, "Commission $", "Not charged at campaign level"),
        _define("total_costs", MetricType.COST, MetricUnit.CURRENCY, "Total Costs", "Ad spend + promo + other costs $"),
        _define("net_profit", MetricType.COST, MetricUnit.CURRENCY, "Net Profit", "Gross margin $ − ad spend − promo"),
        # Comparison
        _define("roas_vs_target", MetricType.COMPARISON, MetricUnit.RATIO, "ROAS vs Target", "ROAS − target ROAS"),
        _define("performance_indicator", MetricType.COMPARISON, MetricUnit.TEXT, "Performance", "above | below | on-target | no-target"),
        # Engagement
        _define("ctr", MetricType.ENGAGEMENT, MetricUnit.PERCENT, "CTR", "Clicks / impressions"),
        _define("cpc", MetricType.ENGAGEMENT, MetricUnit.CURRENCY, "CPC", "Ad spend / clicks"),
        _define("cpm", MetricType.ENGAGEMENT, MetricUnit.CURRENCY, "CPM", "Ad spend per 1000 impressions"),
        _define("conversion_rate", MetricType.ENGAGEMENT, MetricUnit.PERCENT, "Conversion Rate", "Orders / clicks"),
        _define("cpo", MetricType.ENGAGEMENT, MetricUnit.CURRENCY, "CPO", "Ad spend / orders"),
        _define("aov", MetricType.ENGAGEMENT, MetricUnit.CURRENCY, "AOV", "Attributed sales / orders"),
        _define("units_per_order", MetricType.ENGAGEMENT, MetricUnit.RATIO, "Units per Order", "Units sold / orders"),
        # Customer acquisition
        _define("ntb_sales", MetricType.CUSTOMER, MetricUnit.CURRENCY, "NTB Sales", "Attributed sales × NTB %"),
        _define("repeat_sales", MetricType.CUSTOMER, MetricUnit.CURRENCY, "Repeat Sales", "Attributed sales − NTB sales"),
        _define("cac", MetricType.CUSTOMER, MetricUnit.CURRENCY, "CAC", "Ad spend × NTB %"),
        _define("repeat_customer_percent", MetricType.CUSTOMER, MetricUnit.PERCENT, "Repeat Customer %", "1 − NTB %"),
    ]
)


# ─────────────────────────────────────────────
# UPC METRICS — per-SKU export columns
# ─────────────────────────────────────────────

UPC_METRICS: Dict[str, MetricDefinition] = dict(
    [
        _define("units_sold", MetricType.UNIT, MetricUnit.COUNT, "Units", "Units sold"),
        _define("ad_spend", MetricType.COST, MetricUnit.CURRENCY, "Ad Spend", "Ad spend"),
        _define("attributed_sales", MetricType.EFFICIENCY, MetricUnit.CURRENCY, "Sales", "Attributed sales"),
        _define("gross_margin_percent", MetricType.PROFITABILITY, MetricUnit.PERCENT, "Gross Margin %", "Normalized gross margin"),
        _define("roas", MetricType.EFFICIENCY, MetricUnit.RATIO, "ROAS", "Attributed sales / ad spend"),
        _define("gross_margin_dollars", MetricType.PROFITABILITY, MetricUnit.CURRENCY, "Gross Margin $", "Sales × margin"),
        _define("instacart_commission_dollars", MetricType.COST, MetricUnit.CURRENCY, "Commission $", "Sales × commission"),
        _define("profit_after_ads", MetricType.PROFITABILITY, MetricUnit.CURRENCY, "Profit After Ads", "Gross margin $ − commission − ad spend"),
        _define("margin_percent", MetricType.PROFITABILITY, MetricUnit.PERCENT, "Margin %", "Profit after ads / sales"),
        _define("revenue_per_unit", MetricType.UNIT, MetricUnit.CURRENCY, "Revenue per Unit", "Sales / units"),
        _define("cost_per_unit", MetricType.UNIT, MetricUnit.CURRENCY, "Cost per Unit", "Ad spend / units"),
        _define("profit_per_unit", MetricType.UNIT, MetricUnit.CURRENCY, "Profit per Unit", "Profit / units"),
    ]
)


# ─────────────────────────────────────────────
# HELPERS
# ─────────────────────────────────────────────


def get_metric(name: str) -> MetricDefinition | None:
    """Look up a campaign metric by name."""
    return CAMPAIGN_METRICS.get(name)


def metrics_by_type(metric_type: MetricType) -> list[MetricDefinition]:
    """Return all campaign metrics of a given type."""
    return [m for m in CAMPAIGN_METRICS.values() if m.metric_type == metric_type]
