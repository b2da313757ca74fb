"""CartLift — Derived Metric Models.

Each field is independently nullable: ``None`` means a required input was
missing or a divisor was zero. No NaN or infinity ever lands here.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class PerformanceIndicator(str, Enum):
    """ROAS relative to the campaign target."""

    ABOVE = "above"
    BELOW = "below"
    ON_TARGET = "on-target"
    NO_TARGET = "no-target"


class ProfitabilityStatus(str, Enum):
    """Headline status derived from margin after ads."""

    UNPROFITABLE = "unprofitable"
    NEAR_BREAKEVEN = "near-breakeven"
    PROFITABLE = "profitable"
    WAITING = "waiting"  # Not enough input yet


class CalculatedMetrics(BaseModel):
    """Campaign-level derived metrics."""

    roas: Optional[float] = None
    investment_rate: Optional[float] = None
    effective_margin_percent: Optional[float] = None
    gross_margin_dollars: Optional[float] = None
    profit_after_ads: Optional[float] = None
    margin_after_ads_percent: Optional[float] = None
    breakeven_roas: Optional[float] = None
    margin_per_dollar_spend: Optional[float] = None
    # Unit-level
    cost_per_unit: Optional[float] = None
    revenue_per_unit: Optional[float] = None
    profit_per_unit_after_ads: Optional[float] = None
    margin_per_unit: Optional[float] = None
    # Cost breakdown
    instacart_commission_dollars: Optional[float] = None
    total_costs: Optional[float] = None
    net_profit: Optional[float] = None
    # Comparison
    roas_vs_target: Optional[float] = None
    performance_indicator: PerformanceIndicator = PerformanceIndicator.NO_TARGET
    # Engagement
    ctr: Optional[float] = None
    cpc: Optional[float] = None
    cpm: Optional[float] = None
    conversion_rate: Optional[float] = None
    cpo: Optional[float] = None
    aov: Optional[float] = None
    units_per_order: Optional[float] = None
    # Customer acquisition
    ntb_sales: Optional[float] = None
    repeat_sales: Optional[float] = None
    cac: Optional[float] = None
    repeat_customer_percent: Optional[float] = None


class UPCMetrics(BaseModel):
    """Per-SKU derived metrics.

    Input echoes are zero-filled so rows can be summed directly;
    ``gross_margin_percent`` is already a decimal.
    """

    id: str
    upc_code: str = ""
    product_name: str = ""
    units_sold: float = 0.0
    ad_spend: float = 0.0
    attributed_sales: float = 0.0
    gross_margin_percent: float = 0.0
    roas: Optional[float] = None
    gross_margin_dollars: Optional[float] = None
    instacart_commission_dollars: Optional[float] = None
    profit_after_ads: Optional[float] = None
    margin_percent: Optional[float] = None
    revenue_per_unit: Optional[float] = None
    cost_per_unit: Optional[float] = None
    profit_per_unit: Optional[float] = None


class UPCTotals(BaseModel):
    """Summed SKU rows. Ratios are derived by the caller."""

    total_ad_spend: float = 0.0
    total_attributed_sales: float = 0.0
    total_units: float = 0.0
    total_gross_margin: float = 0.0
    total_commission: float = 0.0
    total_profit: float = 0.0


class PortfolioMetrics(BaseModel):
    """Aggregate across a collection of products."""

    total_ad_spend: float = 0.0
    total_attributed_sales: float = 0.0
    total_units: float = 0.0
    total_orders: float = 0.0
    total_profit: float = 0.0
    portfolio_roas: Optional[float] = None
    portfolio_margin_percent: Optional[float] = None
    average_cpc: Optional[float] = None
    average_aov: Optional[float] = None
    weighted_ntb_percent: Optional[float] = None
    product_count: int = 0


class CostBreakdown(BaseModel):
    """Where attributed sales went, in dollars and as share of sales."""

    ad_spend: float = 0.0
    instacart_commission: float = 0.0
    other_costs: float = 0.0
    promo_costs: float = 0.0
    cogs: float = 0.0
    total_costs: float = 0.0
    ad_spend_percent: float = 0.0
    promo_percent: float = 0.0
    cogs_percent: float = 0.0
