"""CartLift — Campaign Metrics Engine.

Derives every campaign-level metric from one ``CalculatorInputs`` record.
All functions are pure: a missing input or a zero divisor yields ``None``,
never an exception, NaN or infinity.
"""

from typing import Optional

from cartlift.core.logging import get_logger
from cartlift.core.percentages import normalize_percentage
from cartlift.models.input_models import CalculatorInputs
from cartlift.models.metric_models import (
    CalculatedMetrics,
    CostBreakdown,
    PerformanceIndicator,
    ProfitabilityStatus,
)

logger = get_logger("analyzer.campaign")

# |ROAS − target| within this band counts as on target
ON_TARGET_TOLERANCE = 0.1
# Margin after ads at or below this is "near breakeven"
NEAR_BREAKEVEN_MARGIN = 0.1


def _ratio(numerator: Optional[float], denominator: Optional[float]) -> Optional[float]:
    if numerator is None or denominator is None or denominator == 0:
        return None
    return numerator / denominator


# ─────────────────────────────────────────────
# PROFITABILITY
# ─────────────────────────────────────────────


def calculate_effective_margin(
    gross_margin_percent: Optional[float],
    other_costs_percent: Optional[float],
) -> Optional[float]:
    """Gross margin minus other costs, clamped to [0, 1].

    Both inputs are raw percentages. Absent other costs count as 0.
    """
    gross_margin = normalize_percentage(gross_margin_percent)
    if gross_margin is None:
        return None
    other_costs = normalize_percentage(other_costs_percent) or 0
    return max(0.0, min(1.0, gross_margin - other_costs))


def calculate_gross_margin_dollars(
    attributed_sales: Optional[float],
    effective_margin_percent: Optional[float],
) -> Optional[float]:
    if attributed_sales is None or effective_margin_percent is None:
        return None
    return attributed_sales * effective_margin_percent


def calculate_profit_after_ads(
    gross_margin_dollars: Optional[float],
    ad_spend: Optional[float],
    promo_costs: Optional[float],
) -> Optional[float]:
    """Gross margin $ − ad spend − promo costs (absent promo counts as 0)."""
    if gross_margin_dollars is None or ad_spend is None:
        return None
    return gross_margin_dollars - ad_spend - (promo_costs or 0)


def calculate_margin_after_ads(
    profit_after_ads: Optional[float],
    attributed_sales: Optional[float],
) -> Optional[float]:
    return _ratio(profit_after_ads, attributed_sales)


def calculate_breakeven_roas(effective_margin_percent: Optional[float]) -> Optional[float]:
    """The ROAS at which gross margin exactly pays for the ads."""
    return _ratio(1.0, effective_margin_percent)


def calculate_margin_per_dollar_spend(
    gross_margin_dollars: Optional[float],
    ad_spend: Optional[float],
) -> Optional[float]:
    return _ratio(gross_margin_dollars, ad_spend)


# ─────────────────────────────────────────────
# EFFICIENCY
# ─────────────────────────────────────────────


def calculate_roas(
    attributed_sales: Optional[float],
    ad_spend: Optional[float],
) -> Optional[float]:
    """Return on ad spend: attributed sales / ad spend."""
    return _ratio(attributed_sales, ad_spend)


def calculate_investment_rate(
    ad_spend: Optional[float],
    attributed_sales: Optional[float],
) -> Optional[float]:
    """Inverse of ROAS: share of sales reinvested in ads."""
    return _ratio(ad_spend, attributed_sales)


# ─────────────────────────────────────────────
# UNIT ECONOMICS
# ─────────────────────────────────────────────


def calculate_cost_per_unit(ad_spend: Optional[float], units_sold: Optional[float]) -> Optional[float]:
    return _ratio(ad_spend, units_sold)


def calculate_revenue_per_unit(
    attributed_sales: Optional[float], units_sold: Optional[float]
) -> Optional[float]:
    return _ratio(attributed_sales, units_sold)


def calculate_profit_per_unit_after_ads(
    profit_after_ads: Optional[float], units_sold: Optional[float]
) -> Optional[float]:
    return _ratio(profit_after_ads, units_sold)


def calculate_margin_per_unit(
    gross_margin_dollars: Optional[float], units_sold: Optional[float]
) -> Optional[float]:
    return _ratio(gross_margin_dollars, units_sold)


# ─────────────────────────────────────────────
# COST BREAKDOWN
# ─────────────────────────────────────────────


def calculate_commission_dollars(
    attributed_sales: Optional[float],
    commission_percent: Optional[float],
) -> Optional[float]:
    """Sales × commission %.

    Not used for campaign totals: the platform charges no commission at
    campaign level. Kept for planning tools that model one.
    """
    commission = normalize_percentage(commission_percent)
    if attributed_sales is None or commission is None:
        return None
    return attributed_sales * commission


def calculate_total_costs(
    ad_spend: Optional[float],
    commission_dollars: Optional[float],
    promo_costs: Optional[float],
    attributed_sales: Optional[float],
    other_costs_percent: Optional[float],
) -> Optional[float]:
    """Ad spend + commission + promo + other costs in dollars."""
    if ad_spend is None:
        return None
    other_costs_dollars = 0.0
    other_costs = normalize_percentage(other_costs_percent)
    if attributed_sales is not None and other_costs is not None:
        other_costs_dollars = attributed_sales * other_costs
    return ad_spend + (commission_dollars or 0) + (promo_costs or 0) + other_costs_dollars


def calculate_net_profit(
    gross_margin_dollars: Optional[float],
    ad_spend: Optional[float],
    commission_dollars: Optional[float],
    promo_costs: Optional[float],
) -> Optional[float]:
    if gross_margin_dollars is None or ad_spend is None:
        return None
    return gross_margin_dollars - ad_spend - (commission_dollars or 0) - (promo_costs or 0)


# ─────────────────────────────────────────────
# TARGET COMPARISON
# ─────────────────────────────────────────────


def compare_roas_to_target(
    actual_roas: Optional[float],
    target_roas: Optional[float],
) -> Optional[float]:
    """Positive means above target."""
    if actual_roas is None or target_roas is None:
        return None
    return actual_roas - target_roas


def get_performance_indicator(
    actual_roas: Optional[float],
    target_roas: Optional[float],
) -> PerformanceIndicator:
    difference = compare_roas_to_target(actual_roas, target_roas)
    if difference is None:
        return PerformanceIndicator.NO_TARGET
    if abs(difference) <= ON_TARGET_TOLERANCE:
        return PerformanceIndicator.ON_TARGET
    return PerformanceIndicator.ABOVE if difference > 0 else PerformanceIndicator.BELOW


# ─────────────────────────────────────────────
# ENGAGEMENT
# ─────────────────────────────────────────────


def calculate_ctr(clicks: Optional[float], impressions: Optional[float]) -> Optional[float]:
    """Click-through rate as a decimal (0.05 for 5%)."""
    return _ratio(clicks, impressions)


def calculate_cpc(ad_spend: Optional[float], clicks: Optional[float]) -> Optional[float]:
    return _ratio(ad_spend, clicks)


def calculate_cpm(ad_spend: Optional[float], impressions: Optional[float]) -> Optional[float]:
    """Cost per thousand impressions."""
    per_impression = _ratio(ad_spend, impressions)
    return per_impression * 1000 if per_impression is not None else None


def calculate_conversion_rate(orders: Optional[float], clicks: Optional[float]) -> Optional[float]:
    return _ratio(orders, clicks)


def calculate_cpo(ad_spend: Optional[float], orders: Optional[float]) -> Optional[float]:
    return _ratio(ad_spend, orders)


def calculate_aov(attributed_sales: Optional[float], orders: Optional[float]) -> Optional[float]:
    return _ratio(attributed_sales, orders)


def calculate_units_per_order(units_sold: Optional[float], orders: Optional[float]) -> Optional[float]:
    return _ratio(units_sold, orders)


# ─────────────────────────────────────────────
# CUSTOMER ACQUISITION
# ─────────────────────────────────────────────


def calculate_ntb_sales(
    attributed_sales: Optional[float],
    ntb_percent: Optional[float],
) -> Optional[float]:
    """Sales from new-to-brand customers."""
    ntb = normalize_percentage(ntb_percent)
    if attributed_sales is None or ntb is None:
        return None
    return attributed_sales * ntb


def calculate_repeat_sales(
    attributed_sales: Optional[float],
    ntb_sales: Optional[float],
) -> Optional[float]:
    if attributed_sales is None or ntb_sales is None:
        return None
    return attributed_sales - ntb_sales


def calculate_cac(ad_spend: Optional[float], ntb_percent: Optional[float]) -> Optional[float]:
    """Share of ad spend attributed to acquiring new customers."""
    ntb = normalize_percentage(ntb_percent)
    if ad_spend is None or ntb is None:
        return None
    return ad_spend * ntb


def calculate_cac_per_customer(
    ad_spend: Optional[float],
    ntb_percent: Optional[float],
    new_customers: Optional[float],
) -> Optional[float]:
    return _ratio(calculate_cac(ad_spend, ntb_percent), new_customers)


def calculate_repeat_percent(ntb_percent: Optional[float]) -> Optional[float]:
    ntb = normalize_percentage(ntb_percent)
    if ntb is None:
        return None
    return 1 - ntb


# ─────────────────────────────────────────────
# ORCHESTRATION
# ─────────────────────────────────────────────


def compute_campaign_metrics(inputs: CalculatorInputs) -> CalculatedMetrics:
    """Compute the complete metric set for one campaign input record.

    Deterministic and side-effect free: identical inputs always give an
    equal result.
    """
    effective_margin = calculate_effective_margin(
        inputs.gross_margin_percent, inputs.other_costs_percent
    )
    gross_margin_dollars = calculate_gross_margin_dollars(
        inputs.attributed_sales, effective_margin
    )

    # No commission is charged at campaign level
    commission_dollars = None

    profit_after_ads = calculate_profit_after_ads(
        gross_margin_dollars, inputs.ad_spend, inputs.promo_costs
    )
    roas = calculate_roas(inputs.attributed_sales, inputs.ad_spend)
    ntb_sales = calculate_ntb_sales(inputs.attributed_sales, inputs.ntb_percent)

    metrics = CalculatedMetrics(
        roas=roas,
        investment_rate=calculate_investment_rate(inputs.ad_spend, inputs.attributed_sales),
        effective_margin_percent=effective_margin,
        gross_margin_dollars=gross_margin_dollars,
        profit_after_ads=profit_after_ads,
        margin_after_ads_percent=calculate_margin_after_ads(
            profit_after_ads, inputs.attributed_sales
        ),
        breakeven_roas=calculate_breakeven_roas(effective_margin),
        margin_per_dollar_spend=calculate_margin_per_dollar_spend(
            gross_margin_dollars, inputs.ad_spend
        ),
        cost_per_unit=calculate_cost_per_unit(inputs.ad_spend, inputs.units_sold),
        revenue_per_unit=calculate_revenue_per_unit(inputs.attributed_sales, inputs.units_sold),
        profit_per_unit_after_ads=calculate_profit_per_unit_after_ads(
            profit_after_ads, inputs.units_sold
        ),
        margin_per_unit=calculate_margin_per_unit(gross_margin_dollars, inputs.units_sold),
        instacart_commission_dollars=commission_dollars,
        total_costs=calculate_total_costs(
            inputs.ad_spend,
            commission_dollars,
            inputs.promo_costs,
            inputs.attributed_sales,
            inputs.other_costs_percent,
        ),
        net_profit=calculate_net_profit(
            gross_margin_dollars, inputs.ad_spend, commission_dollars, inputs.promo_costs
        ),
        roas_vs_target=compare_roas_to_target(roas, inputs.target_roas),
        performance_indicator=get_performance_indicator(roas, inputs.target_roas),
        ctr=calculate_ctr(inputs.clicks, inputs.impressions),
        cpc=calculate_cpc(inputs.ad_spend, inputs.clicks),
        cpm=calculate_cpm(inputs.ad_spend, inputs.impressions),
        conversion_rate=calculate_conversion_rate(inputs.orders, inputs.clicks),
        cpo=calculate_cpo(inputs.ad_spend, inputs.orders),
        aov=calculate_aov(inputs.attributed_sales, inputs.orders),
        units_per_order=calculate_units_per_order(inputs.units_sold, inputs.orders),
        ntb_sales=ntb_sales,
        repeat_sales=calculate_repeat_sales(inputs.attributed_sales, ntb_sales),
        cac=calculate_cac(inputs.ad_spend, inputs.ntb_percent),
        repeat_customer_percent=calculate_repeat_percent(inputs.ntb_percent),
    )
    logger.debug(f"Computed campaign metrics (roas={roas}, profit={profit_after_ads})")
    return metrics


def get_profitability_status(margin_after_ads_percent: Optional[float]) -> ProfitabilityStatus:
    """Classify margin after ads (a decimal)."""
    if margin_after_ads_percent is None:
        return ProfitabilityStatus.WAITING
    if margin_after_ads_percent < 0:
        return ProfitabilityStatus.UNPROFITABLE
    if margin_after_ads_percent <= NEAR_BREAKEVEN_MARGIN:
        return ProfitabilityStatus.NEAR_BREAKEVEN
    return ProfitabilityStatus.PROFITABLE


def build_cost_breakdown(inputs: CalculatorInputs, metrics: CalculatedMetrics) -> CostBreakdown:
    """Split attributed sales into ad spend, promo, other costs and COGS.

    Missing values count as 0 here; this is a display breakdown.
    """
    sales = inputs.attributed_sales or 0
    ad_spend = inputs.ad_spend or 0
    promo = inputs.promo_costs or 0
    other_costs = sales * (normalize_percentage(inputs.other_costs_percent) or 0)
    cogs = sales - (metrics.gross_margin_dollars or 0)

    def share(amount: float) -> float:
        return amount / sales if sales > 0 else 0.0

    return CostBreakdown(
        ad_spend=ad_spend,
        instacart_commission=metrics.instacart_commission_dollars or 0,
        other_costs=other_costs,
        promo_costs=promo,
        cogs=cogs,
        total_costs=metrics.total_costs or 0,
        ad_spend_percent=share(ad_spend),
        promo_percent=share(promo),
        cogs_percent=share(cogs),
    )
