"""CartLift — Planning & What-If Engine.

Works backwards from a target to the ROAS that achieves it. A target the
available margin cannot reach returns ``None``; callers surface that as
"impossible" instead of a misleading number.
"""

from typing import Optional

from cartlift.analyzer.campaign_engine import compute_campaign_metrics
from cartlift.core.logging import get_logger
from cartlift.core.percentages import normalize_or_zero, normalize_percentage
from cartlift.models.analysis_models import BreakevenAnalysis
from cartlift.models.input_models import CalculatorInputs
from cartlift.models.metric_models import CalculatedMetrics

logger = get_logger("analyzer.planning")


def _inverse_of_positive(net_margin: float) -> Optional[float]:
    if net_margin <= 0:
        return None
    return 1 / net_margin


def target_roas_for_profit_margin(
    gross_margin_percent: Optional[float],
    commission_percent: Optional[float],
    target_margin_percent: Optional[float],
) -> Optional[float]:
    """ROAS needed so that margin − commission − ad share = target margin.

    ad spend / sales = gm − commission − target, so ROAS = 1 / that.
    """
    gross_margin = normalize_percentage(gross_margin_percent)
    if gross_margin is None:
        return None
    net_margin = (
        gross_margin
        - normalize_or_zero(commission_percent)
        - normalize_or_zero(target_margin_percent)
    )
    required = _inverse_of_positive(net_margin)
    if required is None:
        logger.info(f"Target margin {target_margin_percent} is not reachable")
    return required


def breakeven_roas_with_commission(
    gross_margin_percent: Optional[float],
    commission_percent: Optional[float],
) -> Optional[float]:
    """ROAS at which profit after ads and commission is exactly 0."""
    return target_roas_for_profit_margin(gross_margin_percent, commission_percent, 0)


def breakeven_analysis(
    gross_margin_percent: Optional[float],
    commission_percent: Optional[float],
    ad_spend: float,
) -> Optional[BreakevenAnalysis]:
    """Sales, margin and profit when ``ad_spend`` returns exactly breakeven ROAS."""
    breakeven_roas = breakeven_roas_with_commission(gross_margin_percent, commission_percent)
    if breakeven_roas is None:
        return None

    sales = ad_spend * breakeven_roas
    gross_margin = sales * normalize_or_zero(gross_margin_percent)
    commission = sales * normalize_or_zero(commission_percent)
    profit = gross_margin - commission - ad_spend
    return BreakevenAnalysis(
        sales=sales,
        gross_margin=gross_margin,
        commission=commission,
        profit=profit,
        profit_margin=profit / sales if sales != 0 else 0.0,
    )


def required_roas_for_margin(
    effective_margin_percent: Optional[float],
    target_margin_percent: Optional[float],
) -> Optional[float]:
    """ROAS giving ``target`` margin after ads, ignoring promo costs.

    ``effective_margin_percent`` is an already-normalized campaign metric;
    the target is a raw percentage.
    """
    target = normalize_percentage(target_margin_percent)
    if effective_margin_percent is None or target is None:
        return None
    return _inverse_of_positive(effective_margin_percent - target)


def ad_spend_scenario(
    inputs: CalculatorInputs,
    change_percent: float,
) -> Optional[CalculatedMetrics]:
    """Metrics if ad spend moved by ``change_percent`` with sales held flat."""
    if inputs.ad_spend is None:
        return None
    scenario = inputs.model_copy(
        update={"ad_spend": inputs.ad_spend * (1 + change_percent / 100)}
    )
    return compute_campaign_metrics(scenario)
