from __future__ import annotations

import math

import pytest

from cartlift.analyzer.campaign_engine import (
    build_cost_breakdown,
    calculate_cac_per_customer,
    calculate_commission_dollars,
    calculate_effective_margin,
    calculate_profit_after_ads,
    calculate_roas,
    compute_campaign_metrics,
    get_performance_indicator,
    get_profitability_status,
)
from cartlift.models.input_models import CalculatorInputs, UPCData
from cartlift.models.metric_models import PerformanceIndicator, ProfitabilityStatus


def test_full_metric_set(campaign_inputs: CalculatorInputs) -> None:
    m = compute_campaign_metrics(campaign_inputs)

    assert m.effective_margin_percent == pytest.approx(0.35)
    assert m.gross_margin_dollars == pytest.approx(1750)
    assert m.profit_after_ads == pytest.approx(650)
    assert m.margin_after_ads_percent == pytest.approx(0.13)
    assert m.roas == pytest.approx(5.0)
    assert m.investment_rate == pytest.approx(0.2)
    assert m.breakeven_roas == pytest.approx(1 / 0.35)
    assert m.margin_per_dollar_spend == pytest.approx(1.75)
    assert m.cost_per_unit == pytest.approx(0.8)
    assert m.revenue_per_unit == pytest.approx(4.0)
    assert m.profit_per_unit_after_ads == pytest.approx(0.52)
    assert m.margin_per_unit == pytest.approx(1.4)
    assert m.instacart_commission_dollars is None
    assert m.total_costs == pytest.approx(1350)
    assert m.net_profit == pytest.approx(650)
    assert m.roas_vs_target == pytest.approx(1.0)
    assert m.performance_indicator == PerformanceIndicator.ABOVE
    assert m.ctr == pytest.approx(0.0125)
    assert m.cpc == pytest.approx(0.4)
    assert m.cpm == pytest.approx(5.0)
    assert m.conversion_rate == pytest.approx(0.16)
    assert m.cpo == pytest.approx(2.5)
    assert m.aov == pytest.approx(12.5)
    assert m.units_per_order == pytest.approx(3.125)
    assert m.ntb_sales == pytest.approx(1750)
    assert m.repeat_sales == pytest.approx(3250)
    assert m.cac == pytest.approx(350)
    assert m.repeat_customer_percent == pytest.approx(0.65)


def test_empty_inputs_yield_all_none() -> None:
    m = compute_campaign_metrics(CalculatorInputs())
    values = m.model_dump()
    assert values.pop("performance_indicator") == PerformanceIndicator.NO_TARGET
    assert all(v is None for v in values.values())


def test_roas_examples() -> None:
    assert calculate_roas(5000, 1000) == pytest.approx(5.0)
    assert calculate_roas(5000, 0) is None
    assert calculate_roas(None, 1000) is None
    assert calculate_roas(5000, None) is None


@pytest.mark.parametrize(
    "gross, other",
    [(40, 5), (0.4, -0.3), (120, None), (-10, 0.2), (0.9, -50), (0, 0)],
)
def test_effective_margin_is_clamped(gross: float, other) -> None:
    margin = calculate_effective_margin(gross, other)
    assert 0.0 <= margin <= 1.0


def test_effective_margin_requires_gross_margin() -> None:
    assert calculate_effective_margin(None, 5) is None


def test_profit_after_ads_promo_handling() -> None:
    assert calculate_profit_after_ads(400, 300, None) == 100
    assert calculate_profit_after_ads(400, 300, 50) == 50
    assert calculate_profit_after_ads(None, 300, 50) is None
    assert calculate_profit_after_ads(400, None, 50) is None


def test_zero_divisors_are_none() -> None:
    m = compute_campaign_metrics(
        CalculatorInputs(
            ad_spend=0,
            attributed_sales=0,
            gross_margin_percent=5,
            other_costs_percent=10,
            units_sold=0,
            impressions=0,
            clicks=0,
            orders=0,
        )
    )
    assert m.effective_margin_percent == 0.0
    assert m.breakeven_roas is None
    for field in (
        "roas",
        "investment_rate",
        "margin_after_ads_percent",
        "margin_per_dollar_spend",
        "cost_per_unit",
        "revenue_per_unit",
        "ctr",
        "cpc",
        "cpm",
        "conversion_rate",
        "cpo",
        "aov",
        "units_per_order",
    ):
        assert getattr(m, field) is None, field


def test_non_finite_inputs_are_treated_as_missing() -> None:
    inputs = CalculatorInputs(ad_spend=math.inf, attributed_sales=math.nan)
    assert inputs.ad_spend is None
    assert inputs.attributed_sales is None
    assert compute_campaign_metrics(inputs).roas is None


@pytest.mark.parametrize("raw", ["NaN", "inf", "-inf"])
def test_non_finite_strings_are_treated_as_missing(raw: str) -> None:
    inputs = CalculatorInputs(ad_spend=100, attributed_sales=raw, ntb_percent=raw)
    assert inputs.attributed_sales is None
    assert inputs.ntb_percent is None

    m = compute_campaign_metrics(inputs)
    assert m.roas is None
    assert m.investment_rate is None
    assert all(v is None or math.isfinite(v) for v in m.model_dump().values() if isinstance(v, float))


def test_non_finite_upc_fields_are_treated_as_missing() -> None:
    upc = UPCData(id="u", ad_spend="inf", attributed_sales="NaN")
    assert upc.ad_spend is None
    assert upc.attributed_sales is None


def test_total_costs_need_only_ad_spend() -> None:
    m = compute_campaign_metrics(CalculatorInputs(ad_spend=200))
    assert m.total_costs == 200
    assert m.net_profit is None


@pytest.mark.parametrize(
    "roas, target, expected",
    [
        (4.05, 4.0, PerformanceIndicator.ON_TARGET),
        (3.95, 4.0, PerformanceIndicator.ON_TARGET),
        (4.2, 4.0, PerformanceIndicator.ABOVE),
        (3.5, 4.0, PerformanceIndicator.BELOW),
        (None, 4.0, PerformanceIndicator.NO_TARGET),
        (4.0, None, PerformanceIndicator.NO_TARGET),
    ],
)
def test_performance_indicator(roas, target, expected) -> None:
    assert get_performance_indicator(roas, target) == expected


def test_compute_is_idempotent(campaign_inputs: CalculatorInputs) -> None:
    first = compute_campaign_metrics(campaign_inputs)
    second = compute_campaign_metrics(campaign_inputs)
    assert first == second
    assert first.model_dump() == second.model_dump()


def test_ntb_accepts_both_formats() -> None:
    whole = compute_campaign_metrics(CalculatorInputs(attributed_sales=1000, ntb_percent=25))
    decimal = compute_campaign_metrics(CalculatorInputs(attributed_sales=1000, ntb_percent=0.25))
    assert whole.ntb_sales == pytest.approx(250)
    assert decimal.ntb_sales == pytest.approx(250)


def test_helpers() -> None:
    assert calculate_commission_dollars(1000, 10) == pytest.approx(100)
    assert calculate_commission_dollars(1000, None) is None
    assert calculate_cac_per_customer(1000, 40, 20) == pytest.approx(20)
    assert calculate_cac_per_customer(1000, 40, 0) is None


@pytest.mark.parametrize(
    "margin, expected",
    [
        (None, ProfitabilityStatus.WAITING),
        (-0.01, ProfitabilityStatus.UNPROFITABLE),
        (0.0, ProfitabilityStatus.NEAR_BREAKEVEN),
        (0.1, ProfitabilityStatus.NEAR_BREAKEVEN),
        (0.13, ProfitabilityStatus.PROFITABLE),
    ],
)
def test_profitability_status(margin, expected) -> None:
    assert get_profitability_status(margin) == expected


def test_cost_breakdown(campaign_inputs: CalculatorInputs) -> None:
    metrics = compute_campaign_metrics(campaign_inputs)
    costs = build_cost_breakdown(campaign_inputs, metrics)
    assert costs.ad_spend == 1000
    assert costs.promo_costs == 100
    assert costs.other_costs == pytest.approx(250)
    assert costs.cogs == pytest.approx(3250)
    assert costs.total_costs == pytest.approx(1350)
    assert costs.ad_spend_percent == pytest.approx(0.2)
    assert costs.instacart_commission == 0
