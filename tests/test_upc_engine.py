from __future__ import annotations

import pytest

from cartlift.analyzer.upc_engine import (
    aggregate_upcs,
    compute_all_upc_metrics,
    compute_upc_metrics,
    top_upcs,
    underperforming_upcs,
    upc_portfolio_margin,
    upc_portfolio_roas,
    weighted_margin,
)
from cartlift.models.input_models import UPCData
from cartlift.models.metric_models import UPCTotals


def _upc(upc_id: str, **fields) -> UPCData:
    return UPCData(id=upc_id, upc_code=f"0000{upc_id}", product_name=f"Item {upc_id}", **fields)


def test_reference_scenario() -> None:
    m = compute_upc_metrics(
        _upc(
            "a",
            ad_spend=500,
            attributed_sales=2000,
            gross_margin_percent=40,
            instacart_commission_percent=0,
        )
    )
    assert m.gross_margin_dollars == pytest.approx(800)
    assert m.instacart_commission_dollars == 0
    assert m.profit_after_ads == pytest.approx(300)
    assert m.margin_percent == pytest.approx(0.15)
    assert m.roas == pytest.approx(4.0)
    assert m.gross_margin_percent == pytest.approx(0.4)


def test_commission_is_modeled_per_upc() -> None:
    m = compute_upc_metrics(
        _upc(
            "b",
            ad_spend=100,
            attributed_sales=1000,
            gross_margin_percent=0.3,
            instacart_commission_percent=10,
            units_sold=200,
        )
    )
    assert m.instacart_commission_dollars == pytest.approx(100)
    assert m.profit_after_ads == pytest.approx(100)
    assert m.revenue_per_unit == pytest.approx(5)
    assert m.cost_per_unit == pytest.approx(0.5)
    assert m.profit_per_unit == pytest.approx(0.5)


def test_missing_inputs_zero_fill() -> None:
    m = compute_upc_metrics(_upc("c", ad_spend=50, attributed_sales=200))
    assert m.units_sold == 0
    assert m.cost_per_unit is None
    assert m.revenue_per_unit is None
    assert m.profit_per_unit is None
    assert m.gross_margin_dollars == 0
    assert m.profit_after_ads == pytest.approx(-50)


def test_zero_spend_and_sales() -> None:
    m = compute_upc_metrics(_upc("d"))
    assert m.roas is None
    assert m.margin_percent is None
    assert m.profit_after_ads == 0


def test_aggregation_sums_rows() -> None:
    metrics = compute_all_upc_metrics(
        [
            _upc("a", ad_spend=500, attributed_sales=2000, gross_margin_percent=40, units_sold=100),
            _upc("b", ad_spend=300, attributed_sales=600, gross_margin_percent=40),
        ]
    )
    totals = aggregate_upcs(metrics)
    assert totals.total_ad_spend == 800
    assert totals.total_attributed_sales == 2600
    assert totals.total_units == 100
    assert totals.total_gross_margin == pytest.approx(1040)
    assert totals.total_commission == 0
    assert totals.total_profit == pytest.approx(240)
    assert upc_portfolio_roas(totals) == pytest.approx(3.25)
    assert upc_portfolio_margin(totals) == pytest.approx(240 / 2600)


def test_empty_aggregation_guards() -> None:
    totals = aggregate_upcs([])
    assert totals == UPCTotals()
    assert upc_portfolio_roas(totals) is None
    assert upc_portfolio_margin(totals) is None
    assert weighted_margin([]) is None


def test_rankings_and_weighted_margin() -> None:
    metrics = compute_all_upc_metrics(
        [
            _upc("win", ad_spend=100, attributed_sales=1000, gross_margin_percent=40),
            _upc("lose", ad_spend=400, attributed_sales=500, gross_margin_percent=40),
            _upc("flat", ad_spend=0, attributed_sales=0),
        ]
    )
    assert [u.id for u in top_upcs(metrics, count=2)] == ["win", "flat"]
    assert [u.id for u in underperforming_upcs(metrics)] == ["lose"]
    # (0.3 * 1000 + -0.4 * 500) / 1500
    assert weighted_margin(metrics) == pytest.approx(100 / 1500)
