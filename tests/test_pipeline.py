from __future__ import annotations

import pytest

from cartlift.analyzer.pipeline import analyze_campaign, create_product, refresh_product
from cartlift.config import settings
from cartlift.models.input_models import CalculatorInputs, UPCData
from cartlift.models.metric_models import ProfitabilityStatus


def test_create_product_computes_metrics(campaign_inputs) -> None:
    product = create_product("Oat Milk", campaign_inputs)
    assert product.id.startswith("product-")
    assert product.name == "Oat Milk"
    assert product.metrics.roas == pytest.approx(5.0)

    campaign_inputs.ad_spend = 1
    assert product.inputs.ad_spend == 1000


def test_create_product_with_explicit_id(campaign_inputs) -> None:
    assert create_product("Oat Milk", campaign_inputs, product_id="p-9").id == "p-9"
    assert create_product("A", campaign_inputs).id != create_product("B", campaign_inputs).id


def test_refresh_product(campaign_inputs) -> None:
    product = create_product("Oat Milk", campaign_inputs, product_id="p-1")
    updated = refresh_product(product, campaign_inputs.model_copy(update={"ad_spend": 2000}), name="Oat Milk 2L")

    assert updated.id == "p-1"
    assert updated.name == "Oat Milk 2L"
    assert updated.metrics.roas == pytest.approx(2.5)
    assert product.metrics.roas == pytest.approx(5.0)

    renamed = refresh_product(product, name="Renamed")
    assert renamed.metrics == product.metrics


def test_analyze_campaign(campaign_inputs) -> None:
    inputs = campaign_inputs.model_copy(
        update={
            "upcs": [
                UPCData(id="1", upc_code="111", product_name="Oat Milk 1L", ad_spend=500,
                        attributed_sales=2000, gross_margin_percent=40),
                UPCData(id="2", upc_code="222", product_name="Oat Milk 2L", ad_spend=500,
                        attributed_sales=3000, gross_margin_percent=40),
            ]
        }
    )
    analysis = analyze_campaign(inputs)

    assert analysis.schema_version == settings.schema_version
    assert analysis.status == ProfitabilityStatus.PROFITABLE
    assert analysis.metrics.profit_after_ads == pytest.approx(650)
    assert analysis.cost_breakdown.total_costs == pytest.approx(1350)
    assert [u.id for u in analysis.upc_metrics] == ["1", "2"]
    assert analysis.upc_totals.total_ad_spend == 1000
    assert analysis.upc_totals.total_profit == pytest.approx(1000)
    assert analysis.upc_roas == pytest.approx(5.0)
    assert analysis.upc_margin_percent == pytest.approx(0.2)
    assert "Scale Opportunity" in [a.title for a in analysis.alerts]


def test_analyze_empty_campaign() -> None:
    analysis = analyze_campaign(CalculatorInputs())
    assert analysis.status == ProfitabilityStatus.WAITING
    assert analysis.upc_metrics == []
    assert analysis.upc_roas is None
    assert analysis.alerts == []
