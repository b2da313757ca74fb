from __future__ import annotations

from typing import Callable, Optional

import pytest

from cartlift.analyzer.campaign_engine import compute_campaign_metrics
from cartlift.analyzer.trend_engine import date_to_timestamp
from cartlift.models.history_models import Product, ProductSnapshot
from cartlift.models.input_models import CalculatorInputs
from cartlift.models.metric_models import CalculatedMetrics


@pytest.fixture
def campaign_inputs() -> CalculatorInputs:
    return CalculatorInputs(
        ad_spend=1000,
        attributed_sales=5000,
        gross_margin_percent=40,
        other_costs_percent=5,
        promo_costs=100,
        units_sold=1250,
        target_roas=4.0,
        impressions=200_000,
        clicks=2500,
        orders=400,
        ntb_percent=35,
    )


@pytest.fixture
def make_product() -> Callable[..., Product]:
    def _make(
        product_id: str,
        ad_spend: Optional[float] = None,
        sales: Optional[float] = None,
        profit: Optional[float] = None,
        roas: Optional[float] = None,
        **inputs,
    ) -> Product:
        return Product(
            id=product_id,
            name=product_id.title(),
            inputs=CalculatorInputs(ad_spend=ad_spend, attributed_sales=sales, **inputs),
            metrics=CalculatedMetrics(profit_after_ads=profit, roas=roas),
        )

    return _make


@pytest.fixture
def make_snapshot() -> Callable[..., ProductSnapshot]:
    """Snapshot with explicit date and metrics, bypassing create_snapshot."""

    def _make(
        product_id: str,
        date: str,
        roas: Optional[float] = None,
        profit: Optional[float] = None,
        **inputs,
    ) -> ProductSnapshot:
        return ProductSnapshot(
            id=f"snap-{product_id}-{date}",
            product_id=product_id,
            product_name=product_id.title(),
            date=date,
            timestamp=date_to_timestamp(date),
            inputs=CalculatorInputs(**inputs),
            metrics=CalculatedMetrics(roas=roas, profit_after_ads=profit),
        )

    return _make


@pytest.fixture
def computed_product(campaign_inputs: CalculatorInputs) -> Product:
    return Product(
        id="p-1",
        name="Oat Milk",
        inputs=campaign_inputs,
        metrics=compute_campaign_metrics(campaign_inputs),
    )
