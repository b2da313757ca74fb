"""CartLift — Analysis Pipeline.

Runs the full data flow for one campaign input set:
  inputs → campaign metrics → SKU metrics → SKU totals → status, costs, alerts

Also builds and refreshes ``Product`` records for the portfolio view.
"""

import uuid
from typing import Optional

from cartlift.analyzer.alerts_engine import generate_alerts
from cartlift.analyzer.campaign_engine import (
    build_cost_breakdown,
    compute_campaign_metrics,
    get_profitability_status,
)
from cartlift.analyzer.upc_engine import (
    aggregate_upcs,
    compute_all_upc_metrics,
    upc_portfolio_margin,
    upc_portfolio_roas,
)
from cartlift.config import settings
from cartlift.core.logging import get_logger
from cartlift.models.analysis_models import CampaignAnalysis
from cartlift.models.history_models import Product
from cartlift.models.input_models import CalculatorInputs

logger = get_logger("analyzer.pipeline")


def create_product(
    name: str,
    inputs: CalculatorInputs,
    product_id: Optional[str] = None,
) -> Product:
    """Build a product with freshly computed metrics.

    Uniqueness of ``product_id`` within a collection is the caller's concern.
    """
    product = Product(
        id=product_id or f"product-{uuid.uuid4().hex[:12]}",
        name=name,
        inputs=inputs.model_copy(deep=True),
        metrics=compute_campaign_metrics(inputs),
    )
    logger.info(f"Created product {name}", extra={"product_id": product.id})
    return product


def refresh_product(
    product: Product,
    inputs: Optional[CalculatorInputs] = None,
    name: Optional[str] = None,
) -> Product:
    """Return a copy of ``product`` with new inputs/name and recomputed metrics."""
    new_inputs = (inputs or product.inputs).model_copy(deep=True)
    return Product(
        id=product.id,
        name=name or product.name,
        inputs=new_inputs,
        metrics=compute_campaign_metrics(new_inputs),
    )


def analyze_campaign(inputs: CalculatorInputs) -> CampaignAnalysis:
    """Compute every campaign and SKU output for one input set."""
    metrics = compute_campaign_metrics(inputs)
    upc_metrics = compute_all_upc_metrics(inputs.upcs)
    upc_totals = aggregate_upcs(upc_metrics)

    analysis = CampaignAnalysis(
        schema_version=settings.schema_version,
        metrics=metrics,
        status=get_profitability_status(metrics.margin_after_ads_percent),
        cost_breakdown=build_cost_breakdown(inputs, metrics),
        upc_metrics=upc_metrics,
        upc_totals=upc_totals,
        upc_roas=upc_portfolio_roas(upc_totals),
        upc_margin_percent=upc_portfolio_margin(upc_totals),
        alerts=generate_alerts(metrics, upc_metrics),
    )
    logger.info(
        f"Campaign analysis complete. Status: {analysis.status.value}. "
        f"UPCs: {len(upc_metrics)}. Alerts: {len(analysis.alerts)}",
        extra={"entity_count": len(upc_metrics)},
    )
    return analysis
