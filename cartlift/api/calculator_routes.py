"""CartLift — Calculator API Routes."""

from typing import List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from cartlift.analyzer.pipeline import analyze_campaign
from cartlift.analyzer.planning_engine import (
    ad_spend_scenario,
    breakeven_analysis,
    breakeven_roas_with_commission,
    target_roas_for_profit_margin,
)
from cartlift.analyzer.portfolio_engine import aggregate_portfolio
from cartlift.analyzer.ranking import FilterSpec, SortDirection, filter_collection, sort_by
from cartlift.analyzer.upc_engine import (
    aggregate_upcs,
    compute_all_upc_metrics,
    upc_portfolio_margin,
    upc_portfolio_roas,
)
from cartlift.connectors.instacart.csv_parser import CSVImportError
from cartlift.connectors.instacart.transformer import import_upcs
from cartlift.core.logging import get_logger
from cartlift.models.analysis_models import BreakevenAnalysis, CampaignAnalysis
from cartlift.models.history_models import Product
from cartlift.models.input_models import CalculatorInputs, UPCData
from cartlift.models.metric_models import CalculatedMetrics, PortfolioMetrics, UPCMetrics, UPCTotals

logger = get_logger("api.calculator")

router = APIRouter(tags=["Calculator"])


# ── Request / Response Models ──


class UPCAnalysisResponse(BaseModel):
    metrics: List[UPCMetrics]
    totals: UPCTotals
    portfolio_roas: Optional[float] = None
    portfolio_margin_percent: Optional[float] = None


class PortfolioRequest(BaseModel):
    products: List[Product]
    sort_key: Optional[str] = None
    direction: SortDirection = SortDirection.DESC
    filters: Optional[FilterSpec] = None


class PortfolioResponse(BaseModel):
    portfolio: PortfolioMetrics
    products: List[Product]


class TargetROASRequest(BaseModel):
    gross_margin_percent: Optional[float] = None
    instacart_commission_percent: Optional[float] = None
    target_margin_percent: Optional[float] = None
    ad_spend: Optional[float] = None
    """Spend to evaluate at breakeven ROAS."""


class TargetROASResponse(BaseModel):
    status: str = "success"  # "success" | "impossible"
    required_roas: Optional[float] = None
    breakeven_roas: Optional[float] = None
    breakeven: Optional[BreakevenAnalysis] = None


class ScenarioRequest(BaseModel):
    inputs: CalculatorInputs
    ad_spend_change_percent: float = 0.0


class CSVImportRequest(BaseModel):
    csv_text: str
    gross_margin_percent: Optional[float] = None


# ── Endpoints ──


@router.post("/metrics/campaign", response_model=CampaignAnalysis)
async def campaign_metrics(inputs: CalculatorInputs):
    """Compute campaign metrics, SKU breakdown, status, costs and alerts."""
    return analyze_campaign(inputs)


@router.post("/metrics/upcs", response_model=UPCAnalysisResponse)
async def upc_metrics(upcs: List[UPCData]):
    """Compute per-SKU metrics and their totals."""
    metrics = compute_all_upc_metrics(upcs)
    totals = aggregate_upcs(metrics)
    return UPCAnalysisResponse(
        metrics=metrics,
        totals=totals,
        portfolio_roas=upc_portfolio_roas(totals),
        portfolio_margin_percent=upc_portfolio_margin(totals),
    )


@router.post("/portfolio", response_model=PortfolioResponse)
async def portfolio(request: PortfolioRequest):
    """Aggregate products; optionally filter and sort the product list."""
    products = request.products
    if request.filters is not None:
        products = filter_collection(products, request.filters)
    if request.sort_key:
        try:
            products = sort_by(products, request.sort_key, request.direction)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=f"Invalid sort key: {e}")
    return PortfolioResponse(
        portfolio=aggregate_portfolio(request.products), products=products
    )


@router.post("/planning/target-roas", response_model=TargetROASResponse)
async def planning_target_roas(request: TargetROASRequest):
    """Required ROAS for a target margin, plus breakeven analysis."""
    required = target_roas_for_profit_margin(
        request.gross_margin_percent,
        request.instacart_commission_percent,
        request.target_margin_percent,
    )
    breakeven = None
    if request.ad_spend is not None:
        breakeven = breakeven_analysis(
            request.gross_margin_percent,
            request.instacart_commission_percent,
            request.ad_spend,
        )
    return TargetROASResponse(
        status="success" if required is not None else "impossible",
        required_roas=required,
        breakeven_roas=breakeven_roas_with_commission(
            request.gross_margin_percent, request.instacart_commission_percent
        ),
        breakeven=breakeven,
    )


@router.post("/planning/scenario", response_model=CalculatedMetrics)
async def planning_scenario(request: ScenarioRequest):
    """Metrics with ad spend changed by a percentage."""
    metrics = ad_spend_scenario(request.inputs, request.ad_spend_change_percent)
    if metrics is None:
        raise HTTPException(status_code=400, detail="Ad spend is required for a scenario")
    return metrics


@router.post("/import/csv", response_model=List[UPCData])
async def import_csv(request: CSVImportRequest):
    """Turn an Ads Manager export into SKU inputs."""
    try:
        return import_upcs(request.csv_text, request.gross_margin_percent)
    except CSVImportError as e:
        logger.error(f"CSV import failed: {e}", extra={"endpoint": "/import/csv"})
        raise HTTPException(status_code=400, detail=str(e))
