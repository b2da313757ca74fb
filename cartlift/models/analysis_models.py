"""CartLift — Analysis Output Models (Versioned)."""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from cartlift.models.input_models import CalculatorInputs
from cartlift.models.metric_models import (
    CalculatedMetrics,
    CostBreakdown,
    ProfitabilityStatus,
    UPCMetrics,
    UPCTotals,
)


class AlertLevel(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    SUCCESS = "success"


class Alert(BaseModel):
    """A performance issue or opportunity worth surfacing."""

    level: AlertLevel
    title: str
    message: str
    action: str = ""


class BreakevenAnalysis(BaseModel):
    """What a given ad spend must return to break even."""

    sales: float
    gross_margin: float
    commission: float
    profit: float
    profit_margin: float


class CampaignAnalysis(BaseModel):
    """Full output for one campaign input set."""

    schema_version: str = "1.0.0"
    metrics: CalculatedMetrics
    status: ProfitabilityStatus
    cost_breakdown: CostBreakdown
    upc_metrics: List[UPCMetrics] = []
    upc_totals: UPCTotals = UPCTotals()
    upc_roas: Optional[float] = None
    upc_margin_percent: Optional[float] = None
    alerts: List[Alert] = []


class SavedCalculation(BaseModel):
    """A named input set persisted through the key-value store."""

    name: str
    date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    inputs: CalculatorInputs
