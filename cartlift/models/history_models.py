"""CartLift — Product & Historical Models."""

from enum import Enum
from typing import Any, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from cartlift.models.input_models import CalculatorInputs, UPCData
from cartlift.models.metric_models import CalculatedMetrics


class Product(BaseModel):
    """A named input set and the metrics computed from it.

    Metrics are refreshed by whoever changes ``inputs``; nothing here
    recomputes them automatically.
    """

    id: str
    name: str
    inputs: CalculatorInputs = Field(default_factory=CalculatorInputs)
    metrics: CalculatedMetrics = Field(default_factory=CalculatedMetrics)


# ── Frozen copies held by snapshots ──


class SnapshotUPC(UPCData):
    model_config = ConfigDict(frozen=True)


class SnapshotInputs(CalculatorInputs):
    model_config = ConfigDict(frozen=True)

    upcs: Tuple[SnapshotUPC, ...] = ()


class SnapshotMetrics(CalculatedMetrics):
    model_config = ConfigDict(frozen=True)


class ProductSnapshot(BaseModel):
    """Immutable point-in-time copy of a product.

    Inputs and metrics are stored as frozen copies, so nothing reachable
    from a snapshot can be reassigned. ``product_id`` is a plain reference:
    snapshots survive deletion of the product they were taken from.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    product_id: str
    product_name: str
    date: str = Field(description="YYYY-MM-DD")
    timestamp: int = Field(description="Epoch milliseconds, UTC midnight of date")
    inputs: SnapshotInputs
    metrics: SnapshotMetrics
    notes: Optional[str] = None

    @field_validator("inputs", "metrics", mode="before")
    @classmethod
    def _detach(cls, value: Any) -> Any:
        """Rebuild live models as their frozen counterparts."""
        if isinstance(value, BaseModel) and not isinstance(value, (SnapshotInputs, SnapshotMetrics)):
            return value.model_dump()
        return value


class TrendMetric(str, Enum):
    """Metrics that can be charted from snapshots."""

    ROAS = "roas"
    PROFIT = "profit"
    SALES = "sales"
    SPEND = "spend"
    MARGIN = "margin"
    CTR = "ctr"
    NTB = "ntb"


class GrowthMetric(str, Enum):
    """Metrics supported by snapshot-to-snapshot growth rates."""

    ROAS = "roas"
    PROFIT = "profit"
    SALES = "sales"


class TrendPoint(BaseModel):
    """One charted value."""

    date: str
    value: float
    label: Optional[str] = None


class TrendDirection(str, Enum):
    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"


class TrendSummary(BaseModel):
    """Regression-based classification of a product's recent history."""

    trend: TrendDirection = TrendDirection.STABLE
    roas_trend: float = 0.0
    profit_trend: float = 0.0


class PeriodTrend(str, Enum):
    UP = "up"
    DOWN = "down"
    FLAT = "flat"


class PeriodComparison(BaseModel):
    """Mean of a metric in the current vs the previous snapshot set."""

    metric: TrendMetric
    label: str
    current: float
    previous: float
    change: float
    change_percent: float
    trend: PeriodTrend
