"""CartLift — Raw Input Models.

Every numeric field is three-state: a real number, or ``None`` for "not
entered". Percentage fields keep the user's ambiguous format (40 or 0.4) and
are normalized where a formula consumes them.
"""

import math
from typing import Annotated, List, Optional

from pydantic import AfterValidator, BaseModel, Field


def _finite_or_none(value: Optional[float]) -> Optional[float]:
    """NaN / ±inf are "not entered", never numbers.

    Runs after coercion so strings such as ``"NaN"`` are caught too.
    """
    if value is not None and not math.isfinite(value):
        return None
    return value


OptionalNumber = Annotated[Optional[float], AfterValidator(_finite_or_none)]


class UPCData(BaseModel):
    """Per-SKU raw input."""

    id: str
    upc_code: str = ""
    product_name: str = ""
    units_sold: OptionalNumber = None
    ad_spend: OptionalNumber = None
    attributed_sales: OptionalNumber = None
    gross_margin_percent: OptionalNumber = None
    instacart_commission_percent: OptionalNumber = None


class CalculatorInputs(BaseModel):
    """Campaign-level raw input."""

    ad_spend: OptionalNumber = None
    attributed_sales: OptionalNumber = None
    gross_margin_percent: OptionalNumber = None
    other_costs_percent: OptionalNumber = None
    promo_costs: OptionalNumber = None
    units_sold: OptionalNumber = None
    instacart_commission_percent: OptionalNumber = None
    target_roas: OptionalNumber = None
    # Engagement
    impressions: OptionalNumber = None
    clicks: OptionalNumber = None
    orders: OptionalNumber = None
    # Customer acquisition
    ntb_percent: OptionalNumber = Field(default=None, description="New-to-brand %")
    # SKU breakdown
    upcs: List[UPCData] = Field(default_factory=list)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "ad_spend": 1000,
                    "attributed_sales": 5000,
                    "gross_margin_percent": 40,
                    "other_costs_percent": 5,
                    "promo_costs": 100,
                    "units_sold": 1250,
                    "target_roas": 4.0,
                    "impressions": 200000,
                    "clicks": 2500,
                    "orders": 400,
                    "ntb_percent": 35,
                }
            ]
        }
    }
