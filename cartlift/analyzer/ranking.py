"""CartLift — Sorting & Filtering.

Orders and filters product or SKU collections by a named metric. Missing
metric values compare as 0; the underlying ``None`` is left untouched.
"""

from enum import Enum
from typing import Callable, Dict, List, Optional, TypeVar, Union

from pydantic import BaseModel

from cartlift.models.history_models import Product
from cartlift.models.metric_models import UPCMetrics

T = TypeVar("T", Product, UPCMetrics)


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class ProductSortKey(str, Enum):
    ROAS = "roas"
    PROFIT = "profit"
    SALES = "sales"
    SPEND = "spend"
    NTB = "ntb"
    UNITS = "units"


class UPCSortKey(str, Enum):
    ROAS = "roas"
    PROFIT = "profit"
    SALES = "sales"
    UNITS = "units"
    MARGIN = "margin"


PRODUCT_SORT_VALUES: Dict[ProductSortKey, Callable[[Product], Optional[float]]] = {
    ProductSortKey.ROAS: lambda p: p.metrics.roas,
    ProductSortKey.PROFIT: lambda p: p.metrics.profit_after_ads,
    ProductSortKey.SALES: lambda p: p.inputs.attributed_sales,
    ProductSortKey.SPEND: lambda p: p.inputs.ad_spend,
    ProductSortKey.NTB: lambda p: p.metrics.ntb_sales,
    ProductSortKey.UNITS: lambda p: p.inputs.units_sold,
}

UPC_SORT_VALUES: Dict[UPCSortKey, Callable[[UPCMetrics], Optional[float]]] = {
    UPCSortKey.ROAS: lambda u: u.roas,
    UPCSortKey.PROFIT: lambda u: u.profit_after_ads,
    UPCSortKey.SALES: lambda u: u.attributed_sales,
    UPCSortKey.UNITS: lambda u: u.units_sold,
    UPCSortKey.MARGIN: lambda u: u.margin_percent,
}


SORT_KEYS = {key.value for key in ProductSortKey} | {key.value for key in UPCSortKey}


def _sort_value_getter(item: Union[Product, UPCMetrics], key: str) -> Callable:
    # Enum lookup raises ValueError for keys the item type does not support
    if isinstance(item, Product):
        return PRODUCT_SORT_VALUES[ProductSortKey(key)]
    return UPC_SORT_VALUES[UPCSortKey(key)]


def sort_by(
    collection: List[T],
    key: Union[str, ProductSortKey, UPCSortKey],
    direction: Union[str, SortDirection] = SortDirection.DESC,
) -> List[T]:
    """Return a new list ordered by ``key``; ties keep their input order."""
    if key not in SORT_KEYS:
        raise ValueError(f"Unknown sort key: {key}")
    reverse = SortDirection(direction) == SortDirection.DESC
    if not collection:
        return []
    get_value = _sort_value_getter(collection[0], key)
    return sorted(collection, key=lambda item: get_value(item) or 0, reverse=reverse)


class FilterSpec(BaseModel):
    """Inclusive bounds on ROAS / profit and a profitable-only switch."""

    min_roas: Optional[float] = None
    max_roas: Optional[float] = None
    min_profit: Optional[float] = None
    max_profit: Optional[float] = None
    profitable: Optional[bool] = None  # True: profit > 0 only; False: profit <= 0 only


def _roas_and_profit(item: Union[Product, UPCMetrics]) -> tuple[float, float]:
    if isinstance(item, Product):
        return item.metrics.roas or 0, item.metrics.profit_after_ads or 0
    return item.roas or 0, item.profit_after_ads or 0


def _matches(item: Union[Product, UPCMetrics], spec: FilterSpec) -> bool:
    roas, profit = _roas_and_profit(item)
    if spec.min_roas is not None and roas < spec.min_roas:
        return False
    if spec.max_roas is not None and roas > spec.max_roas:
        return False
    if spec.min_profit is not None and profit < spec.min_profit:
        return False
    if spec.max_profit is not None and profit > spec.max_profit:
        return False
    if spec.profitable is not None and spec.profitable != (profit > 0):
        return False
    return True


def filter_collection(collection: List[T], spec: FilterSpec) -> List[T]:
    """Keep the items matching every bound set on ``spec``."""
    return [item for item in collection if _matches(item, spec)]
