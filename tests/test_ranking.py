from __future__ import annotations

import pytest

from cartlift.analyzer.ranking import (
    FilterSpec,
    ProductSortKey,
    SortDirection,
    UPCSortKey,
    filter_collection,
    sort_by,
)
from cartlift.analyzer.upc_engine import compute_all_upc_metrics
from cartlift.models.input_models import UPCData


@pytest.fixture
def products(make_product):
    return [
        make_product("a", ad_spend=100, sales=250, profit=40, roas=2.5),
        make_product("b", ad_spend=50, sales=300, profit=-10, roas=6.0),
        make_product("c", ad_spend=None, sales=None, profit=None, roas=None),
        make_product("d", ad_spend=200, sales=1000, profit=0, roas=5.0),
    ]


def _ids(items) -> list[str]:
    return [item.id for item in items]


def test_sort_descending_by_default(products) -> None:
    assert _ids(sort_by(products, ProductSortKey.ROAS)) == ["b", "d", "a", "c"]


def test_sort_ascending_treats_missing_as_zero(products) -> None:
    assert _ids(sort_by(products, "profit", "asc")) == ["b", "c", "d", "a"]


def test_sort_by_inputs(products) -> None:
    assert _ids(sort_by(products, ProductSortKey.SPEND, SortDirection.DESC)) == ["d", "a", "b", "c"]
    assert _ids(sort_by(products, ProductSortKey.SALES, SortDirection.ASC)) == ["c", "a", "b", "d"]


def test_sort_is_stable_and_non_mutating(make_product) -> None:
    tied = [make_product(pid, profit=10) for pid in ("x", "y", "z")]
    assert _ids(sort_by(tied, ProductSortKey.PROFIT)) == ["x", "y", "z"]
    assert _ids(sort_by(tied, ProductSortKey.PROFIT, SortDirection.ASC)) == ["x", "y", "z"]

    original = list(tied)
    sort_by(tied, ProductSortKey.PROFIT)
    assert tied == original


def test_sort_keeps_missing_values(products) -> None:
    ranked = sort_by(products, ProductSortKey.ROAS)
    assert ranked[-1].metrics.roas is None


def test_invalid_sort_key_and_direction(products) -> None:
    with pytest.raises(ValueError):
        sort_by(products, "bogus")
    with pytest.raises(ValueError):
        sort_by(products, ProductSortKey.ROAS, "sideways")


def test_empty_collection() -> None:
    assert sort_by([], ProductSortKey.ROAS) == []
    assert sort_by([], UPCSortKey.MARGIN) == []


def test_invalid_key_rejected_for_empty_collection() -> None:
    with pytest.raises(ValueError, match="Unknown sort key"):
        sort_by([], "bogus")


def test_filter_bounds_are_inclusive(products) -> None:
    spec = FilterSpec(min_roas=2.5, max_roas=5.0)
    assert _ids(filter_collection(products, spec)) == ["a", "d"]

    spec = FilterSpec(min_profit=0, max_profit=40)
    assert _ids(filter_collection(products, spec)) == ["a", "c", "d"]


def test_filter_profitable_excludes_breakeven(products) -> None:
    assert _ids(filter_collection(products, FilterSpec(profitable=True))) == ["a"]
    assert _ids(filter_collection(products, FilterSpec(profitable=False))) == ["b", "c", "d"]


def test_empty_filter_keeps_everything(products) -> None:
    assert filter_collection(products, FilterSpec()) == products


def test_upc_collections() -> None:
    upcs = compute_all_upc_metrics(
        [
            UPCData(id="1", upc_code="111", product_name="One", ad_spend=100, attributed_sales=300, units_sold=10),
            UPCData(id="2", upc_code="222", product_name="Two", ad_spend=100, attributed_sales=900, units_sold=5,
                    gross_margin_percent=40),
        ]
    )
    assert _ids(sort_by(upcs, UPCSortKey.UNITS)) == ["1", "2"]
    assert _ids(sort_by(upcs, UPCSortKey.MARGIN)) == ["2", "1"]
    assert _ids(filter_collection(upcs, FilterSpec(profitable=True))) == ["2"]

    with pytest.raises(ValueError):
        sort_by(upcs, "spend")
