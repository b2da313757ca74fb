from __future__ import annotations

from cartlift.core.formatting import MISSING, format_currency, format_percent, format_value
from cartlift.core.metric_registry import (
    CAMPAIGN_METRICS,
    MetricType,
    MetricUnit,
    get_metric,
    metrics_by_type,
)


def test_lookup() -> None:
    roas = get_metric("roas")
    assert roas is not None
    assert roas.unit == MetricUnit.RATIO
    assert get_metric("nope") is None


def test_metrics_by_type_partitions_registry() -> None:
    engagement = {m.name for m in metrics_by_type(MetricType.ENGAGEMENT)}
    assert {"ctr", "cpc", "cpm"} <= engagement
    total = sum(len(metrics_by_type(t)) for t in MetricType)
    assert total == len(CAMPAIGN_METRICS)


def test_formatting() -> None:
    assert format_currency(12345.678) == "$12,345.68"
    assert format_currency(-5) == "-$5.00"
    assert format_percent(0.184) == "18.4%"
    assert format_value(None, MetricUnit.RATIO) == MISSING
    assert format_value(float("nan"), MetricUnit.CURRENCY) == MISSING
    assert format_value(1250, MetricUnit.COUNT) == "1,250"
    assert format_value("above", MetricUnit.TEXT) == "above"
