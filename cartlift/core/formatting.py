"""CartLift — Display Formatting."""

import math
from typing import Optional, Union

from cartlift.core.metric_registry import MetricUnit

MISSING = "—"


def _is_displayable(value: Optional[float]) -> bool:
    return value is not None and math.isfinite(value)


def format_currency(value: Optional[float]) -> str:
    """Format as USD with thousand separators, e.g. ``$12,345.67``."""
    if not _is_displayable(value):
        return MISSING
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def format_percent(value: Optional[float], decimals: int = 1) -> str:
    """Format a decimal as a percentage, e.g. 0.184 → ``18.4%``."""
    if not _is_displayable(value):
        return MISSING
    return f"{value * 100:.{decimals}f}%"


def format_ratio(value: Optional[float], decimals: int = 2) -> str:
    """Format a ratio with fixed decimals, e.g. ``2.50``."""
    if not _is_displayable(value):
        return MISSING
    return f"{value:.{decimals}f}"


def format_value(value: Union[float, str, None], unit: MetricUnit) -> str:
    """Format a metric value according to its registry unit."""
    if unit == MetricUnit.TEXT:
        return str(value) if value is not None else MISSING
    if unit == MetricUnit.CURRENCY:
        return format_currency(value)
    if unit == MetricUnit.PERCENT:
        return format_percent(value)
    if unit == MetricUnit.COUNT:
        return f"{value:,.0f}" if _is_displayable(value) else MISSING
    return format_ratio(value)
