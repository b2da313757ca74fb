"""CartLift — Percentage Normalizer.

Percentage-typed inputs arrive in an ambiguous format: users type either
``40`` or ``0.4`` to mean 40%. Every percentage field on ``CalculatorInputs``
and ``UPCData`` is stored in that raw form and passes through
``normalize_percentage`` exactly once, where a formula consumes it. Derived
values (``effective_margin_percent``, ``UPCMetrics.gross_margin_percent``,
``ntb_sales`` ratios, ...) are always decimals and must never be normalized
again.
"""

import math
from typing import Optional


def normalize_percentage(value: Optional[float]) -> Optional[float]:
    """Canonicalize a percentage input to a decimal.

    ``> 1`` is read as a whole percent (40 → 0.4), anything else is already
    a decimal. ``None`` and NaN yield ``None``.
    """
    if value is None or math.isnan(value):
        return None
    if value > 1:
        return value / 100
    return value


def normalize_or_zero(value: Optional[float]) -> float:
    """Normalize, treating an absent value as 0."""
    return normalize_percentage(value) or 0.0
