"""Numeric formatting helpers shared by the presentation layer."""

from __future__ import annotations

import math
from typing import Optional


def format_currency(value: Optional[float]) -> str:
    """Whole-dollar currency, e.g. ``$1,234`` or ``-$50``; missing values show ``N/A``."""
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return "N/A"
    rounded = int(math.floor(abs(value) + 0.5))
    sign = "-" if value < 0 and rounded else ""
    return f"{sign}${rounded:,}"


def format_percent(fraction: Optional[float], digits: int = 1) -> str:
    """Render a fraction as a percentage string."""
    if fraction is None or (isinstance(fraction, float) and math.isnan(fraction)):
        return "N/A"
    return f"{fraction * 100:.{digits}f}%"


__all__ = ["format_currency", "format_percent"]
