from __future__ import annotations

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

import pandas as pd


def round_half_up(value: object, ndigits: int = 0) -> Optional[float]:
    if value is None or pd.isna(value):
        return None
    q = Decimal(10) ** -ndigits
    return float(Decimal(str(value)).quantize(q, rounding=ROUND_HALF_UP))


def format_currency_0(value: object) -> str:
    if value is None or pd.isna(value):
        return "N/A"
    return f"${float(value):,.0f}"


def format_count(value: object) -> str:
    if value is None or pd.isna(value):
        return "N/A"
    return f"{int(value):,}"


def format_thousands(value: object, decimals: int = 1) -> str:
    """Abbreviate a currency amount in thousands, e.g. ``42360 -> $42.4k``."""
    if value is None or pd.isna(value):
        return "N/A"
    return f"${float(value) / 1000:.{decimals}f}k"


def format_axis_thousands(value: object) -> str:
    """Grid label: whole thousands, e.g. ``12500 -> $13k``."""
    rounded = round_half_up(float(value) / 1000) if value is not None else None
    if rounded is None:
        return ""
    return f"${rounded:.0f}k"


def format_change(pct: float, decimals: int = 1) -> str:
    rounded = round_half_up(pct, decimals) or 0.0
    sign = "+" if rounded >= 0 else ""
    return f"{sign}{rounded:.{decimals}f}%"


def format_percentage(value: float) -> str:
    return f"{float(value):g}%"


def format_date_label(label: Union[str, date, datetime]) -> str:
    """Render dates as M/D/YYYY; anything else is shown as-is."""
    if isinstance(label, (date, datetime)):
        return f"{label.month}/{label.day}/{label.year}"
    return str(label)
