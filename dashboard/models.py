"""Value objects handed from the data provider to the renderers.

They carry no identity beyond their position in a dataset list and are
discarded once a refresh has written them into the document.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Union


@dataclass(frozen=True)
class MetricPoint:
    label: Union[str, date]
    value: float


@dataclass(frozen=True)
class CategorySlice:
    category: str
    percentage: float


@dataclass(frozen=True)
class RankedItem:
    name: str
    value: float


@dataclass(frozen=True)
class ProgressMetric:
    label: str
    display_value: str
    percentage: float


@dataclass(frozen=True)
class KPISummary:
    revenue: str
    revenue_change: str
    orders: str
    users: str
    avg_order_value: str = ""
    revenue_change_positive: bool = True
