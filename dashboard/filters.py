from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

CATEGORIES: Tuple[str, ...] = ("Electronics", "Clothing", "Home", "Books")
DATE_RANGES: Tuple[Union[int, str], ...] = (7, 30, 90, "all")

DEFAULT_DATE_RANGE = 30
ALL = "all"
ALL_RANGE_DAYS = 365


@dataclass(frozen=True)
class DashboardFilters:
    date_range: Union[int, str] = DEFAULT_DATE_RANGE
    category: str = ALL

    @property
    def days(self) -> int:
        return ALL_RANGE_DAYS if self.date_range == ALL else int(self.date_range)


def _as_date_range(value: object) -> Union[int, str]:
    if value is None:
        return DEFAULT_DATE_RANGE
    if str(value).strip().lower() == ALL:
        return ALL
    try:
        days = int(str(value).strip())
    except Exception:
        return DEFAULT_DATE_RANGE
    return days if days in DATE_RANGES else DEFAULT_DATE_RANGE


def _as_category(value: Optional[object]) -> str:
    text = str(value or "").strip()
    for category in CATEGORIES:
        if text.lower() == category.lower():
            return category
    return ALL


def normalize_filters(raw: Optional[dict]) -> DashboardFilters:
    raw = raw or {}
    return DashboardFilters(
        date_range=_as_date_range(raw.get("date_range", raw.get("dateRange"))),
        category=_as_category(raw.get("category")),
    )
