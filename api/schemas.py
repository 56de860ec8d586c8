from __future__ import annotations

from typing import Dict, List, Union

from pydantic import BaseModel, Field


class DashboardFiltersModel(BaseModel):
    date_range: Union[int, str] = 30
    category: str = "all"


class KPISummaryModel(BaseModel):
    revenue: str
    revenue_change: str
    orders: str
    users: str
    avg_order_value: str = ""
    revenue_change_positive: bool = True


class RefreshResponse(BaseModel):
    filters: DashboardFiltersModel
    kpis: KPISummaryModel
    surfaces: Dict[str, str] = Field(default_factory=dict)
    render_count: int = 0


class MetaListResponse(BaseModel):
    values: List[str]
