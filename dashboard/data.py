"""Mock data provider.

Stands in for a sales backend: every entry point returns freshly generated
value objects. Base KPI draws are taken once per
:meth:`MockDataProvider.initialize_data` or :meth:`MockDataProvider.redraw`
so that KPI cards and the regional split agree within one refresh; the trend
and product revenues are drawn on every call.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import numpy as np
import pandas as pd

from dashboard.filters import ALL, DashboardFilters
from dashboard.formatting import format_change, format_count, format_currency_0
from dashboard.models import CategorySlice, KPISummary, MetricPoint, ProgressMetric, RankedItem

logger = logging.getLogger(__name__)

REVENUE_RANGE = (450_000, 850_000)
ORDERS_RANGE = (5_000, 12_000)
CHANGE_RANGE = (-3.0, 7.0)
DAILY_REVENUE_RANGE = (5_000, 15_000)
CUSTOMER_RATIO = 0.85
BASE_PERIOD_DAYS = 30
TOP_N_PRODUCTS = 5

# name, category, revenue floor, revenue spread
PRODUCT_CATALOG: Tuple[Tuple[str, str, int, int], ...] = (
    ("Gaming Laptop X1", "Electronics", 20_000, 50_000),
    ("Wireless Earbuds", "Electronics", 15_000, 40_000),
    ("Smart Watch V2", "Electronics", 10_000, 35_000),
    ("Mech Keyboard", "Electronics", 5_000, 25_000),
    ("4K Monitor", "Electronics", 5_000, 20_000),
    ("Trail Running Jacket", "Clothing", 8_000, 22_000),
    ("Denim Essentials", "Clothing", 4_000, 15_000),
    ("Ceramic Cookware Set", "Home", 6_000, 18_000),
    ("Smart Desk Lamp", "Home", 3_000, 12_000),
    ("Data Science Handbook", "Books", 2_000, 9_000),
)

CATEGORY_SHARES: Dict[str, float] = {
    "Electronics": 45.0,
    "Clothing": 25.0,
    "Home": 20.0,
    "Books": 10.0,
}

REGION_SHARES: Tuple[Tuple[str, float], ...] = (
    ("North America", 0.45),
    ("Europe", 0.30),
    ("Asia Pacific", 0.15),
    ("LatAm", 0.10),
)


@dataclass(frozen=True)
class DashboardDatasets:
    kpis: KPISummary
    revenue_trend: List[MetricPoint]
    top_products: List[RankedItem]
    category_distribution: List[CategorySlice]
    regional_sales: List[RankedItem]
    customer_metrics: List[ProgressMetric]


@dataclass(frozen=True)
class _BaseDraw:
    revenue: int
    orders: int
    change: float
    retention: int
    new_users: int
    abandonment: int


class MockDataProvider:
    def __init__(self, filters: Optional[DashboardFilters] = None, seed: Optional[int] = None) -> None:
        self.filters = filters or DashboardFilters()
        self._rng = np.random.default_rng(seed)
        self._base = self._draw_base()

    # ---------- state ----------
    def initialize_data(self, seed: Optional[int] = None) -> None:
        """Re-seed (``None`` = fresh entropy) and redraw the base KPI figures."""
        self._rng = np.random.default_rng(seed)
        self._base = self._draw_base()
        logger.debug("Mock data initialized (revenue=%s, orders=%s)", self._base.revenue, self._base.orders)

    def redraw(self) -> None:
        """Draw new base KPI figures from the running generator without reseeding."""
        self._base = self._draw_base()

    def update_filters(self, filters: DashboardFilters) -> None:
        self.filters = filters

    def _draw_base(self) -> _BaseDraw:
        return _BaseDraw(
            revenue=int(self._rng.integers(*REVENUE_RANGE)),
            orders=int(self._rng.integers(*ORDERS_RANGE)),
            change=float(self._rng.uniform(*CHANGE_RANGE)),
            retention=int(self._rng.integers(60, 76)),
            new_users=int(self._rng.integers(900, 1600)),
            abandonment=int(self._rng.integers(35, 50)),
        )

    def _scale(self) -> float:
        """Share of the base figures visible under the current filters."""
        period = self.filters.days / BASE_PERIOD_DAYS
        if self.filters.category == ALL:
            return period
        return period * CATEGORY_SHARES.get(self.filters.category, 0.0) / 100

    # ---------- entry points ----------
    def kpi_summary(self) -> KPISummary:
        scale = self._scale()
        revenue = int(self._base.revenue * scale)
        orders = int(self._base.orders * scale)
        aov = revenue // orders if orders else 0
        customers = int(orders * CUSTOMER_RATIO)
        change = format_change(self._base.change)
        return KPISummary(
            revenue=format_currency_0(revenue),
            revenue_change=change,
            orders=format_count(orders),
            users=format_count(customers),
            avg_order_value=f"${aov}",
            revenue_change_positive=not change.startswith("-"),
        )

    def revenue_trend(self) -> List[MetricPoint]:
        days = self.filters.days
        end = pd.Timestamp.today().normalize() - pd.Timedelta(days=1)
        dates = pd.date_range(end=end, periods=days, freq="D")
        values = self._rng.integers(*DAILY_REVENUE_RANGE, size=days)
        if self.filters.category != ALL:
            values = np.floor(values * CATEGORY_SHARES.get(self.filters.category, 0.0) / 100)
        return [MetricPoint(label=ts.date(), value=float(v)) for ts, v in zip(dates, values)]

    def top_products(self, top_n: int = TOP_N_PRODUCTS) -> List[RankedItem]:
        catalog = pd.DataFrame(PRODUCT_CATALOG, columns=["name", "category", "floor", "spread"])
        if self.filters.category != ALL:
            catalog = catalog[catalog["category"] == self.filters.category]
        if catalog.empty:
            return []
        draws = self._rng.random(len(catalog))
        catalog = catalog.assign(revenue=np.floor(draws * catalog["spread"]) + catalog["floor"])
        ranked = catalog.sort_values("revenue", ascending=False).head(top_n)
        return [RankedItem(name=str(r.name), value=float(r.revenue)) for r in ranked.itertuples(index=False)]

    def category_distribution(self) -> List[CategorySlice]:
        return [CategorySlice(category=c, percentage=p) for c, p in CATEGORY_SHARES.items()]

    def regional_sales(self) -> List[RankedItem]:
        revenue = self._base.revenue * self._scale()
        return [RankedItem(name=region, value=float(int(revenue * share))) for region, share in REGION_SHARES]

    def customer_metrics(self) -> List[ProgressMetric]:
        base = self._base
        return [
            ProgressMetric(label="Retention Rate", display_value=f"{base.retention}%", percentage=base.retention),
            ProgressMetric(label="New Users", display_value=format_count(base.new_users), percentage=85),
            ProgressMetric(label="Cart Abandonment", display_value=f"{base.abandonment}%", percentage=base.abandonment),
            ProgressMetric(label="Satisfaction Score", display_value="4.8/5", percentage=96),
        ]

    def generate(self) -> DashboardDatasets:
        return DashboardDatasets(
            kpis=self.kpi_summary(),
            revenue_trend=self.revenue_trend(),
            top_products=self.top_products(),
            category_distribution=self.category_distribution(),
            regional_sales=self.regional_sales(),
            customer_metrics=self.customer_metrics(),
        )

