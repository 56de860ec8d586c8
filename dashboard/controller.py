"""Orchestrates data generation and rendering for one dashboard document.

Each refresh pulls fresh datasets from the provider and hands every dataset to
its renderer in turn. Steps are isolated from each other: a surface missing from
the document is skipped by its renderer, and an unexpected failure in one step
is logged while the remaining steps still run.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Dict, List, Optional, Tuple

from dashboard.data import DashboardDatasets, MockDataProvider
from dashboard.dom import Document
from dashboard.filters import DashboardFilters, normalize_filters
from dashboard.layout import (
    CATEGORY_PIE,
    CHART_PANELS,
    CUSTOMER_METRICS,
    REGIONAL_SALES,
    REVENUE_TREND,
    TOP_PRODUCTS,
    build_dashboard_document,
    sync_filter_form,
)
from dashboard.renderers import (
    render_bar_chart,
    render_line_chart,
    render_pie_chart,
    render_progress_indicators,
    update_kpi_cards,
)
from dashboard.scheduler import Debouncer, defer
from dashboard.settings import DashboardSettings, get_settings

logger = logging.getLogger(__name__)


class DashboardController:
    def __init__(
        self,
        document: Optional[Document] = None,
        provider: Optional[MockDataProvider] = None,
        settings: Optional[DashboardSettings] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.provider = provider or MockDataProvider(seed=self.settings.seed)
        self.document = document or build_dashboard_document(self.provider.filters)
        self.tooltip = self.document.tooltip
        self.render_count = 0
        self.last_datasets: Optional[DashboardDatasets] = None
        self._resize = Debouncer(self.update_all_visualizations, self.settings.resize_debounce_seconds)
        self._pending: Optional[asyncio.TimerHandle] = None

    @property
    def filters(self) -> DashboardFilters:
        return self.provider.filters

    def initialize(self) -> None:
        self.provider.initialize_data(self.settings.seed)
        self.update_all_visualizations()
        logger.info("Dashboard initialized successfully")

    def _render_steps(self, data: DashboardDatasets) -> List[Tuple[str, Callable[[], None]]]:
        doc, tooltip = self.document, self.tooltip
        width, height = self.settings.chart_width, self.settings.chart_height
        return [
            ("kpi_cards", lambda: update_kpi_cards(data.kpis, doc)),
            (
                REVENUE_TREND,
                lambda: render_line_chart(data.revenue_trend, REVENUE_TREND, doc, tooltip, width=width, height=height),
            ),
            (TOP_PRODUCTS, lambda: render_bar_chart(data.top_products, TOP_PRODUCTS, doc, tooltip)),
            (CATEGORY_PIE, lambda: render_pie_chart(data.category_distribution, CATEGORY_PIE, doc, tooltip)),
            (REGIONAL_SALES, lambda: render_bar_chart(data.regional_sales, REGIONAL_SALES, doc, tooltip)),
            (CUSTOMER_METRICS, lambda: render_progress_indicators(data.customer_metrics, CUSTOMER_METRICS, doc)),
        ]

    def update_all_visualizations(self) -> Optional[DashboardDatasets]:
        """Regenerate every dataset and re-render every surface synchronously."""
        try:
            data = self.provider.generate()
        except Exception:
            logger.exception("Data generation failed; keeping previous render")
            return None

        for name, step in self._render_steps(data):
            try:
                step()
            except Exception:
                logger.exception("Render step %s failed", name)

        self.render_count += 1
        self.last_datasets = data
        return data

    # ---------- deferred refresh ----------
    def schedule_update(self) -> None:
        """Mark containers as loading, then refresh one tick later."""
        if self._pending is not None:
            self._pending.cancel()
        for container in self.document.query_all("chart-container"):
            container.add_class("loading")
        self._pending = defer(self._finish_scheduled_update, self.settings.render_defer_seconds)

    def _finish_scheduled_update(self) -> None:
        self._pending = None
        try:
            self.update_all_visualizations()
        finally:
            for container in self.document.query_all("chart-container"):
                container.remove_class("loading")

    # ---------- triggers ----------
    def handle_filter_change(self, raw: Optional[dict]) -> DashboardFilters:
        filters = normalize_filters(raw)
        self.provider.update_filters(filters)
        sync_filter_form(self.document, filters)
        self.schedule_update()
        logger.info("Filters applied - Date: %s, Category: %s", filters.date_range, filters.category)
        return filters

    def handle_refresh(self) -> None:
        self.provider.redraw()
        self.schedule_update()
        logger.info("Data refreshed")

    def handle_resize(self) -> None:
        self._resize.trigger()

    # ---------- output ----------
    def surface_html(self) -> Dict[str, str]:
        out: Dict[str, str] = {}
        for surface_id, _ in CHART_PANELS:
            surface = self.document.get_element_by_id(surface_id)
            if surface is not None:
                out[surface_id] = "".join(child.to_html() for child in surface.children)
        return out

    def to_html(self) -> str:
        return self.document.to_html()
