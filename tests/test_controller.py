"""Tests for the dashboard controller: refresh, isolation and scheduling."""

from __future__ import annotations

import asyncio
import logging
import time

import pytest

import dashboard.controller as controller_module
from dashboard.controller import DashboardController
from dashboard.data import MockDataProvider
from dashboard.layout import (
    CATEGORY_PIE,
    CHART_PANELS,
    CUSTOMER_METRICS,
    REGIONAL_SALES,
    REVENUE_TREND,
    TOP_PRODUCTS,
    build_dashboard_document,
)
from dashboard.scheduler import Debouncer
from dashboard.settings import DashboardSettings


def _selected(controller: DashboardController, select_id: str) -> list[str]:
    select = controller.document.get_element_by_id(select_id)
    return [o.get("value") for o in select.find_all("option") if o.get("selected")]


def test_update_fills_every_surface(controller: DashboardController) -> None:
    """One refresh renders all five surfaces and the KPI slots."""

    data = controller.update_all_visualizations()

    assert data is controller.last_datasets
    assert controller.render_count == 1
    html = controller.surface_html()
    assert set(html) == {surface_id for surface_id, _ in CHART_PANELS}
    assert all(html.values())
    assert controller.document.get_element_by_id("total-revenue").text == data.kpis.revenue


def test_missing_surface_does_not_abort_refresh(settings: DashboardSettings) -> None:
    """A page without the pie surface still gets its other charts."""

    document = build_dashboard_document(omit=[CATEGORY_PIE])
    controller = DashboardController(document=document, provider=MockDataProvider(seed=7), settings=settings)

    controller.update_all_visualizations()

    html = controller.surface_html()
    assert CATEGORY_PIE not in html
    for surface_id in (REVENUE_TREND, TOP_PRODUCTS, REGIONAL_SALES, CUSTOMER_METRICS):
        assert html[surface_id]


def test_failing_step_is_logged_and_isolated(
    controller: DashboardController, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    """An exception in one renderer leaves the remaining renderers running."""

    def explode(*args, **kwargs):
        raise ValueError("boom")

    monkeypatch.setattr(controller_module, "render_pie_chart", explode)

    with caplog.at_level(logging.ERROR, logger="dashboard.controller"):
        controller.update_all_visualizations()

    assert "Render step category-pie-chart failed" in caplog.text
    html = controller.surface_html()
    assert html[CATEGORY_PIE] == ""
    assert html[REGIONAL_SALES] and html[CUSTOMER_METRICS]
    assert controller.render_count == 1


def test_failed_generation_keeps_previous_render(
    controller: DashboardController, monkeypatch: pytest.MonkeyPatch
) -> None:
    controller.update_all_visualizations()
    before = controller.surface_html()

    def explode():
        raise RuntimeError("no data")

    monkeypatch.setattr(controller.provider, "generate", explode)

    assert controller.update_all_visualizations() is None
    assert controller.surface_html() == before
    assert controller.render_count == 1


def test_resize_burst_renders_once(controller: DashboardController) -> None:
    """Resize events inside the debounce window collapse into one refresh."""

    async def scenario() -> int:
        before = controller.render_count
        controller.handle_resize()
        await asyncio.sleep(0.01)
        controller.handle_resize()
        await asyncio.sleep(0.2)
        return controller.render_count - before

    assert asyncio.run(scenario()) == 1


def test_separate_resizes_render_separately(controller: DashboardController) -> None:
    async def scenario() -> int:
        controller.handle_resize()
        await asyncio.sleep(0.15)
        controller.handle_resize()
        await asyncio.sleep(0.15)
        return controller.render_count

    assert asyncio.run(scenario()) == 2


def test_scheduled_update_shows_loading_until_rendered(controller: DashboardController) -> None:
    """Containers carry the loading class while the refresh is deferred."""

    async def scenario() -> tuple[bool, bool, int]:
        controller.schedule_update()
        containers = controller.document.query_all("chart-container")
        during = all(c.has_class("loading") for c in containers)
        await asyncio.sleep(0.1)
        after = any(c.has_class("loading") for c in containers)
        return during, after, controller.render_count

    during, after, renders = asyncio.run(scenario())
    assert during
    assert not after
    assert renders == 1


def test_loading_class_cleared_after_failed_generation(
    controller: DashboardController, monkeypatch: pytest.MonkeyPatch
) -> None:
    def explode():
        raise RuntimeError("no data")

    monkeypatch.setattr(controller.provider, "generate", explode)
    controller.schedule_update()

    assert not any(c.has_class("loading") for c in controller.document.query_all("chart-container"))


def test_without_running_loop_update_is_immediate(controller: DashboardController) -> None:
    controller.handle_refresh()
    assert controller.render_count == 1


def test_filter_change_updates_provider_form_and_charts(controller: DashboardController) -> None:
    """Applying filters reshapes the datasets and reflects them in the form."""

    filters = controller.handle_filter_change({"date_range": "7", "category": "Books"})

    assert controller.filters == filters
    assert len(controller.last_datasets.revenue_trend) == 7
    assert [p.name for p in controller.last_datasets.top_products] == ["Data Science Handbook"]
    assert _selected(controller, "date-filter") == ["7"]
    assert _selected(controller, "category-filter") == ["Books"]
    points = controller.document.get_element_by_id(REVENUE_TREND).find_all("circle", class_name="data-point")
    assert len(points) == 7


def test_invalid_filter_input_falls_back_to_defaults(controller: DashboardController) -> None:
    filters = controller.handle_filter_change({"date_range": "13", "category": "Garden"})

    assert (filters.date_range, filters.category) == (30, "all")
    assert len(controller.last_datasets.revenue_trend) == 30


def test_filter_change_is_logged(controller: DashboardController, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger="dashboard.controller"):
        controller.handle_filter_change({"date_range": "90"})

    assert "Filters applied - Date: 90, Category: all" in caplog.text


def test_resize_burst_without_loop_renders_once(controller: DashboardController) -> None:
    """Outside an event loop, resizes inside the window still collapse into one refresh."""

    controller.handle_resize()
    controller.handle_resize()
    assert controller.render_count == 0

    time.sleep(0.3)

    assert controller.render_count == 1


def test_debouncer_cancel_without_loop_drops_pending_call() -> None:
    calls: list[int] = []
    debouncer = Debouncer(lambda: calls.append(1), 0.05)

    debouncer.trigger()
    assert debouncer.pending
    debouncer.cancel()
    time.sleep(0.15)

    assert calls == []
    assert not debouncer.pending


def test_overlapping_scheduled_updates_render_once(controller: DashboardController) -> None:
    """A second deferred refresh replaces the pending one."""

    async def scenario() -> tuple[bool, int]:
        controller.schedule_update()
        controller.schedule_update()
        await asyncio.sleep(0.1)
        loading = any(c.has_class("loading") for c in controller.document.query_all("chart-container"))
        return loading, controller.render_count

    loading, renders = asyncio.run(scenario())
    assert not loading
    assert renders == 1


def test_refresh_draws_new_figures_with_fixed_seed(settings: DashboardSettings) -> None:
    """Refresh keeps drawing from the seeded generator instead of replaying it."""

    def run() -> list:
        controller = DashboardController(provider=MockDataProvider(seed=7), settings=settings)
        controller.initialize()
        snapshots = [controller.last_datasets]
        controller.handle_refresh()
        snapshots.append(controller.last_datasets)
        return snapshots

    first, refreshed = run()
    assert refreshed.revenue_trend != first.revenue_trend
    assert refreshed.kpis != first.kpis

    again_first, again_refreshed = run()
    assert again_first == first
    assert again_refreshed == refreshed
