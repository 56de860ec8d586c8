"""Unit tests for progress indicators and KPI card updates."""

from __future__ import annotations

from dashboard.dom import Document
from dashboard.models import KPISummary, ProgressMetric
from dashboard.renderers import render_progress_indicators, update_kpi_cards


def test_progress_rows_have_header_and_fill(document: Document) -> None:
    """Each metric renders a label/value header and a fill bar."""

    metrics = [
        ProgressMetric("Retention Rate", "68%", 68),
        ProgressMetric("Satisfaction Score", "4.8/5", 96),
    ]
    render_progress_indicators(metrics, "chart", document)

    surface = document.get_element_by_id("chart")
    assert [s.text for s in surface.find_all(class_name="progress-label")] == ["Retention Rate", "Satisfaction Score"]
    assert [s.text for s in surface.find_all(class_name="progress-value")] == ["68%", "4.8/5"]
    assert [f.style["width"] for f in surface.find_all(class_name="progress-bar-fill")] == ["68%", "96%"]


def test_out_of_range_percentages_are_not_clamped(document: Document) -> None:
    """Values above 100 or below 0 pass straight through to the fill width."""

    metrics = [ProgressMetric("Over", "120%", 120), ProgressMetric("Under", "-5%", -5)]
    render_progress_indicators(metrics, "chart", document)

    fills = document.get_element_by_id("chart").find_all(class_name="progress-bar-fill")
    assert [f.style["width"] for f in fills] == ["120%", "-5%"]


def test_empty_progress_dataset_leaves_surface_empty(document: Document) -> None:
    render_progress_indicators([], "chart", document)
    assert document.get_element_by_id("chart").children == []


def test_kpi_cards_receive_formatted_values(dashboard_document: Document) -> None:
    """The four named slots (plus average order value) are filled."""

    summary = KPISummary(
        revenue="$612,345",
        revenue_change="-1.2%",
        orders="8,100",
        users="6,885",
        avg_order_value="$75",
        revenue_change_positive=False,
    )
    update_kpi_cards(summary, dashboard_document)

    text = {slot: dashboard_document.get_element_by_id(slot).text for slot in
            ("total-revenue", "revenue-change", "total-orders", "active-users", "avg-order-value")}
    assert text == {
        "total-revenue": "$612,345",
        "revenue-change": "-1.2%",
        "total-orders": "8,100",
        "active-users": "6,885",
        "avg-order-value": "$75",
    }
    change = dashboard_document.get_element_by_id("revenue-change")
    assert change.has_class("negative") and not change.has_class("positive")


def test_kpi_update_skips_missing_slots() -> None:
    """A page without KPI slots is left untouched."""

    doc = Document()
    update_kpi_cards(KPISummary("$1", "+0.0%", "1", "1"), doc)
    assert doc.body.children == []


def test_empty_average_order_value_blanks_slot(dashboard_document: Document) -> None:
    """A later summary without an average order value clears the earlier one."""

    update_kpi_cards(KPISummary("$1", "+1.0%", "1", "1", avg_order_value="$75"), dashboard_document)
    update_kpi_cards(KPISummary("$2", "+2.0%", "2", "2"), dashboard_document)

    assert dashboard_document.get_element_by_id("avg-order-value").text == ""
    assert dashboard_document.get_element_by_id("total-revenue").text == "$2"
