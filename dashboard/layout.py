from __future__ import annotations

from typing import Iterable, Optional, Tuple

from dashboard.dom import Document, Element
from dashboard.filters import ALL, CATEGORIES, DATE_RANGES, DashboardFilters

REVENUE_TREND = "revenue-trend-chart"
TOP_PRODUCTS = "top-products-chart"
CATEGORY_PIE = "category-pie-chart"
REGIONAL_SALES = "regional-sales-chart"
CUSTOMER_METRICS = "customer-metrics"

CHART_PANELS: Tuple[Tuple[str, str], ...] = (
    (REVENUE_TREND, "Revenue Trend"),
    (TOP_PRODUCTS, "Top Products"),
    (CATEGORY_PIE, "Sales by Category"),
    (REGIONAL_SALES, "Regional Sales"),
    (CUSTOMER_METRICS, "Customer Metrics"),
)

KPI_CARDS: Tuple[Tuple[str, str, Optional[str]], ...] = (
    ("Total Revenue", "total-revenue", "revenue-change"),
    ("Total Orders", "total-orders", None),
    ("Active Users", "active-users", None),
    ("Avg Order Value", "avg-order-value", None),
)

BASE_CSS = """
body {background: #0a0000; color: #d1d1d1; font-family: system-ui, sans-serif; margin: 0; padding: 16px;}
.app-top-bar {display: flex; justify-content: space-between; align-items: center; border-bottom: 1px solid #4a0404; margin-bottom: 12px;}
.filters {display: flex; gap: 8px;}
.kpi-row {display: grid; grid-template-columns: repeat(4, 1fr); gap: 12px; margin-bottom: 12px;}
.kpi-card, .chart-container {border: 1px solid #4a0404; border-radius: 12px; padding: 16px; background: #140101;}
.kpi-value {font-size: 1.6rem; font-weight: 700;}
.kpi-change.positive {color: #4caf50;} .kpi-change.negative {color: #ff3333;}
.chart-grid {display: grid; grid-template-columns: repeat(2, 1fr); gap: 12px;}
.chart-container.loading {opacity: 0.5;}
.bar-item {display: flex; align-items: center; gap: 8px; margin: 6px 0;}
.bar-label {width: 140px;} .bar-wrapper {flex: 1; background: #220505;}
.bar {background: #800000; padding: 2px 6px; white-space: nowrap;}
.pie-legend {display: flex; flex-wrap: wrap; gap: 8px; justify-content: center;}
.legend-item {display: flex; align-items: center; gap: 4px;} .legend-color {width: 12px; height: 12px;}
.progress-item {margin: 8px 0;} .progress-header {display: flex; justify-content: space-between;}
.progress-bar-bg {background: #220505; height: 8px;} .progress-bar-fill {background: #ff3333; height: 8px;}
.tooltip {position: fixed; display: none; background: #000; border: 1px solid #ff3333; padding: 6px 8px; pointer-events: none;}
.tooltip.visible {display: block;}
"""

TOOLTIP_SCRIPT = """
document.addEventListener('mouseover', function (e) {
  var el = e.target.closest && e.target.closest('[data-tooltip]');
  var tip = document.getElementById('tooltip');
  if (!el) { if (tip) tip.classList.remove('visible'); return; }
  if (!tip) { tip = document.createElement('div'); tip.id = 'tooltip'; tip.className = 'tooltip'; document.body.appendChild(tip); }
  tip.innerHTML = el.getAttribute('data-tooltip');
  tip.classList.add('visible');
  tip.style.left = (e.clientX + 15) + 'px';
  tip.style.top = (e.clientY + 15) + 'px';
});
"""


def _select(select_id: str, options: Iterable[Tuple[str, str]], selected: str) -> Element:
    select = Element("select", id=select_id, name=select_id)
    for value, label in options:
        option = select.append(Element("option", text=label, value=value))
        if value == selected:
            option.set("selected", "selected")
    return select


def build_filter_form(filters: DashboardFilters) -> Element:
    form = Element("form", class_name="filters", method="get", action="/")
    date_options = [(str(d), "All time" if d == ALL else f"Last {d} days") for d in DATE_RANGES]
    form.append(_select("date-filter", date_options, str(filters.date_range)))
    category_options = [(ALL, "All categories")] + [(c, c) for c in CATEGORIES]
    form.append(_select("category-filter", category_options, filters.category))
    form.append(Element("button", id="apply-filters-btn", type="submit", text="Apply"))
    form.append(Element("button", id="refresh-btn", type="submit", name="refresh", value="1", text="↻ Refresh"))
    return form


def build_dashboard_document(
    filters: Optional[DashboardFilters] = None,
    *,
    title: str = "Sales Analytics Dashboard",
    omit: Iterable[str] = (),
) -> Document:
    """Page skeleton: top bar with filters, KPI slots and one container per chart.

    ``omit`` drops chart surfaces by id (their panel stays, without a target).
    """
    filters = filters or DashboardFilters()
    omitted = set(omit)
    document = Document(title=title)
    document.styles.append(BASE_CSS)
    document.scripts.append(TOOLTIP_SCRIPT)

    top = document.body.append(Element("div", class_name="app-top-bar"))
    top.append(Element("h1", class_name="page-title", text=title))
    top.append(build_filter_form(filters))

    kpis = document.body.append(Element("div", class_name="kpi-row"))
    for label, value_id, change_id in KPI_CARDS:
        card = kpis.append(Element("div", class_name="kpi-card"))
        card.append(Element("h3", text=label))
        card.append(Element("div", id=value_id, class_name="kpi-value", text="—"))
        if change_id:
            card.append(Element("span", id=change_id, class_name="kpi-change"))

    grid = document.body.append(Element("div", class_name="chart-grid"))
    for surface_id, label in CHART_PANELS:
        panel = grid.append(Element("div", class_name="chart-container"))
        panel.append(Element("h2", class_name="card-title", text=label))
        if surface_id not in omitted:
            panel.append(Element("div", id=surface_id, class_name="chart-surface"))
    return document


def sync_filter_form(document: Document, filters: DashboardFilters) -> None:
    """Mark the options matching ``filters`` as selected in the page's form."""
    for select_id, value in (("date-filter", str(filters.date_range)), ("category-filter", filters.category)):
        select = document.get_element_by_id(select_id)
        if select is None:
            continue
        for option in select.find_all("option"):
            if option.get("value") == value:
                option.set("selected", "selected")
            else:
                option.attrs.pop("selected", None)
