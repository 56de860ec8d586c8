"""Chart renderers: datasets in, populated document surfaces out.

Every ``render_*`` function looks its target surface up by id, returns quietly
when the surface is absent, and otherwise replaces the surface's children
completely. Degenerate datasets (empty, zero range, zero max) render a safe
fallback instead of raising. The geometry helpers (``line_geometry``,
``bar_widths``, ``pie_wedges``) are pure and carry all of the arithmetic.
"""

from __future__ import annotations

import html
import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from dashboard.dom import Document, Element, PointerEvent, format_attr_value, svg_element
from dashboard.formatting import (
    format_axis_thousands,
    format_currency_0,
    format_date_label,
    format_percentage,
    format_thousands,
)
from dashboard.models import CategorySlice, KPISummary, MetricPoint, ProgressMetric, RankedItem
from dashboard.theme import (
    GRID_LINES,
    LINE_CHART_HEIGHT,
    LINE_PADDING,
    PIE_PALETTE,
    PIE_RADIUS,
    PIE_VIEWBOX,
    POINT_HOVER_RADIUS,
    POINT_RADIUS,
    THEME,
    Padding,
)
from dashboard.tooltip import TooltipService

logger = logging.getLogger(__name__)

DEFAULT_LINE_WIDTH = 800
FULL_CIRCLE_EPSILON = 1e-9
UNALLOCATED_LABEL = "Unallocated"

KPI_SLOTS = {
    "total-revenue": "revenue",
    "revenue-change": "revenue_change",
    "total-orders": "orders",
    "active-users": "users",
    "avg-order-value": "avg_order_value",
}


def _take_surface(document: Document, surface_id: str) -> Optional[Element]:
    surface = document.get_element_by_id(surface_id)
    if surface is None:
        logger.debug("Surface %s not found; skipping render", surface_id)
        return None
    surface.clear()
    return surface


def _n(value: float) -> str:
    return format_attr_value(float(value))


# ---------- line chart ----------
@dataclass(frozen=True)
class LineGeometry:
    points: List[Tuple[float, float]]
    line_path: str
    area_path: str
    grid: List[Tuple[float, float]]
    value_min: float
    value_max: float


def line_geometry(
    values: Sequence[float],
    width: float = DEFAULT_LINE_WIDTH,
    height: float = LINE_CHART_HEIGHT,
    padding: Padding = LINE_PADDING,
) -> Optional[LineGeometry]:
    """Scale ``values`` into plot coordinates; ``None`` for an empty series.

    A zero value range is widened to one unit around the value so the flat line
    sits at the vertical midpoint. A single point is centred horizontally.
    """
    if not values:
        return None
    chart_width = width - padding.left - padding.right
    chart_height = height - padding.top - padding.bottom
    baseline = height - padding.bottom

    lo, hi = float(min(values)), float(max(values))
    if hi == lo:
        lo, hi = lo - 0.5, hi + 0.5
    value_range = hi - lo
    count = len(values)

    def x_scale(index: int) -> float:
        if count == 1:
            return padding.left + chart_width / 2
        return padding.left + (index / (count - 1)) * chart_width

    def y_scale(value: float) -> float:
        return padding.top + chart_height - ((value - lo) / value_range) * chart_height

    points = [(x_scale(i), y_scale(float(v))) for i, v in enumerate(values)]

    line_path = f"M {_n(points[0][0])} {_n(points[0][1])}"
    line_path += "".join(f" L {_n(x)} {_n(y)}" for x, y in points[1:])

    area_path = f"M {_n(points[0][0])} {_n(baseline)}"
    area_path += "".join(f" L {_n(x)} {_n(y)}" for x, y in points)
    area_path += f" L {_n(points[-1][0])} {_n(baseline)} Z"

    grid = []
    for i in range(GRID_LINES):
        frac = i / (GRID_LINES - 1)
        grid.append((padding.top + chart_height * frac, hi - value_range * frac))

    return LineGeometry(
        points=points,
        line_path=line_path,
        area_path=area_path,
        grid=grid,
        value_min=lo,
        value_max=hi,
    )


def _gradient(gradient_id: str) -> Element:
    defs = svg_element("defs")
    gradient = defs.append(svg_element("linearGradient", id=gradient_id, x1="0%", y1="0%", x2="0%", y2="100%"))
    gradient.append(svg_element("stop", offset="0%", style=f"stop-color:{THEME.bright_red};stop-opacity:0.5"))
    gradient.append(svg_element("stop", offset="100%", style=f"stop-color:{THEME.dark_red};stop-opacity:0"))
    return defs


def _bind_point_hover(circle: Element, markup: str, tooltip: TooltipService) -> None:
    def on_enter(event: PointerEvent) -> None:
        circle.set("r", POINT_HOVER_RADIUS)
        circle.set("fill", THEME.point_hover_fill)
        tooltip.show(event, markup)

    def on_leave(event: PointerEvent) -> None:
        circle.set("r", POINT_RADIUS)
        circle.set("fill", THEME.point_fill)
        tooltip.hide(event)

    circle.on("mouseenter", on_enter)
    circle.on("mouseleave", on_leave)


def _bind_tooltip(element: Element, markup: str, tooltip: TooltipService) -> None:
    element.on("mouseenter", lambda event: tooltip.show(event, markup))
    element.on("mouseleave", tooltip.hide)


def point_tooltip(point: MetricPoint) -> str:
    return (
        f"Date: {html.escape(format_date_label(point.label))}"
        f"<br>Revenue: {format_currency_0(point.value)}"
    )


def render_line_chart(
    data: Sequence[MetricPoint],
    surface_id: str,
    document: Document,
    tooltip: Optional[TooltipService] = None,
    *,
    width: int = DEFAULT_LINE_WIDTH,
    height: int = LINE_CHART_HEIGHT,
) -> None:
    surface = _take_surface(document, surface_id)
    if surface is None or not data:
        return
    tooltip = tooltip or document.tooltip
    padding = LINE_PADDING
    geometry = line_geometry([p.value for p in data], width, height, padding)

    svg = svg_element("svg", width=width, height=height)
    gradient_id = f"{surface_id}-gradient"
    svg.append(_gradient(gradient_id))

    for y, value in geometry.grid:
        svg.append(
            svg_element(
                "line",
                x1=padding.left,
                y1=y,
                x2=width - padding.right,
                y2=y,
                stroke=THEME.grid,
                stroke_width=1,
            )
        )
        svg.append(
            svg_element(
                "text",
                text=format_axis_thousands(value),
                x=padding.left - 10,
                y=y + 4,
                text_anchor="end",
                fill=THEME.text,
                font_size=11,
            )
        )

    svg.append(svg_element("path", class_name="area", d=geometry.area_path, fill=f"url(#{gradient_id})"))
    svg.append(
        svg_element(
            "path",
            class_name="line",
            d=geometry.line_path,
            fill="none",
            stroke=THEME.bright_red,
            stroke_width=2,
        )
    )

    for point, (cx, cy) in zip(data, geometry.points):
        circle = svg_element(
            "circle",
            class_name="data-point",
            cx=cx,
            cy=cy,
            r=POINT_RADIUS,
            fill=THEME.point_fill,
            stroke=THEME.bright_red,
            stroke_width=2,
        )
        circle.set_style("cursor", "pointer")
        markup = point_tooltip(point)
        circle.set("data-tooltip", markup)
        _bind_point_hover(circle, markup, tooltip)
        svg.append(circle)

    surface.append(svg)


# ---------- bar chart ----------
def bar_widths(values: Sequence[float]) -> List[float]:
    """Bar lengths as a percentage of the largest value (max <= 0 counts as 1)."""
    if not values:
        return []
    max_value = max(values)
    if max_value <= 0:
        max_value = 1
    return [float(v) / max_value * 100 for v in values]


def render_bar_chart(
    data: Sequence[RankedItem],
    surface_id: str,
    document: Document,
    tooltip: Optional[TooltipService] = None,
) -> None:
    surface = _take_surface(document, surface_id)
    if surface is None or not data:
        return

    chart = Element("div", class_name="bar-chart")
    for item, width in zip(data, bar_widths([i.value for i in data])):
        bar_item = chart.append(Element("div", class_name="bar-item"))
        bar_item.append(Element("div", class_name="bar-label", text=item.name))
        wrapper = bar_item.append(Element("div", class_name="bar-wrapper"))
        bar = wrapper.append(Element("div", class_name="bar", text=format_thousands(item.value)))
        bar.set_style("width", f"{format_attr_value(float(width))}%")
        if tooltip is not None:
            markup = f"{html.escape(item.name)}: {format_currency_0(item.value)}"
            bar.set("data-tooltip", markup)
            _bind_tooltip(bar, markup, tooltip)
    surface.append(chart)


# ---------- pie chart ----------
@dataclass(frozen=True)
class Wedge:
    label: str
    percentage: float
    start_angle: float
    span: float
    large_arc: int
    color: str
    path: str
    filler: bool = False


def _wedge_path(cx: float, cy: float, radius: float, start: float, span: float, large_arc: int) -> str:
    if span >= 360 - FULL_CIRCLE_EPSILON:
        top, bottom = cy - radius, cy + radius
        return (
            f"M {_n(cx)} {_n(top)} A {_n(radius)} {_n(radius)} 0 1 1 {_n(cx)} {_n(bottom)} "
            f"A {_n(radius)} {_n(radius)} 0 1 1 {_n(cx)} {_n(top)} Z"
        )
    start_rad = math.radians(start - 90)
    end_rad = math.radians(start + span - 90)
    x1 = cx + radius * math.cos(start_rad)
    y1 = cy + radius * math.sin(start_rad)
    x2 = cx + radius * math.cos(end_rad)
    y2 = cy + radius * math.sin(end_rad)
    return (
        f"M {_n(cx)} {_n(cy)} L {_n(x1)} {_n(y1)} "
        f"A {_n(radius)} {_n(radius)} 0 {large_arc} 1 {_n(x2)} {_n(y2)} Z"
    )


def pie_wedges(
    slices: Sequence[CategorySlice],
    *,
    cx: float = PIE_VIEWBOX / 2,
    cy: float = PIE_VIEWBOX / 2,
    radius: float = PIE_RADIUS,
    palette: Sequence[str] = PIE_PALETTE,
) -> List[Wedge]:
    """Lay slices out clockwise from 12 o'clock, ``percentage / 100 * 360`` each.

    Spans always total 360 degrees: a shortfall below 100% becomes a trailing
    filler wedge, an excess above 100% scales every span down proportionally.
    """
    if not slices:
        return []
    total = sum(s.percentage for s in slices)
    scale = 100 / total if total > 100 else 1.0

    wedges: List[Wedge] = []
    current = 0.0
    for index, item in enumerate(slices):
        span = item.percentage / 100 * 360 * scale
        large_arc = 1 if span > 180 else 0
        wedges.append(
            Wedge(
                label=item.category,
                percentage=item.percentage,
                start_angle=current,
                span=span,
                large_arc=large_arc,
                color=palette[index % len(palette)],
                path=_wedge_path(cx, cy, radius, current, span, large_arc),
            )
        )
        current += span

    remainder = 360 - current
    if remainder > FULL_CIRCLE_EPSILON:
        large_arc = 1 if remainder > 180 else 0
        wedges.append(
            Wedge(
                label=UNALLOCATED_LABEL,
                percentage=remainder / 360 * 100,
                start_angle=current,
                span=remainder,
                large_arc=large_arc,
                color=THEME.unallocated,
                path=_wedge_path(cx, cy, radius, current, remainder, large_arc),
                filler=True,
            )
        )
    return wedges


def render_pie_chart(
    data: Sequence[CategorySlice],
    surface_id: str,
    document: Document,
    tooltip: Optional[TooltipService] = None,
) -> None:
    surface = _take_surface(document, surface_id)
    if surface is None or not data:
        return
    tooltip = tooltip or document.tooltip

    chart = Element("div", class_name="pie-chart")
    svg = chart.append(svg_element("svg", viewBox=f"0 0 {PIE_VIEWBOX} {PIE_VIEWBOX}"))
    svg.set_style("max-height", f"{PIE_VIEWBOX}px")
    svg.set_style("display", "block")
    svg.set_style("margin", "0 auto")

    for wedge in pie_wedges(data):
        path = svg.append(
            svg_element(
                "path",
                class_name="wedge filler" if wedge.filler else "wedge",
                d=wedge.path,
                fill=wedge.color,
                stroke=THEME.wedge_stroke,
                stroke_width=2,
            )
        )
        markup = f"{html.escape(wedge.label)}: {format_percentage(round(wedge.percentage, 2))}"
        path.set("data-tooltip", markup)
        _bind_tooltip(path, markup, tooltip)

    legend = chart.append(Element("div", class_name="pie-legend"))
    for index, item in enumerate(data):
        legend_item = legend.append(Element("div", class_name="legend-item"))
        swatch = legend_item.append(Element("div", class_name="legend-color"))
        swatch.set_style("background", PIE_PALETTE[index % len(PIE_PALETTE)])
        legend_item.append(Element("span", text=item.category))

    surface.append(chart)


# ---------- progress indicators ----------
def render_progress_indicators(metrics: Sequence[ProgressMetric], surface_id: str, document: Document) -> None:
    surface = _take_surface(document, surface_id)
    if surface is None or not metrics:
        return

    container = Element("div", class_name="progress-indicators")
    for metric in metrics:
        item = container.append(Element("div", class_name="progress-item"))
        header = item.append(Element("div", class_name="progress-header"))
        header.append(Element("span", class_name="progress-label", text=metric.label))
        header.append(Element("span", class_name="progress-value", text=metric.display_value))
        track = item.append(Element("div", class_name="progress-bar-bg"))
        fill = track.append(Element("div", class_name="progress-bar-fill"))
        # Out-of-range percentages are passed through unclamped.
        fill.set_style("width", f"{format_attr_value(float(metric.percentage))}%")
    surface.append(container)


# ---------- KPI cards ----------
def update_kpi_cards(summary: KPISummary, document: Document) -> None:
    for slot_id, attr in KPI_SLOTS.items():
        slot = document.get_element_by_id(slot_id)
        if slot is None:
            continue
        # an empty value blanks the slot rather than keeping stale text
        slot.set_text(getattr(summary, attr))
        if slot_id == "revenue-change":
            slot.remove_class("positive")
            slot.remove_class("negative")
            slot.add_class("positive" if summary.revenue_change_positive else "negative")
