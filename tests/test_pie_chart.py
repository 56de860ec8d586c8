"""Unit tests for pie wedge layout and rendering."""

from __future__ import annotations

import pytest

from dashboard.dom import Document, PointerEvent
from dashboard.models import CategorySlice
from dashboard.renderers import pie_wedges, render_pie_chart
from dashboard.theme import PIE_PALETTE


def _slices(*percentages: float) -> list[CategorySlice]:
    return [CategorySlice(category=f"C{i}", percentage=p) for i, p in enumerate(percentages)]


@pytest.mark.parametrize(
    "percentages",
    [
        (45, 25, 20, 10),
        (30, 20),
        (80, 60),
        (100,),
        (0, 0),
        (33.3, 33.3, 33.3),
    ],
)
def test_spans_always_total_a_full_circle(percentages: tuple[float, ...]) -> None:
    """Shortfalls are filled and excesses scaled so spans sum to 360 degrees."""

    wedges = pie_wedges(_slices(*percentages))

    assert sum(w.span for w in wedges) == pytest.approx(360.0)


def test_spans_follow_percentages_and_start_at_twelve_oclock() -> None:
    """Each span is percentage * 3.6 degrees, starting where the previous ended."""

    wedges = pie_wedges(_slices(45, 25, 20, 10))

    assert [w.span for w in wedges] == pytest.approx([162.0, 90.0, 72.0, 36.0])
    assert [w.start_angle for w in wedges] == pytest.approx([0.0, 162.0, 252.0, 324.0])
    assert wedges[0].path.startswith("M 100 100 L 100 20 ")


@pytest.mark.parametrize(
    ("percentages", "flags"),
    [
        ((75, 25), [1, 0]),
        ((50, 50), [0, 0]),
        ((51, 49), [1, 0]),
        ((10, 90), [0, 1]),
    ],
)
def test_large_arc_flag_set_only_above_half(percentages: tuple[float, ...], flags: list[int]) -> None:
    """Wedges over 50% need the SVG large-arc flag."""

    wedges = pie_wedges(_slices(*percentages))

    assert [w.large_arc for w in wedges] == flags


def test_shortfall_adds_unallocated_filler() -> None:
    """Input totalling under 100% gains a trailing filler wedge."""

    wedges = pie_wedges(_slices(30, 20))

    assert wedges[-1].filler
    assert wedges[-1].span == pytest.approx(180.0)
    assert [w.filler for w in wedges[:-1]] == [False, False]


def test_colors_cycle_through_palette() -> None:
    """More slices than colours wrap around the palette."""

    wedges = pie_wedges(_slices(*([10] * 7)))

    assert [w.color for w in wedges[:7]] == [PIE_PALETTE[i % len(PIE_PALETTE)] for i in range(7)]


def test_full_circle_wedge_is_drawn_as_two_arcs() -> None:
    """A single 100% slice cannot be one SVG arc."""

    (wedge,) = pie_wedges(_slices(100))

    assert wedge.path.count(" A ") == 2


def test_render_builds_wedges_legend_and_tooltips(document: Document) -> None:
    """Wedges show category tooltips; the legend lists input slices only."""

    slices = [CategorySlice("Electronics", 45), CategorySlice("Clothing", 25)]
    render_pie_chart(slices, "chart", document)

    surface = document.get_element_by_id("chart")
    wedges = surface.find_all("path", class_name="wedge")
    assert len(wedges) == 3
    assert len(surface.find_all(class_name="legend-item")) == 2
    assert wedges[0].get("fill") == PIE_PALETTE[0]

    wedges[0].dispatch(PointerEvent("mouseenter", client_x=10, client_y=10))
    assert document.tooltip.element.inner_html == "Electronics: 45%"
    wedges[0].dispatch(PointerEvent("mouseleave"))
    assert not document.tooltip.visible


def test_empty_dataset_leaves_surface_empty(document: Document) -> None:
    """No slices, no wedges and no legend."""

    assert pie_wedges([]) == []
    render_pie_chart([], "chart", document)
    assert document.get_element_by_id("chart").children == []
