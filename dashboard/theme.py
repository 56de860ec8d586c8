from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Theme:
    maroon: str = "#800000"
    bright_red: str = "#ff3333"
    dark_red: str = "#2b0202"
    text: str = "#d1d1d1"
    grid: str = "#220505"
    axis: str = "#4a0404"
    point_fill: str = "#000"
    point_hover_fill: str = "#fff"
    wedge_stroke: str = "#000"
    unallocated: str = "#1a1a1a"


@dataclass(frozen=True)
class Padding:
    top: int = 20
    right: int = 30
    bottom: int = 40
    left: int = 60


THEME = Theme()
LINE_PADDING = Padding()

PIE_PALETTE: Tuple[str, ...] = ("#800000", "#a30000", "#cc0000", "#ff3333", "#4a0404")

LINE_CHART_HEIGHT = 300
GRID_LINES = 5
POINT_RADIUS = 4
POINT_HOVER_RADIUS = 6

PIE_VIEWBOX = 200
PIE_RADIUS = 80

TOOLTIP_OFFSET = 15

SVG_NS = "http://www.w3.org/2000/svg"
