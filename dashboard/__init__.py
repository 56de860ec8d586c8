"""Core (UI-agnostic) dashboard logic.

This package contains:
- a minimal document model (named surfaces, hover events, HTML output)
- mock data generation and filter normalization
- chart renderers (line, bar, pie, progress) and the shared tooltip
- the controller that wires refresh/filter/resize triggers to renderers
- chart helpers (Altair -> Vega-Lite spec dict)
"""
