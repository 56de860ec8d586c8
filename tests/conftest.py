"""Pytest fixtures shared across dashboard tests."""

from __future__ import annotations

from datetime import date

import pytest

from dashboard.controller import DashboardController
from dashboard.data import MockDataProvider
from dashboard.dom import Document, Element
from dashboard.layout import build_dashboard_document
from dashboard.models import MetricPoint
from dashboard.settings import DashboardSettings


@pytest.fixture
def settings() -> DashboardSettings:
    """Fast, deterministic settings for controller tests."""

    return DashboardSettings(seed=7, render_defer_seconds=0.01, resize_debounce_seconds=0.05)


@pytest.fixture
def document() -> Document:
    """A bare document with one empty surface named ``chart``."""

    doc = Document()
    doc.body.append(Element("div", id="chart"))
    return doc


@pytest.fixture
def dashboard_document() -> Document:
    """The full dashboard page skeleton."""

    return build_dashboard_document()


@pytest.fixture
def controller(settings: DashboardSettings) -> DashboardController:
    """A controller over the full page with a seeded provider."""

    return DashboardController(provider=MockDataProvider(seed=7), settings=settings)


@pytest.fixture
def trend() -> list[MetricPoint]:
    """Three days of revenue."""

    return [
        MetricPoint(label=date(2024, 1, 5), value=12345),
        MetricPoint(label=date(2024, 1, 6), value=8000),
        MetricPoint(label=date(2024, 1, 7), value=15000),
    ]
