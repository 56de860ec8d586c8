"""Tests for environment-driven dashboard settings."""

from __future__ import annotations

from pathlib import Path

import pytest

from dashboard.settings import DashboardSettings


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Run each test away from any local ``.env`` file."""

    monkeypatch.chdir(tmp_path)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("*", ["*"]),
        ("http://a.test, http://b.test", ["http://a.test", "http://b.test"]),
        ('["http://a.test", "http://b.test"]', ["http://a.test", "http://b.test"]),
    ],
)
def test_cors_origins_accept_env_forms(monkeypatch: pytest.MonkeyPatch, raw: str, expected: list[str]) -> None:
    """Wildcard, comma-separated and JSON array values all parse."""

    monkeypatch.setenv("DASHBOARD_CORS_ALLOW_ORIGINS", raw)

    assert DashboardSettings().cors_allow_origins == expected


def test_scalar_settings_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DASHBOARD_SEED", "11")
    monkeypatch.setenv("DASHBOARD_LOG_LEVEL", "debug")
    monkeypatch.setenv("DASHBOARD_RESIZE_DEBOUNCE_SECONDS", "0.5")

    settings = DashboardSettings()

    assert settings.seed == 11
    assert settings.log_level == "DEBUG"
    assert settings.resize_debounce_seconds == 0.5


def test_unknown_log_level_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DASHBOARD_LOG_LEVEL", "chatty")

    with pytest.raises(ValueError):
        DashboardSettings()
