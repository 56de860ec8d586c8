from __future__ import annotations

import json
from functools import lru_cache
from typing import Annotated, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class DashboardSettings(BaseSettings):
    # Application
    app_name: str = Field(default="sales-analytics-dashboard")
    app_version: str = Field(default="0.1.0")
    log_level: str = Field(default="INFO")

    # Serving
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)
    # raw env strings reach the validator below undecoded
    cors_allow_origins: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"]
    )

    # Rendering
    chart_width: int = Field(default=800, ge=100)
    chart_height: int = Field(default=300, ge=100)

    # Data
    seed: Optional[int] = Field(default=None)

    # Scheduling (seconds)
    render_defer_seconds: float = Field(default=0.05, ge=0)
    resize_debounce_seconds: float = Field(default=0.25, ge=0)

    model_config = SettingsConfigDict(
        env_prefix="DASHBOARD_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        validate_default=True,
        extra="ignore",
    )

    @field_validator("cors_allow_origins", mode="before")
    @classmethod
    def _origins_from_env(cls, v: object) -> List[str]:
        """Accept a JSON array, ``*`` or a comma-separated string."""
        if v is None:
            return []
        if isinstance(v, (list, tuple)):
            return [str(x).strip() for x in v if str(x).strip()]
        if isinstance(v, str):
            s = v.strip()
            if s == "*":
                return ["*"]
            if s.startswith("[") and s.endswith("]"):
                try:
                    parsed = json.loads(s)
                except json.JSONDecodeError as e:
                    raise ValueError(f"Invalid JSON array: {e}") from e
                return [str(x).strip() for x in parsed if str(x).strip()]
            return [part.strip() for part in s.split(",") if part.strip()]
        raise TypeError(f"Unsupported list value type: {type(v).__name__}")

    @field_validator("log_level", mode="after")
    @classmethod
    def _normalize_log_level(cls, v: str) -> str:
        x = (v or "INFO").upper()
        valid = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"}
        if x not in valid:
            raise ValueError(f"LOG_LEVEL must be one of {sorted(valid)}")
        return x


@lru_cache(maxsize=1)
def get_settings() -> DashboardSettings:
    return DashboardSettings()
