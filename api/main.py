from __future__ import annotations

import logging
import math
import threading
from contextlib import asynccontextmanager
from dataclasses import asdict
from typing import Callable, Dict, Optional

import numpy as np
import pandas as pd
import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse

from api.schemas import DashboardFiltersModel, KPISummaryModel, MetaListResponse, RefreshResponse
from dashboard.charts import category_pie_chart, ranked_bar_chart, revenue_trend_chart, to_vega_spec
from dashboard.controller import DashboardController
from dashboard.data import DashboardDatasets
from dashboard.filters import CATEGORIES, DATE_RANGES
from dashboard.settings import get_settings

settings = get_settings()
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

_controller: Optional[DashboardController] = None
_lock = threading.RLock()


def get_controller() -> DashboardController:
    global _controller
    with _lock:
        if _controller is None:
            _controller = DashboardController(settings=settings)
            _controller.initialize()
        return _controller


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        logger.info("Starting %s...", settings.app_name)
        yield
    finally:
        logger.info("Application shutdown complete")


app = FastAPI(title="Sales Analytics Dashboard API", version=settings.app_version, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

CHART_BUILDERS: Dict[str, Callable[[DashboardDatasets], object]] = {
    "revenue_trend": lambda d: revenue_trend_chart(d.revenue_trend),
    "top_products": lambda d: ranked_bar_chart(d.top_products),
    "category_distribution": lambda d: category_pie_chart(d.category_distribution),
    "regional_sales": lambda d: ranked_bar_chart(d.regional_sales),
}


def _json(data: object) -> JSONResponse:
    """Return JSON with safe encoding for pandas/numpy objects."""

    def _safe_float(value: object) -> float | None:
        try:
            out = float(value)  # type: ignore[arg-type]
        except Exception:
            return None
        if math.isnan(out) or math.isinf(out):
            return None
        return out

    return JSONResponse(
        content=jsonable_encoder(
            data,
            custom_encoder={
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
                np.ndarray: lambda arr: arr.tolist(),
                pd.Timestamp: lambda ts: ts.isoformat(),
            },
        )
    )


def _error(exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": str(exc), "type": type(exc).__name__})


@app.get("/health")
def health():
    return {"ok": True, "service": settings.app_name}


@app.get("/", response_class=HTMLResponse)
def index(
    date_filter: Optional[str] = Query(default=None, alias="date-filter"),
    category_filter: Optional[str] = Query(default=None, alias="category-filter"),
    refresh: Optional[str] = Query(default=None),
    controller: DashboardController = Depends(get_controller),
):
    try:
        with _lock:
            if refresh:
                controller.handle_refresh()
            elif date_filter is not None or category_filter is not None:
                controller.handle_filter_change({"date_range": date_filter, "category": category_filter})
            return HTMLResponse(controller.to_html())
    except Exception as exc:
        logger.exception("index failed")
        return _error(exc)


@app.post("/refresh", response_model=RefreshResponse)
def refresh(
    filters: DashboardFiltersModel,
    regenerate: bool = Query(default=False),
    controller: DashboardController = Depends(get_controller),
):
    try:
        with _lock:
            if regenerate:
                controller.provider.redraw()
            applied = controller.handle_filter_change(filters.model_dump())
            data = controller.last_datasets
            if data is None:
                raise RuntimeError("No datasets rendered")
            return RefreshResponse(
                filters=DashboardFiltersModel(date_range=applied.date_range, category=applied.category),
                kpis=KPISummaryModel(**asdict(data.kpis)),
                surfaces=controller.surface_html(),
                render_count=controller.render_count,
            )
    except Exception as exc:
        logger.exception("refresh failed")
        return _error(exc)


@app.get("/meta/categories", response_model=MetaListResponse)
def meta_categories():
    return MetaListResponse(values=list(CATEGORIES))


@app.get("/meta/date-ranges", response_model=MetaListResponse)
def meta_date_ranges():
    return MetaListResponse(values=[str(d) for d in DATE_RANGES])


@app.get("/charts/{name}")
def chart_spec(name: str, controller: DashboardController = Depends(get_controller)):
    builder = CHART_BUILDERS.get(name)
    if builder is None:
        raise HTTPException(status_code=404, detail=f"Unknown chart: {name}")
    try:
        with _lock:
            data = controller.last_datasets or controller.update_all_visualizations()
        if data is None:
            raise RuntimeError("No datasets rendered")
        return _json(to_vega_spec(builder(data)))
    except Exception as exc:
        logger.exception("chart_spec failed")
        return _error(exc)


if __name__ == "__main__":
    logger.info("Starting %s on %s:%d", app.title, settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
