import altair as alt
import streamlit as st
import streamlit.components.v1 as components
from contextlib import contextmanager
from typing import Optional

from dashboard.charts import category_pie_chart, ranked_bar_chart, revenue_trend_chart
from dashboard.controller import DashboardController
from dashboard.filters import ALL, CATEGORIES, DATE_RANGES, DashboardFilters
from dashboard.settings import get_settings

alt.data_transformers.disable_max_rows()


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .card {border: 1px solid #4a0404;border-radius: 12px;padding: 16px;background: #140101;margin-bottom: 12px;}
        .card-title {font-weight: 600;font-size: 1.0rem;color: #d1d1d1;}
        .chip-row {display: flex;flex-wrap: wrap;gap: 6px;margin-top: 6px;}
        .chip {background: #220505;border: 1px solid #4a0404;border-radius: 14px;padding: 4px 10px;font-size: 0.85rem;color: #d1d1d1;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@contextmanager
def card(title: str, actions: Optional[str] = None):
    container = st.container()
    container.markdown(
        f"<div class='card'><div class='card-title'>{title}</div><div>{actions or ''}</div></div>",
        unsafe_allow_html=True,
    )
    body = container.container()
    with body:
        yield body


def format_filter_summary(filters: DashboardFilters) -> str:
    range_chip = "Range: All time" if filters.date_range == ALL else f"Range: Last {filters.date_range} days"
    cat_chip = "Category: All" if filters.category == ALL else f"Category: {filters.category}"
    return "".join([f"<span class='chip'>{txt}</span>" for txt in [range_chip, cat_chip]])


def get_controller() -> DashboardController:
    if "controller" not in st.session_state:
        controller = DashboardController(settings=get_settings())
        controller.initialize()
        st.session_state["controller"] = controller
    return st.session_state["controller"]


# ---------- UI setup ----------
st.set_page_config(page_title="Sales Analytics Dashboard", layout="wide")
inject_base_styles()
st.title("Sales Analytics Dashboard")
st.caption("Mock business metrics, regenerated on every refresh.")

controller = get_controller()

with st.sidebar:
    st.markdown("### Filters")
    range_labels = {str(d): ("All time" if d == ALL else f"Last {d} days") for d in DATE_RANGES}
    range_keys = list(range_labels)
    date_range = st.selectbox(
        "Date range",
        options=range_keys,
        index=range_keys.index(str(controller.filters.date_range)),
        format_func=lambda k: range_labels[k],
    )
    category_options = [ALL] + list(CATEGORIES)
    category = st.selectbox(
        "Category",
        options=category_options,
        index=category_options.index(controller.filters.category),
        format_func=lambda c: "All categories" if c == ALL else c,
    )
    apply_clicked = st.button("Apply filters")
    st.markdown("---")
    refresh_clicked = st.button("↻ Refresh data")

if refresh_clicked:
    with st.spinner("Refreshing..."):
        controller.handle_refresh()
elif apply_clicked or date_range != str(controller.filters.date_range) or category != controller.filters.category:
    controller.handle_filter_change({"date_range": date_range, "category": category})

st.markdown(f"<div class='chip-row'>{format_filter_summary(controller.filters)}</div>", unsafe_allow_html=True)

components.html(controller.to_html(), height=1200, scrolling=True)

data = controller.last_datasets
if data is not None:
    with st.expander("Interactive charts (Vega-Lite)", expanded=False):
        cols = st.columns(2)
        with cols[0]:
            with card("Revenue Trend"):
                st.altair_chart(revenue_trend_chart(data.revenue_trend), use_container_width=True)
            with card("Sales by Category"):
                st.altair_chart(category_pie_chart(data.category_distribution), use_container_width=True)
        with cols[1]:
            with card("Top Products"):
                st.altair_chart(ranked_bar_chart(data.top_products), use_container_width=True)
            with card("Regional Sales"):
                st.altair_chart(ranked_bar_chart(data.regional_sales), use_container_width=True)
