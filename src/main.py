"""Streamlit Entry Point.

This module provides the dashboard page. It's a thin wrapper that keeps
one Dashboard per browser session and turns widget callbacks into
dashboard operations.
"""

import logging
import os

import streamlit as st
from streamlit_folium import st_folium

from src.core.config import MAX_SLIDER_MAGNITUDE
from src.core.state import TimeRange
from src.dashboard import Dashboard
from src.shell.config_loader import load_config


# Configure logging
log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


SESSION_KEY = "dashboard"
TIER_COLORS = {"high": "red", "mid": "orange", "small": "gray"}


def _get_dashboard() -> Dashboard:
    """Return this session's dashboard, creating and loading it on first use."""
    if SESSION_KEY not in st.session_state:
        logger.info("Starting new dashboard session")
        dashboard = Dashboard(load_config())
        dashboard.start()
        st.session_state[SESSION_KEY] = dashboard
    return st.session_state[SESSION_KEY]


def _on_magnitude_change(dashboard: Dashboard) -> None:
    dashboard.set_min_magnitude(st.session_state["min_magnitude"])


def _on_range_change(dashboard: Dashboard) -> None:
    dashboard.set_time_range(st.session_state["time_range"])


def _on_refresh(dashboard: Dashboard) -> None:
    dashboard.refresh()


def _on_row_click(dashboard: Dashboard, event_id: str) -> None:
    dashboard.select_event(event_id)


def _render_controls(dashboard: Dashboard) -> None:
    """Magnitude slider, time range selector and refresh button."""
    st.sidebar.header("Filters")

    st.sidebar.slider(
        "Minimum magnitude",
        min_value=0.0,
        max_value=MAX_SLIDER_MAGNITUDE,
        value=dashboard.state.min_magnitude,
        step=0.1,
        format="%.1f",
        key="min_magnitude",
        on_change=_on_magnitude_change,
        args=(dashboard,),
    )
    st.sidebar.markdown(f"Min magnitude: **{dashboard.magnitude_label}**")

    ranges = list(TimeRange)
    st.sidebar.selectbox(
        "Time range",
        options=ranges,
        index=ranges.index(dashboard.state.time_range),
        format_func=lambda r: r.label,
        key="time_range",
        on_change=_on_range_change,
        args=(dashboard,),
    )

    st.sidebar.button(
        "Refresh",
        on_click=_on_refresh,
        args=(dashboard,),
        use_container_width=True,
    )


def _render_list(dashboard: Dashboard) -> None:
    """Stats line and one clickable row per visible earthquake."""
    st.subheader(dashboard.status_text)
    if dashboard.last_updated_text:
        st.caption(dashboard.last_updated_text)

    if dashboard.list_message:
        st.info(dashboard.list_message)
        return

    with st.container(height=dashboard.config.map_height):
        for row in dashboard.rows:
            color = TIER_COLORS.get(row.tier, "gray")
            st.button(
                f":{color}[**{row.badge}**] {row.place}",
                key=f"row-{row.event_id}",
                type="primary" if dashboard.is_highlighted(row.event_id) else "secondary",
                on_click=_on_row_click,
                args=(dashboard, row.event_id),
                use_container_width=True,
            )
            st.caption(f"{row.time_label} · {row.depth_label}")


def run_dashboard() -> None:
    """Build the dashboard page for the current Streamlit run."""
    st.set_page_config(
        page_title="Earthquake Visualizer",
        page_icon="🌎",
        layout="wide",
    )
    st.title("Earthquake Visualizer")

    dashboard = _get_dashboard()
    _render_controls(dashboard)

    map_col, list_col = st.columns([2, 1])

    with map_col:
        st_folium(
            dashboard.render_map(),
            key="quake-map",
            height=dashboard.config.map_height,
            use_container_width=True,
            returned_objects=[],
        )

    with list_col:
        _render_list(dashboard)
