"""Functional Core - Pure functions with no side effects.

This module contains all dashboard logic as pure functions:
- Feed parsing into earthquake events
- Magnitude filtering, ordering and styling
- View state transitions
- Render planning (markers, list rows, viewport)
- Configuration models and validation

All functions here are deterministic and have no I/O.
"""

from src.core.earthquake import EarthquakeEvent, MalformedFeedError, parse_event, parse_feed
from src.core.view import focus_zoom, magnitude_color, marker_radius, visible_view
from src.core.state import TimeRange, ViewState, update
from src.core.render import RenderPlan, build_render_plan, focus_for
from src.core.config import DashboardConfig, validate_config

__all__ = [
    # Earthquake
    "EarthquakeEvent",
    "MalformedFeedError",
    "parse_event",
    "parse_feed",
    # View
    "visible_view",
    "magnitude_color",
    "marker_radius",
    "focus_zoom",
    # State
    "TimeRange",
    "ViewState",
    "update",
    # Render
    "RenderPlan",
    "build_render_plan",
    "focus_for",
    # Config
    "DashboardConfig",
    "validate_config",
]
