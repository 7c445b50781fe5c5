"""Filtering, ordering and magnitude styling - Pure functions.

Everything here works on EarthquakeEvent.effective_magnitude, so an
event with no magnitude behaves exactly like a magnitude 0 event.
"""

import math
from collections.abc import Iterable

from src.core.earthquake import EarthquakeEvent


STRONG_COLOR = "#d32f2f"
MODERATE_COLOR = "#f57c00"
LIGHT_COLOR = "#ffd166"

MIN_RADIUS = 4
MAX_RADIUS = 24

MIN_FOCUS_ZOOM = 4
MAX_FOCUS_ZOOM = 8


def visible_view(
    snapshot: Iterable[EarthquakeEvent],
    min_magnitude: float,
) -> list[EarthquakeEvent]:
    """Filter a snapshot by magnitude and sort it strongest first.

    Pure function.

    Args:
        snapshot: Events from the current feed snapshot
        min_magnitude: Minimum magnitude (inclusive)

    Returns:
        Events with magnitude >= min_magnitude, sorted descending by magnitude
    """
    visible = [e for e in snapshot if e.effective_magnitude >= min_magnitude]
    return sorted(visible, key=lambda e: e.effective_magnitude, reverse=True)


def magnitude_color(magnitude: float) -> str:
    """Get the marker fill color for a magnitude.

    Pure function. Everything below 4.0 shares the light color.
    """
    if magnitude >= 6.0:
        return STRONG_COLOR
    elif magnitude >= 4.0:
        return MODERATE_COLOR
    elif magnitude >= 2.5:
        return LIGHT_COLOR
    return LIGHT_COLOR


def magnitude_tier(magnitude: float) -> str:
    """Get the list badge class for a magnitude ('high', 'mid' or 'small')."""
    if magnitude >= 6.0:
        return "high"
    elif magnitude >= 4.0:
        return "mid"
    return "small"


def marker_radius(magnitude: float) -> float:
    """Determine marker radius in pixels for a magnitude.

    Pure function. Very small events stay visible and outliers stay
    bounded: the result is always within [MIN_RADIUS, MAX_RADIUS].
    """
    base = max(magnitude, 0.8)
    return min(MAX_RADIUS, max(MIN_RADIUS, base * 3))


def focus_zoom(magnitude: float) -> int:
    """Zoom level used when focusing the map on a single event.

    Pure function. Larger earthquakes get a wider view.
    """
    return max(MIN_FOCUS_ZOOM, min(MAX_FOCUS_ZOOM, math.floor(10 - magnitude)))
