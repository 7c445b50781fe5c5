"""Render planning - Pure functions.

Turns a filtered, sorted view into everything the map and the list need:
marker styles, popup markup, list row text, the padded viewport and the
stats line. The shell layer only draws what a RenderPlan describes.
"""

import html
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Sequence

from src.core.earthquake import EarthquakeEvent
from src.core.view import focus_zoom, magnitude_color, marker_radius, magnitude_tier


EMPTY_MESSAGE = "No earthquakes match the filters."
LOADING_MESSAGE = "Loading events…"
FAILED_MESSAGE = "Failed to load data. Try refresh."
LOADING_STATS = "Loading…"
ERROR_STATS = "Error"

# Leaflet LatLngBounds.pad() ratio applied before fitting the viewport
DEFAULT_PADDING = 0.2


@dataclass(frozen=True)
class Bounds:
    """Geographic viewport.

    Attributes:
        south: Southern edge latitude
        west: Western edge longitude
        north: Northern edge latitude
        east: Eastern edge longitude
    """
    south: float
    west: float
    north: float
    east: float

    def pad(self, ratio: float) -> "Bounds":
        """Extend every side by `ratio` times the span, like Leaflet's pad()."""
        lat_buffer = abs(self.north - self.south) * ratio
        lon_buffer = abs(self.east - self.west) * ratio
        return Bounds(
            south=self.south - lat_buffer,
            west=self.west - lon_buffer,
            north=self.north + lat_buffer,
            east=self.east + lon_buffer,
        )

    def as_corners(self) -> list[list[float]]:
        """Return [[south, west], [north, east]] as folium expects."""
        return [[self.south, self.west], [self.north, self.east]]


@dataclass(frozen=True)
class MarkerSpec:
    event_id: str
    latitude: float
    longitude: float
    radius: float
    color: str
    popup_html: str
    tooltip: str


@dataclass(frozen=True)
class ListRow:
    """Text for one list entry.

    Attributes:
        event_id: Event this row represents
        badge: Magnitude badge text, e.g. "M 5.2"
        tier: Badge class ('high', 'mid' or 'small')
        time_label: Local time of day, blank when the event has no time
        place: Location description
        depth_label: e.g. "Depth: 10.0 km" or "Depth: N/A km"
    """
    event_id: str
    badge: str
    tier: str
    time_label: str
    place: str
    depth_label: str


@dataclass(frozen=True)
class Focus:
    """Viewport centred on a single event after its row was clicked."""
    event_id: str
    latitude: float
    longitude: float
    zoom: int


@dataclass(frozen=True)
class RenderPlan:
    """Everything needed to draw the map and the list for one view.

    Attributes:
        markers: One marker per visible event, strongest first
        rows: One list row per visible event, same order as markers
        bounds: Padded viewport around all markers, None when there are none
        stats: Summary line, e.g. "12 events • Min mag 2.5"
        message: Placeholder text for an empty list, else None
    """
    markers: tuple[MarkerSpec, ...]
    rows: tuple[ListRow, ...]
    bounds: Bounds | None
    stats: str
    message: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.markers


def format_depth(depth_km: float | None) -> str:
    """Format depth for display ('N/A' when unknown)."""
    if depth_km is None:
        return "N/A"
    text = repr(float(depth_km))
    return text[:-2] if text.endswith(".0") else text


def _local_time(event: EarthquakeEvent, tz: tzinfo | None) -> datetime | None:
    if event.time is None:
        return None
    try:
        return event.time.astimezone(tz)
    except (OverflowError, OSError, ValueError):
        return None


def format_timestamp(event: EarthquakeEvent, tz: tzinfo | None = None) -> str:
    """Full local date and time of an event, blank when unknown.

    Args:
        event: Event to format
        tz: Display timezone, defaults to the server's local timezone
    """
    local = _local_time(event, tz)
    return local.strftime("%Y-%m-%d %H:%M:%S") if local else ""


def format_time_of_day(event: EarthquakeEvent, tz: tzinfo | None = None) -> str:
    """Local time of day of an event, blank when unknown."""
    local = _local_time(event, tz)
    return local.strftime("%H:%M:%S") if local else ""


def format_stats(count: int, min_magnitude: float) -> str:
    return f"{count} events • Min mag {min_magnitude:.1f}"


def format_popup(event: EarthquakeEvent, tz: tzinfo | None = None) -> str:
    """Build the popup markup shown for a marker.

    Pure function. Place and URL are HTML-escaped.
    """
    place = html.escape(event.place)
    url = html.escape(event.url, quote=True)
    return (
        '<div style="min-width:180px">'
        f'<div style="font-weight:700; margin-bottom:6px">{place}</div>'
        f"<div>Magnitude: <strong>{event.effective_magnitude:.1f}</strong></div>"
        f"<div>Depth: {format_depth(event.depth_km)} km</div>"
        f'<div style="margin-top:6px; font-size:0.9em; color:#cbd6df">'
        f"{format_timestamp(event, tz)}</div>"
        f'<div style="margin-top:8px"><a href="{url}" target="_blank">View on USGS</a></div>'
        "</div>"
    )


def marker_for(event: EarthquakeEvent, tz: tzinfo | None = None) -> MarkerSpec:
    magnitude = event.effective_magnitude
    return MarkerSpec(
        event_id=event.id,
        latitude=event.latitude,
        longitude=event.longitude,
        radius=marker_radius(magnitude),
        color=magnitude_color(magnitude),
        popup_html=format_popup(event, tz),
        tooltip=f"M {magnitude:.1f} - {event.place}",
    )


def row_for(event: EarthquakeEvent, tz: tzinfo | None = None) -> ListRow:
    magnitude = event.effective_magnitude
    return ListRow(
        event_id=event.id,
        badge=f"M {magnitude:.1f}",
        tier=magnitude_tier(magnitude),
        time_label=format_time_of_day(event, tz),
        place=event.place,
        depth_label=f"Depth: {format_depth(event.depth_km)} km",
    )


def compute_bounds(events: Sequence[EarthquakeEvent]) -> Bounds | None:
    """Smallest box containing every event, None for no events.

    Pure function.
    """
    if not events:
        return None

    latitudes = [e.latitude for e in events]
    longitudes = [e.longitude for e in events]

    return Bounds(
        south=min(latitudes),
        west=min(longitudes),
        north=max(latitudes),
        east=max(longitudes),
    )


def build_render_plan(
    visible: Sequence[EarthquakeEvent],
    min_magnitude: float,
    padding: float = DEFAULT_PADDING,
    tz: tzinfo | None = None,
) -> RenderPlan:
    """Build the render plan for a filtered view.

    Pure function.

    Args:
        visible: Output of visible_view(), already filtered and sorted
        min_magnitude: Threshold the view was filtered with (for the stats line)
        padding: Viewport padding ratio
        tz: Display timezone for list and popup times

    Returns:
        RenderPlan describing markers, rows, viewport and stats
    """
    bounds = compute_bounds(visible)

    return RenderPlan(
        markers=tuple(marker_for(e, tz) for e in visible),
        rows=tuple(row_for(e, tz) for e in visible),
        bounds=bounds.pad(padding) if bounds is not None else None,
        stats=format_stats(len(visible), min_magnitude),
        message=EMPTY_MESSAGE if not visible else None,
    )


def focus_for(event: EarthquakeEvent) -> Focus:
    """Viewport used when an event's list row is clicked.

    Pure function.
    """
    return Focus(
        event_id=event.id,
        latitude=event.latitude,
        longitude=event.longitude,
        zoom=focus_zoom(event.effective_magnitude),
    )
