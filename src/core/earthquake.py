"""Earthquake event model and feed parsing - Pure functions.

This module turns a USGS GeoJSON FeatureCollection into typed
EarthquakeEvent objects. Optional fields are defaulted here, at the
extraction boundary, so that nothing downstream has to deal with
missing magnitudes or depths.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any


logger = logging.getLogger(__name__)


UNKNOWN_PLACE = "Unknown location"


class MalformedFeedError(ValueError):
    """Raised when a payload does not have the FeatureCollection shape."""


@dataclass(frozen=True)
class EarthquakeEvent:
    """Immutable earthquake event from a feed snapshot.

    Attributes:
        id: USGS event ID, unique within a snapshot
        magnitude: Event magnitude, None when the feed omits it
        place: Human-readable location description
        time_ms: Event time in epoch milliseconds, None when absent
        longitude: Epicenter longitude
        latitude: Epicenter latitude
        depth_km: Depth in kilometers, None when absent
        url: USGS event detail URL
    """
    id: str
    magnitude: float | None
    place: str
    time_ms: int | None
    longitude: float
    latitude: float
    depth_km: float | None = None
    url: str = ""

    @property
    def effective_magnitude(self) -> float:
        """Magnitude used for styling, filtering and ordering (missing = 0)."""
        return self.magnitude or 0.0

    @property
    def time(self) -> datetime | None:
        """Event timestamp as an aware UTC datetime.

        None when the feed has no time or the value is outside the range
        a datetime can represent.
        """
        if self.time_ms is None:
            return None
        try:
            return datetime.fromtimestamp(self.time_ms / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None

    @property
    def coordinates(self) -> tuple[float, float]:
        """Return (latitude, longitude) tuple."""
        return (self.latitude, self.longitude)


def _optional_float(value: Any) -> float | None:
    if value is None:
        return None
    return float(value)


def parse_event(feature: dict[str, Any]) -> EarthquakeEvent:
    """Parse a single GeoJSON feature into an EarthquakeEvent.

    Pure function.

    Args:
        feature: GeoJSON feature dict from the USGS feed

    Returns:
        EarthquakeEvent with defaults applied to optional fields

    Raises:
        MalformedFeedError: If the feature lacks an id or coordinates, or
            its members do not have the GeoJSON shape
    """
    if not isinstance(feature, dict):
        raise MalformedFeedError(f"Feature is not an object: {feature!r}")

    event_id = feature.get("id")
    if not event_id:
        raise MalformedFeedError("Feature has no id")

    props = feature.get("properties") or {}
    if not isinstance(props, dict):
        raise MalformedFeedError(f"Feature {event_id} properties is not an object")

    geometry = feature.get("geometry") or {}
    if not isinstance(geometry, dict):
        raise MalformedFeedError(f"Feature {event_id} geometry is not an object")

    coords = geometry.get("coordinates") or []
    if not isinstance(coords, (list, tuple)) or len(coords) < 2:
        raise MalformedFeedError(f"Feature {event_id} has no coordinates")

    try:
        time_ms = props.get("time")
        return EarthquakeEvent(
            id=str(event_id),
            magnitude=_optional_float(props.get("mag")),
            place=str(props.get("place") or UNKNOWN_PLACE),
            time_ms=int(time_ms) if time_ms is not None else None,
            longitude=float(coords[0]),
            latitude=float(coords[1]),
            depth_km=_optional_float(coords[2]) if len(coords) > 2 else None,
            url=str(props.get("url") or ""),
        )
    except (KeyError, OverflowError, TypeError, ValueError) as e:
        raise MalformedFeedError(f"Feature {event_id} has invalid values: {e}") from e


def parse_feed(geojson: Any) -> list[EarthquakeEvent]:
    """Parse a USGS GeoJSON FeatureCollection into a snapshot.

    Pure function. Server order is preserved. A payload without a
    "features" key is an empty snapshot. When an id appears more than
    once only its first occurrence is kept.

    Args:
        geojson: Decoded JSON body of the feed response

    Returns:
        List of EarthquakeEvent in feed order

    Raises:
        MalformedFeedError: If the payload is not a feature collection
    """
    if not isinstance(geojson, dict):
        raise MalformedFeedError("Feed payload is not a JSON object")

    features = geojson.get("features") or []
    if not isinstance(features, list):
        raise MalformedFeedError("Feed 'features' is not a list")

    events: list[EarthquakeEvent] = []
    seen: set[str] = set()

    for feature in features:
        event = parse_event(feature)
        if event.id in seen:
            logger.warning("Duplicate event id %s in feed, keeping first", event.id)
            continue
        seen.add(event.id)
        events.append(event)

    return events
