"""Configuration models - Pure data structures.

These are domain models for configuration. The actual loading
(I/O) is handled by the shell layer.
"""

from dataclasses import dataclass, field

import pytz

from src.core.state import TimeRange


USGS_FEED_BASE = "https://earthquake.usgs.gov/earthquakes/feed/v1.0/summary"
OSM_TILE_URL = "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png"
OSM_ATTRIBUTION = "&copy; OpenStreetMap contributors"

MAX_SLIDER_MAGNITUDE = 10.0


@dataclass
class DashboardConfig:
    """Dashboard configuration.

    This is a pure data structure - no I/O or side effects.

    Attributes:
        feed_base_url: Base URL of the USGS summary feeds
        default_time_range: Feed selected at startup
        default_min_magnitude: Initial magnitude threshold
        request_timeout_seconds: Timeout for a feed request
        tile_url: Raster tile URL template
        tile_attribution: Attribution shown on the map
        initial_center: (latitude, longitude) of the world view
        initial_zoom: Zoom level of the world view
        bounds_padding: Ratio added around visible markers when fitting
        highlight_seconds: How long a clicked list row stays highlighted
        map_height: Map widget height in pixels
        display_timezone: IANA zone for list and popup times, None for
            the server's local timezone
    """
    feed_base_url: str = USGS_FEED_BASE
    default_time_range: TimeRange = TimeRange.DAY
    default_min_magnitude: float = 2.5
    request_timeout_seconds: int = 30
    tile_url: str = OSM_TILE_URL
    tile_attribution: str = OSM_ATTRIBUTION
    initial_center: tuple[float, float] = (20.0, 0.0)
    initial_zoom: int = 2
    bounds_padding: float = 0.2
    highlight_seconds: float = 0.6
    map_height: int = 600
    display_timezone: str | None = None


@dataclass
class ValidationError:
    """A configuration validation error.

    Attributes:
        field: The field that has an error
        message: Human-readable error description
        severity: 'error' or 'warning'
    """
    field: str
    message: str
    severity: str = "error"


@dataclass
class ValidationResult:
    """Result of validating configuration.

    Attributes:
        valid: True if no errors (warnings are OK)
        errors: List of validation errors/warnings
    """
    valid: bool
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def warnings(self) -> list[ValidationError]:
        """Get only warnings."""
        return [e for e in self.errors if e.severity == "warning"]

    @property
    def critical_errors(self) -> list[ValidationError]:
        """Get only critical errors."""
        return [e for e in self.errors if e.severity == "error"]


def validate_coordinates(lat: float, lon: float, field_name: str) -> list[ValidationError]:
    """Validate latitude/longitude coordinates.

    Pure function.

    Args:
        lat: Latitude value
        lon: Longitude value
        field_name: Name of the field for error messages

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    if not -90 <= lat <= 90:
        errors.append(ValidationError(
            field=field_name,
            message=f"Latitude {lat} out of range [-90, 90]",
        ))

    if not -180 <= lon <= 180:
        errors.append(ValidationError(
            field=field_name,
            message=f"Longitude {lon} out of range [-180, 180]",
        ))

    return errors


def validate_config(config: DashboardConfig) -> ValidationResult:
    """Validate configuration for errors and warnings.

    Pure function.

    Args:
        config: Configuration to validate

    Returns:
        ValidationResult with any errors/warnings found
    """
    errors: list[ValidationError] = []

    if not 0 <= config.default_min_magnitude <= MAX_SLIDER_MAGNITUDE:
        errors.append(ValidationError(
            field="default_min_magnitude",
            message=(
                f"Magnitude {config.default_min_magnitude} out of slider range "
                f"[0, {MAX_SLIDER_MAGNITUDE}]"
            ),
        ))

    if config.request_timeout_seconds <= 0:
        errors.append(ValidationError(
            field="request_timeout_seconds",
            message=f"Timeout must be positive, got {config.request_timeout_seconds}",
        ))

    if config.bounds_padding < 0:
        errors.append(ValidationError(
            field="bounds_padding",
            message=f"Padding must not be negative, got {config.bounds_padding}",
        ))

    if config.highlight_seconds < 0:
        errors.append(ValidationError(
            field="highlight_seconds",
            message=f"Highlight duration must not be negative, got {config.highlight_seconds}",
        ))

    lat, lon = config.initial_center
    errors.extend(validate_coordinates(lat, lon, "initial_center"))

    if not 0 <= config.initial_zoom <= 18:
        errors.append(ValidationError(
            field="initial_zoom",
            message=f"Zoom {config.initial_zoom} out of range [0, 18]",
        ))

    if not config.feed_base_url.startswith(("http://", "https://")):
        errors.append(ValidationError(
            field="feed_base_url",
            message=f"Feed URL '{config.feed_base_url}' is not an HTTP(S) URL",
        ))

    if "{z}" not in config.tile_url:
        errors.append(ValidationError(
            field="tile_url",
            message="Tile URL template has no {z} placeholder",
            severity="warning",
        ))

    if config.display_timezone:
        try:
            pytz.timezone(config.display_timezone)
        except pytz.UnknownTimeZoneError:
            errors.append(ValidationError(
                field="display_timezone",
                message=f"Unknown timezone '{config.display_timezone}'",
            ))

    if not config.tile_attribution:
        errors.append(ValidationError(
            field="tile_attribution",
            message="Tile attribution is empty",
            severity="warning",
        ))

    has_critical = any(e.severity == "error" for e in errors)

    return ValidationResult(
        valid=not has_critical,
        errors=errors,
    )
