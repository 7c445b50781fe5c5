"""Interactive Map Renderer - Imperative Shell.

Draws a RenderPlan onto a Leaflet map built with folium. Every render
starts from scratch: prior markers and the id lookup are discarded and a
new map is built, so the result only ever reflects the plan it was given.
"""

import logging

import folium

from src.core.config import DashboardConfig
from src.core.render import Bounds, Focus, RenderPlan


logger = logging.getLogger(__name__)


MARKER_STROKE = "#00000020"
MARKER_WEIGHT = 1
MARKER_FILL_OPACITY = 0.85
POPUP_MAX_WIDTH = 320

PULSE_STYLE = """
<style>
@keyframes quake-pulse {
  0%   { stroke-width: 1; stroke-opacity: 0.9; }
  50%  { stroke-width: 10; stroke-opacity: 0.25; }
  100% { stroke-width: 1; stroke-opacity: 0.9; }
}
.leaflet-overlay-pane path.leaflet-interactive {
  animation: quake-pulse 1.6s ease-out 1;
}
</style>
"""


class RenderCoordinator:
    """Builds the earthquake map for a render plan.

    This is part of the imperative shell - it drives the map widget.

    Attributes:
        config: Dashboard configuration (tiles, initial view)
        markers: Event ID -> marker drawn by the last render
        open_popups: Event IDs whose popup the last render opened
        fitted_bounds: Viewport the last render fitted, if any
        focused: Focus the last render centred on, if any
        map: Map produced by the last render
    """

    def __init__(self, config: DashboardConfig | None = None) -> None:
        self.config = config or DashboardConfig()
        self.markers: dict[str, folium.CircleMarker] = {}
        self.open_popups: list[str] = []
        self.fitted_bounds: Bounds | None = None
        self.focused: Focus | None = None
        self.map: folium.Map | None = None

    def clear(self) -> None:
        """Forget everything drawn by the previous render."""
        self.markers.clear()
        self.open_popups = []
        self.fitted_bounds = None
        self.focused = None
        self.map = None

    def _new_map(self, focus: Focus | None) -> folium.Map:
        if focus is not None:
            location = [focus.latitude, focus.longitude]
            zoom = focus.zoom
        else:
            location = list(self.config.initial_center)
            zoom = self.config.initial_zoom

        fmap = folium.Map(
            location=location,
            zoom_start=zoom,
            tiles=self.config.tile_url,
            attr=self.config.tile_attribution,
            zoom_control=True,
        )
        fmap.get_root().header.add_child(folium.Element(PULSE_STYLE))
        return fmap

    def render(self, plan: RenderPlan, focus: Focus | None = None) -> folium.Map:
        """Draw markers for a plan and set the viewport.

        Without a focus the viewport is fitted to plan.bounds (left at the
        world view when the plan is empty). With a focus the map is centred
        on that event and only its popup is opened.

        Args:
            plan: Render plan from the core module
            focus: Event to centre on after a list row click

        Returns:
            The new folium map
        """
        self.clear()

        if focus is not None and not any(m.event_id == focus.event_id for m in plan.markers):
            logger.debug("Focused event %s is not visible, fitting bounds instead", focus.event_id)
            focus = None

        fmap = self._new_map(focus)
        layer = folium.FeatureGroup(name="Earthquakes").add_to(fmap)

        for spec in plan.markers:
            show_popup = focus is not None and spec.event_id == focus.event_id
            marker = folium.CircleMarker(
                location=[spec.latitude, spec.longitude],
                radius=spec.radius,
                color=MARKER_STROKE,
                weight=MARKER_WEIGHT,
                fill=True,
                fill_color=spec.color,
                fill_opacity=MARKER_FILL_OPACITY,
                popup=folium.Popup(spec.popup_html, max_width=POPUP_MAX_WIDTH, show=show_popup),
                tooltip=spec.tooltip,
            ).add_to(layer)

            self.markers[spec.event_id] = marker
            if show_popup:
                self.open_popups.append(spec.event_id)

        if focus is not None:
            self.focused = focus
        elif plan.bounds is not None:
            fmap.fit_bounds(plan.bounds.as_corners())
            self.fitted_bounds = plan.bounds

        logger.debug(
            "Rendered %d markers (focus=%s)",
            len(self.markers),
            focus.event_id if focus else None,
        )

        self.map = fmap
        return fmap
