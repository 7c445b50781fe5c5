"""Static Map Client - Imperative Shell.

This module renders a RenderPlan to a PNG image using OpenStreetMap
tiles. All I/O is contained here; marker styling is in the core module.
"""

import io
import logging
from dataclasses import dataclass

from staticmap import StaticMap, CircleMarker

from src.core.render import RenderPlan


logger = logging.getLogger(__name__)


DEFAULT_TILE_URL = "https://tile.openstreetmap.org/{z}/{x}/{y}.png"

# Fixed view used when there is nothing to fit: (lon, lat) and zoom
WORLD_CENTER = (0.0, 20.0)
WORLD_ZOOM = 1


@dataclass
class MapImageResult:
    """Result of map image generation.

    Attributes:
        success: Whether the image was generated successfully
        image_bytes: PNG image data if successful
        error: Error message if failed
    """
    success: bool
    image_bytes: bytes | None = None
    error: str | None = None


class StaticMapClient:
    """Client for generating static map images of a dashboard view.

    This is part of the imperative shell - it handles I/O (fetching map tiles
    and rendering images).
    """

    def __init__(self, tile_url: str | None = None, padding: int = 24) -> None:
        """Initialize static map client.

        Args:
            tile_url: Custom tile URL template. Defaults to OpenStreetMap.
            padding: Pixels kept free around the outermost markers
        """
        self.tile_url = tile_url or DEFAULT_TILE_URL
        self.padding = padding

    def generate_snapshot(
        self,
        plan: RenderPlan,
        width: int = 1200,
        height: int = 700,
    ) -> MapImageResult:
        """Render every marker of a plan to a PNG image.

        This method performs I/O (fetches map tiles from tile server).
        The zoom is chosen by staticmap so that all markers fit; an empty
        plan renders the world view.

        Args:
            plan: Render plan from core module
            width: Image width in pixels
            height: Image height in pixels

        Returns:
            MapImageResult with image bytes or error
        """
        logger.info("Generating static map with %d markers", len(plan.markers))

        try:
            static_map = StaticMap(
                width,
                height,
                padding_x=self.padding,
                padding_y=self.padding,
                url_template=self.tile_url,
            )

            # Strongest events come first in the plan; draw them last so they stay on top
            for spec in reversed(plan.markers):
                static_map.add_marker(CircleMarker(
                    (spec.longitude, spec.latitude),  # (lon, lat) order for staticmap
                    spec.color,
                    int(round(spec.radius)),
                ))

            if plan.markers:
                image = static_map.render()
            else:
                image = static_map.render(zoom=WORLD_ZOOM, center=WORLD_CENTER)

            buffer = io.BytesIO()
            image.save(buffer, format="PNG")
            image_bytes = buffer.getvalue()

            logger.info(
                "Generated map image: %d bytes",
                len(image_bytes),
            )

            return MapImageResult(
                success=True,
                image_bytes=image_bytes,
            )

        except Exception as e:
            logger.error("Failed to generate map: %s", str(e))
            return MapImageResult(
                success=False,
                error=str(e),
            )
