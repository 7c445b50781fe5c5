"""Imperative Shell - I/O and side effects.

This module contains all code that interacts with external systems:
- USGS feed client (HTTP)
- Interactive map rendering (folium)
- Static map images (OpenStreetMap tiles)
- Configuration loading (environment/files)

Keep this layer thin and simple. All dashboard logic should be in core.
"""

from src.shell.feed_client import FeedClient, FetchError
from src.shell.map_renderer import RenderCoordinator
from src.shell.static_map_client import StaticMapClient
from src.shell.config_loader import load_config

__all__ = [
    "FeedClient",
    "FetchError",
    "RenderCoordinator",
    "StaticMapClient",
    "load_config",
]
