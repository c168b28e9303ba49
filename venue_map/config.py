from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from pathlib import Path

from venue_map.env_utils import load_env_file

logger = logging.getLogger(__name__)

DEFAULT_DATA_SOURCE = "data.csv"
DEFAULT_CENTER = (40.7128, -74.0060)
DEFAULT_ZOOM = 13
DEFAULT_TILE_URL = "https://{s}.basemaps.cartocdn.com/light_all/{z}/{x}/{y}{r}.png"
DEFAULT_TILE_ATTRIBUTION = '&copy; <a href="https://carto.com/attributions">CARTO</a> contributors'
DEFAULT_CLUSTER_RADIUS = 50
DEFAULT_FETCH_TIMEOUT = 15.0


@dataclass(slots=True)
class Settings:
    data_source: str = DEFAULT_DATA_SOURCE
    center_lat: float = DEFAULT_CENTER[0]
    center_lng: float = DEFAULT_CENTER[1]
    zoom: int = DEFAULT_ZOOM
    tile_url: str = DEFAULT_TILE_URL
    tile_attribution: str = DEFAULT_TILE_ATTRIBUTION
    cluster_radius: int = DEFAULT_CLUSTER_RADIUS
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT

    @property
    def center(self) -> tuple[float, float]:
        return (self.center_lat, self.center_lng)

    def cluster_options(self) -> dict[str, object]:
        return {
            "maxClusterRadius": self.cluster_radius,
            "spiderfyOnMaxZoom": True,
            "showCoverageOnHover": False,
            "zoomToBoundsOnClick": True,
        }


def load_settings(base_dir: Path | None = None) -> Settings:
    if base_dir is not None:
        load_env_file(base_dir)

    return Settings(
        data_source=_env_text("VENUE_MAP_DATA_SOURCE", DEFAULT_DATA_SOURCE),
        center_lat=_env_number("VENUE_MAP_CENTER_LAT", DEFAULT_CENTER[0], float),
        center_lng=_env_number("VENUE_MAP_CENTER_LNG", DEFAULT_CENTER[1], float),
        zoom=_env_number("VENUE_MAP_ZOOM", DEFAULT_ZOOM, int),
        tile_url=_env_text("VENUE_MAP_TILE_URL", DEFAULT_TILE_URL),
        tile_attribution=_env_text("VENUE_MAP_TILE_ATTRIBUTION", DEFAULT_TILE_ATTRIBUTION),
        cluster_radius=_env_number("VENUE_MAP_CLUSTER_RADIUS", DEFAULT_CLUSTER_RADIUS, int),
        fetch_timeout=_env_number("VENUE_MAP_FETCH_TIMEOUT", DEFAULT_FETCH_TIMEOUT, float),
    )


def _env_text(key: str, default: str) -> str:
    value = os.getenv(key, "").strip()
    return value or default


def _env_number(key, default, cast):
    raw = os.getenv(key, "").strip()
    if not raw:
        return default
    try:
        return cast(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {key}={raw!r}; using {default}")
        return default
