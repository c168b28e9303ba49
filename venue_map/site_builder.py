import html
import logging
from pathlib import Path

import folium
from folium.plugins import MarkerCluster

from venue_map.models import FilterState
from venue_map.renderer import MarkerLayer, RenderResult
from venue_map.session import MapSession
from venue_map.stats import FOOD_DRINK_MARKERS_ID, TOTAL_MARKERS_ID, VISIBLE_MARKERS_ID, StatsBoard

logger = logging.getLogger(__name__)

MARKER_ICON_SIZE = (48, 48)
MARKER_ICON_ANCHOR = (24, 48)
POPUP_MAX_WIDTH = 300


def build_static_map(
    session: MapSession,
    output_path: Path,
    state: FilterState | None = None,
) -> RenderResult:
    """Render ``state`` over the session's dataset into one self-contained HTML page."""
    state = state or FilterState()
    output_path.parent.mkdir(parents=True, exist_ok=True)

    layer = MarkerLayer()
    board = StatsBoard()
    result = session.apply(state, layer=layer, board=board)

    folium_map = _folium_map(session, layer)
    folium_map.get_root().header.add_child(folium.Element(f"<style>{_style_css()}</style>"))
    folium_map.get_root().html.add_child(folium.Element(_stats_panel_html(board, state)))
    folium_map.save(str(output_path))

    logger.info(f"Static map written to {output_path} with {result.total} markers")
    return result


def _folium_map(session: MapSession, layer: MarkerLayer) -> folium.Map:
    settings = session.settings
    folium_map = folium.Map(
        location=list(settings.center),
        zoom_start=settings.zoom,
        tiles=None,
        control_scale=True,
    )
    folium.TileLayer(
        tiles=settings.tile_url,
        attr=settings.tile_attribution,
        name="CARTO Light",
        control=False,
    ).add_to(folium_map)

    cluster = MarkerCluster(name="Venues", options=settings.cluster_options())
    for marker in layer:
        icon = folium.DivIcon(
            html=marker.glyph,
            icon_size=MARKER_ICON_SIZE,
            icon_anchor=MARKER_ICON_ANCHOR,
            class_name="emoji-marker",
        )
        folium.Marker(
            location=[marker.lat, marker.lng],
            icon=icon,
            popup=folium.Popup(marker.popup_html, max_width=POPUP_MAX_WIDTH),
        ).add_to(cluster)
    cluster.add_to(folium_map)
    return folium_map


def _panel_text(value: str) -> str:
    # Element content is rendered as a template, so braces must not survive.
    return html.escape(value).replace("{", "&#123;").replace("}", "&#125;")


def _stats_panel_html(board: StatsBoard, state: FilterState) -> str:
    parts = [
        '<div id="stats" class="stats-panel">',
        f'<div>Total markers: <span id="{TOTAL_MARKERS_ID}">{board.read(TOTAL_MARKERS_ID)}</span></div>',
        f'<div>Food &amp; drink: <span id="{FOOD_DRINK_MARKERS_ID}">{board.read(FOOD_DRINK_MARKERS_ID)}</span></div>',
        f'<div>Visible: <span id="{VISIBLE_MARKERS_ID}">{board.read(VISIBLE_MARKERS_ID)}</span></div>',
    ]
    if state.search:
        parts.append(f'<p class="search-term">Search: {_panel_text(state.search)}</p>')
    if state.active_selections:
        parts.append('<ul class="active-filters">')
        for column, value in state.active_selections.items():
            parts.append(f"<li>{_panel_text(column)}: {_panel_text(value)}</li>")
        parts.append("</ul>")
    parts.append("</div>")
    return "".join(parts)


def _style_css() -> str:
    return """
.emoji-marker {
  font-size: 32px;
  line-height: 48px;
  text-align: center;
  background: transparent;
  border: none;
}
.popup-content h3 { margin: 0 0 4px; font-size: 15px; }
.popup-content .subcategory { color: #555; font-size: 12px; margin-bottom: 4px; }
.popup-content .popup-image { max-width: 100%; border-radius: 4px; margin: 4px 0; }
.popup-content .address { margin: 4px 0; }
.stats-panel {
  position: fixed;
  bottom: 24px;
  left: 12px;
  z-index: 1000;
  background: rgba(255, 255, 255, 0.92);
  padding: 8px 12px;
  border-radius: 6px;
  box-shadow: 0 1px 4px rgba(0, 0, 0, 0.25);
  font: 13px/1.4 system-ui, sans-serif;
}
.stats-panel ul { margin: 4px 0 0; padding-left: 16px; }
"""
