"""
Marker construction and rendering.

Rows that reached this stage were already filtered for coordinates by the
loader; the coordinate check here is repeated per row and a bad row is
skipped rather than failing the pass. Each render replaces the layer's
contents completely.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
import html
import logging

from venue_map.category_utils import icon_glyph
from venue_map.diagnostics import KIND_ROW_ERROR, STAGE_RENDER, DiagnosticLog
from venue_map.errors import ParseRowError
from venue_map.models import Row
from venue_map.stats import MarkerStats, StatsBoard, report_stats

logger = logging.getLogger(__name__)

PROGRESS_EVERY = 100


@dataclass(frozen=True, slots=True)
class Marker:
    lat: float
    lng: float
    icon: str
    glyph: str
    popup_html: str
    is_food_drink: bool
    line: int = 0

    def to_dict(self) -> dict[str, object]:
        return {
            "lat": self.lat,
            "lng": self.lng,
            "icon": self.icon,
            "glyph": self.glyph,
            "popup": self.popup_html,
            "foodDrink": self.is_food_drink,
            "line": self.line,
        }


class MarkerLayer:
    """The live marker collection handed to the map."""

    def __init__(self) -> None:
        self._markers: list[Marker] = []

    def clear(self) -> None:
        self._markers.clear()

    def add(self, marker: Marker) -> None:
        self._markers.append(marker)

    def replace(self, markers: Iterable[Marker]) -> None:
        self.clear()
        for marker in markers:
            self.add(marker)

    def __iter__(self) -> Iterator[Marker]:
        return iter(list(self._markers))

    def __len__(self) -> int:
        return len(self._markers)


@dataclass(slots=True)
class RenderResult:
    markers: list[Marker] = field(default_factory=list)
    food_drink: int = 0
    failed_lines: list[int] = field(default_factory=list)
    skipped_lines: list[int] = field(default_factory=list)
    stats: MarkerStats | None = None

    @property
    def total(self) -> int:
        return len(self.markers)


def _escape(value: str) -> str:
    return html.escape(value, quote=True)


def build_popup_html(row: Row) -> str:
    title = row.title
    parts = ['<div class="popup-content">']
    if title:
        parts.append(f"<h3>{_escape(title)}</h3>")
    if row.subcategory:
        parts.append(f'<div class="subcategory">{_escape(row.subcategory)}</div>')
    if row.website:
        parts.append(f'<div class="website"><a href="{_escape(row.website)}" target="_blank">Website</a></div>')
    if row.image:
        parts.append(f'<img src="{_escape(row.image)}" alt="Image for {_escape(title)}" class="popup-image">')
    if row.address:
        address = _escape(row.address)
        if row.postcode:
            address += f", {_escape(row.postcode)}"
        parts.append(f'<p class="address"><strong>Address:</strong> {address}</p>')
    if row.category:
        parts.append(f"<p><strong>Category:</strong> {_escape(row.category)}</p>")
    parts.append("</div>")
    return "".join(parts)


def build_marker(row: Row) -> Marker | None:
    lat = row.latitude
    lng = row.longitude
    if lat is None or lng is None:
        return None
    try:
        icon = row.icon
        return Marker(
            lat=lat,
            lng=lng,
            icon=icon,
            glyph=icon_glyph(icon),
            popup_html=build_popup_html(row),
            is_food_drink=row.is_food_drink,
            line=row.line,
        )
    except Exception as e:
        raise ParseRowError(row.line, f"{type(e).__name__}: {e}") from e


class MarkerRenderer:
    def __init__(
        self,
        layer: MarkerLayer,
        board: StatsBoard,
        diagnostics: DiagnosticLog | None = None,
    ) -> None:
        self.layer = layer
        self.board = board
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticLog()

    def render(self, rows: Iterable[Row]) -> RenderResult:
        rows = list(rows)
        logger.info(f"Starting marker creation with {len(rows)} rows")

        result = RenderResult()
        for row in rows:
            try:
                marker = build_marker(row)
            except ParseRowError as e:
                result.failed_lines.append(e.line)
                self.diagnostics.error(STAGE_RENDER, KIND_ROW_ERROR, f"Error creating marker: {e.reason}", line=e.line)
                continue
            if marker is None:
                result.skipped_lines.append(row.line)
                self.diagnostics.skip(STAGE_RENDER, "Invalid coordinates for row", line=row.line)
                continue

            result.markers.append(marker)
            if marker.is_food_drink:
                result.food_drink += 1
            if result.total % PROGRESS_EVERY == 0:
                logger.debug(f"Created {result.total} markers so far...")

        self.layer.replace(result.markers)
        logger.info(f"Marker creation complete. Total markers: {result.total}")
        logger.info(f"Food/Drink locations: {result.food_drink}")

        result.stats = report_stats(self.board, result.total, result.food_drink)
        return result
