from __future__ import annotations

import logging
from pathlib import Path

from venue_map.config import Settings
from venue_map.diagnostics import KIND_FETCH_ERROR, STAGE_LOAD, DiagnosticLog
from venue_map.errors import LoadError
from venue_map.filter_index import FilterIndex, build_filter_index
from venue_map.filtering import filter_rows
from venue_map.loader import load_dataset
from venue_map.models import Dataset, FilterState, Row
from venue_map.renderer import MarkerLayer, MarkerRenderer, RenderResult
from venue_map.stats import StatsBoard

logger = logging.getLogger(__name__)


class MapSession:
    """Owns one loaded dataset, its filter index and the live marker layer.

    The dataset and index never change after construction; every call to
    ``apply`` filters the full geolocatable set again and re-renders it.
    """

    def __init__(
        self,
        dataset: Dataset,
        settings: Settings | None = None,
        diagnostics: DiagnosticLog | None = None,
    ) -> None:
        self.dataset = dataset
        self.settings = settings or Settings()
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticLog()
        self.index: FilterIndex = build_filter_index(dataset.geolocatable)
        self.layer = MarkerLayer()
        self.board = StatsBoard()
        self.state = FilterState()

    @classmethod
    def load(
        cls,
        source: str | Path | None = None,
        settings: Settings | None = None,
        diagnostics: DiagnosticLog | None = None,
    ) -> MapSession:
        settings = settings or Settings()
        diagnostics = diagnostics if diagnostics is not None else DiagnosticLog()
        source = source if source is not None else settings.data_source
        try:
            dataset = load_dataset(source, diagnostics=diagnostics, timeout=settings.fetch_timeout)
        except LoadError as e:
            diagnostics.error(STAGE_LOAD, KIND_FETCH_ERROR, f"Error loading CSV: {e}")
            raise
        return cls(dataset, settings=settings, diagnostics=diagnostics)

    @classmethod
    def empty(cls, settings: Settings | None = None, diagnostics: DiagnosticLog | None = None) -> MapSession:
        settings = settings or Settings()
        return cls(Dataset(source=settings.data_source), settings=settings, diagnostics=diagnostics)

    @property
    def rows(self) -> list[Row]:
        return self.dataset.geolocatable

    def resolve(self, search: str = "", selections: dict[str, str] | None = None) -> FilterState:
        return self.index.resolve(search, selections)

    def apply(
        self,
        state: FilterState | None = None,
        layer: MarkerLayer | None = None,
        board: StatsBoard | None = None,
    ) -> RenderResult:
        state = state or FilterState()
        owned = layer is None and board is None
        renderer = MarkerRenderer(
            layer if layer is not None else self.layer,
            board if board is not None else self.board,
            self.diagnostics,
        )
        result = renderer.render(filter_rows(self.rows, state))
        if owned:
            self.state = state
        return result

    def reset(self) -> RenderResult:
        return self.apply(FilterState())
