from __future__ import annotations

import json
import logging
from pathlib import Path
import threading

from fastapi import FastAPI, Request
from fastapi.templating import Jinja2Templates

from venue_map.config import Settings, load_settings
from venue_map.diagnostics import DiagnosticLog
from venue_map.errors import LoadError
from venue_map.filter_index import filter_label, filter_placeholder
from venue_map.models import FilterState
from venue_map.renderer import MarkerLayer, RenderResult
from venue_map.session import MapSession
from venue_map.stats import STAT_ELEMENT_IDS, StatsBoard

logger = logging.getLogger(__name__)

PACKAGE_DIR = Path(__file__).resolve().parent
TEMPLATES = Jinja2Templates(directory=str(PACKAGE_DIR / "templates"))

SEARCH_PARAM = "search"


def create_app(source: str | Path | None = None, settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings()
    app = FastAPI(title="Venue Map Preview")
    app.state.settings = settings
    app.state.source = source if source is not None else settings.data_source
    app.state.diagnostics = DiagnosticLog()
    app.state.session = None
    app.state.session_lock = threading.Lock()

    def current_session() -> MapSession:
        with app.state.session_lock:
            if app.state.session is None:
                app.state.session = _load_session(app.state.source, settings, app.state.diagnostics)
            return app.state.session

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/")
    def home(request: Request):
        session = current_session()
        state = _state_from_request(session, request)
        result = _render(session, state)

        context = {
            "request": request,
            "settings": settings,
            "search": state.search,
            "filters": _filter_controls(session, state),
            "stats": result.stats.to_dict() if result.stats else {},
            "stat_ids": STAT_ELEMENT_IDS,
            "markers_json": _json_script_literal([marker.to_dict() for marker in result.markers]),
            "cluster_options_json": _json_script_literal(settings.cluster_options()),
            "search_param": SEARCH_PARAM,
        }
        return TEMPLATES.TemplateResponse(request=request, name="index.html", context=context)

    @app.get("/api/markers")
    def markers(request: Request) -> dict[str, object]:
        session = current_session()
        state = _state_from_request(session, request)
        result = _render(session, state)
        return {
            "state": state.to_dict(),
            "markers": [marker.to_dict() for marker in result.markers],
            "stats": result.stats.to_dict() if result.stats else {},
        }

    @app.get("/api/filters")
    def filters() -> dict[str, object]:
        session = current_session()
        return {"search": SEARCH_PARAM, "filters": session.index.to_dict()}

    return app


def _load_session(source: str | Path, settings: Settings, diagnostics: DiagnosticLog) -> MapSession:
    try:
        return MapSession.load(source, settings=settings, diagnostics=diagnostics)
    except LoadError:
        logger.exception(f"Error loading CSV from {source}; serving an empty map")
        return MapSession.empty(settings=settings, diagnostics=diagnostics)


def _state_from_request(session: MapSession, request: Request) -> FilterState:
    params = request.query_params
    selections = {key: value for key, value in params.items() if key != SEARCH_PARAM}
    return session.resolve(params.get(SEARCH_PARAM, ""), selections)


def _render(session: MapSession, state: FilterState) -> RenderResult:
    # One layer per request; requests may run on different worker threads.
    return session.apply(state, layer=MarkerLayer(), board=StatsBoard())


def _filter_controls(session: MapSession, state: FilterState) -> list[dict[str, object]]:
    selected = state.active_selections
    return [
        {
            "column": column,
            "label": filter_label(column),
            "placeholder": filter_placeholder(column),
            "options": session.index.options[column],
            "selected": selected.get(column, ""),
        }
        for column in session.index.columns
    ]


def _json_script_literal(value: object) -> str:
    return json.dumps(value, ensure_ascii=False).replace("</", "<\\/")


app = create_app(settings=load_settings(Path.cwd()))
