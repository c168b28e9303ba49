from argparse import ArgumentParser, ArgumentTypeError
import logging
from pathlib import Path

import uvicorn

from venue_map.config import Settings, load_settings
from venue_map.errors import LoadError
from venue_map.session import MapSession
from venue_map.site_builder import build_static_map
from venue_map.web_app import create_app

BASE_DIR = Path.cwd()
SITE_FILE = BASE_DIR / "site" / "index.html"

logger = logging.getLogger(__name__)


def _filter_arg(value: str) -> tuple[str, str]:
    if "=" not in value:
        raise ArgumentTypeError(f"expected COLUMN=VALUE, got {value!r}")
    column, selected = value.split("=", 1)
    column = column.strip()
    if not column:
        raise ArgumentTypeError(f"missing column name in {value!r}")
    return column, selected


def build_site(
    settings: Settings,
    output_path: Path = SITE_FILE,
    source: str | None = None,
    search: str = "",
    selections: dict[str, str] | None = None,
) -> MapSession:
    session = MapSession.load(source, settings=settings)
    state = session.resolve(search, selections)
    for column in sorted(set(selections or {}) - set(session.index.columns)):
        logger.warning(f"Ignoring filter on {column!r}: not a filterable column")
    build_static_map(session, output_path, state)
    return session


def summarize(session: MapSession) -> list[str]:
    dataset = session.dataset
    result = session.reset()
    lines = [
        f"Source: {dataset.source}",
        f"Rows parsed: {len(dataset.rows)}",
        f"Rows with valid coordinates: {len(dataset.geolocatable)}",
        f"Rows skipped: {len(dataset.skipped)}",
        f"Food/Drink locations: {result.food_drink}",
    ]
    if session.index.columns:
        lines.append("Filters:")
        for column in session.index.columns:
            lines.append(f"  {column} ({len(session.index.options[column])} options)")
    else:
        lines.append("Filters: none")
    return lines


def main(argv: list[str] | None = None) -> int:
    parser = ArgumentParser(description="Venue map: clustered, filterable map of a CSV point dataset")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    build = sub.add_parser("build-site", help="Write a static clustered map for a filter state")
    build.add_argument("--source", default=None, help="CSV path or URL (default: VENUE_MAP_DATA_SOURCE or data.csv)")
    build.add_argument("--output", type=Path, default=SITE_FILE, help="Output HTML file (default: site/index.html)")
    build.add_argument("--search", default="", help="Free-text search applied to all fields")
    build.add_argument(
        "--filter",
        dest="filters",
        action="append",
        type=_filter_arg,
        default=[],
        metavar="COLUMN=VALUE",
        help="Exact-match column filter; may be repeated",
    )

    summary = sub.add_parser("summary", help="Print dataset counts and available filters")
    summary.add_argument("--source", default=None, help="CSV path or URL")

    serve = sub.add_parser("serve", help="Run the interactive preview app")
    serve.add_argument("--source", default=None, help="CSV path or URL")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
    settings = load_settings(BASE_DIR)

    if args.command == "build-site":
        try:
            session = build_site(
                settings,
                output_path=args.output,
                source=args.source,
                search=args.search,
                selections=dict(args.filters),
            )
        except LoadError as e:
            logger.error(f"Error loading CSV: {e}")
            return 1
        print(f"Site built at {args.output} from {session.dataset.source}")
        return 0
    if args.command == "summary":
        try:
            session = MapSession.load(args.source, settings=settings)
        except LoadError as e:
            logger.error(f"Error loading CSV: {e}")
            return 1
        print("\n".join(summarize(session)))
        return 0
    if args.command == "serve":
        uvicorn.run(create_app(args.source, settings=settings), host=args.host, port=args.port, log_level="info")
        return 0
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
