"""
Dataset loader for the venue map.

Fetches the CSV source (local path or http/https URL), parses it with the
header row as column names, and splits the rows into geolocatable rows and
rows that are skipped for missing or unparseable coordinates.
"""

import csv
import io
import logging
from pathlib import Path

import requests

from venue_map.config import DEFAULT_FETCH_TIMEOUT
from venue_map.diagnostics import STAGE_LOAD, DiagnosticLog
from venue_map.errors import CsvFormatError, FetchError
from venue_map.models import Dataset, Row

logger = logging.getLogger(__name__)

REMOTE_SCHEMES = ("http://", "https://")
PREVIEW_CHARS = 500
# Largest limit the C reader accepts on every platform; the default is 128 KiB.
CSV_FIELD_SIZE_LIMIT = 2**31 - 1


def is_remote(source: str | Path) -> bool:
    return str(source).lower().startswith(REMOTE_SCHEMES)


def fetch_text(source: str | Path, timeout: float = DEFAULT_FETCH_TIMEOUT) -> str:
    """Return the raw text at ``source``. Raises FetchError; never retries."""
    if is_remote(source):
        url = str(source)
        try:
            response = requests.get(url, timeout=timeout)
        except requests.RequestException as e:
            raise FetchError(url, str(e)) from e
        logger.info(f"CSV fetch response status: {response.status_code}")
        if not response.ok:
            raise FetchError(url, f"HTTP error! status: {response.status_code}", response.status_code)
        return response.text

    path = Path(source)
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FetchError(str(path), str(e)) from e


def parse_rows(text: str) -> tuple[list[str], list[Row]]:
    """Parse header-delimited CSV text into column names and rows.

    Short records get empty strings for their missing trailing fields;
    fields past the header width are dropped. Raises CsvFormatError when
    the reader gives up on the text.
    """
    if text.startswith("\ufeff"):
        text = text[1:]

    if csv.field_size_limit() < CSV_FIELD_SIZE_LIMIT:
        csv.field_size_limit(CSV_FIELD_SIZE_LIMIT)

    reader = csv.DictReader(io.StringIO(text), restval="")
    rows: list[Row] = []
    try:
        columns = list(reader.fieldnames or [])
        for record in reader:
            values = {column: record.get(column) or "" for column in columns}
            rows.append(Row(values, line=reader.line_num))
    except csv.Error as e:
        raise CsvFormatError(str(e), line=reader.line_num) from e
    return columns, rows


def load_dataset(
    source: str | Path,
    diagnostics: DiagnosticLog | None = None,
    timeout: float = DEFAULT_FETCH_TIMEOUT,
) -> Dataset:
    diagnostics = diagnostics if diagnostics is not None else DiagnosticLog()

    logger.info(f"Starting CSV load from {source}")
    text = fetch_text(source, timeout=timeout)
    logger.debug(f"CSV text loaded, first {PREVIEW_CHARS} chars: {text[:PREVIEW_CHARS]!r}")

    columns, rows = parse_rows(text)
    logger.info(f"CSV parsed, number of rows: {len(rows)}")
    logger.info(f"CSV headers: {columns}")

    geolocatable: list[Row] = []
    skipped: list[Row] = []
    for row in rows:
        if row.is_geolocatable:
            geolocatable.append(row)
            continue
        skipped.append(row)
        diagnostics.skip(STAGE_LOAD, "Row missing coordinates", line=row.line)

    logger.info(f"Rows with valid coordinates: {len(geolocatable)}")
    return Dataset(
        source=str(source),
        columns=columns,
        rows=rows,
        geolocatable=geolocatable,
        skipped=skipped,
    )
