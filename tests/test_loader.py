import csv
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import requests

from venue_map.diagnostics import KIND_VALIDATION_SKIP, STAGE_LOAD, DiagnosticLog
from venue_map.errors import CsvFormatError, FetchError, LoadError
from venue_map.loader import fetch_text, load_dataset, parse_rows
from tests.conftest import SCENARIO_CSV, VENUES_CSV


def _response(status_code: int, text: str = "") -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    response.text = text
    return response


def test_parse_rows_uses_header_as_columns() -> None:
    columns, rows = parse_rows(VENUES_CSV)

    assert columns[:4] == ["name", "latitude", "longitude", "category"]
    assert len(rows) == 6
    assert rows[0]["name"] == "Blue Bar"
    assert rows[0]["urls.website"] == "https://bluebar.example"
    assert rows[0].line == 2
    assert rows[-1].line == 7


def test_parse_rows_fills_missing_trailing_fields_and_drops_extras() -> None:
    _columns, rows = parse_rows("name,latitude,longitude,category\nShort,1,2\nLong,1,2,Bar,extra\n")

    assert rows[0]["category"] == ""
    assert set(rows[0]) == {"name", "latitude", "longitude", "category"}
    assert dict(rows[1]) == {"name": "Long", "latitude": "1", "longitude": "2", "category": "Bar"}


def test_parse_rows_handles_bom_blank_lines_and_empty_text() -> None:
    columns, rows = parse_rows("\ufefflatitude,longitude\n\n1,2\n\n")

    assert columns == ["latitude", "longitude"]
    assert len(rows) == 1
    assert parse_rows("") == ([], [])


def test_parse_rows_handles_quoted_commas() -> None:
    _columns, rows = parse_rows('name,address\n"Blue Bar","1 Orchard St, New York"\n')

    assert rows[0]["address"] == "1 Orchard St, New York"


def test_load_dataset_partitions_geolocatable_rows(venues_csv: Path) -> None:
    diagnostics = DiagnosticLog()

    dataset = load_dataset(venues_csv, diagnostics=diagnostics)

    assert len(dataset.rows) == 6
    assert [row["name"] for row in dataset.geolocatable] == [
        "Blue Bar",
        "Pasta Place",
        "Museum of Things",
        "Corner Bar",
    ]
    assert [row["name"] for row in dataset.skipped] == ["Nowhere Cafe", "Broken Coordinates"]
    skips = diagnostics.by_kind(KIND_VALIDATION_SKIP)
    assert [event.line for event in skips] == [4, 7]
    assert diagnostics.by_stage(STAGE_LOAD) == skips


def test_load_dataset_scenario_yields_one_geolocatable_row(scenario_csv: Path) -> None:
    dataset = load_dataset(scenario_csv)

    assert len(dataset.geolocatable) == 1
    assert dataset.geolocatable[0].category == "Cafe"
    assert dataset.geolocatable[0].is_food_drink is True


def test_load_dataset_missing_file_raises_fetch_error(tmp_path: Path) -> None:
    with pytest.raises(FetchError) as excinfo:
        load_dataset(tmp_path / "missing.csv")

    assert isinstance(excinfo.value, LoadError)
    assert excinfo.value.source.endswith("missing.csv")


def test_fetch_text_reads_remote_source() -> None:
    with patch("venue_map.loader.requests.get", return_value=_response(200, SCENARIO_CSV)) as get:
        text = fetch_text("https://example.com/data.csv", timeout=5)

    assert text == SCENARIO_CSV
    get.assert_called_once_with("https://example.com/data.csv", timeout=5)


def test_fetch_text_raises_on_bad_status_without_retry() -> None:
    with patch("venue_map.loader.requests.get", return_value=_response(404)) as get:
        with pytest.raises(FetchError) as excinfo:
            fetch_text("https://example.com/data.csv")

    assert excinfo.value.status_code == 404
    assert "404" in str(excinfo.value)
    assert get.call_count == 1


def test_fetch_text_wraps_transport_failures() -> None:
    with patch("venue_map.loader.requests.get", side_effect=requests.ConnectionError("refused")) as get:
        with pytest.raises(FetchError) as excinfo:
            fetch_text("http://example.com/data.csv")

    assert excinfo.value.status_code is None
    assert "refused" in excinfo.value.reason
    assert get.call_count == 1


def test_load_dataset_accepts_fields_over_default_csv_limit(tmp_path: Path) -> None:
    image = "data:image/png;base64," + "A" * 200_000
    path = tmp_path / "large.csv"
    path.write_text(f"name,latitude,longitude,image\nInline,40.7,-74.0,{image}\n", encoding="utf-8")

    dataset = load_dataset(path)

    assert len(dataset.geolocatable) == 1
    assert dataset.geolocatable[0].image == image


def test_parse_rows_wraps_reader_errors_in_load_error() -> None:
    reader = MagicMock()
    reader.fieldnames = ["name"]
    reader.line_num = 3
    reader.__iter__.side_effect = csv.Error("field larger than field limit")

    with patch("venue_map.loader.csv.DictReader", return_value=reader):
        with pytest.raises(CsvFormatError) as excinfo:
            parse_rows("name\nx\n")

    assert isinstance(excinfo.value, LoadError)
    assert excinfo.value.line == 3
    assert "field larger" in str(excinfo.value)
