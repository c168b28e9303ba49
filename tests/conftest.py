"""Shared CSV fixtures for the venue map tests."""

from pathlib import Path

import pytest

from venue_map.models import Row


def make_row(line: int = 2, **values: str) -> Row:
    """Helper to build a Row; dotted column names go through ``values`` dicts."""
    return Row(values, line=line)


# ---------------------------------------------------------------------------
# Mock CSV: venues
# ---------------------------------------------------------------------------

VENUES_CSV = """name,latitude,longitude,category,categoriesPrimary.name,subcategoriesPrimary.name,urls.website,image,address,postcode,borough
Blue Bar,40.7210,-73.9880,Bar,Drinks,Cocktail Bar,https://bluebar.example,https://img.example/blue.jpg,1 Orchard St,10002,Manhattan
Pasta Place,40.7300,-73.9950,Restaurant,Food,Italian,,,22 Bleecker St,,Manhattan
Nowhere Cafe,,-73.9000,Cafe,Food,,,,,,Queens
Museum of Things,40.7794,-73.9632,Museum,Arts,,https://museum.example,,1000 5th Ave,10028,Manhattan
Corner Bar,40.6782,-73.9442,Bar,Drinks,Dive Bar,,,5 Atlantic Ave,11217,Brooklyn
Broken Coordinates,bad,-74.0000,Food,Food,,,,,,Brooklyn
"""

SCENARIO_CSV = """latitude,longitude,category
40.7,-74.0,Cafe
bad,-74.0,Food
"""


@pytest.fixture
def venues_csv(tmp_path: Path) -> Path:
    path = tmp_path / "data.csv"
    path.write_text(VENUES_CSV, encoding="utf-8")
    return path


@pytest.fixture
def scenario_csv(tmp_path: Path) -> Path:
    path = tmp_path / "scenario.csv"
    path.write_text(SCENARIO_CSV, encoding="utf-8")
    return path
