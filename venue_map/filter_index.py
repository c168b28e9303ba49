from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from venue_map.models import (
    LATITUDE_COLUMN,
    LONGITUDE_COLUMN,
    NAME_COLUMN,
    TITLE_COLUMN,
    FilterState,
    Row,
)

EXCLUDED_FILTER_COLUMNS = frozenset({LATITUDE_COLUMN, LONGITUDE_COLUMN, NAME_COLUMN, TITLE_COLUMN})
MAX_FILTER_OPTIONS = 50


@dataclass(slots=True)
class FilterIndex:
    """Dropdown options per filterable column, built once from the full dataset."""

    columns: list[str] = field(default_factory=list)
    options: dict[str, list[str]] = field(default_factory=dict)

    def __contains__(self, column: object) -> bool:
        return column in self.options

    def resolve(self, search: str = "", selections: Mapping[str, str] | None = None) -> FilterState:
        kept = {
            column: value
            for column, value in (selections or {}).items()
            if column in self.options and value
        }
        return FilterState(search=search or "", selections=kept)

    def to_dict(self) -> list[dict[str, object]]:
        return [
            {
                "column": column,
                "label": filter_label(column),
                "placeholder": filter_placeholder(column),
                "options": list(self.options[column]),
            }
            for column in self.columns
        ]


def filter_label(column: str) -> str:
    return column.replace("_", " ").upper()


def filter_placeholder(column: str) -> str:
    return f"All {column}"


def distinct_values(rows: Iterable[Row], column: str) -> list[str]:
    return sorted({row.field(column) for row in rows if row.field(column)})


def build_filter_index(rows: Iterable[Row]) -> FilterIndex:
    rows = list(rows)

    seen: list[str] = []
    for row in rows:
        for column in row:
            if column not in seen:
                seen.append(column)

    index = FilterIndex()
    for column in seen:
        if column in EXCLUDED_FILTER_COLUMNS:
            continue
        values = distinct_values(rows, column)
        if 0 < len(values) < MAX_FILTER_OPTIONS:
            index.columns.append(column)
            index.options[column] = values
    return index
