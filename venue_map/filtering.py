from collections.abc import Iterable, Mapping

from venue_map.models import FilterState, Row


def matches_search(row: Row, search: str) -> bool:
    if not search:
        return True
    return search.lower() in row.search_text


def matches_selections(row: Row, selections: Mapping[str, str]) -> bool:
    return all(row.field(column) == value for column, value in selections.items() if value)


def filter_rows(rows: Iterable[Row], state: FilterState) -> list[Row]:
    """Return the rows passing both the search and the column selections, in input order."""
    selections = state.active_selections
    return [row for row in rows if matches_search(row, state.search) and matches_selections(row, selections)]
