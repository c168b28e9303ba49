from venue_map.filtering import filter_rows, matches_search, matches_selections
from venue_map.loader import parse_rows
from venue_map.models import FilterState, Row
from tests.conftest import VENUES_CSV, make_row


def _geolocatable() -> list[Row]:
    _columns, rows = parse_rows(VENUES_CSV)
    return [row for row in rows if row.is_geolocatable]


def test_search_is_case_insensitive_substring_over_all_fields() -> None:
    row = make_row(name="Blue Bar", category="Bar")

    assert matches_search(row, "blue") is True
    assert matches_search(row, "BAR") is True
    assert matches_search(row, "blue bar bar") is True
    assert matches_search(row, "cafe") is False
    assert matches_search(row, "") is True


def test_column_selection_is_exact_and_case_sensitive() -> None:
    row = make_row(category="Bar")

    assert matches_selections(row, {"category": "Bar"}) is True
    assert matches_selections(row, {"category": "bar"}) is False
    assert matches_selections(row, {"category": "Ba"}) is False
    assert matches_selections(row, {"category": ""}) is True
    assert matches_selections(row, {}) is True


def test_category_filter_keeps_matching_rows_in_order() -> None:
    rows = [
        make_row(line=2, name="First", category="Bar"),
        make_row(line=3, name="Second", category="Food"),
        make_row(line=4, name="Third", category="Bar"),
    ]

    filtered = filter_rows(rows, FilterState(selections={"category": "Bar"}))

    assert [row["name"] for row in filtered] == ["First", "Third"]


def test_empty_state_returns_every_row_in_order() -> None:
    rows = _geolocatable()

    assert filter_rows(rows, FilterState()) == rows


def test_search_and_selection_must_both_match() -> None:
    rows = _geolocatable()

    filtered = filter_rows(rows, FilterState(search="bar", selections={"borough": "Brooklyn"}))

    assert [row["name"] for row in filtered] == ["Corner Bar"]


def test_any_state_yields_subset_of_unfiltered_rows() -> None:
    rows = _geolocatable()
    unfiltered = filter_rows(rows, FilterState())
    states = [
        FilterState(search="st"),
        FilterState(selections={"category": "Bar"}),
        FilterState(search="manhattan", selections={"categoriesPrimary.name": "Food"}),
        FilterState(search="no such venue"),
    ]

    for state in states:
        filtered = filter_rows(rows, state)
        assert all(row in unfiltered for row in filtered)


def test_filtering_is_deterministic_and_idempotent() -> None:
    rows = _geolocatable()
    state = FilterState(search="a", selections={"borough": "Manhattan"})

    first = filter_rows(rows, state)
    second = filter_rows(rows, state)

    assert first == second
    assert [row["name"] for row in first] == ["Blue Bar", "Pasta Place", "Museum of Things"]


def test_filtering_empty_input_returns_empty_list() -> None:
    assert filter_rows([], FilterState(search="bar")) == []
