from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
import math
from types import MappingProxyType

from venue_map.category_utils import icon_for, is_food_drink

LATITUDE_COLUMN = "latitude"
LONGITUDE_COLUMN = "longitude"
NAME_COLUMN = "name"
TITLE_COLUMN = "title"
CATEGORY_COLUMN = "category"
PRIMARY_CATEGORY_COLUMN = "categoriesPrimary.name"
SUBCATEGORY_COLUMN = "subcategoriesPrimary.name"
WEBSITE_COLUMN = "urls.website"
IMAGE_COLUMN = "image"
ADDRESS_COLUMN = "address"
POSTCODE_COLUMN = "postcode"


def parse_coordinate(value: object) -> float | None:
    if value is None:
        return None
    text = str(value).strip()
    # float() also accepts digit-group underscores; a CSV coordinate never has them.
    if not text or "_" in text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return number


@dataclass(frozen=True, slots=True, eq=False)
class Row(Mapping[str, str]):
    """One record of the source table.

    Values are kept exactly as the CSV parser delivered them; everything else
    (coordinates, icon, classification) is derived on access.
    """

    data: Mapping[str, str]
    line: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", MappingProxyType(dict(self.data)))

    def __getitem__(self, key: str) -> str:
        return self.data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.data)

    def __len__(self) -> int:
        return len(self.data)

    def field(self, column: str) -> str:
        value = self.data.get(column)
        return "" if value is None else value

    @property
    def latitude(self) -> float | None:
        return parse_coordinate(self.data.get(LATITUDE_COLUMN))

    @property
    def longitude(self) -> float | None:
        return parse_coordinate(self.data.get(LONGITUDE_COLUMN))

    @property
    def is_geolocatable(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    @property
    def category(self) -> str:
        return self.field(CATEGORY_COLUMN)

    @property
    def is_food_drink(self) -> bool:
        return is_food_drink(self.category)

    @property
    def icon(self) -> str:
        return icon_for(self.data.get(PRIMARY_CATEGORY_COLUMN))

    @property
    def title(self) -> str:
        return self.field(NAME_COLUMN) or self.field(TITLE_COLUMN)

    @property
    def subcategory(self) -> str:
        return self.field(SUBCATEGORY_COLUMN)

    @property
    def website(self) -> str:
        return self.field(WEBSITE_COLUMN)

    @property
    def image(self) -> str:
        return self.field(IMAGE_COLUMN)

    @property
    def address(self) -> str:
        return self.field(ADDRESS_COLUMN)

    @property
    def postcode(self) -> str:
        return self.field(POSTCODE_COLUMN)

    @property
    def search_text(self) -> str:
        return " ".join(str(value) for value in self.data.values()).lower()


@dataclass(slots=True)
class Dataset:
    source: str
    columns: list[str] = field(default_factory=list)
    rows: list[Row] = field(default_factory=list)
    geolocatable: list[Row] = field(default_factory=list)
    skipped: list[Row] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class FilterState:
    search: str = ""
    selections: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "selections", MappingProxyType(dict(self.selections)))

    @property
    def active_selections(self) -> dict[str, str]:
        return {column: value for column, value in self.selections.items() if value}

    @property
    def is_empty(self) -> bool:
        return not self.search and not self.active_selections

    def to_dict(self) -> dict[str, object]:
        return {"search": self.search, "selections": self.active_selections}
