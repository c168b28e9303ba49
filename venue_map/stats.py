from dataclasses import asdict, dataclass, field

TOTAL_MARKERS_ID = "total-markers"
FOOD_DRINK_MARKERS_ID = "food-drink-markers"
VISIBLE_MARKERS_ID = "visible-markers"

STAT_ELEMENT_IDS = (TOTAL_MARKERS_ID, FOOD_DRINK_MARKERS_ID, VISIBLE_MARKERS_ID)


@dataclass(frozen=True, slots=True)
class MarkerStats:
    total: int
    food_drink: int
    visible: int

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass(slots=True)
class StatsBoard:
    """The three numeric display surfaces, keyed by element id."""

    values: dict[str, int] = field(default_factory=lambda: {element_id: 0 for element_id in STAT_ELEMENT_IDS})

    def write(self, element_id: str, value: int) -> None:
        if element_id not in STAT_ELEMENT_IDS:
            raise KeyError(element_id)
        self.values[element_id] = value

    def read(self, element_id: str) -> int:
        return self.values[element_id]


def report_stats(board: StatsBoard, total: int, food_drink: int) -> MarkerStats:
    board.write(TOTAL_MARKERS_ID, total)
    board.write(FOOD_DRINK_MARKERS_ID, food_drink)
    board.write(VISIBLE_MARKERS_ID, total)
    return MarkerStats(total=total, food_drink=food_drink, visible=total)
