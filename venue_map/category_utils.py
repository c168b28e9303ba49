from __future__ import annotations

FOOD_DRINK_KEYWORDS = ("food", "restaurant", "cafe", "bar")

ICON_DRINK = "drink"
ICON_FOOD = "food"
ICON_DEFAULT = "default"

ICON_BY_PRIMARY_CATEGORY = {
    "Drinks": ICON_DRINK,
    "Food": ICON_FOOD,
}

ICON_GLYPHS = {
    ICON_DRINK: "\U0001F37A",
    ICON_FOOD: "\U0001F35D",
    ICON_DEFAULT: "\U0001F4CD",
}


def is_food_drink(category: str | None) -> bool:
    if not category:
        return False
    lowered = category.lower()
    return any(keyword in lowered for keyword in FOOD_DRINK_KEYWORDS)


def icon_for(primary_category: str | None) -> str:
    if primary_category is None:
        return ICON_DEFAULT
    return ICON_BY_PRIMARY_CATEGORY.get(primary_category, ICON_DEFAULT)


def icon_glyph(icon: str) -> str:
    return ICON_GLYPHS.get(icon, ICON_GLYPHS[ICON_DEFAULT])
