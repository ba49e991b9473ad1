from typing import Final

EXPORT_VERSION: Final[str] = "1.0.0"
DATE_FORMAT: Final[str] = "%Y-%m-%d"

# Tracked macros, in display order
MACROS: Final[tuple[str, ...]] = ("calories", "protein", "carbs", "fat", "fiber")
GOAL_LIMIT: Final[str] = "limit"
GOAL_MINIMUM: Final[str] = "minimum"
GOAL_TYPES: Final[tuple[str, ...]] = (GOAL_LIMIT, GOAL_MINIMUM)
NEAR_GOAL_PERCENT: Final[int] = 80

MEAL_TYPES: Final[tuple[str, ...]] = ("breakfast", "lunch", "dinner", "snack")
MEAL_STATUS_PLANNED: Final[str] = "planned"
MEAL_STATUS_EATEN: Final[str] = "eaten"
MEAL_STATUS_DISMISSED: Final[str] = "dismissed"
MEAL_STATUSES: Final[tuple[str, ...]] = (MEAL_STATUS_PLANNED, MEAL_STATUS_EATEN, MEAL_STATUS_DISMISSED)

STORAGE_LOCATIONS: Final[tuple[str, ...]] = ("pantry", "fridge", "freezer")
DEFAULT_STORAGE: Final[str] = "pantry"

# Match scoring
REQUIRED_MATCH_POINTS: Final[int] = 10
OPTIONAL_MATCH_POINTS: Final[int] = 3
PARTIAL_MATCH_PERCENT: Final[int] = 70
MINIMAL_MATCH_PERCENT: Final[int] = 50
MATCH_TYPE_ORDER: Final[dict[str, int]] = {"full": 0, "partial": 1, "minimal": 2, "none": 3}

# Catalog search scoring
SEARCH_EXACT_SCORE: Final[int] = 100
SEARCH_PREFIX_SCORE: Final[int] = 75
SEARCH_SUBSTRING_SCORE: Final[int] = 50
SEARCH_NAME_BONUS: Final[int] = 10
SEARCH_MIN_QUERY_LENGTH: Final[int] = 2

# Approximate gram weight of cooking units, used only for nutrition estimates
UNIT_TO_GRAMS: Final[dict[str, float]] = {
    "g": 1, "kg": 1000, "oz": 28.35, "lb": 453.6,
    "ml": 1, "l": 1000,  # water-like density
    "cup": 240, "tbsp": 15, "tsp": 5,
    "piece": 100, "clove": 5, "slice": 30, "bunch": 100, "sprig": 5,
    "head": 500, "stalk": 50, "can": 400, "jar": 350, "packet": 50,
    "sheet": 5, "link": 75, "fillet": 150, "breast": 200, "thigh": 120,
    "whole": 1000, "serving": 100,
}
DEFAULT_UNIT_GRAMS: Final[float] = 100
