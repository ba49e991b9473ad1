"""Unit conversion between exact mass, volume and count groups.

Each group has a base unit and a ratio table into that base. Conversion is
only defined within a group; across groups (or for unrecognised units) the
converter returns the ``INCOMPATIBLE`` sentinel instead of raising.

This is deliberately separate from the approximate unit -> grams table in
``larder.logic.reporting.nutrition``: a "piece" has no universal mass.
"""
from __future__ import annotations
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

__all__ = [
    "UnitType", "INCOMPATIBLE", "normalize_unit", "unit_type", "are_compatible",
    "convert", "to_base_unit", "is_sufficient", "missing_quantity",
    "units_for_type", "compatible_units", "convert_or_raw",
]


class UnitType(str, Enum):
    MASS = "mass"
    VOLUME = "volume"
    COUNT = "count"
    UNKNOWN = "unknown"


class _Incompatible:
    """Sentinel returned by ``convert`` when no conversion exists."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "INCOMPATIBLE"


INCOMPATIBLE = _Incompatible()

UNIT_GROUPS: Dict[UnitType, Dict[str, object]] = {
    UnitType.MASS: {
        "base": "g",
        "ratios": {"g": 1, "kg": 1000, "oz": 28.3495, "lb": 453.592},
    },
    UnitType.VOLUME: {
        "base": "ml",
        "ratios": {"ml": 1, "l": 1000, "tsp": 4.92892, "tbsp": 14.7868, "cup": 236.588, "cups": 236.588},
    },
    UnitType.COUNT: {
        "base": "pieces",
        "ratios": {
            "pieces": 1, "piece": 1, "cloves": 1, "clove": 1, "stalks": 1, "stalk": 1,
            "heads": 1, "head": 1, "can": 1, "cans": 1, "slices": 1, "slice": 1,
        },
    },
}

# Common spelled-out / plural forms folded before lookup
UNIT_ALIASES: Dict[str, str] = {
    "gram": "g", "grams": "g", "kilogram": "kg", "kilograms": "kg",
    "ounce": "oz", "ounces": "oz", "pound": "lb", "pounds": "lb", "lbs": "lb",
    "tablespoon": "tbsp", "tablespoons": "tbsp", "teaspoon": "tsp", "teaspoons": "tsp",
    "liter": "l", "liters": "l", "litre": "l", "litres": "l",
    "milliliter": "ml", "milliliters": "ml", "millilitre": "ml", "millilitres": "ml",
    "pcs": "pieces",
}

# Display order for unit pickers (no plural duplicates)
MAIN_UNITS: Tuple[str, ...] = ("g", "kg", "oz", "lb", "ml", "l", "tsp", "tbsp", "cup", "pieces", "cloves", "stalks", "can")

_UNIT_TYPE_MAP: Dict[str, UnitType] = {
    unit: group_type
    for group_type, group in UNIT_GROUPS.items()
    for unit in group["ratios"]
}


def normalize_unit(unit: Optional[str]) -> Optional[str]:
    """Lower-case, trim and fold aliases; ``None`` for empty input."""
    if not unit or not isinstance(unit, str):
        return None
    normalized = unit.strip().lower()
    if not normalized:
        return None
    return UNIT_ALIASES.get(normalized, normalized)


def unit_type(unit: Optional[str]) -> UnitType:
    normalized = normalize_unit(unit)
    if normalized is None:
        return UnitType.UNKNOWN
    return _UNIT_TYPE_MAP.get(normalized, UnitType.UNKNOWN)


def are_compatible(unit_a: Optional[str], unit_b: Optional[str]) -> bool:
    """True iff both units resolve to the same known group."""
    type_a = unit_type(unit_a)
    return type_a is not UnitType.UNKNOWN and type_a is unit_type(unit_b)


def _ratio(unit: str) -> Tuple[UnitType, float]:
    group_type = _UNIT_TYPE_MAP[unit]
    return group_type, float(UNIT_GROUPS[group_type]["ratios"][unit])


def convert(quantity: float, from_unit: Optional[str], to_unit: Optional[str]) -> Union[float, _Incompatible]:
    """Convert through the shared base unit, rounded to 3 decimals."""
    source = normalize_unit(from_unit)
    target = normalize_unit(to_unit)
    if source not in _UNIT_TYPE_MAP or target not in _UNIT_TYPE_MAP:
        return INCOMPATIBLE
    source_type, source_ratio = _ratio(source)
    target_type, target_ratio = _ratio(target)
    if source_type is not target_type:
        return INCOMPATIBLE
    return round(quantity * source_ratio / target_ratio, 3)


def to_base_unit(quantity: float, unit: Optional[str]) -> Optional[Tuple[float, str]]:
    normalized = normalize_unit(unit)
    if normalized not in _UNIT_TYPE_MAP:
        return None
    group_type, ratio = _ratio(normalized)
    return quantity * ratio, UNIT_GROUPS[group_type]["base"]


def is_sufficient(have_qty: float, have_unit: Optional[str], need_qty: float, need_unit: Optional[str]) -> bool:
    """Whether ``have`` covers ``need``.

    Incompatible or unknown units are assumed sufficient: the caller already
    knows the ingredient is on hand and an unmappable unit must not block it.
    """
    if not are_compatible(have_unit, need_unit):
        return True
    converted = convert(have_qty, have_unit, need_unit)
    if converted is INCOMPATIBLE:
        return True
    return converted >= need_qty


def missing_quantity(have_qty: float, have_unit: Optional[str], need_qty: float,
                     need_unit: Optional[str]) -> Optional[Dict[str, object]]:
    """Shortfall expressed in ``need_unit``; None when sufficient or not comparable."""
    if not are_compatible(have_unit, need_unit):
        return None
    converted = convert(have_qty, have_unit, need_unit)
    if converted is INCOMPATIBLE or converted >= need_qty:
        return None
    return {"missing": round(need_qty - converted, 2), "unit": need_unit}


def units_for_type(group_type: UnitType) -> List[str]:
    return [u for u in MAIN_UNITS if _UNIT_TYPE_MAP.get(u) is group_type]


def compatible_units(unit: Optional[str]) -> List[str]:
    group_type = unit_type(unit)
    if group_type is UnitType.UNKNOWN:
        return [unit] if unit else []
    return units_for_type(group_type)


def convert_or_raw(quantity: float, from_unit: Optional[str], to_unit: Optional[str]) -> float:
    """``convert`` that falls back to the unconverted number.

    Used where quantities must be summed even when a recipe and the pantry
    disagree on unit type; the raw number is the best available estimate.
    """
    if not from_unit or not to_unit or normalize_unit(from_unit) == normalize_unit(to_unit):
        return quantity
    converted = convert(quantity, from_unit, to_unit)
    return quantity if converted is INCOMPATIBLE else converted
