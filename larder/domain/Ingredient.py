"""Ingredient reference data: catalog records, categories and per-100g nutrition."""
from typing import Dict, List, Optional
from larder.utilities.constants import MACROS


class NutritionFacts:
    def __init__(self, calories: float = 0, protein: float = 0, carbs: float = 0,
                 fat: float = 0, fiber: float = 0):
        self.calories = calories
        self.protein = protein
        self.carbs = carbs
        self.fat = fat
        self.fiber = fiber

    def get(self, macro: str) -> float:
        return getattr(self, macro, 0) or 0

    def __str__(self) -> str:
        return (f"{self.calories} kcal, P {self.protein}g, C {self.carbs}g, "
                f"F {self.fat}g, Fib {self.fiber}g")

    __repr__ = __str__

    @staticmethod
    def from_dict(data) -> Optional["NutritionFacts"]:
        '''Accepts either {"per100g": {...}} or the flat macro mapping. None if no data.'''
        if not isinstance(data, dict):
            return None
        values = data.get("per100g", data)
        if not isinstance(values, dict) or not any(k in values for k in MACROS):
            return None
        parsed = {}
        for macro in MACROS:
            try:
                parsed[macro] = float(values.get(macro) or 0)
            except (TypeError, ValueError):
                parsed[macro] = 0.0
        return NutritionFacts(**parsed)

    def to_dict(self) -> Dict[str, float]:
        return {macro: self.get(macro) for macro in MACROS}


class Category:
    def __init__(self, id: str, name: str = ""):
        self.id = id
        self.name = name or id

    @staticmethod
    def from_dict(data) -> "Category":
        d = dict(data) if isinstance(data, dict) else {}
        return Category(str(d.get("id", "")), d.get("name", ""))

    def to_dict(self):
        return {"id": self.id, "name": self.name}


class IngredientRecord:
    """Immutable catalog entry. ``nutrition`` is per 100 g, or None when unknown."""

    def __init__(self, id: str, name: str, category: str = "other", subcategory: str = "",
                 default_unit: str = "pieces", aliases: Optional[List[str]] = None,
                 search_terms: Optional[List[str]] = None, nutrition: Optional[NutritionFacts] = None):
        self.id = id
        self.name = name
        self.category = category or "other"
        self.subcategory = subcategory or ""
        self.default_unit = default_unit or "pieces"
        self.aliases = tuple(aliases or ())
        self.search_terms = tuple(search_terms or ())
        self.nutrition = nutrition

    @property
    def has_nutrition(self) -> bool:
        return self.nutrition is not None

    def __str__(self) -> str:
        return f"{self.name} ({self.id}) - {self.category}/{self.subcategory or '-'} - {self.default_unit}"

    __repr__ = __str__

    @staticmethod
    def from_dict(data) -> "IngredientRecord":
        '''Creates a record from the catalog JSON shape. Ignores unknown keys.'''
        d = dict(data) if isinstance(data, dict) else {}
        return IngredientRecord(
            id=str(d.get("id", "")),
            name=d.get("name", "") or "",
            category=d.get("category", "other"),
            subcategory=d.get("subcategory", ""),
            default_unit=d.get("defaultUnit", d.get("default_unit", "pieces")),
            aliases=[a for a in d.get("aliases", []) or [] if isinstance(a, str)],
            search_terms=[t for t in d.get("searchTerms", d.get("search_terms", [])) or [] if isinstance(t, str)],
            nutrition=NutritionFacts.from_dict(d.get("nutrition")),
        )

    def to_dict(self):
        data = {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "subcategory": self.subcategory,
            "defaultUnit": self.default_unit,
            "aliases": list(self.aliases),
            "searchTerms": list(self.search_terms),
        }
        if self.nutrition is not None:
            data["nutrition"] = {"per100g": self.nutrition.to_dict()}
        return data
