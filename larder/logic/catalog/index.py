"""Ingredient catalog index: id lookup and ranked free-text search.

Built once from the catalog provider's ``{categories, ingredients}`` payload.
Search runs a substring scan over every flattened term (name, aliases,
search terms) and ranks hits:

    exact term        100
    term prefix        75
    substring          50
    canonical name    +10  (so name hits beat alias hits)
"""
from __future__ import annotations
import re
from typing import Any, Dict, Iterable, List, Optional, Tuple

from larder.domain.Ingredient import Category, IngredientRecord
from larder.utilities.constants import (
    SEARCH_EXACT_SCORE, SEARCH_PREFIX_SCORE, SEARCH_SUBSTRING_SCORE,
    SEARCH_NAME_BONUS, SEARCH_MIN_QUERY_LENGTH,
)

__all__ = ["CatalogIndex", "normalize_name"]

_DESCRIPTOR_SUFFIX = re.compile(r"\s*(fresh|dried|frozen|canned|chopped|diced|sliced|minced|ground)$", re.IGNORECASE)


def normalize_name(name: str) -> str:
    """Fold free text towards a catalog term (descriptor suffix and plural stripped)."""
    if not isinstance(name, str):
        return ""
    n = re.sub(r"\s+", " ", name.strip().lower())
    n = _DESCRIPTOR_SUFFIX.sub("", n)
    # simple plural handling, applied in sequence
    n = re.sub(r"ies$", "y", n)
    n = re.sub(r"es$", "", n)
    n = re.sub(r"s$", "", n)
    return n


class CatalogIndex:
    def __init__(self, ingredients: Iterable[IngredientRecord] = (), categories: Iterable[Category] = ()):
        self._categories: List[Category] = list(categories)
        self._ingredients: List[IngredientRecord] = []
        self._by_id: Dict[str, IngredientRecord] = {}
        self._terms: List[Tuple[str, str]] = []  # (term, ingredient_id)
        for ingredient in ingredients:
            self._add(ingredient)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "CatalogIndex":
        d = data if isinstance(data, dict) else {}
        return cls(
            ingredients=[IngredientRecord.from_dict(i) for i in d.get("ingredients", []) or []],
            categories=[Category.from_dict(c) for c in d.get("categories", []) or []],
        )

    def _add(self, ingredient: IngredientRecord):
        if not ingredient.id:
            return
        self._ingredients.append(ingredient)
        self._by_id[ingredient.id] = ingredient
        terms = [ingredient.name, *ingredient.aliases, *ingredient.search_terms]
        for term in terms:
            term = (term or "").strip().lower()
            if term:
                self._terms.append((term, ingredient.id))

    # --- Lookup ------------------------------------------------------------
    def get(self, ingredient_id: str) -> Optional[IngredientRecord]:
        return self._by_id.get(ingredient_id)

    def __contains__(self, ingredient_id: str) -> bool:
        return ingredient_id in self._by_id

    def __len__(self) -> int:
        return len(self._ingredients)

    def all(self) -> List[IngredientRecord]:
        return list(self._ingredients)

    def ingredient_map(self) -> Dict[str, IngredientRecord]:
        return dict(self._by_id)

    def categories(self) -> List[Category]:
        return list(self._categories)

    def by_category(self, category_id: str) -> List[IngredientRecord]:
        return [i for i in self._ingredients if i.category == category_id]

    def by_subcategory(self, category_id: str, subcategory: str) -> List[IngredientRecord]:
        return [i for i in self._ingredients if i.category == category_id and i.subcategory == subcategory]

    # --- Search ------------------------------------------------------------
    def search(self, query: str, limit: int = 10) -> List[IngredientRecord]:
        return [record for record, _ in self.search_scored(query, limit)]

    def search_scored(self, query: str, limit: int = 10) -> List[Tuple[IngredientRecord, int]]:
        if not isinstance(query, str):
            return []
        needle = query.strip().lower()
        if len(needle) < SEARCH_MIN_QUERY_LENGTH or limit <= 0:
            return []

        best: Dict[str, int] = {}
        for term, ingredient_id in self._terms:
            if needle not in term:
                continue
            if term == needle:
                score = SEARCH_EXACT_SCORE
            elif term.startswith(needle):
                score = SEARCH_PREFIX_SCORE
            else:
                score = SEARCH_SUBSTRING_SCORE
            if term == self._by_id[ingredient_id].name.lower():
                score += SEARCH_NAME_BONUS
            if best.get(ingredient_id, -1) < score:
                best[ingredient_id] = score

        # sorted() is stable, so equal scores keep catalog order
        ranked = sorted(best.items(), key=lambda kv: -kv[1])
        return [(self._by_id[i], score) for i, score in ranked[:limit]]

    def find_by_name(self, text: str) -> Optional[IngredientRecord]:
        """Fuzzy lookup of free text (e.g. "Chopped Tomatoes") to a single record."""
        hits = self.search(normalize_name(text), 1)
        return hits[0] if hits else None
