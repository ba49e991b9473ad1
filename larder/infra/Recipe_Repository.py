import json
import logging
from typing import Dict, Iterable, List, Optional
from larder.domain.Recipe import RecipeRecord
from larder.utilities.config import RECIPES_FILE

logger = logging.getLogger(__name__)


def reading_from_recipes(path=RECIPES_FILE) -> List[RecipeRecord]:
    """Read recipes ({recipes: [...]} or a bare list) from JSON with graceful error handling."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            recipes_data = json.load(f)
        if isinstance(recipes_data, dict):
            recipes_data = recipes_data.get('recipes', [])
        recipes = [RecipeRecord.from_dict(entry) for entry in recipes_data or []]
        return [r for r in recipes if r.id]
    except FileNotFoundError:
        logger.warning(f"Recipes file not found: {path}. Returning empty list.")
        return []
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in recipes file: {e}")
        return []


class RecipeRepository:
    """Read-only recipe lookup with the browse filters of the recipe list."""

    def __init__(self, recipes: Iterable[RecipeRecord] = ()):
        self._recipes: List[RecipeRecord] = list(recipes)
        self._by_id: Dict[str, RecipeRecord] = {r.id: r for r in self._recipes}

    @classmethod
    def from_file(cls, path=RECIPES_FILE) -> "RecipeRepository":
        return cls(reading_from_recipes(path))

    def get(self, recipe_id: str) -> Optional[RecipeRecord]:
        return self._by_id.get(recipe_id)

    def all(self) -> List[RecipeRecord]:
        return list(self._recipes)

    def __iter__(self):
        return iter(self._recipes)

    def __len__(self) -> int:
        return len(self._recipes)

    def search(self, query: Optional[str], recipes: Optional[Iterable[RecipeRecord]] = None) -> List[RecipeRecord]:
        """Substring match on title, description, cuisine and ingredient names.

        Queries shorter than 2 characters do not filter.
        """
        pool = list(recipes) if recipes is not None else self.all()
        if not query or len(query.strip()) < 2:
            return pool
        needle = query.strip().lower()
        return [
            r for r in pool
            if needle in r.title.lower()
            or needle in r.description.lower()
            or needle in r.cuisine.lower()
            or any(needle in (i.name or '').lower() for i in r.ingredients)
        ]

    def cuisines(self) -> List[str]:
        return sorted({r.cuisine for r in self._recipes if r.cuisine})

    def filter(self, search: Optional[str] = None, cuisine: Optional[str] = None,
               difficulty: Optional[str] = None, meal_type: Optional[str] = None) -> List[RecipeRecord]:
        """Apply all filters; None or 'all' leaves a filter off."""
        result = self.search(search)
        if difficulty and difficulty != 'all':
            result = [r for r in result if r.difficulty == difficulty]
        if cuisine and cuisine != 'all':
            result = [r for r in result if r.cuisine == cuisine]
        if meal_type and meal_type != 'all':
            result = [r for r in result if r.serves_meal_type(meal_type)]
        return result
