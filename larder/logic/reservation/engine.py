"""Quantity-aware demand projection over the meal calendar.

Reserved stock is the demand of every calendar entry, independent of what
the pantry holds:

    reserved(id)  = sum(line.quantity * entry.servings / recipe.servings)
    available(id) = max(0, on_hand(id) - reserved(id))

Nothing is cached; each call walks the current calendar.

Quantities are compared in the pantry entry's unit. Recipe lines in another
unit of the same group are converted; lines whose unit cannot be converted
contribute their raw number to reservations and are assumed sufficient in
availability checks when the pantry holds the ingredient.
"""
import logging
from typing import Any, Dict, List, Optional

from larder.logic.shopping.list_builder import build_shopping_list
from larder.logic.units.converter import are_compatible, convert_or_raw, normalize_unit

logger = logging.getLogger(__name__)

__all__ = ["ReservationEngine"]


def _comparable(pantry_unit: str, recipe_unit: str) -> bool:
    if not pantry_unit or not recipe_unit:
        return True
    return normalize_unit(pantry_unit) == normalize_unit(recipe_unit) or are_compatible(pantry_unit, recipe_unit)


class ReservationEngine:
    def __init__(self, calendar, recipes, pantry, catalog):
        self.calendar = calendar
        self.recipes = recipes
        self.pantry = pantry
        self.catalog = catalog

    # --- Reservations ------------------------------------------------------
    def _reserved_lines(self, ingredient_id: str):
        stocked = self.pantry.get(ingredient_id)
        for entry in self.calendar.entries():
            recipe = self.recipes.get(entry.recipe_id)
            if recipe is None:
                continue
            line = recipe.ingredient(ingredient_id)
            if line is None:
                continue
            unit = stocked.unit if stocked else line.unit
            quantity = convert_or_raw(line.scaled(entry.servings, recipe.servings), line.unit, unit)
            yield entry, recipe, quantity, unit

    def reservations(self, ingredient_id: str) -> List[Dict[str, Any]]:
        '''Per-entry breakdown of what the calendar reserves for ``ingredient_id``.'''
        return [
            {
                "meal_id": entry.id,
                "date": entry.date.isoformat(),
                "recipe_id": recipe.id,
                "recipe_title": recipe.title,
                "servings": entry.servings,
                "quantity": round(quantity, 3),
                "unit": unit,
            }
            for entry, recipe, quantity, unit in self._reserved_lines(ingredient_id)
        ]

    def reserved_quantity(self, ingredient_id: str) -> float:
        return sum(quantity for _, _, quantity, _ in self._reserved_lines(ingredient_id))

    def available_quantity(self, ingredient_id: str) -> float:
        stocked = self.pantry.get(ingredient_id)
        if stocked is None:
            return 0.0
        return max(0.0, stocked.quantity - self.reserved_quantity(ingredient_id))

    # --- Availability ------------------------------------------------------
    def check_availability(self, recipe, servings: Optional[float] = None) -> Dict[str, Any]:
        '''
        Whether ``recipe`` can be cooked at ``servings`` from unreserved stock.
        Required ingredients with nothing available go to ``missing``; those
        with some but not enough go to ``warnings``. Optional ingredients are
        ignored.
        '''
        target = servings or recipe.servings
        missing: List[Dict[str, Any]] = []
        warnings: List[Dict[str, Any]] = []

        for line in recipe.required_ingredients:
            needed = line.scaled(target, recipe.servings)
            stocked = self.pantry.get(line.ingredient_id)
            if stocked is not None and stocked.quantity > 0 and not _comparable(stocked.unit, line.unit):
                # unmappable unit; the ingredient is on hand, so do not block
                logger.debug("Assuming %s sufficient: %s vs %s", line.ingredient_id, stocked.unit, line.unit)
                continue
            available = self.available_quantity(line.ingredient_id)
            if stocked is not None:
                available = convert_or_raw(available, stocked.unit, line.unit)
            if available >= needed:
                continue
            ingredient = self.catalog.get(line.ingredient_id)
            shortfall = {
                "ingredient_id": line.ingredient_id,
                "name": ingredient.name if ingredient else (line.name or line.ingredient_id),
                "unit": line.unit,
                "needed": round(needed, 3),
                "available": round(available, 3),
                "shortage": round(needed - available, 3),
            }
            if available == 0:
                missing.append(shortfall)
            else:
                warnings.append(shortfall)

        return {
            "can_make": not missing and not warnings,
            "has_some": not missing,
            "missing": missing,
            "warnings": warnings,
        }

    # --- Window views ------------------------------------------------------
    def shopping_list(self, start=None, end=None):
        return build_shopping_list(self.calendar, self.recipes, self.catalog, self.pantry, start, end)

    def stats(self, start=None, end=None) -> Dict[str, int]:
        '''Classifies every entry in the window by re-checking it at its own servings.'''
        total = can_make = need_shopping = 0
        for entry in self.calendar.entries_between(start, end):
            total += 1
            recipe = self.recipes.get(entry.recipe_id)
            if recipe is None:
                continue
            if self.check_availability(recipe, entry.servings)["can_make"]:
                can_make += 1
            else:
                need_shopping += 1
        return {"total_meals": total, "can_make": can_make, "need_shopping": need_shopping}
