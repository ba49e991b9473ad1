"""Shopping list builder.

Aggregates the demand of every calendar entry in a date window and compares
the total once against what the pantry holds. Optional recipe ingredients
never reach the list.

Provides build_shopping_list(calendar, recipes, catalog, pantry, start=None, end=None).
"""
from typing import Dict, List

from larder.domain.ShoppingList import ShoppingListItem
from larder.logic.units.converter import convert_or_raw


def build_shopping_list(calendar, recipes, catalog, pantry, start=None, end=None) -> List[ShoppingListItem]:
    """Compute what to buy for the meals dated within [start, end].

    Args:
        calendar: MealCalendar holding the planned entries.
        recipes: recipe lookup exposing get(recipe_id).
        catalog: CatalogIndex for names and categories.
        pantry: PantryLedger supplying on-hand quantities.
        start, end: inclusive date bounds; None leaves that side open.

    Returns:
        ShoppingListItem list (only shortage > 0), sorted by category then name.
        Quantities are in the pantry entry's unit when the ingredient is
        stocked, otherwise in the first recipe unit seen for it.
    """
    required: Dict[str, ShoppingListItem] = {}

    for entry in calendar.entries_between(start, end):
        recipe = recipes.get(entry.recipe_id)
        if recipe is None:
            continue
        for line in recipe.required_ingredients:
            scaled = line.scaled(entry.servings, recipe.servings)
            item = required.get(line.ingredient_id)
            if item is None:
                stocked = pantry.get(line.ingredient_id)
                ingredient = catalog.get(line.ingredient_id)
                item = ShoppingListItem(
                    ingredient_id=line.ingredient_id,
                    name=ingredient.name if ingredient else (line.name or line.ingredient_id),
                    unit=stocked.unit if stocked else line.unit,
                    category=ingredient.category if ingredient else "other",
                    needed=0.0,
                    available=stocked.quantity if stocked else 0.0,
                )
                required[line.ingredient_id] = item
            item.needed += convert_or_raw(scaled, line.unit, item.unit)

    shopping_list = [item for item in required.values() if item.needed > item.available]
    shopping_list.sort(key=lambda x: (x.category.lower(), x.name.lower()))
    return shopping_list


def group_by_category(items: List[ShoppingListItem]) -> Dict[str, List[ShoppingListItem]]:
    '''Keeps the incoming order inside each category.'''
    groups: Dict[str, List[ShoppingListItem]] = {}
    for item in items:
        groups.setdefault(item.category, []).append(item)
    return groups


__all__ = ['build_shopping_list', 'group_by_category']
