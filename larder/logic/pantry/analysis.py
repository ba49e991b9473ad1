"""Pantry analysis helpers: grouping and counts over the ledger."""
from __future__ import annotations
from typing import List, Dict, Any
from larder.utilities.constants import STORAGE_LOCATIONS

__all__ = ["pantry_by_category", "pantry_stats"]


def pantry_by_category(pantry, catalog) -> Dict[str, List[Dict[str, Any]]]:
    """Return {category: [entry dict + ingredient name]}, sorted by name within a category."""
    groups: Dict[str, List[Dict[str, Any]]] = {}
    for entry in pantry.list():
        ingredient = catalog.get(entry.ingredient_id)
        if ingredient is None:
            continue
        groups.setdefault(ingredient.category, []).append({
            **entry.to_dict(),
            'name': ingredient.name,
            'subcategory': ingredient.subcategory,
        })
    for items in groups.values():
        items.sort(key=lambda x: x['name'].lower())
    return dict(sorted(groups.items()))


def pantry_stats(pantry, catalog) -> Dict[str, Any]:
    """Counts of entries overall, per catalog category and per storage location."""
    by_category: Dict[str, int] = {}
    by_storage: Dict[str, int] = {location: 0 for location in STORAGE_LOCATIONS}
    entries = pantry.list()
    for entry in entries:
        ingredient = catalog.get(entry.ingredient_id)
        if ingredient is not None:
            by_category[ingredient.category] = by_category.get(ingredient.category, 0) + 1
        by_storage[entry.storage] = by_storage.get(entry.storage, 0) + 1
    return {
        'total_items': len(entries),
        'by_category': by_category,
        'by_storage': by_storage,
    }
