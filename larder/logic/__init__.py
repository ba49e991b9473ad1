"""Core business logic layer.

Subpackages:
- units: unit groups, conversion and compatibility
- catalog: ingredient index and ranked search
- reservation: reserved/available quantities and recipe availability
- shopping: building shopping lists from the meal calendar
- matching: pantry match scoring and nutrition-fit suggestions
- reporting: recipe, day and week nutrition against goals
- pantry: pantry analysis helpers

Everything here is computed on demand from the stores in ``larder.domain``;
nothing is cached.
"""
__all__ = ["units", "catalog", "reservation", "shopping", "matching", "reporting", "pantry"]
