"""
Statistics module for the meal calendar.
Provides insights into planning habits: volume, variety, streaks and cuisines.
"""
from collections import Counter
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Optional, Tuple
import logging

logger = logging.getLogger(__name__)

TOP_CUISINES = 5


class MealPlanStats:
    """Generate statistics from the meal calendar."""

    def __init__(self, calendar, recipes):
        self.calendar = calendar
        self.recipes = recipes

    def total_meals_planned(self) -> int:
        return len(self.calendar.entries())

    def total_recipes_tried(self) -> int:
        """Distinct recipes that appear anywhere in the calendar."""
        return len({entry.recipe_id for entry in self.calendar.entries()})

    def favorite_cuisines(self, limit: int = TOP_CUISINES) -> List[Dict[str, Any]]:
        """Most planned cuisines, counted per calendar entry."""
        counter = Counter()
        for entry in self.calendar.entries():
            recipe = self.recipes.get(entry.recipe_id)
            if recipe is not None and recipe.cuisine:
                counter[recipe.cuisine.lower()] += 1
        return [{"cuisine": cuisine, "count": count} for cuisine, count in counter.most_common(limit)]

    def streaks(self, today: Optional[date] = None) -> Tuple[int, int]:
        """(current, longest) runs of consecutive dates with meals.

        The current streak only counts when the latest planned date is today
        or yesterday.
        """
        return calculate_streaks(self.calendar.dates(), today or date.today())

    def summary(self, today: Optional[date] = None) -> Dict[str, Any]:
        current, longest = self.streaks(today)
        return {
            "total_meals_planned": self.total_meals_planned(),
            "total_recipes_tried": self.total_recipes_tried(),
            "current_streak": current,
            "longest_streak": longest,
            "favorite_cuisines": self.favorite_cuisines(),
        }


def calculate_streaks(dates: Iterable[date], today: date) -> Tuple[int, int]:
    ordered = sorted(set(dates))
    if not ordered:
        return 0, 0

    longest = run = 1
    for previous, current in zip(ordered, ordered[1:]):
        run = run + 1 if current - previous == timedelta(days=1) else 1
        longest = max(longest, run)

    latest = ordered[-1]
    if latest not in (today, today - timedelta(days=1)):
        return 0, longest

    current_streak = 0
    expected = latest
    for day in reversed(ordered):
        if day != expected:
            break
        current_streak += 1
        expected = day - timedelta(days=1)
    return current_streak, longest
