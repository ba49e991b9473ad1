"""Nutrition aggregation logic.

Recipe macros come from per-100g ingredient records scaled by an approximate
gram weight of the recipe unit (UNIT_TO_GRAMS). That table is only an
estimate and is kept apart from the exact unit groups in
``larder.logic.units.converter``.

Accounting modes for a calendar day:
  planned -> every entry counts as one serving eaten
  actual  -> only entries marked eaten, times their consumed servings

Rounding: calories to whole numbers, other macros to one decimal.
"""
from typing import Any, Dict, List, Optional

from larder.domain.Plan import format_date, parse_date, week_dates
from larder.utilities.constants import (
    MACROS, UNIT_TO_GRAMS, DEFAULT_UNIT_GRAMS, NEAR_GOAL_PERCENT, GOAL_LIMIT,
)
from larder.utilities.numbers import round_half_up

MODE_PLANNED = "planned"
MODE_ACTUAL = "actual"

__all__ = [
    "to_grams", "ingredient_nutrition", "recipe_nutrition", "goal_status",
    "NutritionEngine", "MODE_PLANNED", "MODE_ACTUAL",
]


def _zero() -> Dict[str, float]:
    return {macro: 0 for macro in MACROS}


def _round_macros(values: Dict[str, float]) -> Dict[str, float]:
    return {
        macro: round_half_up(values.get(macro, 0)) if macro == "calories" else round_half_up(values.get(macro, 0), 1)
        for macro in MACROS
    }


def to_grams(quantity: float, unit: Optional[str]) -> float:
    '''Approximate grams for a cooking quantity; unknown units count as 100 g each.'''
    key = (unit or "").strip().lower()
    if key.endswith("s"):
        key = key[:-1]
    return (quantity or 0) * UNIT_TO_GRAMS.get(key, DEFAULT_UNIT_GRAMS)


def ingredient_nutrition(recipe_ingredient, ingredient_record) -> Dict[str, float]:
    if ingredient_record is None or ingredient_record.nutrition is None:
        return _zero()
    factor = to_grams(recipe_ingredient.quantity, recipe_ingredient.unit) / 100
    facts = ingredient_record.nutrition
    return _round_macros({macro: facts.get(macro) * factor for macro in MACROS})


def recipe_nutrition(recipe, ingredient_map) -> Dict[str, Any]:
    """Total and per-serving macros of a whole recipe.

    Returns:
        { total, per_serving, servings, breakdown: [{ingredient_id, name, <macros>}],
          has_data }  where has_data is False when no ingredient had a record.
    """
    total = _zero()
    breakdown: List[Dict[str, Any]] = []
    has_data = False
    for line in recipe.ingredients:
        record = ingredient_map.get(line.ingredient_id)
        values = ingredient_nutrition(line, record)
        for macro in MACROS:
            total[macro] += values[macro]
        if record is not None and record.nutrition is not None:
            has_data = True
            breakdown.append({"ingredient_id": line.ingredient_id, "name": record.name, **values})

    servings = recipe.servings or 1
    return {
        "total": _round_macros(total),
        "per_serving": _round_macros({m: total[m] / servings for m in MACROS}),
        "servings": servings,
        "breakdown": breakdown,
        "has_data": has_data,
    }


def goal_status(percent: int, goal_type: str) -> str:
    if goal_type == GOAL_LIMIT:
        if percent > 100:
            return "over"
        return "near" if percent >= NEAR_GOAL_PERCENT else "under"
    if percent >= 100:
        return "met"
    return "near" if percent >= NEAR_GOAL_PERCENT else "under"


def _percent(value: float, target: float) -> int:
    return round_half_up(100 * value / target) if target > 0 else 0


class NutritionEngine:
    """Day/week nutrition views over the meal calendar and the goal store."""

    def __init__(self, recipes, catalog, calendar, prefs):
        self.recipes = recipes
        self.catalog = catalog
        self.calendar = calendar
        self.prefs = prefs

    # --- Recipes -----------------------------------------------------------
    def ingredient_nutrition(self, recipe_ingredient, ingredient_record=None) -> Dict[str, float]:
        if ingredient_record is None:
            ingredient_record = self.catalog.get(recipe_ingredient.ingredient_id)
        return ingredient_nutrition(recipe_ingredient, ingredient_record)

    def recipe_nutrition(self, recipe) -> Dict[str, Any]:
        return recipe_nutrition(recipe, self.catalog)

    def _goals(self) -> Dict[str, Dict[str, Any]]:
        return {macro: goal.to_dict() for macro, goal in self.prefs.goals().items()}

    # --- Days --------------------------------------------------------------
    def day_total(self, day, mode: str = MODE_PLANNED) -> Dict[str, Any]:
        entry_date = parse_date(day)
        goals = self._goals()
        total = _zero()
        meals: List[Dict[str, Any]] = []

        for entry in self.calendar.meals_for_date(entry_date):
            if mode == MODE_ACTUAL:
                if not entry.is_eaten:
                    continue
                servings = 1 if entry.consumed_servings is None else entry.consumed_servings
            else:
                servings = 1
            recipe = self.recipes.get(entry.recipe_id)
            if recipe is None:
                continue
            per_serving = self.recipe_nutrition(recipe)["per_serving"]
            for macro in MACROS:
                total[macro] += per_serving[macro] * servings
            meals.append({
                "meal_id": entry.id,
                "meal_type": entry.meal_type,
                "recipe_id": recipe.id,
                "recipe_title": recipe.title,
                "servings_consumed": servings,
                "status": entry.status,
                **{m: per_serving[m] for m in MACROS},
            })

        total = _round_macros(total)
        percentages = {m: _percent(total[m], goals[m]["target"]) for m in goals}
        status = {m: goal_status(percentages[m], goals[m]["type"]) for m in goals}
        return {
            "date": format_date(entry_date),
            "mode": mode,
            "total": total,
            "meals": meals,
            "meal_count": len(meals),
            "goals": goals,
            "percentages": percentages,
            "status": status,
        }

    def remaining_budget(self, day, mode: str = MODE_PLANNED) -> Dict[str, Any]:
        '''
        Room left per macro: max(0, target - consumed) for every goal type.
        Also carries ``consumed``, ``goals`` and ``percentages`` for callers
        that score against the budget.
        '''
        day_data = self.day_total(day, mode)
        remaining: Dict[str, Any] = {
            macro: max(0, goal["target"] - day_data["total"][macro])
            for macro, goal in day_data["goals"].items()
        }
        remaining["consumed"] = day_data["total"]
        remaining["goals"] = day_data["goals"]
        remaining["percentages"] = day_data["percentages"]
        return remaining

    def fits_budget(self, recipe, day) -> Dict[str, Any]:
        '''
        Whether one serving of ``recipe`` fits the day's remaining budget.
        Only limit-type goals can be exceeded; a recipe without nutrition
        data always fits.
        '''
        remaining = self.remaining_budget(day)
        nutrition = self.recipe_nutrition(recipe)
        if not nutrition["has_data"]:
            return {"fits": True, "exceeding": [], "remaining": remaining, "per_serving": None}

        per_serving = nutrition["per_serving"]
        exceeding = []
        for macro, goal in remaining["goals"].items():
            if goal["type"] == GOAL_LIMIT and per_serving[macro] > remaining[macro]:
                exceeding.append({
                    "macro": macro,
                    "recipe_amount": round_half_up(per_serving[macro]),
                    "remaining": round_half_up(remaining[macro]),
                    "excess": round_half_up(per_serving[macro] - remaining[macro]),
                })
        return {"fits": not exceeding, "exceeding": exceeding, "remaining": remaining, "per_serving": per_serving}

    def day_comparison(self, day) -> Dict[str, Any]:
        planned = self.day_total(day, MODE_PLANNED)
        actual = self.day_total(day, MODE_ACTUAL)
        difference = _round_macros({m: actual["total"][m] - planned["total"][m] for m in MACROS})
        return {
            "planned": planned,
            "actual": actual,
            "difference": difference,
            "has_actual_data": actual["meal_count"] > 0,
        }

    def day_summary(self, day, mode: str = MODE_PLANNED) -> Optional[Dict[str, Any]]:
        '''Compact status for calendar badges; None while tracking is disabled.'''
        if not self.prefs.enabled:
            return None
        day_data = self.day_total(day, mode)
        primary_macro = self.prefs.display_settings.get("primary_macro") or "calories"
        goal = day_data["goals"].get(primary_macro, {})
        over_limits = [m for m, g in day_data["goals"].items()
                       if g["type"] == GOAL_LIMIT and day_data["status"][m] == "over"]
        needs_more = [m for m, g in day_data["goals"].items()
                      if g["type"] != GOAL_LIMIT and day_data["status"][m] == "under"]
        return {
            "primary": {
                "macro": primary_macro,
                "consumed": day_data["total"].get(primary_macro, 0),
                "goal": goal.get("target", 0),
                "percent": day_data["percentages"].get(primary_macro, 0),
                "status": day_data["status"].get(primary_macro, "under"),
                "type": goal.get("type", GOAL_LIMIT),
            },
            "meal_count": day_data["meal_count"],
            "total": day_data["total"],
            "percentages": day_data["percentages"],
            "status": day_data["status"],
            "overall_status": "over-limit" if over_limits else "on-track",
            "has_warnings": bool(over_limits),
            "needs_more": needs_more,
        }

    # --- Weeks -------------------------------------------------------------
    def week_total(self, start, mode: str = MODE_PLANNED) -> Dict[str, Any]:
        """Seven days from ``start``.

        The daily average divides by the days that had counted meals (7 when
        none did); weekly goals are the daily targets times 7.
        """
        goals = self._goals()
        total = _zero()
        days: Dict[str, Dict[str, Any]] = {}
        days_with_meals = 0

        for day in week_dates(start):
            day_data = self.day_total(day, mode)
            days[day_data["date"]] = day_data
            for macro in MACROS:
                total[macro] += day_data["total"][macro]
            if day_data["meal_count"] > 0:
                days_with_meals += 1

        total = _round_macros(total)
        divisor = days_with_meals or 7
        daily_average = {m: round_half_up(total[m] / divisor, 1) for m in MACROS}
        weekly_goals = {m: {"target": g["target"] * 7, "type": g["type"]} for m, g in goals.items()}
        return {
            "start": format_date(parse_date(start)),
            "mode": mode,
            "total": total,
            "daily_average": daily_average,
            "days": days,
            "days_with_meals": days_with_meals,
            "weekly_goals": weekly_goals,
            "weekly_percentages": {m: _percent(total[m], weekly_goals[m]["target"]) for m in goals},
            "average_percentages": {m: _percent(daily_average[m], goals[m]["target"]) for m in goals},
        }
