"""Recipe suggestions that respect both the day's nutrition budget and the pantry.

Fit score (lower is better), per macro of one serving:
  limit goals   - exceeding the remaining budget adds 2x the excess as % of
                  target and marks the recipe as not fitting; using 60-80 %
                  of what is left earns -5, under 30 % costs +2
  minimum goals - covering what is still needed earns -10, a partial
                  contribution earns up to -5
"""
from typing import Any, Dict, List, Optional

from larder.logic.matching.scorer import calculate_match_score, rank_recipes
from larder.logic.reporting.nutrition import recipe_nutrition
from larder.utilities.constants import GOAL_LIMIT, MINIMAL_MATCH_PERCENT
from larder.utilities.numbers import round_half_up

__all__ = ["score_recipe_fit", "suggestions_for_date"]

NO_DATA_SCORE = 1000


def score_recipe_fit(per_serving: Optional[Dict[str, float]], remaining: Dict[str, Any]) -> Dict[str, Any]:
    if not per_serving:
        return {"score": NO_DATA_SCORE, "details": {}, "fits": False, "no_data": True}

    goals = remaining.get("goals", {})
    consumed = remaining.get("consumed", {})
    score = 0.0
    fits = True
    details: Dict[str, Dict[str, Any]] = {}

    for macro, goal in goals.items():
        left = remaining.get(macro, 0) or 0
        amount = per_serving.get(macro, 0) or 0

        if goal["type"] == GOAL_LIMIT:
            if amount > left:
                excess = amount - left
                score += (excess / goal["target"]) * 100 * 2
                fits = False
                details[macro] = {"status": "exceeds", "excess": excess, "remaining": left, "amount": amount}
            elif left > 0:
                use_percent = amount / left * 100
                if 60 <= use_percent <= 80:
                    score -= 5
                elif use_percent < 30:
                    score += 2
                details[macro] = {"status": "fits", "use_percent": round_half_up(use_percent),
                                  "remaining": left, "amount": amount}
        else:
            still_needed = max(0, goal["target"] - (consumed.get(macro, 0) or 0))
            if amount >= still_needed > 0:
                score -= 10
                details[macro] = {"status": "helps-meet-goal", "contribution": amount, "still_needed": still_needed}
            elif amount > 0:
                help_percent = amount / still_needed * 100 if still_needed > 0 else 100
                score -= min(5, help_percent / 20)
                details[macro] = {"status": "partial", "contribution": amount, "still_needed": still_needed}

    return {"score": round_half_up(score, 1), "details": details, "fits": fits, "per_serving": per_serving}


def suggestions_for_date(day, recipes, catalog, pantry_ids, nutrition_engine, meal_type: Optional[str] = None,
                         max_results: int = 5, min_pantry_match: int = MINIMAL_MATCH_PERCENT,
                         include_partial: bool = True) -> List[Dict[str, Any]]:
    """Suggest recipes for ``day``.

    With tracking disabled this is plain pantry ranking. Otherwise
    priority = (0 if the recipe fits the budget else 100) + (100 - required_percent),
    lowest first.
    """
    candidates = [r for r in recipes if meal_type is None or r.serves_meal_type(meal_type)]
    pantry = frozenset(pantry_ids)

    if not nutrition_engine.prefs.enabled:
        ranked = rank_recipes(candidates, pantry, catalog)
        return [r for r in ranked if r["match"]["required_percent"] >= min_pantry_match][:max_results]

    remaining = nutrition_engine.remaining_budget(day)
    scored = []
    for recipe in candidates:
        nutrition = recipe_nutrition(recipe, catalog)
        fit = score_recipe_fit(nutrition["per_serving"] if nutrition["has_data"] else None, remaining)
        match = calculate_match_score(recipe, pantry, catalog)
        if match["required_percent"] < min_pantry_match:
            continue
        if not include_partial and match["required_percent"] < 100:
            continue
        scored.append({
            "recipe": recipe,
            "match": match,
            "nutrition_fit": fit,
            "fits_nutrition": fit["fits"],
            "priority": (0 if fit["fits"] else 100) + (100 - match["required_percent"]),
        })

    scored.sort(key=lambda x: x["priority"])
    return scored[:max_results]
