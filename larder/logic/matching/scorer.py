"""Presence-based recipe matching.

A recipe ingredient "counts" as soon as the pantry holds any of it; amounts
and units are ignored here (ReservationEngine answers the quantity question).

    required_percent = round(100 * required_have / required_count)   (100 if none required)
    score            = round(100 * (10 * required_have + 3 * optional_have) / max_points)

match_type ladder on required_percent: full (100), partial (>= 70),
minimal (>= 50), none.
"""
from typing import Any, Dict, Iterable, List, Optional

from larder.utilities.constants import (
    REQUIRED_MATCH_POINTS, OPTIONAL_MATCH_POINTS, PARTIAL_MATCH_PERCENT,
    MINIMAL_MATCH_PERCENT, MATCH_TYPE_ORDER,
)
from larder.utilities.numbers import round_half_up

__all__ = ["calculate_match_score", "classify", "rank_recipes", "filter_by_match_type", "count_makeable"]


def classify(required_percent: float) -> str:
    if required_percent >= 100:
        return "full"
    if required_percent >= PARTIAL_MATCH_PERCENT:
        return "partial"
    if required_percent >= MINIMAL_MATCH_PERCENT:
        return "minimal"
    return "none"


def _describe(line, catalog) -> Dict[str, Any]:
    ingredient = catalog.get(line.ingredient_id) if catalog is not None else None
    return {
        "ingredient_id": line.ingredient_id,
        "name": ingredient.name if ingredient else (line.name or line.ingredient_id),
        "quantity": line.quantity,
        "unit": line.unit,
        "optional": line.optional,
    }


def calculate_match_score(recipe, pantry_ids: Iterable[str], catalog=None) -> Dict[str, Any]:
    pantry = pantry_ids if isinstance(pantry_ids, (set, frozenset)) else set(pantry_ids)
    required_count = required_have = optional_count = optional_have = 0
    matched: List[Dict[str, Any]] = []
    missing: List[Dict[str, Any]] = []

    for line in recipe.ingredients:
        has_it = line.ingredient_id in pantry
        if line.optional:
            optional_count += 1
            if has_it:
                optional_have += 1
                matched.append(_describe(line, catalog))
        else:
            required_count += 1
            if has_it:
                required_have += 1
                matched.append(_describe(line, catalog))
            else:
                missing.append(_describe(line, catalog))

    required_percent = round_half_up(100 * required_have / required_count) if required_count else 100
    max_points = required_count * REQUIRED_MATCH_POINTS + optional_count * OPTIONAL_MATCH_POINTS
    points = required_have * REQUIRED_MATCH_POINTS + optional_have * OPTIONAL_MATCH_POINTS
    score = round_half_up(100 * points / max_points) if max_points else 0

    return {
        "score": score,
        "required_percent": required_percent,
        "match_type": classify(required_percent),
        "matched": matched,
        "missing": missing,
        "required_have": required_have,
        "required_count": required_count,
        "optional_have": optional_have,
        "optional_count": optional_count,
    }


def rank_recipes(recipes: Iterable, pantry_ids: Iterable[str], catalog=None) -> List[Dict[str, Any]]:
    """Returns [{recipe, match}] ordered by match type, then score descending.

    Equal type and score keep the input order (sort is stable).
    """
    pantry = frozenset(pantry_ids)
    scored = [{"recipe": r, "match": calculate_match_score(r, pantry, catalog)} for r in recipes]
    scored.sort(key=lambda x: (MATCH_TYPE_ORDER[x["match"]["match_type"]], -x["match"]["score"]))
    return scored


def filter_by_match_type(ranked: List[Dict[str, Any]], match_type: Optional[str]) -> List[Dict[str, Any]]:
    """'partial' and 'minimal' are thresholds, so they include better matches."""
    if not match_type or match_type == "all":
        return list(ranked)
    if match_type == "full":
        return [r for r in ranked if r["match"]["match_type"] == "full"]
    if match_type == "partial":
        return [r for r in ranked if r["match"]["required_percent"] >= PARTIAL_MATCH_PERCENT]
    if match_type == "minimal":
        return [r for r in ranked if r["match"]["required_percent"] >= MINIMAL_MATCH_PERCENT]
    return list(ranked)


def count_makeable(recipes: Iterable, pantry_ids: Iterable[str]) -> int:
    pantry = frozenset(pantry_ids)
    return sum(1 for r in recipes if calculate_match_score(r, pantry)["match_type"] == "full")
