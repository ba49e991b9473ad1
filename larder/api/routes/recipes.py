from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from larder.api.routes.common import get_session, parse_day, require, with_recipe_dicts
from larder.logic.matching.scorer import calculate_match_score, count_makeable, filter_by_match_type, rank_recipes

router = APIRouter(prefix="/api/recipes", tags=["recipes"])


@router.get("")
def list_recipes(search: Optional[str] = None, cuisine: Optional[str] = None, difficulty: Optional[str] = None,
                 meal_type: Optional[str] = None, match: Optional[str] = None, session=Depends(get_session)):
    """Recipes after the browse filters, ranked by how well the pantry covers them."""
    pantry_ids = session.pantry.ids()
    recipes = session.recipes.filter(search, cuisine, difficulty, meal_type)
    ranked = filter_by_match_type(rank_recipes(recipes, pantry_ids, session.catalog), match)
    return {
        "recipes": with_recipe_dicts(ranked),
        "count": len(ranked),
        "makeable": count_makeable(session.recipes, pantry_ids),
    }


@router.get("/cuisines")
def list_cuisines(session=Depends(get_session)):
    return session.recipes.cuisines()


@router.get("/{recipe_id}")
def get_recipe(recipe_id: str, session=Depends(get_session)):
    recipe = require(session.recipes.get(recipe_id), "Recipe not found")
    return {
        "recipe": recipe.to_dict(),
        "match": calculate_match_score(recipe, session.pantry.ids(), session.catalog),
        "nutrition": session.nutrition.recipe_nutrition(recipe),
    }


@router.get("/{recipe_id}/availability")
def recipe_availability(recipe_id: str, servings: Optional[float] = Query(None, gt=0), session=Depends(get_session)):
    recipe = require(session.recipes.get(recipe_id), "Recipe not found")
    return session.reservations.check_availability(recipe, servings)


@router.get("/{recipe_id}/fits")
def recipe_fits_budget(recipe_id: str, day: Optional[str] = None, session=Depends(get_session)):
    recipe = require(session.recipes.get(recipe_id), "Recipe not found")
    return session.nutrition.fits_budget(recipe, parse_day(day) if day else date.today())
