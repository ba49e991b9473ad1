from datetime import date, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from larder.api.routes.common import get_session, parse_day, require
from larder.domain.Plan import format_date, week_start
from larder.utilities.export_import import DataExporter, DataImporter
from larder.utilities.validators import EatenInput, ImportRequest, MealInput, MealUpdateInput, MoveInput

router = APIRouter(prefix="/api/meals", tags=["meals"])


def _meal_view(session, entry):
    recipe = session.recipes.get(entry.recipe_id)
    view = entry.to_dict()
    view["recipeTitle"] = recipe.title if recipe else entry.recipe_id
    if recipe is not None:
        view["availability"] = session.reservations.check_availability(recipe, entry.servings)
    return view


def _by_date(session, meals):
    return {format_date(day): [_meal_view(session, e) for e in entries] for day, entries in meals.items()}


@router.get("")
def list_meals(start: Optional[str] = None, end: Optional[str] = None, session=Depends(get_session)):
    first, last = parse_day(start, required=False), parse_day(end, required=False)
    meals = {}
    for entry in session.calendar.entries_between(first, last):
        meals.setdefault(entry.date, []).append(entry)
    return _by_date(session, meals)


@router.get("/week")
def meals_for_week(start: Optional[str] = None, session=Depends(get_session)):
    """Seven days from ``start``; the current Monday when omitted."""
    first = parse_day(start) if start else week_start(date.today())
    return {
        "start": format_date(first),
        "meals": _by_date(session, session.calendar.meals_for_week(first)),
        "stats": session.reservations.stats(first, first + timedelta(days=6)),
    }


@router.get("/date/{day}")
def meals_for_date(day: str, session=Depends(get_session)):
    return [_meal_view(session, entry) for entry in session.calendar.meals_for_date(parse_day(day))]


@router.get("/stats")
def meal_stats(start: Optional[str] = None, end: Optional[str] = None, session=Depends(get_session)):
    return {
        **session.reservations.stats(parse_day(start, required=False), parse_day(end, required=False)),
        **session.stats.summary(date.today()),
    }


@router.get("/export")
def export_meal_plan(session=Depends(get_session)):
    return DataExporter(session).export_meal_plan()


@router.post("/import")
def import_meal_plan(body: ImportRequest, session=Depends(get_session)):
    result = DataImporter(session).import_meal_plan(body.data, body.mode)
    if not result["success"]:
        raise HTTPException(status_code=400, detail=result["error"])
    return result


@router.post("", status_code=201)
def add_meal(body: MealInput, session=Depends(get_session)):
    entry = session.calendar.add_meal(body.date, body.recipe_id, body.meal_type, body.servings, body.notes)
    return _meal_view(session, require(entry, "Recipe not found"))


@router.delete("/range")
def clear_meals(start: str = Query(...), end: str = Query(...), session=Depends(get_session)):
    removed = session.calendar.clear_range(parse_day(start), parse_day(end))
    return {"status": "ok", "removed": removed}


@router.get("/{meal_id}")
def get_meal(meal_id: str, session=Depends(get_session)):
    return _meal_view(session, require(session.calendar.get(meal_id), "Meal not found"))


@router.put("/{meal_id}")
def update_meal(meal_id: str, body: MealUpdateInput, session=Depends(get_session)):
    entry = session.calendar.update_meal(meal_id, body.servings, body.meal_type, body.notes)
    return _meal_view(session, require(entry, "Meal not found"))


@router.delete("/{meal_id}")
def remove_meal(meal_id: str, session=Depends(get_session)):
    require(session.calendar.remove_meal(meal_id), "Meal not found")
    return {"status": "ok", "removed": meal_id}


@router.post("/{meal_id}/eaten")
def mark_eaten(meal_id: str, body: Optional[EatenInput] = None, session=Depends(get_session)):
    consumed = body.consumed_servings if body else None
    return _meal_view(session, require(session.calendar.mark_eaten(meal_id, consumed), "Meal not found"))


@router.post("/{meal_id}/dismiss")
def dismiss_meal(meal_id: str, session=Depends(get_session)):
    return _meal_view(session, require(session.calendar.dismiss(meal_id), "Meal not found"))


@router.post("/{meal_id}/restore")
def restore_meal(meal_id: str, session=Depends(get_session)):
    return _meal_view(session, require(session.calendar.restore(meal_id), "Meal not found"))


@router.post("/{meal_id}/move")
def move_meal(meal_id: str, body: MoveInput, session=Depends(get_session)):
    return _meal_view(session, require(session.calendar.move_meal(meal_id, body.date), "Meal not found"))
