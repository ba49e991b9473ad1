from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from larder.api.routes.common import get_session, parse_day, require, with_recipe_dicts
from larder.logic.matching.suggestions import suggestions_for_date
from larder.logic.reporting.nutrition import MODE_ACTUAL, MODE_PLANNED
from larder.utilities.export_import import DataExporter, DataImporter
from larder.utilities.validators import GoalInput, ImportRequest, PrefsUpdateInput

router = APIRouter(prefix="/api/nutrition", tags=["nutrition"])

MODE_PATTERN = f"^({MODE_PLANNED}|{MODE_ACTUAL})$"


@router.get("/day/{day}")
def day_total(day: str, mode: str = Query(MODE_PLANNED, pattern=MODE_PATTERN), session=Depends(get_session)):
    return session.nutrition.day_total(parse_day(day), mode)


@router.get("/day/{day}/remaining")
def remaining_budget(day: str, mode: str = Query(MODE_PLANNED, pattern=MODE_PATTERN), session=Depends(get_session)):
    return session.nutrition.remaining_budget(parse_day(day), mode)


@router.get("/day/{day}/comparison")
def day_comparison(day: str, session=Depends(get_session)):
    return session.nutrition.day_comparison(parse_day(day))


@router.get("/day/{day}/summary")
def day_summary(day: str, mode: str = Query(MODE_PLANNED, pattern=MODE_PATTERN), session=Depends(get_session)):
    """Null while nutrition tracking is disabled."""
    return session.nutrition.day_summary(parse_day(day), mode)


@router.get("/day/{day}/suggestions")
def day_suggestions(day: str, meal_type: Optional[str] = None, max_results: int = Query(5, ge=1, le=50),
                    min_pantry_match: int = Query(50, ge=0, le=100), session=Depends(get_session)):
    suggestions = suggestions_for_date(
        parse_day(day), session.recipes, session.catalog, session.pantry.ids(), session.nutrition,
        meal_type=meal_type, max_results=max_results, min_pantry_match=min_pantry_match,
    )
    return with_recipe_dicts(suggestions)


@router.get("/week/{start}")
def week_total(start: str, mode: str = Query(MODE_PLANNED, pattern=MODE_PATTERN), session=Depends(get_session)):
    return session.nutrition.week_total(parse_day(start), mode)


@router.get("/prefs")
def get_prefs(session=Depends(get_session)):
    return session.prefs.to_dict()


@router.put("/prefs")
def update_prefs(body: PrefsUpdateInput, session=Depends(get_session)):
    goals = None
    if body.goals is not None:
        goals = {macro: goal.model_dump(exclude_none=True) for macro, goal in body.goals.items()}
    display = {"show_on_calendar": body.show_on_calendar, "primary_macro": body.primary_macro}
    return session.prefs.update(body.enabled, goals, display).to_dict()


@router.put("/goals/{macro}")
def set_goal(macro: str, body: GoalInput, session=Depends(get_session)):
    goal = require(session.prefs.set_goal(macro, body.target, body.type), "Unknown macro")
    return {"macro": macro, **goal.to_dict()}


@router.get("/presets")
def list_presets(session=Depends(get_session)):
    return session.prefs.presets()


@router.post("/presets/{preset_id}")
def apply_preset(preset_id: str, session=Depends(get_session)):
    require(session.prefs.apply_preset(preset_id), "Preset not found")
    return session.prefs.to_dict()


@router.post("/reset")
def reset_prefs(session=Depends(get_session)):
    return session.prefs.reset().to_dict()


@router.get("/export")
def export_prefs(session=Depends(get_session)):
    return DataExporter(session).export_nutrition_prefs()


@router.post("/import")
def import_prefs(body: ImportRequest, session=Depends(get_session)):
    result = DataImporter(session).import_nutrition_prefs(body.data)
    if not result["success"]:
        raise HTTPException(status_code=400, detail=result["error"])
    return result
