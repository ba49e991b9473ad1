"""Shared helpers for the API routers: session lookup and request parsing."""
from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, Request

from larder.domain.Plan import parse_date
from larder.utilities.constants import DATE_FORMAT


def get_session(request: Request):
    """The LarderSession built at startup (see create_app)."""
    return request.app.state.session


def parse_day(value: Optional[str], required: bool = True) -> Optional[date]:
    if value is None and not required:
        return None
    day = parse_date(value) if value is not None else None
    if day is None:
        raise HTTPException(status_code=400, detail=f"Invalid date (expected {DATE_FORMAT})")
    return day


def require(value, detail: str):
    """404 for the None/False sentinels the stores return for unknown ids."""
    if value is None or value is False:
        raise HTTPException(status_code=404, detail=detail)
    return value


def with_recipe_dicts(items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Ranked/suggested items carry RecipeRecord objects; serialise them."""
    return [{**item, "recipe": item["recipe"].to_dict()} for item in items]
