from fastapi import APIRouter, Depends, HTTPException

from larder.api.routes.common import get_session, require
from larder.logic.pantry.analysis import pantry_by_category, pantry_stats
from larder.utilities.export_import import DataExporter, DataImporter
from larder.utilities.validators import ImportRequest, PantryItemInput, PantryQuantityInput

router = APIRouter(prefix="/api/pantry", tags=["pantry"])


def _entry_view(session, entry):
    ingredient = session.catalog.get(entry.ingredient_id)
    return {
        **entry.to_dict(),
        "name": ingredient.name if ingredient else entry.ingredient_id,
        "category": ingredient.category if ingredient else "other",
        "reserved": session.reservations.reserved_quantity(entry.ingredient_id),
        "available": session.reservations.available_quantity(entry.ingredient_id),
    }


@router.get("")
def list_pantry(session=Depends(get_session)):
    return [_entry_view(session, entry) for entry in session.pantry.list()]


@router.get("/by-category")
def pantry_grouped(session=Depends(get_session)):
    return pantry_by_category(session.pantry, session.catalog)


@router.get("/stats")
def get_pantry_stats(session=Depends(get_session)):
    return pantry_stats(session.pantry, session.catalog)


@router.get("/export")
def export_pantry(session=Depends(get_session)):
    return DataExporter(session).export_pantry()


@router.post("/import")
def import_pantry(body: ImportRequest, session=Depends(get_session)):
    result = DataImporter(session).import_pantry(body.data, body.mode)
    if not result["success"]:
        raise HTTPException(status_code=400, detail=result["error"])
    return result


@router.post("", status_code=201)
def set_pantry_item(body: PantryItemInput, session=Depends(get_session)):
    entry = session.pantry.set(body.ingredient_id, body.quantity, body.unit, body.storage, body.notes)
    return _entry_view(session, require(entry, "Ingredient not found"))


@router.get("/{ingredient_id}")
def get_pantry_item(ingredient_id: str, session=Depends(get_session)):
    entry = require(session.pantry.get(ingredient_id), "Ingredient not in pantry")
    return {**_entry_view(session, entry), "reservations": session.reservations.reservations(ingredient_id)}


@router.put("/{ingredient_id}/quantity")
def update_pantry_quantity(ingredient_id: str, body: PantryQuantityInput, session=Depends(get_session)):
    entry = session.pantry.update_quantity(ingredient_id, body.quantity, body.unit)
    return _entry_view(session, require(entry, "Ingredient not in pantry"))


@router.delete("/{ingredient_id}")
def remove_pantry_item(ingredient_id: str, session=Depends(get_session)):
    require(session.pantry.remove(ingredient_id), "Ingredient not in pantry")
    return {"status": "ok", "removed": ingredient_id}


@router.delete("")
def clear_pantry(session=Depends(get_session)):
    session.pantry.clear()
    return {"status": "ok"}
