from typing import Optional

from fastapi import APIRouter, Depends, Response

from larder.api.routes.common import get_session, parse_day, require
from larder.infra.pdf_utils import generate_pdf_for_shopping_list
from larder.logic.shopping.list_builder import group_by_category

router = APIRouter(prefix="/api", tags=["shopping"])


def _window(start, end):
    return parse_day(start, required=False), parse_day(end, required=False)


@router.get("/shopping-list")
def get_shopping_list(start: Optional[str] = None, end: Optional[str] = None, session=Depends(get_session)):
    first, last = _window(start, end)
    items = session.reservations.shopping_list(first, last)
    return {
        "items": [item.to_dict() for item in items],
        "by_category": {
            category: [item.to_dict() for item in grouped]
            for category, grouped in group_by_category(items).items()
        },
        "stats": session.reservations.stats(first, last),
    }


@router.get("/shopping-list/pdf")
def export_shopping_list_pdf(start: Optional[str] = None, end: Optional[str] = None, session=Depends(get_session)):
    first, last = _window(start, end)
    pdf_bytes = generate_pdf_for_shopping_list(session.reservations.shopping_list(first, last), start, end)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": "attachment; filename=shopping_list.pdf"},
    )


@router.get("/reservations/{ingredient_id}")
def get_reservations(ingredient_id: str, session=Depends(get_session)):
    require(session.catalog.get(ingredient_id), "Ingredient not found")
    return {
        "ingredient_id": ingredient_id,
        "on_hand": session.pantry.quantity_of(ingredient_id),
        "reserved": session.reservations.reserved_quantity(ingredient_id),
        "available": session.reservations.available_quantity(ingredient_id),
        "reservations": session.reservations.reservations(ingredient_id),
    }
