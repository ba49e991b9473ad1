from fastapi import APIRouter, Depends, Query

from larder.api.routes.common import get_session, require

router = APIRouter(prefix="/api/ingredients", tags=["ingredients"])


@router.get("/search")
def search_ingredients(q: str = Query(...), limit: int = Query(10, ge=1, le=50), session=Depends(get_session)):
    """Ranked catalog search; queries shorter than 2 characters return nothing."""
    return [
        {**record.to_dict(), "score": score}
        for record, score in session.catalog.search_scored(q, limit)
    ]


@router.get("/categories")
def list_categories(session=Depends(get_session)):
    return [
        {**category.to_dict(), "count": len(session.catalog.by_category(category.id))}
        for category in session.catalog.categories()
    ]


@router.get("/category/{category_id}")
def ingredients_in_category(category_id: str, subcategory: str = None, session=Depends(get_session)):
    if subcategory:
        records = session.catalog.by_subcategory(category_id, subcategory)
    else:
        records = session.catalog.by_category(category_id)
    return [record.to_dict() for record in records]


@router.get("/{ingredient_id}")
def get_ingredient(ingredient_id: str, session=Depends(get_session)):
    record = require(session.catalog.get(ingredient_id), "Ingredient not found")
    return {
        **record.to_dict(),
        "in_pantry": ingredient_id in session.pantry,
        "reserved": session.reservations.reserved_quantity(ingredient_id),
        "available": session.reservations.available_quantity(ingredient_id),
    }
