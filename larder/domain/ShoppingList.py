"""ShoppingListItem: derived line of the shopping list (never persisted)."""


class ShoppingListItem:
    def __init__(self, ingredient_id: str, name: str, unit: str, category: str,
                 needed: float, available: float):
        self.ingredient_id = ingredient_id
        self.name = name
        self.unit = unit
        self.category = category
        self.needed = needed
        self.available = available

    @property
    def shortage(self) -> float:
        return round(max(0.0, self.needed - self.available), 3)

    def __str__(self) -> str:
        return f"{self.name} - {self.shortage} {self.unit} (need {self.needed}, have {self.available})"

    __repr__ = __str__

    def to_dict(self):
        return {
            "ingredientId": self.ingredient_id,
            "name": self.name,
            "unit": self.unit,
            "category": self.category,
            "needed": round(self.needed, 3),
            "available": round(self.available, 3),
            "shortage": self.shortage,
        }
