"""Recipe reference data: title, servings, ingredient lines and classification."""
from typing import List, Optional


class RecipeIngredient:
    def __init__(self, ingredient_id: str, quantity: float = 0, unit: str = "",
                 optional: bool = False, name: str = ""):
        self.ingredient_id = ingredient_id
        self.quantity = quantity
        self.unit = unit
        self.optional = bool(optional)
        self.name = name

    def scaled(self, servings: float, recipe_servings: int) -> float:
        '''Quantity needed for ``servings`` when the recipe yields ``recipe_servings``.'''
        return self.quantity * servings / (recipe_servings or 1)

    def __str__(self) -> str:
        flag = " (optional)" if self.optional else ""
        return f"{self.name or self.ingredient_id} - {self.quantity} {self.unit}{flag}"

    __repr__ = __str__

    @staticmethod
    def from_dict(data) -> "RecipeIngredient":
        d = dict(data) if isinstance(data, dict) else {}
        try:
            quantity = float(d.get("quantity", 0) or 0)
        except (TypeError, ValueError):
            quantity = 0.0
        return RecipeIngredient(
            ingredient_id=str(d.get("ingredientId", d.get("ingredient_id", ""))),
            quantity=quantity,
            unit=d.get("unit", "") or "",
            optional=d.get("optional", False),
            name=d.get("name", "") or "",
        )

    def to_dict(self):
        return {
            "ingredientId": self.ingredient_id,
            "quantity": self.quantity,
            "unit": self.unit,
            "optional": self.optional,
            "name": self.name,
        }


class RecipeRecord:
    def __init__(self, id: str, title: str = "", servings: int = 1,
                 ingredients: Optional[List[RecipeIngredient]] = None, cuisine: str = "",
                 difficulty: str = "", meal_types: Optional[List[str]] = None, description: str = ""):
        self.id = id
        self.title = title
        # servings is a divisor everywhere; never let it reach zero
        self.servings = max(1, int(servings or 1))
        self.ingredients = ingredients[:] if ingredients else []
        self.cuisine = cuisine or ""
        self.difficulty = difficulty or ""
        self.meal_types = meal_types[:] if meal_types else []
        self.description = description or ""

    @property
    def required_ingredients(self) -> List[RecipeIngredient]:
        return [i for i in self.ingredients if not i.optional]

    @property
    def optional_ingredients(self) -> List[RecipeIngredient]:
        return [i for i in self.ingredients if i.optional]

    def ingredient(self, ingredient_id: str) -> Optional[RecipeIngredient]:
        for line in self.ingredients:
            if line.ingredient_id == ingredient_id:
                return line
        return None

    def serves_meal_type(self, meal_type: str) -> bool:
        return meal_type in self.meal_types

    def __str__(self) -> str:
        return f"{self.title} - {self.servings} servings - {self.cuisine or 'any'} - {len(self.ingredients)} ingredients"

    __repr__ = __str__

    @staticmethod
    def from_dict(data) -> "RecipeRecord":
        d = dict(data) if isinstance(data, dict) else {}
        meal_types = d.get("mealType", d.get("meal_types", []))
        if isinstance(meal_types, str):
            meal_types = [meal_types]
        try:
            servings = int(d.get("servings", 1) or 1)
        except (TypeError, ValueError):
            servings = 1
        return RecipeRecord(
            id=str(d.get("id", "")),
            title=d.get("title", d.get("name", "")) or "",
            servings=servings,
            ingredients=[RecipeIngredient.from_dict(i) for i in d.get("ingredients", []) or []],
            cuisine=d.get("cuisine", ""),
            difficulty=d.get("difficulty", ""),
            meal_types=[m for m in meal_types or [] if isinstance(m, str)],
            description=d.get("description", ""),
        )

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "servings": self.servings,
            "ingredients": [i.to_dict() for i in self.ingredients],
            "cuisine": self.cuisine,
            "difficulty": self.difficulty,
            "mealType": self.meal_types,
            "description": self.description,
        }
