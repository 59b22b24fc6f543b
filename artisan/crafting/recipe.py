# artisan/crafting/recipe.py
from typing import List, Dict, Any, Optional

from artisan.crafting.errors import CatalogError
from artisan.crafting.types import CraftingQuality, RecipeCategory, ResultKind, StationKind

class Ingredient:
    def __init__(self, data: Dict[str, Any]):
        self.material_id: str = data.get("material_id", "")
        if not self.material_id:
            raise CatalogError("Ingredient is missing its material_id.")
        self.amount = int(data.get("amount", 1))
        if self.amount < 1:
            raise CatalogError(f"Ingredient '{self.material_id}' needs an amount of at least 1.")
        # Non-consumed ingredients act as catalysts and are never debited.
        self.consumed = bool(data.get("consumed", True))
        # Carried with the recipe; the ledger does not track per-unit quality.
        self.minimum_quality = CraftingQuality.parse(data.get("minimum_quality", "common"))

    def to_dict(self) -> Dict[str, Any]:
        return {"material_id": self.material_id, "amount": self.amount,
                "consumed": self.consumed, "minimum_quality": self.minimum_quality.name.lower()}


class RecipeResult:
    def __init__(self, data: Dict[str, Any]):
        try:
            self.kind = ResultKind(data.get("type", "material"))
        except ValueError:
            raise CatalogError(f"Unknown result type '{data.get('type')}'.")

        # Each kind names its target under its own key.
        if self.kind == ResultKind.MATERIAL:
            self.target_id = data.get("material_id", "")
        elif self.kind == ResultKind.EQUIPMENT:
            self.target_id = data.get("item_id", "")
        else:
            self.target_id = data.get("currency", "")

        self.amount = int(data.get("amount", 1))
        self.quality = CraftingQuality.parse(data.get("quality", "common"))
        self.chance = min(1.0, max(0.0, float(data.get("chance", 1.0))))

    def to_dict(self) -> Dict[str, Any]:
        key = {ResultKind.MATERIAL: "material_id", ResultKind.EQUIPMENT: "item_id",
               ResultKind.CURRENCY: "currency"}[self.kind]
        return {"type": self.kind.value, key: self.target_id, "amount": self.amount,
                "quality": self.quality.name.lower(), "chance": self.chance}


class Recipe:
    def __init__(self, recipe_id: str, data: Dict[str, Any]):
        self.recipe_id = recipe_id
        self.name = data.get("name", "Unknown Recipe")
        self.description = data.get("description", "Creates an item.")

        try:
            self.station = StationKind(data.get("station"))
        except ValueError:
            raise CatalogError(f"Recipe '{recipe_id}' requires unknown station '{data.get('station')}'.")
        self.specialization: str = data.get("specialization", "")

        try:
            self.category = RecipeCategory(data.get("category", "materials"))
        except ValueError:
            raise CatalogError(f"Recipe '{recipe_id}' has unknown category '{data.get('category')}'.")

        self.required_mastery = int(data.get("required_mastery", 1))
        self.base_crafting_time = float(data.get("base_crafting_time", 60.0))
        if self.base_crafting_time <= 0:
            raise CatalogError(f"Recipe '{recipe_id}' must take a positive amount of time.")
        self.experience_reward = int(data.get("experience_reward", 10))
        self.allow_batch = bool(data.get("allow_batch", True))

        self.ingredients: List[Ingredient] = [Ingredient(i) for i in data.get("ingredients", [])]
        self.results: List[RecipeResult] = [RecipeResult(r) for r in data.get("results", [])]

    @property
    def consumed_ingredients(self) -> List[Ingredient]:
        return [ing for ing in self.ingredients if ing.consumed]

    def material_costs(self, quantity: int = 1) -> Dict[str, int]:
        """Total consumed amount per material for a job of `quantity` units."""
        costs: Dict[str, int] = {}
        for ing in self.consumed_ingredients:
            costs[ing.material_id] = costs.get(ing.material_id, 0) + ing.amount * quantity
        return costs

    def __repr__(self) -> str:
        return f"Recipe({self.recipe_id}, station={self.station.value})"


class RecipeUnlockRequirement:
    """Gates that must all pass before a recipe can be learned."""

    def __init__(self, recipe_id: str, data: Dict[str, Any]):
        self.recipe_id = recipe_id
        self.required_player_level = int(data.get("required_player_level", 1))
        self.required_mastery_level = int(data.get("required_mastery_level", 1))
        self.prerequisite_recipes: List[str] = list(data.get("prerequisite_recipes", []))
        self.required_quest_id: Optional[str] = data.get("required_quest_id") or None

    @property
    def is_basic(self) -> bool:
        """Basic recipes are known from the start."""
        return (self.required_player_level <= 1 and self.required_mastery_level <= 1
                and not self.prerequisite_recipes and not self.required_quest_id)
