# artisan/crafting/catalog.py
"""
Read-only crafting data: materials, stations, recipes, recipe unlock requirements
and quality tiers. Loaded from the JSON files in the crafting data directory.

Every file is a JSON object that may contain any of these sections, each mapping
an id to its definition:

    materials, stations, recipes, recipe_unlocks, quality_tiers

plus an optional `balance` object of settings overrides. Sections from several
files are merged; a later file overrides earlier entries with the same id.
"""
import json
import os
from typing import Any, Dict, List, Optional

from artisan.config import CRAFTING_DATA_DIR, DEFAULT_QUALITY_MULTIPLIERS, DEFAULT_STATION_MAX_LEVEL
from artisan.crafting.errors import CatalogError
from artisan.crafting.recipe import Recipe, RecipeUnlockRequirement
from artisan.crafting.types import CraftingQuality, CurrencyType, ResultKind, StationKind
from artisan.ledger.material import Material
from artisan.utils.logger import Logger


class ResourceCost:
    """Currency and material amounts paid together, e.g. for a station upgrade."""

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        data = data or {}
        self.currency: Dict[CurrencyType, int] = {}
        for name, amount in data.get("currency", {}).items():
            try:
                self.currency[CurrencyType(name)] = int(amount)
            except ValueError:
                raise CatalogError(f"Unknown currency '{name}' in cost.")
        self.materials: Dict[str, int] = {m: int(a) for m, a in data.get("materials", {}).items()}

    def to_dict(self) -> Dict[str, Any]:
        return {"currency": {c.value: a for c, a in self.currency.items()}, "materials": dict(self.materials)}


class StationData:
    def __init__(self, kind: StationKind, data: Dict[str, Any]):
        self.kind = kind
        self.name = data.get("name", kind.display_name)
        self.description = data.get("description", "")
        self.specializations: List[str] = list(data.get("specializations", []))
        self.base_speed_multiplier = float(data.get("base_speed_multiplier", 1.0))
        if self.base_speed_multiplier <= 0:
            raise CatalogError(f"Station '{kind.value}' needs a positive speed multiplier.")
        self.max_level = int(data.get("max_level", DEFAULT_STATION_MAX_LEVEL))
        if self.max_level < 1:
            raise CatalogError(f"Station '{kind.value}' needs a max level of at least 1.")

        # target level -> cost of reaching it
        self.upgrade_costs: Dict[int, ResourceCost] = {
            int(level): ResourceCost(cost) for level, cost in data.get("upgrade_costs", {}).items()
        }
        unlock_cost = data.get("unlock_cost")
        self.unlock_cost: Optional[ResourceCost] = ResourceCost(unlock_cost) if unlock_cost else None


class QualityTierData:
    def __init__(self, quality: CraftingQuality, data: Dict[str, Any]):
        self.quality = quality
        self.name = data.get("name", quality.label)
        self.stat_multiplier = float(data.get("stat_multiplier", 1.0))


class RecipeCatalog:
    def __init__(self):
        self.materials: Dict[str, Material] = {}
        self.stations: Dict[StationKind, StationData] = {}
        self.recipes: Dict[str, Recipe] = {}
        self.recipe_unlocks: Dict[str, RecipeUnlockRequirement] = {}
        self.quality_tiers: Dict[CraftingQuality, QualityTierData] = {
            q: QualityTierData(q, {"stat_multiplier": DEFAULT_QUALITY_MULTIPLIERS[q.name.lower()]})
            for q in CraftingQuality
        }
        self.balance: Dict[str, Any] = {}

    # --- Loading ---

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RecipeCatalog":
        catalog = cls()
        catalog.merge(data)
        return catalog

    @classmethod
    def load_directory(cls, directory: str = CRAFTING_DATA_DIR) -> "RecipeCatalog":
        """Loads all catalog JSON files from a directory, in file name order."""
        catalog = cls()
        if not os.path.isdir(directory):
            Logger.warning("RecipeCatalog", f"Crafting data directory not found: {directory}")
            return catalog

        for filename in sorted(os.listdir(directory)):
            if not filename.endswith(".json"):
                continue
            file_path = os.path.join(directory, filename)
            try:
                with open(file_path, 'r') as f:
                    data = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                Logger.error("RecipeCatalog", f"Error loading crafting data from {filename}: {e}")
                continue
            catalog.merge(data, source=filename)

        Logger.info("RecipeCatalog", f"Loaded {len(catalog.recipes)} recipes, {len(catalog.materials)} materials, "
                                     f"{len(catalog.stations)} stations.")
        return catalog

    def merge(self, data: Dict[str, Any], source: str = "<dict>") -> None:
        """Parses one catalog document into this catalog. Bad entries are logged and skipped."""
        for mat_id, mat_data in data.get("materials", {}).items():
            try:
                self.materials[mat_id] = Material(mat_id, mat_data)
            except (CatalogError, TypeError, ValueError) as e:
                Logger.error("RecipeCatalog", f"[{source}] Skipping material '{mat_id}': {e}")

        for kind_name, station_data in data.get("stations", {}).items():
            try:
                kind = StationKind(kind_name)
                self.stations[kind] = StationData(kind, station_data)
            except (CatalogError, TypeError, ValueError) as e:
                Logger.error("RecipeCatalog", f"[{source}] Skipping station '{kind_name}': {e}")

        for r_id, r_data in data.get("recipes", {}).items():
            try:
                self.recipes[r_id] = Recipe(r_id, r_data)
            except (CatalogError, KeyError, TypeError, ValueError) as e:
                Logger.error("RecipeCatalog", f"[{source}] Skipping recipe '{r_id}': {e}")

        for r_id, u_data in data.get("recipe_unlocks", {}).items():
            try:
                self.recipe_unlocks[r_id] = RecipeUnlockRequirement(r_id, u_data)
            except (TypeError, ValueError) as e:
                Logger.error("RecipeCatalog", f"[{source}] Skipping unlock requirement '{r_id}': {e}")

        for q_name, q_data in data.get("quality_tiers", {}).items():
            try:
                quality = CraftingQuality.parse(q_name)
                self.quality_tiers[quality] = QualityTierData(quality, q_data)
            except (KeyError, TypeError, ValueError) as e:
                Logger.error("RecipeCatalog", f"[{source}] Skipping quality tier '{q_name}': {e}")

        self.balance.update(data.get("balance", {}))

    # --- Lookups ---

    def get_recipe(self, recipe_id: str) -> Optional[Recipe]:
        return self.recipes.get(recipe_id)

    def get_material(self, material_id: str) -> Optional[Material]:
        return self.materials.get(material_id)

    def get_station_data(self, kind: StationKind) -> Optional[StationData]:
        return self.stations.get(kind)

    def get_quality_tier(self, quality: CraftingQuality) -> QualityTierData:
        return self.quality_tiers[quality]

    def get_unlock_requirement(self, recipe_id: str) -> Optional[RecipeUnlockRequirement]:
        return self.recipe_unlocks.get(recipe_id)

    def recipes_for_station(self, kind: StationKind) -> List[Recipe]:
        return [r for r in self.recipes.values() if r.station == kind]

    def validate(self) -> List[str]:
        """Returns human-readable warnings about inconsistent data. Also logs them."""
        warnings = []
        for kind in StationKind:
            if kind not in self.stations:
                warnings.append(f"Station '{kind.value}' has no definition; defaults will be used.")

        for recipe in self.recipes.values():
            if not recipe.ingredients:
                warnings.append(f"Recipe '{recipe.recipe_id}' has no ingredients.")
            if not recipe.results:
                warnings.append(f"Recipe '{recipe.recipe_id}' produces nothing.")
            for ing in recipe.ingredients:
                if ing.material_id not in self.materials:
                    warnings.append(f"Recipe '{recipe.recipe_id}' uses unknown material '{ing.material_id}'.")
            for res in recipe.results:
                if res.kind == ResultKind.MATERIAL and res.target_id not in self.materials:
                    warnings.append(f"Recipe '{recipe.recipe_id}' produces unknown material '{res.target_id}'.")
            station = self.stations.get(recipe.station)
            if station and recipe.specialization and station.specializations \
                    and recipe.specialization not in station.specializations:
                warnings.append(f"Recipe '{recipe.recipe_id}' needs specialization '{recipe.specialization}' "
                                f"which {station.name} does not offer.")

        for r_id, req in self.recipe_unlocks.items():
            if r_id not in self.recipes:
                warnings.append(f"Unlock requirement for unknown recipe '{r_id}'.")
            for prereq in req.prerequisite_recipes:
                if prereq not in self.recipes:
                    warnings.append(f"Recipe '{r_id}' requires unknown recipe '{prereq}'.")

        for w in warnings:
            Logger.warning("RecipeCatalog", w)
        return warnings
