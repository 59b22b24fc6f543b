# artisan/crafting/persistence.py
from typing import Dict, Any, Optional, TYPE_CHECKING, cast

from artisan.config import SAVE_FORMAT_VERSION
from artisan.crafting.queue import QueueItem
from artisan.utils.logger import Logger

if TYPE_CHECKING:
    from artisan.crafting.crafting_manager import CraftingManager


class CraftingPersistenceMixin:
    """Mixin handling save/load of the whole crafting state."""

    def to_dict(self, policy: Optional[str] = None) -> Dict[str, Any]:
        """
        Serializes stations, mastery, materials, known recipes and the queue.
        Under the "refund" policy pending jobs are not written; their ingredients
        are folded back into the saved materials instead. `policy` overrides the
        configured in-flight policy.
        """
        manager = cast('CraftingManager', self)
        policy = policy or manager.settings.in_flight_policy

        materials = manager.ledger.to_dict()
        queue = []
        if policy == "persist":
            queue = [item.to_dict() for item in manager.queue.items if not item.completed]
        else:
            for item in manager.queue.items:
                recipe = manager.catalog.get_recipe(item.recipe_id)
                if item.completed or not recipe:
                    continue
                for mat_id, amount in recipe.material_costs(item.quantity).items():
                    material = manager.ledger.materials.get(mat_id)
                    if not material:
                        Logger.warning("CraftingManager", f"Cannot refund {amount} of unknown material "
                                                          f"'{mat_id}' from job {item.job_id}.")
                        continue
                    cap = material.max_stack_size
                    materials[mat_id] = min(cap, materials.get(mat_id, 0) + amount)

        return {
            "version": SAVE_FORMAT_VERSION,
            "stations": manager.stations.to_dict(),
            "mastery": manager.mastery.to_dict(),
            "materials": materials,
            "known_recipes": sorted(manager.known_recipes),
            "total_items_crafted": manager.total_items_crafted,
            "in_flight_policy": policy,
            "queue": queue,
        }

    def load_from_dict(self, data: Dict[str, Any]) -> None:
        """Replaces the current state with a saved one. Unknown ids are dropped with a warning."""
        manager = cast('CraftingManager', self)
        version = data.get("version", SAVE_FORMAT_VERSION)
        if version != SAVE_FORMAT_VERSION:
            Logger.warning("CraftingManager", f"Loading crafting data version {version} "
                                              f"(current {SAVE_FORMAT_VERSION}).")

        manager.stations.load_from_dict(data.get("stations", {}))
        manager.mastery.load_from_dict(data.get("mastery", {}))
        manager.ledger.load_from_dict(data.get("materials", {}))

        manager.known_recipes = set()
        manager._unlock_basic_recipes()
        for recipe_id in data.get("known_recipes", []):
            if recipe_id in manager.catalog.recipes:
                manager.known_recipes.add(recipe_id)
            else:
                Logger.warning("CraftingManager", f"Dropping unknown saved recipe '{recipe_id}'.")

        manager.total_items_crafted = max(0, int(data.get("total_items_crafted", 0)))

        manager.queue.clear()
        for entry in data.get("queue", []):
            try:
                item = QueueItem.from_dict(entry)
            except (KeyError, TypeError, ValueError) as e:
                Logger.warning("CraftingManager", f"Dropping malformed saved job {entry!r}: {e}")
                continue
            recipe = manager.catalog.get_recipe(item.recipe_id)
            if not recipe:
                Logger.warning("CraftingManager", f"Dropping saved job for unknown recipe '{item.recipe_id}'.")
                continue
            if not manager.queue.add(item):
                Logger.warning("CraftingManager", f"Queue full on load; refunding job {item.job_id}.")
                manager.ledger.add_many(recipe.material_costs(item.quantity))

        for kind in manager.mastery.levels:
            manager.mastery.check_level_up(kind)

        Logger.info("CraftingManager", f"Loaded crafting state: {len(manager.known_recipes)} recipes known, "
                                       f"{len(manager.queue)} job(s) in progress.")
