# artisan/ledger/material.py
from typing import Any, Dict

from artisan.config import DEFAULT_MATERIAL_STACK_SIZE
from artisan.crafting.errors import CatalogError
from artisan.crafting.types import MaterialRarity

class Material:
    """Immutable catalog entry for a stackable crafting material."""

    def __init__(self, material_id: str, data: Dict[str, Any]):
        if not material_id:
            raise CatalogError("Material id must be non-empty.")
        self.material_id = material_id
        self.name = data.get("name", material_id.replace("_", " ").title())
        self.description = data.get("description", "")
        try:
            self.rarity = MaterialRarity.parse(data.get("rarity", "common"))
        except (KeyError, ValueError):
            raise CatalogError(f"Material '{material_id}' has unknown rarity '{data.get('rarity')}'.")

        self.max_stack_size = int(data.get("max_stack_size", DEFAULT_MATERIAL_STACK_SIZE))
        if self.max_stack_size < 1:
            raise CatalogError(f"Material '{material_id}' must have a max stack size of at least 1.")
        self.tradeable = bool(data.get("tradeable", True))

    def __repr__(self) -> str:
        return f"Material({self.material_id}, cap={self.max_stack_size})"
