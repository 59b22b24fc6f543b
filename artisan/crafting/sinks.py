# artisan/crafting/sinks.py
"""
Receivers for crafted outputs that do not live in the material ledger.

A sink is any object with
    receive(kind, target_id, amount, quality) -> bool
Returning False (or raising) marks the delivery as failed; the engine logs it and
moves on to the next result entry.
"""
from typing import Any, Dict, List, Optional

from artisan.crafting.types import CraftingQuality, ResultKind


class EquipmentStash:
    """Collects crafted equipment until the equipment system picks it up."""

    def __init__(self):
        self.items: List[Dict[str, Any]] = []

    def receive(self, kind: ResultKind, target_id: str, amount: int, quality: CraftingQuality) -> bool:
        if kind != ResultKind.EQUIPMENT or not target_id:
            return False
        self.items.append({"item_id": target_id, "amount": amount, "quality": quality})
        return True

    def count(self, item_id: str, quality: Optional[CraftingQuality] = None) -> int:
        return sum(entry["amount"] for entry in self.items
                   if entry["item_id"] == item_id and (quality is None or entry["quality"] == quality))

    def to_dict(self) -> List[Dict[str, Any]]:
        return [{"item_id": e["item_id"], "amount": e["amount"], "quality": e["quality"].name.lower()}
                for e in self.items]

    @classmethod
    def from_dict(cls, data: List[Dict[str, Any]]) -> 'EquipmentStash':
        stash = cls()
        for entry in data:
            stash.items.append({"item_id": entry["item_id"], "amount": int(entry.get("amount", 1)),
                                "quality": CraftingQuality.parse(entry.get("quality", "common"))})
        return stash
