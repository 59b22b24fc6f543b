# artisan/ledger/core.py
from typing import Dict, Mapping, Optional, Tuple, TYPE_CHECKING

from artisan.core.events import CraftingEventType
from artisan.crafting.errors import LedgerInvariantError
from artisan.ledger.material import Material
from artisan.utils.logger import Logger
from .persistence import LedgerPersistenceMixin

if TYPE_CHECKING:
    from artisan.core.events import EventDispatcher

class MaterialLedger(LedgerPersistenceMixin):
    """
    Tracks how much of each catalog material is held.
    Every material starts at 0 and is capped at its max stack size.
    Persistence is handled by the mixin.
    """

    def __init__(self, materials: Mapping[str, Material], events: Optional['EventDispatcher'] = None,
                 strict: bool = False):
        self.materials: Dict[str, Material] = dict(materials)
        self.quantities: Dict[str, int] = {mat_id: 0 for mat_id in self.materials}
        self.events = events
        # strict: invariant violations raise instead of being clamped
        self.strict = strict

    def add(self, material_id: str, amount: int) -> Tuple[bool, int, int]:
        """
        Credits a material, clamping the total at its cap.
        Returns (success, old_amount, new_amount).
        """
        old_amount = self.query(material_id)
        material = self.materials.get(material_id)
        if not material or amount <= 0:
            return False, old_amount, old_amount

        new_amount = min(old_amount + amount, material.max_stack_size)
        if new_amount < old_amount + amount:
            Logger.debug("MaterialLedger", f"{material_id} capped at {material.max_stack_size} "
                                           f"({old_amount + amount - new_amount} lost).")
        self._set(material_id, new_amount)
        self._notify(material_id, old_amount, new_amount)
        return True, old_amount, new_amount

    def remove(self, material_id: str, amount: int) -> Tuple[bool, int, int]:
        """
        Debits a material. Fails without changing anything if not enough is held.
        Returns (success, old_amount, new_amount).
        """
        current_amount = self.query(material_id)
        if amount <= 0 or current_amount < amount:
            return False, current_amount, current_amount

        new_amount = current_amount - amount
        self._set(material_id, new_amount)
        self._notify(material_id, current_amount, new_amount)
        return True, current_amount, new_amount

    def query(self, material_id: str) -> int:
        return self.quantities.get(material_id, 0)

    def has(self, material_id: str, amount: int = 1) -> bool:
        return self.query(material_id) >= amount

    def can_afford(self, costs: Mapping[str, int]) -> bool:
        return all(self.has(mat_id, amount) for mat_id, amount in costs.items() if amount > 0)

    def missing(self, costs: Mapping[str, int]) -> Dict[str, int]:
        """Shortfall per material for a set of costs."""
        return {mat_id: amount - self.query(mat_id) for mat_id, amount in costs.items()
                if amount > 0 and self.query(mat_id) < amount}

    def remove_many(self, costs: Mapping[str, int]) -> bool:
        """Debits every cost or nothing at all."""
        if not self.can_afford(costs):
            return False
        for mat_id, amount in costs.items():
            if amount > 0:
                self.remove(mat_id, amount)
        return True

    def add_many(self, amounts: Mapping[str, int]) -> Dict[str, int]:
        """Credits several materials. Returns the amount actually added per material."""
        added = {}
        for mat_id, amount in amounts.items():
            success, old_amount, new_amount = self.add(mat_id, amount)
            if success:
                added[mat_id] = new_amount - old_amount
            elif amount > 0:
                Logger.warning("MaterialLedger", f"Could not credit {amount} of unknown material '{mat_id}'.")
        return added

    def snapshot(self) -> Dict[str, int]:
        return dict(self.quantities)

    def reset(self) -> None:
        for mat_id in self.quantities:
            self.quantities[mat_id] = 0

    def _set(self, material_id: str, value: int) -> None:
        cap = self.materials[material_id].max_stack_size
        if value < 0 or value > cap:
            message = f"Attempted to set {material_id} to {value} (allowed 0..{cap})."
            if self.strict:
                raise LedgerInvariantError(message)
            Logger.error("MaterialLedger", message + " Clamping.")
            value = max(0, min(value, cap))
        self.quantities[material_id] = value

    def _notify(self, material_id: str, old_amount: int, new_amount: int) -> None:
        if self.events and old_amount != new_amount:
            self.events.emit(CraftingEventType.MATERIAL_CHANGED, material_id=material_id,
                             old_amount=old_amount, new_amount=new_amount)
