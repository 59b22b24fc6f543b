# artisan/ledger/persistence.py
from typing import Dict, Any, TYPE_CHECKING, cast

from artisan.utils.logger import Logger

if TYPE_CHECKING:
    from artisan.ledger.core import MaterialLedger

class LedgerPersistenceMixin:
    """Mixin handling JSON serialization/deserialization."""

    def to_dict(self) -> Dict[str, Any]:
        """Only non-zero quantities are written."""
        ledger = cast('MaterialLedger', self)
        return {mat_id: qty for mat_id, qty in ledger.quantities.items() if qty > 0}

    def load_from_dict(self, data: Dict[str, Any]) -> None:
        """
        Replaces held quantities with saved ones. Materials missing from the catalog
        are dropped; amounts are clamped to the current caps.
        """
        ledger = cast('MaterialLedger', self)
        ledger.reset()
        for mat_id, qty in data.items():
            material = ledger.materials.get(mat_id)
            if not material:
                Logger.warning("MaterialLedger", f"Dropping saved material '{mat_id}': not in catalog.")
                continue
            try:
                amount = int(qty)
            except (TypeError, ValueError):
                Logger.warning("MaterialLedger", f"Ignoring invalid saved amount for '{mat_id}': {qty!r}")
                continue
            clamped = max(0, min(amount, material.max_stack_size))
            if clamped != amount:
                Logger.warning("MaterialLedger", f"Saved amount for '{mat_id}' ({amount}) clamped to {clamped}.")
            ledger.quantities[mat_id] = clamped
