# artisan/core/save_manager.py
"""
Handles saving and loading of the crafting state to and from files.
"""
import json
import os
import time
from typing import TYPE_CHECKING, Any, Dict, Optional

from artisan.config import DEFAULT_SAVE_FILE, SAVE_FORMAT_VERSION, SAVE_GAME_DIR
from artisan.crafting.sinks import EquipmentStash
from artisan.ledger.wallet import CurrencyWallet
from artisan.utils.logger import Logger

if TYPE_CHECKING:
    from artisan.crafting.crafting_manager import CraftingManager


class SaveManager:
    def __init__(self, engine: 'CraftingManager', save_dir: str = SAVE_GAME_DIR):
        self.engine = engine
        self.save_dir = save_dir

    def save(self, filename: str = DEFAULT_SAVE_FILE) -> bool:
        """Saves the current crafting state to a JSON file."""
        save_path = self._resolve_save_path(filename, self.save_dir)
        if not save_path: return False
        Logger.info("SaveManager", f"Saving game to {save_path}...")
        try:
            save_data = {
                "save_format_version": SAVE_FORMAT_VERSION,
                "save_name": os.path.splitext(os.path.basename(save_path))[0],
                "timestamp": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
                "crafting": self.engine.to_dict(),
                "wallet": self.engine.wallet.to_dict(),
            }
            if isinstance(self.engine.equipment_sink, EquipmentStash):
                save_data["equipment"] = self.engine.equipment_sink.to_dict()

            with open(save_path, 'w') as f: json.dump(save_data, f, indent=2)
            Logger.info("SaveManager", f"Game saved successfully to {save_path}.")
            return True
        except Exception as e:
            Logger.error("SaveManager", f"Error saving game: {e}")
            return False

    def load(self, filename: str = DEFAULT_SAVE_FILE) -> bool:
        """
        Loads crafting state from a file. A missing file leaves the fresh state in place.
        Returns False only if the file exists but could not be read.
        """
        save_path = self._resolve_load_path(filename, self.save_dir)
        if not save_path:
            Logger.warning("SaveManager", f"Save file not found: {filename}. Starting fresh.")
            return True

        Logger.info("SaveManager", f"Loading save game from {save_path}...")
        snapshot = self._snapshot()
        try:
            with open(save_path, 'r') as f: save_data = json.load(f)

            version = save_data.get("save_format_version", SAVE_FORMAT_VERSION)
            if version > SAVE_FORMAT_VERSION:
                Logger.warning("SaveManager", f"Save '{filename}' is from a newer format ({version}).")

            # 1. Wallet and equipment first so station costs see the right balances
            wallet = CurrencyWallet.from_dict(save_data.get("wallet", {}))
            self.engine.wallet.balances = wallet.balances
            if isinstance(self.engine.equipment_sink, EquipmentStash):
                stash = EquipmentStash.from_dict(save_data.get("equipment", []))
                self.engine.equipment_sink.items = stash.items

            # 2. Crafting state
            self.engine.load_from_dict(save_data.get("crafting", {}))
            return True
        except Exception as e:
            Logger.error("SaveManager", f"Critical Error loading save game '{filename}': {e}")
            self._restore(snapshot)
            return False

    def _snapshot(self) -> Dict[str, Any]:
        """Current state, queue included, so a failed load can be rolled back."""
        snapshot = {
            "crafting": self.engine.to_dict(policy="persist"),
            "wallet": dict(self.engine.wallet.balances),
        }
        if isinstance(self.engine.equipment_sink, EquipmentStash):
            snapshot["equipment"] = list(self.engine.equipment_sink.items)
        return snapshot

    def _restore(self, snapshot: Dict[str, Any]) -> None:
        self.engine.wallet.balances = snapshot["wallet"]
        if "equipment" in snapshot:
            self.engine.equipment_sink.items = snapshot["equipment"]
        self.engine.load_from_dict(snapshot["crafting"])
        Logger.warning("SaveManager", "Restored the previous state after a failed load.")

    def delete(self, filename: str) -> bool:
        save_path = self._resolve_load_path(filename, self.save_dir)
        if not save_path: return False
        try:
            os.remove(save_path)
            Logger.info("SaveManager", f"Deleted save {save_path}.")
            return True
        except OSError as e:
            Logger.error("SaveManager", f"Error deleting save '{filename}': {e}")
            return False

    def _resolve_save_path(self, filename: str, base_dir: str) -> Optional[str]:
        try:
            os.makedirs(base_dir, exist_ok=True)
            return os.path.abspath(os.path.join(base_dir, self._safe_filename(filename)))
        except Exception as e:
            Logger.error("SaveManager", f"Error resolving save path '{filename}': {e}")
            return None

    def _resolve_load_path(self, filename: str, base_dir: str) -> Optional[str]:
        path = os.path.abspath(os.path.join(base_dir, self._safe_filename(filename)))
        if os.path.exists(path): return path
        return None

    @staticmethod
    def _safe_filename(filename: str) -> str:
        safe_filename = "".join(c for c in filename if c.isalnum() or c in ('_', '-', '.')).lstrip('.')
        if not safe_filename: safe_filename = DEFAULT_SAVE_FILE
        if not safe_filename.endswith(".json"): safe_filename += ".json"
        return safe_filename
