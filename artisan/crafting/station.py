# artisan/crafting/station.py
from typing import Any, Dict, List, Optional, Tuple, TYPE_CHECKING

from artisan.core.events import CraftingEventType
from artisan.crafting.catalog import ResourceCost, StationData
from artisan.crafting.errors import CraftFailure
from artisan.crafting.types import StationKind
from artisan.utils.logger import Logger

if TYPE_CHECKING:
    from artisan.core.events import EventDispatcher
    from artisan.crafting.catalog import RecipeCatalog
    from artisan.crafting.mastery import MasteryTracker
    from artisan.crafting.settings import CraftingSettings
    from artisan.ledger.core import MaterialLedger
    from artisan.ledger.wallet import CurrencyWallet


class CraftingStation:
    """A single station: its level, unlock state and level-based bonuses."""

    def __init__(self, data: StationData, settings: 'CraftingSettings'):
        self.data = data
        self.kind = data.kind
        self.level = 1
        self.unlocked = False
        self._speed_bonus_per_level = float(settings.station_speed_bonus_per_level)
        self._quality_bonus_per_level = float(settings.station_quality_bonus_per_level)

    @property
    def name(self) -> str:
        return self.data.name

    @property
    def max_level(self) -> int:
        return self.data.max_level

    @property
    def is_max_level(self) -> bool:
        return self.level >= self.max_level

    def get_speed_multiplier(self) -> float:
        # 10% per level above 1 by default
        level_bonus = 1.0 + (self.level - 1) * self._speed_bonus_per_level
        return self.data.base_speed_multiplier * level_bonus

    def get_quality_bonus(self) -> float:
        """Advisory only; quality rolls do not use it yet."""
        return (self.level - 1) * self._quality_bonus_per_level

    def get_upgrade_cost(self, target_level: int) -> Optional[ResourceCost]:
        return self.data.upgrade_costs.get(target_level)

    def get_current_upgrade_cost(self) -> Optional[ResourceCost]:
        return self.get_upgrade_cost(self.level + 1)

    def get_status_text(self) -> str:
        if not self.unlocked: return "Locked"
        if self.is_max_level: return "Max Level"
        return f"Level {self.level}"

    def __str__(self) -> str:
        return f"{self.name} ({self.level}/{self.max_level}) - {self.get_status_text()}"


class StationRegistry:
    """
    Owns one station per StationKind.
    Upgrades and unlocks are paid from the material ledger and the currency wallet.
    """

    def __init__(self, catalog: 'RecipeCatalog', settings: 'CraftingSettings', ledger: 'MaterialLedger',
                 mastery: 'MasteryTracker', wallet: Optional['CurrencyWallet'] = None,
                 events: Optional['EventDispatcher'] = None):
        self.settings = settings
        self.ledger = ledger
        self.mastery = mastery
        self.wallet = wallet
        self.events = events
        self.stations: Dict[StationKind, CraftingStation] = {}

        for kind in StationKind:
            data = catalog.get_station_data(kind)
            if not data:
                Logger.warning("StationRegistry", f"No data for station '{kind.value}', using defaults.")
                data = StationData(kind, {})
            self.stations[kind] = CraftingStation(data, settings)

        for kind in settings.basic_stations:
            self.stations[kind].unlocked = True

    def get(self, kind: StationKind) -> CraftingStation:
        return self.stations[kind]

    def all(self) -> List[CraftingStation]:
        return [self.stations[kind] for kind in StationKind]

    def is_unlocked(self, kind: StationKind) -> bool:
        station = self.stations.get(kind)
        return bool(station and station.unlocked)

    # --- Unlocking ---

    def is_prerequisite_met(self, kind: StationKind) -> bool:
        if kind in self.settings.basic_stations:
            return True
        prerequisite = self.settings.station_prerequisites.get(kind)
        if not prerequisite:
            return False
        gate_station, required_level = prerequisite
        return self.mastery.get_level(gate_station) >= required_level

    def describe_prerequisite(self, kind: StationKind) -> str:
        if kind in self.settings.basic_stations:
            return "Always available"
        prerequisite = self.settings.station_prerequisites.get(kind)
        if not prerequisite:
            return "Unavailable"
        gate_station, required_level = prerequisite
        return f"{self.stations[gate_station].name} mastery {required_level}"

    def can_unlock(self, kind: StationKind) -> Tuple[bool, str]:
        station = self.stations.get(kind)
        if not station:
            return False, CraftFailure.UNKNOWN_STATION
        if station.unlocked:
            return True, ""
        if not self.is_prerequisite_met(kind):
            return False, CraftFailure.PREREQUISITE_NOT_MET
        if station.data.unlock_cost:
            return self._can_pay(station.data.unlock_cost)
        return True, ""

    def unlock(self, kind: StationKind) -> Tuple[bool, str]:
        """Unlocks a station once its prerequisite is met. Unlocking twice is a no-op."""
        ok, reason = self.can_unlock(kind)
        if not ok:
            return False, reason

        station = self.stations[kind]
        if station.unlocked:
            return True, ""

        if station.data.unlock_cost and not self._pay(station.data.unlock_cost):
            return False, CraftFailure.INSUFFICIENT_MATERIALS

        station.unlocked = True
        Logger.info("StationRegistry", f"{station.name} unlocked!")
        if self.events:
            self.events.emit(CraftingEventType.STATION_UNLOCKED, station=kind)
        return True, ""

    # --- Upgrading ---

    def can_upgrade(self, kind: StationKind) -> Tuple[bool, str]:
        station = self.stations.get(kind)
        if not station:
            return False, CraftFailure.UNKNOWN_STATION
        if not station.unlocked:
            return False, CraftFailure.STATION_LOCKED
        if station.is_max_level:
            return False, CraftFailure.STATION_MAX_LEVEL
        cost = station.get_current_upgrade_cost()
        if cost is None:
            return False, CraftFailure.NO_UPGRADE_PATH
        return self._can_pay(cost)

    def upgrade(self, kind: StationKind) -> Tuple[bool, str]:
        """Pays the next level's cost and raises the station exactly one level."""
        ok, reason = self.can_upgrade(kind)
        if not ok:
            return False, reason

        station = self.stations[kind]
        cost = station.get_current_upgrade_cost()
        if cost is None or not self._pay(cost):
            return False, CraftFailure.INSUFFICIENT_MATERIALS

        old_level = station.level
        station.level += 1
        Logger.info("StationRegistry", f"{station.name} upgraded to level {station.level}")
        if self.events:
            self.events.emit(CraftingEventType.STATION_UPGRADED, station=kind,
                             old_level=old_level, new_level=station.level)
        return True, ""

    # --- Costs ---

    def _can_pay(self, cost: ResourceCost) -> Tuple[bool, str]:
        if any(cost.currency.values()):
            if not self.wallet or not self.wallet.can_afford(cost.currency):
                return False, CraftFailure.INSUFFICIENT_CURRENCY
        if not self.ledger.can_afford(cost.materials):
            return False, CraftFailure.INSUFFICIENT_MATERIALS
        return True, ""

    def _pay(self, cost: ResourceCost) -> bool:
        """Debits currency and materials together, or neither."""
        if not self._can_pay(cost)[0]:
            return False
        if any(cost.currency.values()) and not self.wallet.debit_many(cost.currency):
            return False
        if not self.ledger.remove_many(cost.materials):
            if self.wallet:
                self.wallet.credit_many(cost.currency)
            return False
        return True

    # --- Persistence ---

    def to_dict(self) -> Dict[str, Any]:
        return {kind.value: {"level": s.level, "unlocked": s.unlocked} for kind, s in self.stations.items()}

    def load_from_dict(self, data: Dict[str, Any]) -> None:
        for name, state in data.items():
            try:
                kind = StationKind(name)
            except ValueError:
                Logger.warning("StationRegistry", f"Dropping saved state for unknown station '{name}'.")
                continue
            station = self.stations[kind]
            station.level = max(1, min(int(state.get("level", 1)), station.max_level))
            station.unlocked = bool(state.get("unlocked", False)) or kind in self.settings.basic_stations
