# artisan/crafting/mastery.py
from typing import Dict, Any, List, Optional, TYPE_CHECKING

from artisan.core.events import CraftingEventType
from artisan.crafting.types import StationKind
from artisan.utils.logger import Logger

if TYPE_CHECKING:
    from artisan.core.events import EventDispatcher
    from artisan.crafting.settings import CraftingSettings


def build_requirement_table(base: int, growth: float, max_level: int) -> List[int]:
    """
    Accumulated experience needed to *be* at each level, index 0 = level 1.
    Experience is never reset on level-up, so these are absolute thresholds.
    """
    return [int(base * (growth ** i)) for i in range(max_level)]


class MasteryTracker:
    """Per-station mastery level and accumulated crafting experience."""

    def __init__(self, settings: 'CraftingSettings', events: Optional['EventDispatcher'] = None):
        self.max_level = int(settings.max_mastery_level)
        self.multi_level_up = bool(settings.mastery_multi_level_up)
        self.requirements = build_requirement_table(int(settings.mastery_base_experience),
                                                    float(settings.mastery_experience_growth),
                                                    self.max_level)
        self.events = events
        self.levels: Dict[StationKind, int] = {kind: 1 for kind in StationKind}
        self.experience: Dict[StationKind, int] = {kind: 0 for kind in StationKind}

    def get_requirement(self, level: int) -> Optional[int]:
        """Accumulated experience needed to reach `level`. None beyond the cap."""
        if level <= 0 or level > self.max_level:
            return None
        return self.requirements[level - 1]

    def get_level(self, station: StationKind) -> int:
        return self.levels.get(station, 1)

    def get_experience(self, station: StationKind) -> int:
        return self.experience.get(station, 0)

    def get_experience_to_next_level(self, station: StationKind) -> int:
        required = self.get_requirement(self.get_level(station) + 1)
        if required is None:
            return 0
        return max(0, required - self.get_experience(station))

    def get_level_progress(self, station: StationKind) -> float:
        """Fraction of the way from the current level's threshold to the next one."""
        level = self.get_level(station)
        next_req = self.get_requirement(level + 1)
        if next_req is None:
            return 1.0
        current_req = self.get_requirement(level) or 0
        span = next_req - current_req
        if span <= 0:
            return 1.0
        return max(0.0, min(1.0, (self.get_experience(station) - current_req) / span))

    def add_experience(self, station: StationKind, amount: int) -> List[int]:
        """Adds experience and handles leveling up. Returns the levels reached."""
        if amount <= 0:
            return []
        self.experience[station] = self.get_experience(station) + int(amount)
        return self.check_level_up(station)

    def check_level_up(self, station: StationKind) -> List[int]:
        reached = []
        while self.levels[station] < self.max_level:
            required = self.get_requirement(self.levels[station] + 1)
            if required is None or self.experience[station] < required:
                break
            old_level = self.levels[station]
            self.levels[station] = old_level + 1
            reached.append(old_level + 1)
            Logger.info("MasteryTracker", f"Mastery level up! {station.value}: {old_level} -> {old_level + 1}")
            if self.events:
                self.events.emit(CraftingEventType.MASTERY_LEVEL_UP, station=station,
                                 old_level=old_level, new_level=old_level + 1)
            if not self.multi_level_up:
                break
        return reached

    def to_dict(self) -> Dict[str, Any]:
        return {
            "levels": {kind.value: level for kind, level in self.levels.items()},
            "experience": {kind.value: exp for kind, exp in self.experience.items()},
        }

    def load_from_dict(self, data: Dict[str, Any]) -> None:
        for kind in StationKind:
            level = int(data.get("levels", {}).get(kind.value, 1))
            self.levels[kind] = max(1, min(level, self.max_level))
            self.experience[kind] = max(0, int(data.get("experience", {}).get(kind.value, 0)))
        for name in set(data.get("levels", {})) - {k.value for k in StationKind}:
            Logger.warning("MasteryTracker", f"Dropping mastery for unknown station '{name}'.")
