# artisan/crafting/settings.py
from typing import Any, Dict, List, Tuple

from artisan import config
from artisan.crafting.types import StationKind

# setting name -> config constant it defaults to
_DEFAULTS = {
    "max_queue_size": "MAX_QUEUE_SIZE",
    "max_batch_size": "MAX_BATCH_SIZE",
    "enable_batch_crafting": "ENABLE_BATCH_CRAFTING",
    "crafting_time_multiplier": "CRAFTING_TIME_MULTIPLIER",
    "mastery_speed_bonus_per_level": "MASTERY_SPEED_BONUS_PER_LEVEL",
    "mastery_speed_floor": "MASTERY_SPEED_FLOOR",
    "batch_efficiency_per_unit": "BATCH_EFFICIENCY_PER_UNIT",
    "batch_efficiency_floor": "BATCH_EFFICIENCY_FLOOR",
    "base_quality_upgrade_chance": "BASE_QUALITY_UPGRADE_CHANCE",
    "mastery_quality_bonus_per_level": "MASTERY_QUALITY_BONUS_PER_LEVEL",
    "mastery_base_experience": "MASTERY_BASE_EXPERIENCE",
    "mastery_experience_growth": "MASTERY_EXPERIENCE_GROWTH",
    "max_mastery_level": "MAX_MASTERY_LEVEL",
    "mastery_multi_level_up": "MASTERY_MULTI_LEVEL_UP",
    "station_speed_bonus_per_level": "STATION_SPEED_BONUS_PER_LEVEL",
    "station_quality_bonus_per_level": "STATION_QUALITY_BONUS_PER_LEVEL",
    "in_flight_policy": "IN_FLIGHT_POLICY",
    "debug_mode": "CRAFTING_DEBUG_MODE",
    "instant_crafting_in_debug": "INSTANT_CRAFTING_IN_DEBUG",
    "debug_instant_craft_seconds": "DEBUG_INSTANT_CRAFT_SECONDS",
}

IN_FLIGHT_POLICIES = ("persist", "refund")


class CraftingSettings:
    """
    Balance values for one engine instance.

    Defaults come from artisan.config; a catalog `balance` section and keyword
    overrides are applied on top, in that order.
    """

    def __init__(self, **overrides: Any):
        for name, constant in _DEFAULTS.items():
            setattr(self, name, getattr(config, constant))
        self.basic_stations: List[StationKind] = [StationKind(s) for s in config.BASIC_STATIONS]
        self.station_prerequisites: Dict[StationKind, Tuple[StationKind, int]] = {
            StationKind(kind): (StationKind(gate), int(level))
            for kind, (gate, level) in config.STATION_UNLOCK_PREREQUISITES.items()
        }
        self.update(overrides)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], **overrides: Any) -> 'CraftingSettings':
        settings = cls()
        settings.update(data)
        settings.update(overrides)
        return settings

    def update(self, values: Dict[str, Any]) -> None:
        for name, value in values.items():
            if name not in _DEFAULTS:
                raise ValueError(f"Unknown crafting setting '{name}'.")
            setattr(self, name, value)
        self.validate()

    def validate(self) -> None:
        if int(self.max_queue_size) < 1:
            raise ValueError("max_queue_size must be at least 1.")
        if int(self.max_batch_size) < 1:
            raise ValueError("max_batch_size must be at least 1.")
        if float(self.crafting_time_multiplier) <= 0:
            raise ValueError("crafting_time_multiplier must be positive.")
        if not 0 < float(self.mastery_speed_floor) <= 1:
            raise ValueError("mastery_speed_floor must be in (0, 1].")
        if not 0 < float(self.batch_efficiency_floor) <= 1:
            raise ValueError("batch_efficiency_floor must be in (0, 1].")
        for name in ("base_quality_upgrade_chance", "mastery_quality_bonus_per_level",
                     "mastery_speed_bonus_per_level", "batch_efficiency_per_unit"):
            if float(getattr(self, name)) < 0:
                raise ValueError(f"{name} must not be negative.")
        if int(self.max_mastery_level) < 1:
            raise ValueError("max_mastery_level must be at least 1.")
        if float(self.mastery_experience_growth) < 1:
            raise ValueError("mastery_experience_growth must be at least 1.")
        if self.in_flight_policy not in IN_FLIGHT_POLICIES:
            raise ValueError(f"in_flight_policy must be one of {IN_FLIGHT_POLICIES}.")

    def to_dict(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in _DEFAULTS}
