# artisan/crafting/types.py
"""
Closed enumerations shared by the crafting engine.

Station kinds, quality tiers, result kinds and currencies are keyed everywhere by
these enums. Tables keyed by an enum are checked for full coverage at import time
so that adding a new member without updating its tables fails immediately.
"""
from enum import Enum, IntEnum
from typing import Any, Dict, Iterable


class StationKind(str, Enum):
    FORGE = "forge"                        # Weapons, armor, tools
    WORKSHOP = "workshop"                  # Accessories, mechanical items
    ALCHEMY_LAB = "alchemy_lab"            # Potions, transmutation
    ENCHANTING_TABLE = "enchanting_table"  # Magical enhancements, runes
    SACRED_ALTAR = "sacred_altar"          # Divine items, ultimate equipment

    @property
    def display_name(self) -> str:
        return STATION_DISPLAY_NAMES[self]


class CraftingQuality(IntEnum):
    COMMON = 0
    UNCOMMON = 1
    RARE = 2
    EPIC = 3
    LEGENDARY = 4
    MYTHIC = 5

    @classmethod
    def top(cls) -> "CraftingQuality":
        return cls.MYTHIC

    @classmethod
    def parse(cls, value: Any) -> "CraftingQuality":
        """Accepts a member, its int rank or its (case-insensitive) name."""
        if isinstance(value, cls):
            return value
        if isinstance(value, int):
            return cls(value)
        return cls[str(value).strip().upper()]

    def upgraded(self) -> "CraftingQuality":
        """One rung up, clamped at the top of the ladder."""
        return CraftingQuality(min(self.value + 1, CraftingQuality.MYTHIC.value))

    @property
    def label(self) -> str:
        return self.name.title()


class ResultKind(str, Enum):
    MATERIAL = "material"
    EQUIPMENT = "equipment"
    CURRENCY = "currency"


class MaterialRarity(IntEnum):
    COMMON = 0
    UNCOMMON = 1
    RARE = 2
    EPIC = 3
    LEGENDARY = 4
    MYTHIC = 5

    @classmethod
    def parse(cls, value: Any) -> "MaterialRarity":
        if isinstance(value, int):
            return cls(value)
        return cls[str(value).strip().upper()]


class RecipeCategory(str, Enum):
    WEAPONS = "weapons"
    ARMOR = "armor"
    ACCESSORIES = "accessories"
    CONSUMABLES = "consumables"
    MATERIALS = "materials"
    ENCHANTMENTS = "enchantments"
    TOOLS = "tools"
    SPECIAL = "special"


class CurrencyType(str, Enum):
    COINS = "coins"
    SPIRIT_POINTS = "spirit_points"
    FOX_GEMS = "fox_gems"
    DIVINITY_POINTS = "divinity_points"
    VILLAGE_TOKENS = "village_tokens"


STATION_DISPLAY_NAMES: Dict[StationKind, str] = {
    StationKind.FORGE: "Blacksmith Forge",
    StationKind.WORKSHOP: "Artisan Workshop",
    StationKind.ALCHEMY_LAB: "Alchemy Laboratory",
    StationKind.ENCHANTING_TABLE: "Enchanting Table",
    StationKind.SACRED_ALTAR: "Sacred Altar",
}


def require_full_coverage(table: Dict[Any, Any], members: Iterable[Enum], table_name: str) -> None:
    missing = [m.value for m in members if m not in table]
    if missing:
        raise ValueError(f"{table_name} is missing entries for: {', '.join(str(m) for m in missing)}")


require_full_coverage(STATION_DISPLAY_NAMES, StationKind, "STATION_DISPLAY_NAMES")
