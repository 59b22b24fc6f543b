# tests/fixtures.py
import copy
import os
import random
import sys
import unittest
from typing import Any, Dict, List

# Get the absolute path to the project root (one level up from tests/)
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))

# Insert root into sys.path so we can import 'artisan'
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from artisan.core.events import CraftingEvent, CraftingEventType
from artisan.crafting.catalog import RecipeCatalog
from artisan.crafting.crafting_manager import CraftingManager
from artisan.crafting.settings import CraftingSettings
from artisan.crafting.sinks import EquipmentStash
from artisan.ledger.wallet import CurrencyWallet
from artisan.utils.logger import Logger

# Small, self-contained catalog so tests do not depend on data/crafting.
TEST_CATALOG: Dict[str, Any] = {
    "materials": {
        "ore": {"name": "Ore", "max_stack_size": 100},
        "coal": {"name": "Coal", "max_stack_size": 100},
        "ingot": {"name": "Ingot", "rarity": "uncommon", "max_stack_size": 50},
        "herb": {"name": "Herb"},
        "gem": {"name": "Gem", "rarity": "epic", "max_stack_size": 5},
        "tongs": {"name": "Tongs", "max_stack_size": 1},
    },
    "stations": {
        "forge": {
            "name": "Forge", "max_level": 3,
            "upgrade_costs": {
                "2": {"currency": {"coins": 100}, "materials": {"ingot": 2}},
                "3": {"currency": {"coins": 300}, "materials": {"ingot": 5}},
            },
        },
        "workshop": {"name": "Workshop"},
        "alchemy_lab": {"name": "Alchemy Lab", "unlock_cost": {"currency": {"coins": 50}}},
        "enchanting_table": {"name": "Enchanting Table", "base_speed_multiplier": 2.0},
        "sacred_altar": {"name": "Sacred Altar"},
    },
    "recipes": {
        "smelt": {
            "name": "Smelt Ingot", "station": "forge", "base_crafting_time": 60, "experience_reward": 10,
            "ingredients": [{"material_id": "ore", "amount": 2}, {"material_id": "coal", "amount": 1}],
            "results": [{"type": "material", "material_id": "ingot", "amount": 1}],
        },
        "blade": {
            "name": "Blade", "station": "forge", "category": "weapons", "base_crafting_time": 120,
            "experience_reward": 50, "allow_batch": False,
            "ingredients": [{"material_id": "ingot", "amount": 3},
                            {"material_id": "tongs", "amount": 1, "consumed": False}],
            "results": [{"type": "equipment", "item_id": "blade", "amount": 1, "quality": "common"}],
        },
        "mint": {
            "name": "Mint Coins", "station": "workshop", "category": "special", "base_crafting_time": 30,
            "experience_reward": 5,
            "ingredients": [{"material_id": "ingot", "amount": 1}],
            "results": [{"type": "currency", "currency": "coins", "amount": 10}],
        },
        "broken": {
            "name": "Broken Recipe", "station": "workshop", "base_crafting_time": 10, "experience_reward": 1,
            "ingredients": [{"material_id": "ore", "amount": 1}],
            "results": [
                {"type": "material", "material_id": "unobtainium", "amount": 1},
                {"type": "currency", "currency": "moon_dollars", "amount": 1},
                {"type": "material", "material_id": "coal", "amount": 2},
            ],
        },
        "relic": {
            "name": "Relic", "station": "workshop", "base_crafting_time": 10, "experience_reward": 1,
            "ingredients": [{"material_id": "herb", "amount": 1}],
            "results": [{"type": "equipment", "item_id": "relic", "amount": 1, "quality": "mythic"}],
        },
        "trinket": {
            "name": "Trinket", "station": "workshop", "base_crafting_time": 10, "experience_reward": 1,
            "ingredients": [{"material_id": "herb", "amount": 1}],
            "results": [{"type": "equipment", "item_id": "trinket", "amount": 1, "quality": "rare"}],
        },
        "potion": {
            "name": "Potion", "station": "alchemy_lab", "category": "consumables", "base_crafting_time": 60,
            "experience_reward": 20,
            "ingredients": [{"material_id": "herb", "amount": 2}],
            "results": [{"type": "equipment", "item_id": "potion", "amount": 1}],
        },
        "masterwork": {
            "name": "Masterwork", "station": "forge", "required_mastery": 5, "base_crafting_time": 300,
            "experience_reward": 100,
            "ingredients": [{"material_id": "ingot", "amount": 5}],
            "results": [{"type": "equipment", "item_id": "masterwork", "amount": 1, "quality": "rare"}],
        },
        "gem_cut": {
            "name": "Cut Gem", "station": "forge", "base_crafting_time": 30, "experience_reward": 5,
            "ingredients": [{"material_id": "ore", "amount": 1}],
            "results": [{"type": "material", "material_id": "gem", "amount": 1, "chance": 0.5}],
        },
    },
    "recipe_unlocks": {
        "masterwork": {"required_player_level": 5, "required_mastery_level": 5, "prerequisite_recipes": ["blade"]},
        "gem_cut": {"required_player_level": 2, "prerequisite_recipes": ["smelt"], "required_quest_id": "gem_quest"},
    },
}


class CraftingTestBase(unittest.TestCase):
    """Base class for crafting tests: a fresh engine on a fake clock with a seeded RNG."""

    seed = 1234

    def setUp(self):
        """Runs before EVERY test function."""
        # 1. Keep test output quiet but keep log history for assertions
        Logger.set_stream(None)
        Logger.clear_history()

        # 2. Fake clock
        self.now = 1000.0

        # 3. Catalog and collaborators
        self.catalog = RecipeCatalog.from_dict(copy.deepcopy(TEST_CATALOG))
        self.settings = self.make_settings()
        self.wallet = CurrencyWallet()
        self.stash = EquipmentStash()
        self.rng = random.Random(self.seed)

        # 4. Engine
        self.engine = CraftingManager(self.catalog, settings=self.settings, wallet=self.wallet,
                                      equipment_sink=self.stash, clock=lambda: self.now, rng=self.rng)

        # 5. Record every delivered event
        self.received: List[CraftingEvent] = []
        self.engine.events.subscribe(None, self.received.append)

    def tearDown(self):
        Logger.set_stream(sys.stderr)

    def make_settings(self) -> CraftingSettings:
        return CraftingSettings()

    def grant(self, **amounts: int):
        for material_id, amount in amounts.items():
            self.assertTrue(self.engine.add_material(material_id, amount), f"Could not grant {material_id}")

    def advance_time(self, seconds: float):
        self.now += seconds
        return self.engine.advance()

    def received_types(self) -> List[CraftingEventType]:
        return [e.type for e in self.received]

    def assertLogged(self, substring: str):
        """Custom helper to check that something was logged."""
        all_text = "\n".join(message for _, _, message in Logger.history())
        self.assertIn(substring, all_text, f"Expected log message '{substring}' not found.")
