# tests/test_recipe_unlocks.py
from tests.fixtures import CraftingTestBase
from artisan.core.events import CraftingEventType
from artisan.crafting.errors import CraftFailure
from artisan.crafting.types import StationKind


class TestRecipeUnlocks(CraftingTestBase):

    def test_basic_recipes_known_from_start(self):
        """Verify recipes without unlock gates are known immediately, gated ones are not."""
        self.assertTrue(self.engine.is_recipe_known("smelt"))
        self.assertTrue(self.engine.is_recipe_known("potion"))
        self.assertFalse(self.engine.is_recipe_known("masterwork"))
        self.assertFalse(self.engine.is_recipe_known("gem_cut"))

    def test_unlock_recipe_fires_once(self):
        self.assertTrue(self.engine.unlock_recipe("masterwork"))
        self.assertFalse(self.engine.unlock_recipe("masterwork"))
        self.assertFalse(self.engine.unlock_recipe("nope"))

        self.engine.flush_events()
        unlocked = [e.data["recipe_id"] for e in self.received if e.type == CraftingEventType.RECIPE_UNLOCKED]
        self.assertEqual(unlocked, ["masterwork"])

    def test_gates_checked_in_order(self):
        engine = self.engine
        self.assertEqual(engine.try_unlock_recipe("masterwork", player_level=1),
                         (False, CraftFailure.PLAYER_LEVEL_TOO_LOW))
        self.assertEqual(engine.try_unlock_recipe("masterwork", player_level=5),
                         (False, CraftFailure.INSUFFICIENT_MASTERY))

        engine.mastery.levels[StationKind.FORGE] = 5
        self.assertEqual(engine.try_unlock_recipe("masterwork", player_level=5), (True, ""))
        self.assertTrue(engine.is_recipe_known("masterwork"))

    def test_quest_gate(self):
        self.assertEqual(self.engine.try_unlock_recipe("gem_cut", player_level=2),
                         (False, CraftFailure.QUEST_NOT_COMPLETED))
        self.assertEqual(self.engine.try_unlock_recipe("gem_cut", player_level=2, completed_quests=["gem_quest"]),
                         (True, ""))

    def test_prerequisite_recipe_gate(self):
        self.engine.known_recipes.discard("smelt")
        self.assertEqual(self.engine.try_unlock_recipe("gem_cut", 2, ["gem_quest"]),
                         (False, CraftFailure.PREREQUISITE_RECIPE_MISSING))

    def test_unknown_recipe(self):
        self.assertEqual(self.engine.try_unlock_recipe("nope"), (False, CraftFailure.UNKNOWN_RECIPE))

    def test_unlock_eligible_recipes(self):
        self.engine.mastery.levels[StationKind.FORGE] = 5
        learned = self.engine.unlock_eligible_recipes(player_level=5, completed_quests=["gem_quest"])
        self.assertEqual(sorted(learned), ["gem_cut", "masterwork"])
        self.assertEqual(self.engine.unlock_eligible_recipes(player_level=5, completed_quests=["gem_quest"]), [])

    def test_available_recipes_respect_mastery(self):
        self.engine.unlock_recipe("masterwork")
        available = {r.recipe_id for r in self.engine.get_available_recipes(StationKind.FORGE)}
        self.assertEqual(available, {"smelt", "blade"})

        self.engine.mastery.levels[StationKind.FORGE] = 5
        available = {r.recipe_id for r in self.engine.get_available_recipes("forge")}
        self.assertEqual(available, {"smelt", "blade", "masterwork"})
        self.assertEqual(self.engine.get_available_recipes("loom"), [])
