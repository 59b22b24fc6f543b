# tests/test_recipe_catalog.py
import json
import os
import shutil
import tempfile

from tests.fixtures import CraftingTestBase
from artisan.config import CRAFTING_DATA_DIR
from artisan.crafting.catalog import RecipeCatalog
from artisan.crafting.types import CraftingQuality, CurrencyType, ResultKind, StationKind


class TestRecipeCatalog(CraftingTestBase):

    def test_recipe_fields_parsed(self):
        recipe = self.catalog.get_recipe("blade")
        self.assertEqual(recipe.station, StationKind.FORGE)
        self.assertFalse(recipe.allow_batch)
        self.assertEqual(recipe.base_crafting_time, 120.0)
        self.assertEqual([i.material_id for i in recipe.ingredients], ["ingot", "tongs"])
        self.assertEqual(recipe.material_costs(2), {"ingot": 6})
        self.assertEqual(recipe.results[0].kind, ResultKind.EQUIPMENT)
        self.assertEqual(recipe.results[0].target_id, "blade")

    def test_result_chance_clamped(self):
        catalog = RecipeCatalog.from_dict({"recipes": {"r": {
            "station": "forge", "results": [{"type": "material", "material_id": "x", "chance": 3}]}}})
        self.assertEqual(catalog.get_recipe("r").results[0].chance, 1.0)

    def test_bad_entries_are_skipped(self):
        """Verify malformed entries are logged and skipped without losing the good ones."""
        catalog = RecipeCatalog.from_dict({
            "materials": {"ok": {}, "bad": {"max_stack_size": 0}},
            "recipes": {
                "fine": {"station": "forge"},
                "no_station": {"station": "loom"},
                "instant": {"station": "forge", "base_crafting_time": 0},
            },
            "stations": {"loom": {}},
        })
        self.assertEqual(set(catalog.materials), {"ok"})
        self.assertEqual(set(catalog.recipes), {"fine"})
        self.assertLogged("no_station")
        self.assertLogged("instant")

    def test_station_costs_by_target_level(self):
        forge = self.catalog.get_station_data(StationKind.FORGE)
        self.assertEqual(forge.upgrade_costs[2].currency, {CurrencyType.COINS: 100})
        self.assertEqual(forge.upgrade_costs[3].materials, {"ingot": 5})
        self.assertIsNone(forge.unlock_cost)
        self.assertEqual(self.catalog.get_station_data(StationKind.ALCHEMY_LAB).unlock_cost.currency,
                         {CurrencyType.COINS: 50})

    def test_default_quality_tiers(self):
        self.assertEqual(self.catalog.get_quality_tier(CraftingQuality.MYTHIC).stat_multiplier, 5.0)

    def test_validate_reports_problems(self):
        warnings = self.catalog.validate()
        self.assertTrue(any("unobtainium" in w for w in warnings))

    def test_load_directory_merges_files(self):
        tmp = tempfile.mkdtemp()
        try:
            with open(os.path.join(tmp, "a.json"), 'w') as f:
                json.dump({"materials": {"ore": {"max_stack_size": 10}}}, f)
            with open(os.path.join(tmp, "b.json"), 'w') as f:
                json.dump({"materials": {"ore": {"max_stack_size": 20}}, "balance": {"max_queue_size": 3}}, f)
            with open(os.path.join(tmp, "c.json"), 'w') as f:
                f.write("{oops")

            catalog = RecipeCatalog.load_directory(tmp)
        finally:
            shutil.rmtree(tmp, ignore_errors=True)

        self.assertEqual(catalog.get_material("ore").max_stack_size, 20)
        self.assertEqual(catalog.balance, {"max_queue_size": 3})
        self.assertLogged("c.json")

    def test_missing_directory(self):
        catalog = RecipeCatalog.load_directory("/nonexistent/crafting")
        self.assertEqual(catalog.recipes, {})

    def test_shipped_data_is_consistent(self):
        """Verify the bundled crafting data loads cleanly."""
        catalog = RecipeCatalog.load_directory(CRAFTING_DATA_DIR)
        self.assertEqual(set(catalog.stations), set(StationKind))
        self.assertGreaterEqual(len(catalog.recipes), 10)
        self.assertEqual(catalog.validate(), [])
        for result_kind in ResultKind:
            self.assertTrue(any(res.kind == result_kind for r in catalog.recipes.values() for res in r.results))
