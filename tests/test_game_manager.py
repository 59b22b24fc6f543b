# tests/test_game_manager.py
import random
import shutil
import tempfile
from unittest.mock import patch

from tests.fixtures import CraftingTestBase
from artisan.config import CRAFTING_DATA_DIR
from artisan.core.game_manager import GameManager


class TestGameManager(CraftingTestBase):

    def setUp(self):
        super().setUp()
        self.save_dir = tempfile.mkdtemp()
        self.game = GameManager("session", data_dir=CRAFTING_DATA_DIR, save_dir=self.save_dir,
                                clock=lambda: self.now, rng=random.Random(3))

    def tearDown(self):
        shutil.rmtree(self.save_dir, ignore_errors=True)
        super().tearDown()

    def fake_tick(self, framerate):
        self.now += 1.0 / framerate
        return int(1000 / framerate)

    def test_tick_completes_due_jobs(self):
        engine = self.game.crafting_manager
        engine.add_material("iron_ore", 2)
        engine.add_material("coal", 1)
        item, reason = engine.start_crafting("smelt_iron")
        self.assertIsNotNone(item, reason)

        self.assertEqual(self.game.tick(self.now + 10), [])
        outcomes = self.game.tick(item.completion_time)

        self.assertEqual(len(outcomes), 1)
        self.assertEqual(engine.get_material_amount("iron_ingot"), 1)
        self.assertEqual(self.game.outcomes, outcomes)

    def test_run_until_idle(self):
        """Verify the loop ticks until the queue drains and then stops."""
        engine = self.game.crafting_manager
        engine.add_material("iron_ore", 2)
        engine.add_material("coal", 1)
        engine.start_crafting("smelt_iron")

        with patch('artisan.core.game_manager.pygame.time.Clock') as clock_cls:
            clock_cls.return_value.tick.side_effect = self.fake_tick
            ticks = self.game.run()

        self.assertEqual(len(engine.queue), 0)
        self.assertEqual(engine.get_material_amount("iron_ingot"), 1)
        self.assertGreater(ticks, 290)

    def test_run_respects_time_limit(self):
        with patch('artisan.core.game_manager.pygame.time.Clock') as clock_cls:
            clock_cls.return_value.tick.side_effect = self.fake_tick
            ticks = self.game.run(max_seconds=2.0, until_idle=False)
        self.assertLessEqual(ticks, 21)

    def test_save_and_reload_session(self):
        engine = self.game.crafting_manager
        engine.add_material("wood", 12)
        self.assertTrue(self.game.save())

        other = GameManager("session", save_dir=self.save_dir, clock=lambda: self.now)
        self.assertTrue(other.load())
        self.assertEqual(other.crafting_manager.get_material_amount("wood"), 12)
