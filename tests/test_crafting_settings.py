# tests/test_crafting_settings.py
import unittest

from artisan import config
from artisan.crafting.settings import CraftingSettings
from artisan.crafting.types import StationKind


class TestCraftingSettings(unittest.TestCase):

    def test_defaults_come_from_config(self):
        settings = CraftingSettings()
        self.assertEqual(settings.max_queue_size, config.MAX_QUEUE_SIZE)
        self.assertEqual(settings.mastery_base_experience, config.MASTERY_BASE_EXPERIENCE)
        self.assertEqual(settings.in_flight_policy, "persist")
        self.assertEqual(settings.basic_stations, [StationKind.FORGE, StationKind.WORKSHOP])
        self.assertEqual(settings.station_prerequisites[StationKind.SACRED_ALTAR],
                         (StationKind.ENCHANTING_TABLE, 20))

    def test_overrides_apply_in_order(self):
        settings = CraftingSettings.from_dict({"max_queue_size": 3, "max_batch_size": 4}, max_queue_size=5)
        self.assertEqual(settings.max_queue_size, 5)
        self.assertEqual(settings.max_batch_size, 4)

    def test_unknown_setting_rejected(self):
        with self.assertRaises(ValueError):
            CraftingSettings(queue_length=3)

    def test_invalid_values_rejected(self):
        for overrides in ({"max_queue_size": 0}, {"mastery_speed_floor": 0}, {"batch_efficiency_floor": 1.5},
                          {"in_flight_policy": "drop"}, {"crafting_time_multiplier": -1},
                          {"base_quality_upgrade_chance": -0.1}, {"mastery_experience_growth": 0.9}):
            with self.assertRaises(ValueError, msg=str(overrides)):
                CraftingSettings(**overrides)

    def test_to_dict_round_trip(self):
        settings = CraftingSettings(max_batch_size=7)
        self.assertEqual(CraftingSettings.from_dict(settings.to_dict()).max_batch_size, 7)
