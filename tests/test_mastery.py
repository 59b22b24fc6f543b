# tests/test_mastery.py
from tests.fixtures import CraftingTestBase
from artisan.core.events import CraftingEventType
from artisan.crafting.mastery import MasteryTracker, build_requirement_table
from artisan.crafting.settings import CraftingSettings
from artisan.crafting.types import StationKind

FORGE = StationKind.FORGE


class TestMasteryTable(CraftingTestBase):

    def test_geometric_requirement_table(self):
        self.assertEqual(build_requirement_table(100, 1.5, 5), [100, 150, 225, 337, 506])

    def test_requirement_lookup(self):
        mastery = self.engine.mastery
        self.assertEqual(mastery.get_requirement(2), 150)
        self.assertEqual(mastery.get_requirement(10), 3844)
        self.assertIsNone(mastery.get_requirement(0))
        self.assertIsNone(mastery.get_requirement(101))


class TestMasteryProgress(CraftingTestBase):

    def test_levels_start_at_one(self):
        for kind in StationKind:
            self.assertEqual(self.engine.get_mastery_level(kind), 1)
            self.assertEqual(self.engine.mastery.get_experience(kind), 0)

    def test_single_level_up_at_threshold(self):
        mastery = self.engine.mastery
        self.assertEqual(mastery.add_experience(FORGE, 149), [])
        self.assertEqual(mastery.get_level(FORGE), 1)
        self.assertEqual(mastery.get_experience_to_next_level(FORGE), 1)

        self.assertEqual(mastery.add_experience(FORGE, 1), [2])
        self.assertEqual(mastery.get_level(FORGE), 2)

    def test_large_grant_climbs_several_levels(self):
        """Verify one big grant advances through every threshold it crosses."""
        reached = self.engine.mastery.add_experience(FORGE, 1000)
        self.assertEqual(reached, [2, 3, 4, 5, 6])
        self.assertEqual(self.engine.get_mastery_level(FORGE), 6)
        self.assertEqual(self.engine.mastery.get_experience(FORGE), 1000)

    def test_level_up_events_per_rung(self):
        self.engine.mastery.add_experience(FORGE, 300)
        self.engine.flush_events()

        level_ups = [(e.data["old_level"], e.data["new_level"]) for e in self.received
                     if e.type == CraftingEventType.MASTERY_LEVEL_UP]
        self.assertEqual(level_ups, [(1, 2), (2, 3)])

    def test_non_positive_grants_ignored(self):
        mastery = self.engine.mastery
        self.assertEqual(mastery.add_experience(FORGE, 0), [])
        self.assertEqual(mastery.add_experience(FORGE, -50), [])
        self.assertEqual(mastery.get_experience(FORGE), 0)

    def test_level_progress(self):
        mastery = self.engine.mastery
        mastery.add_experience(FORGE, 187)
        self.assertEqual(mastery.get_level(FORGE), 2)
        self.assertAlmostEqual(mastery.get_level_progress(FORGE), (187 - 150) / (225 - 150))

    def test_mastery_never_decreases(self):
        """Verify mastery stays monotonic across crafting, cancelling and more grants."""
        self.grant(ore=40, coal=20)
        history = [self.engine.get_mastery_level(FORGE)]
        for _ in range(5):
            self.engine.start_crafting("smelt", 4)
            self.engine.start_crafting("smelt")
            self.engine.cancel(1)
            self.advance_time(300)
            self.engine.add_mastery_experience(FORGE, 70)
            history.append(self.engine.get_mastery_level(FORGE))
        self.assertEqual(history, sorted(history))
        self.assertGreater(history[-1], 1)

    def test_crafting_awards_experience_to_job_station(self):
        self.grant(ingot=1)
        self.engine.start_crafting("mint")
        self.advance_time(60)
        self.assertEqual(self.engine.mastery.get_experience(StationKind.WORKSHOP), 5)
        self.assertEqual(self.engine.mastery.get_experience(FORGE), 0)


class TestSingleStepMastery(CraftingTestBase):

    def make_settings(self) -> CraftingSettings:
        return CraftingSettings(mastery_multi_level_up=False)

    def test_one_level_per_grant(self):
        """Verify banked experience is caught up one level per later grant."""
        mastery = self.engine.mastery
        self.assertEqual(mastery.add_experience(FORGE, 1000), [2])
        self.assertEqual(mastery.add_experience(FORGE, 1), [3])
        self.assertEqual(mastery.check_level_up(FORGE), [4])
        self.assertEqual(mastery.get_level(FORGE), 4)


class TestMasteryCap(CraftingTestBase):

    def test_level_capped_at_maximum(self):
        mastery = MasteryTracker(CraftingSettings(max_mastery_level=3))
        mastery.add_experience(FORGE, 10 ** 6)
        self.assertEqual(mastery.get_level(FORGE), 3)
        self.assertEqual(mastery.get_experience_to_next_level(FORGE), 0)
        self.assertEqual(mastery.get_level_progress(FORGE), 1.0)

    def test_load_clamps_and_drops_unknown(self):
        mastery = self.engine.mastery
        mastery.load_from_dict({"levels": {"forge": 250, "loom": 4}, "experience": {"forge": -5, "workshop": 30}})
        self.assertEqual(mastery.get_level(FORGE), 100)
        self.assertEqual(mastery.get_experience(FORGE), 0)
        self.assertEqual(mastery.get_experience(StationKind.WORKSHOP), 30)
        self.assertLogged("loom")
