# artisan/crafting/crafting_manager.py
import random
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Set, Tuple, Union

from artisan.core.events import CraftingEventType, EventDispatcher
from artisan.crafting.catalog import RecipeCatalog
from artisan.crafting.errors import CraftFailure
from artisan.crafting.formulas import crafting_duration, quality_upgrade_chance
from artisan.crafting.mastery import MasteryTracker
from artisan.crafting.persistence import CraftingPersistenceMixin
from artisan.crafting.queue import ProductionQueue, QueueItem
from artisan.crafting.recipe import Recipe, RecipeResult
from artisan.crafting.settings import CraftingSettings
from artisan.crafting.sinks import EquipmentStash
from artisan.crafting.station import StationRegistry
from artisan.crafting.types import CraftingQuality, CurrencyType, ResultKind, StationKind
from artisan.ledger.core import MaterialLedger
from artisan.ledger.wallet import CurrencyWallet
from artisan.utils.logger import Logger

StationKey = Union[StationKind, str]


@dataclass
class ProducedUnit:
    kind: ResultKind
    target_id: str
    amount: int
    quality: CraftingQuality


@dataclass
class CraftOutcome:
    job: QueueItem
    recipe_name: str
    produced: List[ProducedUnit] = field(default_factory=list)
    experience: int = 0
    levels_gained: List[int] = field(default_factory=list)
    skipped_results: List[str] = field(default_factory=list)

    def count(self, target_id: str) -> int:
        return sum(u.amount for u in self.produced if u.target_id == target_id)


class CraftingManager(CraftingPersistenceMixin):
    """
    The crafting engine context. Owns the ledger, stations, mastery and queue for
    one player and is driven by `advance(now)` from the session loop.
    """

    def __init__(self, catalog: RecipeCatalog, settings: Optional[CraftingSettings] = None,
                 wallet: Optional[CurrencyWallet] = None, equipment_sink: Optional[Any] = None,
                 clock: Callable[[], float] = time.time, rng: Optional[random.Random] = None,
                 events: Optional[EventDispatcher] = None):
        self.catalog = catalog
        self.settings = settings or CraftingSettings.from_dict(catalog.balance)
        self.clock = clock
        self.rng = rng or random.Random()
        self.events = events or EventDispatcher(clock)
        self.wallet = wallet if wallet is not None else CurrencyWallet()
        self.equipment_sink = equipment_sink if equipment_sink is not None else EquipmentStash()

        self.ledger = MaterialLedger(catalog.materials, self.events, strict=bool(self.settings.debug_mode))
        self.mastery = MasteryTracker(self.settings, self.events)
        self.stations = StationRegistry(catalog, self.settings, self.ledger, self.mastery,
                                        self.wallet, self.events)
        self.queue = ProductionQueue(int(self.settings.max_queue_size))
        self.known_recipes: Set[str] = set()
        self.total_items_crafted = 0

        self._unlock_basic_recipes()
        Logger.info("CraftingManager", f"Crafting engine ready: {len(self.known_recipes)}/"
                                       f"{len(catalog.recipes)} recipes known.")

    # --- Crafting ---

    def can_craft(self, recipe_id: str, quantity: int = 1) -> Tuple[bool, str]:
        """Checks recipe knowledge, station, mastery and materials. Never mutates state."""
        recipe = self.catalog.get_recipe(recipe_id)
        if not recipe:
            return False, CraftFailure.UNKNOWN_RECIPE
        if not isinstance(quantity, int) or quantity < 1 or quantity > int(self.settings.max_batch_size):
            return False, CraftFailure.INVALID_QUANTITY
        if recipe_id not in self.known_recipes:
            return False, CraftFailure.RECIPE_NOT_KNOWN
        if not self.stations.is_unlocked(recipe.station):
            return False, CraftFailure.STATION_LOCKED
        if self.mastery.get_level(recipe.station) < recipe.required_mastery:
            return False, CraftFailure.INSUFFICIENT_MASTERY
        if not self.ledger.can_afford(recipe.material_costs(quantity)):
            return False, CraftFailure.INSUFFICIENT_MATERIALS
        return True, ""

    def start_crafting(self, recipe_id: str, quantity: int = 1,
                       now: Optional[float] = None) -> Tuple[Optional[QueueItem], str]:
        """
        Validates, debits ingredients and schedules a job.
        Returns (job, "") on success or (None, reason) with nothing changed.
        """
        ok, reason = self.can_craft(recipe_id, quantity)
        if not ok:
            if reason == CraftFailure.INSUFFICIENT_MATERIALS:
                recipe = self.catalog.get_recipe(recipe_id)
                reason_detail = f"{reason} (short {self.ledger.missing(recipe.material_costs(quantity))})"
            else:
                reason_detail = reason
            Logger.debug("CraftingManager", f"Cannot craft {quantity}x {recipe_id}: {reason_detail}")
            return None, reason
        if self.queue.is_full:
            Logger.debug("CraftingManager", f"Cannot craft {recipe_id}: queue full ({len(self.queue)}).")
            return None, CraftFailure.QUEUE_FULL

        recipe = self.catalog.recipes[recipe_id]
        costs = recipe.material_costs(quantity)
        if not self.ledger.remove_many(costs):
            return None, CraftFailure.INSUFFICIENT_MATERIALS

        start = self.clock() if now is None else now
        duration = self.calculate_crafting_time(recipe, quantity)
        item = QueueItem(recipe_id, quantity, recipe.station, start, start + duration)
        if not self.queue.add(item):
            self.ledger.add_many(costs)
            return None, CraftFailure.QUEUE_FULL

        self.events.emit(CraftingEventType.QUEUE_ITEM_STARTED, job_id=item.job_id, recipe_id=recipe_id,
                         quantity=quantity, station=recipe.station, completion_time=item.completion_time)
        Logger.info("CraftingManager", f"Started crafting {quantity}x {recipe.name} ({duration:.1f}s)")
        return item, ""

    def calculate_crafting_time(self, recipe: Union[Recipe, str], quantity: int = 1) -> float:
        if isinstance(recipe, str):
            recipe = self.catalog.recipes[recipe]
        station = self.stations.get(recipe.station)
        return crafting_duration(recipe, quantity, station.get_speed_multiplier(),
                                 self.mastery.get_level(recipe.station), self.settings)

    def cancel(self, job_index: int) -> Tuple[bool, str]:
        """Cancels a pending job by queue position and refunds its ingredients in full."""
        item = self.queue.get(job_index)
        if not item:
            return False, CraftFailure.JOB_NOT_FOUND
        return self._cancel_item(item)

    def cancel_job(self, job_id: str) -> Tuple[bool, str]:
        item = self.queue.find(job_id)
        if not item:
            return False, CraftFailure.JOB_NOT_FOUND
        return self._cancel_item(item)

    def _cancel_item(self, item: QueueItem) -> Tuple[bool, str]:
        if item.completed:
            return False, CraftFailure.JOB_COMPLETED

        recipe = self.catalog.get_recipe(item.recipe_id)
        if recipe:
            self.ledger.add_many(recipe.material_costs(item.quantity))
        else:
            Logger.error("CraftingManager", f"Cannot refund job {item.job_id}: recipe '{item.recipe_id}' is gone.")

        self.queue.remove(item)
        self.events.emit(CraftingEventType.QUEUE_ITEM_CANCELLED, job_id=item.job_id,
                         recipe_id=item.recipe_id, quantity=item.quantity, station=item.station)
        Logger.info("CraftingManager", f"Cancelled crafting: {item.quantity}x {item.recipe_id}")
        return True, ""

    # --- Tick ---

    def advance(self, now: Optional[float] = None) -> List[CraftOutcome]:
        """Completes every job whose completion time has passed, then delivers pending events."""
        now = self.clock() if now is None else now
        outcomes = [self._complete_item(item) for item in self.queue.due(now)]
        self.events.drain()
        return outcomes

    def complete_all_crafting(self) -> Tuple[List[CraftOutcome], str]:
        """Debug helper: finishes every pending job immediately."""
        if not self.settings.debug_mode:
            return [], CraftFailure.DEBUG_DISABLED
        outcomes = [self._complete_item(item) for item in self.queue if not item.completed]
        self.events.drain()
        return outcomes, ""

    def flush_events(self) -> int:
        return self.events.drain()

    def _complete_item(self, item: QueueItem) -> CraftOutcome:
        recipe = self.catalog.get_recipe(item.recipe_id)
        if not recipe:
            Logger.error("CraftingManager", f"Job {item.job_id} references missing recipe '{item.recipe_id}'. "
                                            f"Dropping it.")
            item.completed = True
            self.queue.remove(item)
            return CraftOutcome(item, item.recipe_id, skipped_results=[item.recipe_id])

        outcome = CraftOutcome(item, recipe.name)
        self._produce_results(recipe, item, outcome)

        outcome.experience = recipe.experience_reward * item.quantity
        outcome.levels_gained = self.mastery.add_experience(item.station, outcome.experience)

        item.completed = True
        self.total_items_crafted += item.quantity
        self.queue.remove(item)
        self.events.emit(CraftingEventType.QUEUE_ITEM_COMPLETED, job_id=item.job_id, recipe_id=item.recipe_id,
                         quantity=item.quantity, station=item.station, produced=len(outcome.produced))
        Logger.info("CraftingManager", f"Completed crafting {item.quantity}x {recipe.name}")
        return outcome

    def _produce_results(self, recipe: Recipe, item: QueueItem, outcome: CraftOutcome) -> None:
        # Mastery is read once; experience for this job is awarded afterwards.
        upgrade_chance = quality_upgrade_chance(self.mastery.get_level(item.station), self.settings)

        for index, result in enumerate(recipe.results):
            label = f"{recipe.recipe_id}#{index}:{result.target_id or '?'}"
            problem = self._check_result_target(result)
            if problem:
                Logger.error("CraftingManager", f"Skipping result {label}: {problem}")
                outcome.skipped_results.append(label)
                continue

            for _ in range(item.quantity):
                if self.rng.random() >= result.chance:
                    continue
                quality = self._roll_quality(result.quality, upgrade_chance)
                try:
                    delivered = self._deliver(result, quality)
                except Exception as e:
                    Logger.error("CraftingManager", f"Output sink failed for {label}: {e}")
                    delivered = False
                if not delivered:
                    Logger.error("CraftingManager", f"Could not deliver {label}; skipping the rest of this result.")
                    outcome.skipped_results.append(label)
                    break

                unit = ProducedUnit(result.kind, result.target_id, result.amount, quality)
                outcome.produced.append(unit)
                self.events.emit(CraftingEventType.ITEM_CRAFTED, job_id=item.job_id, recipe_id=recipe.recipe_id,
                                 kind=unit.kind, target_id=unit.target_id, amount=unit.amount,
                                 quality=unit.quality)

    def _roll_quality(self, base: CraftingQuality, upgrade_chance: float) -> CraftingQuality:
        if base >= CraftingQuality.top():
            return base
        if self.rng.random() < upgrade_chance:
            return base.upgraded()
        return base

    def _check_result_target(self, result: RecipeResult) -> Optional[str]:
        """Returns why a result cannot be produced, or None if it can."""
        if result.amount < 1:
            return "amount must be at least 1"
        if result.kind == ResultKind.MATERIAL:
            if result.target_id not in self.catalog.materials:
                return f"unknown material '{result.target_id}'"
        elif result.kind == ResultKind.EQUIPMENT:
            if not result.target_id:
                return "equipment result has no item id"
            if self.equipment_sink is None:
                return "no equipment sink attached"
        elif result.kind == ResultKind.CURRENCY:
            if result.target_id not in {c.value for c in CurrencyType}:
                return f"unknown currency '{result.target_id}'"
            if self.wallet is None:
                return "no wallet attached"
        return None

    def _deliver(self, result: RecipeResult, quality: CraftingQuality) -> bool:
        if result.kind == ResultKind.MATERIAL:
            success, _, _ = self.ledger.add(result.target_id, result.amount)
            return success
        if result.kind == ResultKind.EQUIPMENT:
            return bool(self.equipment_sink.receive(result.kind, result.target_id, result.amount, quality))
        return bool(self.wallet.receive(result.kind, result.target_id, result.amount, quality))

    # --- Queue inspection ---

    def get_queue_snapshot(self, now: Optional[float] = None) -> List[Dict[str, Any]]:
        now = self.clock() if now is None else now
        snapshot = []
        for index, item in enumerate(self.queue.items):
            recipe = self.catalog.get_recipe(item.recipe_id)
            snapshot.append({
                "index": index,
                "job_id": item.job_id,
                "recipe_id": item.recipe_id,
                "recipe_name": recipe.name if recipe else item.recipe_id,
                "quantity": item.quantity,
                "station": item.station,
                "start_time": item.start_time,
                "completion_time": item.completion_time,
                "progress": item.progress(now),
                "time_remaining": item.time_remaining(now),
            })
        return snapshot

    # --- Recipes ---

    def _unlock_basic_recipes(self) -> None:
        for recipe_id in self.catalog.recipes:
            requirement = self.catalog.get_unlock_requirement(recipe_id)
            if requirement is None or requirement.is_basic:
                self.known_recipes.add(recipe_id)

    def is_recipe_known(self, recipe_id: str) -> bool:
        return recipe_id in self.known_recipes

    def unlock_recipe(self, recipe_id: str) -> bool:
        """Marks a recipe as known. Returns True only the first time."""
        if recipe_id not in self.catalog.recipes or recipe_id in self.known_recipes:
            return False
        self.known_recipes.add(recipe_id)
        self.events.emit(CraftingEventType.RECIPE_UNLOCKED, recipe_id=recipe_id)
        Logger.info("CraftingManager", f"Recipe unlocked: {recipe_id}")
        return True

    def can_unlock_recipe(self, recipe_id: str, player_level: int = 1,
                          completed_quests: Iterable[str] = ()) -> Tuple[bool, str]:
        recipe = self.catalog.get_recipe(recipe_id)
        if not recipe:
            return False, CraftFailure.UNKNOWN_RECIPE
        requirement = self.catalog.get_unlock_requirement(recipe_id)
        if requirement is None:
            return True, ""
        if player_level < requirement.required_player_level:
            return False, CraftFailure.PLAYER_LEVEL_TOO_LOW
        if self.mastery.get_level(recipe.station) < requirement.required_mastery_level:
            return False, CraftFailure.INSUFFICIENT_MASTERY
        if any(p not in self.known_recipes for p in requirement.prerequisite_recipes):
            return False, CraftFailure.PREREQUISITE_RECIPE_MISSING
        if requirement.required_quest_id and requirement.required_quest_id not in set(completed_quests):
            return False, CraftFailure.QUEST_NOT_COMPLETED
        return True, ""

    def try_unlock_recipe(self, recipe_id: str, player_level: int = 1,
                          completed_quests: Iterable[str] = ()) -> Tuple[bool, str]:
        """Learns a recipe if every gate in its unlock requirement passes."""
        if recipe_id in self.known_recipes:
            return True, ""
        ok, reason = self.can_unlock_recipe(recipe_id, player_level, completed_quests)
        if not ok:
            return False, reason
        self.unlock_recipe(recipe_id)
        return True, ""

    def unlock_eligible_recipes(self, player_level: int = 1, completed_quests: Iterable[str] = ()) -> List[str]:
        """Learns every recipe whose gates pass, following prerequisite chains. Returns new ids."""
        completed = set(completed_quests)
        learned = []
        progress = True
        while progress:
            progress = False
            for recipe_id in self.catalog.recipes:
                if recipe_id in self.known_recipes:
                    continue
                if self.can_unlock_recipe(recipe_id, player_level, completed)[0]:
                    self.unlock_recipe(recipe_id)
                    learned.append(recipe_id)
                    progress = True
        return learned

    def get_available_recipes(self, station: StationKey) -> List[Recipe]:
        """Known recipes for a station whose mastery requirement is met."""
        kind = self._station_kind(station)
        if kind is None:
            return []
        return [r for r in self.catalog.recipes_for_station(kind)
                if r.recipe_id in self.known_recipes and self.mastery.get_level(kind) >= r.required_mastery]

    # --- Stations ---

    def unlock_station(self, station: StationKey) -> Tuple[bool, str]:
        kind = self._station_kind(station)
        if kind is None:
            return False, CraftFailure.UNKNOWN_STATION
        return self.stations.unlock(kind)

    def upgrade_station(self, station: StationKey) -> Tuple[bool, str]:
        kind = self._station_kind(station)
        if kind is None:
            return False, CraftFailure.UNKNOWN_STATION
        return self.stations.upgrade(kind)

    def get_station_level(self, station: StationKey) -> int:
        kind = self._station_kind(station)
        return self.stations.get(kind).level if kind else 0

    @staticmethod
    def _station_kind(station: StationKey) -> Optional[StationKind]:
        if isinstance(station, StationKind):
            return station
        try:
            return StationKind(station)
        except ValueError:
            return None

    # --- Mastery ---

    def get_mastery_level(self, station: StationKey) -> int:
        kind = self._station_kind(station)
        return self.mastery.get_level(kind) if kind else 0

    def add_mastery_experience(self, station: StationKey, amount: int) -> List[int]:
        kind = self._station_kind(station)
        if kind is None:
            return []
        return self.mastery.add_experience(kind, amount)

    # --- Materials ---

    def add_material(self, material_id: str, amount: int) -> bool:
        return self.ledger.add(material_id, amount)[0]

    def remove_material(self, material_id: str, amount: int) -> bool:
        return self.ledger.remove(material_id, amount)[0]

    def get_material_amount(self, material_id: str) -> int:
        return self.ledger.query(material_id)
