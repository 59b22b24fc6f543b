# artisan/core/game_manager.py
import random
import time
from typing import Callable, List, Optional

import pygame

from artisan.config import (
    CRAFTING_DATA_DIR, DEFAULT_SAVE_FILE, IDLE_EXIT_GRACE_SECONDS, MAX_TICK_INTERVAL_SECONDS,
    SAVE_GAME_DIR, TARGET_TICK_RATE
)
from artisan.core.save_manager import SaveManager
from artisan.crafting.catalog import RecipeCatalog
from artisan.crafting.crafting_manager import CraftingManager, CraftOutcome
from artisan.crafting.settings import CraftingSettings
from artisan.crafting.sinks import EquipmentStash
from artisan.ledger.wallet import CurrencyWallet
from artisan.utils.logger import Logger


class GameManager:
    """
    Headless session: loads the catalog, owns one crafting engine and drives it
    with a fixed-rate tick loop.
    """

    def __init__(self, save_file: str = DEFAULT_SAVE_FILE, data_dir: str = CRAFTING_DATA_DIR,
                 save_dir: str = SAVE_GAME_DIR, settings: Optional[CraftingSettings] = None,
                 clock: Callable[[], float] = time.time, rng: Optional[random.Random] = None):
        self.catalog = RecipeCatalog.load_directory(data_dir)
        self.catalog.validate()

        self.wallet = CurrencyWallet()
        self.equipment = EquipmentStash()
        self.crafting_manager = CraftingManager(self.catalog, settings=settings, wallet=self.wallet,
                                                equipment_sink=self.equipment, clock=clock, rng=rng)
        self.save_manager = SaveManager(self.crafting_manager, save_dir)
        self.current_save_file = save_file
        self.clock = clock
        self.outcomes: List[CraftOutcome] = []

    def load(self) -> bool:
        return self.save_manager.load(self.current_save_file)

    def save(self) -> bool:
        return self.save_manager.save(self.current_save_file)

    def tick(self, now: Optional[float] = None) -> List[CraftOutcome]:
        outcomes = self.crafting_manager.advance(now)
        for outcome in outcomes:
            produced = ", ".join(f"{u.amount}x {u.target_id} ({u.quality.label})" for u in outcome.produced)
            Logger.info("GameManager", f"{outcome.job.quantity}x {outcome.recipe_name} finished: "
                                       f"{produced or 'nothing'}")
        self.outcomes.extend(outcomes)
        return outcomes

    def run(self, max_seconds: Optional[float] = None, until_idle: bool = True) -> int:
        """
        Ticks the engine at TARGET_TICK_RATE until the queue is empty (plus a short
        grace period) or `max_seconds` have passed. Returns the number of ticks run.
        """
        tick_clock = pygame.time.Clock()
        started = self.clock()
        idle_since: Optional[float] = None
        ticks = 0
        running = True
        while running:
            raw_dt = tick_clock.tick(TARGET_TICK_RATE) / 1000.0
            if raw_dt > MAX_TICK_INTERVAL_SECONDS:
                Logger.debug("GameManager", f"Slow tick: {raw_dt:.2f}s")
            now = self.clock()
            self.tick(now)
            ticks += 1

            if max_seconds is not None and now - started >= max_seconds:
                running = False
            elif until_idle and not len(self.crafting_manager.queue):
                if idle_since is None:
                    idle_since = now
                elif now - idle_since >= IDLE_EXIT_GRACE_SECONDS:
                    running = False
            else:
                idle_since = None
        return ticks
