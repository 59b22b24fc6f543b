# artisan/config/config_game.py
"""
Configuration for the session loop, file paths, logging and debug settings.
"""
import os

# --- Directories and Files ---
# config_game.py is in artisan/config/, so we go up two levels to get to root.
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
DATA_DIR = os.path.join(BASE_DIR, "data")
CRAFTING_DATA_DIR = os.path.join(DATA_DIR, "crafting")
SAVE_GAME_DIR = os.path.join(DATA_DIR, "saves")
DEFAULT_SAVE_FILE = "default_save.json"
SAVE_FORMAT_VERSION = 1

# --- Tick Loop ---
# Jobs complete on absolute timestamps, so any rate of at least one tick per
# second gives the same results.
TARGET_TICK_RATE = 10
MAX_TICK_INTERVAL_SECONDS = 1.0
IDLE_EXIT_GRACE_SECONDS = 0.5

# --- Logging ---
LOG_LEVEL = "INFO"
LOG_HISTORY_SIZE = 500

# --- Events ---
EVENT_LOG_SIZE = 256
