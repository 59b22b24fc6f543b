# artisan/config/config_crafting.py
"""
Balance settings for the crafting engine: queue, timing, mastery, quality and
station progression. Station kinds and quality tiers are referenced by their
string values so this module stays free of package imports.
"""

# --- Queue ---
MAX_QUEUE_SIZE = 10            # shared across all stations
MAX_BATCH_SIZE = 20
ENABLE_BATCH_CRAFTING = True

# --- Timing ---
CRAFTING_TIME_MULTIPLIER = 1.0
MASTERY_SPEED_BONUS_PER_LEVEL = 0.02
MASTERY_SPEED_FLOOR = 0.1      # craft time never drops below 10% of base
BATCH_EFFICIENCY_PER_UNIT = 0.05
BATCH_EFFICIENCY_FLOOR = 0.5   # batching saves at most half the linear time

# --- Quality ---
BASE_QUALITY_UPGRADE_CHANCE = 0.05
MASTERY_QUALITY_BONUS_PER_LEVEL = 0.01
DEFAULT_QUALITY_MULTIPLIERS = {
    "common": 1.0,
    "uncommon": 1.2,
    "rare": 1.5,
    "epic": 2.0,
    "legendary": 3.0,
    "mythic": 5.0,
}

# --- Mastery ---
MASTERY_BASE_EXPERIENCE = 100
MASTERY_EXPERIENCE_GROWTH = 1.5
MAX_MASTERY_LEVEL = 100
MASTERY_MULTI_LEVEL_UP = True  # False: at most one level per experience grant

# --- Stations ---
STATION_SPEED_BONUS_PER_LEVEL = 0.10
STATION_QUALITY_BONUS_PER_LEVEL = 0.02
DEFAULT_STATION_MAX_LEVEL = 50
BASIC_STATIONS = ["forge", "workshop"]
# station -> (station whose mastery gates it, mastery level required)
STATION_UNLOCK_PREREQUISITES = {
    "alchemy_lab": ("forge", 10),
    "enchanting_table": ("alchemy_lab", 15),
    "sacred_altar": ("enchanting_table", 20),
}

# --- Materials ---
DEFAULT_MATERIAL_STACK_SIZE = 999

# --- Persistence ---
# "persist": in-flight jobs are saved with their timestamps and resumed.
# "refund": in-flight jobs are dropped from the save and their ingredients returned.
IN_FLIGHT_POLICY = "persist"

# --- Debug ---
CRAFTING_DEBUG_MODE = False
INSTANT_CRAFTING_IN_DEBUG = False
DEBUG_INSTANT_CRAFT_SECONDS = 0.1
