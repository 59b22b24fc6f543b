# artisan/crafting/errors.py
"""
Reason codes returned by crafting operations and the exceptions the engine can raise.

Ordinary rejections (unknown recipe, locked station, not enough materials, full
queue...) are never raised: operations return (False, reason_code) and leave
state untouched.
"""


class CraftFailure:
    # Validation
    UNKNOWN_RECIPE = "unknown_recipe"
    RECIPE_NOT_KNOWN = "recipe_not_known"
    UNKNOWN_STATION = "unknown_station"
    STATION_LOCKED = "station_locked"
    INSUFFICIENT_MASTERY = "insufficient_mastery"
    INVALID_QUANTITY = "invalid_quantity"
    QUEUE_FULL = "queue_full"
    # Resources
    INSUFFICIENT_MATERIALS = "insufficient_materials"
    INSUFFICIENT_CURRENCY = "insufficient_currency"
    # Stations
    STATION_MAX_LEVEL = "station_max_level"
    NO_UPGRADE_PATH = "no_upgrade_path"
    PREREQUISITE_NOT_MET = "prerequisite_not_met"
    # Recipe unlocks
    PLAYER_LEVEL_TOO_LOW = "player_level_too_low"
    PREREQUISITE_RECIPE_MISSING = "prerequisite_recipe_missing"
    QUEST_NOT_COMPLETED = "quest_not_completed"
    # Queue management
    JOB_NOT_FOUND = "job_not_found"
    JOB_COMPLETED = "job_completed"
    DEBUG_DISABLED = "debug_disabled"


FAILURE_MESSAGES = {
    CraftFailure.UNKNOWN_RECIPE: "There is no such recipe.",
    CraftFailure.RECIPE_NOT_KNOWN: "You have not learned that recipe yet.",
    CraftFailure.UNKNOWN_STATION: "There is no such crafting station.",
    CraftFailure.STATION_LOCKED: "That crafting station is still locked.",
    CraftFailure.INSUFFICIENT_MASTERY: "Your mastery at this station is too low.",
    CraftFailure.INVALID_QUANTITY: "You cannot craft that many at once.",
    CraftFailure.QUEUE_FULL: "The crafting queue is full.",
    CraftFailure.INSUFFICIENT_MATERIALS: "You don't have enough materials.",
    CraftFailure.INSUFFICIENT_CURRENCY: "You can't afford that.",
    CraftFailure.STATION_MAX_LEVEL: "This station is already at its maximum level.",
    CraftFailure.NO_UPGRADE_PATH: "This station cannot be upgraded any further.",
    CraftFailure.PREREQUISITE_NOT_MET: "You haven't met the requirements for this station.",
    CraftFailure.PLAYER_LEVEL_TOO_LOW: "Your level is too low to learn this recipe.",
    CraftFailure.PREREQUISITE_RECIPE_MISSING: "You must learn an earlier recipe first.",
    CraftFailure.QUEST_NOT_COMPLETED: "A quest must be completed before learning this recipe.",
    CraftFailure.JOB_NOT_FOUND: "No such crafting job.",
    CraftFailure.JOB_COMPLETED: "That job has already finished.",
    CraftFailure.DEBUG_DISABLED: "That command is only available in debug mode.",
}


def describe_failure(reason: str) -> str:
    return FAILURE_MESSAGES.get(reason, reason.replace("_", " ").capitalize() + ".")


class CatalogError(ValueError):
    """A catalog entry could not be parsed."""


class LedgerInvariantError(ValueError):
    """A ledger quantity would have gone negative or above its cap."""
