# artisan/crafting/formulas.py
"""Pure timing and quality formulas. No randomness lives here."""
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from artisan.crafting.recipe import Recipe
    from artisan.crafting.settings import CraftingSettings


def mastery_speed_factor(mastery_level: int, settings: 'CraftingSettings') -> float:
    return max(settings.mastery_speed_floor, 1.0 - mastery_level * settings.mastery_speed_bonus_per_level)


def batch_factor(quantity: int, allow_batch: bool, settings: 'CraftingSettings') -> float:
    if quantity <= 1 or not allow_batch or not settings.enable_batch_crafting:
        return 1.0
    return max(settings.batch_efficiency_floor, 1.0 - settings.batch_efficiency_per_unit * (quantity - 1))


def crafting_duration(recipe: 'Recipe', quantity: int, station_speed: float, mastery_level: int,
                      settings: 'CraftingSettings') -> float:
    """
    Seconds to craft `quantity` units:
        base * global * station speed * mastery factor * batch factor * quantity
    """
    if settings.debug_mode and settings.instant_crafting_in_debug:
        return float(settings.debug_instant_craft_seconds)

    duration = recipe.base_crafting_time * settings.crafting_time_multiplier
    duration *= station_speed
    duration *= mastery_speed_factor(mastery_level, settings)
    duration *= batch_factor(quantity, recipe.allow_batch, settings)
    return duration * quantity


def quality_upgrade_chance(mastery_level: int, settings: 'CraftingSettings') -> float:
    chance = settings.base_quality_upgrade_chance + mastery_level * settings.mastery_quality_bonus_per_level
    return max(0.0, min(1.0, chance))
