"""Artisan: a timed crafting production engine."""
