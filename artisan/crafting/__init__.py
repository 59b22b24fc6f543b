"""Recipes, stations, mastery and the production queue."""
