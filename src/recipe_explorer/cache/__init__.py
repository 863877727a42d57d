"""Persistent TTL cache for remote recipe lookups.

This package provides :class:`RecipeCache`, a get-or-fetch cache that
sits between the explorer and :class:`~recipe_explorer.client.MealDbClient`.
Entries are stored as ``{"value": ..., "expiresAt": ...}`` in a single
JSON file owned by the cache, and the helpers in
:mod:`recipe_explorer.cache.keys` build the key for each kind of lookup.

The cache is controlled by the ``cache`` section of the global
configuration (:class:`~recipe_explorer.models.CacheConfig`).
"""

from recipe_explorer.cache.cache import Producer, RecipeCache
from recipe_explorer.cache.keys import ingredient_key, letters_key, recipe_key, search_key

__all__ = [
    "Producer",
    "RecipeCache",
    "ingredient_key",
    "letters_key",
    "recipe_key",
    "search_key",
]
