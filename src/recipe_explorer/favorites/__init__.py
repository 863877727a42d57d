"""Persisted favourites collection.

:class:`FavoritesStore` keeps the recipes the user has flagged, keyed by
recipe id, in a JSON file separate from the response cache. Records are
stored verbatim so they can be redisplayed without a network call.
"""

from recipe_explorer.favorites.favorites import FavoritesStore

__all__ = ["FavoritesStore"]
