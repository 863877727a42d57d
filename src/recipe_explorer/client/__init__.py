"""Async client for the TheMealDB recipe API.

:class:`MealDbClient` wraps :class:`httpx.AsyncClient` with retry,
exponential backoff, and error mapping onto the
:class:`~recipe_explorer.exceptions.ProducerError` family. Its coroutine
methods are the producers handed to
:meth:`~recipe_explorer.cache.RecipeCache.get_cached_or_fetch`.
"""

from recipe_explorer.client.async_client import MealDbClient

__all__ = ["MealDbClient"]
