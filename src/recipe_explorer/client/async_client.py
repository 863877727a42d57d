"""Asynchronous TheMealDB client.

Every TheMealDB endpoint answers with ``{"meals": [...]}`` or
``{"meals": null}`` when nothing matches. The client unwraps that envelope
and returns plain recipe dicts. HTTP and network failures are retried with
exponential backoff and then mapped onto typed exceptions:

* 404 -> :class:`~recipe_explorer.exceptions.NotFoundError`
* other 4xx / 5xx -> :class:`~recipe_explorer.exceptions.ServerError`
* network errors -> :class:`~recipe_explorer.exceptions.ConnectionError_`
* unparseable bodies -> :class:`~recipe_explorer.exceptions.ResponseParseError`
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional, Sequence, Union

import httpx

from recipe_explorer.exceptions import (
    ApiTimeoutError,
    ConnectionError_,
    NotFoundError,
    ResponseParseError,
    ServerError,
)
from recipe_explorer.models import ApiConfig, recipe_id, recipe_name

logger = logging.getLogger(__name__)


class MealDbClient:
    """Asynchronous client for TheMealDB. Must be used as an async context manager.

    Args:
        config: API settings (base URL, timeout, retries, ingredient timeout).
        transport: Optional httpx transport, used by tests to serve canned
            responses.
        retry_delay: Base delay in seconds for exponential backoff.

    Example::

        async with MealDbClient(ApiConfig()) as client:
            meals = await client.search_meals_by_name("chicken")
    """

    def __init__(
        self,
        config: ApiConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        retry_delay: float = 1.0,
    ) -> None:
        self._config = config
        self._transport = transport
        self._retry_delay = retry_delay
        self._client: Optional[httpx.AsyncClient] = None

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> MealDbClient:
        self._client = httpx.AsyncClient(
            base_url=self._config.base_url.rstrip("/"),
            timeout=self._config.timeout,
            follow_redirects=True,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *args: object) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    # ------------------------------------------------------------------ #
    # Endpoints
    # ------------------------------------------------------------------ #

    async def search_meals_by_name(self, query: str) -> list[dict[str, Any]]:
        """Search recipes whose name contains *query*."""
        return await self._meals("/search.php", {"s": query})

    async def get_meal_by_id(self, meal_id: str) -> Optional[dict[str, Any]]:
        """Look up one recipe by id; ``None`` if the id is unknown."""
        meals = await self._meals("/lookup.php", {"i": meal_id})
        return meals[0] if meals else None

    async def search_meals_by_first_letter(self, letters: Sequence[str]) -> list[dict[str, Any]]:
        """Return recipes starting with any of *letters*.

        One request per letter is issued concurrently. Results are merged,
        de-duplicated by id, and sorted by name.
        """
        results = await asyncio.gather(
            *(self._meals("/search.php", {"f": letter}) for letter in letters)
        )
        merged: dict[str, dict[str, Any]] = {}
        for meals in results:
            for meal in meals:
                merged.setdefault(recipe_id(meal) or recipe_name(meal), meal)
        return sorted(merged.values(), key=lambda meal: recipe_name(meal).lower())

    async def get_meals_by_ingredient(
        self,
        ingredient: str,
        timeout: Optional[float] = None,
    ) -> Union[list[dict[str, Any]], str]:
        """Return recipes using *ingredient* as a main ingredient.

        The lookup is raced against *timeout* (``config.ingredient_timeout``
        by default).

        Returns:
            The matching recipes, or a message string when nothing matches.

        Raises:
            ApiTimeoutError: If the lookup does not finish in time.
        """
        timeout = self._config.ingredient_timeout if timeout is None else timeout
        try:
            meals = await asyncio.wait_for(
                self._meals("/filter.php", {"i": ingredient}), timeout=timeout
            )
        except asyncio.TimeoutError:
            raise ApiTimeoutError(
                f"Searching by ingredient {ingredient!r} took longer than {timeout:g}s"
            ) from None
        if not meals:
            return f'No recipes found with ingredient "{ingredient}"'
        return meals

    async def get_random_meal(self) -> Optional[dict[str, Any]]:
        """Return one random recipe."""
        meals = await self._meals("/random.php", None)
        return meals[0] if meals else None

    async def get_related_recipes(
        self,
        recipe: dict[str, Any],
        limit: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        """Return up to *limit* other recipes from the same category as *recipe*."""
        limit = self._config.related_limit if limit is None else limit
        category = recipe.get("strCategory")
        if not category or limit <= 0:
            return []
        own_id = recipe_id(recipe)
        meals = await self._meals("/filter.php", {"c": category})
        return [meal for meal in meals if recipe_id(meal) != own_id][:limit]

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    async def _meals(self, path: str, params: Optional[dict[str, str]]) -> list[dict[str, Any]]:
        """GET *path* and unwrap the ``meals`` envelope."""
        response = await self._execute_with_retry(path, params)
        self._map_response_error(response)
        try:
            payload = response.json()
        except ValueError as exc:
            raise ResponseParseError(f"Invalid JSON from {path}: {exc}") from exc
        if not isinstance(payload, dict):
            raise ResponseParseError(f"Unexpected response from {path}: {type(payload).__name__}")
        meals = payload.get("meals")
        if meals is None:
            return []
        if not isinstance(meals, list):
            raise ResponseParseError(f"Unexpected 'meals' value from {path}")
        return [meal for meal in meals if isinstance(meal, dict)]

    async def _execute_with_retry(
        self,
        path: str,
        params: Optional[dict[str, str]],
    ) -> httpx.Response:
        """Execute a GET with exponential-backoff retry.

        Retries on 5xx status codes and transport errors (refused or dropped
        connections, timeouts, protocol errors) up to ``max_retries``
        times. The delay doubles each attempt.
        """
        assert self._client is not None, "Client not initialised -- use as async context manager"

        max_retries = self._config.max_retries
        for attempt in range(max_retries + 1):
            try:
                response = await self._client.get(path, params=params)
            except httpx.TransportError as exc:
                if attempt < max_retries:
                    delay = self._retry_delay * 2 ** attempt
                    logger.debug(
                        "Connection error: %s, retrying in %ss (attempt %d/%d)",
                        exc, delay, attempt + 1, max_retries,
                    )
                    await asyncio.sleep(delay)
                    continue
                raise ConnectionError_(
                    f"Connection failed after {max_retries + 1} attempts: {exc}"
                ) from exc

            if response.status_code >= 500 and attempt < max_retries:
                delay = self._retry_delay * 2 ** attempt
                logger.debug(
                    "Server error %d, retrying in %ss (attempt %d/%d)",
                    response.status_code, delay, attempt + 1, max_retries,
                )
                await asyncio.sleep(delay)
                continue
            return response

        raise ServerError("Request failed after all retries")  # pragma: no cover

    def _map_response_error(self, response: httpx.Response) -> None:
        """Raise a typed exception for error HTTP status codes."""
        status = response.status_code
        if status < 400:
            return
        detail = response.text[:200] if response.text else ""
        message = f"HTTP {status}: {detail}" if detail else f"HTTP {status}"
        if status == 404:
            raise NotFoundError(message)
        raise ServerError(message)
