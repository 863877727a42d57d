"""Process-wide construction of the cache, favourites and API client.

Every command builds its collaborators here exactly once, from the
effective configuration, and passes them down explicitly. Nothing is held
in module globals.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

import typer

from recipe_explorer.cache import RecipeCache
from recipe_explorer.client import MealDbClient
from recipe_explorer.config import cache_file_path, favorites_file_path, resolve_config
from recipe_explorer.exit_codes import EXIT_GENERIC_FAILURE
from recipe_explorer.explorer import Prompter, RecipeExplorer
from recipe_explorer.favorites import FavoritesStore
from recipe_explorer.models import GlobalConfig
from recipe_explorer.storage import JsonStore


def config_from_context(ctx: Optional[typer.Context]) -> GlobalConfig:
    """Resolve the effective configuration from the root callback's options."""
    obj: dict[str, Any] = (ctx.obj if ctx is not None else None) or {}
    return resolve_config(
        cli_api_url=obj.get("api_url"),
        cli_ttl=obj.get("ttl"),
        cli_no_cache=obj.get("no_cache", False),
    )


def prompter_from_context(ctx: Optional[typer.Context]) -> Prompter:
    obj: dict[str, Any] = (ctx.obj if ctx is not None else None) or {}
    return Prompter(interactive=not obj.get("no_input", False))


def build_cache(config: GlobalConfig) -> RecipeCache:
    return RecipeCache(JsonStore(cache_file_path()), config.cache)


def build_favorites() -> FavoritesStore:
    return FavoritesStore(JsonStore(favorites_file_path()))


@asynccontextmanager
async def open_explorer(
    config: GlobalConfig,
    prompter: Prompter,
    show_related: bool = True,
) -> AsyncIterator[RecipeExplorer]:
    """Build and initialise a :class:`RecipeExplorer` for one command.

    Raises:
        typer.Exit: If initialisation fails. The reason has already been
            reported on stderr.
    """
    cache = build_cache(config)
    favorites = build_favorites()
    async with MealDbClient(config.api) as client:
        explorer = RecipeExplorer(
            cache, favorites, client, prompter=prompter, show_related=show_related
        )
        if not await explorer.initialize():
            failure = explorer.last_error
            raise typer.Exit(code=failure.exit_code if failure else EXIT_GENERIC_FAILURE)
        yield explorer

