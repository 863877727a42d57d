"""Cache commands -- inspect and maintain the response cache.

The cache only ever saves network round-trips, so every command here is
safe to run at any time: the next lookup simply refetches.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, TypeVar

import typer

from recipe_explorer.cache import RecipeCache
from recipe_explorer.output import format_response, info, success
from recipe_explorer.session import build_cache, config_from_context

T = TypeVar("T")

cache_app = typer.Typer(no_args_is_help=True)


def _with_cache(ctx: typer.Context, operation: Callable[[RecipeCache], Awaitable[T]]) -> T:
    """Load the cache and run *operation* on it in one event loop.

    The file is loaded even when ``--no-cache`` or ``cache.enabled = false``
    turns lookups off, so maintenance always acts on what is on disk.
    """
    config = config_from_context(ctx)
    config.cache.enabled = True
    cache = build_cache(config)

    async def _main() -> T:
        await cache.initialize()
        return await operation(cache)

    return asyncio.run(_main())


async def _stats(cache: RecipeCache) -> dict[str, Any]:
    return cache.stats()


@cache_app.command("stats")
def cache_stats(ctx: typer.Context) -> None:
    """Show the number of cached entries, how many are stale, and the file location."""
    stats = _with_cache(ctx, _stats)
    stats["enabled"] = config_from_context(ctx).cache.enabled
    format_response(stats)


@cache_app.command("prune")
def cache_prune(ctx: typer.Context) -> None:
    """Remove expired entries from the cache file."""
    removed = _with_cache(ctx, lambda cache: cache.clear_expired())
    success(f"Removed {removed} expired cache entries.")


@cache_app.command("clear")
def cache_clear(ctx: typer.Context) -> None:
    """Remove every cached entry.

    Asks for confirmation unless ``--force`` is active.

    Example::

        recipe-explorer cache clear
        recipe-explorer --force cache clear
    """
    force = ctx.obj.get("force", False) if ctx.obj else False
    if not force:
        confirmed = typer.confirm("Remove all cached recipes?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()
    removed = _with_cache(ctx, lambda cache: cache.clear())
    success(f"Removed {removed} cache entries.")
