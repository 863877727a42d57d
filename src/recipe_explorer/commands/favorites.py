"""Favorites commands -- list, add and remove favourite recipes."""

from __future__ import annotations

import asyncio

import typer

from recipe_explorer.commands.browse import run_with_explorer
from recipe_explorer.formatting import print_recipe_list
from recipe_explorer.output import info
from recipe_explorer.session import build_favorites

favorites_app = typer.Typer(no_args_is_help=True)


@favorites_app.command("list")
def favorites_list() -> None:
    """List favourite recipes in the order they were added.

    Reads the favourites file only; no network access.

    Example::

        recipe-explorer favorites list
        recipe-explorer --json favorites list
    """
    favorites = build_favorites()
    asyncio.run(favorites.initialize())
    records = favorites.list()
    if not records:
        info("You have no favorite recipes")
        return
    print_recipe_list(records, title="Favorites")


@favorites_app.command("add")
def favorites_add(
    ctx: typer.Context,
    recipe_id: str = typer.Argument(help="TheMealDB recipe id to add."),
) -> None:
    """Fetch a recipe and add it to favourites.

    Adding a recipe that is already a favourite refreshes the stored copy.
    """
    run_with_explorer(ctx, lambda explorer: explorer.add_favorite(recipe_id))


@favorites_app.command("remove")
def favorites_remove(
    ctx: typer.Context,
    recipe_id: str = typer.Argument(help="Recipe id to remove."),
) -> None:
    """Remove a recipe from favourites. Unknown ids are ignored."""
    run_with_explorer(ctx, lambda explorer: explorer.remove_favorite(recipe_id))
