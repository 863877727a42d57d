"""Browse commands -- the interactive menu and its one-shot equivalents.

Each command builds a :class:`~recipe_explorer.explorer.RecipeExplorer`
through :func:`~recipe_explorer.session.open_explorer`, runs one operation
on a fresh event loop, and exits with the code of the error the operation
reported, if any.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable

import typer

from recipe_explorer.explorer import RecipeExplorer
from recipe_explorer.session import config_from_context, open_explorer, prompter_from_context


def run_with_explorer(
    ctx: typer.Context,
    operation: Callable[[RecipeExplorer], Awaitable[Any]],
    show_related: bool = True,
) -> None:
    """Run *operation* against a freshly initialised explorer."""
    config = config_from_context(ctx)
    prompter = prompter_from_context(ctx)

    async def _main() -> RecipeExplorer:
        async with open_explorer(config, prompter, show_related=show_related) as explorer:
            await operation(explorer)
            return explorer

    explorer = asyncio.run(_main())
    if explorer.last_error is not None:
        raise typer.Exit(code=explorer.last_error.exit_code)


def menu_command(ctx: typer.Context) -> None:
    """Start the interactive menu.

    Example::

        recipe-explorer menu
    """
    run_with_explorer(ctx, lambda explorer: explorer.run_menu())


def search_command(
    ctx: typer.Context,
    query: str = typer.Argument(help="Part of a recipe name, e.g. 'chicken'."),
) -> None:
    """Search recipes by name.

    Example::

        recipe-explorer search arrabiata
        recipe-explorer --json --no-input search chicken
    """
    run_with_explorer(ctx, lambda explorer: explorer.search_recipes(query))


def show_command(
    ctx: typer.Context,
    recipe_id: str = typer.Argument(help="TheMealDB recipe id, e.g. 52772."),
    related: bool = typer.Option(
        True, "--related/--no-related", help="Also list recipes from the same category."
    ),
) -> None:
    """Show one recipe and offer to add it to favorites.

    Example::

        recipe-explorer show 52772
    """
    run_with_explorer(
        ctx, lambda explorer: explorer.view_recipe_details(recipe_id), show_related=related
    )


def letters_command(
    ctx: typer.Context,
    letters: str = typer.Argument(help="Up to three letters, e.g. 'abc'."),
) -> None:
    """List recipes whose names start with any of the given letters."""
    run_with_explorer(ctx, lambda explorer: explorer.explore_by_first_letter(letters))


def ingredient_command(
    ctx: typer.Context,
    ingredient: str = typer.Argument(help="Main ingredient, e.g. 'salmon'."),
) -> None:
    """List recipes that use an ingredient."""
    run_with_explorer(ctx, lambda explorer: explorer.search_by_ingredient(ingredient))


def random_command(ctx: typer.Context) -> None:
    """Show a random recipe."""
    run_with_explorer(ctx, lambda explorer: explorer.discover_random())
