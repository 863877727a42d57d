"""The user-facing recipe operations behind the menu and the one-shot commands.

:class:`RecipeExplorer` ties together the three collaborators built at
startup -- :class:`~recipe_explorer.cache.RecipeCache`,
:class:`~recipe_explorer.favorites.FavoritesStore` and
:class:`~recipe_explorer.client.MealDbClient` -- and owns the one place
where each operation's failures are reported. Remote lookups always go
through :meth:`RecipeCache.get_cached_or_fetch` with a deferred producer;
the favourites store is consulted directly.

User input goes through a :class:`Prompter` so that tests and
``--no-input`` runs can answer without a terminal.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Optional

import typer

from recipe_explorer.cache import (
    RecipeCache,
    ingredient_key,
    letters_key,
    recipe_key,
    search_key,
)
from recipe_explorer.client import MealDbClient
from recipe_explorer.exceptions import CorruptStoreError, InvalidUsageError, RecipeExplorerError
from recipe_explorer.favorites import FavoritesStore
from recipe_explorer.formatting import print_recipe, print_recipe_list
from recipe_explorer.models import recipe_id, recipe_name
from recipe_explorer.output import get_output

MAX_LETTERS = 3
RANDOM_CANDIDATES = 3

MENU = (
    "Search recipes",
    "View recipe details by ID",
    "Explore recipes by first letter",
    "Search by ingredient",
    "View favorites",
    "Discover random recipe",
    "Exit",
)


class Prompter:
    """Terminal prompts via :func:`typer.prompt` and :func:`typer.confirm`.

    Args:
        interactive: When ``False`` every confirmation is answered "no"
            and free-text questions raise :class:`InvalidUsageError`.
    """

    def __init__(self, interactive: bool = True) -> None:
        self.interactive = interactive

    def ask(self, text: str) -> str:
        if not self.interactive:
            raise InvalidUsageError(f"Input required ({text}) but prompts are disabled")
        return typer.prompt(text, default="", show_default=False)

    def confirm(self, text: str) -> bool:
        if not self.interactive:
            return False
        return typer.confirm(text, default=False)

    def choose(self, text: str, low: int, high: int) -> int:
        """Ask for an integer until it falls within ``low..high``."""
        if not self.interactive:
            raise InvalidUsageError(f"Input required ({text}) but prompts are disabled")
        while True:
            value = typer.prompt(text, type=int)
            if low <= value <= high:
                return value
            get_output().warning(f"Please enter a number between {low} and {high}")


def unique_letters(text: str, limit: int = MAX_LETTERS) -> list[str]:
    """Return the first *limit* distinct letters of *text*, lowercased, in order."""
    letters: list[str] = []
    for char in text.lower():
        if char.isalpha() and char not in letters:
            letters.append(char)
        if len(letters) == limit:
            break
    return letters


class RecipeExplorer:
    """Search, display and favourite recipes.

    Args:
        cache: Response cache for every remote lookup.
        favorites: The user's favourites.
        client: An entered :class:`MealDbClient`.
        prompter: Source of user answers.
        show_related: Whether recipe details are followed by recipes from
            the same category.
    """

    def __init__(
        self,
        cache: RecipeCache,
        favorites: FavoritesStore,
        client: MealDbClient,
        prompter: Optional[Prompter] = None,
        show_related: bool = True,
    ) -> None:
        self.cache = cache
        self.favorites = favorites
        self.client = client
        self.prompter = prompter or Prompter()
        self.show_related = show_related
        self.last_error: Optional[RecipeExplorerError] = None

    # ------------------------------------------------------------------ #
    # Startup
    # ------------------------------------------------------------------ #

    async def initialize(self) -> bool:
        """Load the cache and favourites concurrently, then drop expired entries.

        A corrupt favourites file is reported and, if the user agrees,
        replaced by an empty one.

        Returns:
            ``True`` on success, ``False`` if startup cannot continue.
        """
        output = get_output()
        try:
            cache_result, favorites_result = await asyncio.gather(
                self.cache.initialize(),
                self.favorites.initialize(),
                return_exceptions=True,
            )
            if isinstance(cache_result, BaseException):
                raise cache_result
            if isinstance(favorites_result, CorruptStoreError):
                await self._recover_favorites(favorites_result)
            elif isinstance(favorites_result, BaseException):
                raise favorites_result
            removed = await self.cache.clear_expired()
            output.debug(f"Removed {removed} expired cache entries")
            return True
        except RecipeExplorerError as exc:
            self._report("Error initializing application", exc)
            return False

    async def _recover_favorites(self, exc: CorruptStoreError) -> None:
        get_output().warning(str(exc))
        if not self.prompter.confirm("Discard the unreadable favorites file and start empty?"):
            raise exc
        await self.favorites.reset()
        get_output().success("Favorites reset.")

    # ------------------------------------------------------------------ #
    # Lookups
    # ------------------------------------------------------------------ #

    async def search_recipes(self, query: str) -> Optional[list[dict[str, Any]]]:
        """Search recipes by name, then offer to open one of them."""
        query = query.strip()
        if not query:
            get_output().warning("Search term cannot be empty")
            return None
        get_output().progress(f'Searching for "{query}"...')
        try:
            recipes = await self.cache.get_cached_or_fetch(
                search_key(query), lambda: self.client.search_meals_by_name(query)
            )
        except RecipeExplorerError as exc:
            self._report("Error searching recipes", exc)
            return None
        await self._offer_results(recipes, title=f'Results for "{query}"')
        return recipes

    async def view_recipe_details(self, meal_id: str) -> Optional[dict[str, Any]]:
        """Show one recipe, offer to toggle it as a favourite, and list related recipes."""
        meal_id = meal_id.strip()
        if not meal_id:
            get_output().warning("Recipe ID cannot be empty")
            return None
        get_output().progress(f"Fetching details for recipe {meal_id}...")
        try:
            recipe = await self.cache.get_cached_or_fetch(
                recipe_key(meal_id), lambda: self.client.get_meal_by_id(meal_id)
            )
        except RecipeExplorerError as exc:
            self._report("Error viewing recipe details", exc)
            return None
        if recipe is None:
            get_output().info(f"No recipe found with ID {meal_id}")
            return None

        await self._present(recipe)
        if self.show_related:
            await self._show_related(recipe)
        return recipe

    async def explore_by_first_letter(self, text: str) -> Optional[list[dict[str, Any]]]:
        """List recipes starting with up to three distinct letters of *text*."""
        letters = unique_letters(text)
        if not letters:
            get_output().warning("Please enter at least one letter")
            return None
        get_output().progress(f"Searching for recipes starting with: {', '.join(letters)}...")
        try:
            recipes = await self.cache.get_cached_or_fetch(
                letters_key(letters),
                lambda: self.client.search_meals_by_first_letter(sorted(letters)),
            )
        except RecipeExplorerError as exc:
            self._report("Error exploring recipes by first letter", exc)
            return None
        await self._offer_results(recipes, title=f"Recipes starting with {', '.join(letters)}")
        return recipes

    async def search_by_ingredient(self, ingredient: str) -> Optional[list[dict[str, Any]]]:
        """List recipes using *ingredient*, bounded by the configured timeout."""
        ingredient = ingredient.strip()
        if not ingredient:
            get_output().warning("Ingredient cannot be empty")
            return None
        get_output().progress(f"Searching for recipes with {ingredient}...")
        try:
            result = await self.cache.get_cached_or_fetch(
                ingredient_key(ingredient),
                lambda: self.client.get_meals_by_ingredient(ingredient),
            )
        except RecipeExplorerError as exc:
            self._report("Error searching by ingredient", exc)
            return None
        if isinstance(result, str):
            get_output().info(result)
            return []
        await self._offer_results(result, title=f"Recipes with {ingredient}")
        return result

    async def view_favorites(self) -> list[dict[str, Any]]:
        """List favourites and show a stored one without refetching it."""
        records = self.favorites.list()
        if not records:
            get_output().info("You have no favorite recipes")
            return records
        print_recipe_list(records, title="Favorites")
        choice = self._choose_from(records)
        if choice is not None:
            await self._present(choice)
        return records

    async def add_favorite(self, meal_id: str) -> Optional[dict[str, Any]]:
        """Fetch a recipe by id (through the cache) and store it as a favourite."""
        meal_id = meal_id.strip()
        try:
            recipe = await self.cache.get_cached_or_fetch(
                recipe_key(meal_id), lambda: self.client.get_meal_by_id(meal_id)
            )
            if recipe is None:
                get_output().info(f"No recipe found with ID {meal_id}")
                return None
            await self.favorites.add(recipe)
        except RecipeExplorerError as exc:
            self._report("Error adding favorite", exc)
            return None
        get_output().success(f"Added {recipe_name(recipe)} to favorites.")
        return recipe

    async def remove_favorite(self, meal_id: str) -> bool:
        """Remove a favourite by id; an unknown id is reported, not an error."""
        try:
            removed = await self.favorites.remove(meal_id)
        except RecipeExplorerError as exc:
            self._report("Error removing favorite", exc)
            return False
        if removed:
            get_output().success(f"Removed recipe {meal_id} from favorites.")
        else:
            get_output().info(f"Recipe {meal_id} is not in your favorites")
        return removed

    async def discover_random(self) -> Optional[dict[str, Any]]:
        """Show whichever of several random-recipe requests answers first."""
        get_output().progress("Fetching random recipes...")
        try:
            recipe = await self._first_random(RANDOM_CANDIDATES)
        except RecipeExplorerError as exc:
            self._report("Error discovering random recipes", exc)
            return None
        if recipe is None:
            get_output().info("Failed to fetch a random recipe")
            return None
        await self._present(recipe)
        return recipe

    # ------------------------------------------------------------------ #
    # Menu
    # ------------------------------------------------------------------ #

    async def run_menu(self) -> None:
        """Show the main menu until the user picks Exit."""
        actions: dict[int, Callable[[], Awaitable[Any]]] = {
            1: lambda: self.search_recipes(self.prompter.ask("Enter search term")),
            2: lambda: self.view_recipe_details(self.prompter.ask("Enter recipe ID")),
            3: lambda: self.explore_by_first_letter(
                self.prompter.ask("Enter up to 3 letters to search (e.g. abc)")
            ),
            4: lambda: self.search_by_ingredient(self.prompter.ask("Enter an ingredient")),
            5: self.view_favorites,
            6: self.discover_random,
        }
        output = get_output()
        while True:
            output.print_data("\n===== RECIPE EXPLORER =====")
            for number, label in enumerate(MENU, start=1):
                output.print_data(f"{number}. {label}")
            choice = self.prompter.choose(f"Enter your choice (1-{len(MENU)})", 1, len(MENU))
            if choice == len(MENU):
                output.success("Thank you for using Recipe Explorer!")
                return
            await actions[choice]()

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    async def _offer_results(self, recipes: list[dict[str, Any]], title: str) -> None:
        if not recipes:
            get_output().info("No recipes found")
            return
        print_recipe_list(recipes, title=title)
        choice = self._choose_from(recipes)
        if choice is not None:
            chosen_id = recipe_id(choice)
            if chosen_id is not None:
                await self.view_recipe_details(chosen_id)

    def _report(self, context: str, exc: RecipeExplorerError) -> None:
        """Report a failed operation and remember it for the exit code."""
        self.last_error = exc
        get_output().error(f"{context}: {exc}")

    def _choose_from(self, recipes: list[dict[str, Any]]) -> Optional[dict[str, Any]]:
        if not self.prompter.confirm("Would you like to view details for a recipe?"):
            return None
        index = self.prompter.choose(f"Enter recipe number (1-{len(recipes)})", 1, len(recipes))
        return recipes[index - 1]

    async def _present(self, recipe: dict[str, Any]) -> None:
        """Display *recipe* and offer to add it to or remove it from favourites."""
        meal_id = recipe_id(recipe)
        is_favorite = meal_id is not None and self.favorites.is_favorite(meal_id)
        print_recipe(recipe, favorite=is_favorite)
        if meal_id is None:
            return
        output = get_output()
        try:
            if is_favorite:
                if self.prompter.confirm("This recipe is in your favorites. Remove it?"):
                    await self.favorites.remove(meal_id)
                    output.success(f"Removed {recipe_name(recipe)} from favorites.")
            elif self.prompter.confirm("Add this recipe to favorites?"):
                await self.favorites.add(recipe)
                output.success(f"Added {recipe_name(recipe)} to favorites.")
        except RecipeExplorerError as exc:
            self._report("Error updating favorites", exc)

    async def _show_related(self, recipe: dict[str, Any]) -> None:
        output = get_output()
        output.progress("Fetching related recipes...")
        try:
            related = await self.client.get_related_recipes(recipe)
        except RecipeExplorerError as exc:
            self._report("Error fetching related recipes", exc)
            return
        if related:
            print_recipe_list(related, title="You might also like")
        else:
            output.info("No related recipes found")

    async def _first_random(self, count: int) -> Optional[dict[str, Any]]:
        """Race *count* random-recipe requests and return the first success.

        The losing requests are cancelled. If every request fails, the
        first failure is raised.
        """
        tasks = [asyncio.ensure_future(self.client.get_random_meal()) for _ in range(count)]
        first_error: Optional[BaseException] = None
        winner: Optional[dict[str, Any]] = None
        pending = set(tasks)
        try:
            while pending and winner is None:
                done, pending = await asyncio.wait(pending, return_when=asyncio.FIRST_COMPLETED)
                for task in done:
                    exc = task.exception()
                    if exc is not None:
                        first_error = first_error or exc
                    elif winner is None and task.result() is not None:
                        winner = task.result()
        finally:
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)
        if winner is None and first_error is not None:
            raise first_error
        return winner
