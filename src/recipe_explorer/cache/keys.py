"""Cache key conventions, one helper per kind of remote lookup."""

from __future__ import annotations

from typing import Iterable


def search_key(query: str) -> str:
    """Key for a search by recipe name."""
    return f"search_{query.strip().lower()}"


def recipe_key(recipe_id: str) -> str:
    """Key for a single recipe looked up by id."""
    return f"recipe_{recipe_id.strip()}"


def letters_key(letters: Iterable[str]) -> str:
    """Key for a first-letter search; order and repeats of *letters* do not matter."""
    return "letters_" + "".join(sorted({letter.lower() for letter in letters}))


def ingredient_key(ingredient: str) -> str:
    """Key for a search by main ingredient."""
    return f"ingredient_{ingredient.strip().lower()}"
