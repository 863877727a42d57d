"""Turn TheMealDB recipe payloads into tables and panels.

The ``print_*`` functions render through the global
:class:`~recipe_explorer.output.OutputManager`, so ``--json`` gives
machine-readable output and a TTY gets Rich tables and panels.
"""

from __future__ import annotations

from typing import Any

from recipe_explorer.models import recipe_id, recipe_name
from recipe_explorer.output import OutputFormat, get_output

MAX_INGREDIENTS = 20


def recipe_ingredients(recipe: dict[str, Any]) -> list[tuple[str, str]]:
    """Return ``(ingredient, measure)`` pairs from ``strIngredientN`` / ``strMeasureN``."""
    pairs: list[tuple[str, str]] = []
    for n in range(1, MAX_INGREDIENTS + 1):
        ingredient = (recipe.get(f"strIngredient{n}") or "").strip()
        if not ingredient:
            continue
        measure = (recipe.get(f"strMeasure{n}") or "").strip()
        pairs.append((ingredient, measure))
    return pairs


def _recipe_heading(recipe: dict[str, Any]) -> str:
    return f"{recipe_name(recipe)} (ID: {recipe_id(recipe) or '?'})"


def _recipe_details(recipe: dict[str, Any]) -> list[str]:
    lines: list[str] = []
    category = recipe.get("strCategory")
    area = recipe.get("strArea")
    if category or area:
        lines.append(" | ".join(part for part in (category, area) if part))
    tags = recipe.get("strTags")
    if tags:
        lines.append(f"Tags: {tags}")

    ingredients = recipe_ingredients(recipe)
    if ingredients:
        lines.append("")
        lines.append("Ingredients:")
        for ingredient, measure in ingredients:
            lines.append(f"  - {measure} {ingredient}".rstrip() if measure else f"  - {ingredient}")

    instructions = (recipe.get("strInstructions") or "").strip()
    if instructions:
        lines.append("")
        lines.append("Instructions:")
        lines.append(instructions)

    for label, key in (("Video", "strYoutube"), ("Source", "strSource")):
        if recipe.get(key):
            lines.append(f"{label}: {recipe[key]}")
    return lines


def print_recipe(recipe: dict[str, Any], favorite: bool = False) -> None:
    """Render one recipe to stdout."""
    output = get_output()
    if output.format == OutputFormat.JSON:
        output.format_response(recipe)
        return
    title = _recipe_heading(recipe) + (" ★" if favorite else "")
    output.print_panel("\n".join(_recipe_details(recipe)), title=title)


def print_recipe_list(recipes: list[dict[str, Any]], title: str = "Recipes") -> None:
    """Render a numbered recipe table to stdout."""
    output = get_output()
    if output.format == OutputFormat.JSON:
        output.format_response(recipes)
        return
    rows = [
        [
            str(index),
            recipe_id(recipe) or "",
            recipe_name(recipe),
            str(recipe.get("strCategory") or ""),
            str(recipe.get("strArea") or ""),
        ]
        for index, recipe in enumerate(recipes, start=1)
    ]
    output.print_table(["#", "ID", "Name", "Category", "Area"], rows, title=title)
