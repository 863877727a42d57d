"""Shared test fixtures for recipe_explorer.

Provides canned TheMealDB payloads, isolated config directories, output
managers, and a fake clock. These fixtures are automatically discovered by
pytest and available to all test modules without explicit imports.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from recipe_explorer.output import OutputFormat, OutputManager, reset_output, set_output


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams and the
    test finishes, the cached references become stale. Resetting forces a
    fresh manager on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Recipe payloads
# ---------------------------------------------------------------------------


def _make_meal(meal_id: str, name: str, category: str = "Chicken", **extra: Any) -> dict[str, Any]:
    """Build a TheMealDB-shaped recipe dict."""
    meal = {
        "idMeal": meal_id,
        "strMeal": name,
        "strCategory": category,
        "strArea": "Japanese",
    }
    meal.update(extra)
    return meal


@pytest.fixture
def teriyaki() -> dict[str, Any]:
    """A full recipe payload with ingredients and instructions."""
    return _make_meal(
        "52772",
        "Teriyaki Chicken Casserole",
        strTags="Meat,Casserole",
        strInstructions="Preheat oven to 350 F.",
        strIngredient1="soy sauce",
        strMeasure1="3/4 cup",
        strIngredient2="water",
        strMeasure2="1/2 cup",
        strIngredient3="",
        strMeasure3="",
        strYoutube="https://www.youtube.com/watch?v=4aZr5hZXP_s",
    )


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME, XDG_CACHE_HOME, and XDG_DATA_HOME to
    subdirectories of tmp_path so that tests never touch real user
    files, and clears all RECIPE_EXPLORER_* environment variables.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setattr("recipe_explorer.config._is_xdg_platform", lambda: True)

    for var in [
        "RECIPE_EXPLORER_API_URL",
        "RECIPE_EXPLORER_CACHE_TTL",
        "RECIPE_EXPLORER_NO_CACHE",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def plain_output() -> OutputManager:
    """Install a PLAIN-format OutputManager that keeps diagnostics."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def json_output() -> OutputManager:
    """Install a JSON-format OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.JSON)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# Time
# ---------------------------------------------------------------------------


class FakeClock:
    """A manually advanced replacement for :func:`time.time`."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
