"""Config commands -- view and modify the global configuration.

Provides the ``recipe-explorer config`` sub-command group for reading,
updating, and resetting :class:`~recipe_explorer.models.GlobalConfig`.
Settings cover the API endpoint and timeouts, the cache TTL, and the
default output format.
"""

from __future__ import annotations

from typing import Any

import typer

from recipe_explorer.output import error, format_response, info, success

config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show(ctx: typer.Context) -> None:
    """Show the effective configuration and where its files live.

    The values shown include environment and command-line overrides.

    Example::

        recipe-explorer config show
        recipe-explorer --ttl 60 --json config show
    """
    from recipe_explorer.config import cache_file_path, favorites_file_path, get_config_dir
    from recipe_explorer.session import config_from_context

    config = config_from_context(ctx)
    info(f"Config directory: {get_config_dir()}")
    info(f"Cache file: {cache_file_path()}")
    info(f"Favorites file: {favorites_file_path()}")
    format_response(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g., 'cache.ttl_seconds')."
    ),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    Uses dot notation for nested keys. The value is coerced to the type of
    the existing field (bool, int, float, or str) and the result is
    validated against :class:`~recipe_explorer.models.GlobalConfig` before
    saving.

    Raises:
        typer.Exit: With code 2 if the key path is invalid, the value
            cannot be coerced, or validation fails.

    Example::

        recipe-explorer config set cache.ttl_seconds 600
        recipe-explorer config set api.ingredient_timeout 2.5
        recipe-explorer config set output.format plain
    """
    from recipe_explorer.config import load_global_config, save_global_config
    from recipe_explorer.models import GlobalConfig

    data = load_global_config().model_dump(mode="json")

    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if k not in target or not isinstance(target[k], dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=2)
        target = target[k]

    final_key = keys[-1]
    if final_key not in target or isinstance(target[final_key], dict):
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    coerced: Any
    current = target[final_key]
    try:
        if isinstance(current, bool):
            coerced = value.lower() in ("true", "1", "yes")
        elif isinstance(current, int):
            coerced = int(value)
        elif isinstance(current, float):
            coerced = float(value)
        else:
            coerced = value
    except ValueError:
        error(f"Expected {type(current).__name__} for {key}, got: {value}")
        raise typer.Exit(code=2) from None

    target[final_key] = coerced

    try:
        new_config = GlobalConfig.model_validate(data)
    except Exception as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    save_global_config(new_config)
    success(f"Set {key} = {coerced}")


@config_app.command("reset")
def config_reset(ctx: typer.Context) -> None:
    """Reset configuration to defaults.

    Asks for confirmation unless ``--force`` is active. Favourites and the
    cache are not touched.

    Example::

        recipe-explorer --force config reset
    """
    from recipe_explorer.config import save_global_config
    from recipe_explorer.models import GlobalConfig

    force = ctx.obj.get("force", False) if ctx.obj else False
    if not force:
        confirmed = typer.confirm("Reset all config to defaults?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
