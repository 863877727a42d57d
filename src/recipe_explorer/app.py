"""Typer application and CLI entry point for recipe_explorer.

This module wires together the top-level Typer application and registers
the built-in sub-commands (``menu``, ``search``, ``show``, ``letters``,
``ingredient``, ``random``, ``favorites``, ``cache``, ``config``). Running
``recipe-explorer`` without a sub-command starts the interactive menu.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers and invokes the Typer
app. Unhandled exceptions are written to a crash log under the data
directory.

See Also:
    :mod:`recipe_explorer.config`: Configuration resolution.
    :mod:`recipe_explorer.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional

import typer

from recipe_explorer import __version__
from recipe_explorer.exit_codes import EXIT_GENERIC_FAILURE, EXIT_INTERRUPTED

if TYPE_CHECKING:
    from recipe_explorer.output import OutputFormat


app = typer.Typer(
    name="recipe-explorer",
    help="Search TheMealDB recipes, with a local cache and a favorites list.",
    invoke_without_command=True,
    add_completion=True,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"recipe-explorer {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    """Send library log records to stderr; DEBUG with ``--verbose``, WARNING otherwise."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )
    # httpx logs every request at INFO/DEBUG; keep it out of the way.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def _configured_format() -> OutputFormat:
    """Return the default format from the config file.

    An unreadable config file falls back to ``auto`` here; the command
    itself reports it when it resolves the full configuration.
    """
    from recipe_explorer.config import load_global_config
    from recipe_explorer.exceptions import ConfigError
    from recipe_explorer.output import OutputFormat

    try:
        return OutputFormat(load_global_config().output.format)
    except ConfigError:
        return OutputFormat.AUTO


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Skip confirmations."
    ),
    no_input: bool = typer.Option(
        False, "--no-input", help="Disable interactive prompts."
    ),
    api_url: Optional[str] = typer.Option(
        None, "--api-url", help="TheMealDB API root URL."
    ),
    ttl: Optional[int] = typer.Option(
        None, "--ttl", help="Cache lifetime for new entries, in seconds."
    ),
    no_cache: bool = typer.Option(
        False, "--no-cache", help="Bypass the response cache."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~recipe_explorer.output.OutputManager`
    and logging from CLI flags, and stores shared options in ``ctx.obj``.
    Starts the interactive menu when no sub-command is given.
    """
    from recipe_explorer.output import OutputFormat, OutputManager, set_output

    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN
    else:
        fmt = _configured_format()

    set_output(
        OutputManager(
            format=fmt,
            no_color=no_color,
            quiet=quiet,
            verbose=verbose,
        )
    )
    _configure_logging(verbose)

    ctx.ensure_object(dict)
    ctx.obj["force"] = force
    ctx.obj["no_input"] = no_input
    ctx.obj["verbose"] = verbose
    ctx.obj["api_url"] = api_url
    ctx.obj["ttl"] = ttl
    ctx.obj["no_cache"] = no_cache

    if ctx.invoked_subcommand is None:
        from recipe_explorer.commands.browse import menu_command

        menu_command(ctx)


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from recipe_explorer.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def register_commands() -> None:
    """Attach the built-in sub-commands to :data:`app`."""
    from recipe_explorer.commands.browse import (
        ingredient_command,
        letters_command,
        menu_command,
        random_command,
        search_command,
        show_command,
    )
    from recipe_explorer.commands.cache import cache_app
    from recipe_explorer.commands.config import config_app
    from recipe_explorer.commands.favorites import favorites_app

    app.command("menu")(menu_command)
    app.command("search")(search_command)
    app.command("show")(show_command)
    app.command("letters")(letters_command)
    app.command("ingredient")(ingredient_command)
    app.command("random")(random_command)
    app.add_typer(favorites_app, name="favorites", help="Manage favorite recipes.")
    app.add_typer(cache_app, name="cache", help="Inspect and maintain the response cache.")
    app.add_typer(config_app, name="config", help="Configuration management.")


register_commands()


def main() -> None:
    """CLI entry point invoked by the ``recipe-explorer`` console script.

    Unhandled :class:`~recipe_explorer.exceptions.RecipeExplorerError`
    instances cause a clean exit with the error's ``exit_code``. All other
    exceptions produce a crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)
    except Exception as exc:
        from recipe_explorer.exceptions import RecipeExplorerError
        from recipe_explorer.output import error

        if isinstance(exc, RecipeExplorerError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
