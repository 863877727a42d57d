"""Built-in CLI sub-commands for recipe_explorer.

Each module exposes either a Typer sub-application or plain command
functions that :mod:`recipe_explorer.app` registers on the root app.

Modules:
    browse: ``menu``, ``search``, ``show``, ``letters``, ``ingredient``, ``random``.
    favorites: ``favorites list|add|remove``.
    cache: ``cache stats|prune|clear``.
    config: ``config show|set|reset``.
"""
