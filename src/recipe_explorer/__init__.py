"""recipe_explorer -- Browse TheMealDB from the terminal.

Search the remote recipe catalog, view details, and keep a list of
favourite recipes. Remote lookups go through a persistent, TTL-based
get-or-fetch cache so repeated searches do not hit the network.

Typical workflow::

    recipe-explorer                   # interactive menu
    recipe-explorer search chicken    # one-shot search
    recipe-explorer favorites list

Modules:
    app: Typer application and CLI entry point.
    explorer: The interactive operations behind the menu and commands.
    models: Pydantic models shared across the package.
    config: XDG-aware configuration and file locations.
    storage: Atomic JSON key/value store.
    cache: TTL cache with get-or-fetch semantics.
    favorites: Persisted favourites collection.
    client: Async TheMealDB client.
    formatting: Recipe text, tables and panels.
    session: Per-command construction of cache, favourites and client.
    exceptions: Exception hierarchy with exit-code mapping.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
