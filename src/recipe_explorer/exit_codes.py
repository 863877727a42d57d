"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~recipe_explorer.exceptions.RecipeExplorerError`
subclass. Shell wrappers can inspect the exit code to tell a network
failure from a damaged favourites file without parsing stderr.

Example::

    $ recipe-explorer show 52772
    $ echo $?
    6   # EXIT_CONNECTION_ERROR -- TheMealDB was unreachable
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or an invalid record."""

EXIT_NOT_FOUND = 4
"""The requested recipe was not found."""

EXIT_SERVER_ERROR = 5
"""The remote API failed or returned something unusable."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_CORRUPT_STORE = 8
"""A persisted cache or favourites file could not be read or parsed."""

EXIT_STORE_WRITE_ERROR = 9
"""A persisted cache or favourites file could not be written."""

EXIT_INTERRUPTED = 130
"""The user pressed Ctrl-C."""
