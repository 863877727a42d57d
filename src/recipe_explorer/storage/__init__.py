"""Durable JSON key/value storage.

:class:`JsonStore` reads and writes a single JSON object to disk using an
atomic temp-file-then-rename strategy (:func:`atomic_write`). Both the
response cache and the favourites collection sit on top of it, each with
its own file.
"""

from recipe_explorer.storage.json_store import JsonStore, atomic_write

__all__ = ["JsonStore", "atomic_write"]
