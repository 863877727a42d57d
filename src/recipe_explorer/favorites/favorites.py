"""Favourite recipes keyed by recipe id.

The collection is an insertion-ordered mapping ``id -> record`` mirrored
to a :class:`~recipe_explorer.storage.JsonStore` after each mutation.
Unlike the response cache, favourites are user data: a corrupt file is
reported to the caller instead of being discarded, and a failed write
raises after rolling the in-memory collection back.
"""

from __future__ import annotations

import asyncio
import copy
import logging
from pathlib import Path
from typing import Any, Optional

from recipe_explorer.exceptions import CorruptStoreError, InvalidRecordError
from recipe_explorer.models import recipe_id
from recipe_explorer.storage import JsonStore

logger = logging.getLogger(__name__)


class FavoritesStore:
    """Read/write the user's favourite recipes.

    Args:
        store: The store that owns the favourites file.

    Example::

        favorites = FavoritesStore(JsonStore(path))
        await favorites.initialize()
        await favorites.add({"idMeal": "52772", "strMeal": "Teriyaki Chicken"})
        assert favorites.is_favorite("52772")
    """

    def __init__(self, store: JsonStore) -> None:
        self._store = store
        self._records: dict[str, dict[str, Any]] = {}
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        """The filesystem path of the favourites file."""
        return self._store.path

    async def initialize(self) -> None:
        """Load favourites from disk.

        A missing file yields an empty collection.

        Raises:
            CorruptStoreError: If the file cannot be parsed or holds
                something other than an object of record objects.
        """
        async with self._lock:
            raw = self._store.load()
            records: dict[str, dict[str, Any]] = {}
            for key, record in raw.items():
                if not isinstance(record, dict):
                    raise CorruptStoreError(
                        f"Favourite {key!r} in {self._store.path} is not an object",
                        path=self._store.path,
                    )
                records[str(key)] = record
            self._records = records
            logger.debug("Loaded %d favourites from %s", len(records), self._store.path)

    async def reset(self) -> None:
        """Discard every favourite, including a corrupt file on disk.

        Raises:
            StoreWriteError: If the file cannot be written. The in-memory
                collection is left as it was before the call.
        """
        async with self._lock:
            previous = self._records
            self._records = {}
            self._commit(previous)

    def is_favorite(self, recipe_id: str) -> bool:
        """Return whether *recipe_id* is in the collection."""
        return str(recipe_id) in self._records

    def get(self, recipe_id: str) -> Optional[dict[str, Any]]:
        """Return a copy of the stored record for *recipe_id*, or ``None``."""
        record = self._records.get(str(recipe_id))
        return copy.deepcopy(record) if record is not None else None

    def list(self) -> list[dict[str, Any]]:
        """Return copies of all records in insertion order."""
        return [copy.deepcopy(record) for record in self._records.values()]

    def __len__(self) -> int:
        return len(self._records)

    async def add(self, record: dict[str, Any]) -> str:
        """Store *record*, replacing any earlier record with the same id.

        A replaced record keeps its original position in the listing.

        Returns:
            The recipe id the record was stored under.

        Raises:
            InvalidRecordError: If the record has no ``idMeal`` or ``id``.
            StoreWriteError: If the file cannot be written. The in-memory
                collection is left as it was before the call.
        """
        key = recipe_id(record)
        if key is None:
            raise InvalidRecordError("Cannot add a favourite without a recipe id")
        async with self._lock:
            previous = dict(self._records)
            self._records[key] = copy.deepcopy(record)
            self._commit(previous)
        logger.debug("Added favourite %s", key)
        return key

    async def remove(self, recipe_id: str) -> bool:
        """Remove *recipe_id* from the collection.

        Removing an id that is not present is a no-op and does not touch
        the file.

        Returns:
            ``True`` if a record was removed.

        Raises:
            StoreWriteError: If the file cannot be written.
        """
        key = str(recipe_id)
        async with self._lock:
            if key not in self._records:
                return False
            previous = dict(self._records)
            del self._records[key]
            self._commit(previous)
        logger.debug("Removed favourite %s", key)
        return True

    def _commit(self, previous: dict[str, dict[str, Any]]) -> None:
        """Persist the current records, restoring *previous* if the write fails."""
        try:
            self._store.save(self._records)
        except Exception:
            self._records = previous
            raise
