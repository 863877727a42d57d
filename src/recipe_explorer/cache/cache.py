"""Get-or-fetch response cache with per-entry expiry.

Entries live in memory as :class:`~recipe_explorer.models.CacheEntry`
objects and are mirrored to a :class:`~recipe_explorer.storage.JsonStore`
after every mutation. A lookup either returns an unexpired value or awaits
the caller-supplied producer, stores its result for ``ttl`` seconds, and
returns it.

The cache is best-effort: a corrupt file is discarded on startup and a
failed write after a successful fetch is logged, not raised. Producer
failures are never caught here.

See Also:
    :class:`~recipe_explorer.models.CacheConfig` -- the Pydantic model that
    controls ``enabled`` and ``ttl_seconds``.
"""

from __future__ import annotations

import asyncio
import copy
import logging
import time
from typing import Any, Awaitable, Callable, Optional

from pydantic import ValidationError

from recipe_explorer.exceptions import CorruptStoreError, StoreWriteError
from recipe_explorer.models import CacheConfig, CacheEntry
from recipe_explorer.storage import JsonStore

logger = logging.getLogger(__name__)

Producer = Callable[[], Awaitable[Any]]
"""A zero-argument coroutine function invoked only on a miss."""


class RecipeCache:
    """Keyed, expiring cache persisted to a single JSON file.

    All lookups and mutations run under one :class:`asyncio.Lock`, which is
    held while a producer runs. Two concurrent requests for the same key
    therefore trigger one fetch; the second request sees the first one's
    entry as a hit.

    Args:
        store: The store that owns the cache file.
        config: Cache configuration (``enabled`` flag and ``ttl_seconds``).
        clock: Returns the current UNIX time in seconds. Tests substitute
            a fake clock.

    Example::

        cache = RecipeCache(JsonStore(path), CacheConfig(ttl_seconds=3600))
        await cache.initialize()
        await cache.clear_expired()
        recipe = await cache.get_cached_or_fetch(
            recipe_key("52772"), lambda: client.get_meal_by_id("52772")
        )
    """

    def __init__(
        self,
        store: JsonStore,
        config: CacheConfig,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._config = config
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = asyncio.Lock()

    @property
    def enabled(self) -> bool:
        return self._config.enabled

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #

    async def initialize(self) -> None:
        """Load entries from disk, starting empty if the file is unusable.

        Entries that do not have the ``{value, expiresAt}`` shape are
        dropped individually; a file that cannot be parsed at all is reset.
        """
        if not self.enabled:
            return
        async with self._lock:
            try:
                raw = self._store.load()
            except CorruptStoreError as exc:
                logger.warning("Cache file is corrupt, starting empty: %s", exc)
                self._entries = {}
                self._try_persist()
                return

            entries: dict[str, CacheEntry] = {}
            for key, data in raw.items():
                try:
                    entries[key] = CacheEntry.model_validate(data)
                except ValidationError:
                    logger.warning("Dropping malformed cache entry %r", key)
            self._entries = entries
            logger.debug("Loaded %d cache entries from %s", len(entries), self._store.path)

    async def clear_expired(self) -> int:
        """Remove every entry whose expiry time has passed.

        Returns:
            The number of entries removed. The file is only rewritten when
            something was removed.
        """
        if not self.enabled:
            return 0
        async with self._lock:
            now = self._clock()
            expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
            for key in expired:
                del self._entries[key]
            if expired:
                logger.debug("Evicted %d expired cache entries", len(expired))
                self._try_persist()
            return len(expired)

    # ------------------------------------------------------------------ #
    # Get-or-fetch
    # ------------------------------------------------------------------ #

    async def get_cached_or_fetch(
        self,
        key: str,
        producer: Producer,
        ttl: Optional[float] = None,
    ) -> Any:
        """Return the cached value for *key*, fetching it with *producer* on a miss.

        Args:
            key: Cache key, typically built with :mod:`recipe_explorer.cache.keys`.
            producer: Zero-argument coroutine function. Awaited only when
                the key is absent or expired.
            ttl: Lifetime of a fresh entry in seconds. Defaults to
                ``config.ttl_seconds``.

        Returns:
            A copy of the cached or freshly produced value. A producer
            result of ``None`` is returned as-is and not cached.

        Raises:
            ValueError: If *ttl* is not positive.
            Exception: Whatever *producer* raises, unchanged. No entry is
                written in that case.
        """
        ttl = self._config.ttl_seconds if ttl is None else ttl
        if ttl <= 0:
            raise ValueError(f"ttl must be positive, got {ttl}")

        if not self.enabled:
            return await producer()

        async with self._lock:
            entry = self._entries.get(key)
            if entry is not None and not entry.is_expired(self._clock()):
                logger.debug("Cache hit: %s", key)
                return copy.deepcopy(entry.value)

            logger.debug("Cache %s: %s", "miss" if entry is None else "expired", key)
            value = await producer()
            if value is None:
                return None

            self._entries[key] = CacheEntry(
                value=copy.deepcopy(value),
                expires_at=self._clock() + ttl,
            )
            self._try_persist()
            return value

    # ------------------------------------------------------------------ #
    # Inspection and maintenance
    # ------------------------------------------------------------------ #

    def peek(self, key: str) -> Any:
        """Return a copy of the unexpired value for *key*, or ``None``. Never fetches."""
        entry = self._entries.get(key)
        if entry is None or entry.is_expired(self._clock()):
            return None
        return copy.deepcopy(entry.value)

    def entries(self) -> dict[str, dict[str, Any]]:
        """Return a copy of all entries in their on-disk shape."""
        return {key: entry.to_json() for key, entry in self._entries.items()}

    async def invalidate(self, key: str) -> bool:
        """Remove a single entry. Returns ``True`` if it existed."""
        async with self._lock:
            if self._entries.pop(key, None) is None:
                return False
            self._persist()
            return True

    async def clear(self) -> int:
        """Remove all entries and return how many there were."""
        async with self._lock:
            count = len(self._entries)
            self._entries = {}
            if self.enabled:
                self._persist()
            return count

    def stats(self) -> dict[str, Any]:
        """Return cache statistics.

        Returns:
            A ``dict`` with ``enabled`` (bool), and when enabled:
            ``size``, ``expired``, ``path`` and ``ttl_seconds``.
        """
        if not self.enabled:
            return {"enabled": False}
        now = self._clock()
        return {
            "enabled": True,
            "size": len(self._entries),
            "expired": sum(1 for entry in self._entries.values() if entry.is_expired(now)),
            "path": str(self._store.path),
            "ttl_seconds": self._config.ttl_seconds,
        }

    def _persist(self) -> None:
        self._store.save(self.entries())

    def _try_persist(self) -> None:
        """Persist, logging instead of raising when the write fails."""
        try:
            self._persist()
        except StoreWriteError as exc:
            logger.warning("Could not persist cache: %s", exc)
