"""File-backed JSON mapping with atomic writes.

The whole mapping is loaded at startup and rewritten in full on every
mutation. Writes go to a temporary file in the same directory which is
fsynced and then renamed over the target with :func:`os.replace`, so a
crash mid-write leaves either the old file or the new one, never a
half-written file.

See Also:
    :class:`~recipe_explorer.cache.RecipeCache` and
    :class:`~recipe_explorer.favorites.FavoritesStore` -- the two owners
    of a ``JsonStore``.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Optional

from recipe_explorer.exceptions import CorruptStoreError, StoreWriteError


def atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is guaranteed to be an atomic rename on POSIX systems.
    On success the temp file is renamed over *path*; on any failure the temp
    file is cleaned up.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close in finally
        os.replace(tmp_path, path)
    except BaseException:
        # Clean up the temp file on any error (including KeyboardInterrupt).
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


class JsonStore:
    """Durable mapping from string key to JSON-serialisable value.

    Args:
        path: The backing file. Its parent directory is created on the
            first write.

    Example::

        store = JsonStore(Path("/tmp/favorites.json"))
        data = store.load()          # {} when the file does not exist
        data["52772"] = {"idMeal": "52772", "strMeal": "Teriyaki Chicken"}
        store.save(data)
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        """The filesystem path of the backing file."""
        return self._path

    def load(self) -> dict[str, Any]:
        """Read the backing file.

        Returns:
            The stored mapping, or an empty dict when the file is missing.

        Raises:
            CorruptStoreError: If the file cannot be read, is not valid
                JSON, or does not hold a JSON object at the top level.
        """
        if not self._path.is_file():
            return {}
        try:
            text = self._path.read_text(encoding="utf-8")
            data = json.loads(text)
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as exc:
            raise CorruptStoreError(
                f"Cannot read {self._path}: {exc}", path=self._path
            ) from exc
        if not isinstance(data, dict):
            raise CorruptStoreError(
                f"Expected a JSON object in {self._path}, got {type(data).__name__}",
                path=self._path,
            )
        return data

    def save(self, mapping: dict[str, Any]) -> None:
        """Serialise *mapping* and replace the backing file atomically.

        Raises:
            StoreWriteError: If the mapping is not JSON-serialisable or the
                file cannot be written. The previous file is left intact.
        """
        try:
            text = json.dumps(mapping, indent=2, ensure_ascii=False) + "\n"
        except (TypeError, ValueError) as exc:
            raise StoreWriteError(f"Cannot serialise data for {self._path}: {exc}") from exc
        try:
            atomic_write(self._path, text)
        except OSError as exc:
            raise StoreWriteError(f"Cannot write {self._path}: {exc}") from exc
