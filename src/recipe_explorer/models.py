"""Pydantic models shared across recipe_explorer.

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`ApiConfig`, :class:`CacheConfig`, :class:`OutputConfig`, and
    :class:`GlobalConfig`.

**Persisted data models** -- the on-disk shape of the cache file:
    :class:`CacheEntry`.

Recipes themselves are kept as the plain dicts TheMealDB returns
(``idMeal``, ``strMeal``, ``strCategory``, ...) so that favourites can be
stored verbatim and redisplayed without a refetch.
"""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_API_URL = "https://www.themealdb.com/api/json/v1/1"


# --- Configuration ---


class ApiConfig(BaseModel):
    """Settings for the TheMealDB client."""

    base_url: str = Field(default=DEFAULT_API_URL, description="TheMealDB API root")
    timeout: float = Field(default=10.0, description="Request timeout in seconds")
    max_retries: int = Field(default=2, ge=0, description="Max retry attempts")
    ingredient_timeout: float = Field(
        default=5.0, gt=0, description="Upper bound for an ingredient search in seconds"
    )
    related_limit: int = Field(
        default=5, ge=0, description="How many related recipes to show"
    )


class CacheConfig(BaseModel):
    """Response cache settings."""

    enabled: bool = Field(default=True, description="Enable the response cache")
    ttl_seconds: int = Field(default=3600, gt=0, description="Cache TTL in seconds")


class OutputConfig(BaseModel):
    """Default output settings."""

    format: Literal["auto", "json", "plain", "rich"] = Field(
        default="auto", description="Format used when neither --json nor --plain is given"
    )


class GlobalConfig(BaseModel):
    """Top-level user configuration.

    Persisted to ``<config_dir>/config.json`` by
    :func:`~recipe_explorer.config.save_global_config`. Every field has a
    default, so a missing file yields a usable configuration.
    """

    api: ApiConfig = Field(default_factory=ApiConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


# --- Persisted data ---


class CacheEntry(BaseModel):
    """A single cached value together with its absolute expiry time.

    Serialised as ``{"value": ..., "expiresAt": <unix seconds>}``; the
    camel-case alias is the file format, ``expires_at`` is the Python name.

    Attributes:
        value: Any JSON-serialisable payload. Never ``None``.
        expires_at: UNIX timestamp (seconds) after which the entry is stale.
    """

    model_config = ConfigDict(populate_by_name=True)

    value: Any
    expires_at: float = Field(alias="expiresAt")

    @field_validator("value")
    @classmethod
    def _value_not_none(cls, v: Any) -> Any:
        if v is None:
            raise ValueError("cache entry value must not be null")
        return v

    def is_expired(self, now: float) -> bool:
        """Return ``True`` once *now* has reached :attr:`expires_at`."""
        return now >= self.expires_at

    def to_json(self) -> dict[str, Any]:
        """Return the on-disk representation."""
        return self.model_dump(mode="json", by_alias=True)


def recipe_id(record: dict[str, Any]) -> Optional[str]:
    """Return the identifier of a recipe payload, or ``None`` if it has none.

    TheMealDB payloads carry ``idMeal``; hand-built records may use ``id``.
    """
    for field in ("idMeal", "id"):
        value = record.get(field)
        if value is not None and str(value).strip():
            return str(value)
    return None


def recipe_name(record: dict[str, Any]) -> str:
    """Return the display name of a recipe payload."""
    return str(record.get("strMeal") or record.get("name") or "Unnamed recipe")
