"""Pydantic schemas for trends, favorites and user settings.

Attribute names are snake_case in Python and camelCase on the wire and in the
tables (``createdAt``, ``displayName``...). Timestamps serialize as ISO-8601 UTC
strings with millisecond precision.
"""
from dataclasses import dataclass, fields
from datetime import datetime
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, field_serializer
from pydantic.alias_generators import to_camel

from tech_trends.utils import format_timestamp

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base model exposing camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_item(self) -> dict[str, Any]:
        """Plain JSON-compatible dict for storage; unset optional attributes are dropped."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Theme(str, Enum):
    """Dashboard colour theme."""

    LIGHT = "light"
    DARK = "dark"


class Trend(CamelModel):
    """A technology trend in the catalog."""

    id: str
    name: str
    category: str
    description: str
    popularity: int  # 0-100, enforced at the API boundary only
    growth: int  # signed percentage
    created_at: datetime
    updated_at: datetime

    @field_serializer("created_at", "updated_at")
    def _serialize_timestamp(self, ts: datetime) -> str:
        return format_timestamp(ts)


class TrendCreate(CamelModel):
    """Validated input for a new trend; the server assigns id and timestamps."""

    name: str
    category: str
    description: str
    popularity: int = 50
    growth: int = 0


class Favorite(CamelModel):
    """A (user, trend) bookmark. Immutable until deleted."""

    user_id: str
    trend_id: str
    created_at: datetime

    @field_serializer("created_at")
    def _serialize_timestamp(self, ts: datetime) -> str:
        return format_timestamp(ts)


class FavoriteWithTrend(Favorite):
    """Favorite enriched with its trend; ``trend`` is None when the trend was deleted."""

    trend: Trend | None = None


class UserSettings(CamelModel):
    """Per-user profile settings."""

    user_id: str
    display_name: str | None = None  # <= 50 chars at the API boundary
    avatar_url: str | None = None
    bio: str | None = None  # <= 200 chars at the API boundary
    theme: Theme = Theme.LIGHT
    notifications: bool = True
    updated_at: datetime

    @field_serializer("updated_at")
    def _serialize_timestamp(self, ts: datetime) -> str:
        return format_timestamp(ts)

    @classmethod
    def default(cls, user_id: str, now: datetime) -> "UserSettings":
        """Settings returned for a user who has never saved any."""
        return cls(user_id=user_id, theme=Theme.LIGHT, notifications=True, updated_at=now)


@dataclass(frozen=True)
class Provided(Generic[T]):
    """A value the caller explicitly supplied in a partial update.

    An omitted field is represented by ``None`` in place of a ``Provided``;
    ``Provided(None)`` means the caller explicitly sent null.
    """

    value: T


@dataclass(frozen=True)
class _Patch:
    def provided(self) -> dict[str, Any]:
        """Map of field name to value for every explicitly supplied field."""
        out: dict[str, Any] = {}
        for f in fields(self):
            current = getattr(self, f.name)
            if current is not None:
                out[f.name] = current.value
        return out


@dataclass(frozen=True)
class TrendUpdate(_Patch):
    """Partial trend update; each attribute is independently optional."""

    name: Provided[str] | None = None
    category: Provided[str] | None = None
    description: Provided[str] | None = None
    popularity: Provided[int] | None = None
    growth: Provided[int] | None = None


@dataclass(frozen=True)
class SettingsUpdate(_Patch):
    """Partial settings update merged over the stored (or default) settings."""

    display_name: Provided[str | None] | None = None
    avatar_url: Provided[str | None] | None = None
    bio: Provided[str | None] | None = None
    theme: Provided[Theme] | None = None
    notifications: Provided[bool] | None = None


__all__ = [
    "CamelModel",
    "Favorite",
    "FavoriteWithTrend",
    "Provided",
    "SettingsUpdate",
    "Theme",
    "Trend",
    "TrendCreate",
    "TrendUpdate",
    "UserSettings",
]
