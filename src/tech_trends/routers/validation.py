"""Request body and query validation shared by the route handlers.

Every helper raises ``BadRequestError`` with a message naming the violated
constraint; nothing here touches the store.
"""
import json
from collections.abc import Mapping
from typing import Any

from tech_trends.errors import BadRequestError
from tech_trends.messages import ApiRequest
from tech_trends.schemas import (Provided, SettingsUpdate, Theme, TrendCreate,
                                 TrendUpdate)

DEFAULT_TRENDS_LIMIT = 50
POPULARITY_MIN = 0
POPULARITY_MAX = 100
DISPLAY_NAME_MAX = 50
BIO_MAX = 200


def parse_json_body(request: ApiRequest) -> dict[str, Any]:
    """Decode the body as a JSON object; an empty body is ``{}``."""
    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except ValueError as exc:
        raise BadRequestError("Invalid JSON body") from exc
    if not isinstance(data, dict):
        raise BadRequestError("Request body must be a JSON object")
    return data


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def check_popularity(value: Any) -> int:
    if not _is_int(value):
        raise BadRequestError("popularity must be an integer")
    if not POPULARITY_MIN <= value <= POPULARITY_MAX:
        raise BadRequestError(
            f"popularity must be between {POPULARITY_MIN} and {POPULARITY_MAX}"
        )
    return value


def check_growth(value: Any) -> int:
    if not _is_int(value):
        raise BadRequestError("growth must be an integer")
    return value


def _check_text(body: Mapping[str, Any], key: str) -> str:
    value = body[key]
    if not isinstance(value, str) or not value.strip():
        raise BadRequestError(f"{key} must be a non-empty string")
    return value


def parse_trend_create(body: Mapping[str, Any]) -> TrendCreate:
    if not all(body.get(key) for key in ("name", "category", "description")):
        raise BadRequestError("name, category, and description are required")
    data: dict[str, Any] = {
        "name": _check_text(body, "name"),
        "category": _check_text(body, "category"),
        "description": _check_text(body, "description"),
    }
    if body.get("popularity") is not None:
        data["popularity"] = check_popularity(body["popularity"])
    if body.get("growth") is not None:
        data["growth"] = check_growth(body["growth"])
    return TrendCreate(**data)


def parse_trend_update(body: Mapping[str, Any]) -> TrendUpdate:
    """Only keys present in the body are applied; unknown keys are ignored."""
    changes: dict[str, Provided] = {}
    for key in ("name", "category", "description"):
        if key in body:
            changes[key] = Provided(_check_text(body, key))
    if "popularity" in body:
        changes["popularity"] = Provided(check_popularity(body["popularity"]))
    if "growth" in body:
        changes["growth"] = Provided(check_growth(body["growth"]))
    return TrendUpdate(**changes)


def _optional_text(body: Mapping[str, Any], key: str, max_length: int | None = None) -> str | None:
    value = body[key]
    if value is None:
        return None
    if not isinstance(value, str):
        raise BadRequestError(f"{key} must be a string")
    if max_length is not None and len(value) > max_length:
        raise BadRequestError(f"{key} must be {max_length} characters or less")
    return value


def parse_settings_update(body: Mapping[str, Any]) -> SettingsUpdate:
    """Explicit null clears displayName/avatarUrl/bio; theme and notifications may not be null."""
    changes: dict[str, Provided] = {}
    if "theme" in body:
        try:
            changes["theme"] = Provided(Theme(body["theme"]))
        except ValueError as exc:
            raise BadRequestError("theme must be 'light' or 'dark'") from exc
    if "displayName" in body:
        changes["display_name"] = Provided(_optional_text(body, "displayName", DISPLAY_NAME_MAX))
    if "bio" in body:
        changes["bio"] = Provided(_optional_text(body, "bio", BIO_MAX))
    if "avatarUrl" in body:
        changes["avatar_url"] = Provided(_optional_text(body, "avatarUrl"))
    if "notifications" in body:
        if not isinstance(body["notifications"], bool):
            raise BadRequestError("notifications must be a boolean")
        changes["notifications"] = Provided(body["notifications"])
    return SettingsUpdate(**changes)


def parse_limit(query: Mapping[str, str]) -> int:
    raw = query.get("limit")
    if raw is None or raw == "":
        return DEFAULT_TRENDS_LIMIT
    try:
        limit = int(raw)
    except ValueError as exc:
        raise BadRequestError("limit must be a positive integer") from exc
    if limit <= 0:
        raise BadRequestError("limit must be a positive integer")
    return limit
