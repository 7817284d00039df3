import asyncio
from datetime import datetime, timezone

import pytest

from tech_trends.db import FavoriteAlreadyExistsError
from tech_trends.db import trends as trends_module
from tech_trends.db.trends import CATEGORY_INDEX
from tech_trends.schemas import Provided, SettingsUpdate, Theme, TrendCreate, TrendUpdate


# --- trends ---


async def test_create_assigns_id_and_equal_timestamps(trend_repository, trends_table):
    trend = await trend_repository.create(
        TrendCreate(name="Zig", category="Backend", description="Systems language")
    )
    assert trend.id
    assert trend.created_at == trend.updated_at
    assert trends_table.items[(trend.id,)]["createdAt"] == trends_table.items[(trend.id,)]["updatedAt"]
    assert await trend_repository.get(trend.id) == trend


async def test_get_missing_is_none(trend_repository):
    assert await trend_repository.get("missing") is None


async def test_list_by_category_uses_index(trend_repository, trends_table, seeded_trends, monkeypatch):
    seen = {}
    original = trends_table.query

    def spy(*args, **kwargs):
        seen.update(kwargs)
        return original(*args, **kwargs)

    monkeypatch.setattr(trends_table, "query", spy)
    trends = await trend_repository.list_by_category("Backend")
    assert [t.name for t in trends] == ["Go"]
    assert seen["index_name"] == CATEGORY_INDEX


async def test_list_all_respects_limit(trend_repository, seeded_trends):
    assert len(await trend_repository.list_all()) == 3
    assert len(await trend_repository.list_all(limit=1)) == 1


async def test_update_changes_only_supplied_fields(trend_repository, seeded_trends, monkeypatch):
    later = datetime(2030, 1, 1, tzinfo=timezone.utc)
    monkeypatch.setattr(trends_module, "utc_now", lambda: later)
    react = seeded_trends[0]

    updated = await trend_repository.update(react.id, TrendUpdate(growth=Provided(-3)))

    assert updated.growth == -3
    assert updated.popularity == react.popularity
    assert updated.name == react.name
    assert updated.created_at == react.created_at
    assert updated.updated_at == later


async def test_update_missing_returns_none_and_writes_nothing(trend_repository, trends_table):
    assert await trend_repository.update("missing", TrendUpdate(name=Provided("x"))) is None
    assert trends_table.mutations == 0


async def test_delete_is_unconditional(trend_repository, seeded_trends):
    go = seeded_trends[2]
    assert await trend_repository.delete(go.id) is True
    assert await trend_repository.delete(go.id) is True
    assert await trend_repository.get(go.id) is None


async def test_list_categories(trend_repository, seeded_trends):
    assert await trend_repository.list_categories() == ["Backend", "Frontend"]


# --- favorites ---


async def test_add_then_duplicate_raises(favorite_repository):
    favorite = await favorite_repository.add("user-1", "trend-1")
    assert favorite.user_id == "user-1"
    with pytest.raises(FavoriteAlreadyExistsError):
        await favorite_repository.add("user-1", "trend-1")


async def test_same_trend_for_different_users(favorite_repository):
    await favorite_repository.add("user-1", "trend-1")
    await favorite_repository.add("user-2", "trend-1")
    assert len(await favorite_repository.list_by_user("user-1")) == 1
    assert len(await favorite_repository.list_by_user("user-2")) == 1


async def test_concurrent_adds_exactly_one_succeeds(favorite_repository):
    results = await asyncio.gather(
        *(favorite_repository.add("user-1", "trend-1") for _ in range(5)),
        return_exceptions=True,
    )
    errors = [r for r in results if isinstance(r, FavoriteAlreadyExistsError)]
    assert len(errors) == 4
    assert len(await favorite_repository.list_by_user("user-1")) == 1


async def test_remove_missing_favorite_succeeds(favorite_repository):
    assert await favorite_repository.remove("user-1", "nothing") is True
    assert await favorite_repository.get("user-1", "nothing") is None


# --- settings ---


async def test_settings_default_is_not_persisted(settings_repository, settings_table):
    settings = await settings_repository.get("user-1")
    assert settings.theme is Theme.LIGHT
    assert settings.notifications is True
    assert settings.display_name is None
    assert settings_table.mutations == 0


async def test_settings_update_merges_over_stored(settings_repository):
    await settings_repository.update("user-1", SettingsUpdate(display_name=Provided("Ada")))
    updated = await settings_repository.update("user-1", SettingsUpdate(theme=Provided(Theme.DARK)))
    assert updated.display_name == "Ada"
    assert updated.theme is Theme.DARK
    assert await settings_repository.get("user-1") == updated


async def test_settings_explicit_null_clears(settings_repository, settings_table):
    await settings_repository.update("user-1", SettingsUpdate(bio=Provided("hello")))
    updated = await settings_repository.update("user-1", SettingsUpdate(bio=Provided(None)))
    assert updated.bio is None
    assert "bio" not in settings_table.items[("user-1",)]
