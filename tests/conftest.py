import json
from unittest.mock import MagicMock

import pytest

from tech_trends.auth import AuthenticatedUser, Role
from tech_trends.db import FavoriteRepository, TrendRepository, UserSettingsRepository
from tech_trends.dispatcher import Router
from tech_trends.messages import ApiRequest
from tech_trends.routers import AdminRoutes, PublicRoutes, UserRoutes
from tech_trends.schemas import TrendCreate
from tech_trends.storage import AvatarStorage

from tests.fakes import FakeTable, FakeVerifier

USER = AuthenticatedUser(subject_id="user-1", email="user@example.com", role=Role.USER)
ADMIN = AuthenticatedUser(
    subject_id="admin-1",
    email="admin@example.com",
    role=Role.ADMIN,
    groups=frozenset({"admin"}),
)
USER_TOKEN = "user-token"
ADMIN_TOKEN = "admin-token"
SIGNED_URL = "https://user-icons-bucket.s3.amazonaws.com/avatars/user-1.png?X-Amz-Signature=abc"


@pytest.fixture
def trends_table():
    return FakeTable(("id",), name="tech-trends")


@pytest.fixture
def favorites_table():
    return FakeTable(("userId", "trendId"), name="tech-trends-favorites")


@pytest.fixture
def settings_table():
    return FakeTable(("userId",), name="tech-trends-user-settings")


@pytest.fixture
def trend_repository(trends_table):
    return TrendRepository(trends_table)


@pytest.fixture
def favorite_repository(favorites_table):
    return FavoriteRepository(favorites_table)


@pytest.fixture
def settings_repository(settings_table):
    return UserSettingsRepository(settings_table)


@pytest.fixture
def s3_client():
    client = MagicMock()
    client.generate_presigned_url.return_value = SIGNED_URL
    return client


@pytest.fixture
def avatar_storage(s3_client):
    return AvatarStorage(s3_client, bucket="user-icons-bucket")


@pytest.fixture
def verifier():
    return FakeVerifier({USER_TOKEN: USER, ADMIN_TOKEN: ADMIN})


@pytest.fixture
def router(verifier, trend_repository, favorite_repository, settings_repository, avatar_storage):
    return Router(
        verifier,
        [
            PublicRoutes(trend_repository),
            UserRoutes(trend_repository, favorite_repository, settings_repository, avatar_storage),
            AdminRoutes(trend_repository),
        ],
    )


@pytest.fixture
def call(router):
    """Dispatch a request through the router: ``await call("GET", "/api/trends", token=...)``."""

    async def _call(method, path, *, token=None, body=None, query=None, headers=None):
        all_headers = dict(headers or {})
        if token is not None:
            all_headers["Authorization"] = f"Bearer {token}"
        if body is not None and not isinstance(body, str):
            body = json.dumps(body)
        request = ApiRequest.build(method, path, headers=all_headers, query=query, body=body)
        return await router.dispatch(request)

    return _call


@pytest.fixture
async def seeded_trends(trend_repository):
    """Three trends across two categories."""
    created = []
    for data in (
        TrendCreate(name="React", category="Frontend", description="UI library", popularity=95, growth=5),
        TrendCreate(name="Svelte", category="Frontend", description="Compiler", popularity=45, growth=25),
        TrendCreate(name="Go", category="Backend", description="Compiled language", popularity=70, growth=12),
    ):
        created.append(await trend_repository.create(data))
    return created
