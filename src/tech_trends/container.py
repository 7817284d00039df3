"""DI container: the composition root. Build via init_container().

Every collaborator is a singleton constructed lazily on first use, so creating
the container does not touch AWS. Tests override providers with fakes, e.g.
``container.trend_repository.override(providers.Object(fake))``.
"""
import logging

from dependency_injector import containers, providers

from tech_trends.auth import TokenVerifier
from tech_trends.db import (DynamoTable, FavoriteRepository, TrendRepository,
                            UserSettingsRepository, create_dynamodb_client)
from tech_trends.dispatcher import Router
from tech_trends.routers import AdminRoutes, PublicRoutes, UserRoutes
from tech_trends.storage import UPLOAD_URL_EXPIRES_IN, AvatarStorage, create_s3_client


class Container(containers.DeclarativeContainer):
    config = providers.Configuration()

    dynamodb_client = providers.Singleton(
        create_dynamodb_client,
        region_name=config.aws_region,
        endpoint_url=config.dynamodb_endpoint_url,
    )
    s3_client = providers.Singleton(create_s3_client, region_name=config.aws_region)

    trends_table = providers.Singleton(DynamoTable, dynamodb_client, config.trends_table)
    favorites_table = providers.Singleton(DynamoTable, dynamodb_client, config.favorites_table)
    user_settings_table = providers.Singleton(
        DynamoTable, dynamodb_client, config.user_settings_table
    )

    trend_repository = providers.Singleton(TrendRepository, trends_table)
    favorite_repository = providers.Singleton(FavoriteRepository, favorites_table)
    user_settings_repository = providers.Singleton(UserSettingsRepository, user_settings_table)

    avatar_storage = providers.Singleton(
        AvatarStorage,
        s3_client,
        bucket=config.user_icons_bucket,
        expires_in=UPLOAD_URL_EXPIRES_IN,
    )

    token_verifier = providers.Singleton(
        TokenVerifier,
        user_pool_id=config.cognito_user_pool_id,
        client_id=config.cognito_client_id,
        token_use=config.cognito_token_use,
    )

    public_routes = providers.Singleton(PublicRoutes, trends=trend_repository)
    user_routes = providers.Singleton(
        UserRoutes,
        trends=trend_repository,
        favorites=favorite_repository,
        settings=user_settings_repository,
        avatars=avatar_storage,
    )
    admin_routes = providers.Singleton(AdminRoutes, trends=trend_repository)

    router = providers.Singleton(
        Router,
        verifier=token_verifier,
        groups=providers.List(public_routes, user_routes, admin_routes),
    )


def init_container() -> Container:
    """Create the container with configuration read from the environment."""
    container = Container()
    config = container.config
    config.aws_region.from_env("AWS_REGION", default="ap-northeast-1")
    config.dynamodb_endpoint_url.from_env("DYNAMODB_ENDPOINT_URL", default="")
    config.trends_table.from_env("TRENDS_TABLE", default="tech-trends")
    config.favorites_table.from_env("FAVORITES_TABLE", default="tech-trends-favorites")
    config.user_settings_table.from_env(
        "USER_SETTINGS_TABLE", default="tech-trends-user-settings"
    )
    config.user_icons_bucket.from_env("USER_ICONS_BUCKET", default="user-icons-bucket")
    config.cognito_user_pool_id.from_env("COGNITO_USER_POOL_ID", default="")
    config.cognito_client_id.from_env("COGNITO_CLIENT_ID", default="")
    config.cognito_token_use.from_env("COGNITO_TOKEN_USE", default="access")
    config.log_level.from_env("LOG_LEVEL", default="INFO")
    return container


def configure_logging(container: Container) -> None:
    """Apply LOG_LEVEL to the root logger (entry points only)."""
    level = str(container.config.log_level() or "INFO").upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger().setLevel(level)
