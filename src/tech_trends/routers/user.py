"""Routes for the signed-in user: profile, favorites, settings, avatar upload."""
import asyncio
import logging

from tech_trends.db import (FavoriteAlreadyExistsError, FavoriteRepository,
                            TrendRepository, UserSettingsRepository)
from tech_trends.dispatcher import Access, RequestContext, Route, route
from tech_trends.errors import BadRequestError
from tech_trends.messages import ApiRequest, ApiResponse
from tech_trends.responses import bad_request, not_found, server_error, success
from tech_trends.routers.validation import (parse_json_body,
                                            parse_settings_update)
from tech_trends.schemas import FavoriteWithTrend
from tech_trends.storage import ALLOWED_CONTENT_TYPES, AvatarStorage

logger = logging.getLogger(__name__)

DEFAULT_AVATAR_CONTENT_TYPE = "image/png"
ALREADY_IN_FAVORITES = "Already in favorites"


class UserRoutes:
    """Endpoints under /api/user. The dispatcher guarantees ``ctx.user`` is set."""

    def __init__(
        self,
        trends: TrendRepository,
        favorites: FavoriteRepository,
        settings: UserSettingsRepository,
        avatars: AvatarStorage,
    ) -> None:
        self._trends = trends
        self._favorites = favorites
        self._settings = settings
        self._avatars = avatars

    def routes(self) -> list[Route]:
        return [
            route("GET", "/api/user/profile", Access.USER, self.get_profile),
            route("GET", "/api/user/favorites", Access.USER, self.list_favorites),
            route("POST", "/api/user/favorites", Access.USER, self.add_favorite),
            route("DELETE", "/api/user/favorites/{trendId}", Access.USER, self.remove_favorite),
            route("GET", "/api/user/settings", Access.USER, self.get_settings),
            route("PUT", "/api/user/settings", Access.USER, self.update_settings),
            route("POST", "/api/user/upload-url", Access.USER, self.create_upload_url),
        ]

    async def get_profile(self, request: ApiRequest, ctx: RequestContext) -> ApiResponse:
        user = ctx.user
        return success({
            "profile": {
                "id": user.subject_id,
                "email": user.email,
                "role": user.role.value,
                "groups": sorted(user.groups),
            }
        })

    async def list_favorites(self, request: ApiRequest, ctx: RequestContext) -> ApiResponse:
        """Favorites with their trends attached; a deleted trend comes back as null."""
        try:
            favorites = await self._favorites.list_by_user(ctx.user.subject_id)
            # gather keeps the favorites' order regardless of completion order.
            trends = await asyncio.gather(
                *(self._trends.get(fav.trend_id) for fav in favorites)
            )
        except Exception:  # pylint: disable=broad-except
            logger.exception("Error fetching favorites")
            return server_error("Failed to fetch favorites")
        enriched = [
            FavoriteWithTrend(
                user_id=fav.user_id,
                trend_id=fav.trend_id,
                created_at=fav.created_at,
                trend=trend,
            )
            for fav, trend in zip(favorites, trends)
        ]
        return success({"favorites": enriched, "total": len(enriched)})

    async def add_favorite(self, request: ApiRequest, ctx: RequestContext) -> ApiResponse:
        body = parse_json_body(request)
        trend_id = body.get("trendId")
        if not trend_id:
            raise BadRequestError("trendId is required")
        if not isinstance(trend_id, str):
            raise BadRequestError("trendId must be a string")

        user_id = ctx.user.subject_id
        try:
            if await self._trends.get(trend_id) is None:
                return not_found("Trend not found")
            if await self._favorites.get(user_id, trend_id) is not None:
                return bad_request(ALREADY_IN_FAVORITES)
            # The conditional write is the authoritative duplicate check.
            favorite = await self._favorites.add(user_id, trend_id)
        except FavoriteAlreadyExistsError:
            return bad_request(ALREADY_IN_FAVORITES)
        except Exception:  # pylint: disable=broad-except
            logger.exception("Error adding favorite")
            return server_error("Failed to add favorite")
        return success({"message": "Added to favorites", "favorite": favorite}, 201)

    async def remove_favorite(self, request: ApiRequest, ctx: RequestContext) -> ApiResponse:
        """Idempotent: removing a favorite that does not exist also succeeds."""
        trend_id = ctx.params["trendId"]
        try:
            await self._favorites.remove(ctx.user.subject_id, trend_id)
        except Exception:  # pylint: disable=broad-except
            logger.exception("Error removing favorite")
            return server_error("Failed to remove favorite")
        return success({"message": "Removed from favorites", "trendId": trend_id})

    async def get_settings(self, request: ApiRequest, ctx: RequestContext) -> ApiResponse:
        try:
            settings = await self._settings.get(ctx.user.subject_id)
        except Exception:  # pylint: disable=broad-except
            logger.exception("Error fetching settings")
            return server_error("Failed to fetch settings")
        return success({"settings": settings})

    async def update_settings(self, request: ApiRequest, ctx: RequestContext) -> ApiResponse:
        changes = parse_settings_update(parse_json_body(request))
        try:
            settings = await self._settings.update(ctx.user.subject_id, changes)
        except Exception:  # pylint: disable=broad-except
            logger.exception("Error updating settings")
            return server_error("Failed to update settings")
        return success({"settings": settings, "message": "Settings updated"})

    async def create_upload_url(self, request: ApiRequest, ctx: RequestContext) -> ApiResponse:
        """Presigned avatar upload; the client PUTs the image directly to storage."""
        body = parse_json_body(request)
        content_type = body.get("contentType") or DEFAULT_AVATAR_CONTENT_TYPE
        if content_type not in ALLOWED_CONTENT_TYPES:
            raise BadRequestError("Invalid content type. Allowed: png, jpeg, gif, webp")
        try:
            ticket = await self._avatars.create_upload(ctx.user.subject_id, content_type)
        except Exception:  # pylint: disable=broad-except
            logger.exception("Error generating presigned URL")
            return server_error("Failed to generate upload URL")
        return success({
            "uploadUrl": ticket.upload_url,
            "avatarUrl": ticket.avatar_url,
            "expiresIn": ticket.expires_in,
        })
