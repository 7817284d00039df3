"""Admin routes: trend catalog management. Require the admin role."""
import logging

from tech_trends.db import TrendRepository
from tech_trends.dispatcher import Access, RequestContext, Route, route
from tech_trends.errors import NotFoundError
from tech_trends.messages import ApiRequest, ApiResponse
from tech_trends.responses import not_found, server_error, success
from tech_trends.routers.validation import (parse_json_body,
                                            parse_trend_create,
                                            parse_trend_update)

logger = logging.getLogger(__name__)


class AdminRoutes:
    """POST /api/admin/trends, PUT and DELETE /api/admin/trends/{id}."""

    def __init__(self, trends: TrendRepository) -> None:
        self._trends = trends

    def routes(self) -> list[Route]:
        return [
            route("POST", "/api/admin/trends", Access.ADMIN, self.create_trend),
            route("PUT", "/api/admin/trends/{id}", Access.ADMIN, self.update_trend),
            route("DELETE", "/api/admin/trends/{id}", Access.ADMIN, self.delete_trend),
        ]

    async def create_trend(self, request: ApiRequest, ctx: RequestContext) -> ApiResponse:
        data = parse_trend_create(parse_json_body(request))
        try:
            trend = await self._trends.create(data)
        except Exception:  # pylint: disable=broad-except
            logger.exception("Error creating trend")
            return server_error("Failed to create trend")
        return success({"trend": trend, "message": "Trend created"}, 201)

    async def update_trend(self, request: ApiRequest, ctx: RequestContext) -> ApiResponse:
        trend_id = ctx.params["id"]
        changes = parse_trend_update(parse_json_body(request))
        try:
            trend = await self._trends.update(trend_id, changes)
        except Exception:  # pylint: disable=broad-except
            logger.exception("Error updating trend %s", trend_id)
            return server_error("Failed to update trend")
        if trend is None:
            raise NotFoundError("Trend not found")
        return success({"trend": trend, "message": "Trend updated"})

    async def delete_trend(self, request: ApiRequest, ctx: RequestContext) -> ApiResponse:
        trend_id = ctx.params["id"]
        try:
            if await self._trends.get(trend_id) is None:
                return not_found("Trend not found")
            await self._trends.delete(trend_id)
        except Exception:  # pylint: disable=broad-except
            logger.exception("Error deleting trend %s", trend_id)
            return server_error("Failed to delete trend")
        logger.info("Trend %s deleted by %s", trend_id, ctx.user.subject_id)
        return success({"message": "Trend deleted", "id": trend_id})
