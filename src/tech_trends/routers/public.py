"""Public trend catalog routes (no authentication)."""
import logging

from tech_trends.db import TrendRepository
from tech_trends.dispatcher import Access, RequestContext, Route, route
from tech_trends.errors import NotFoundError
from tech_trends.messages import ApiRequest, ApiResponse
from tech_trends.responses import server_error, success
from tech_trends.routers.validation import parse_limit

logger = logging.getLogger(__name__)


class PublicRoutes:
    """GET /api/trends, /api/trends/{id}, /api/categories."""

    def __init__(self, trends: TrendRepository) -> None:
        self._trends = trends

    def routes(self) -> list[Route]:
        return [
            route("GET", "/api/trends", Access.PUBLIC, self.list_trends),
            route("GET", "/api/trends/{id}", Access.PUBLIC, self.get_trend),
            route("GET", "/api/categories", Access.PUBLIC, self.list_categories),
        ]

    async def list_trends(self, request: ApiRequest, ctx: RequestContext) -> ApiResponse:
        """List trends, optionally filtered by ``category``; ``limit`` applies to the unfiltered list."""
        category = request.query.get("category")
        limit = None if category else parse_limit(request.query)
        try:
            if category:
                trends = await self._trends.list_by_category(category)
            else:
                trends = await self._trends.list_all(limit)
        except Exception:  # pylint: disable=broad-except
            logger.exception("Error fetching trends")
            return server_error("Failed to fetch trends")
        return success({"trends": trends, "total": len(trends)})

    async def get_trend(self, request: ApiRequest, ctx: RequestContext) -> ApiResponse:
        trend_id = ctx.params["id"]
        try:
            trend = await self._trends.get(trend_id)
        except Exception:  # pylint: disable=broad-except
            logger.exception("Error fetching trend %s", trend_id)
            return server_error("Failed to fetch trend")
        if trend is None:
            raise NotFoundError("Trend not found")
        return success({"trend": trend})

    async def list_categories(self, request: ApiRequest, ctx: RequestContext) -> ApiResponse:
        try:
            categories = await self._trends.list_categories()
        except Exception:  # pylint: disable=broad-except
            logger.exception("Error fetching categories")
            return server_error("Failed to fetch categories")
        return success({"categories": categories})
