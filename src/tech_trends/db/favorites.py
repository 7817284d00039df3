"""Favorites repository.

Table: hash key ``userId``, range key ``trendId``.
"""
import asyncio
import logging

from tech_trends.db.client import DynamoTable
from tech_trends.db.exceptions import (ConditionalCheckFailedError,
                                       FavoriteAlreadyExistsError)
from tech_trends.schemas import Favorite
from tech_trends.utils import utc_now

logger = logging.getLogger(__name__)

_NOT_EXISTS = "attribute_not_exists(#userId) AND attribute_not_exists(#trendId)"


class FavoriteRepository:
    """Per-user favorites."""

    def __init__(self, table: DynamoTable) -> None:
        self._table = table

    async def list_by_user(self, user_id: str) -> list[Favorite]:
        items = await asyncio.to_thread(
            self._table.query,
            "#userId = :userId",
            values={":userId": user_id},
            names={"#userId": "userId"},
        )
        return [Favorite.model_validate(item) for item in items]

    async def get(self, user_id: str, trend_id: str) -> Favorite | None:
        item = await asyncio.to_thread(
            self._table.get_item, {"userId": user_id, "trendId": trend_id}
        )
        return Favorite.model_validate(item) if item else None

    async def add(self, user_id: str, trend_id: str) -> Favorite:
        """Create the favorite with a conditional write.

        The store rejects the write if the pair already exists, so of two
        concurrent adds for the same pair exactly one succeeds.

        Raises:
            FavoriteAlreadyExistsError: the pair already exists.
        """
        favorite = Favorite(user_id=user_id, trend_id=trend_id, created_at=utc_now())
        try:
            await asyncio.to_thread(
                self._table.put_item,
                favorite.to_item(),
                condition_expression=_NOT_EXISTS,
                names={"#userId": "userId", "#trendId": "trendId"},
            )
        except ConditionalCheckFailedError as exc:
            logger.info("Favorite %s/%s already exists", user_id, trend_id)
            raise FavoriteAlreadyExistsError(user_id, trend_id) from exc
        return favorite

    async def remove(self, user_id: str, trend_id: str) -> bool:
        """Unconditional delete; removing a missing favorite still succeeds."""
        await asyncio.to_thread(
            self._table.delete_item, {"userId": user_id, "trendId": trend_id}
        )
        return True
