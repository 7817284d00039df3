"""Trend catalog repository.

Table: hash key ``id``; global secondary index ``category-index`` on ``category``.
"""
import asyncio
import logging
import uuid

from tech_trends.db.client import DynamoTable
from tech_trends.db.exceptions import ConditionalCheckFailedError
from tech_trends.schemas import Trend, TrendCreate, TrendUpdate
from tech_trends.utils import format_timestamp, utc_now

logger = logging.getLogger(__name__)

CATEGORY_INDEX = "category-index"

# Python attribute -> table attribute for the mutable trend fields.
_UPDATABLE_ATTRIBUTES = {
    "name": "name",
    "category": "category",
    "description": "description",
    "popularity": "popularity",
    "growth": "growth",
}


class TrendRepository:
    """CRUD over the trends table."""

    def __init__(self, table: DynamoTable) -> None:
        self._table = table

    async def list_all(self, limit: int | None = None) -> list[Trend]:
        """All trends in table order (unsorted), truncated at ``limit`` if given."""
        items = await asyncio.to_thread(self._table.scan, limit=limit)
        return [Trend.model_validate(item) for item in items]

    async def list_by_category(self, category: str) -> list[Trend]:
        """Trends in ``category``, served by the category index."""
        items = await asyncio.to_thread(
            self._table.query,
            "category = :category",
            values={":category": category},
            index_name=CATEGORY_INDEX,
        )
        return [Trend.model_validate(item) for item in items]

    async def get(self, trend_id: str) -> Trend | None:
        item = await asyncio.to_thread(self._table.get_item, {"id": trend_id})
        return Trend.model_validate(item) if item else None

    async def create(self, data: TrendCreate) -> Trend:
        """Create a trend; id and both timestamps are assigned here."""
        now = utc_now()
        trend = Trend(
            id=str(uuid.uuid4()),
            name=data.name,
            category=data.category,
            description=data.description,
            popularity=data.popularity,
            growth=data.growth,
            created_at=now,
            updated_at=now,
        )
        await asyncio.to_thread(self._table.put_item, trend.to_item())
        logger.info("Created trend %s (%s)", trend.id, trend.name)
        return trend

    async def update(self, trend_id: str, changes: TrendUpdate) -> Trend | None:
        """Apply only the supplied fields; ``updatedAt`` is always refreshed.

        Returns None when the trend does not exist (checked up front, and again
        by the write's condition so a concurrent delete is not resurrected).
        """
        if await self.get(trend_id) is None:
            return None

        names = {"#updatedAt": "updatedAt", "#id": "id"}
        values = {":updatedAt": format_timestamp(utc_now())}
        assignments = ["#updatedAt = :updatedAt"]
        for field_name, value in changes.provided().items():
            attribute = _UPDATABLE_ATTRIBUTES[field_name]
            names[f"#{attribute}"] = attribute
            values[f":{attribute}"] = value
            assignments.append(f"#{attribute} = :{attribute}")

        try:
            item = await asyncio.to_thread(
                self._table.update_item,
                {"id": trend_id},
                "SET " + ", ".join(assignments),
                names=names,
                values=values,
                condition_expression="attribute_exists(#id)",
            )
        except ConditionalCheckFailedError:
            logger.info("Trend %s disappeared before update", trend_id)
            return None
        return Trend.model_validate(item)

    async def delete(self, trend_id: str) -> bool:
        """Unconditional delete: succeeds even if the trend is already gone."""
        await asyncio.to_thread(self._table.delete_item, {"id": trend_id})
        return True

    async def list_categories(self) -> list[str]:
        """Sorted distinct categories in use.

        Scans the whole table; this is the only full-table read in the service.
        """
        items = await asyncio.to_thread(
            self._table.scan, projection="#category", names={"#category": "category"}
        )
        return sorted({item["category"] for item in items if item.get("category")})
