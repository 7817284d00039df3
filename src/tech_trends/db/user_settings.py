"""User settings repository. Table: hash key ``userId``."""
import asyncio

from tech_trends.db.client import DynamoTable
from tech_trends.schemas import SettingsUpdate, UserSettings
from tech_trends.utils import utc_now


class UserSettingsRepository:
    """One settings record per user; a default is synthesized until the first save."""

    def __init__(self, table: DynamoTable) -> None:
        self._table = table

    async def get(self, user_id: str) -> UserSettings:
        """Stored settings, or the (unpersisted) default record."""
        item = await asyncio.to_thread(self._table.get_item, {"userId": user_id})
        if not item:
            return UserSettings.default(user_id, utc_now())
        return UserSettings.model_validate(item)

    async def update(self, user_id: str, changes: SettingsUpdate) -> UserSettings:
        """Merge supplied fields over the current settings and overwrite the record."""
        existing = await self.get(user_id)
        data = existing.model_dump()
        data.update(changes.provided())
        data["updated_at"] = utc_now()
        updated = UserSettings.model_validate(data)
        await asyncio.to_thread(self._table.put_item, updated.to_item())
        return updated
