"""Data access: DynamoDB table wrapper and one repository per entity."""
from tech_trends.db.client import DynamoTable, create_dynamodb_client
from tech_trends.db.exceptions import (ConditionalCheckFailedError,
                                       FavoriteAlreadyExistsError, StoreError)
from tech_trends.db.favorites import FavoriteRepository
from tech_trends.db.trends import TrendRepository
from tech_trends.db.user_settings import UserSettingsRepository

__all__ = [
    "ConditionalCheckFailedError",
    "DynamoTable",
    "FavoriteAlreadyExistsError",
    "FavoriteRepository",
    "StoreError",
    "TrendRepository",
    "UserSettingsRepository",
    "create_dynamodb_client",
]
