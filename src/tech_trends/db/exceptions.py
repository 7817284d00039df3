"""Data-access exceptions."""


class StoreError(Exception):
    """A key-value store call failed.

    ``code`` carries the service error code when one is available
    (e.g. "ProvisionedThroughputExceededException").
    """

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.code = code


class ConditionalCheckFailedError(StoreError):
    """A conditional write was rejected because its precondition did not hold."""


class FavoriteAlreadyExistsError(Exception):
    """The (user, trend) favorite already exists."""

    def __init__(self, user_id: str, trend_id: str) -> None:
        super().__init__(f"Favorite already exists: {user_id}/{trend_id}")
        self.user_id = user_id
        self.trend_id = trend_id
