"""MongoDB connection for Storefront.

One :class:`Database` is created per service from its settings. It owns the Motor client, so the
connection pool lives exactly as long as the service.
"""

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from storefront.core.indexes import ensure_indexes
from storefront.core.settings import StorefrontSettings


class Database:
    def __init__(self, settings: StorefrontSettings):
        self.client = AsyncIOMotorClient(settings.MONGO_URI)
        self.db: AsyncIOMotorDatabase = self.client[settings.MONGO_DB]

    async def initialize(self) -> None:
        """Create the indexes every collection relies on.

        Should be called during application startup.
        """
        await ensure_indexes(self.db)

    def close(self) -> None:
        self.client.close()
