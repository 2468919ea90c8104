"""MongoDB index management for Storefront."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from motor.motor_asyncio import AsyncIOMotorDatabase


async def ensure_indexes(db: "AsyncIOMotorDatabase") -> None:
    """
    Create required indexes on MongoDB collections.

    Call this during application startup. Email and category name uniqueness are enforced here;
    slugs are indexed for lookup only and may collide.
    """
    # Users collection
    await db.users.create_index("email", unique=True)

    # Categories collection
    await db.categories.create_index("name", unique=True)
    await db.categories.create_index("slug")

    # Products collection
    await db.products.create_index("slug")
    await db.products.create_index("category")
    await db.products.create_index([("created_at", -1)])

    # Orders collection
    await db.orders.create_index("buyer")
    await db.orders.create_index([("created_at", -1)])
