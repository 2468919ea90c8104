"""Seed module for initializing default data in Storefront.

No endpoint can grant the admin role, so this module is how the first admin account is created.
It also adds a few default categories. It's idempotent - running it multiple times won't duplicate data.

Usage: ``python -m storefront.seed``
"""

import asyncio
import os

from storefront.core.constants import ADMIN_ROLE
from storefront.core.logging import get_logger
from storefront.core.security import hash_password
from storefront.core.settings import StorefrontSettings, get_settings
from storefront.core.slug import slugify
from storefront.db import Database
from storefront.repositories import CategoryRepository, UserRepository

# Default admin credentials (can be overridden via environment variables)
DEFAULT_ADMIN_EMAIL = os.getenv("STOREFRONT__ADMIN_EMAIL", "admin@storefront.local")
DEFAULT_ADMIN_PASSWORD = os.getenv("STOREFRONT__ADMIN_PASSWORD", "Admin123!")
DEFAULT_ADMIN_ANSWER = os.getenv("STOREFRONT__ADMIN_ANSWER", "storefront")

DEFAULT_CATEGORIES = ["Electronics", "Books", "Clothing"]

logger = get_logger("seed", use_structlog=False)


async def seed_admin_user(user_repo: UserRepository) -> None:
    """Create the admin user if it doesn't exist, or promote an existing account with that email."""
    existing = await user_repo.get_by_email(DEFAULT_ADMIN_EMAIL)

    if existing:
        if existing.get("role") != ADMIN_ROLE:
            await user_repo.update_by_id(existing["_id"], {"role": ADMIN_ROLE})
            logger.info(f"Promoted '{DEFAULT_ADMIN_EMAIL}' to admin")
        else:
            logger.info(f"Admin user '{DEFAULT_ADMIN_EMAIL}' already exists")
        return

    await user_repo.insert(
        {
            "name": "Admin",
            "email": DEFAULT_ADMIN_EMAIL,
            "password": hash_password(DEFAULT_ADMIN_PASSWORD),
            "phone": "0000000000",
            "address": "-",
            "answer": DEFAULT_ADMIN_ANSWER,
            "role": ADMIN_ROLE,
        }
    )
    logger.info(f"Created admin user: {DEFAULT_ADMIN_EMAIL}")
    logger.info(f"Default password: {DEFAULT_ADMIN_PASSWORD} (change this in production!)")


async def seed_categories(category_repo: CategoryRepository) -> None:
    """Create the default categories that don't exist yet."""
    for name in DEFAULT_CATEGORIES:
        if await category_repo.get_by_name(name):
            logger.info(f"Category '{name}' already exists")
            continue
        await category_repo.insert({"name": name, "slug": slugify(name)})
        logger.info(f"Created category: {name}")


async def run_seed(settings: StorefrontSettings | None = None) -> None:
    """
    Run all seed operations.

    This function is idempotent - it checks for existing data before creating.
    """
    database = Database(settings or get_settings())
    logger.info("Starting database seeding...")

    try:
        await database.initialize()
        await seed_admin_user(UserRepository(database.db))
        await seed_categories(CategoryRepository(database.db))
        logger.info("Database seeding completed successfully")
    except Exception as e:
        logger.error(f"Database seeding failed: {e}")
        raise
    finally:
        database.close()


def main() -> None:
    asyncio.run(run_seed())


if __name__ == "__main__":
    main()
