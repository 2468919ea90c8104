import os
from typing import Generator, List, Optional

import pytest
from fastapi.testclient import TestClient
from pymongo import MongoClient
from pymongo.errors import ServerSelectionTimeoutError

from storefront import StorefrontService
from storefront.core.settings import StorefrontSettings

TEST_MONGO_URI = os.getenv("STOREFRONT_TEST_MONGO_URI", "mongodb://localhost:27017")
TEST_DB_NAME = "storefront_test"
TEST_COLLECTIONS: List[str] = ["users", "categories", "products", "orders"]


def _get_test_client() -> Optional[MongoClient]:
    """Return a client for the test MongoDB, or None if it is not reachable."""
    client = MongoClient(TEST_MONGO_URI, serverSelectionTimeoutMS=2000)
    try:
        client.admin.command("ping")
    except ServerSelectionTimeoutError:
        client.close()
        return None
    return client


@pytest.fixture(scope="session")
def mongo() -> Generator[MongoClient, None, None]:
    client = _get_test_client()
    if client is None:
        pytest.skip(f"MongoDB not reachable on {TEST_MONGO_URI}")
    yield client
    client.close()


@pytest.fixture
def test_db(mongo):
    """A clean test database around each test."""
    db = mongo[TEST_DB_NAME]
    for name in TEST_COLLECTIONS:
        db[name].delete_many({})
    yield db
    for name in TEST_COLLECTIONS:
        db[name].delete_many({})


@pytest.fixture
def settings() -> StorefrontSettings:
    return StorefrontSettings(
        MONGO_URI=TEST_MONGO_URI,
        MONGO_DB=TEST_DB_NAME,
        JWT_SECRET="integration-secret-key-with-32-bytes",
        LOG_JSON=False,
        _env_file=None,
    )


@pytest.fixture
def client(test_db, settings) -> Generator[TestClient, None, None]:
    """In-process TestClient; entering it runs startup, which creates the indexes."""
    with TestClient(StorefrontService(settings).app) as test_client:
        yield test_client
