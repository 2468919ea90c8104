from unittest.mock import AsyncMock, MagicMock

import pytest

from storefront.core.security import TokenSigner
from storefront.core.settings import StorefrontSettings

TEST_SECRET = "unit-test-secret-key-with-32-bytes!!"


@pytest.fixture
def settings() -> StorefrontSettings:
    return StorefrontSettings(JWT_SECRET=TEST_SECRET, LOG_JSON=False, LOG_DIR=None)


@pytest.fixture
def signer() -> TokenSigner:
    return TokenSigner(secret=TEST_SECRET)


@pytest.fixture
def logger() -> MagicMock:
    return MagicMock()


@pytest.fixture
def user_repo() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def category_repo() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def product_repo() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def order_repo() -> AsyncMock:
    return AsyncMock()
