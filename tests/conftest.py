"""
Global test fixtures for registry_auth.

This module provides shared fixtures for all tests including:
- Mock MongoDB (mongomock-motor) behind a per-call client factory
- Resolved plugin configurations
- Stored user documents
"""

import os

# Keep bcrypt cheap in tests; must be set before registry_auth is imported
os.environ.setdefault("REGISTRY_AUTH_BCRYPT_ROUNDS", "4")

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from mongomock_motor import AsyncMongoMockClient

from registry_auth.config import FieldNames, PluginConfig, Settings

TEST_URI = "mongodb://test:27017"
TEST_DB = "registry"
TEST_COLLECTION = "users"


# =============================================================================
# MongoDB Fixtures (mongomock-motor)
# =============================================================================

class ClientHandle:
    """
    One scoped client as seen by the plugin.

    Delegates database access to the shared in-memory client and records
    whether the plugin closed it.
    """

    def __init__(self, client, uri: str, **kwargs):
        self._client = client
        self.uri = uri
        self.kwargs = kwargs
        self.closed = False

    def __getitem__(self, name):
        return self._client[name]

    def close(self):
        self.closed = True


class RecordingClientFactory:
    """Client factory handing out ClientHandles over one in-memory MongoDB."""

    def __init__(self, client):
        self.client = client
        self.handles: list[ClientHandle] = []

    def __call__(self, uri: str, **kwargs) -> ClientHandle:
        handle = ClientHandle(self.client, uri, **kwargs)
        self.handles.append(handle)
        return handle

    @property
    def all_closed(self) -> bool:
        return all(handle.closed for handle in self.handles)


@pytest_asyncio.fixture
async def mock_async_mongo_client():
    """Create an async mock MongoDB client using mongomock-motor."""
    client = AsyncMongoMockClient()
    yield client
    client.close()


@pytest_asyncio.fixture
async def mock_users(mock_async_mongo_client):
    """Provide the mock users collection with the unique username index."""
    users = mock_async_mongo_client[TEST_DB][TEST_COLLECTION]
    await users.create_index("username", unique=True)
    yield users


@pytest.fixture
def client_factory(mock_async_mongo_client) -> RecordingClientFactory:
    """Per-call client factory over the in-memory MongoDB."""
    return RecordingClientFactory(mock_async_mongo_client)


@pytest.fixture
def failing_client_factory():
    """
    Client factory whose collection fails every operation.

    Usage:
        factory, client, collection = failing_client_factory(ServerSelectionTimeoutError("down"))
    """
    def _build(error: Exception):
        client = MagicMock()
        collection = client.__getitem__.return_value.__getitem__.return_value
        collection.find_one = AsyncMock(side_effect=error)
        collection.insert_one = AsyncMock(side_effect=error)
        collection.create_index = AsyncMock(side_effect=error)
        factory = MagicMock(return_value=client)
        return factory, client, collection
    return _build


# =============================================================================
# Configuration Fixtures
# =============================================================================

@pytest.fixture
def test_settings() -> Settings:
    """Settings isolated from the environment and any .env file."""
    return Settings(
        _env_file=None,
        mongo_uri=None,
        mongo_db=None,
        mongo_collection=None,
        bcrypt_rounds=4,
        log_level="DEBUG",
    )


@pytest.fixture
def raw_config() -> dict:
    """Plugin configuration block as written in the registry config file."""
    return {
        "uri": TEST_URI,
        "db": TEST_DB,
        "collection": TEST_COLLECTION,
        "fields": {
            "username": "username",
            "password": "password",
            "usergroups": "usergroups",
        },
        "userIsUnique": True,
    }


@pytest.fixture
def plugin_config() -> PluginConfig:
    """Resolved configuration relying on the unique index."""
    return PluginConfig(
        uri=TEST_URI,
        db=TEST_DB,
        collection=TEST_COLLECTION,
        fields=FieldNames(),
        user_is_unique=True,
    )


@pytest.fixture
def non_unique_config(plugin_config) -> PluginConfig:
    """Resolved configuration performing the existence lookup before insert."""
    return plugin_config.model_copy(update={"user_is_unique": False})


# =============================================================================
# User Fixtures
# =============================================================================

@pytest.fixture
def alice_password() -> str:
    return "s3cret12"


@pytest_asyncio.fixture
async def stored_alice(mock_users, alice_password) -> dict:
    """Alice stored with a bcrypt digest and two groups."""
    from registry_auth.core.security import hash_password

    doc = {
        "username": "alice",
        "password": hash_password(alice_password),
        "usergroups": ["dev", "user"],
    }
    await mock_users.insert_one(dict(doc))
    return doc
