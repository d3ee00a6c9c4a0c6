"""
Scoped MongoDB connection management.

Every operation opens its own client and closes it before returning;
clients are never shared between calls.
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pymongo.errors import ConfigurationError

from registry_auth.config import PluginConfig

logger = logging.getLogger(__name__)

ClientFactory = Callable[..., AsyncIOMotorClient]


def create_mongo_client(
    config: PluginConfig,
    client_factory: ClientFactory = AsyncIOMotorClient,
) -> AsyncIOMotorClient:
    """
    Create a MongoDB client for the configured URI.

    Raises:
        ConfigurationError: If the store coordinates are missing
    """
    if not config.uri or not config.db or not config.collection:
        raise ConfigurationError("MongoDB uri, db and collection must all be configured")
    return client_factory(
        config.uri,
        serverSelectionTimeoutMS=config.server_selection_timeout_ms,
    )


@asynccontextmanager
async def users_collection(
    config: PluginConfig,
    client_factory: ClientFactory = AsyncIOMotorClient,
) -> AsyncIterator[AsyncIOMotorCollection]:
    """
    Open a client, yield the users collection and always close the client.

    Usage:
        async with users_collection(config) as users:
            await users.find_one({...})
    """
    client = create_mongo_client(config, client_factory)
    try:
        yield client[config.db][config.collection]
    finally:
        client.close()
        logger.debug(f"Closed MongoDB client for {config.db}.{config.collection}")


async def ensure_indexes(
    config: PluginConfig,
    client_factory: ClientFactory = AsyncIOMotorClient,
) -> str | None:
    """
    Create the unique username index backing duplicate-key rejection.

    Only applies when user_is_unique is enabled.

    Returns:
        The index name, or None when uniqueness is disabled
    """
    if not config.user_is_unique:
        logger.info("userIsUnique is disabled, skipping unique index creation")
        return None

    async with users_collection(config, client_factory) as users:
        index_name = await users.create_index(config.fields.username, unique=True)

    logger.info(f"Ensured unique index '{index_name}' on {config.db}.{config.collection}")
    return index_name
