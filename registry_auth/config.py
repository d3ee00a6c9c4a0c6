"""
Plugin configuration.

Two layers:
- Settings: process-level defaults loaded from environment variables
- PluginConfig: the finalized, immutable plugin configuration resolved once
  from the host registry's configuration block
"""
import logging
from functools import lru_cache
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_USERNAME_FIELD = "username"
DEFAULT_PASSWORD_FIELD = "password"
DEFAULT_USERGROUPS_FIELD = "usergroups"


class Settings(BaseSettings):
    """Plugin settings from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="REGISTRY_AUTH_",
        env_file=".env",
        extra="ignore",
    )

    # MongoDB fallbacks when the host config omits them
    mongo_uri: Optional[str] = None
    mongo_db: Optional[str] = None
    mongo_collection: Optional[str] = None
    server_selection_timeout_ms: int = 5000

    # Password hashing cost
    bcrypt_rounds: int = 12

    # Logging
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


class FieldNames(BaseModel):
    """Names of the user document fields in the MongoDB collection."""

    model_config = ConfigDict(frozen=True)

    username: str = DEFAULT_USERNAME_FIELD
    password: str = DEFAULT_PASSWORD_FIELD
    usergroups: str = DEFAULT_USERGROUPS_FIELD


class PluginConfig(BaseModel):
    """
    Finalized plugin configuration.

    Immutable after construction. Required store coordinates may still be
    None here; operations that need them fail at request time.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    uri: Optional[str] = Field(None, description="MongoDB connection string")
    db: Optional[str] = Field(None, description="Database holding the users collection")
    collection: Optional[str] = Field(None, description="Users collection name")
    fields: FieldNames = Field(default_factory=FieldNames)
    user_is_unique: bool = Field(
        True,
        alias="userIsUnique",
        description="Rely on a unique index instead of a lookup before insert",
    )
    grant_by_name: bool = Field(
        False,
        alias="grantByName",
        description="Also grant when the user name itself is listed in a package policy",
    )
    server_selection_timeout_ms: int = 5000


def resolve_config(
    raw: Optional[Mapping[str, Any]],
    settings: Optional[Settings] = None,
) -> PluginConfig:
    """
    Validate the host configuration and fill in defaults.

    Missing store coordinates are logged as errors but are not fatal here.
    Missing field names and uniqueness policy are defaulted with a warning.

    Args:
        raw: Plugin configuration block as handed over by the registry
        settings: Environment settings (defaults to get_settings())

    Returns:
        The resolved PluginConfig
    """
    raw = raw or {}
    settings = settings or get_settings()

    uri = raw.get("uri") or settings.mongo_uri
    db = raw.get("db") or settings.mongo_db
    collection = raw.get("collection") or settings.mongo_collection

    if not uri:
        logger.error("MongoDB URI was not specified in the config file!")
    if not db:
        logger.error("MongoDB DB was not specified in the config file!")
    if not collection:
        logger.error("MongoDB collection was not specified in the config file!")

    raw_fields = raw.get("fields") or {}
    fields = {}
    for key, default in (
        ("username", DEFAULT_USERNAME_FIELD),
        ("password", DEFAULT_PASSWORD_FIELD),
        ("usergroups", DEFAULT_USERGROUPS_FIELD),
    ):
        value = raw_fields.get(key)
        if not value:
            logger.warning(
                f"MongoDB field name for {key} was not specified in the config file! "
                f"Using default '{default}'"
            )
            value = default
        fields[key] = value

    user_is_unique = raw.get("userIsUnique")
    if not isinstance(user_is_unique, bool):
        logger.warning(
            "MongoDB config for userIsUnique was not specified in the config file! "
            "Using default 'true'"
        )
        user_is_unique = True

    grant_by_name = raw.get("grantByName")
    if not isinstance(grant_by_name, bool):
        grant_by_name = False

    return PluginConfig(
        uri=uri,
        db=db,
        collection=collection,
        fields=FieldNames(**fields),
        user_is_unique=user_is_unique,
        grant_by_name=grant_by_name,
        server_selection_timeout_ms=settings.server_selection_timeout_ms,
    )
