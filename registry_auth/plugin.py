"""
Registry auth plugin backed by MongoDB.

Entry point loaded by the registry host. Every operation reports through a
completion callback invoked exactly once, either as cb(error, False) or as
cb(None, payload).
"""
import logging
from typing import Any, Callable, Mapping, Optional

from motor.motor_asyncio import AsyncIOMotorClient
from pydantic import BaseModel

from registry_auth.config import PluginConfig, Settings, get_settings, resolve_config
from registry_auth.core.errors import InternalError, PluginError
from registry_auth.database.connections import ClientFactory, ensure_indexes
from registry_auth.models.access import Identity, PackagePolicy
from registry_auth.services.access_service import AccessService
from registry_auth.services.auth_service import AuthService

logger = logging.getLogger(__name__)

Callback = Callable[[Optional[PluginError], Any], None]


def _coerce(model: type[BaseModel], value: Any) -> BaseModel:
    """Accept model instances, mappings or attribute objects from the host."""
    if isinstance(value, model):
        return value
    if value is None:
        return model()
    if isinstance(value, Mapping):
        return model.model_validate(dict(value))
    return model.model_validate(value, from_attributes=True)


class MongoAuthPlugin:
    """
    Authenticate, register and authorize registry users against MongoDB.

    Usage:
        plugin = MongoAuthPlugin({
            "uri": "mongodb://localhost:27017",
            "db": "registry",
            "collection": "users",
        })
        await plugin.authenticate("alice", "s3cret12", callback)
    """

    def __init__(
        self,
        config: Optional[Mapping[str, Any]] = None,
        client_factory: ClientFactory = AsyncIOMotorClient,
        settings: Optional[Settings] = None,
    ):
        settings = settings or get_settings()
        logging.getLogger("registry_auth").setLevel(settings.log_level.upper())

        self.config: PluginConfig = resolve_config(config, settings)
        self.client_factory = client_factory
        self.auth_service = AuthService(self.config, client_factory)
        self.access_service = AccessService(self.config)

    async def ensure_indexes(self) -> Optional[str]:
        """
        Create the unique username index when userIsUnique is enabled.

        Raises:
            InternalError: If the store can't be reached
        """
        try:
            return await ensure_indexes(self.config, self.client_factory)
        except Exception as e:
            logger.error(f"Unable to create the unique username index: {e}")
            raise InternalError(f"Error creating MongoDB indexes: {e}") from e

    async def authenticate(self, username: str, password: str, cb: Callback) -> None:
        """Authenticate a user; payload is the user's group list."""
        try:
            groups = await self.auth_service.authenticate(username, password)
        except Exception as e:
            cb(self._as_plugin_error(e), False)
            return
        cb(None, groups)

    async def adduser(self, username: str, password: str, cb: Callback) -> None:
        """Register a new user; payload is True."""
        try:
            created = await self.auth_service.add_user(username, password)
        except Exception as e:
            cb(self._as_plugin_error(e), False)
            return
        cb(None, created)

    def change_password(
        self,
        username: str,
        password: str,
        new_password: str,
        cb: Callback,
    ) -> None:
        """Always rejected; passwords are changed outside the registry."""
        try:
            self.auth_service.change_password(username, password, new_password)
        except Exception as e:
            cb(self._as_plugin_error(e), False)
            return
        cb(None, True)

    def allow_access(self, user: Any, pkg: Any, cb: Callback) -> None:
        """Check if user is allowed to access a package."""
        self._allow(user, pkg, self.access_service.allow_access, cb)

    def allow_publish(self, user: Any, pkg: Any, cb: Callback) -> None:
        """Check if user is allowed to publish a package."""
        self._allow(user, pkg, self.access_service.allow_publish, cb)

    def allow_unpublish(self, user: Any, pkg: Any, cb: Callback) -> None:
        """Check if user is allowed to unpublish (remove) a package."""
        self._allow(user, pkg, self.access_service.allow_unpublish, cb)

    def _allow(
        self,
        user: Any,
        pkg: Any,
        check: Callable[[Identity, PackagePolicy], bool],
        cb: Callback,
    ) -> None:
        try:
            identity = _coerce(Identity, user)
            policy = _coerce(PackagePolicy, pkg)
            allowed = check(identity, policy)
        except Exception as e:
            cb(self._as_plugin_error(e), False)
            return
        cb(None, allowed)

    @staticmethod
    def _as_plugin_error(error: Exception) -> PluginError:
        if isinstance(error, PluginError):
            return error
        logger.exception(f"Unexpected error in auth plugin: {error}")
        return InternalError(f"error, try again: {error}")
