"""
Authentication service for credential checks and user registration.
"""
import asyncio
import logging

from motor.motor_asyncio import AsyncIOMotorClient
from pydantic import ValidationError
from pymongo.errors import DuplicateKeyError

from registry_auth.config import PluginConfig
from registry_auth.core.errors import BadData, Forbidden, InternalError, Unauthorized
from registry_auth.core.security import hash_password, verify_password
from registry_auth.database.connections import ClientFactory, users_collection
from registry_auth.models.user import (
    DEFAULT_GROUP,
    UserRecord,
    user_projection,
    username_filter,
)
from registry_auth.schemas.auth import (
    PASSWORD_MIN_LENGTH,
    USERNAME_MIN_LENGTH,
    RegisterRequest,
)

logger = logging.getLogger(__name__)


class AuthService:
    """Service for authentication operations."""

    def __init__(
        self,
        config: PluginConfig,
        client_factory: ClientFactory = AsyncIOMotorClient,
    ):
        """Initialize with the resolved plugin configuration."""
        self.config = config
        self.fields = config.fields
        self.client_factory = client_factory

    async def authenticate(self, username: str, password: str) -> list[str]:
        """
        Verify credentials against the users collection.

        Args:
            username: Name of the user to log in
            password: Plain text password supplied by the client

        Returns:
            The stored group list, or ["user"] when none is stored

        Raises:
            Unauthorized: If the user is unknown or the password doesn't match
            InternalError: If the store can't be reached or queried
        """
        logger.debug(f"Authenticating user '{username}'")

        # Only plain strings reach the query filter
        if not isinstance(username, str) or not isinstance(password, str):
            raise Unauthorized("bad username/password, access denied")

        try:
            async with users_collection(self.config, self.client_factory) as users:
                user_doc = await users.find_one(
                    username_filter(username, self.fields),
                    user_projection(self.fields),
                )
        except Exception as e:
            logger.error(f"MongoDB lookup failed for user '{username}': {e}")
            raise InternalError(f"error, try again: {e}") from e

        if not user_doc:
            logger.warning(f"Auth failed, no user '{username}'")
            raise Unauthorized(
                f"bad username/password, access denied for username '{username}'!"
            )

        try:
            user = UserRecord.from_document(user_doc, self.fields)
        except Exception as e:
            logger.error(f"Malformed user record for '{username}': {e}")
            raise InternalError(f"error, try again: {e}") from e

        # bcrypt runs off the event loop
        if not await asyncio.to_thread(verify_password, password, user.password):
            logger.warning(f"Auth failed, bad password for user '{username}'")
            raise Unauthorized(
                f"bad username/password, access denied for username '{username}'!"
            )

        groups = user.effective_groups()
        logger.info(f"MongoDB: Auth succeeded for '{username}' with groups: {groups}")
        return groups

    async def add_user(self, username: str, password: str) -> bool:
        """
        Register a new user.

        Args:
            username: Name of the new user (min 3 characters)
            password: Plain text password (min 8 characters), stored hashed

        Returns:
            True once the user is inserted

        Raises:
            BadData: If username or password is too short, or the password
                can't be hashed (e.g. it contains NUL bytes)
            Forbidden: If the username already exists
            InternalError: If the store can't be reached or written
        """
        request = self._validate_registration(username, password)

        try:
            digest = await asyncio.to_thread(hash_password, request.password)
        except ValueError as e:
            raise BadData(f"Bad password, {e}") from e

        user = UserRecord(
            username=request.username,
            password=digest,
            usergroups=[DEFAULT_GROUP],
        )

        try:
            async with users_collection(self.config, self.client_factory) as users:
                # Without a unique index, look for an existing user first
                if not self.config.user_is_unique:
                    existing = await users.find_one(
                        username_filter(request.username, self.fields),
                        user_projection(self.fields, include_password=False),
                    )
                    if existing:
                        raise self._already_exists(request.username)

                result = await users.insert_one(user.to_document(self.fields))
        except Forbidden:
            raise
        except DuplicateKeyError as e:
            logger.warning(f"Duplicate key on insert for user '{request.username}'")
            raise self._already_exists(request.username) from e
        except Exception as e:
            logger.error(f"Error adding user '{request.username}' to MongoDB: {e}")
            raise InternalError(f"Error with adding user to MongoDB: {e}") from e

        logger.info(
            f"Added new user: {{'inserted_id': '{result.inserted_id}', "
            f"'{self.fields.username}': '{request.username}', "
            f"'{self.fields.usergroups}': {user.usergroups}}}"
        )
        return True

    def change_password(self, username: str, password: str, new_password: str) -> None:
        """
        Reject password changes.

        Passwords are rotated through the registry's administrative channel,
        never through this plugin.

        Raises:
            InternalError: Always
        """
        logger.warning(f"changePassword called for user: {username}")
        raise InternalError(
            "You are not allowed to change the password here! "
            "Please change your password via the webapp!"
        )

    @staticmethod
    def _validate_registration(username: str, password: str) -> RegisterRequest:
        """Length checks on the raw input, before any store access."""
        try:
            return RegisterRequest(username=username, password=password)
        except ValidationError as e:
            failed = {err["loc"][0] for err in e.errors() if err["loc"]}
            if "username" in failed:
                raise BadData(
                    f"Bad username, username is too short "
                    f"(min {USERNAME_MIN_LENGTH} characters)!"
                ) from e
            raise BadData(
                f"Bad password, password is too short "
                f"(min {PASSWORD_MIN_LENGTH} characters)!"
            ) from e

    @staticmethod
    def _already_exists(username: str) -> Forbidden:
        return Forbidden(f"Bad username, user '{username}' already exists!")
