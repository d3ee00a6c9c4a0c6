"""
Package authorization service.

Decisions are pure functions of the caller's groups and the package policy;
no store access happens here.
"""
import logging

from registry_auth.config import PluginConfig
from registry_auth.core.errors import Forbidden
from registry_auth.models.access import Identity, Operation, PackagePolicy

logger = logging.getLogger(__name__)

_GRANT_MESSAGES = {
    Operation.ACCESS: "has been granted access to package",
    Operation.PUBLISH: "has been granted the right to publish the package",
    Operation.UNPUBLISH: "has been granted the right to unpublish the package",
}

_DENY_MESSAGES = {
    Operation.ACCESS: "is not allowed to access the package",
    Operation.PUBLISH: "is not allowed to publish the package",
    Operation.UNPUBLISH: "is not allowed to unpublish the package",
}


class AccessService:
    """Service for package access, publish and unpublish decisions."""

    def __init__(self, config: PluginConfig):
        self.grant_by_name = config.grant_by_name

    def is_allowed(
        self,
        identity: Identity,
        policy: PackagePolicy,
        operation: Operation,
    ) -> bool:
        """Check the decision without raising."""
        allowed = policy.groups_for(operation)
        if set(identity.groups) & allowed:
            return True
        return bool(self.grant_by_name and identity.name and identity.name in allowed)

    def decide(
        self,
        identity: Identity,
        policy: PackagePolicy,
        operation: Operation,
    ) -> bool:
        """
        Decide whether the identity may perform the operation on the package.

        Access is granted when at least one of the caller's groups is listed
        in the relevant policy set (access for reads, publish for publish and
        unpublish).

        Args:
            identity: Caller name and groups
            policy: Package permissions
            operation: Requested operation

        Returns:
            True when granted

        Raises:
            Forbidden: When denied
        """
        operation = Operation(operation)
        if self.is_allowed(identity, policy, operation):
            logger.info(f"{identity.name} {_GRANT_MESSAGES[operation]} '{policy.name}'")
            return True

        logger.error(f"{identity.name} {_DENY_MESSAGES[operation]} '{policy.name}'")
        raise Forbidden("error, try again")

    def allow_access(self, identity: Identity, policy: PackagePolicy) -> bool:
        """Check if the identity may read the package."""
        return self.decide(identity, policy, Operation.ACCESS)

    def allow_publish(self, identity: Identity, policy: PackagePolicy) -> bool:
        """Check if the identity may publish the package."""
        return self.decide(identity, policy, Operation.PUBLISH)

    def allow_unpublish(self, identity: Identity, policy: PackagePolicy) -> bool:
        """Check if the identity may unpublish (remove) the package."""
        return self.decide(identity, policy, Operation.UNPUBLISH)
