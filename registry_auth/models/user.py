"""
User model for the registry users collection.

Field names in MongoDB are configurable, so documents are mapped through
FieldNames rather than by pydantic aliases.
"""
from typing import Any, Optional

from pydantic import BaseModel, Field

from registry_auth.config import FieldNames

DEFAULT_GROUP = "user"


class UserRecord(BaseModel):
    """
    User document as stored in the users collection.
    """
    username: str = Field(..., description="Natural key of the user")
    password: Optional[str] = Field(None, description="Bcrypt hashed password")
    usergroups: list[str] = Field(
        default_factory=list,
        description="Ordered list of group names"
    )

    @classmethod
    def from_document(cls, doc: dict[str, Any], fields: FieldNames) -> "UserRecord":
        """Build a record from a raw MongoDB document."""
        groups = doc.get(fields.usergroups) or []
        if isinstance(groups, str):
            groups = [groups]
        elif not isinstance(groups, (list, tuple)):
            # Malformed group fields count as absent
            groups = []
        password = doc.get(fields.password)
        return cls(
            username=str(doc.get(fields.username, "")),
            password=password if isinstance(password, str) else None,
            usergroups=[str(group) for group in groups],
        )

    def to_document(self, fields: FieldNames) -> dict[str, Any]:
        """Render the record with the configured field names."""
        return {
            fields.username: self.username,
            fields.password: self.password,
            fields.usergroups: list(self.usergroups),
        }

    def effective_groups(self) -> list[str]:
        """Stored groups, or the base group when none are stored."""
        return list(self.usergroups) if self.usergroups else [DEFAULT_GROUP]


def username_filter(username: str, fields: FieldNames) -> dict[str, str]:
    """Exact-match filter on the configured username field."""
    return {fields.username: username}


def user_projection(fields: FieldNames, include_password: bool = True) -> dict[str, int]:
    """Projection limited to the user fields this plugin reads."""
    projection = {"_id": 0, fields.username: 1, fields.usergroups: 1}
    if include_password:
        projection[fields.password] = 1
    return projection
