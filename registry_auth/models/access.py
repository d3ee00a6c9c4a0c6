"""
Per-request authorization models supplied by the registry host.
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class Operation(str, Enum):
    """Package operations subject to authorization."""
    ACCESS = "access"
    PUBLISH = "publish"
    UNPUBLISH = "unpublish"


class Identity(BaseModel):
    """
    Caller identity (the registry's remote user).
    """
    name: Optional[str] = Field(None, description="User name, None for anonymous callers")
    groups: list[str] = Field(default_factory=list, description="Groups of the caller")

    @field_validator("groups", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        if isinstance(value, str):
            return [value]
        return value or []


class PackagePolicy(BaseModel):
    """
    Group permissions declared for a package.

    The publish list also governs unpublish.
    """
    name: Optional[str] = Field(None, description="Package name")
    access: list[str] = Field(default_factory=list, description="Groups allowed to read")
    publish: list[str] = Field(
        default_factory=list,
        description="Groups allowed to publish and unpublish"
    )

    @field_validator("access", "publish", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        if isinstance(value, str):
            return [value]
        return value or []

    def groups_for(self, operation: Operation) -> set[str]:
        """Groups allowed to perform the given operation."""
        if operation == Operation.ACCESS:
            return set(self.access)
        return set(self.publish)
