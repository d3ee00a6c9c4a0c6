"""
Pydantic models for stored documents and authorization inputs.
"""
from registry_auth.models.user import UserRecord, DEFAULT_GROUP
from registry_auth.models.access import Identity, PackagePolicy, Operation

__all__ = [
    "UserRecord",
    "DEFAULT_GROUP",
    "Identity",
    "PackagePolicy",
    "Operation",
]
