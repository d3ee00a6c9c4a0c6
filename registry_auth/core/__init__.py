"""
Core module - Password hashing and the error taxonomy.
"""
from registry_auth.core.errors import (
    PluginError,
    BadData,
    Unauthorized,
    Forbidden,
    InternalError,
)
from registry_auth.core.security import hash_password, verify_password

__all__ = [
    "PluginError",
    "BadData",
    "Unauthorized",
    "Forbidden",
    "InternalError",
    "hash_password",
    "verify_password",
]
