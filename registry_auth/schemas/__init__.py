"""
Request schemas validated before any store access.
"""
from registry_auth.schemas.auth import (
    RegisterRequest,
    USERNAME_MIN_LENGTH,
    PASSWORD_MIN_LENGTH,
)

__all__ = [
    "RegisterRequest",
    "USERNAME_MIN_LENGTH",
    "PASSWORD_MIN_LENGTH",
]
