"""
Service layer for authentication and authorization logic.
"""
from registry_auth.services.auth_service import AuthService
from registry_auth.services.access_service import AccessService

__all__ = [
    "AuthService",
    "AccessService",
]
