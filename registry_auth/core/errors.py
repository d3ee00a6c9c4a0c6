"""
Error taxonomy reported back to the registry host.

Each error is an HTTPException so hosts built on FastAPI/Starlette can
surface it to the client as-is.
"""
from fastapi import HTTPException, status


class PluginError(HTTPException):
    """Base class for all errors delivered to the host."""

    default_status = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str):
        super().__init__(status_code=self.default_status, detail=detail)


class BadData(PluginError):
    """Malformed or too-short input, detected before any store access."""

    default_status = status.HTTP_400_BAD_REQUEST


class Unauthorized(PluginError):
    """Credential mismatch."""

    default_status = status.HTTP_401_UNAUTHORIZED


class Forbidden(PluginError):
    """Authorization denial or duplicate username."""

    default_status = status.HTTP_403_FORBIDDEN


class InternalError(PluginError):
    """Store/connection failures and unexpected exceptions."""

    default_status = status.HTTP_500_INTERNAL_SERVER_ERROR
