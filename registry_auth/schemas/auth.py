"""
Authentication request schemas.
"""
from pydantic import BaseModel, Field

USERNAME_MIN_LENGTH = 3
PASSWORD_MIN_LENGTH = 8


class RegisterRequest(BaseModel):
    """New user registration input."""
    username: str = Field(
        ...,
        min_length=USERNAME_MIN_LENGTH,
        description="User name (min 3 characters)"
    )
    password: str = Field(
        ...,
        min_length=PASSWORD_MIN_LENGTH,
        description="User password (min 8 characters)"
    )
