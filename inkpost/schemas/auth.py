"""
Inkpost Backend — Authentication Schemas
=========================================

What:  Request bodies for register/login and the token response.
Who:   POST /auth/register, POST /auth/login.
"""

from pydantic import EmailStr, Field

from inkpost.schemas.common import CamelModel, UserPublic


class RegisterRequest(CamelModel):
    email: EmailStr = Field(description="Unique login email")
    username: str = Field(min_length=1, max_length=50, description="Unique handle")
    password: str = Field(min_length=6, max_length=128)
    name: str = Field(min_length=1, max_length=100, description="Display name")


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)


class AuthResponse(CamelModel):
    """
    Returned by register (201) and login (200).

    The token key keeps its snake_case spelling on the wire, matching the
    OAuth2 token response convention clients already expect.
    """
    user: UserPublic
    access_token: str = Field(alias="access_token")
