"""
Inkpost Backend — User Schemas
===============================

What:  Profile responses and the self-service update / password bodies.
"""

from typing import Optional

from pydantic import EmailStr, Field, HttpUrl

from inkpost.schemas.common import CamelModel, UserPublic


class UserCounts(CamelModel):
    posts: int = 0
    comments: int = 0


class UserProfile(UserPublic):
    """A user plus how many posts and comments they have written."""
    counts: UserCounts = Field(default_factory=UserCounts)


class UpdateUserRequest(CamelModel):
    """Partial profile update; omitted fields are left unchanged."""
    name: Optional[str] = Field(default=None, min_length=2, max_length=50)
    email: Optional[EmailStr] = None
    username: Optional[str] = Field(default=None, min_length=3, max_length=30)
    bio: Optional[str] = Field(default=None, max_length=500)
    avatar: Optional[HttpUrl] = None


class ChangePasswordRequest(CamelModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=6, max_length=128)
