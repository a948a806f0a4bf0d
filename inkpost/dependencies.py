"""
Inkpost Backend — Request Dependencies
=======================================

What:  Resolves the bearer token on a request into a User row.
Who:   Declared (directly or through policies.require) by every protected
       route.
"""

import logging
import uuid

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from inkpost.database import get_db_session
from inkpost.exceptions import AuthenticationError
from inkpost.models import User
from inkpost.security import decode_access_token

logger = logging.getLogger(__name__)

# auto_error=False: a missing header reaches get_current_user, which raises
# the application's own 401 body instead of FastAPI's default 403.
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> User:
    """
    Authenticate the caller from `Authorization: Bearer <token>`.

    Raises:
        AuthenticationError: No token, invalid/expired token, or the user the
            token names no longer exists.
    """
    if credentials is None:
        raise AuthenticationError("Authentication required")

    payload = decode_access_token(credentials.credentials)
    try:
        user_id = uuid.UUID(str(payload["sub"]))
    except ValueError:
        raise AuthenticationError("Invalid or expired token")

    user = await db.get(User, user_id)
    if user is None:
        logger.info("Token subject %s no longer exists", user_id)
        raise AuthenticationError("User not found")
    return user
