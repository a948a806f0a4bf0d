"""
Inkpost Backend — Auth Service
===============================

What:  Registration and login; issues access tokens.
Who:   Called by routes/auth.py.

Flow (register):
    ┌──────────┐    ┌──────────────┐    ┌──────────┐    ┌──────────┐
    │  DTO     │───▶│  Uniqueness  │───▶│  bcrypt  │───▶│  Insert  │──▶ token
    │ (Route)  │    │  email/user  │    │  hash    │    │  (flush) │
    └──────────┘    └──────────────┘    └──────────┘    └──────────┘
"""

import logging

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from inkpost.exceptions import AuthenticationError, ConflictError
from inkpost.models import User
from inkpost.schemas import AuthResponse, LoginRequest, RegisterRequest, UserPublic
from inkpost.security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)


class AuthService:
    """Stateless; receives the request's session on every call."""

    async def register(self, db: AsyncSession, data: RegisterRequest) -> AuthResponse:
        """
        Create an account and sign it in.

        Raises:
            ConflictError: Email or username already taken (→ 409)
        """
        result = await db.execute(
            select(User.id).where(
                or_(User.email == data.email, User.username == data.username)
            )
        )
        if result.first() is not None:
            raise ConflictError("User already exists")

        user = User(
            email=data.email,
            username=data.username,
            password=hash_password(data.password),
            name=data.name,
        )
        db.add(user)
        await db.flush()

        logger.info("User registered: %s (%s)", user.username, user.id)
        return self._auth_response(user)

    async def login(self, db: AsyncSession, data: LoginRequest) -> AuthResponse:
        """
        Exchange credentials for a token.

        Unknown email and wrong password produce the same message, so the
        response does not reveal which accounts exist.

        Raises:
            AuthenticationError: Bad credentials (→ 401)
        """
        result = await db.execute(select(User).where(User.email == data.email))
        user = result.scalar_one_or_none()

        if user is None or not verify_password(data.password, user.password):
            logger.info("Failed login for %s", data.email)
            raise AuthenticationError("Invalid credentials")

        logger.info("User logged in: %s", user.id)
        return self._auth_response(user)

    @staticmethod
    def me(user: User) -> UserPublic:
        return UserPublic.model_validate(user)

    @staticmethod
    def _auth_response(user: User) -> AuthResponse:
        return AuthResponse(
            user=UserPublic.model_validate(user),
            access_token=create_access_token(str(user.id), user.email),
        )


auth_service = AuthService()
