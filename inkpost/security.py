"""
Inkpost Backend — Password Hashing, Access Tokens, Slugs
=========================================================

What:  Stateless helpers shared by the auth, users, posts, categories and
       tags services.

Tokens:
    HS256 JWTs signed with settings.jwt_secret. Payload:
        {"sub": "<user uuid>", "email": "...", "iat": ..., "exp": ...}
    Expiry is settings.jwt_expires_hours after issue.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext
from slugify import slugify

from inkpost.config import settings
from inkpost.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)


# ── Passwords ─────────────────────────────────────────────────────────────
def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


# ── Tokens ────────────────────────────────────────────────────────────────
def create_access_token(
    subject: str,
    email: str,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Issue a signed access token for the given user id and email."""
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(hours=settings.jwt_expires_hours))
    payload = {
        "sub": subject,
        "email": email,
        "iat": now,
        "exp": expire,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Verify signature and expiry and return the payload.

    Raises:
        AuthenticationError: Token is malformed, expired, tampered with, or
            carries no subject.
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as e:
        logger.info("Rejected access token: %s", e)
        raise AuthenticationError("Invalid or expired token")

    if not payload.get("sub"):
        raise AuthenticationError("Invalid or expired token")
    return payload


# ── Slugs ─────────────────────────────────────────────────────────────────
def make_slug(text: str) -> str:
    """
    'Hello, World!' -> 'hello-world'. Non-alphanumerics collapse to '-'.

    Text with no sluggable characters gets a random 12-character slug.
    """
    return slugify(text, lowercase=True) or uuid.uuid4().hex[:12]
