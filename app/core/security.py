"""
JWT utilities for the externally issued identity tokens.

Login and signup live with the identity provider; this service only needs to
validate bearer tokens and read the actor from them. Tokens carry the actor
id in `sub` and the role in `role`.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from app.core.config import settings
from app.models.user import Actor, UserRole


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token.

    Used by tests and local tooling to mint tokens shaped like the identity
    provider's.

    Args:
        data: Claims to encode (typically {"sub": user_id, "role": "CANDIDATE"})
        expires_delta: Optional expiration time delta (default: ACCESS_TOKEN_EXPIRE_MINUTES)

    Returns:
        Encoded JWT token as a string
    """
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> dict:
    """
    Decode and validate a JWT token.

    Raises:
        JWTError: If token is invalid or expired
    """
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])


def actor_from_token(token: str) -> Actor:
    """
    Build the Actor carried by a token.

    Raises:
        JWTError: If the token is invalid, expired, or lacks a usable sub/role
    """
    payload = decode_token(token)
    user_id = payload.get("sub")
    if not user_id:
        raise JWTError("Token has no subject")

    try:
        role = UserRole(payload.get("role"))
    except ValueError:
        raise JWTError(f"Unknown role claim: {payload.get('role')!r}")

    return Actor(id=str(user_id), role=role)
