"""Owner access tokens.

Reflections are scoped to an owner. The owner id is the ``sub`` claim of an
HS256 JWT signed with ``JWT_SECRET``; it is never read from request bodies.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from fastapi import HTTPException
from jose import JWTError, jwt

from orbit.config import get_settings

JWT_ALGORITHM = "HS256"


def create_access_token(owner_id: str, expires_in: timedelta | None = None) -> str:
    settings = get_settings()
    now = datetime.now(timezone.utc)
    if expires_in is None:
        expires_in = timedelta(minutes=settings.jwt_access_token_expire_minutes)
    payload = {
        "sub": owner_id,
        "type": "access",
        "iat": now,
        "exp": now + expires_in,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Decode and validate an access token. Raises HTTPException 401 on failure."""
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[JWT_ALGORITHM])
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    if payload.get("type") != "access":
        raise HTTPException(status_code=401, detail="Invalid token type")
    return payload
