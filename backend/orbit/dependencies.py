"""FastAPI dependency injection for owner authentication."""

from __future__ import annotations

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from orbit.auth import decode_access_token

_bearer_scheme = HTTPBearer(auto_error=True)


def require_owner(
    credentials: HTTPAuthorizationCredentials = Depends(_bearer_scheme),
) -> str:
    """Extract and validate the bearer token from the Authorization header.

    Returns the owner id (sub claim) if the token is valid.
    Raises HTTPException 401 if the token is expired, invalid, or has no subject.
    """
    payload = decode_access_token(credentials.credentials)
    owner_id = payload.get("sub")
    if not owner_id:
        raise HTTPException(status_code=401, detail="Invalid token payload")
    return owner_id
