"""Reviewer authentication: JWT tokens naming a platform member."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from ccs_membership.config import get_settings
from ccs_membership.platform.interfaces import IdentityStore, Member

# JWT configuration
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_HOURS = 24


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed JWT access token. ``sub`` carries the member id."""
    settings = get_settings()
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(hours=ACCESS_TOKEN_EXPIRE_HOURS)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.secret_key, algorithm=ALGORITHM)


def decode_access_token(token: str) -> Optional[dict]:
    """Decode and validate a JWT token. Returns payload or None."""
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
        return payload
    except JWTError:
        return None


def get_member_from_token(identity_store: IdentityStore, token: str) -> Optional[Member]:
    """Resolve the member named by a token. None if the token is invalid or the member is gone.

    Roles come from the identity store on every request, never from the token.
    """
    payload = decode_access_token(token)
    if payload is None:
        return None
    member_id: Optional[str] = payload.get("sub")
    if not member_id:
        return None
    return identity_store.get_member(member_id)
