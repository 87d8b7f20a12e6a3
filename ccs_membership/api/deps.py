"""Shared FastAPI dependencies for API routes."""

from __future__ import annotations

from fastapi import Cookie, Depends, Header, HTTPException, Request, status
from sqlalchemy.orm import Session

from ccs_membership.db.session import get_db  # re-export
from ccs_membership.errors import (
    AuthorizationError,
    ConflictError,
    IdentityInconsistencyError,
    InvalidStateTransitionError,
    MembershipError,
    NotFoundError,
    NotLinkableError,
    PlatformError,
)
from ccs_membership.platform.factory import get_platform_client
from ccs_membership.platform.interfaces import (
    ApplicationStore,
    ContactStore,
    IdentityStore,
    Member,
    Notifier,
)
from ccs_membership.services.application_store import SqlApplicationStore
from ccs_membership.services.auth import get_member_from_token
from ccs_membership.services.authorization import StudioRole, any_of, require_capability

__all__ = [
    "get_db",
    "get_application_store",
    "get_identity_store",
    "get_contact_store",
    "get_notifier",
    "get_current_member",
    "require_auth",
    "require_studio_admin",
    "http_error_for",
]

# Cookie name for browser sessions
AUTH_COOKIE = "access_token"


def get_application_store(db: Session = Depends(get_db)) -> ApplicationStore:
    return SqlApplicationStore(db)


def get_identity_store() -> IdentityStore:
    return get_platform_client()


def get_contact_store() -> ContactStore:
    return get_platform_client()


def get_notifier() -> Notifier:
    return get_platform_client()


def get_current_member(
    request: Request,
    identity_store: IdentityStore = Depends(get_identity_store),
    authorization: str | None = Header(None),
    access_token: str | None = Cookie(None),
) -> Member | None:
    """Return the authenticated member or None.

    Checks (in order):
    1. Authorization: Bearer <token> header
    2. access_token cookie
    """
    token: str | None = None

    if authorization and authorization.startswith("Bearer "):
        token = authorization[len("Bearer ") :]

    if token is None and access_token:
        token = access_token

    if token is None:
        return None

    try:
        return get_member_from_token(identity_store, token)
    except PlatformError as e:
        raise http_error_for(e) from e


def require_auth(
    request: Request,
    member: Member | None = Depends(get_current_member),
) -> Member:
    """Dependency that requires authentication. Returns 401 otherwise."""
    if member is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return member


def require_studio_admin(member: Member = Depends(require_auth)) -> Member:
    """Dependency that requires the studio admin capability. Returns 403 otherwise."""
    try:
        require_capability(member, any_of(StudioRole.ADMIN), action="review applications")
    except AuthorizationError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from e
    return member


def http_error_for(exc: MembershipError) -> HTTPException:
    """Translate a domain error into the HTTP response reviewers see."""
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, (InvalidStateTransitionError, ConflictError, NotLinkableError)):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    if isinstance(exc, AuthorizationError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc))
    if isinstance(exc, PlatformError):
        return HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Membership platform unavailable",
        )
    if isinstance(exc, IdentityInconsistencyError):
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Member account state is inconsistent; contact a site administrator",
        )
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
