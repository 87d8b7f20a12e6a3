"""Role-based capability checks.

One place answers "does this role set satisfy that requirement?". Role ids
come from settings, so call sites name a StudioRole instead of comparing
platform id strings.

Role sets may be given as a Member, an iterable of role id strings, or an
iterable of role records (objects with ``id`` or dicts with ``id``/``_id``).
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from enum import Enum
from typing import TYPE_CHECKING, Any

from ccs_membership.errors import AuthorizationError

if TYPE_CHECKING:
    from ccs_membership.config import Settings


class StudioRole(str, Enum):
    """Permission groupings configured on the platform."""

    SITE_MEMBER = "site_member"
    APPLICANT = "applicant"
    INVITEE = "invitee"
    MEMBER = "member"
    ADMIN = "admin"


RolePredicate = Callable[[frozenset[str]], bool]


def role_id(role: StudioRole, settings: Settings | None = None) -> str:
    """Return the configured platform id for a studio role.

    Raises ValueError when the role id is not configured.
    """
    if settings is None:
        from ccs_membership.config import get_settings

        settings = get_settings()
    value = {
        StudioRole.SITE_MEMBER: settings.role_site_member_id,
        StudioRole.APPLICANT: settings.role_applicant_id,
        StudioRole.INVITEE: settings.role_invitee_id,
        StudioRole.MEMBER: settings.role_member_id,
        StudioRole.ADMIN: settings.role_admin_id,
    }[role]
    if not value:
        raise ValueError(f"Platform role id for {role.value} is not configured")
    return value


def _role_ids(roles: Any) -> frozenset[str]:
    """Normalize any supported role-set shape to a frozenset of id strings."""
    if roles is None:
        return frozenset()
    if hasattr(roles, "roles") and not isinstance(roles, (str, dict)):
        return _role_ids(roles.roles)
    ids: set[str] = set()
    for item in roles:
        if isinstance(item, str):
            ids.add(item)
        elif isinstance(item, dict):
            value = item.get("id") or item.get("_id")
            if value:
                ids.add(str(value))
        elif getattr(item, "id", None):
            ids.add(str(item.id))
    return frozenset(ids)


def any_of(*roles: StudioRole, settings: Settings | None = None) -> RolePredicate:
    """Predicate satisfied when at least one of the roles is held."""
    required = frozenset(role_id(r, settings) for r in roles)
    return lambda held: bool(held & required)


def all_of(*roles: StudioRole, settings: Settings | None = None) -> RolePredicate:
    """Predicate satisfied when every role is held."""
    required = frozenset(role_id(r, settings) for r in roles)
    return lambda held: required <= held


def has_capability(roles: Any, predicate: RolePredicate) -> bool:
    return predicate(_role_ids(roles))


def require_capability(roles: Any, predicate: RolePredicate, *, action: str) -> None:
    """Raise AuthorizationError unless roles satisfy predicate."""
    if not has_capability(roles, predicate):
        raise AuthorizationError(f"Not permitted to {action}")


def is_studio_admin(roles: Iterable[Any] | Any, settings: Settings | None = None) -> bool:
    return has_capability(roles, any_of(StudioRole.ADMIN, settings=settings))


def is_studio_member(roles: Iterable[Any] | Any, settings: Settings | None = None) -> bool:
    """Full studio member (not invitee)."""
    return has_capability(roles, any_of(StudioRole.MEMBER, settings=settings))
