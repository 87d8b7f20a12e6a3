"""Idempotent studio role grants and revocations."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ccs_membership.errors import AlreadyExistsError, NotFoundError
from ccs_membership.platform.interfaces import IdentityStore, Member
from ccs_membership.services.authorization import StudioRole, role_id

if TYPE_CHECKING:
    from ccs_membership.config import Settings

logger = logging.getLogger(__name__)


def _require_member(identity_store: IdentityStore, member_id: str) -> Member:
    member = identity_store.get_member(member_id)
    if member is None:
        raise NotFoundError("member", member_id)
    return member


def assign_role(identity_store: IdentityStore, role: str, member_id: str) -> bool:
    """Grant role to member. Returns False when the member already held it.

    Raises NotFoundError when the member does not exist. Store errors propagate.
    """
    member = _require_member(identity_store, member_id)
    if role in member.roles:
        logger.debug("role_assign_skipped: role=%s member_id=%s already held", role, member_id)
        return False
    try:
        identity_store.assign_role(role, member_id)
    except AlreadyExistsError:
        # Granted concurrently between the read and the write
        logger.debug("role_assign_skipped: role=%s member_id=%s granted concurrently", role, member_id)
        return False
    logger.info("role_assigned: role=%s member_id=%s", role, member_id)
    return True


def remove_role(identity_store: IdentityStore, role: str, member_id: str) -> bool:
    """Revoke role from member. Returns False when the member did not hold it."""
    member = _require_member(identity_store, member_id)
    if role not in member.roles:
        logger.debug("role_remove_skipped: role=%s member_id=%s not held", role, member_id)
        return False
    identity_store.remove_role(role, member_id)
    logger.info("role_removed: role=%s member_id=%s", role, member_id)
    return True


def promote_invitee(
    identity_store: IdentityStore,
    member_id: str,
    settings: Settings | None = None,
) -> Member:
    """Move a member from studio invitee to full studio member.

    Safe to re-run: both steps are idempotent. Returns the refreshed member.
    """
    remove_role(identity_store, role_id(StudioRole.INVITEE, settings), member_id)
    assign_role(identity_store, role_id(StudioRole.MEMBER, settings), member_id)
    logger.info("member_promoted: member_id=%s", member_id)
    return _require_member(identity_store, member_id)
