"""Identity resolution by email: member first, then CRM contact."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from ccs_membership.platform.interfaces import ContactStore, IdentityStore

logger = logging.getLogger(__name__)


class IdentityKind(str, Enum):
    MEMBER = "member"
    CONTACT = "contact"
    NONE = "none"


@dataclass(frozen=True)
class ResolvedIdentity:
    """Result of resolve_identity. id is None only when kind is NONE."""

    kind: IdentityKind
    id: str | None = None


def resolve_identity(
    email: str,
    identity_store: IdentityStore,
    contact_store: ContactStore,
) -> ResolvedIdentity:
    """Return the existing member or contact for email, or kind NONE.

    Read-only. Lookup errors propagate; the caller decides any fallback.
    """
    member = identity_store.find_member_by_email(email)
    if member is not None:
        logger.debug("identity_resolved: email=%s kind=member id=%s", email, member.id)
        return ResolvedIdentity(IdentityKind.MEMBER, member.id)

    contact = contact_store.find_contact_by_email(email)
    if contact is not None:
        logger.debug("identity_resolved: email=%s kind=contact id=%s", email, contact.id)
        return ResolvedIdentity(IdentityKind.CONTACT, contact.id)

    logger.debug("identity_resolved: email=%s kind=none", email)
    return ResolvedIdentity(IdentityKind.NONE)
