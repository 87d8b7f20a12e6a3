"""Member provisioning: create-or-find a member account for an email.

Registration is attempted first and the lookup only runs when the identity
store reports a duplicate. The store's uniqueness constraint is what detects
concurrent provisioning of the same email.
"""

from __future__ import annotations

import logging
import secrets
import string
from dataclasses import dataclass

from ccs_membership.errors import AlreadyExistsError, IdentityInconsistencyError
from ccs_membership.platform.interfaces import IdentityStore, MemberProfile
from ccs_membership.services.notifications import Defer, run_now, send_password_setup_best_effort

logger = logging.getLogger(__name__)

TEMP_PASSWORD_LENGTH = 16
TEMP_PASSWORD_ALPHABET = string.ascii_letters + string.digits + "!@#$%"


@dataclass(frozen=True)
class ProvisionResult:
    member_id: str
    was_created: bool


def generate_temp_password(length: int = TEMP_PASSWORD_LENGTH) -> str:
    """Random throwaway credential; the member replaces it via the set-password email."""
    return "".join(secrets.choice(TEMP_PASSWORD_ALPHABET) for _ in range(length))


def provision_member(
    identity_store: IdentityStore,
    email: str,
    first_name: str,
    last_name: str,
    contact_id: str | None = None,
    *,
    defer: Defer = run_now,
) -> ProvisionResult:
    """Create a member for email, or return the existing one.

    On creation the set-password email is handed to ``defer`` and its outcome
    does not affect the result.

    Raises:
        IdentityInconsistencyError: create reported a duplicate but the lookup
            found nothing.
        Any other create error propagates unchanged.
    """
    profile = MemberProfile(first_name=first_name, last_name=last_name, contact_id=contact_id)
    try:
        member = identity_store.create_member(email, generate_temp_password(), profile)
    except AlreadyExistsError:
        existing = identity_store.find_member_by_email(email)
        if existing is None:
            logger.critical(
                "identity_inconsistency: create_member reported duplicate but lookup is empty "
                "email=%s",
                email,
            )
            raise IdentityInconsistencyError(email) from None
        logger.info("member_exists: email=%s member_id=%s", email, existing.id)
        return ProvisionResult(member_id=existing.id, was_created=False)

    logger.info(
        "member_created: email=%s member_id=%s contact_id=%s", email, member.id, contact_id
    )
    defer(send_password_setup_best_effort, identity_store, email)
    return ProvisionResult(member_id=member.id, was_created=True)
