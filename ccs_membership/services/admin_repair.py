"""Operator repair actions for approvals that did not finish cleanly.

Both actions are safe to repeat: linking an already-linked application is a
no-op, and a second set-password email only sends a fresh link.
"""

from __future__ import annotations

import logging

from ccs_membership.errors import NotFoundError, NotLinkableError
from ccs_membership.models.application import ApplicationStatus, MembershipApplication
from ccs_membership.platform.interfaces import ApplicationStore, IdentityStore

logger = logging.getLogger(__name__)


def link_orphaned_application(
    applications: ApplicationStore,
    identity_store: IdentityStore,
    application_id: str,
) -> MembershipApplication:
    """Link an Approved application with no member to the member holding its email.

    Raises:
        NotFoundError: no such application, or no member with that login email.
        NotLinkableError: the application is not Approved, or another link
            landed first.
    """
    application = applications.get(application_id)
    if application.status != ApplicationStatus.APPROVED.value:
        raise NotLinkableError(str(application_id), application.status)
    if application.linked_member_id:
        logger.info(
            "application_already_linked: id=%s member_id=%s",
            application_id,
            application.linked_member_id,
        )
        return application

    member = identity_store.find_member_by_email(application.email)
    if member is None:
        raise NotFoundError("member", application.email)

    updated = applications.link_member(str(application.id), member.id)
    logger.info("application_linked: id=%s member_id=%s", application_id, member.id)
    return updated


def resend_password_email(identity_store: IdentityStore, email: str) -> str:
    """Send a fresh set-password link to an existing member. Returns the member id.

    Unlike the send after provisioning, failures propagate so the operator
    sees them.
    """
    member = identity_store.find_member_by_email(email)
    if member is None:
        raise NotFoundError("member", email)
    identity_store.send_set_password_email(email)
    logger.info("password_setup_email_resent: email=%s member_id=%s", email, member.id)
    return member.id
