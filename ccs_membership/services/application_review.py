"""Membership application review: the Submitted → Approved/Rejected state machine.

decide() orders its work so that every fatal step (identity resolution,
provisioning, role grant, contact creation, the conditional persist) runs
before the only best-effort step, the decision email. A failure in a fatal
step aborts the decision; a failed email is logged and the decision stands.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from ccs_membership.errors import InvalidStateTransitionError
from ccs_membership.models.application import (
    ALLOWED_TRANSITIONS,
    ApplicationStatus,
    MembershipApplication,
)
from ccs_membership.platform.interfaces import (
    ApplicationStore,
    ContactProfile,
    ContactStore,
    IdentityStore,
    Notifier,
)
from ccs_membership.services.authorization import StudioRole, role_id
from ccs_membership.services.identity_resolver import IdentityKind, resolve_identity
from ccs_membership.services.member_provisioner import provision_member
from ccs_membership.services.notifications import (
    Defer,
    alert_admin_best_effort,
    run_now,
    send_best_effort,
)
from ccs_membership.services.role_assigner import assign_role

if TYPE_CHECKING:
    from ccs_membership.config import Settings

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ApplicationReviewService:
    """Decides membership applications and reconciles the applicant's identity."""

    def __init__(
        self,
        applications: ApplicationStore,
        identity_store: IdentityStore,
        contact_store: ContactStore,
        notifier: Notifier,
        settings: Settings | None = None,
        *,
        clock: Callable[[], datetime] = _utcnow,
        defer: Defer = run_now,
    ) -> None:
        if settings is None:
            from ccs_membership.config import get_settings

            settings = get_settings()
        self.applications = applications
        self.identity_store = identity_store
        self.contact_store = contact_store
        self.notifier = notifier
        self.settings = settings
        self.clock = clock
        self.defer = defer

    # ------------------------------------------------------------------
    # Decision
    # ------------------------------------------------------------------

    def decide(
        self,
        application_id: str,
        decision: ApplicationStatus | str,
        notes: str | None,
        reviewer: str,
    ) -> MembershipApplication:
        """Approve or reject a Submitted application.

        Raises:
            NotFoundError: application does not exist.
            InvalidStateTransitionError: application already decided, or the
                decision is not Approved/Rejected.
            ConflictError: another reviewer decided it while this call ran.
            IdentityInconsistencyError: provisioning found a phantom member.
        """
        application = self.applications.get(application_id)
        current = ApplicationStatus(application.status)
        target = self._parse_decision(application_id, current, decision)

        logger.info(
            "application_decision_started: id=%s decision=%s reviewer=%s",
            application_id,
            target.value,
            reviewer,
        )
        if target is ApplicationStatus.APPROVED:
            return self._approve(application, notes, reviewer)
        return self._reject(application, notes, reviewer)

    def _parse_decision(
        self,
        application_id: str,
        current: ApplicationStatus,
        decision: ApplicationStatus | str,
    ) -> ApplicationStatus:
        try:
            target = ApplicationStatus(decision)
        except ValueError:
            raise InvalidStateTransitionError(
                str(application_id), current.value, str(decision)
            ) from None
        if target not in ALLOWED_TRANSITIONS[current]:
            raise InvalidStateTransitionError(str(application_id), current.value, target.value)
        return target

    def _approve(
        self, application: MembershipApplication, notes: str | None, reviewer: str
    ) -> MembershipApplication:
        identity = resolve_identity(application.email, self.identity_store, self.contact_store)

        if identity.kind is IdentityKind.MEMBER:
            member_id = identity.id
            was_created = False
        else:
            contact_id = identity.id if identity.kind is IdentityKind.CONTACT else None
            result = provision_member(
                self.identity_store,
                application.email,
                application.first_name,
                application.last_name,
                contact_id,
                defer=self.defer,
            )
            member_id = result.member_id
            was_created = result.was_created

        assign_role(
            self.identity_store, role_id(StudioRole.INVITEE, self.settings), member_id
        )

        updated = self.applications.update(
            str(application.id),
            {
                "status": ApplicationStatus.APPROVED,
                "approval_date": self.clock(),
                "linked_member_id": member_id,
                "notes": notes,
                "decided_by": reviewer,
            },
            expected_status=ApplicationStatus.SUBMITTED,
        )
        logger.info(
            "application_approved: id=%s member_id=%s member_created=%s",
            application.id,
            member_id,
            was_created,
        )

        # Password setup for new members is the provisioner's own message.
        self._notify(
            updated,
            self.settings.template_approval,
            member_id,
            IdentityKind.MEMBER,
        )
        return updated

    def _reject(
        self, application: MembershipApplication, notes: str | None, reviewer: str
    ) -> MembershipApplication:
        identity = resolve_identity(application.email, self.identity_store, self.contact_store)

        if identity.kind is IdentityKind.NONE:
            contact = self.contact_store.create_contact(
                ContactProfile(
                    email=application.email,
                    first_name=application.first_name,
                    last_name=application.last_name,
                    phone=application.phone,
                )
            )
            recipient_kind, recipient_id = IdentityKind.CONTACT, contact.id
            logger.info("contact_created: email=%s contact_id=%s", application.email, contact.id)
        else:
            # Existing members keep their account and roles; no studio role is granted.
            recipient_kind, recipient_id = identity.kind, identity.id

        updated = self.applications.update(
            str(application.id),
            {
                "status": ApplicationStatus.REJECTED,
                "rejection_date": self.clock(),
                "linked_member_id": None,
                "notes": notes,
                "decided_by": reviewer,
            },
            expected_status=ApplicationStatus.SUBMITTED,
        )
        logger.info(
            "application_rejected: id=%s recipient=%s:%s",
            application.id,
            recipient_kind.value,
            recipient_id,
        )

        self._notify(updated, self.settings.template_rejection, recipient_id, recipient_kind)
        return updated

    def _notify(
        self,
        application: MembershipApplication,
        template_id: str,
        recipient_id: str,
        recipient_kind: IdentityKind,
    ) -> bool:
        sent = send_best_effort(
            self.notifier,
            template_id,
            recipient_id,
            self._email_variables(application),
            recipient_kind=recipient_kind.value,
        )
        if not sent:
            alert_admin_best_effort(
                self.notifier,
                self.settings.admin_contact_id,
                self.settings.template_admin_alert,
                "Membership decision email not delivered",
                f"Application {application.id} ({application.email}) is "
                f"{application.status}; the {recipient_kind.value} {recipient_id} "
                f"was not emailed (template {template_id}).",
            )
        return sent

    @staticmethod
    def _email_variables(application: MembershipApplication) -> dict[str, Any]:
        return {"firstName": application.first_name or ""}
