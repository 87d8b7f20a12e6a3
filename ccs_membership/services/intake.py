"""Intake: turn a form submission into a Submitted application."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any

from ccs_membership.models.application import ApplicationStatus, MembershipApplication
from ccs_membership.platform.interfaces import ApplicationStore

logger = logging.getLogger(__name__)

# Set by the lifecycle, never by the applicant.
_RESERVED_FIELDS = frozenset(
    {
        "id",
        "status",
        "submission_date",
        "approval_date",
        "rejection_date",
        "notes",
        "decided_by",
        "linked_member_id",
    }
)


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, dict)):
        return len(value) == 0
    return False


def clean_submission(submission: Mapping[str, Any]) -> dict[str, Any]:
    """Keep known applicant fields with non-empty values; strip surrounding whitespace."""
    columns = set(MembershipApplication.__table__.columns.keys()) - _RESERVED_FIELDS
    cleaned: dict[str, Any] = {}
    for key, value in submission.items():
        if key not in columns:
            logger.debug("intake_field_ignored: field=%s", key)
            continue
        if _is_empty(value):
            continue
        cleaned[key] = value.strip() if isinstance(value, str) else value
    return cleaned


def submit_application(
    store: ApplicationStore,
    submission: Mapping[str, Any],
    now: Callable[[], datetime] = lambda: datetime.now(UTC),
) -> MembershipApplication:
    """Create a Submitted application from form data.

    Raises ValueError when the submission has no email.
    """
    fields = clean_submission(submission)
    if not fields.get("email"):
        raise ValueError("Application submission requires an email")

    fields["status"] = ApplicationStatus.SUBMITTED
    fields["submission_date"] = now()
    application = store.create(fields)
    logger.info("application_submitted: id=%s email=%s", application.id, application.email)
    return application
