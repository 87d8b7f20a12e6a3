"""Membership application API routes: intake and the admin review queue."""

from __future__ import annotations

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status

from ccs_membership.api.deps import (
    get_application_store,
    get_contact_store,
    get_identity_store,
    get_notifier,
    http_error_for,
    require_studio_admin,
)
from ccs_membership.config import get_settings
from ccs_membership.errors import MembershipError
from ccs_membership.models.application import ApplicationStatus
from ccs_membership.platform.interfaces import (
    ApplicationStore,
    ContactStore,
    IdentityStore,
    Member,
    Notifier,
)
from ccs_membership.schemas.application import (
    ApplicationList,
    ApplicationRead,
    ApplicationStats,
    ApplicationSubmission,
    DecisionRequest,
)
from ccs_membership.services.admin_repair import link_orphaned_application
from ccs_membership.services.application_review import ApplicationReviewService
from ccs_membership.services.application_store import STATUS_FILTER_ALL, parse_status_filter
from ccs_membership.services.intake import submit_application
from ccs_membership.services.notifications import PendingSends

logger = logging.getLogger(__name__)

router = APIRouter()

# Hard cap for the orphaned-approval scan
ORPHANED_SCAN_LIMIT = 1000


@router.post("", response_model=ApplicationRead, status_code=status.HTTP_201_CREATED)
def api_submit_application(
    body: ApplicationSubmission,
    applications: ApplicationStore = Depends(get_application_store),
) -> ApplicationRead:
    """Record a new membership application from the intake form."""
    try:
        application = submit_application(applications, body.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from None
    return ApplicationRead.model_validate(application)


@router.get("", response_model=ApplicationList)
def api_list_applications(
    status_filter: str = Query(
        STATUS_FILTER_ALL,
        alias="status",
        description="All, Submitted, Approved or Rejected.",
    ),
    limit: int | None = Query(None, ge=1, le=500, description="Default: review_list_limit."),
    applications: ApplicationStore = Depends(get_application_store),
    _admin: Member = Depends(require_studio_admin),
) -> ApplicationList:
    """List applications, newest submission first."""
    try:
        status_value = parse_status_filter(status_filter)
    except ValueError:
        raise HTTPException(
            status_code=422, detail=f"Invalid status filter: {status_filter}"
        ) from None

    effective_limit = limit if limit is not None else get_settings().review_list_limit
    items = applications.list(status=status_value, limit=effective_limit)
    return ApplicationList(
        items=[ApplicationRead.model_validate(a) for a in items],
        total=len(items),
    )


@router.get("/stats", response_model=ApplicationStats)
def api_application_stats(
    applications: ApplicationStore = Depends(get_application_store),
    _admin: Member = Depends(require_studio_admin),
) -> ApplicationStats:
    """Counts per status for the review dashboard."""
    counts = applications.count_by_status()
    return ApplicationStats(
        pending=counts[ApplicationStatus.SUBMITTED],
        approved=counts[ApplicationStatus.APPROVED],
        rejected=counts[ApplicationStatus.REJECTED],
        total=sum(counts.values()),
    )


@router.get("/orphaned", response_model=ApplicationList)
def api_orphaned_approvals(
    applications: ApplicationStore = Depends(get_application_store),
    _admin: Member = Depends(require_studio_admin),
) -> ApplicationList:
    """Approved applications with no linked member (legacy or partially failed approvals)."""
    items = applications.list_approved_without_member(limit=ORPHANED_SCAN_LIMIT)
    return ApplicationList(
        items=[ApplicationRead.model_validate(a) for a in items],
        total=len(items),
    )


@router.get("/{application_id}", response_model=ApplicationRead)
def api_get_application(
    application_id: str,
    applications: ApplicationStore = Depends(get_application_store),
    _admin: Member = Depends(require_studio_admin),
) -> ApplicationRead:
    try:
        application = applications.get(application_id)
    except MembershipError as e:
        raise http_error_for(e) from e
    return ApplicationRead.model_validate(application)


@router.post("/{application_id}/decision", response_model=ApplicationRead)
def api_decide_application(
    application_id: str,
    body: DecisionRequest,
    background_tasks: BackgroundTasks,
    applications: ApplicationStore = Depends(get_application_store),
    identity_store: IdentityStore = Depends(get_identity_store),
    contact_store: ContactStore = Depends(get_contact_store),
    notifier: Notifier = Depends(get_notifier),
    admin: Member = Depends(require_studio_admin),
) -> ApplicationRead:
    """Approve or reject a Submitted application.

    The set-password email for a newly created member is sent after the
    response, or before the error response when a later step failed.
    409 when the application was already decided.
    """
    pending = PendingSends()
    service = ApplicationReviewService(
        applications,
        identity_store,
        contact_store,
        notifier,
        get_settings(),
        defer=pending,
    )
    try:
        application = service.decide(
            application_id,
            body.decision,
            body.notes,
            admin.login_email or admin.id,
        )
    except Exception as e:
        pending.run_all()
        if not isinstance(e, MembershipError):
            raise
        logger.warning(
            "application_decision_failed: id=%s decision=%s error=%s",
            application_id,
            body.decision,
            type(e).__name__,
        )
        raise http_error_for(e) from e
    pending.hand_off(background_tasks.add_task)
    return ApplicationRead.model_validate(application)


@router.post("/{application_id}/link-member", response_model=ApplicationRead)
def api_link_orphaned_application(
    application_id: str,
    applications: ApplicationStore = Depends(get_application_store),
    identity_store: IdentityStore = Depends(get_identity_store),
    _admin: Member = Depends(require_studio_admin),
) -> ApplicationRead:
    """Link an Approved application with no member to the member holding its email."""
    try:
        application = link_orphaned_application(applications, identity_store, application_id)
    except MembershipError as e:
        raise http_error_for(e) from e
    return ApplicationRead.model_validate(application)
