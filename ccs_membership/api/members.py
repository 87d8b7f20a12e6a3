"""Member administration routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ccs_membership.api.deps import get_identity_store, http_error_for, require_studio_admin
from ccs_membership.config import get_settings
from ccs_membership.errors import MembershipError
from ccs_membership.platform.interfaces import IdentityStore, Member
from ccs_membership.schemas.application import (
    MemberRead,
    PasswordEmailRequest,
    PasswordEmailResult,
)
from ccs_membership.services.admin_repair import resend_password_email
from ccs_membership.services.role_assigner import promote_invitee

router = APIRouter()


def _member_read(member: Member) -> MemberRead:
    return MemberRead(
        id=member.id,
        login_email=member.login_email,
        display_name=member.display_name,
        roles=sorted(member.roles),
    )


@router.get("/me", response_model=MemberRead)
def me(current: Member = Depends(require_studio_admin)) -> MemberRead:
    """Return the authenticated reviewer."""
    return _member_read(current)


@router.post("/{member_id}/promote", response_model=MemberRead)
def api_promote_member(
    member_id: str,
    identity_store: IdentityStore = Depends(get_identity_store),
    _admin: Member = Depends(require_studio_admin),
) -> MemberRead:
    """Promote a studio invitee to full studio member."""
    try:
        member = promote_invitee(identity_store, member_id, get_settings())
    except MembershipError as e:
        raise http_error_for(e) from e
    return _member_read(member)


@router.post("/resend-password-email", response_model=PasswordEmailResult)
def api_resend_password_email(
    body: PasswordEmailRequest,
    identity_store: IdentityStore = Depends(get_identity_store),
    _admin: Member = Depends(require_studio_admin),
) -> PasswordEmailResult:
    """Send a member a fresh set-password link."""
    email = body.email.strip()
    try:
        member_id = resend_password_email(identity_store, email)
    except MembershipError as e:
        raise http_error_for(e) from e
    return PasswordEmailResult(success=True, email=email, member_id=member_id)
