"""SQLAlchemy models."""

from ccs_membership.models.application import (
    ALLOWED_TRANSITIONS,
    ApplicationStatus,
    MembershipApplication,
)

__all__ = [
    "ALLOWED_TRANSITIONS",
    "ApplicationStatus",
    "MembershipApplication",
]
