"""Pydantic schemas for request/response validation."""

from ccs_membership.schemas.application import (
    ApplicationList,
    ApplicationRead,
    ApplicationStats,
    ApplicationSubmission,
    DecisionRequest,
    MemberRead,
    PasswordEmailRequest,
    PasswordEmailResult,
)

__all__ = [
    "ApplicationList",
    "ApplicationRead",
    "ApplicationStats",
    "ApplicationSubmission",
    "DecisionRequest",
    "MemberRead",
    "PasswordEmailRequest",
    "PasswordEmailResult",
]
