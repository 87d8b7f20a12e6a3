"""MembershipApplication model: one studio-membership request."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from enum import Enum

from sqlalchemy import JSON, Boolean, DateTime, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from ccs_membership.db.session import Base


class ApplicationStatus(str, Enum):
    """Lifecycle states. Submitted is initial; Approved and Rejected are terminal."""

    SUBMITTED = "Submitted"
    APPROVED = "Approved"
    REJECTED = "Rejected"


# Allowed moves for the review decision; terminal states have no exits.
ALLOWED_TRANSITIONS: dict[ApplicationStatus, set[ApplicationStatus]] = {
    ApplicationStatus.SUBMITTED: {ApplicationStatus.APPROVED, ApplicationStatus.REJECTED},
    ApplicationStatus.APPROVED: set(),
    ApplicationStatus.REJECTED: set(),
}


class MembershipApplication(Base):
    """Studio membership application submitted through the intake form."""

    __tablename__ = "membership_applications"
    __table_args__ = (
        Index("ix_membership_applications_status_submitted", "status", "submission_date"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    # Applicant contact fields
    first_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    last_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    email: Mapped[str] = mapped_column(String(320), nullable=False, index=True)
    phone: Mapped[str | None] = mapped_column(String(64), nullable=True)
    street: Mapped[str | None] = mapped_column(String(255), nullable=True)
    city: Mapped[str | None] = mapped_column(String(255), nullable=True)
    state: Mapped[str | None] = mapped_column(String(64), nullable=True)
    zip_code: Mapped[str | None] = mapped_column(String(32), nullable=True)

    # Free-text experience / community answers
    has_experience: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    experience_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    techniques: Mapped[list | None] = mapped_column(JSON, nullable=True)
    practice_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    knows_safety: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    safety_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    purchase_intention: Mapped[str | None] = mapped_column(Text, nullable=True)
    community_commitment: Mapped[str | None] = mapped_column(Text, nullable=True)
    community_interest: Mapped[str | None] = mapped_column(Text, nullable=True)
    source: Mapped[str | None] = mapped_column(String(255), nullable=True)
    questions: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Lifecycle
    status: Mapped[str] = mapped_column(
        String(32), nullable=False, default=ApplicationStatus.SUBMITTED.value
    )
    submission_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )
    approval_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    rejection_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    decided_by: Mapped[str | None] = mapped_column(String(320), nullable=True)
    linked_member_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
