"""Membership application API schemas."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class ApplicationRead(BaseModel):
    """Single membership application (response)."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    first_name: str
    last_name: str
    email: str
    phone: str | None = None
    street: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    has_experience: bool = False
    experience_description: str | None = None
    techniques: list[str] | None = None
    practice_description: str | None = None
    knows_safety: bool = False
    safety_description: str | None = None
    purchase_intention: str | None = None
    community_commitment: str | None = None
    community_interest: str | None = None
    source: str | None = None
    questions: str | None = None
    status: str
    submission_date: datetime
    approval_date: datetime | None = None
    rejection_date: datetime | None = None
    notes: str | None = None
    decided_by: str | None = None
    linked_member_id: str | None = None


class ApplicationList(BaseModel):
    """Review list, newest submission first."""

    items: list[ApplicationRead]
    total: int


class ApplicationStats(BaseModel):
    """Counts per status for the review dashboard."""

    pending: int = 0
    approved: int = 0
    rejected: int = 0
    total: int = 0


class DecisionRequest(BaseModel):
    """POST body for deciding an application."""

    decision: Literal["Approved", "Rejected"]
    notes: str | None = Field(default=None, max_length=5000)


class ApplicationSubmission(BaseModel):
    """Intake form payload. Empty answers are dropped before storage."""

    first_name: str = Field(default="", max_length=255)
    last_name: str = Field(default="", max_length=255)
    email: EmailStr
    phone: str | None = None
    street: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    has_experience: bool = False
    experience_description: str | None = None
    techniques: list[str] = Field(default_factory=list)
    practice_description: str | None = None
    knows_safety: bool = False
    safety_description: str | None = None
    purchase_intention: str | None = None
    community_commitment: str | None = None
    community_interest: str | None = None
    source: str | None = None
    questions: str | None = None


class MemberRead(BaseModel):
    """Platform member as seen by reviewers."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    login_email: str
    display_name: str = ""
    roles: list[str] = Field(default_factory=list)


class PasswordEmailRequest(BaseModel):
    """Login email to resend the set-password link to (matched exactly)."""

    email: str = Field(..., min_length=3, max_length=320)


class PasswordEmailResult(BaseModel):
    success: bool
    email: str
    member_id: str
