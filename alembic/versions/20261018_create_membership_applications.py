"""create membership_applications table

Revision ID: 20261018_applications
Revises:
Create Date: 2026-10-18

Studio membership applications and their review outcome.
"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20261018_applications"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "membership_applications",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("first_name", sa.String(length=255), nullable=False),
        sa.Column("last_name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("phone", sa.String(length=64), nullable=True),
        sa.Column("street", sa.String(length=255), nullable=True),
        sa.Column("city", sa.String(length=255), nullable=True),
        sa.Column("state", sa.String(length=64), nullable=True),
        sa.Column("zip_code", sa.String(length=32), nullable=True),
        sa.Column("has_experience", sa.Boolean(), nullable=False),
        sa.Column("experience_description", sa.Text(), nullable=True),
        sa.Column("techniques", sa.JSON(), nullable=True),
        sa.Column("practice_description", sa.Text(), nullable=True),
        sa.Column("knows_safety", sa.Boolean(), nullable=False),
        sa.Column("safety_description", sa.Text(), nullable=True),
        sa.Column("purchase_intention", sa.Text(), nullable=True),
        sa.Column("community_commitment", sa.Text(), nullable=True),
        sa.Column("community_interest", sa.Text(), nullable=True),
        sa.Column("source", sa.String(length=255), nullable=True),
        sa.Column("questions", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("submission_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("approval_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("rejection_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("decided_by", sa.String(length=320), nullable=True),
        sa.Column("linked_member_id", sa.String(length=64), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_membership_applications_email", "membership_applications", ["email"]
    )
    op.create_index(
        "ix_membership_applications_linked_member_id",
        "membership_applications",
        ["linked_member_id"],
    )
    op.create_index(
        "ix_membership_applications_status_submitted",
        "membership_applications",
        ["status", "submission_date"],
    )


def downgrade() -> None:
    op.drop_index("ix_membership_applications_status_submitted", table_name="membership_applications")
    op.drop_index("ix_membership_applications_linked_member_id", table_name="membership_applications")
    op.drop_index("ix_membership_applications_email", table_name="membership_applications")
    op.drop_table("membership_applications")
