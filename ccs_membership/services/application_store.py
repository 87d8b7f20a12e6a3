"""SQL-backed application store.

The optimistic precondition is a single conditional UPDATE
(``WHERE id = :id AND status = :expected``); zero rows affected means the
application is missing or another reviewer already decided it.
"""

from __future__ import annotations

import logging
import uuid
from enum import Enum
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from ccs_membership.errors import ConflictError, NotFoundError, NotLinkableError
from ccs_membership.models.application import ApplicationStatus, MembershipApplication
from ccs_membership.platform.interfaces import ApplicationStore

logger = logging.getLogger(__name__)

STATUS_FILTER_ALL = "All"


def parse_status_filter(value: str | None) -> ApplicationStatus | None:
    """Map a list filter ("All", "Submitted", ...) to a status; None means all.

    Raises ValueError on an unknown status.
    """
    if value is None or value == STATUS_FILTER_ALL:
        return None
    return ApplicationStatus(value)


def _parse_id(application_id: str | uuid.UUID) -> uuid.UUID:
    if isinstance(application_id, uuid.UUID):
        return application_id
    try:
        return uuid.UUID(str(application_id))
    except (ValueError, TypeError):
        raise NotFoundError("application", str(application_id)) from None


def _column_values(fields: dict[str, Any]) -> dict[str, Any]:
    return {k: (v.value if isinstance(v, Enum) else v) for k, v in fields.items()}


class SqlApplicationStore(ApplicationStore):
    """ApplicationStore over a SQLAlchemy session. Commits on every write."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def get(self, application_id: str) -> MembershipApplication:
        app_uuid = _parse_id(application_id)
        application = self.db.get(MembershipApplication, app_uuid, populate_existing=True)
        if application is None:
            raise NotFoundError("application", str(application_id))
        return application

    def update(
        self,
        application_id: str,
        fields: dict[str, Any],
        expected_status: ApplicationStatus,
    ) -> MembershipApplication:
        app_uuid = _parse_id(application_id)
        result = self.db.execute(
            update(MembershipApplication)
            .where(
                MembershipApplication.id == app_uuid,
                MembershipApplication.status == expected_status.value,
            )
            .values(**_column_values(fields))
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            self.db.rollback()
            if self.db.get(MembershipApplication, app_uuid) is None:
                raise NotFoundError("application", str(application_id))
            logger.warning(
                "application_update_conflict: id=%s expected_status=%s",
                application_id,
                expected_status.value,
            )
            raise ConflictError(str(application_id), expected_status.value)
        self.db.commit()
        return self.get(application_id)

    def link_member(self, application_id: str, member_id: str) -> MembershipApplication:
        app_uuid = _parse_id(application_id)
        result = self.db.execute(
            update(MembershipApplication)
            .where(
                MembershipApplication.id == app_uuid,
                MembershipApplication.status == ApplicationStatus.APPROVED.value,
                MembershipApplication.linked_member_id.is_(None),
            )
            .values(linked_member_id=member_id)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            self.db.rollback()
            current = self.db.get(MembershipApplication, app_uuid, populate_existing=True)
            if current is None:
                raise NotFoundError("application", str(application_id))
            raise NotLinkableError(str(application_id), current.status)
        self.db.commit()
        return self.get(application_id)

    def create(self, fields: dict[str, Any]) -> MembershipApplication:
        application = MembershipApplication(**_column_values(fields))
        self.db.add(application)
        self.db.commit()
        self.db.refresh(application)
        return application

    def list(
        self, status: ApplicationStatus | None = None, limit: int = 100
    ) -> list[MembershipApplication]:
        stmt = select(MembershipApplication)
        if status is not None:
            stmt = stmt.where(MembershipApplication.status == status.value)
        stmt = stmt.order_by(MembershipApplication.submission_date.desc()).limit(limit)
        return list(self.db.execute(stmt).scalars().all())

    def count_by_status(self) -> dict[ApplicationStatus, int]:
        rows = self.db.execute(
            select(MembershipApplication.status, func.count()).group_by(
                MembershipApplication.status
            )
        ).all()
        counts = {status: 0 for status in ApplicationStatus}
        for status_value, count in rows:
            counts[ApplicationStatus(status_value)] = count
        return counts

    def list_approved_without_member(self, limit: int = 1000) -> list[MembershipApplication]:
        stmt = (
            select(MembershipApplication)
            .where(
                MembershipApplication.status == ApplicationStatus.APPROVED.value,
                MembershipApplication.linked_member_id.is_(None),
            )
            .order_by(MembershipApplication.submission_date.desc())
            .limit(limit)
        )
        items = list(self.db.execute(stmt).scalars().all())
        if len(items) == limit:
            logger.warning("orphaned_approvals_limit_reached: limit=%d", limit)
        return items
