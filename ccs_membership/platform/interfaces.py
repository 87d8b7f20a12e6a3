"""
Collaborator interfaces for the membership lifecycle.

The identity store, contact store and notifier live on the hosting platform;
the application store is owned by this service. The state machine only talks
to these abstractions, never to a concrete backend.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from ccs_membership.models.application import ApplicationStatus, MembershipApplication


@dataclass(frozen=True)
class Member:
    """Authenticated account in the identity system."""

    id: str
    login_email: str
    display_name: str = ""
    roles: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class Contact:
    """CRM record for a person who may not have an account."""

    id: str
    email: str
    name: str = ""


@dataclass(frozen=True)
class MemberProfile:
    """Profile data sent with a member registration."""

    first_name: str = ""
    last_name: str = ""
    contact_id: str | None = None

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class ContactProfile:
    """Profile data for a new CRM contact."""

    email: str
    first_name: str = ""
    last_name: str = ""
    phone: str | None = None


class IdentityStore(ABC):
    """Member accounts and role assignments."""

    @abstractmethod
    def find_member_by_email(self, email: str) -> Member | None:
        """Exact login-email match, or None."""
        ...

    @abstractmethod
    def get_member(self, member_id: str) -> Member | None:
        ...

    @abstractmethod
    def create_member(self, email: str, credential: str, profile: MemberProfile) -> Member:
        """Register a member. Raises AlreadyExistsError on a duplicate email."""
        ...

    @abstractmethod
    def assign_role(self, role_id: str, member_id: str) -> None:
        ...

    @abstractmethod
    def remove_role(self, role_id: str, member_id: str) -> None:
        ...

    @abstractmethod
    def send_set_password_email(self, email: str) -> None:
        """Ask the identity system to email a set-your-password link."""
        ...


class ContactStore(ABC):
    """CRM contacts."""

    @abstractmethod
    def find_contact_by_email(self, email: str) -> Contact | None:
        ...

    @abstractmethod
    def create_contact(self, profile: ContactProfile) -> Contact:
        ...


class Notifier(ABC):
    """Transactional email by template."""

    @abstractmethod
    def send(
        self,
        template_id: str,
        recipient_id: str,
        variables: dict[str, Any],
        *,
        recipient_kind: str = "member",
    ) -> None:
        """Send template to a member or contact id. recipient_kind is 'member' or 'contact'."""
        ...


class ApplicationStore(ABC):
    """Persistence for membership applications."""

    @abstractmethod
    def get(self, application_id: str) -> MembershipApplication:
        """Return the application. Raises NotFoundError."""
        ...

    @abstractmethod
    def update(
        self,
        application_id: str,
        fields: dict[str, Any],
        expected_status: ApplicationStatus,
    ) -> MembershipApplication:
        """Write fields only if status still equals expected_status.

        Raises NotFoundError if absent, ConflictError if the status moved.
        """
        ...

    @abstractmethod
    def link_member(self, application_id: str, member_id: str) -> MembershipApplication:
        """Set linked_member_id on an Approved application that has none.

        Raises NotFoundError if absent, NotLinkableError otherwise.
        """
        ...

    @abstractmethod
    def create(self, fields: dict[str, Any]) -> MembershipApplication:
        ...

    @abstractmethod
    def list(
        self, status: ApplicationStatus | None = None, limit: int = 100
    ) -> list[MembershipApplication]:
        """Newest submission first. status=None means all."""
        ...

    @abstractmethod
    def count_by_status(self) -> dict[ApplicationStatus, int]:
        ...

    @abstractmethod
    def list_approved_without_member(self, limit: int = 1000) -> list[MembershipApplication]:
        ...
