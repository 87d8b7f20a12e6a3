"""Domain exceptions for the membership application lifecycle.

Services raise these; the API layer maps them to HTTP status codes.
NotificationFailure is the only one that never escapes a decision: it is
logged by the best-effort sender and returned as a flag.
"""

from __future__ import annotations


class MembershipError(Exception):
    """Base class for membership service errors."""


class NotFoundError(MembershipError):
    """Referenced application, member or contact does not exist."""

    def __init__(self, resource: str, identifier: str) -> None:
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class InvalidStateTransitionError(MembershipError):
    """Decision attempted on an application that is no longer Submitted."""

    def __init__(self, application_id: str, current: str, requested: str) -> None:
        self.application_id = application_id
        self.current = current
        self.requested = requested
        super().__init__(
            f"Cannot move application {application_id} from {current} to {requested}"
        )


class ConflictError(MembershipError):
    """Optimistic status check failed at write time (another reviewer acted first)."""

    def __init__(self, application_id: str, expected_status: str) -> None:
        self.application_id = application_id
        self.expected_status = expected_status
        super().__init__(
            f"Application {application_id} already decided "
            f"(expected status {expected_status} at write time)"
        )


class NotLinkableError(MembershipError):
    """Only an Approved application with no linked member can be linked."""

    def __init__(self, application_id: str, status: str) -> None:
        self.application_id = application_id
        self.status = status
        super().__init__(
            f"Application {application_id} is {status} and cannot be linked to a member"
        )


class AlreadyExistsError(MembershipError):
    """Identity store rejected a create because the identity already exists."""


class IdentityInconsistencyError(MembershipError):
    """Create reported a duplicate identity but lookup cannot find it."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__(
            f"Member for {email} reported as existing but could not be located"
        )


class NotificationFailure(MembershipError):
    """Best-effort notification send failed after the decision was durable."""


class PlatformError(MembershipError):
    """Hosting platform unavailable or returned an unexpected response."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class AuthorizationError(MembershipError):
    """Caller's roles do not satisfy the required capability."""
