"""Best-effort notification dispatch.

Sends happen after the decision is durable. A failed send is logged as a
NotificationFailure and reported as False; it is never raised to the caller
and never rolls anything back.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from ccs_membership.errors import NotificationFailure
from ccs_membership.platform.interfaces import IdentityStore, Notifier

logger = logging.getLogger(__name__)

# Schedules func(*args, **kwargs) to run later; FastAPI's BackgroundTasks.add_task fits.
Defer = Callable[..., None]


def run_now(func: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
    """Default Defer: run inline."""
    func(*args, **kwargs)


class PendingSends:
    """Defer that holds sends until the caller knows how the request ended.

    A completed request hands them to its own scheduler (background tasks);
    an aborted one runs them inline before the error is returned, because a
    member created by the aborted attempt is not created again on retry.
    """

    def __init__(self) -> None:
        self._calls: list[tuple[Callable[..., Any], tuple[Any, ...], dict[str, Any]]] = []

    def __call__(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        self._calls.append((func, args, kwargs))

    def __len__(self) -> int:
        return len(self._calls)

    def hand_off(self, defer: Defer) -> None:
        calls, self._calls = self._calls, []
        for func, args, kwargs in calls:
            defer(func, *args, **kwargs)

    def run_all(self) -> None:
        if self._calls:
            logger.info("pending_sends_flushed: count=%d", len(self._calls))
        self.hand_off(run_now)


def send_best_effort(
    notifier: Notifier,
    template_id: str,
    recipient_id: str,
    variables: dict[str, Any],
    *,
    recipient_kind: str = "member",
) -> bool:
    """Send a templated email; return False instead of raising on failure."""
    try:
        notifier.send(template_id, recipient_id, variables, recipient_kind=recipient_kind)
    except Exception as exc:  # any collaborator failure is non-fatal here
        failure = NotificationFailure(
            f"template={template_id} {recipient_kind}={recipient_id}: {exc}"
        )
        logger.error("notification_failed: %s", failure)
        return False
    logger.info(
        "notification_sent: template=%s %s=%s", template_id, recipient_kind, recipient_id
    )
    return True


def alert_admin_best_effort(
    notifier: Notifier,
    admin_contact_id: str,
    template_id: str,
    subject: str,
    detail: str,
) -> bool:
    """Tell the studio admin contact that a member-facing email did not go out.

    Disabled (returns False) when no admin contact is configured.
    """
    if not admin_contact_id or not template_id:
        logger.warning("admin_alert_skipped: no admin contact configured subject=%s", subject)
        return False
    return send_best_effort(
        notifier,
        template_id,
        admin_contact_id,
        {"emailSubject": subject, "itemDescription": detail},
        recipient_kind="contact",
    )


def send_password_setup_best_effort(identity_store: IdentityStore, email: str) -> bool:
    """Trigger the identity system's set-your-password email; failures are logged only."""
    try:
        identity_store.send_set_password_email(email)
    except Exception as exc:  # any collaborator failure is non-fatal here
        logger.error("password_setup_email_failed: %s", NotificationFailure(f"{email}: {exc}"))
        return False
    logger.info("password_setup_email_sent: email=%s", email)
    return True
