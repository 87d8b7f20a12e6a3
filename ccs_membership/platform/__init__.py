"""Hosting platform collaborators: interfaces and the REST client."""

from ccs_membership.platform.factory import clear_platform_cache, get_platform_client
from ccs_membership.platform.http_client import PlatformClient
from ccs_membership.platform.interfaces import (
    ApplicationStore,
    Contact,
    ContactProfile,
    ContactStore,
    IdentityStore,
    Member,
    MemberProfile,
    Notifier,
)

__all__ = [
    "ApplicationStore",
    "Contact",
    "ContactProfile",
    "ContactStore",
    "IdentityStore",
    "Member",
    "MemberProfile",
    "Notifier",
    "PlatformClient",
    "clear_platform_cache",
    "get_platform_client",
]
