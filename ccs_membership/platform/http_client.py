"""
Hosting platform REST client.

Implements the identity store, contact store and notifier interfaces over the
platform's managed backend. Every call is bounded by the configured timeout
and is not retried here; failures surface to the caller.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ccs_membership.errors import AlreadyExistsError, NotFoundError, PlatformError
from ccs_membership.platform.interfaces import (
    Contact,
    ContactProfile,
    ContactStore,
    IdentityStore,
    Member,
    MemberProfile,
    Notifier,
)

logger = logging.getLogger(__name__)

USER_AGENT = "ccs-membership/0.1"


def _member_from_json(data: dict[str, Any]) -> Member:
    return Member(
        id=str(data["id"]),
        login_email=data.get("loginEmail") or "",
        display_name=data.get("displayName") or "",
        roles=frozenset(str(r) for r in data.get("roles") or []),
    )


def _contact_from_json(data: dict[str, Any]) -> Contact:
    return Contact(
        id=str(data["id"]),
        email=data.get("email") or "",
        name=data.get("name") or "",
    )


class PlatformClient(IdentityStore, ContactStore, Notifier):
    """Synchronous httpx client for the platform's members, contacts and email APIs."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 15.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(
            base_url=base_url,
            timeout=timeout,
            headers={"x-api-key": api_key, "User-Agent": USER_AGENT},
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    # ------------------------------------------------------------------
    # IdentityStore interface
    # ------------------------------------------------------------------

    def find_member_by_email(self, email: str) -> Member | None:
        data = self._request("GET", "/members", params={"loginEmail": email})
        for item in data.get("members") or []:
            # Platform query is a filter; keep exact login-email semantics here too
            if item.get("loginEmail") == email:
                return _member_from_json(item)
        return None

    def get_member(self, member_id: str) -> Member | None:
        try:
            data = self._request("GET", f"/members/{member_id}")
        except NotFoundError:
            return None
        return _member_from_json(data)

    def create_member(self, email: str, credential: str, profile: MemberProfile) -> Member:
        body: dict[str, Any] = {
            "loginEmail": email,
            "password": credential,
            "firstName": profile.first_name,
            "lastName": profile.last_name,
            "displayName": profile.display_name,
        }
        if profile.contact_id:
            body["contactId"] = profile.contact_id
        data = self._request("POST", "/members", json=body, resource="member")
        return _member_from_json(data)

    def assign_role(self, role_id: str, member_id: str) -> None:
        self._request("POST", f"/members/{member_id}/roles/{role_id}", resource="member")

    def remove_role(self, role_id: str, member_id: str) -> None:
        self._request("DELETE", f"/members/{member_id}/roles/{role_id}", resource="member")

    def send_set_password_email(self, email: str) -> None:
        self._request("POST", "/members/set-password-emails", json={"email": email})

    # ------------------------------------------------------------------
    # ContactStore interface
    # ------------------------------------------------------------------

    def find_contact_by_email(self, email: str) -> Contact | None:
        data = self._request("GET", "/contacts", params={"email": email})
        for item in data.get("contacts") or []:
            if item.get("email") == email:
                return _contact_from_json(item)
        return None

    def create_contact(self, profile: ContactProfile) -> Contact:
        body: dict[str, Any] = {
            "email": profile.email,
            "firstName": profile.first_name,
            "lastName": profile.last_name,
        }
        if profile.phone:
            body["phone"] = profile.phone
        data = self._request("POST", "/contacts", json=body, resource="contact")
        return _contact_from_json(data)

    # ------------------------------------------------------------------
    # Notifier interface
    # ------------------------------------------------------------------

    def send(
        self,
        template_id: str,
        recipient_id: str,
        variables: dict[str, Any],
        *,
        recipient_kind: str = "member",
    ) -> None:
        self._request(
            "POST",
            "/triggered-emails",
            json={
                "templateId": template_id,
                "recipientId": recipient_id,
                "recipientKind": recipient_kind,
                "variables": variables,
            },
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
        resource: str = "resource",
    ) -> dict[str, Any]:
        """Send a request and map platform status codes to domain errors."""
        try:
            response = self._client.request(method, path, params=params, json=json)
        except httpx.HTTPError as exc:
            logger.error("platform_request_failed: %s %s: %s", method, path, exc)
            raise PlatformError(f"Platform request failed: {method} {path}: {exc}") from exc

        if response.status_code == 404:
            raise NotFoundError(resource, path)
        if response.status_code == 409:
            raise AlreadyExistsError(f"{resource} already exists ({method} {path})")
        if response.status_code >= 400:
            logger.error(
                "platform_error_status: %s %s status=%d", method, path, response.status_code
            )
            raise PlatformError(
                f"Platform returned HTTP {response.status_code} for {method} {path}",
                status_code=response.status_code,
            )
        if response.status_code == 204 or not response.content:
            return {}
        return response.json()
