"""Tests for the application review API.

Platform collaborators are fakes injected via dependency_overrides; the
application store is the real SQL store on in-memory SQLite.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from ccs_membership.api.deps import (
    get_contact_store,
    get_db,
    get_identity_store,
    get_notifier,
)
from ccs_membership.models.application import MembershipApplication
from ccs_membership.services.auth import create_access_token
from ccs_membership.services.authorization import StudioRole, role_id
from tests.test_constants import TEST_REVIEWER_EMAIL, TEST_REVIEWER_ID


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def api(db, identity_store, contact_store, notifier, settings) -> TestClient:
    """TestClient wired to fakes, with a studio admin reviewer registered."""
    from ccs_membership.main import app

    identity_store.add_member(
        TEST_REVIEWER_EMAIL,
        roles={role_id(StudioRole.ADMIN, settings)},
        member_id=TEST_REVIEWER_ID,
    )

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_identity_store] = lambda: identity_store
    app.dependency_overrides[get_contact_store] = lambda: contact_store
    app.dependency_overrides[get_notifier] = lambda: notifier
    c = TestClient(app)
    yield c
    app.dependency_overrides.clear()


def _auth(member_id: str = TEST_REVIEWER_ID) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(data={'sub': member_id})}"}


def _add(db, email: str = "ada@example.org", status: str = "Submitted", minutes: int = 0, **extra):
    application = MembershipApplication(
        first_name="Ada",
        last_name="Potter",
        email=email,
        status=status,
        submission_date=datetime(2026, 5, 1, tzinfo=UTC) + timedelta(minutes=minutes),
        **extra,
    )
    db.add(application)
    db.commit()
    return application


# ---------------------------------------------------------------------------
# Authentication / authorization
# ---------------------------------------------------------------------------


class TestAccess:
    def test_list_requires_token(self, api):
        response = api.get("/api/applications")
        assert response.status_code == 401

    def test_invalid_token_is_401(self, api):
        response = api.get("/api/applications", headers={"Authorization": "Bearer a.b.c"})
        assert response.status_code == 401

    def test_token_for_unknown_member_is_401(self, api):
        response = api.get("/api/applications", headers=_auth("member-gone"))
        assert response.status_code == 401

    def test_non_admin_is_403(self, api, identity_store, settings):
        identity_store.add_member(
            "potter@example.org",
            roles={role_id(StudioRole.MEMBER, settings)},
            member_id="member-potter",
        )
        response = api.get("/api/applications", headers=_auth("member-potter"))
        assert response.status_code == 403

    def test_cookie_token_accepted(self, api):
        token = create_access_token(data={"sub": TEST_REVIEWER_ID})
        response = api.get("/api/applications", headers={"Cookie": f"access_token={token}"})
        assert response.status_code == 200


# ---------------------------------------------------------------------------
# Intake
# ---------------------------------------------------------------------------


class TestSubmit:
    def test_submit_creates_submitted_application(self, api):
        response = api.post(
            "/api/applications",
            json={
                "first_name": "Nia",
                "last_name": "Glaze",
                "email": "nia@example.org",
                "phone": "",
                "techniques": ["wheel", "handbuilding"],
            },
        )

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "Submitted"
        assert body["phone"] is None
        assert body["techniques"] == ["wheel", "handbuilding"]
        assert body["linked_member_id"] is None

    def test_submit_rejects_bad_email(self, api):
        response = api.post("/api/applications", json={"first_name": "Nia", "email": "nope"})
        assert response.status_code == 422


# ---------------------------------------------------------------------------
# Review list / stats
# ---------------------------------------------------------------------------


class TestReviewQueue:
    def test_list_newest_first(self, api, db):
        _add(db, "old@example.org", minutes=0)
        _add(db, "new@example.org", minutes=5)

        response = api.get("/api/applications", headers=_auth())

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 2
        assert [i["email"] for i in body["items"]] == ["new@example.org", "old@example.org"]

    def test_list_status_filter(self, api, db):
        _add(db, "s@example.org")
        _add(db, "r@example.org", status="Rejected")

        response = api.get("/api/applications?status=Rejected", headers=_auth())

        assert [i["email"] for i in response.json()["items"]] == ["r@example.org"]

    def test_list_invalid_status_filter(self, api):
        response = api.get("/api/applications?status=Pending", headers=_auth())
        assert response.status_code == 422

    def test_stats(self, api, db):
        _add(db, "a@example.org")
        _add(db, "b@example.org", status="Approved", linked_member_id="m-1")
        _add(db, "c@example.org", status="Rejected")
        _add(db, "d@example.org", status="Rejected")

        response = api.get("/api/applications/stats", headers=_auth())

        assert response.json() == {"pending": 1, "approved": 1, "rejected": 2, "total": 4}

    def test_orphaned(self, api, db):
        _add(db, "linked@example.org", status="Approved", linked_member_id="m-1")
        _add(db, "orphan@example.org", status="Approved")

        response = api.get("/api/applications/orphaned", headers=_auth())

        assert [i["email"] for i in response.json()["items"]] == ["orphan@example.org"]

    def test_get_one(self, api, db):
        application = _add(db)
        response = api.get(f"/api/applications/{application.id}", headers=_auth())
        assert response.status_code == 200
        assert response.json()["email"] == "ada@example.org"

    def test_get_missing_is_404(self, api):
        response = api.get(f"/api/applications/{uuid.uuid4()}", headers=_auth())
        assert response.status_code == 404


# ---------------------------------------------------------------------------
# Decisions
# ---------------------------------------------------------------------------


class TestDecision:
    def test_approve(self, api, db, identity_store, notifier, settings):
        application = _add(db, "new@example.org")

        response = api.post(
            f"/api/applications/{application.id}/decision",
            json={"decision": "Approved", "notes": "welcome"},
            headers=_auth(),
        )

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "Approved"
        assert body["decided_by"] == TEST_REVIEWER_EMAIL
        assert body["approval_date"] is not None
        member = identity_store.find_member_by_email("new@example.org")
        assert body["linked_member_id"] == member.id
        assert role_id(StudioRole.INVITEE, settings) in member.roles
        # Background task runs before TestClient returns
        assert identity_store.password_emails == ["new@example.org"]
        assert len(notifier.sent) == 1

    def test_reject(self, api, db, contact_store, notifier, settings):
        application = _add(db, "nope@example.org")

        response = api.post(
            f"/api/applications/{application.id}/decision",
            json={"decision": "Rejected"},
            headers=_auth(),
        )

        assert response.status_code == 200
        assert response.json()["status"] == "Rejected"
        assert response.json()["linked_member_id"] is None
        assert len(contact_store.created) == 1
        assert notifier.sent[0]["template_id"] == settings.template_rejection

    def test_already_decided_is_409(self, api, db, notifier):
        application = _add(db, status="Rejected")

        response = api.post(
            f"/api/applications/{application.id}/decision",
            json={"decision": "Approved"},
            headers=_auth(),
        )

        assert response.status_code == 409
        assert notifier.sent == []

    def test_unknown_decision_is_422(self, api, db):
        application = _add(db)
        response = api.post(
            f"/api/applications/{application.id}/decision",
            json={"decision": "Maybe"},
            headers=_auth(),
        )
        assert response.status_code == 422

    def test_missing_application_is_404(self, api):
        response = api.post(
            f"/api/applications/{uuid.uuid4()}/decision",
            json={"decision": "Approved"},
            headers=_auth(),
        )
        assert response.status_code == 404

    def test_phantom_member_is_500(self, api, db, identity_store):
        identity_store.phantom_duplicate = True
        application = _add(db, "ghost@example.org")

        response = api.post(
            f"/api/applications/{application.id}/decision",
            json={"decision": "Approved"},
            headers=_auth(),
        )

        assert response.status_code == 500
        db.expire_all()
        assert db.get(MembershipApplication, application.id).status == "Submitted"

    def test_platform_outage_is_502(self, api, db, identity_store):
        from tests.fakes import platform_down

        identity_store.create_error = platform_down()
        application = _add(db, "new@example.org")

        response = api.post(
            f"/api/applications/{application.id}/decision",
            json={"decision": "Approved"},
            headers=_auth(),
        )

        assert response.status_code == 502

    def test_new_member_gets_setup_email_when_grant_fails_and_retry_succeeds(
        self, api, db, identity_store
    ):
        from tests.fakes import platform_down

        application = _add(db, "new@example.org")
        grant = identity_store.assign_role
        failures = {"left": 1}

        def flaky_grant(role, member_id):
            if failures["left"]:
                failures["left"] -= 1
                raise platform_down()
            grant(role, member_id)

        identity_store.assign_role = flaky_grant
        url = f"/api/applications/{application.id}/decision"

        first = api.post(url, json={"decision": "Approved"}, headers=_auth())

        assert first.status_code == 502
        assert identity_store.password_emails == ["new@example.org"]

        retry = api.post(url, json={"decision": "Approved"}, headers=_auth())

        assert retry.status_code == 200
        member = identity_store.find_member_by_email("new@example.org")
        assert retry.json()["linked_member_id"] == member.id
        assert len(identity_store.created()) == 1
        assert identity_store.password_emails == ["new@example.org"]

    def test_existing_member_failure_sends_no_setup_email(self, api, db, identity_store):
        from tests.fakes import platform_down

        identity_store.add_member("known@example.org")
        application = _add(db, "known@example.org")

        def failing_grant(role, member_id):
            raise platform_down()

        identity_store.assign_role = failing_grant

        response = api.post(
            f"/api/applications/{application.id}/decision",
            json={"decision": "Approved"},
            headers=_auth(),
        )

        assert response.status_code == 502
        assert identity_store.password_emails == []


# ---------------------------------------------------------------------------
# Repair actions
# ---------------------------------------------------------------------------


class TestRepair:
    def test_link_orphaned_application(self, api, db, identity_store):
        member = identity_store.add_member("orphan@example.org")
        application = _add(db, "orphan@example.org", status="Approved")

        response = api.post(
            f"/api/applications/{application.id}/link-member", headers=_auth()
        )

        assert response.status_code == 200
        assert response.json()["linked_member_id"] == member.id
        assert api.get("/api/applications/orphaned", headers=_auth()).json()["total"] == 0

    def test_link_without_member_is_404(self, api, db):
        application = _add(db, "nobody@example.org", status="Approved")

        response = api.post(
            f"/api/applications/{application.id}/link-member", headers=_auth()
        )

        assert response.status_code == 404

    def test_link_submitted_application_is_409(self, api, db, identity_store):
        identity_store.add_member("pending@example.org")
        application = _add(db, "pending@example.org")

        response = api.post(
            f"/api/applications/{application.id}/link-member", headers=_auth()
        )

        assert response.status_code == 409
        db.expire_all()
        assert db.get(MembershipApplication, application.id).linked_member_id is None

    def test_link_requires_admin(self, api, db):
        application = _add(db, status="Approved")
        response = api.post(f"/api/applications/{application.id}/link-member")
        assert response.status_code == 401

    def test_resend_password_email(self, api, identity_store):
        member = identity_store.add_member("invitee@example.org")

        response = api.post(
            "/api/members/resend-password-email",
            json={"email": " invitee@example.org "},
            headers=_auth(),
        )

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "email": "invitee@example.org",
            "member_id": member.id,
        }
        assert identity_store.password_emails == ["invitee@example.org"]

    def test_resend_for_unknown_member_is_404(self, api, identity_store):
        response = api.post(
            "/api/members/resend-password-email",
            json={"email": "nobody@example.org"},
            headers=_auth(),
        )

        assert response.status_code == 404
        assert identity_store.password_emails == []

    def test_resend_platform_failure_is_502(self, api, identity_store):
        from tests.fakes import platform_down

        identity_store.add_member("invitee@example.org")
        identity_store.password_email_error = platform_down()

        response = api.post(
            "/api/members/resend-password-email",
            json={"email": "invitee@example.org"},
            headers=_auth(),
        )

        assert response.status_code == 502


# ---------------------------------------------------------------------------
# Members
# ---------------------------------------------------------------------------


class TestMembers:
    def test_me(self, api):
        response = api.get("/api/members/me", headers=_auth())
        assert response.status_code == 200
        assert response.json()["id"] == TEST_REVIEWER_ID

    def test_promote(self, api, identity_store, settings):
        identity_store.add_member(
            "invitee@example.org",
            roles={role_id(StudioRole.INVITEE, settings)},
            member_id="member-invitee",
        )

        response = api.post("/api/members/member-invitee/promote", headers=_auth())

        assert response.status_code == 200
        assert response.json()["roles"] == [role_id(StudioRole.MEMBER, settings)]

    def test_promote_unknown_member_is_404(self, api):
        response = api.post("/api/members/member-missing/promote", headers=_auth())
        assert response.status_code == 404
