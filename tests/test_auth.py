"""Tests for reviewer token handling.

Tokens name a platform member; roles are always read back from the identity store.
"""

from __future__ import annotations

from datetime import timedelta

from ccs_membership.services.auth import (
    ALGORITHM,
    create_access_token,
    decode_access_token,
    get_member_from_token,
)


class TestAccessToken:
    def test_create_and_decode_token(self):
        token = create_access_token(data={"sub": "member-1"})
        payload = decode_access_token(token)
        assert payload is not None
        assert payload["sub"] == "member-1"
        assert "exp" in payload

    def test_algorithm_is_hs256(self):
        assert ALGORITHM == "HS256"

    def test_invalid_token_returns_none(self):
        assert decode_access_token("not.a.valid.token") is None

    def test_tampered_token_returns_none(self):
        token = create_access_token(data={"sub": "member-1"})
        tampered = token[:-4] + "XXXX"
        assert decode_access_token(tampered) is None

    def test_expired_token_returns_none(self):
        token = create_access_token(data={"sub": "member-1"}, expires_delta=timedelta(seconds=-1))
        assert decode_access_token(token) is None


class TestMemberFromToken:
    def test_resolves_member_with_current_roles(self, identity_store):
        member = identity_store.add_member("admin@studio.test", roles={"role-admin"})
        token = create_access_token(data={"sub": member.id})

        resolved = get_member_from_token(identity_store, token)

        assert resolved == member

    def test_unknown_member_returns_none(self, identity_store):
        token = create_access_token(data={"sub": "member-gone"})
        assert get_member_from_token(identity_store, token) is None

    def test_token_without_subject_returns_none(self, identity_store):
        token = create_access_token(data={"scope": "review"})
        assert get_member_from_token(identity_store, token) is None
        assert identity_store.calls == []
