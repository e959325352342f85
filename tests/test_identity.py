"""
Tests for request identity resolution
"""
import time

from cartkeeper.domain.owner import AccountOwner, SessionOwner
from cartkeeper.services.identity_service import (
    bearer_token,
    decode_account_token,
    is_session_token,
    new_session_token,
    resolve_owner,
)

COOKIE = "guest-token-0123456789"


class TestBearerToken:
    def test_parses_bearer_header(self):
        assert bearer_token("Bearer abc.def") == "abc.def"
        assert bearer_token("bearer abc") == "abc"

    def test_ignores_other_schemes(self):
        assert bearer_token("Basic dXNlcjpwYXNz") is None
        assert bearer_token("Bearer ") is None
        assert bearer_token(None) is None


class TestDecodeAccountToken:
    def test_valid_token(self, make_token):
        assert decode_account_token(make_token(42)) == 42

    def test_wrong_secret(self, make_token):
        assert decode_account_token(make_token(42, secret="other")) is None

    def test_expired_token(self, make_token):
        assert decode_account_token(make_token(42, exp=int(time.time()) - 60)) is None

    def test_non_numeric_subject(self, make_token):
        assert decode_account_token(make_token("alice")) is None


class TestResolveOwner:
    def test_account_wins_over_cookie(self, make_token):
        resolved = resolve_owner(f"Bearer {make_token(7)}", COOKIE)

        assert resolved.owner == AccountOwner(7)
        assert resolved.issued_session is None

    def test_cookie_is_reused(self):
        resolved = resolve_owner(None, COOKIE)

        assert resolved.owner == SessionOwner(COOKIE)
        assert resolved.issued_session is None

    def test_new_session_is_minted(self):
        resolved = resolve_owner(None, None)

        assert isinstance(resolved.owner, SessionOwner)
        assert resolved.issued_session == resolved.owner.session_id
        assert is_session_token(resolved.issued_session)

    def test_invalid_bearer_falls_back_to_session(self):
        resolved = resolve_owner("Bearer not-a-jwt", COOKIE)

        assert resolved.owner == SessionOwner(COOKIE)

    def test_malformed_cookie_is_replaced(self):
        resolved = resolve_owner(None, "short;evil")

        assert resolved.issued_session is not None
        assert resolved.owner.session_id != "short;evil"


def test_session_tokens_are_unique():
    tokens = {new_session_token() for _ in range(50)}
    assert len(tokens) == 50
