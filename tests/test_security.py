from types import SimpleNamespace

import jwt
import pytest

from vidtube.config import Settings
from vidtube.core.exceptions import InvalidArgument, TokenInvalid
from vidtube.core.security import TokenService, get_password_hash, verify_password

USER = SimpleNamespace(id="7f1d1f9e-4f7b-4b0e-9a35-1f6f5a6f0c11", email="a@example.com",
                       username="alice", full_name="Alice")


@pytest.fixture
def tokens():
    return TokenService(Settings(
        ACCESS_TOKEN_SECRET="access-secret-for-tests-0123456789",
        REFRESH_TOKEN_SECRET="refresh-secret-for-tests-0123456789",
    ))


def test_password_hash_roundtrip():
    hashed = get_password_hash("correct horse")
    assert hashed != "correct horse"
    assert verify_password("correct horse", hashed)
    assert not verify_password("wrong horse", hashed)
    assert not verify_password("correct horse", "not-a-bcrypt-hash")


def test_password_longer_than_bcrypt_limit_is_rejected():
    with pytest.raises(InvalidArgument):
        get_password_hash("x" * 73)


def test_access_token_carries_identity(tokens):
    claims = tokens.verify_access_token(tokens.issue_access_token(USER))
    assert claims["sub"] == USER.id
    assert claims["username"] == "alice"
    assert claims["type"] == "access"


def test_tokens_issued_together_are_distinct(tokens):
    first = tokens.issue_pair(USER)
    second = tokens.issue_pair(USER)
    assert first.refresh_token != second.refresh_token
    assert first.access_token != second.access_token


def test_token_types_are_not_interchangeable(tokens):
    pair = tokens.issue_pair(USER)
    with pytest.raises(TokenInvalid):
        tokens.verify_refresh_token(pair.access_token)
    with pytest.raises(TokenInvalid):
        tokens.verify_access_token(pair.refresh_token)


def test_expired_token_is_invalid(tokens):
    expired = jwt.encode({"sub": USER.id, "type": "access", "exp": 1}, tokens.access_secret,
                         algorithm=tokens.algorithm)
    with pytest.raises(TokenInvalid) as exc:
        tokens.verify_access_token(expired)
    assert exc.value.message == "Token has expired"


def test_token_without_subject_is_invalid(tokens):
    token = jwt.encode({"type": "access"}, tokens.access_secret, algorithm=tokens.algorithm)
    with pytest.raises(TokenInvalid):
        tokens.verify_access_token(token)
