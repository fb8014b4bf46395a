import uuid
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from app.errors import ExpiredToken, InvalidToken
from app.services.auth_service import TokenIssuer, get_password_hash, verify_password

SECRET = "a" * 16 + "b" * 16 + "c" * 16


@pytest.fixture()
def issuer() -> TokenIssuer:
    return TokenIssuer(SECRET, lifetime=timedelta(days=90))


def test_issue_then_verify_returns_user_id(issuer: TokenIssuer) -> None:
    user_id = uuid.uuid4()

    assert issuer.verify(issuer.issue(user_id)) == user_id


def test_tokens_for_same_user_differ(issuer: TokenIssuer) -> None:
    user_id = uuid.uuid4()

    assert issuer.issue(user_id) != issuer.issue(user_id)


def test_token_carries_subject_issued_at_and_expiry(issuer: TokenIssuer) -> None:
    user_id = uuid.uuid4()
    now = datetime.now(timezone.utc).replace(microsecond=0)

    payload = jwt.decode(issuer.issue(user_id, now=now), SECRET, algorithms=["HS256"])

    assert payload["sub"] == str(user_id)
    assert payload["iat"] == int(now.timestamp())
    assert payload["exp"] == int((now + timedelta(days=90)).timestamp())


def test_expired_token_is_rejected(issuer: TokenIssuer) -> None:
    issued = datetime.now(timezone.utc) - timedelta(days=91)

    with pytest.raises(ExpiredToken):
        issuer.verify(issuer.issue(uuid.uuid4(), now=issued))


def test_token_just_before_expiry_is_accepted(issuer: TokenIssuer) -> None:
    user_id = uuid.uuid4()
    issued = datetime.now(timezone.utc) - timedelta(days=90) + timedelta(minutes=5)

    assert issuer.verify(issuer.issue(user_id, now=issued)) == user_id


def test_token_signed_with_other_secret_is_invalid(issuer: TokenIssuer) -> None:
    other = TokenIssuer("z" * 48)

    with pytest.raises(InvalidToken):
        issuer.verify(other.issue(uuid.uuid4()))


def test_tampered_token_is_invalid(issuer: TokenIssuer) -> None:
    token = issuer.issue(uuid.uuid4())
    header, payload, signature = token.split(".")
    forged = jwt.encode({"sub": str(uuid.uuid4()), "exp": 9999999999, "iat": 0}, "wrong", algorithm="HS256")

    with pytest.raises(InvalidToken):
        issuer.verify(".".join([header, forged.split(".")[1], signature]))


@pytest.mark.parametrize("token", ["", "not-a-token", "a.b.c", "Bearer x"])
def test_garbage_is_invalid(issuer: TokenIssuer, token: str) -> None:
    with pytest.raises(InvalidToken):
        issuer.verify(token)


def test_missing_expiry_is_invalid(issuer: TokenIssuer) -> None:
    token = jwt.encode({"sub": str(uuid.uuid4()), "iat": datetime.now(timezone.utc)}, SECRET, algorithm="HS256")

    with pytest.raises(InvalidToken):
        issuer.verify(token)


def test_non_uuid_subject_is_invalid(issuer: TokenIssuer) -> None:
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {"sub": "42", "iat": now, "exp": now + timedelta(hours=1)}, SECRET, algorithm="HS256"
    )

    with pytest.raises(InvalidToken):
        issuer.verify(token)


def test_password_hash_round_trip() -> None:
    hashed = get_password_hash("secret123")

    assert hashed != "secret123"
    assert verify_password("secret123", hashed)
    assert not verify_password("secret124", hashed)


def test_verify_password_with_unknown_hash_is_false() -> None:
    assert not verify_password("secret123", "not-a-bcrypt-hash")
