from datetime import datetime, timedelta, timezone

import jwt

from careerforge.core.config import settings
from careerforge.core.security import (
    ALGORITHM,
    create_access_token,
    create_refresh_token,
    create_reset_token,
    decode_access_token,
    decode_refresh_token,
    hash_password,
    hash_reset_token,
    verify_password,
)


def test_password_hash_round_trip():
    hashed = hash_password("s3cret!")
    assert hashed != "s3cret!"
    assert verify_password("s3cret!", hashed)
    assert not verify_password("wrong", hashed)


def test_verify_password_handles_missing_or_malformed_hash():
    assert not verify_password("x", None)
    assert not verify_password("x", "not-a-bcrypt-hash")


def test_access_and_refresh_tokens_are_not_interchangeable():
    access = create_access_token("abc123")
    refresh = create_refresh_token("abc123")

    assert decode_access_token(access)["id"] == "abc123"
    assert decode_refresh_token(refresh)["id"] == "abc123"
    assert decode_access_token(refresh) is None
    assert decode_refresh_token(access) is None


def test_expired_and_tampered_tokens_are_rejected():
    past = datetime.now(timezone.utc) - timedelta(minutes=5)
    expired = jwt.encode(
        {"id": "abc", "type": "access", "iat": past, "exp": past},
        settings.ACCESS_TOKEN_SECRET,
        algorithm=ALGORITHM,
    )
    assert decode_access_token(expired) is None
    assert decode_access_token(create_access_token("abc") + "x") is None
    assert decode_access_token("garbage") is None


def test_reset_token_digest_and_expiry():
    raw, digest, expires = create_reset_token()
    assert len(raw) == 40
    assert digest == hash_reset_token(raw)
    assert digest != raw
    remaining = expires - datetime.now(timezone.utc)
    assert timedelta(minutes=9) < remaining <= timedelta(minutes=10)
