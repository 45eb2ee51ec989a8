"""Password hashing, JWT issuance and one-time reset tokens."""
import hashlib
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple

import bcrypt
import jwt

from careerforge.core.config import settings

ALGORITHM = "HS256"
RESET_TOKEN_BYTES = 20


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=10)).decode("utf-8")


def verify_password(password: str, hashed: Optional[str]) -> bool:
    if not hashed:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # malformed hash in storage
        return False


def _create_jwt(user_id: str, secret: str, minutes: int, token_type: str) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "id": str(user_id),
        "type": token_type,
        "iat": now,
        "exp": now + timedelta(minutes=minutes),
        # unique per issue so rotation always yields a new token
        "jti": secrets.token_hex(8),
    }
    return jwt.encode(payload, secret, algorithm=ALGORITHM)


def create_access_token(user_id: str) -> str:
    return _create_jwt(user_id, settings.ACCESS_TOKEN_SECRET, settings.ACCESS_TOKEN_EXPIRES_MINUTES, "access")


def create_refresh_token(user_id: str) -> str:
    return _create_jwt(user_id, settings.REFRESH_TOKEN_SECRET, settings.REFRESH_TOKEN_EXPIRES_MINUTES, "refresh")


def _decode(token: str, secret: str, token_type: str) -> Optional[Dict[str, Any]]:
    try:
        payload = jwt.decode(token, secret, algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError:
        return None
    except jwt.InvalidTokenError:
        return None
    if payload.get("type") != token_type or not payload.get("id"):
        return None
    return payload


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    return _decode(token, settings.ACCESS_TOKEN_SECRET, "access")


def decode_refresh_token(token: str) -> Optional[Dict[str, Any]]:
    return _decode(token, settings.REFRESH_TOKEN_SECRET, "refresh")


def hash_reset_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def create_reset_token() -> Tuple[str, str, datetime]:
    """Return (raw token for the user, sha256 digest to store, expiry)."""
    raw = secrets.token_hex(RESET_TOKEN_BYTES)
    expires = datetime.now(timezone.utc) + timedelta(minutes=settings.RESET_TOKEN_EXPIRES_MINUTES)
    return raw, hash_reset_token(raw), expires
