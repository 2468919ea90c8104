import base64
import hashlib
import hmac
import os
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt
from pydantic import BaseModel, ConfigDict, Field

_PBKDF2_ALGO = "sha256"
_PBKDF2_ITERATIONS = 100_000
_SALT_BYTES = 16


class Identity(BaseModel):
    """Decoded JWT payload attached to the request once the token is verified."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="_id")
    iat: int
    exp: int


def _pbkdf2_hash(password: str, salt: bytes) -> bytes:
    """Derive a key using PBKDF2-SHA256."""
    return hashlib.pbkdf2_hmac(
        _PBKDF2_ALGO,
        password.encode("utf-8"),
        salt,
        _PBKDF2_ITERATIONS,
    )


def hash_password(password: str) -> str:
    """Hash a plain-text password using PBKDF2-SHA256.

    Stored format: base64( salt || derived_key )
    """
    salt = os.urandom(_SALT_BYTES)
    dk = _pbkdf2_hash(password, salt)
    return base64.b64encode(salt + dk).decode("ascii")


def verify_password(plain_password: str, stored_hash: str) -> bool:
    """Verify a plain password against the stored PBKDF2 hash."""
    try:
        raw = base64.b64decode(stored_hash.encode("ascii"))
    except (ValueError, AttributeError):
        return False

    if len(raw) <= _SALT_BYTES:
        return False

    salt = raw[:_SALT_BYTES]
    stored_dk = raw[_SALT_BYTES:]
    new_dk = _pbkdf2_hash(plain_password, salt)

    return hmac.compare_digest(stored_dk, new_dk)


class TokenSigner:
    """Signs and verifies access tokens with a secret handed in at construction."""

    def __init__(self, secret: str, algorithm: str = "HS256", expires_in: int = 7 * 24 * 60 * 60):
        self._secret = secret
        self.algorithm = algorithm
        self.expires_in = expires_in

    @classmethod
    def from_settings(cls, settings) -> "TokenSigner":
        return cls(
            secret=settings.JWT_SECRET.get_secret_value(),
            algorithm=settings.JWT_ALGORITHM,
            expires_in=settings.JWT_EXPIRES_IN,
        )

    def create_access_token(self, user_id: str) -> str:
        """Create a signed JWT carrying the user's id."""
        now = datetime.now(timezone.utc)
        payload: Dict[str, Any] = {
            "_id": user_id,
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(seconds=self.expires_in)).timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def decode_token(self, token: str) -> Identity:
        """Decode and validate a JWT, returning a typed payload.

        Raises:
            jwt.InvalidTokenError: If the token is malformed, expired or badly signed.
        """
        payload = jwt.decode(token, self._secret, algorithms=[self.algorithm])
        return Identity(**payload)
