# =============================================================================
# Credentials and Tokens
# =============================================================================
#
# This module provides:
#   - Password hashing (salted PBKDF2-SHA256)
#   - Bearer token creation and validation (signed JWT)
#
# =============================================================================

from __future__ import annotations

from datetime import datetime, timedelta, timezone
import hashlib
import logging
import secrets

from pydantic import BaseModel
import jwt

from inkwell.config import Settings
from inkwell.core.utils import generate_id, utc_now

logger = logging.getLogger(__name__)


# =============================================================================
# Password Hashing
# =============================================================================

PBKDF2_ITERATIONS = 100_000


def hash_password(password: str) -> str:
    """
    Hash a password using PBKDF2-SHA256 with a fresh random salt.

    Returns: salt:hash format string
    """
    salt = secrets.token_hex(32)
    hash_bytes = hashlib.pbkdf2_hmac(
        'sha256',
        password.encode('utf-8'),
        salt.encode('utf-8'),
        iterations=PBKDF2_ITERATIONS,
    )
    return f"{salt}:{hash_bytes.hex()}"


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash (constant-time compare)."""
    try:
        salt, stored_hash = password_hash.split(':')
        hash_bytes = hashlib.pbkdf2_hmac(
            'sha256',
            password.encode('utf-8'),
            salt.encode('utf-8'),
            iterations=PBKDF2_ITERATIONS,
        )
        return secrets.compare_digest(hash_bytes.hex(), stored_hash)
    except (ValueError, AttributeError):
        return False


# =============================================================================
# Token Models
# =============================================================================

class TokenPayload(BaseModel):
    """Validated bearer token claims."""
    sub: str  # user_id
    exp: datetime
    iat: datetime
    jti: str = ""  # unique token ID

    @property
    def user_id(self) -> str:
        return self.sub


class InvalidTokenError(Exception):
    """Token is invalid, malformed or expired."""
    pass


# =============================================================================
# Token Issuer
# =============================================================================

class TokenIssuer:
    """
    Issues and verifies signed bearer tokens.

    A token binds a user id with issue and expiry times. It is never
    stored; verification only proves the claims were signed by us and
    have not expired. Whether the user still exists is the caller's
    problem.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        expires_in: timedelta = timedelta(days=7),
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expires_in = expires_in

    @classmethod
    def from_settings(cls, settings: Settings) -> TokenIssuer:
        return cls(
            secret_key=settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm,
            expires_in=timedelta(minutes=settings.jwt_access_token_expire_minutes),
        )

    def issue(self, user_id: str, now: datetime | None = None) -> str:
        """Create a signed token for `user_id`."""
        now = now or utc_now()
        payload = {
            "sub": user_id,
            "iat": now,
            "exp": now + self.expires_in,
            "jti": generate_id("tok"),
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenPayload:
        """
        Decode and validate a token.

        Raises:
            InvalidTokenError: bad signature, malformed, expired or
                missing claims. No other exception escapes.
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"require": ["sub", "exp", "iat"]},
            )
            return TokenPayload(
                sub=payload["sub"],
                exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
                iat=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                jti=payload.get("jti", ""),
            )
        except jwt.ExpiredSignatureError:
            raise InvalidTokenError("Token has expired")
        except Exception as e:
            logger.debug(f"Rejected token: {e}")
            raise InvalidTokenError(f"Invalid token: {e}")
