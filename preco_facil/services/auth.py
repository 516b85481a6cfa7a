"""Credential hashing and admin token service.

Store credentials:
- Stored as salted PBKDF2-SHA256 hashes (passlib), verified in constant time.

Admin access (either of):
- Shared secret in the `x-admin-key` header (constant-time comparison)
- Bearer token from POST /api/admin/login: HS256 JWT
  `base64url(header).base64url(payload).base64url(HMAC-SHA256(header.payload))`
  Payload carries only {"adm": true, "iat", "exp"}; lifetime 1 hour.
"""

import hmac
import logging
import time
from dataclasses import dataclass

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from preco_facil.errors import ForbiddenError, UnauthorizedError
from preco_facil.settings import get_settings

logger = logging.getLogger("uvicorn.error")

TOKEN_ALGORITHM = "HS256"

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


# ============================================================
# Store credentials
# ============================================================


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str | None) -> bool:
    """Constant-time check of a credential against its stored hash."""
    if not password or not hashed:
        return False
    try:
        return pwd_context.verify(password, hashed)
    except ValueError:
        # Unrecognized hash format
        return False


# ============================================================
# Admin secret & tokens
# ============================================================


@dataclass
class AdminToken:
    """Issued admin token."""

    token: str
    issued_at: int
    expires_at: int

    @property
    def expires_in(self) -> int:
        return self.expires_at - self.issued_at


def _signing_key() -> str:
    key = get_settings().admin_signing_key
    if not key:
        raise UnauthorizedError("Admin authentication is not configured")
    return key


def check_admin_secret(candidate: str | None) -> bool:
    """Compare a presented secret with ADMIN_SECRET_KEY in constant time."""
    expected = get_settings().admin_secret_key
    if not candidate or not expected:
        return False
    return hmac.compare_digest(candidate.encode("utf-8"), expected.encode("utf-8"))


def issue_admin_token(now: int | None = None) -> AdminToken:
    """Sign a token asserting admin authentication, valid for ADMIN_TOKEN_TTL_SECONDS."""
    issued_at = int(now if now is not None else time.time())
    expires_at = issued_at + get_settings().admin_token_ttl_seconds
    token = jwt.encode(
        {"adm": True, "iat": issued_at, "exp": expires_at},
        _signing_key(),
        algorithm=TOKEN_ALGORITHM,
    )
    return AdminToken(token=token, issued_at=issued_at, expires_at=expires_at)


def verify_admin_token(token: str) -> dict:
    """Validate signature, expiry and the admin claim.

    Raises:
        UnauthorizedError: Malformed, tampered or expired token.
    """
    if token.count(".") != 2:
        raise UnauthorizedError("Invalid token")
    try:
        payload = jwt.decode(
            token,
            _signing_key(),
            algorithms=[TOKEN_ALGORITHM],
            options={"require_exp": True, "require_iat": True},
        )
    except ExpiredSignatureError:
        raise UnauthorizedError("Token expired")
    except JWTError:
        raise UnauthorizedError("Invalid token")

    if payload.get("adm") is not True:
        raise UnauthorizedError("Invalid token")
    return payload


def exchange_admin_secret(key: str | None) -> AdminToken:
    """POST /api/admin/login: trade the shared secret for a bearer token."""
    if not check_admin_secret(key):
        logger.warning("[admin] login rejected: invalid admin key")
        raise ForbiddenError("Invalid admin key")
    return issue_admin_token()


def authorize_admin(admin_key: str | None, authorization: str | None) -> None:
    """Accept either a valid x-admin-key or a valid `Bearer` token.

    Raises:
        UnauthorizedError: Nothing presented, or the bearer token is invalid.
        ForbiddenError: A wrong shared secret was presented.
    """
    if admin_key:
        if check_admin_secret(admin_key):
            return
        logger.warning("[admin] access denied: admin key mismatch")
        raise ForbiddenError("Access denied. Invalid admin key.")

    if authorization:
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() == "bearer" and token.strip():
            verify_admin_token(token.strip())
            return

    raise UnauthorizedError("Admin credentials required")
