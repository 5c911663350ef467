"""Password hashing and signed session tokens (identity collaborator)."""
import logging
import time
from typing import Optional

import jwt
from passlib.context import CryptContext

from utils.config import ACCESS_TTL, COOKIE_SECURE, JWT_ALG, JWT_SECRET

LOG = logging.getLogger(__name__)

pctx = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pctx.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    """True if password matches hashed. Malformed hashes never verify."""
    try:
        return pctx.verify(password, hashed)
    except ValueError:
        return False


def make_access_token(user_id: str, role: str, ttl: int = ACCESS_TTL) -> str:
    """Sign an access token for user_id. role is informational; the DB row is authoritative."""
    now = int(time.time())
    payload = {"sub": user_id, "role": role, "iat": now, "exp": now + ttl, "scope": "access"}
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALG)


def decode_token(token: str) -> Optional[dict]:
    """Return the token claims, or None when the signature is bad or the token expired."""
    try:
        return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALG])
    except jwt.PyJWTError as e:
        LOG.debug("Rejected session token: %s", e)
        return None


def verify_access_token(token: str) -> Optional[str]:
    """Return the subject (user id) of a valid access token, else None."""
    data = decode_token(token)
    if not data or data.get("scope") != "access":
        return None
    return data.get("sub")


def cookie_settings() -> dict:
    # SameSite Lax allows top-level navigation while blocking cross-site posts.
    return dict(
        httponly=True,
        secure=COOKIE_SECURE,
        samesite="lax",
        path="/",
    )
