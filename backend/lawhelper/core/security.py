# backend/lawhelper/core/security.py
"""
Password hashing and session-cookie signing.
"""
from datetime import datetime
from typing import Optional

import bcrypt
import jwt

from lawhelper.core.config import settings

# bcrypt only looks at the first 72 bytes of the secret
_BCRYPT_MAX_BYTES = 72

# Checked when an account does not exist so both login failure paths cost one bcrypt round.
_DUMMY_HASH = bcrypt.hashpw(b"lawhelper-placeholder", bcrypt.gensalt()).decode("utf-8")


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def get_password_hash(password: str) -> str:
    """Hash a plaintext password with a fresh salt."""
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """
    Constant-time comparison of a plaintext password against a stored hash.
    Passing ``None`` as the hash still performs a full bcrypt check.
    """
    target = hashed_password or _DUMMY_HASH
    try:
        matched = bcrypt.checkpw(_password_bytes(plain_password), target.encode("utf-8"))
    except ValueError:
        # malformed stored hash
        return False
    return matched and hashed_password is not None


def create_session_token(session_id: str, expires_at: datetime) -> str:
    """Sign the session id into the cookie value."""
    payload = {
        "sid": session_id,
        "exp": expires_at,
        "iat": datetime.utcnow(),
    }
    return jwt.encode(payload, settings.SESSION_SECRET, algorithm=settings.SESSION_ALGORITHM)


def decode_session_token(token: str) -> Optional[str]:
    """Return the session id carried by a cookie, or None if it is forged or expired."""
    try:
        payload = jwt.decode(
            token,
            settings.SESSION_SECRET,
            algorithms=[settings.SESSION_ALGORITHM],
        )
    except jwt.PyJWTError:
        return None
    sid = payload.get("sid")
    return sid if isinstance(sid, str) else None
