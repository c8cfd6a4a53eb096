"""
LawHelper session service
=========================
Server-side login sessions. The browser holds a signed cookie with the session
id; the row in ``user_sessions`` is the authority on whether that id is still
live.

Usage in an endpoint:
    token = SessionService.create_session(db, user, user_agent)
    response.set_cookie(settings.SESSION_COOKIE_NAME, token, ...)

    user = SessionService.resolve_session(db, request.cookies.get(...))
"""
from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from lawhelper.core.config import settings
from lawhelper.core.security import create_session_token, decode_session_token
from lawhelper.db.models import User, UserSession

logger = logging.getLogger(__name__)

# Avoid a write on every request; refresh last_seen_at at most this often.
_LAST_SEEN_GRANULARITY = timedelta(minutes=5)


def _session_id_from_token(token: Optional[str]) -> Optional[uuid.UUID]:
    if not token:
        return None
    sid = decode_session_token(token)
    if sid is None:
        return None
    try:
        return uuid.UUID(sid)
    except ValueError:
        return None


class SessionService:

    @staticmethod
    def create_session(
        db: Session,
        user: User,
        user_agent: Optional[str] = None,
        ttl_hours: Optional[int] = None,
    ) -> str:
        """Persist a new session for ``user`` and return the signed cookie value."""
        now = datetime.utcnow()
        expires_at = now + timedelta(hours=ttl_hours or settings.SESSION_TTL_HOURS)
        row = UserSession(
            user_id=user.id,
            user_agent=(user_agent or "")[:512] or None,
            created_at=now,
            last_seen_at=now,
            expires_at=expires_at,
        )
        try:
            db.add(row)
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error("session_create_failed user=%s: %s", user.id, e)
            raise

        logger.info("session_created user=%s session=%s", user.id, row.id)
        return create_session_token(str(row.id), expires_at)

    @staticmethod
    def resolve_session(db: Session, token: Optional[str]) -> Optional[User]:
        """Return the account behind a cookie value, or None if it is not a live session."""
        session_id = _session_id_from_token(token)
        if session_id is None:
            return None

        now = datetime.utcnow()
        row: Optional[UserSession] = (
            db.query(UserSession)
            .filter(
                UserSession.id == session_id,
                UserSession.expires_at > now,
            )
            .first()
        )
        if row is None:
            return None

        if now - row.last_seen_at > _LAST_SEEN_GRANULARITY:
            row.last_seen_at = now
            db.commit()
        return row.user

    @staticmethod
    def destroy_session(db: Session, token: Optional[str]) -> bool:
        """
        Delete the session behind a cookie value. Safe to call repeatedly and
        with a missing or forged cookie; returns whether a row was removed.
        """
        session_id = _session_id_from_token(token)
        if session_id is None:
            return False

        deleted = (
            db.query(UserSession)
            .filter(UserSession.id == session_id)
            .delete(synchronize_session=False)
        )
        db.commit()
        if deleted:
            logger.info("session_destroyed session=%s", session_id)
        return bool(deleted)


def delete_expired_sessions(db: Session) -> int:
    """Sweep expired rows. Called by a periodic background task."""
    deleted = (
        db.query(UserSession)
        .filter(UserSession.expires_at < datetime.utcnow())
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted
