"""
Tech News Backend — Session Service
====================================

What:  Server-side session store backed by the `sessions` table.
How:   A session is identified by an opaque random `sid` carried in a cookie.
       The state (`user_id`, `username`, `logged_in`) is stored as JSON on
       the row and handed to route handlers as an explicit `UserSession`
       value, resolved once per request by `get_user_session`.
Who:   Used by the session dependencies and by the user routes (signup,
       login, logout).

State machine:
    anonymous ──(signup / login)──▶ authenticated ──(logout)──▶ anonymous

    Deleting an account ends all of its sessions; renaming it rewrites the
    username stored in them.

    Logging in always issues a fresh `sid`; the previous row (if any) is
    deleted so a pre-login session id can never become authenticated.
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from pydantic import BaseModel
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from technews.config import settings
from technews.models.session import SessionRecord
from technews.models.user import User

logger = logging.getLogger(__name__)


class UserSession(BaseModel):
    """
    The session state visible to route handlers.

    An anonymous session has no `sid` and `logged_in=False`.
    """
    sid: Optional[str] = None
    user_id: Optional[int] = None
    username: Optional[str] = None
    logged_in: bool = False

    def to_record_data(self) -> dict:
        return {
            "user_id": self.user_id,
            "username": self.username,
            "logged_in": self.logged_in,
        }


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _owned_by(user_id: int):
    return SessionRecord.data["user_id"].as_integer() == user_id


class SessionService:
    """
    Load, save and destroy server-side sessions.

    All methods take the request's AsyncSession, so session writes commit or
    roll back together with the rest of the request.
    """

    async def load(self, db: AsyncSession, sid: Optional[str]) -> UserSession:
        """
        Resolve a cookie value into a UserSession.

        Unknown, malformed and expired ids all resolve to an anonymous session;
        expired rows are deleted on the way.
        """
        if not sid:
            return UserSession()

        record = await db.get(SessionRecord, sid)
        if record is None:
            logger.debug("Unknown session id presented; treating as anonymous")
            return UserSession()

        if _as_utc(record.expires_at) <= datetime.now(timezone.utc):
            logger.info("Session %s... expired; removing", sid[:8])
            await db.delete(record)
            await db.flush()
            return UserSession()

        data = record.data or {}
        return UserSession(
            sid=record.sid,
            user_id=data.get("user_id"),
            username=data.get("username"),
            logged_in=bool(data.get("logged_in")),
        )

    async def authenticate(
        self, db: AsyncSession, session: UserSession, user: User
    ) -> UserSession:
        """
        Move `session` to the authenticated state for `user`.

        Returns the new session value; its `sid` must be sent back in the
        session cookie.
        """
        if session.sid:
            await self._delete(db, session.sid)

        authenticated = UserSession(
            sid=secrets.token_urlsafe(32),
            user_id=user.id,
            username=user.username,
            logged_in=True,
        )
        db.add(
            SessionRecord(
                sid=authenticated.sid,
                data=authenticated.to_record_data(),
                expires_at=datetime.now(timezone.utc)
                + timedelta(seconds=settings.session_max_age),
            )
        )
        await db.flush()
        logger.info("Session established for user %s", user.id)
        return authenticated

    async def destroy(self, db: AsyncSession, session: UserSession) -> None:
        """Delete the session row. The caller clears the cookie."""
        if session.sid:
            await self._delete(db, session.sid)
            logger.info("Session destroyed for user %s", session.user_id)

    async def delete_for_user(self, db: AsyncSession, user_id: int) -> None:
        """End every session of `user_id`. Used when the account is deleted."""
        result = await db.execute(
            delete(SessionRecord)
            .where(_owned_by(user_id))
            .execution_options(synchronize_session="fetch")
        )
        if result.rowcount:
            logger.info("Removed %d session(s) of deleted user %s", result.rowcount, user_id)

    async def rename_user(self, db: AsyncSession, user_id: int, username: str) -> None:
        """Keep the username stored in `user_id`'s live sessions current."""
        result = await db.execute(select(SessionRecord).where(_owned_by(user_id)))
        for record in result.scalars().all():
            # JSON columns only detect reassignment, not in-place mutation
            record.data = {**record.data, "username": username}

    async def _delete(self, db: AsyncSession, sid: str) -> None:
        await db.execute(delete(SessionRecord).where(SessionRecord.sid == sid))


# ── Singleton Instance ────────────────────────────────────────────────────
session_service = SessionService()
