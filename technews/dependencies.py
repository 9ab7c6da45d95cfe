"""
Tech News Backend — Request Dependencies
=========================================

What:  FastAPI dependencies that resolve the per-request UserSession, plus
       the helpers that write and clear the session cookie.
How:   `get_user_session` reads the session cookie and loads the server-side
       row through the same AsyncSession the handler uses (FastAPI caches
       `get_db_session` per request). `require_login` narrows that to
       authenticated sessions.

Usage in a route:
    @router.post("/posts")
    async def create_post(
        data: PostCreate,
        session: UserSession = Depends(require_login),
        db: AsyncSession = Depends(get_db_session),
    ): ...
"""

from fastapi import Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from technews.config import settings
from technews.database import get_db_session
from technews.exceptions import UnauthorizedError
from technews.services.session_service import UserSession, session_service


async def get_user_session(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> UserSession:
    sid = request.cookies.get(settings.session_cookie_name)
    return await session_service.load(db, sid)


async def require_login(
    session: UserSession = Depends(get_user_session),
) -> UserSession:
    """Reject anonymous sessions with 401."""
    if not session.logged_in or session.user_id is None:
        raise UnauthorizedError()
    return session


def set_session_cookie(response: Response, session: UserSession) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=session.sid,
        max_age=settings.session_max_age,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=settings.session_cookie_name,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
    )
