"""
Tech News Backend — User Service
=================================

What:  Business logic for the /api/users resource: find-all, find-one with
       associations, create, credential check, update, destroy.
How:   Each method runs async ORM queries on the request's session and
       translates outcomes into response schemas or typed exceptions.
Who:   Called by the user route handlers.

Error Handling Strategy:
    - Missing rows          → NotFoundError (404)
    - Model validation      → ValidationError raised by the ORM validators (400)
    - Duplicate email       → IntegrityError on flush, re-raised as ValidationError (400)
    - Wrong credentials     → AuthenticationError (400)
    - Anything else         → logged with traceback, re-raised as DatabaseError (500)
"""

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from starlette.concurrency import run_in_threadpool

from technews.exceptions import (
    AuthenticationError,
    DatabaseError,
    NotFoundError,
    TechNewsError,
    ValidationError,
)
from technews.models.comment import Comment
from technews.models.user import User, normalize_email
from technews.schemas.common import MutationResponse
from technews.schemas.user import (
    UserCreate,
    UserDetailResponse,
    UserResponse,
    UserUpdate,
)
from technews.security import hash_password
from technews.services.session_service import session_service

logger = logging.getLogger(__name__)

NO_USER_WITH_ID = "No user found with this id"
NO_USER_WITH_EMAIL = "No user with that email address!"
INCORRECT_PASSWORD = "Incorrect password!"
DUPLICATE_EMAIL = "An account with that email address already exists"


async def _hash_off_loop(user: User, password: str) -> None:
    # argon2 is CPU-bound; hash in a worker thread, not inside the flush
    user.apply_password_hash(await run_in_threadpool(hash_password, password))


class UserService:
    """
    Stateless service; every method receives the AsyncSession to work in.
    Commit and rollback belong to `get_db_session`.
    """

    async def list_users(self, db: AsyncSession) -> List[UserResponse]:
        try:
            result = await db.execute(select(User).order_by(User.id))
            return [UserResponse.model_validate(user) for user in result.scalars().all()]
        except Exception as e:
            logger.error("Database error listing users: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve users. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def get_user(self, db: AsyncSession, user_id: int) -> UserDetailResponse:
        """
        Fetch one user with their posts, comments (plus each comment's post
        title) and voted-for posts, all eager-loaded with SELECT ... IN.

        Raises:
            NotFoundError: no user has this id
        """
        try:
            result = await db.execute(
                select(User)
                .where(User.id == user_id)
                .options(
                    selectinload(User.posts),
                    selectinload(User.comments).selectinload(Comment.post),
                    selectinload(User.voted_posts),
                )
                .execution_options(populate_existing=True)
            )
            user = result.scalar_one_or_none()
        except Exception as e:
            logger.error("Database error fetching user %s: %s", user_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve the user. Please try again.",
                context={"user_id": user_id},
            )

        if user is None:
            raise NotFoundError(resource="user", resource_id=user_id, message=NO_USER_WITH_ID)

        return UserDetailResponse.model_validate(user)

    async def create_user(self, db: AsyncSession, data: UserCreate) -> User:
        """
        Insert a new user. The password is validated as plaintext, then
        hashed in a worker thread before the flush.

        Raises:
            ValidationError: invalid field or email already registered
        """
        try:
            user = User(
                username=data.username,
                email=data.email,
                password=data.password,
            )
            await _hash_off_loop(user, data.password)
            db.add(user)
            await db.flush()
        except IntegrityError:
            logger.info("Signup rejected: duplicate email")
            raise ValidationError(message=DUPLICATE_EMAIL, field="email")
        except TechNewsError:
            raise
        except Exception as e:
            logger.error("Database error creating user: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the user. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.info("User %s created", user.id)
        return user

    async def authenticate(self, db: AsyncSession, email: str, password: str) -> User:
        """
        Look a user up by email and verify their password.

        An unknown email stops here; the password check only runs against a
        row that exists.

        Raises:
            AuthenticationError: unknown email or wrong password
        """
        try:
            result = await db.execute(
                select(User).where(User.email == normalize_email(email))
            )
            user = result.scalar_one_or_none()
        except Exception as e:
            logger.error("Database error during login: %s", str(e), exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__})

        if user is None:
            raise AuthenticationError(message=NO_USER_WITH_EMAIL)

        # argon2 verification is CPU-bound; keep it off the event loop
        valid = await run_in_threadpool(user.check_password, password)
        if not valid:
            logger.info("Login failed for user %s: incorrect password", user.id)
            raise AuthenticationError(message=INCORRECT_PASSWORD)

        logger.info("User %s logged in", user.id)
        return user

    async def update_user(
        self, db: AsyncSession, user_id: int, data: UserUpdate
    ) -> MutationResponse:
        """
        Apply the fields present in `data` to one user.

        The update goes through the ORM object rather than a bulk UPDATE so
        the validators run for the row. A new password is hashed off the
        event loop; a new username is copied into the user's live sessions.
        """
        changes = data.model_dump(exclude_unset=True)
        try:
            user = await db.get(User, user_id)
            if user is None:
                raise NotFoundError(resource="user", resource_id=user_id, message=NO_USER_WITH_ID)

            for field, value in changes.items():
                setattr(user, field, value)
            if "password" in changes:
                await _hash_off_loop(user, changes["password"])
            if "username" in changes:
                await session_service.rename_user(db, user_id, user.username)
            await db.flush()
        except IntegrityError:
            raise ValidationError(message=DUPLICATE_EMAIL, field="email")
        except TechNewsError:
            raise
        except Exception as e:
            logger.error("Database error updating user %s: %s", user_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not update the user. Please try again.",
                context={"user_id": user_id},
            )

        logger.info("User %s updated (%s)", user_id, ", ".join(sorted(changes)) or "no fields")
        return MutationResponse(affected_rows=1)

    async def delete_user(self, db: AsyncSession, user_id: int) -> MutationResponse:
        """
        Delete one user. Their posts, comments and votes go with them
        (ON DELETE CASCADE), as do comments and votes on their posts. Their
        sessions are ended so a stale cookie cannot act for a missing user.
        """
        try:
            user = await db.get(User, user_id)
            if user is None:
                raise NotFoundError(resource="user", resource_id=user_id, message=NO_USER_WITH_ID)

            await session_service.delete_for_user(db, user_id)
            await db.delete(user)
            await db.flush()
        except TechNewsError:
            raise
        except Exception as e:
            logger.error("Database error deleting user %s: %s", user_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not delete the user. Please try again.",
                context={"user_id": user_id},
            )

        logger.info("User %s deleted", user_id)
        return MutationResponse(affected_rows=1)


# ── Singleton Instance ────────────────────────────────────────────────────
user_service = UserService()
