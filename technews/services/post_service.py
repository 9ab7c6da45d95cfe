"""
Tech News Backend — Post Service
=================================

What:  Business logic for /api/posts: feed listing, single post, create,
       title update, delete, and upvotes.
How:   Posts are read with their author and comments eager-loaded and a
       correlated COUNT over `votes` as `vote_count`.
Who:   Called by the post route handlers.
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from technews.exceptions import DatabaseError, NotFoundError, TechNewsError, ValidationError
from technews.models.comment import Comment
from technews.models.post import Post
from technews.models.vote import Vote
from technews.schemas.common import MutationResponse
from technews.schemas.post import (
    AuthorName,
    PostComment,
    PostCreate,
    PostResponse,
    PostUpdate,
)

logger = logging.getLogger(__name__)

NO_POST_WITH_ID = "No post found with this id"
ALREADY_VOTED = "You have already voted for this post"


def _vote_count():
    return (
        select(func.count())
        .select_from(Vote)
        .where(Vote.post_id == Post.id)
        .correlate(Post)
        .scalar_subquery()
        .label("vote_count")
    )


def _post_query() -> Select:
    return (
        select(Post, _vote_count())
        .options(
            selectinload(Post.user),
            selectinload(Post.comments).selectinload(Comment.user),
        )
        .execution_options(populate_existing=True)
    )


def _to_response(post: Post, vote_count: Optional[int]) -> PostResponse:
    return PostResponse(
        id=post.id,
        post_url=post.post_url,
        title=post.title,
        created_at=post.created_at,
        vote_count=vote_count or 0,
        user=AuthorName.model_validate(post.user),
        comments=[PostComment.model_validate(comment) for comment in post.comments],
    )


class PostService:
    """Stateless post operations; callers supply the AsyncSession."""

    async def list_posts(self, db: AsyncSession) -> List[PostResponse]:
        """All posts, newest first."""
        try:
            result = await db.execute(
                _post_query().order_by(Post.created_at.desc(), Post.id.desc())
            )
            rows: List[Tuple[Post, int]] = result.all()
            return [_to_response(post, count) for post, count in rows]
        except Exception as e:
            logger.error("Database error listing posts: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve posts. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def get_post(self, db: AsyncSession, post_id: int) -> PostResponse:
        try:
            result = await db.execute(_post_query().where(Post.id == post_id))
            row = result.one_or_none()
        except Exception as e:
            logger.error("Database error fetching post %s: %s", post_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve the post. Please try again.",
                context={"post_id": post_id},
            )

        if row is None:
            raise NotFoundError(resource="post", resource_id=post_id, message=NO_POST_WITH_ID)
        post, count = row
        return _to_response(post, count)

    async def create_post(
        self, db: AsyncSession, user_id: int, data: PostCreate
    ) -> PostResponse:
        try:
            post = Post(title=data.title, post_url=str(data.post_url), user_id=user_id)
            db.add(post)
            await db.flush()
        except TechNewsError:
            raise
        except Exception as e:
            logger.error("Database error creating post: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the post. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.info("Post %s created by user %s", post.id, user_id)
        return await self.get_post(db, post.id)

    async def upvote(self, db: AsyncSession, user_id: int, post_id: int) -> PostResponse:
        """
        Record a vote by `user_id` for `post_id` and return the post with
        its updated vote count.

        Raises:
            NotFoundError: the post does not exist
            ValidationError: this user already voted for this post
        """
        try:
            if await db.get(Post, post_id) is None:
                raise NotFoundError(resource="post", resource_id=post_id, message=NO_POST_WITH_ID)
            if await db.get(Vote, (user_id, post_id)) is not None:
                raise ValidationError(message=ALREADY_VOTED, field="post_id")

            db.add(Vote(user_id=user_id, post_id=post_id))
            await db.flush()
        except TechNewsError:
            raise
        except Exception as e:
            logger.error("Database error voting on post %s: %s", post_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not record the vote. Please try again.",
                context={"post_id": post_id},
            )

        logger.info("User %s voted for post %s", user_id, post_id)
        return await self.get_post(db, post_id)

    async def update_post(
        self, db: AsyncSession, post_id: int, data: PostUpdate
    ) -> MutationResponse:
        try:
            post = await db.get(Post, post_id)
            if post is None:
                raise NotFoundError(resource="post", resource_id=post_id, message=NO_POST_WITH_ID)
            post.title = data.title
            await db.flush()
        except TechNewsError:
            raise
        except Exception as e:
            logger.error("Database error updating post %s: %s", post_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not update the post. Please try again.",
                context={"post_id": post_id},
            )
        return MutationResponse(affected_rows=1)

    async def delete_post(self, db: AsyncSession, post_id: int) -> MutationResponse:
        """Delete a post together with its comments and votes."""
        try:
            post = await db.get(Post, post_id)
            if post is None:
                raise NotFoundError(resource="post", resource_id=post_id, message=NO_POST_WITH_ID)
            await db.delete(post)
            await db.flush()
        except TechNewsError:
            raise
        except Exception as e:
            logger.error("Database error deleting post %s: %s", post_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not delete the post. Please try again.",
                context={"post_id": post_id},
            )

        logger.info("Post %s deleted", post_id)
        return MutationResponse(affected_rows=1)


# ── Singleton Instance ────────────────────────────────────────────────────
post_service = PostService()
