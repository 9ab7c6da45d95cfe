"""
Tech News Backend — Comment Service
====================================

What:  List, create and delete comments. A comment's author is always the
       session user; its post must exist.
"""

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from technews.exceptions import DatabaseError, NotFoundError, TechNewsError
from technews.models.comment import Comment
from technews.models.post import Post
from technews.schemas.comment import CommentCreate, CommentResponse
from technews.schemas.common import MutationResponse
from technews.services.post_service import NO_POST_WITH_ID

logger = logging.getLogger(__name__)

NO_COMMENT_WITH_ID = "No comment found with this id"


class CommentService:

    async def list_comments(self, db: AsyncSession) -> List[CommentResponse]:
        try:
            result = await db.execute(select(Comment).order_by(Comment.id))
            return [CommentResponse.model_validate(c) for c in result.scalars().all()]
        except Exception as e:
            logger.error("Database error listing comments: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve comments. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def create_comment(
        self, db: AsyncSession, user_id: int, data: CommentCreate
    ) -> CommentResponse:
        """
        Raises:
            NotFoundError: the post being commented on does not exist
            ValidationError: empty comment text
        """
        try:
            if await db.get(Post, data.post_id) is None:
                raise NotFoundError(
                    resource="post", resource_id=data.post_id, message=NO_POST_WITH_ID
                )

            comment = Comment(
                comment_text=data.comment_text,
                post_id=data.post_id,
                user_id=user_id,
            )
            db.add(comment)
            await db.flush()
        except TechNewsError:
            raise
        except Exception as e:
            logger.error("Database error creating comment: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save the comment. Please try again.",
                context={"post_id": data.post_id},
            )

        logger.info("Comment %s added to post %s by user %s", comment.id, data.post_id, user_id)
        return CommentResponse.model_validate(comment)

    async def delete_comment(self, db: AsyncSession, comment_id: int) -> MutationResponse:
        try:
            comment = await db.get(Comment, comment_id)
            if comment is None:
                raise NotFoundError(
                    resource="comment", resource_id=comment_id, message=NO_COMMENT_WITH_ID
                )
            await db.delete(comment)
            await db.flush()
        except TechNewsError:
            raise
        except Exception as e:
            logger.error("Database error deleting comment %s: %s", comment_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not delete the comment. Please try again.",
                context={"comment_id": comment_id},
            )
        return MutationResponse(affected_rows=1)


# ── Singleton Instance ────────────────────────────────────────────────────
comment_service = CommentService()
