"""
Tech News Backend — Comment Route Handlers
===========================================

Route Inventory:
    GET    /api/comments       → 200 list of comments
    POST   /api/comments       → 200 created comment | 404 unknown post (login required)
    DELETE /api/comments/{id}  → 200 {affected_rows} | 404 (login required)
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from technews.database import get_db_session
from technews.dependencies import require_login
from technews.schemas.comment import CommentCreate, CommentResponse
from technews.schemas.common import ErrorResponse, MutationResponse
from technews.services.comment_service import comment_service
from technews.services.session_service import UserSession

router = APIRouter(prefix="/comments", tags=["Comments"])


@router.get("", response_model=List[CommentResponse], summary="List all comments")
async def list_comments(db: AsyncSession = Depends(get_db_session)) -> List[CommentResponse]:
    return await comment_service.list_comments(db)


@router.post(
    "",
    response_model=CommentResponse,
    responses={
        401: {"description": "Login required", "model": ErrorResponse},
        404: {"description": "No post with this id", "model": ErrorResponse},
    },
    summary="Comment on a post",
)
async def create_comment(
    data: CommentCreate,
    session: UserSession = Depends(require_login),
    db: AsyncSession = Depends(get_db_session),
) -> CommentResponse:
    return await comment_service.create_comment(db, session.user_id, data)


@router.delete(
    "/{comment_id}",
    response_model=MutationResponse,
    responses={
        401: {"description": "Login required", "model": ErrorResponse},
        404: {"description": "No comment with this id", "model": ErrorResponse},
    },
    dependencies=[Depends(require_login)],
    summary="Delete a comment",
)
async def delete_comment(
    comment_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> MutationResponse:
    return await comment_service.delete_comment(db, comment_id)
