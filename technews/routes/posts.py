"""
Tech News Backend — Post Route Handlers
========================================

Route Inventory:
    GET    /api/posts          → 200 feed, newest first
    GET    /api/posts/{id}     → 200 post | 404
    POST   /api/posts          → 200 created post (login required)
    PUT    /api/posts/upvote   → 200 post with new vote_count (login required)
    PUT    /api/posts/{id}     → 200 {affected_rows} | 404 (login required)
    DELETE /api/posts/{id}     → 200 {affected_rows} | 404 (login required)

`/upvote` is declared before `/{post_id}` so it is not captured as an id.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from technews.database import get_db_session
from technews.dependencies import require_login
from technews.schemas.common import ErrorResponse, MutationResponse
from technews.schemas.post import PostCreate, PostResponse, PostUpdate, UpvoteRequest
from technews.services.post_service import post_service
from technews.services.session_service import UserSession

router = APIRouter(prefix="/posts", tags=["Posts"])

_LOGIN_REQUIRED = {401: {"description": "Login required", "model": ErrorResponse}}
_NOT_FOUND = {404: {"description": "No post with this id", "model": ErrorResponse}}


@router.get("", response_model=List[PostResponse], summary="List all posts")
async def list_posts(db: AsyncSession = Depends(get_db_session)) -> List[PostResponse]:
    return await post_service.list_posts(db)


@router.get(
    "/{post_id}",
    response_model=PostResponse,
    responses=_NOT_FOUND,
    summary="Get one post with its comments",
)
async def get_post(post_id: int, db: AsyncSession = Depends(get_db_session)) -> PostResponse:
    return await post_service.get_post(db, post_id)


@router.post(
    "",
    response_model=PostResponse,
    responses=_LOGIN_REQUIRED,
    summary="Share a link",
)
async def create_post(
    data: PostCreate,
    session: UserSession = Depends(require_login),
    db: AsyncSession = Depends(get_db_session),
) -> PostResponse:
    return await post_service.create_post(db, session.user_id, data)


@router.put(
    "/upvote",
    response_model=PostResponse,
    responses={**_LOGIN_REQUIRED, **_NOT_FOUND},
    summary="Vote for a post",
    description="Each user can vote for a given post once; a second vote is rejected with 400.",
)
async def upvote(
    data: UpvoteRequest,
    session: UserSession = Depends(require_login),
    db: AsyncSession = Depends(get_db_session),
) -> PostResponse:
    return await post_service.upvote(db, session.user_id, data.post_id)


@router.put(
    "/{post_id}",
    response_model=MutationResponse,
    responses={**_LOGIN_REQUIRED, **_NOT_FOUND},
    dependencies=[Depends(require_login)],
    summary="Edit a post title",
)
async def update_post(
    post_id: int,
    data: PostUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> MutationResponse:
    return await post_service.update_post(db, post_id, data)


@router.delete(
    "/{post_id}",
    response_model=MutationResponse,
    responses={**_LOGIN_REQUIRED, **_NOT_FOUND},
    dependencies=[Depends(require_login)],
    summary="Delete a post with its comments and votes",
)
async def delete_post(
    post_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> MutationResponse:
    return await post_service.delete_post(db, post_id)
