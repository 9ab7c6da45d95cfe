"""
Tech News Backend — User Route Handlers
========================================

What:  /api/users — list, get with associations, signup, login, logout,
       update, delete.
How:   Thin handlers: parse the request, call UserService / SessionService,
       set or clear the session cookie. Errors are typed exceptions turned
       into responses by the global handlers in main.py.

Route Inventory:
    GET    /api/users          → 200 list of users (never a password)
    GET    /api/users/{id}     → 200 user + posts, comments, voted_posts | 404
    POST   /api/users          → 200 created user, session authenticated | 400
    POST   /api/users/login    → 200 {user, message}, session authenticated | 400
    POST   /api/users/logout   → 204 empty | 404 empty when not logged in
    PUT    /api/users/{id}     → 200 {affected_rows} | 404 | 400
    DELETE /api/users/{id}     → 200 {affected_rows} | 404
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from technews.database import get_db_session
from technews.dependencies import (
    clear_session_cookie,
    get_user_session,
    set_session_cookie,
)
from technews.schemas.common import ErrorResponse, MutationResponse
from technews.schemas.user import (
    LoginResponse,
    UserCreate,
    UserDetailResponse,
    UserLogin,
    UserResponse,
    UserUpdate,
)
from technews.services.session_service import UserSession, session_service
from technews.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


@router.get(
    "",
    response_model=List[UserResponse],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List all users",
)
async def list_users(db: AsyncSession = Depends(get_db_session)) -> List[UserResponse]:
    return await user_service.list_users(db)


@router.get(
    "/{user_id}",
    response_model=UserDetailResponse,
    responses={
        404: {"description": "No user with this id", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Get a user with their posts, comments and votes",
)
async def get_user(
    user_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> UserDetailResponse:
    return await user_service.get_user(db, user_id)


@router.post(
    "",
    response_model=UserResponse,
    responses={400: {"description": "Invalid or duplicate input", "model": ErrorResponse}},
    summary="Sign up",
    description="Creates a user and logs the new user in (sets the session cookie).",
)
async def create_user(
    data: UserCreate,
    response: Response,
    session: UserSession = Depends(get_user_session),
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    user = await user_service.create_user(db, data)
    session = await session_service.authenticate(db, session, user)
    set_session_cookie(response, session)
    return UserResponse.model_validate(user)


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={400: {"description": "Unknown email or wrong password", "model": ErrorResponse}},
    summary="Log in",
)
async def login(
    data: UserLogin,
    response: Response,
    session: UserSession = Depends(get_user_session),
    db: AsyncSession = Depends(get_db_session),
) -> LoginResponse:
    user = await user_service.authenticate(db, data.email, data.password)
    session = await session_service.authenticate(db, session, user)
    set_session_cookie(response, session)
    return LoginResponse(user=UserResponse.model_validate(user))


@router.post(
    "/logout",
    status_code=204,
    response_class=Response,
    responses={404: {"description": "Not logged in"}},
    summary="Log out",
)
async def logout(
    session: UserSession = Depends(get_user_session),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    # Logging out an anonymous session is reported as a missing resource
    if not session.logged_in:
        return Response(status_code=404)

    await session_service.destroy(db, session)
    response = Response(status_code=204)
    clear_session_cookie(response)
    return response


@router.put(
    "/{user_id}",
    response_model=MutationResponse,
    responses={
        400: {"description": "Invalid or duplicate input", "model": ErrorResponse},
        404: {"description": "No user with this id", "model": ErrorResponse},
    },
    summary="Update a user",
)
async def update_user(
    user_id: int,
    data: UserUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> MutationResponse:
    return await user_service.update_user(db, user_id, data)


@router.delete(
    "/{user_id}",
    response_model=MutationResponse,
    responses={404: {"description": "No user with this id", "model": ErrorResponse}},
    summary="Delete a user and everything they own",
)
async def delete_user(
    user_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> MutationResponse:
    return await user_service.delete_user(db, user_id)
