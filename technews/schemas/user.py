"""
Tech News Backend — User Request/Response Schemas
==================================================

What:  Pydantic models for the /api/users contract.
How:   Response models are built from ORM objects (`from_attributes`) and
       declare only public fields, so `password` can never be serialized.

Validation happens on two layers:
    - here, for the request body shape (EmailStr, min_length)
    - on the ORM model, for every write path including partial updates
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field

from technews.models.user import MIN_PASSWORD_LENGTH


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class UserCreate(BaseModel):
    """
    Body of POST /api/users.

    Example:
        {"username": "lernantino", "email": "lernantino@gmail.com", "password": "password1234"}
    """
    username: str = Field(min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(min_length=MIN_PASSWORD_LENGTH, max_length=255)


class UserLogin(BaseModel):
    """Body of POST /api/users/login."""
    email: str
    password: str


class UserUpdate(BaseModel):
    """
    Body of PUT /api/users/{id}. Every field is optional; only the fields
    the client sends are applied.
    """
    username: Optional[str] = Field(default=None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(
        default=None, min_length=MIN_PASSWORD_LENGTH, max_length=255
    )


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class UserResponse(BaseModel):
    """A user without credentials."""
    id: int
    username: str
    email: str

    model_config = {"from_attributes": True}


class UserPostSummary(BaseModel):
    id: int
    title: str
    post_url: str
    created_at: datetime

    model_config = {"from_attributes": True}


class PostTitle(BaseModel):
    title: str

    model_config = {"from_attributes": True}


class UserCommentSummary(BaseModel):
    """A comment on the profile, with the title of the post it belongs to."""
    id: int
    comment_text: str
    created_at: datetime
    post: PostTitle

    model_config = {"from_attributes": True}


class UserDetailResponse(UserResponse):
    """
    Returned by GET /api/users/{id}.

    posts:        the user's own posts
    comments:     the user's comments, each with its post's title
    voted_posts:  titles of the posts this user voted for
    """
    posts: List[UserPostSummary] = Field(default_factory=list)
    comments: List[UserCommentSummary] = Field(default_factory=list)
    voted_posts: List[PostTitle] = Field(default_factory=list)


class LoginResponse(BaseModel):
    user: UserResponse
    message: str = Field(default="You are now logged in!")
