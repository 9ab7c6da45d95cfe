"""
Tech News Backend — Post Request/Response Schemas
==================================================

What:  Pydantic models for the /api/posts contract, including upvotes.
"""

from datetime import datetime
from typing import List

from pydantic import BaseModel, Field, HttpUrl


class PostCreate(BaseModel):
    """
    Body of POST /api/posts. The author comes from the session, never the body.

    Example:
        {"title": "Taskmaster goes public!", "post_url": "https://taskmaster.com/press"}
    """
    title: str = Field(min_length=1, max_length=255)
    post_url: HttpUrl


class PostUpdate(BaseModel):
    """Body of PUT /api/posts/{id}. Only the title is editable."""
    title: str = Field(min_length=1, max_length=255)


class UpvoteRequest(BaseModel):
    """Body of PUT /api/posts/upvote."""
    post_id: int = Field(gt=0)


class AuthorName(BaseModel):
    username: str

    model_config = {"from_attributes": True}


class PostComment(BaseModel):
    id: int
    comment_text: str
    post_id: int
    user_id: int
    created_at: datetime
    user: AuthorName

    model_config = {"from_attributes": True}


class PostResponse(BaseModel):
    """
    A post as shown in the feed and on its own page.

    vote_count is computed from the `votes` table at read time.
    """
    id: int
    post_url: str
    title: str
    created_at: datetime
    vote_count: int = 0
    user: AuthorName
    comments: List[PostComment] = Field(default_factory=list)
