"""
Tech News Backend — Comment Request/Response Schemas
=====================================================
"""

from datetime import datetime

from pydantic import BaseModel, Field


class CommentCreate(BaseModel):
    """Body of POST /api/comments. The author comes from the session."""
    comment_text: str = Field(min_length=1)
    post_id: int = Field(gt=0)


class CommentResponse(BaseModel):
    id: int
    comment_text: str
    user_id: int
    post_id: int
    created_at: datetime

    model_config = {"from_attributes": True}
