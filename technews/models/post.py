"""
Tech News Backend — Post SQLAlchemy Model
==========================================

What:  ORM model for the `posts` table.
Who:   Used by PostService, by UserService for the profile read, and by Alembic.

Each post belongs to exactly one author. Comments and votes on the post are
deleted with it (ON DELETE CASCADE on their foreign keys).
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING, List

from sqlalchemy import ForeignKey, Integer, String, text
from sqlalchemy.dialects.postgresql import TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from technews.database import Base
from technews.exceptions import ValidationError

if TYPE_CHECKING:
    from technews.models.comment import Comment
    from technews.models.user import User
    from technews.models.vote import Vote


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Post(Base):
    """A link shared by a user."""

    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    post_url: Mapped[str] = mapped_column(String(2048), nullable=False)

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    user: Mapped["User"] = relationship(back_populates="posts")
    comments: Mapped[List["Comment"]] = relationship(
        back_populates="post",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Comment.created_at",
    )
    votes: Mapped[List["Vote"]] = relationship(
        back_populates="post",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @validates("title")
    def validate_title(self, key: str, value: str) -> str:
        if not value or not value.strip():
            raise ValidationError(message="Title is required", field="title")
        return value

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, title='{self.title}', user_id={self.user_id})>"
