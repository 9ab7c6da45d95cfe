"""
Tech News Backend — Vote SQLAlchemy Model
==========================================

What:  Join entity between users and posts.

The primary key is the (user_id, post_id) pair itself, so the database
rejects a second vote by the same user on the same post.
"""

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from technews.database import Base

if TYPE_CHECKING:
    from technews.models.post import Post
    from technews.models.user import User


class Vote(Base):
    __tablename__ = "votes"

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("posts.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )

    user: Mapped["User"] = relationship(back_populates="votes")
    post: Mapped["Post"] = relationship(back_populates="votes")

    def __repr__(self) -> str:
        return f"<Vote(user_id={self.user_id}, post_id={self.post_id})>"
