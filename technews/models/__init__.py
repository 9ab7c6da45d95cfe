"""
ORM models. Importing this package registers every table with
`Base.metadata` so string-based relationships resolve.
"""

from technews.models.comment import Comment
from technews.models.post import Post
from technews.models.session import SessionRecord
from technews.models.user import User
from technews.models.vote import Vote

__all__ = ["Comment", "Post", "SessionRecord", "User", "Vote"]
