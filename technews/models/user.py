"""
Tech News Backend — User SQLAlchemy Model
==========================================

What:  ORM model for the `users` table plus its validation and password hooks.
Who:   Used by UserService for CRUD and login, by the session layer for
       ownership, and by Alembic for schema management.

Constraints enforced here (before any SQL is sent):
    - email must be a syntactically valid address (email-validator)
    - password must be at least 4 characters before hashing

Constraints enforced by the database:
    - email is UNIQUE
    - username, email and password are NOT NULL

Password lifecycle:
    The plaintext is assigned to `password` and validated for length.
    UserService then hashes it in a worker thread and stores the hash with
    `apply_password_hash()`, which marks the value as already hashed. The
    `before_insert` / `before_update` mapper hooks hash any password that
    reaches a flush unmarked, so no write path can store a plaintext. The
    update hook only fires when the attribute actually changed, so a
    username-only update never re-hashes an existing hash.

Emails are stored in email-validator's normalized form (domain lowercased);
`normalize_email()` applies the same form to login lookups.
"""

from typing import TYPE_CHECKING, List

from email_validator import EmailNotValidError, validate_email
from sqlalchemy import Integer, String, event, inspect
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from technews.database import Base
from technews.exceptions import ValidationError
from technews.security import hash_password, verify_password

if TYPE_CHECKING:
    from technews.models.comment import Comment
    from technews.models.post import Post
    from technews.models.vote import Vote

MIN_PASSWORD_LENGTH = 4


def normalize_email(value: str) -> str:
    """
    Normalized form of `value`, as stored on `User.email`.

    Unparseable input is returned unchanged; it simply matches no row.
    """
    try:
        return validate_email(value, check_deliverability=False).normalized
    except EmailNotValidError:
        return value


class User(Base):
    """
    A registered account.

    Relationships:
        posts        — posts authored by this user (cascade delete)
        comments     — comments written by this user (cascade delete)
        votes        — Vote rows cast by this user (cascade delete)
        voted_posts  — read-only many-to-many view of posts through `votes`
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    username: Mapped[str] = mapped_column(String(255), nullable=False)

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
    )

    # Always an argon2 hash once flushed; never serialized by any schema
    password: Mapped[str] = mapped_column(String(255), nullable=False)

    posts: Mapped[List["Post"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    comments: Mapped[List["Comment"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    votes: Mapped[List["Vote"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    voted_posts: Mapped[List["Post"]] = relationship(
        secondary="votes",
        viewonly=True,
    )

    # ── Validation ────────────────────────────────────────────────────────
    @validates("email")
    def validate_email_address(self, key: str, value: str) -> str:
        if not value:
            raise ValidationError(message="Email is required", field="email")
        try:
            result = validate_email(value, check_deliverability=False)
        except EmailNotValidError as e:
            raise ValidationError(
                message=f"'{value}' is not a valid email address",
                field="email",
                context={"reason": str(e)},
            )
        return result.normalized

    @validates("password")
    def validate_password_length(self, key: str, value: str) -> str:
        if value is None or len(value) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                message=f"Password must be at least {MIN_PASSWORD_LENGTH} characters long",
                field="password",
            )
        # Any newly assigned value is plaintext until apply_password_hash()
        self._password_hashed = False
        return value

    @validates("username")
    def validate_username(self, key: str, value: str) -> str:
        if not value or not value.strip():
            raise ValidationError(message="Username is required", field="username")
        return value

    # ── Credentials ───────────────────────────────────────────────────────
    # Not mapped: True while `password` holds a hash computed off the event loop
    _password_hashed = False

    def apply_password_hash(self, password_hash: str) -> None:
        """Store a hash produced by `hash_password` so the flush hooks keep it."""
        self.password = password_hash
        self._password_hashed = True

    def check_password(self, password: str) -> bool:
        """Compare a plaintext password with the stored hash."""
        return verify_password(password, self.password)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"


# ── Pre-save Hooks ────────────────────────────────────────────────────────
# Mapper events run inside the flush, once per row, for both session.add()
# inserts and attribute-level updates made through the ORM.

@event.listens_for(User, "before_insert")
def _hash_password_before_insert(mapper, connection, target: User) -> None:
    if not target._password_hashed:
        target.apply_password_hash(hash_password(target.password))


@event.listens_for(User, "before_update")
def _hash_password_before_update(mapper, connection, target: User) -> None:
    history = inspect(target).attrs.password.history
    if history.has_changes() and not target._password_hashed:
        target.apply_password_hash(hash_password(target.password))
