"""
Tech News Backend — Model Validation and Password Hashing Tests
================================================================

What:  ORM-level validators, the password flush hooks and the argon2 helpers.
"""

import pytest

import technews.models  # noqa: F401
from technews.exceptions import ValidationError
from technews.models.comment import Comment
from technews.models.post import Post
from technews.models.user import User
from technews.security import hash_password, verify_password


class TestUserValidation:

    def test_valid_user(self):
        user = User(username="lernantino", email="lernantino@gmail.com", password="1234")
        assert user.email == "lernantino@gmail.com"

    def test_invalid_email(self):
        with pytest.raises(ValidationError) as exc_info:
            User(username="lernantino", email="lernantino-at-gmail", password="password1234")
        assert exc_info.value.field == "email"

    def test_short_password(self):
        with pytest.raises(ValidationError) as exc_info:
            User(username="lernantino", email="lernantino@gmail.com", password="abc")
        assert exc_info.value.field == "password"

    def test_blank_username(self):
        with pytest.raises(ValidationError):
            User(username="  ", email="lernantino@gmail.com", password="password1234")

    def test_blank_post_title(self):
        with pytest.raises(ValidationError):
            Post(title="", post_url="https://example.com", user_id=1)

    def test_blank_comment(self):
        with pytest.raises(ValidationError):
            Comment(comment_text=" ", post_id=1, user_id=1)


class TestPasswordHashing:

    def test_hash_is_not_plaintext(self):
        hashed = hash_password("password1234")

        assert hashed != "password1234"
        assert hashed.startswith("$argon2")

    def test_hashes_are_salted(self):
        assert hash_password("password1234") != hash_password("password1234")

    def test_verify(self):
        hashed = hash_password("password1234")

        assert verify_password("password1234", hashed)
        assert not verify_password("password12345", hashed)

    def test_verify_against_garbage_hash(self):
        assert not verify_password("password1234", "not-a-hash")


class TestPasswordHooks:

    @pytest.mark.asyncio
    async def test_plain_insert_is_hashed_by_hook(self, db_session):
        user = User(username="lernantino", email="lernantino@gmail.com", password="password1234")
        db_session.add(user)
        await db_session.flush()

        assert user.password.startswith("$argon2")
        assert user.check_password("password1234")

    @pytest.mark.asyncio
    async def test_prehashed_password_is_kept(self, db_session):
        user = User(username="lernantino", email="lernantino@gmail.com", password="password1234")
        hashed = hash_password("password1234")
        user.apply_password_hash(hashed)
        db_session.add(user)
        await db_session.flush()

        assert user.password == hashed

    def test_reassigning_password_clears_hashed_mark(self):
        user = User(username="lernantino", email="lernantino@gmail.com", password="password1234")
        user.apply_password_hash(hash_password("password1234"))

        user.password = "another-pass"

        assert not user._password_hashed

    def test_email_is_normalized(self):
        user = User(username="alice", email="Alice@Example.COM", password="pass1")
        assert user.email == "Alice@example.com"
