"""
Tech News Backend — User API Tests
===================================

What:  End-to-end tests for /api/users through the ASGI app and a real
       (SQLite) database.

What we test:
    ✅ Signup returns the user without a password and sets the session cookie
    ✅ Passwords are stored as argon2 hashes
    ✅ Duplicate email, bad email and short password are rejected with 400
    ✅ Login: success, mixed-case domain, wrong password, unknown email
    ✅ Logout: 204 when logged in, 404 when anonymous
    ✅ Get one user with posts, comments and voted posts
    ✅ Update (including password re-hash) and delete, with 404 on no match
    ✅ Deleting a user cascades to posts, comments and votes
    ✅ Deleting a user ends their sessions; renaming refreshes them
"""

import pytest
from sqlalchemy import func, select

from technews.models.comment import Comment
from technews.models.post import Post
from technews.models.session import SessionRecord
from technews.models.user import User
from technews.models.vote import Vote


class TestSignup:

    @pytest.mark.asyncio
    async def test_signup_returns_user_and_sets_cookie(self, test_client, sample_user_data):
        response = await test_client.post("/api/users", json=sample_user_data)

        assert response.status_code == 200
        body = response.json()
        assert body["username"] == "lernantino"
        assert body["email"] == "lernantino@gmail.com"
        assert isinstance(body["id"], int)
        assert "password" not in body
        assert "sid" in response.cookies

    @pytest.mark.asyncio
    async def test_password_is_stored_hashed(self, test_client, sample_user_data, db_session):
        await test_client.post("/api/users", json=sample_user_data)

        user = (await db_session.execute(select(User))).scalar_one()
        assert user.password != sample_user_data["password"]
        assert user.password.startswith("$argon2")
        assert user.check_password(sample_user_data["password"])

    @pytest.mark.asyncio
    async def test_duplicate_email_rejected(self, test_client, sample_user_data):
        first = await test_client.post("/api/users", json=sample_user_data)
        assert first.status_code == 200

        second = await test_client.post(
            "/api/users", json={**sample_user_data, "username": "someone-else"}
        )
        assert second.status_code == 400
        assert second.json()["error"] == "validation_error"

        users = await test_client.get("/api/users")
        assert len(users.json()) == 1

    @pytest.mark.asyncio
    async def test_short_password_rejected(self, test_client, sample_user_data):
        response = await test_client.post(
            "/api/users", json={**sample_user_data, "password": "abc"}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"
        assert "sid" not in response.cookies
        assert (await test_client.get("/api/users")).json() == []

    @pytest.mark.asyncio
    async def test_invalid_email_rejected(self, test_client, sample_user_data):
        response = await test_client.post(
            "/api/users", json={**sample_user_data, "email": "not-an-email"}
        )
        assert response.status_code == 400


class TestLoginLogout:

    @pytest.mark.asyncio
    async def test_login_success(self, test_client, signup):
        await signup()
        test_client.cookies.clear()

        response = await test_client.post(
            "/api/users/login",
            json={"email": "lernantino@gmail.com", "password": "password1234"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "You are now logged in!"
        assert body["user"]["username"] == "lernantino"
        assert "password" not in body["user"]
        assert "sid" in response.cookies

    @pytest.mark.asyncio
    async def test_login_issues_new_session_id(self, test_client, signup):
        await signup()
        signup_sid = test_client.cookies.get("sid")

        response = await test_client.post(
            "/api/users/login",
            json={"email": "lernantino@gmail.com", "password": "password1234"},
        )

        assert response.status_code == 200
        assert response.cookies.get("sid") != signup_sid

    @pytest.mark.asyncio
    async def test_login_with_mixed_case_domain(self, test_client, signup):
        created = await signup(email="Alice@Example.COM", password="pass1")
        test_client.cookies.clear()

        response = await test_client.post(
            "/api/users/login", json={"email": "Alice@Example.COM", "password": "pass1"}
        )

        assert response.status_code == 200
        assert response.json()["user"]["id"] == created["id"]

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, test_client, signup):
        await signup()
        test_client.cookies.clear()

        response = await test_client.post(
            "/api/users/login",
            json={"email": "lernantino@gmail.com", "password": "wrong-password"},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Incorrect password!"
        assert "sid" not in response.cookies

    @pytest.mark.asyncio
    async def test_login_unknown_email(self, test_client):
        response = await test_client.post(
            "/api/users/login",
            json={"email": "nobody@gmail.com", "password": "password1234"},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "No user with that email address!"

    @pytest.mark.asyncio
    async def test_logout_when_logged_in(self, test_client, signup):
        await signup()

        response = await test_client.post("/api/users/logout")

        assert response.status_code == 204
        assert response.content == b""

        # The session is gone; logging out again has nothing to end
        again = await test_client.post("/api/users/logout")
        assert again.status_code == 404

    @pytest.mark.asyncio
    async def test_logout_when_anonymous(self, test_client):
        response = await test_client.post("/api/users/logout")

        assert response.status_code == 404
        assert response.content == b""


class TestReadUsers:

    @pytest.mark.asyncio
    async def test_list_users_omits_passwords(self, test_client, signup):
        await signup()
        await signup(username="second", email="second@gmail.com")

        response = await test_client.get("/api/users")

        assert response.status_code == 200
        users = response.json()
        assert [u["username"] for u in users] == ["lernantino", "second"]
        assert all("password" not in u for u in users)

    @pytest.mark.asyncio
    async def test_get_missing_user(self, test_client):
        response = await test_client.get("/api/users/999")

        assert response.status_code == 404
        assert response.json()["message"] == "No user found with this id"

    @pytest.mark.asyncio
    async def test_get_user_with_associations(self, test_client, signup):
        user = await signup()
        post = (
            await test_client.post(
                "/api/posts",
                json={"title": "Taskmaster goes public!", "post_url": "https://taskmaster.com/press"},
            )
        ).json()
        await test_client.post(
            "/api/comments", json={"comment_text": "Nice find", "post_id": post["id"]}
        )
        await test_client.put("/api/posts/upvote", json={"post_id": post["id"]})

        response = await test_client.get(f"/api/users/{user['id']}")

        assert response.status_code == 200
        body = response.json()
        assert "password" not in body
        assert [p["title"] for p in body["posts"]] == ["Taskmaster goes public!"]
        assert body["comments"][0]["comment_text"] == "Nice find"
        assert body["comments"][0]["post"]["title"] == "Taskmaster goes public!"
        assert body["voted_posts"] == [{"title": "Taskmaster goes public!"}]


class TestUpdateDelete:

    @pytest.mark.asyncio
    async def test_update_username(self, test_client, signup):
        user = await signup()

        response = await test_client.put(
            f"/api/users/{user['id']}", json={"username": "renamed"}
        )

        assert response.status_code == 200
        assert response.json() == {"affected_rows": 1}
        fetched = await test_client.get(f"/api/users/{user['id']}")
        assert fetched.json()["username"] == "renamed"

    @pytest.mark.asyncio
    async def test_update_username_refreshes_session(self, test_client, signup, db_session):
        user = await signup()

        await test_client.put(f"/api/users/{user['id']}", json={"username": "renamed"})

        record = (await db_session.execute(select(SessionRecord))).scalar_one()
        assert record.data["username"] == "renamed"
        assert record.data["user_id"] == user["id"]

    @pytest.mark.asyncio
    async def test_update_password_is_rehashed(self, test_client, signup, db_session):
        user = await signup()

        response = await test_client.put(
            f"/api/users/{user['id']}", json={"password": "brand-new-pass"}
        )
        assert response.status_code == 200

        stored = (await db_session.execute(select(User))).scalar_one()
        assert stored.password != "brand-new-pass"
        assert stored.check_password("brand-new-pass")

        old_login = await test_client.post(
            "/api/users/login",
            json={"email": "lernantino@gmail.com", "password": "password1234"},
        )
        assert old_login.status_code == 400

        new_login = await test_client.post(
            "/api/users/login",
            json={"email": "lernantino@gmail.com", "password": "brand-new-pass"},
        )
        assert new_login.status_code == 200

    @pytest.mark.asyncio
    async def test_update_short_password_rejected(self, test_client, signup):
        user = await signup()

        response = await test_client.put(f"/api/users/{user['id']}", json={"password": "no"})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_update_missing_user(self, test_client):
        response = await test_client.put("/api/users/999", json={"username": "ghost"})

        assert response.status_code == 404
        assert response.json()["message"] == "No user found with this id"

    @pytest.mark.asyncio
    async def test_delete_missing_user(self, test_client):
        response = await test_client.delete("/api/users/999")

        assert response.status_code == 404
        assert response.json()["message"] == "No user found with this id"

    @pytest.mark.asyncio
    async def test_delete_user(self, test_client, signup):
        user = await signup()

        response = await test_client.delete(f"/api/users/{user['id']}")

        assert response.status_code == 200
        assert response.json() == {"affected_rows": 1}
        assert (await test_client.get(f"/api/users/{user['id']}")).status_code == 404

    @pytest.mark.asyncio
    async def test_deleted_user_is_logged_out(self, test_client, signup, db_session):
        await signup()
        post = (
            await test_client.post(
                "/api/posts",
                json={"title": "Still here", "post_url": "https://example.com/still-here"},
            )
        ).json()
        reader = await signup(username="reader", email="reader@gmail.com")

        response = await test_client.delete(f"/api/users/{reader['id']}")
        assert response.status_code == 200

        # The client still holds the deleted user's cookie
        upvote = await test_client.put("/api/posts/upvote", json={"post_id": post["id"]})
        assert upvote.status_code == 401
        create = await test_client.post(
            "/api/posts", json={"title": "Ghost post", "post_url": "https://example.com/ghost"}
        )
        assert create.status_code == 401

        owners = [
            r.data["user_id"]
            for r in (await db_session.execute(select(SessionRecord))).scalars().all()
        ]
        assert reader["id"] not in owners

    @pytest.mark.asyncio
    async def test_delete_user_cascades(self, test_client, signup, db_session):
        author = await signup()
        post = (
            await test_client.post(
                "/api/posts",
                json={"title": "Cascade me", "post_url": "https://example.com/cascade"},
            )
        ).json()

        # A second user comments on and votes for the author's post
        await signup(username="reader", email="reader@gmail.com")
        await test_client.post(
            "/api/comments", json={"comment_text": "Interesting", "post_id": post["id"]}
        )
        await test_client.put("/api/posts/upvote", json={"post_id": post["id"]})

        response = await test_client.delete(f"/api/users/{author['id']}")
        assert response.status_code == 200

        for model in (Post, Comment, Vote):
            count = (await db_session.execute(select(func.count()).select_from(model))).scalar_one()
            assert count == 0, model.__name__

        users = (await test_client.get("/api/users")).json()
        assert [u["username"] for u in users] == ["reader"]


class TestDocumentedExamples:

    @pytest.mark.asyncio
    async def test_signup_example(self, test_client):
        response = await test_client.post(
            "/api/users", json={"username": "alice", "email": "a@x.com", "password": "pass1"}
        )

        assert response.status_code == 200
        body = response.json()
        assert set(body) == {"id", "username", "email"}
        assert body["username"] == "alice"
        assert body["email"] == "a@x.com"
        assert "sid" in response.cookies
