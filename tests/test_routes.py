"""HTTP tests through the FastAPI app: session gate, login/register/logout, post CRUD and public pages."""

import unittest
from datetime import UTC, datetime, timedelta
from unittest.mock import patch

from fastapi.testclient import TestClient

from app.core.config import get_settings
from app.core.database import SessionLocal
from app.core.security import SessionTokenSigner
from app.main import app
from app.models import Post
from app.services.auth import register_user

ADMIN_GET_ROUTES = ["/dashboard", "/adminHome", "/add-post", "/edit-post/1"]
PUBLIC_GET_ROUTES = ["/", "/?page=abc", "/about", "/contact", "/admin", "/register", "/health"]
# Larger than any signed 64-bit integer a database column or OFFSET accepts.
OVERSIZED_NUMBER = "99999999999999999999"


def _create_user(username: str = "editor", password: str = "password123") -> int:
    db = SessionLocal()
    try:
        return register_user(db, username, password).id
    finally:
        db.close()


def _create_post(title: str, body: str = "Body", minutes: int = 0) -> int:
    created = datetime(2026, 1, 1, tzinfo=UTC) + timedelta(minutes=minutes)
    db = SessionLocal()
    try:
        post = Post(title=title, body=body, created_at=created, updated_at=created)
        db.add(post)
        db.commit()
        return post.id
    finally:
        db.close()


def _fetch_post(post_id: int) -> Post | None:
    db = SessionLocal()
    try:
        return db.get(Post, post_id)
    finally:
        db.close()


def _post_count() -> int:
    db = SessionLocal()
    try:
        return db.query(Post).count()
    finally:
        db.close()


class RouteTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.client = TestClient(app)
        self.settings = get_settings()
        self.cookie_name = self.settings.SESSION_COOKIE_NAME

    def login(self, username: str = "editor", password: str = "password123"):
        return self.client.post(
            "/admin",
            data={"username": username, "password": password},
            follow_redirects=False,
        )


class TestSessionGate(RouteTestCase):
    """Admin routes answer 401 before doing anything unless a valid session cookie is sent."""

    def test_no_cookie(self) -> None:
        _create_post("existing")
        for path in ADMIN_GET_ROUTES:
            with self.subTest(path=path):
                response = self.client.get(path, follow_redirects=False)
                self.assertEqual(response.status_code, 401)
                self.assertEqual(response.json(), {"detail": "Unauthorized"})

    def test_tampered_cookie_has_no_side_effect(self) -> None:
        user_id = _create_user()
        post_id = _create_post("Keep me")
        token = SessionTokenSigner.from_settings(self.settings).issue(user_id)
        tampered = token[:-6] + ("AAAAA" if not token[-6:-1] == "AAAAA" else "BBBBB") + token[-1]
        self.client.cookies.set(self.cookie_name, tampered)

        self.assertEqual(
            self.client.post("/add-post", data={"title": "x", "body": "y"}).status_code, 401
        )
        self.assertEqual(self.client.delete(f"/delete-post/{post_id}").status_code, 401)
        self.assertEqual(
            self.client.put(f"/edit-post/{post_id}", data={"title": "x", "body": "y"}).status_code,
            401,
        )
        self.assertEqual(_post_count(), 1)
        self.assertEqual(_fetch_post(post_id).title, "Keep me")

    def test_token_signed_with_another_secret(self) -> None:
        user_id = _create_user()
        self.client.cookies.set(self.cookie_name, SessionTokenSigner("not-the-secret").issue(user_id))
        self.assertEqual(self.client.get("/dashboard").status_code, 401)

    def test_expired_token(self) -> None:
        user_id = _create_user()
        signer = SessionTokenSigner.from_settings(self.settings)
        expired = signer.issue(user_id, now=datetime.now(UTC) - timedelta(days=1))
        self.client.cookies.set(self.cookie_name, expired)
        self.assertEqual(self.client.get("/dashboard").status_code, 401)

    def test_token_for_unknown_user(self) -> None:
        signer = SessionTokenSigner.from_settings(self.settings)
        self.client.cookies.set(self.cookie_name, signer.issue(4242))
        self.assertEqual(self.client.get("/dashboard").status_code, 401)

    def test_valid_token(self) -> None:
        user_id = _create_user()
        signer = SessionTokenSigner.from_settings(self.settings)
        self.client.cookies.set(self.cookie_name, signer.issue(user_id))
        response = self.client.get("/dashboard")
        self.assertEqual(response.status_code, 200)
        self.assertIn("editor", response.text)

    def test_public_routes_need_no_cookie(self) -> None:
        post_id = _create_post("Public post")
        for path in PUBLIC_GET_ROUTES + [f"/post/{post_id}"]:
            with self.subTest(path=path):
                self.assertEqual(self.client.get(path).status_code, 200)
        self.assertEqual(self.client.post("/search", data={"searchTerm": "public"}).status_code, 200)


class TestLogin(RouteTestCase):
    def setUp(self) -> None:
        super().setUp()
        _create_user()

    def test_success_sets_http_only_cookie_and_redirects(self) -> None:
        response = self.login()
        self.assertEqual(response.status_code, 303)
        self.assertEqual(response.headers["location"], "/dashboard")
        set_cookie = response.headers["set-cookie"].lower()
        self.assertIn(f"{self.cookie_name}=", set_cookie)
        self.assertIn("httponly", set_cookie)
        self.assertEqual(self.client.get("/dashboard").status_code, 200)

    def test_bad_credentials_are_indistinguishable(self) -> None:
        wrong_password = self.login(password="not-the-password")
        unknown_user = self.login(username="nobody")
        for response in (wrong_password, unknown_user):
            self.assertEqual(response.status_code, 401)
            self.assertIn("Invalid credentials.", response.text)
            self.assertNotIn("set-cookie", response.headers)
        self.assertEqual(wrong_password.text, unknown_user.text)

    def test_empty_form(self) -> None:
        response = self.client.post("/admin", data={}, follow_redirects=False)
        self.assertEqual(response.status_code, 401)
        self.assertIn("Invalid credentials.", response.text)

    def test_logout_clears_cookie_and_revokes_token(self) -> None:
        self.login()
        token = self.client.cookies.get(self.cookie_name)
        self.assertTrue(token)

        response = self.client.get("/logout", follow_redirects=False)
        self.assertEqual(response.status_code, 303)
        self.assertEqual(response.headers["location"], "/")
        self.assertIsNone(self.client.cookies.get(self.cookie_name))

        replay = TestClient(app)
        replay.cookies.set(self.cookie_name, token)
        self.assertEqual(replay.get("/dashboard").status_code, 401)

    def test_logout_without_session(self) -> None:
        response = self.client.get("/logout", follow_redirects=False)
        self.assertEqual(response.status_code, 303)


class TestRegister(RouteTestCase):
    def register(self, username: str, password: str):
        return self.client.post("/register", data={"username": username, "password": password})

    def test_created(self) -> None:
        response = self.register("newbie", "password123")
        self.assertEqual(response.status_code, 201)
        self.assertIn("User successfully created.", response.text)
        self.assertEqual(self.login("newbie", "password123").status_code, 303)

    def test_duplicate_username_conflict(self) -> None:
        self.register("newbie", "password123")
        response = self.register("newbie", "other-password")
        self.assertEqual(response.status_code, 409)
        self.assertIn("User already in use.", response.text)
        self.assertEqual(self.login("newbie", "password123").status_code, 303)
        self.assertEqual(self.login("newbie", "other-password").status_code, 401)

    def test_invalid_input(self) -> None:
        self.assertEqual(self.register("newbie", "short").status_code, 422)
        self.assertEqual(self.register("   ", "password123").status_code, 422)


class TestPostManagement(RouteTestCase):
    def setUp(self) -> None:
        super().setUp()
        _create_user()
        self.login()

    def test_add_post(self) -> None:
        response = self.client.post(
            "/add-post", data={"title": "Hello", "body": "World"}, follow_redirects=False
        )
        self.assertEqual(response.status_code, 303)
        self.assertEqual(response.headers["location"], "/dashboard")
        self.assertEqual(_post_count(), 1)
        self.assertIn("Hello", self.client.get("/dashboard").text)

    def test_add_post_requires_title_and_body(self) -> None:
        response = self.client.post("/add-post", data={"title": "  ", "body": "World"})
        self.assertEqual(response.status_code, 422)
        self.assertEqual(_post_count(), 0)

    def test_edit_post(self) -> None:
        post_id = _create_post("Before", body="Old")
        created_at = _fetch_post(post_id).created_at

        response = self.client.put(
            f"/edit-post/{post_id}",
            data={"title": "After", "body": "New"},
            follow_redirects=False,
        )
        self.assertEqual(response.status_code, 303)
        self.assertEqual(response.headers["location"], f"/edit-post/{post_id}")

        post = _fetch_post(post_id)
        self.assertEqual((post.title, post.body), ("After", "New"))
        self.assertEqual(post.created_at, created_at)
        self.assertGreater(post.updated_at, created_at)

    def test_edit_via_method_override(self) -> None:
        post_id = _create_post("Before")
        response = self.client.post(
            f"/edit-post/{post_id}?_method=PUT",
            data={"title": "Overridden", "body": "Body"},
            follow_redirects=False,
        )
        self.assertEqual(response.status_code, 303)
        self.assertEqual(_fetch_post(post_id).title, "Overridden")

    def test_edit_missing_post(self) -> None:
        self.assertEqual(self.client.get("/edit-post/999").status_code, 404)
        response = self.client.put("/edit-post/999", data={"title": "a", "body": "b"})
        self.assertEqual(response.status_code, 404)

    def test_delete_post(self) -> None:
        post_id = _create_post("Doomed")
        response = self.client.delete(f"/delete-post/{post_id}", follow_redirects=False)
        self.assertEqual(response.status_code, 303)
        self.assertEqual(response.headers["location"], "/dashboard")
        self.assertIsNone(_fetch_post(post_id))
        self.assertEqual(self.client.get(f"/post/{post_id}").status_code, 404)

    def test_delete_via_method_override(self) -> None:
        post_id = _create_post("Doomed")
        response = self.client.post(f"/delete-post/{post_id}?_method=DELETE", follow_redirects=False)
        self.assertEqual(response.status_code, 303)
        self.assertIsNone(_fetch_post(post_id))

    def test_delete_missing_post_still_redirects(self) -> None:
        response = self.client.delete("/delete-post/999", follow_redirects=False)
        self.assertEqual(response.status_code, 303)

    def test_out_of_range_numbers_are_not_server_errors(self) -> None:
        post_id = _create_post("Survivor")
        self.assertEqual(self.client.get(f"/adminHome?page={OVERSIZED_NUMBER}").status_code, 200)
        self.assertEqual(self.client.get(f"/edit-post/{OVERSIZED_NUMBER}").status_code, 404)
        response = self.client.put(
            f"/edit-post/{OVERSIZED_NUMBER}", data={"title": "a", "body": "b"}
        )
        self.assertEqual(response.status_code, 404)
        response = self.client.delete(f"/delete-post/{OVERSIZED_NUMBER}", follow_redirects=False)
        self.assertEqual(response.status_code, 303)
        self.assertEqual(_fetch_post(post_id).title, "Survivor")


class TestPublicPages(RouteTestCase):
    def test_home_is_paginated_newest_first(self) -> None:
        for i in range(12):
            _create_post(f"Post number {i:02d}", minutes=i)

        first = self.client.get("/")
        self.assertIn("Post number 11", first.text)
        self.assertNotIn("Post number 06", first.text)
        self.assertIn('href="/?page=2"', first.text)
        self.assertLess(first.text.index("Post number 11"), first.text.index("Post number 10"))

        last = self.client.get("/?page=3")
        self.assertIn("Post number 01", last.text)
        self.assertIn("Post number 00", last.text)
        self.assertNotIn("Post number 02", last.text)
        self.assertNotIn('href="/?page=4"', last.text)
        self.assertIn('href="/?page=2"', last.text)

    def test_non_numeric_page_is_first_page(self) -> None:
        for i in range(6):
            _create_post(f"Post number {i:02d}", minutes=i)
        self.assertIn("Post number 05", self.client.get("/?page=two").text)

    def test_page_too_large_for_an_offset_is_first_page(self) -> None:
        _create_post("Only post")
        response = self.client.get(f"/?page={OVERSIZED_NUMBER}")
        self.assertEqual(response.status_code, 200)
        self.assertIn("Only post", response.text)

    def test_page_past_the_end_links_to_the_last_page(self) -> None:
        _create_post("Only post")
        response = self.client.get("/?page=4")
        self.assertEqual(response.status_code, 200)
        self.assertNotIn("Only post", response.text)
        self.assertIn('href="/?page=1"', response.text)
        self.assertNotIn('href="/?page=3"', response.text)

    def test_view_post(self) -> None:
        post_id = _create_post("A title", body="A body")
        response = self.client.get(f"/post/{post_id}")
        self.assertEqual(response.status_code, 200)
        self.assertIn("A body", response.text)

    def test_missing_post(self) -> None:
        self.assertEqual(self.client.get("/post/999").status_code, 404)
        self.assertEqual(self.client.get(f"/post/{OVERSIZED_NUMBER}").status_code, 404)
        self.assertEqual(self.client.get("/post/0").status_code, 404)

    def test_search(self) -> None:
        _create_post("Runtime notes", body="Why NodeJS event loops matter")
        _create_post("Other", body="Nothing to see")
        response = self.client.post("/search", data={"searchTerm": "node.js"})
        self.assertEqual(response.status_code, 200)
        self.assertIn("Runtime notes", response.text)
        self.assertNotIn("Other", response.text)

    def test_health(self) -> None:
        body = self.client.get("/health").json()
        self.assertEqual(body["status"], "ok")
        self.assertEqual(body["database"], "connected")
        self.assertEqual(body["posts"], 0)
        self.assertIsNone(body["last_published_at"])

    def test_health_summarizes_posts(self) -> None:
        _create_post("Older", minutes=1)
        _create_post("Newer", minutes=5)
        body = self.client.get("/health").json()
        self.assertEqual(body["posts"], 2)
        self.assertTrue(body["last_published_at"].startswith("2026-01-01T00:05"))

    def test_health_with_database_down(self) -> None:
        with patch("app.api.health.check_db_connected", return_value=False):
            response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["database"], "disconnected")
        self.assertIsNone(response.json()["posts"])


if __name__ == "__main__":
    unittest.main()
