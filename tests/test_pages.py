"""
Server-rendered page tests: redirects, auth forms and the dashboard
"""

import uuid
from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from app.main import create_app
from app.utils.task_cache import TaskListCache
from tests.conftest import OTHER_ID, OWNER_ID


class TestRedirects:
    def test_dashboard_requires_login(self, client):
        response = client.get("/dashboard")

        assert response.status_code == 307
        assert response.headers["location"] == "/login"

    def test_nested_dashboard_path_requires_login(self, client):
        response = client.post("/dashboard/tasks", data={"title": "x"})
        assert response.status_code == 307
        assert response.headers["location"] == "/login"

    def test_authenticated_user_skips_auth_pages(self, auth_client):
        for path in ("/login", "/signup"):
            response = auth_client.get(path)
            assert response.status_code == 307
            assert response.headers["location"] == "/dashboard"

    def test_landing_page_is_public(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert 'href="/signup"' in response.text

    def test_expired_session_is_refreshed(self, client, settings, supabase_client):
        user = MagicMock(id=OWNER_ID, email="owner@example.com")
        supabase_client.auth.refresh_session.side_effect = None
        supabase_client.auth.refresh_session.return_value = MagicMock(
            user=user,
            session=MagicMock(access_token="new-access", refresh_token="new-refresh",
                              expires_at=None, user=user)
        )
        client.cookies.set(settings.access_token_cookie, "expired")
        client.cookies.set(settings.refresh_token_cookie, "refresh")

        response = client.get("/dashboard")

        assert response.status_code == 200
        assert "new-access" in response.headers.get("set-cookie", "")

    def test_invalid_session_clears_cookies(self, client, settings):
        client.cookies.set(settings.access_token_cookie, "expired")

        response = client.get("/dashboard")

        assert response.status_code == 307
        assert settings.access_token_cookie in response.headers.get("set-cookie", "")


class TestAuthPages:
    def test_login_validation_errors_render(self, client):
        response = client.post("/login", data={"email": "not-an-email", "password": ""})

        assert response.status_code == 400
        assert "Invalid email address" in response.text
        assert "Password is required" in response.text

    def test_login_sets_session_cookies(self, client, settings, supabase_client):
        user = MagicMock(id=OWNER_ID, email="owner@example.com")
        supabase_client.auth.sign_in_with_password.return_value = MagicMock(
            user=user,
            session=MagicMock(access_token="access", refresh_token="refresh", expires_at=None, user=user)
        )

        response = client.post("/login", data={"email": "owner@example.com", "password": "password123"})

        assert response.status_code == 303
        assert response.headers["location"] == "/dashboard"
        assert settings.access_token_cookie in response.headers["set-cookie"]

    def test_login_failure_shows_message(self, client, supabase_client):
        supabase_client.auth.sign_in_with_password.side_effect = Exception("Invalid login credentials")

        response = client.post("/login", data={"email": "owner@example.com", "password": "password123"})

        assert response.status_code == 400
        assert "Invalid login credentials" in response.text

    def test_signup_password_mismatch(self, client, supabase_client):
        response = client.post("/signup", data={
            "email": "owner@example.com",
            "password": "password123",
            "confirm_password": "password321"
        })

        assert response.status_code == 400
        assert "Passwords must match" in response.text
        supabase_client.auth.sign_up.assert_not_called()

    def test_signup_pending_confirmation_notice(self, client, supabase_client):
        supabase_client.auth.sign_up.return_value = MagicMock(
            user=MagicMock(id=OWNER_ID, email="owner@example.com"), session=None
        )

        response = client.post("/signup", data={
            "email": "owner@example.com",
            "password": "password123",
            "confirm_password": "password123"
        })

        assert response.status_code == 200
        assert "Check your email" in response.text

    def test_logout_clears_cookies(self, auth_client, settings):
        response = auth_client.post("/logout")

        assert response.status_code == 303
        assert response.headers["location"] == "/"
        assert settings.access_token_cookie in response.headers["set-cookie"]


class TestDashboard:
    def test_empty_state(self, auth_client):
        response = auth_client.get("/dashboard")

        assert response.status_code == 200
        assert "No tasks yet" in response.text
        assert "Create your first task above to get started" in response.text

    def test_lists_only_own_tasks(self, auth_client, fake_gateway):
        fake_gateway.seed(title="Mine")
        fake_gateway.seed(user_id=OTHER_ID, title="Theirs")

        response = auth_client.get("/dashboard")

        assert "Mine" in response.text
        assert "Theirs" not in response.text
        assert 'aria-label="Delete task: Mine"' in response.text

    def test_create_task(self, auth_client, fake_gateway):
        response = auth_client.post("/dashboard/tasks", data={"title": "Plan sprint", "description": ""})

        assert response.status_code == 303
        assert response.headers["location"] == "/dashboard"
        [row] = fake_gateway.rows.values()
        assert row["title"] == "Plan sprint"
        assert row["description"] is None

    def test_create_task_empty_title_shows_field_error(self, auth_client, fake_gateway):
        response = auth_client.post("/dashboard/tasks", data={"title": "", "description": "kept"})

        assert response.status_code == 400
        assert "Title is required" in response.text
        assert 'aria-invalid="true"' in response.text
        assert "kept" in response.text
        assert fake_gateway.writes == 0

    def test_toggle_task(self, auth_client, fake_gateway):
        row = fake_gateway.seed()

        response = auth_client.post(f"/dashboard/tasks/{row['id']}/toggle")

        assert response.status_code == 303
        assert fake_gateway.rows[row["id"]]["completed"] is True

    def test_toggle_failure_renders_rolled_back_row(self, auth_client, fake_gateway):
        row = fake_gateway.seed()
        fake_gateway.fail_on.add("update")

        response = auth_client.post(f"/dashboard/tasks/{row['id']}/toggle")

        assert response.status_code == 400
        assert "Failed to toggle task" in response.text
        assert "line-through" not in response.text

    def test_delete_task(self, auth_client, fake_gateway):
        row = fake_gateway.seed()

        response = auth_client.post(f"/dashboard/tasks/{row['id']}/delete")

        assert response.status_code == 303
        assert fake_gateway.rows == {}

    def test_unknown_task_is_not_found(self, auth_client):
        response = auth_client.post(f"/dashboard/tasks/{uuid.uuid4()}/delete")

        assert response.status_code == 404
        assert "Task not found" in response.text


class TestRobots:
    def test_indexing_allowed(self, client):
        response = client.get("/robots.txt")

        assert response.text == (
            "User-agent: *\nAllow: /\n\nSitemap: https://app.example.com/sitemap.xml\n"
        )
        assert "x-robots-tag" not in response.headers

    def test_noindex_blocks_crawlers(self, settings, supabase_client):
        noindex = settings.model_copy(update={"robots": "noindex"})
        app = create_app(
            settings=noindex,
            supabase_factory=lambda access_token=None: supabase_client,
            task_cache=TaskListCache()
        )
        client = TestClient(app, follow_redirects=False)

        robots = client.get("/robots.txt")
        landing = client.get("/")

        assert robots.text == "User-agent: *\nDisallow: /\n"
        assert robots.headers["x-robots-tag"] == "noindex, nofollow"
        assert landing.headers["x-robots-tag"] == "noindex, nofollow"
