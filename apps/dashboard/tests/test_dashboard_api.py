"""HTTP surface tests for the dashboard app with the in-memory backend."""

from __future__ import annotations

import json
import os
import unittest

from fastapi.testclient import TestClient

from managersol.adapters.storage.cookie_storage import encode_cookie_value
from managersol.core.config import get_settings
from managersol.main import create_app
from managersol.routes.dependencies import get_board_service
from managersol.services.session import AUTH_USER_KEY


class _CapturingBoardService:
    def __init__(self) -> None:
        self.calls: list[str] = []

    def snapshot(self):
        self.calls.append("snapshot")
        raise AssertionError("handler must not run without a session")


def _deleted(response, name: str) -> bool:
    return any(
        header.startswith(f"{name}=") and "Max-Age=0" in header
        for header in response.headers.get_list("set-cookie")
    )


class _DashboardApiCase(unittest.TestCase):
    _env_keys = ("MANAGERSOL_BACKEND_PROVIDER",)

    def setUp(self) -> None:
        self._old_env = {k: os.environ.get(k) for k in self._env_keys}
        os.environ["MANAGERSOL_BACKEND_PROVIDER"] = "memory"
        get_settings.cache_clear()

        self.app = create_app()
        self.store = self.app.state.backend_store
        self.client = TestClient(self.app, follow_redirects=False)

        self.admin = self.store.create_user(email="admin@example.com", password="pw", role="admin", company_id="c-1")
        self.super_admin = self.store.create_user(email="root@example.com", password="pw", role="superAdmin")
        self.plain_user = self.store.create_user(email="user@example.com", password="pw", role="user")

        self.group = self.store.create_task_group_model("Onboarding")
        elements = [self.store.create_task_element(title) for title in ("A", "B", "C", "D")]
        self.memberships = [
            self.store.create_group_element(
                task_group_model_id=self.group.id,
                task_element_id=element.id,
                title=element.title,
                description=None,
                mandatory=False,
                column_number=1,
            )
            for element in elements
        ]

    def tearDown(self) -> None:
        self.client.close()
        self.app.dependency_overrides.clear()
        for key, value in self._old_env.items():
            if value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = value
        get_settings.cache_clear()

    def _login(self, email: str) -> None:
        response = self.client.post("/auth/login", json={"email": email, "password": "pw"})
        self.assertEqual(response.status_code, 303)

    def _forge_session(self, role: str) -> None:
        record = json.dumps({"id": "forged-1", "role": role, "token": "forged-token"})
        self.client.cookies.set(AUTH_USER_KEY, encode_cookie_value(record))


class LandingAndLoginTests(_DashboardApiCase):
    def test_landing_without_session_renders_login(self) -> None:
        response = self.client.get("/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"view": "Login"})

    def test_malformed_session_cookie_reads_as_no_session(self) -> None:
        self.client.cookies.set(AUTH_USER_KEY, "not-a-session")
        response = self.client.get("/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"view": "Login"})

    def test_deeply_nested_session_cookie_reads_as_no_session(self) -> None:
        self.client.cookies.set(AUTH_USER_KEY, encode_cookie_value("[" * 3000))

        landing = self.client.get("/")
        guarded = self.client.get("/dashboard")

        self.assertEqual(landing.status_code, 200)
        self.assertEqual(landing.json(), {"view": "Login"})
        self.assertEqual(guarded.status_code, 303)
        self.assertEqual(guarded.headers["location"], "/")

    def test_login_sets_session_and_redirects_to_dashboard(self) -> None:
        response = self.client.post("/auth/login", json={"email": "admin@example.com", "password": "pw"})

        self.assertEqual(response.status_code, 303)
        self.assertEqual(response.headers["location"], "/dashboard")
        self.assertIn(AUTH_USER_KEY, self.client.cookies)
        self.assertIn("companyId", self.client.cookies)

        landing = self.client.get("/")
        self.assertEqual(landing.status_code, 303)
        self.assertEqual(landing.headers["location"], "/dashboard")

    def test_login_with_bad_credentials_is_rejected(self) -> None:
        response = self.client.post("/auth/login", json={"email": "admin@example.com", "password": "nope"})

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["code"], "LOGIN_FAILED")
        self.assertNotIn(AUTH_USER_KEY, self.client.cookies)

    def test_login_without_password_is_rejected_as_login_failure(self) -> None:
        response = self.client.post("/auth/login", json={"email": "admin@example.com"})

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"code": "LOGIN_FAILED", "message": "Email and password are required"})

    def test_user_role_login_is_refused(self) -> None:
        response = self.client.post("/auth/login", json={"email": "user@example.com", "password": "pw"})

        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["code"], "ACCESS_DENIED")
        self.assertNotIn(AUTH_USER_KEY, self.client.cookies)

    def test_logout_clears_session(self) -> None:
        self._login("admin@example.com")

        response = self.client.post("/auth/logout")

        self.assertEqual(response.status_code, 303)
        self.assertEqual(response.headers["location"], "/")
        self.assertTrue(_deleted(response, AUTH_USER_KEY))
        follow_up = self.client.get("/dashboard")
        self.assertEqual(follow_up.status_code, 303)
        self.assertEqual(follow_up.headers["location"], "/")


class SplashTests(_DashboardApiCase):
    def test_admin_roles_are_sent_to_dashboard(self) -> None:
        for email in ("admin@example.com", "root@example.com"):
            with self.subTest(email=email):
                self.client.cookies.clear()
                self._login(email)

                response = self.client.get("/splash")

                self.assertEqual(response.status_code, 200)
                self.assertEqual(response.json(), {"view": "Splash", "target": "/dashboard", "delay_seconds": 4})

    def test_user_role_is_sent_to_profile(self) -> None:
        self._forge_session("user")

        response = self.client.get("/splash")

        self.assertEqual(response.json()["target"], "/profile")

    def test_missing_or_malformed_session_is_sent_to_login(self) -> None:
        self.assertEqual(self.client.get("/splash").json()["target"], "/")

        self.client.cookies.set(AUTH_USER_KEY, encode_cookie_value("{\"id\": 1"))
        self.assertEqual(self.client.get("/splash").json()["target"], "/")

    def test_skip_redirects_immediately(self) -> None:
        self._forge_session("user")

        response = self.client.get("/splash/skip")

        self.assertEqual(response.status_code, 303)
        self.assertEqual(response.headers["location"], "/profile")

    def test_skip_without_session_redirects_to_login(self) -> None:
        response = self.client.get("/splash/skip")

        self.assertEqual(response.status_code, 303)
        self.assertEqual(response.headers["location"], "/")


class ShellTests(_DashboardApiCase):
    def test_dashboard_variant_follows_role(self) -> None:
        self._login("root@example.com")
        response = self.client.get("/dashboard")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"view": "SuperAdminDashboard"})

    def test_admin_shell_carries_sidebar_and_company(self) -> None:
        self._login("admin@example.com")

        response = self.client.get("/shell")

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["sidebar"], "AdminSidebar")
        self.assertEqual(body["company_id"], "c-1")
        self.assertEqual(body["principal"]["role"], "admin")
        self.assertNotIn("token", body["principal"])

    def test_profile_is_open_to_any_session(self) -> None:
        self._login("root@example.com")
        response = self.client.get("/profile")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["email"], "root@example.com")

    def test_protected_routes_redirect_without_session(self) -> None:
        for path in ("/shell", "/dashboard", "/profile", "/task-management/board"):
            with self.subTest(path=path):
                response = self.client.get(path)
                self.assertEqual(response.status_code, 303)
                self.assertEqual(response.headers["location"], "/")

    def test_user_role_on_dashboard_ends_session_instead_of_looping(self) -> None:
        self._forge_session("user")

        response = self.client.get("/dashboard")

        self.assertEqual(response.status_code, 303)
        self.assertEqual(response.headers["location"], "/")
        self.assertTrue(_deleted(response, AUTH_USER_KEY))


class BoardApiTests(_DashboardApiCase):
    def _board(self, path: str = "") -> str:
        return f"/task-management/board{path}"

    def _load(self) -> None:
        self._login("admin@example.com")
        response = self.client.post(self._board(f"/groups/{self.group.id}/select"))
        self.assertEqual(response.status_code, 200)

    def _titles(self) -> list[str]:
        return [item["title"] for item in self.client.get(self._board()).json()["items"]]

    def test_handler_does_not_run_without_session(self) -> None:
        capturing = _CapturingBoardService()
        self.app.dependency_overrides[get_board_service] = lambda: capturing

        response = self.client.get(self._board())

        self.assertEqual(response.status_code, 303)
        self.assertEqual(response.headers["location"], "/")
        self.assertEqual(capturing.calls, [])

    def test_super_admin_is_redirected_to_dashboard(self) -> None:
        self._login("root@example.com")
        response = self.client.get(self._board())
        self.assertEqual(response.status_code, 303)
        self.assertEqual(response.headers["location"], "/dashboard")

    def test_group_search(self) -> None:
        self._login("admin@example.com")
        response = self.client.get(self._board("/groups"), params={"search": "onboard"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual([group["title"] for group in response.json()], ["Onboarding"])

    def test_drag_and_drop_commits_order(self) -> None:
        self._load()
        first, _, third, _ = self.memberships

        self.assertEqual(self.client.post(self._board("/drag/start"), json={"item_id": first.id}).status_code, 200)
        over = self.client.post(self._board("/drag/over"), json={"item_id": third.id})
        self.assertEqual([item["title"] for item in over.json()["items"]], ["B", "C", "A", "D"])

        response = self.client.post(self._board("/drag/end"), json={"dropped": True})

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["notification"]["title"], "Order saved")
        self.assertEqual(body["board"]["state"], "LOADED")
        self.assertEqual([record.title for record in self.store.list_group_elements(self.group.id)], ["B", "C", "A", "D"])

    def test_commit_failure_is_reported_and_local_order_retained(self) -> None:
        self._load()
        first, _, third, _ = self.memberships
        self.client.post(self._board("/drag/start"), json={"item_id": first.id})
        self.client.post(self._board("/drag/over"), json={"item_id": third.id})
        self.store.reorder_failure_message = "Failed to persist order"

        response = self.client.post(self._board("/drag/end"), json={"dropped": True})

        self.assertEqual(response.status_code, 502)
        self.assertEqual(
            response.json(),
            {"code": "REORDER_COMMIT_FAILED", "message": "Failed to persist order", "details": {"skipped": 0}},
        )
        self.assertEqual(self._titles(), ["B", "C", "A", "D"])

    def test_malformed_drag_payload_is_validation_error(self) -> None:
        self._load()

        response = self.client.post(self._board("/drag/start"), json={})

        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()["code"], "VALIDATION_ERROR")

    def test_drag_over_without_drag_is_transition_conflict(self) -> None:
        self._load()

        response = self.client.post(self._board("/drag/over"), json={"item_id": self.memberships[1].id})

        self.assertEqual(response.status_code, 409)
        body = response.json()
        self.assertEqual(body["code"], "BOARD_TRANSITION_INVALID")
        self.assertEqual(body["details"]["current_state"], "LOADED")
        self.assertEqual(body["details"]["attempted_state"], "DRAGGING")

    def test_commit_without_group_is_conflict(self) -> None:
        self._login("admin@example.com")
        response = self.client.post(self._board("/commit"))
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()["message"], "Please select a task group first.")

    def test_item_details_are_suppressed_while_dragging(self) -> None:
        self._load()
        item_id = self.memberships[0].id
        self.assertEqual(self.client.get(self._board(f"/items/{item_id}")).json()["title"], "A")

        self.client.post(self._board("/drag/start"), json={"item_id": item_id})
        response = self.client.get(self._board(f"/items/{item_id}"))

        self.assertEqual(response.status_code, 204)

    def test_add_item_returns_created(self) -> None:
        self._load()
        element = self.store.create_task_element("E")

        response = self.client.post(self._board("/items"), json={"element_id": element.id, "mandatory": True})

        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body["notification"]["title"], "Added")
        self.assertEqual(body["board"]["items"][-1]["task_element_id"], element.id)

    def test_revoked_backend_session_logs_out(self) -> None:
        self._load()
        self.store.sessions.clear()

        response = self.client.get(self._board("/groups"))

        self.assertEqual(response.status_code, 303)
        self.assertEqual(response.headers["location"], "/")
        self.assertTrue(_deleted(response, AUTH_USER_KEY))


if __name__ == "__main__":
    unittest.main()
