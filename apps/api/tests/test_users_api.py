"""User account API tests."""

from __future__ import annotations

import os
import unittest

from fastapi.testclient import TestClient

from app.core.config import get_settings
from app.main import create_app


class _SettingsEnvCase(unittest.TestCase):
    _env_keys = ("SERVICE_BACKEND", "SUPABASE_URL", "SUPABASE_ANON_KEY", "APP_ENV")

    def setUp(self) -> None:
        self._old_env = {k: os.environ.get(k) for k in self._env_keys}
        os.environ["SERVICE_BACKEND"] = "memory"
        os.environ["SUPABASE_URL"] = "https://project.supabase.co"
        os.environ["SUPABASE_ANON_KEY"] = "test-anon-key"
        os.environ["APP_ENV"] = "test"
        get_settings.cache_clear()
        self.app = create_app()
        self.client = TestClient(self.app)
        self.backend = self.app.state.backend

    def tearDown(self) -> None:
        for key, value in self._old_env.items():
            if value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = value
        get_settings.cache_clear()


def _bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


class RegistrationAndLoginTests(_SettingsEnvCase):
    def test_register_returns_user_token_and_session(self) -> None:
        response = self.client.post(
            "/api/user/register",
            json={"email": "a@b.com", "password": "secret1", "full_name": "Ada"},
        )

        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body["message"], "User registered successfully")
        self.assertEqual(body["user"]["email"], "a@b.com")
        self.assertTrue(body["token"])
        self.assertEqual(body["session"]["access_token"], body["token"])
        self.assertFalse(body["requires_email_confirmation"])

        profile = self.backend.tables.rows("users")
        self.assertEqual(len(profile), 1)
        self.assertEqual(profile[0]["full_name"], "Ada")
        self.assertEqual(profile[0]["role"], "user")

    def test_duplicate_registration_is_a_conflict_without_side_effect(self) -> None:
        payload = {"email": "a@b.com", "password": "secret1"}
        self.assertEqual(self.client.post("/api/user/register", json=payload).status_code, 201)
        writes_before = self.backend.tables.write_count

        response = self.client.post("/api/user/register", json=payload)

        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()["code"], "EMAIL_ALREADY_EXISTS")
        self.assertIn("already exists", response.json()["error"])
        self.assertEqual(len(self.backend.tables.rows("users")), 1)
        self.assertEqual(self.backend.tables.write_count, writes_before)

    def test_register_validation_reports_every_field(self) -> None:
        response = self.client.post("/api/user/register", json={"email": "not-an-email", "password": "123"})

        self.assertEqual(response.status_code, 422)
        body = response.json()
        self.assertEqual(body["error"], "Validation failed")
        self.assertEqual(body["code"], "VALIDATION_ERROR")
        self.assertIn("body.email", body["errors"])
        self.assertIn("body.password", body["errors"])
        self.assertEqual(self.backend.tables.write_count, 0)

    def test_login_with_valid_and_invalid_credentials(self) -> None:
        self.client.post("/api/user/register", json={"email": "a@b.com", "password": "secret1"})

        ok = self.client.post("/api/user/login", json={"email": "a@b.com", "password": "secret1"})
        wrong = self.client.post("/api/user/login", json={"email": "a@b.com", "password": "wrong-password"})
        unknown = self.client.post("/api/user/login", json={"email": "x@y.com", "password": "secret1"})

        self.assertEqual(ok.status_code, 200)
        self.assertEqual(ok.json()["message"], "Login successful")
        self.assertTrue(ok.json()["token"])
        for response in (wrong, unknown):
            self.assertEqual(response.status_code, 401)
            self.assertEqual(response.json()["code"], "INVALID_CREDENTIALS")
            self.assertEqual(response.json()["error"], "Invalid email or password")

    def test_logout_revokes_session_token(self) -> None:
        self.client.post("/api/user/register", json={"email": "a@b.com", "password": "secret1"})
        token = self.client.post("/api/user/login", json={"email": "a@b.com", "password": "secret1"}).json()["token"]
        self.assertEqual(self.client.get("/api/user/profile", headers=_bearer(token)).status_code, 200)

        response = self.client.post("/api/user/logout", headers=_bearer(token))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"success": True, "message": "Logout successful"})
        after = self.client.get("/api/user/profile", headers=_bearer(token))
        self.assertEqual(after.status_code, 401)
        self.assertEqual(after.json()["code"], "INVALID_TOKEN")


class ProfileTests(_SettingsEnvCase):
    def setUp(self) -> None:
        super().setUp()
        self.backend.identity.create_identity("reader@example.com", full_name="Reader", user_id="user-1")

    def test_session_reports_active_user(self) -> None:
        response = self.client.get("/api/user/session", headers=_bearer("test:user-1"))

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["active"])
        self.assertEqual(body["user"]["email"], "reader@example.com")
        self.assertEqual(body["session"], {"user_id": "user-1", "email": "reader@example.com"})

    def test_update_profile_changes_only_sent_fields(self) -> None:
        response = self.client.put(
            "/api/user/profile",
            headers=_bearer("test:user-1"),
            json={"bio": "Writes about databases"},
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["message"], "Profile updated successfully")
        self.assertEqual(response.json()["user"]["bio"], "Writes about databases")
        self.assertEqual(response.json()["user"]["full_name"], "Reader")

    def test_empty_profile_update_is_rejected_without_writes(self) -> None:
        writes_before = self.backend.tables.write_count

        response = self.client.put("/api/user/profile", headers=_bearer("test:user-1"), json={})

        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()["errors"], {"body": ["At least one field must be provided for update"]})
        self.assertEqual(self.backend.tables.write_count, writes_before)

    def test_profile_update_cannot_change_role(self) -> None:
        response = self.client.put(
            "/api/user/profile",
            headers=_bearer("test:user-1"),
            json={"full_name": "Reader", "role": "admin"},
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["user"]["role"], "user")

    def test_delete_profile_removes_identity_and_profile(self) -> None:
        response = self.client.delete("/api/user/profile", headers=_bearer("test:user-1"))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["message"], "Account deleted successfully")
        self.assertEqual(response.json()["deleted_user"]["id"], "user-1")
        self.assertEqual(self.backend.tables.rows("users"), [])
        self.assertEqual(self.client.get("/api/user/profile", headers=_bearer("test:user-1")).status_code, 401)

    def test_public_listing_exposes_only_public_columns(self) -> None:
        response = self.client.get("/api/user/public/all")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["total"], 1)
        self.assertEqual(set(response.json()["users"][0]), {"id", "full_name", "avatar_url"})


class UserAdministrationTests(_SettingsEnvCase):
    def setUp(self) -> None:
        super().setUp()
        identity = self.backend.identity
        identity.create_identity("one@example.com", user_id="user-1")
        identity.create_identity("two@example.com", user_id="user-2")
        identity.create_identity("mod@example.com", role="moderator", user_id="mod-1")
        identity.create_identity("admin@example.com", role="admin", user_id="admin-1")

    def test_listing_users_requires_moderator(self) -> None:
        user = self.client.get("/api/user", headers=_bearer("test:user-1"))
        moderator = self.client.get("/api/user", headers=_bearer("test:mod-1"))

        self.assertEqual(user.status_code, 403)
        self.assertEqual(moderator.status_code, 200)
        self.assertEqual(moderator.json()["total"], 4)

    def test_get_user_by_id(self) -> None:
        found = self.client.get("/api/user/user-2", headers=_bearer("test:user-1"))
        missing = self.client.get("/api/user/nobody", headers=_bearer("test:user-1"))

        self.assertEqual(found.status_code, 200)
        self.assertEqual(found.json()["user"]["email"], "two@example.com")
        self.assertEqual(missing.status_code, 404)
        self.assertEqual(missing.json()["error"], "User not found")

    def test_user_cannot_update_someone_else(self) -> None:
        response = self.client.put("/api/user/user-2", headers=_bearer("test:user-1"), json={"full_name": "Hijack"})

        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["code"], "NOT_RESOURCE_OWNER")

    def test_role_change_requires_admin(self) -> None:
        own = self.client.put("/api/user/user-1", headers=_bearer("test:user-1"), json={"role": "admin"})
        admin = self.client.put("/api/user/user-1", headers=_bearer("test:admin-1"), json={"role": "moderator"})

        self.assertEqual(own.status_code, 403)
        self.assertEqual(own.json()["error"], "This action requires admin privileges")
        self.assertEqual(admin.status_code, 200)
        self.assertEqual(admin.json()["user"]["role"], "moderator")

    def test_unknown_role_is_a_validation_error(self) -> None:
        response = self.client.put("/api/user/user-1", headers=_bearer("test:admin-1"), json={"role": "owner"})

        self.assertEqual(response.status_code, 422)
        self.assertIn("body.role", response.json()["errors"])

    def test_delete_user_requires_admin(self) -> None:
        moderator = self.client.delete("/api/user/user-2", headers=_bearer("test:mod-1"))
        admin = self.client.delete("/api/user/user-2", headers=_bearer("test:admin-1"))

        self.assertEqual(moderator.status_code, 403)
        self.assertEqual(admin.status_code, 200)
        self.assertEqual(admin.json()["deleted_user"]["email"], "two@example.com")
        self.assertNotIn("user-2", [row["id"] for row in self.backend.tables.rows("users")])
        self.assertEqual(self.client.get("/api/user/profile", headers=_bearer("test:user-2")).status_code, 401)


if __name__ == "__main__":
    unittest.main()
