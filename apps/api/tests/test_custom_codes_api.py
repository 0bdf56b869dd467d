"""Custom code snippet API tests."""

from __future__ import annotations

import os
import unittest

from fastapi.testclient import TestClient

from app.core.config import get_settings
from app.main import create_app

ADMIN = {"Authorization": "Bearer test:admin-1"}


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
        self.backend.identity.create_identity("mod@example.com", role="moderator", user_id="mod-1")
        self.backend.identity.create_identity(
            "admin@example.com",
            full_name="Site Admin",
            role="admin",
            user_id="admin-1",
        )

    def tearDown(self) -> None:
        for key, value in self._old_env.items():
            if value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = value
        get_settings.cache_clear()

    def _create(self, name: str, *, code_type: str = "analytics", position: str = "head", **fields: object) -> dict:
        response = self.client.post(
            "/api/custom-codes",
            headers=ADMIN,
            json={"name": name, "code": "<script></script>", "type": code_type, "position": position, **fields},
        )
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()["code"]


class CustomCodeWriteTests(_SettingsEnvCase):
    def test_moderator_cannot_create(self) -> None:
        response = self.client.post(
            "/api/custom-codes",
            headers={"Authorization": "Bearer test:mod-1"},
            json={"name": "GA", "code": "<script/>", "type": "analytics", "position": "head"},
        )

        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["error"], "This action requires admin privileges")

    def test_admin_create_defaults_author_name(self) -> None:
        created = self._create("Google Analytics")
        named = self._create("Pixel", author_name="Marketing")

        self.assertEqual(created["author_name"], "Site Admin")
        self.assertTrue(created["status"])
        self.assertEqual(named["author_name"], "Marketing")

    def test_invalid_type_and_position_are_rejected(self) -> None:
        response = self.client.post(
            "/api/custom-codes",
            headers=ADMIN,
            json={"name": "GA", "code": "<script/>", "type": "widget", "position": "footer"},
        )

        self.assertEqual(response.status_code, 422)
        self.assertIn("body.type", response.json()["errors"])
        self.assertIn("body.position", response.json()["errors"])

    def test_toggle_flips_status(self) -> None:
        code_id = self._create("GA")["id"]

        disabled = self.client.patch(f"/api/custom-codes/{code_id}/toggle", headers=ADMIN)
        enabled = self.client.patch(f"/api/custom-codes/{code_id}/toggle", headers=ADMIN)

        self.assertEqual(disabled.json()["message"], "Custom code disabled successfully")
        self.assertFalse(disabled.json()["code"]["status"])
        self.assertEqual(enabled.json()["message"], "Custom code enabled successfully")
        self.assertTrue(enabled.json()["code"]["status"])

    def test_update_and_delete(self) -> None:
        code_id = self._create("GA")["id"]

        updated = self.client.put(f"/api/custom-codes/{code_id}", headers=ADMIN, json={"position": "body_end"})
        deleted = self.client.delete(f"/api/custom-codes/{code_id}", headers=ADMIN)
        again = self.client.delete(f"/api/custom-codes/{code_id}", headers=ADMIN)

        self.assertEqual(updated.json()["code"]["position"], "body_end")
        self.assertEqual(deleted.status_code, 200)
        self.assertEqual(deleted.json()["deleted_code"], {"id": code_id, "name": "GA"})
        self.assertEqual(again.status_code, 404)
        self.assertEqual(again.json()["error"], "Custom code not found")


    def test_null_status_is_rejected(self) -> None:
        code_id = self._create("GA")["id"]

        response = self.client.put(f"/api/custom-codes/{code_id}", headers=ADMIN, json={"status": None})

        self.assertEqual(response.status_code, 422)
        self.assertIn("body.status", response.json()["errors"])


class CustomCodeReadTests(_SettingsEnvCase):
    def setUp(self) -> None:
        super().setUp()
        self._create("GA")
        self._create("Search Console", code_type="verification", position="head")
        self._create("Chat widget", code_type="custom", position="body_end")
        self._create("Old pixel", code_type="tracking", position="body_start", status=False)

    def test_active_codes_are_grouped_by_position(self) -> None:
        response = self.client.get("/api/custom-codes/active")

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["total"], 3)
        self.assertEqual(len(body["codes"]["head"]), 2)
        self.assertEqual(body["codes"]["body_start"], [])
        self.assertEqual([code["name"] for code in body["codes"]["body_end"]], ["Chat widget"])

    def test_listing_includes_inactive_codes(self) -> None:
        response = self.client.get("/api/custom-codes").json()

        self.assertEqual(response["total"], 4)

    def test_listing_by_type(self) -> None:
        response = self.client.get("/api/custom-codes/type/verification").json()

        self.assertEqual([code["name"] for code in response["codes"]], ["Search Console"])

    def test_unknown_type_is_a_params_error(self) -> None:
        response = self.client.get("/api/custom-codes/type/widget")

        self.assertEqual(response.status_code, 422)
        self.assertIn("params.code_type", response.json()["errors"])

    def test_get_unknown_code(self) -> None:
        response = self.client.get("/api/custom-codes/missing-id")

        self.assertEqual(response.status_code, 404)


if __name__ == "__main__":
    unittest.main()
