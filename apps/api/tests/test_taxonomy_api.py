"""Category and tag API tests."""

from __future__ import annotations

import os
import unittest

from fastapi.testclient import TestClient

from app.core.config import get_settings
from app.main import create_app

MODERATOR = {"Authorization": "Bearer test:mod-1"}
USER = {"Authorization": "Bearer test:user-1"}


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
        self.backend.identity.create_identity("user@example.com", user_id="user-1")
        self.backend.identity.create_identity("mod@example.com", role="moderator", user_id="mod-1")

    def tearDown(self) -> None:
        for key, value in self._old_env.items():
            if value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = value
        get_settings.cache_clear()


class CategoryTests(_SettingsEnvCase):
    def _create(self, name: str, slug: str, **fields: object):
        return self.client.post("/api/categories", headers=MODERATOR, json={"name": name, "slug": slug, **fields})

    def test_create_and_fetch(self) -> None:
        created = self._create("Engineering", "engineering", description="Build notes")

        self.assertEqual(created.status_code, 201)
        self.assertEqual(created.json()["message"], "Category created successfully")
        self.assertEqual(created.json()["category"]["description"], "Build notes")

        fetched = self.client.get("/api/categories/engineering")
        self.assertEqual(fetched.status_code, 200)
        self.assertEqual(fetched.json()["category"]["name"], "Engineering")

    def test_duplicate_name_or_slug_is_a_conflict(self) -> None:
        self._create("Engineering", "engineering")

        same_slug = self._create("Other", "engineering")
        same_name = self._create("Engineering", "other")

        for response in (same_slug, same_name):
            self.assertEqual(response.status_code, 409)
            self.assertEqual(response.json()["error"], "Category with this name or slug already exists")
        self.assertEqual(len(self.backend.tables.rows("blog_categories")), 1)

    def test_listing_is_ordered_by_name(self) -> None:
        self._create("Zoology", "zoology")
        self._create("Art", "art")

        response = self.client.get("/api/categories").json()

        self.assertEqual(response["total"], 2)
        self.assertEqual([item["name"] for item in response["categories"]], ["Art", "Zoology"])

    def test_user_cannot_write(self) -> None:
        response = self.client.post("/api/categories", headers=USER, json={"name": "Art", "slug": "art"})

        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["code"], "INSUFFICIENT_ROLE")

    def test_update_and_delete(self) -> None:
        self._create("Art", "art")

        updated = self.client.put("/api/categories/art", headers=MODERATOR, json={"description": "Visual"})
        deleted = self.client.delete("/api/categories/art", headers=MODERATOR)

        self.assertEqual(updated.status_code, 200)
        self.assertEqual(updated.json()["category"]["description"], "Visual")
        self.assertEqual(deleted.status_code, 200)
        self.assertEqual(deleted.json()["message"], "Category deleted successfully")
        self.assertEqual(deleted.json()["category"]["slug"], "art")
        self.assertEqual(self.client.get("/api/categories/art").status_code, 404)

    def test_missing_category(self) -> None:
        fetched = self.client.get("/api/categories/ghost")
        deleted = self.client.delete("/api/categories/ghost", headers=MODERATOR)

        for response in (fetched, deleted):
            self.assertEqual(response.status_code, 404)
            self.assertEqual(response.json()["error"], "Category not found")


class TagTests(_SettingsEnvCase):
    def test_tag_lifecycle(self) -> None:
        created = self.client.post("/api/tags", headers=MODERATOR, json={"name": "Python", "slug": "python"})
        listing = self.client.get("/api/tags").json()

        self.assertEqual(created.status_code, 201)
        self.assertEqual(created.json()["tag"]["slug"], "python")
        self.assertEqual(listing["total"], 1)

        deleted = self.client.delete("/api/tags/python", headers=MODERATOR)
        self.assertEqual(deleted.json()["tag"]["name"], "Python")

    def test_user_cannot_create_tags(self) -> None:
        response = self.client.post("/api/tags", headers=USER, json={"name": "Python", "slug": "python"})

        self.assertEqual(response.status_code, 403)
        self.assertEqual(self.backend.tables.rows("blog_tags"), [])

    def test_update_into_existing_slug_is_a_conflict(self) -> None:
        self.client.post("/api/tags", headers=MODERATOR, json={"name": "Python", "slug": "python"})
        self.client.post("/api/tags", headers=MODERATOR, json={"name": "Rust", "slug": "rust"})

        response = self.client.put("/api/tags/rust", headers=MODERATOR, json={"slug": "python"})

        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()["error"], "Tag with this name or slug already exists")

    def test_null_name_is_rejected(self) -> None:
        self.client.post("/api/tags", headers=MODERATOR, json={"name": "Python", "slug": "python"})

        response = self.client.put("/api/tags/python", headers=MODERATOR, json={"name": None})

        self.assertEqual(response.status_code, 422)
        self.assertIn("body.name", response.json()["errors"])

    def test_invalid_slug_in_body(self) -> None:
        response = self.client.post("/api/tags", headers=MODERATOR, json={"name": "Python", "slug": "Py Thon"})

        self.assertEqual(response.status_code, 422)
        self.assertIn("body.slug", response.json()["errors"])


if __name__ == "__main__":
    unittest.main()
