"""Page and common content API tests."""

from __future__ import annotations

import os
import unittest

from fastapi.testclient import TestClient

from app.core.config import get_settings
from app.main import create_app

MODERATOR = {"Authorization": "Bearer test:mod-1"}


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

    def tearDown(self) -> None:
        for key, value in self._old_env.items():
            if value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = value
        get_settings.cache_clear()


class PageTests(_SettingsEnvCase):
    def _save_page(self, slug: str, **fields: object) -> dict:
        body = {"title": slug.title(), "data": {"hero": {"heading": slug}}, **fields}
        response = self.client.put(f"/api/content/pages/{slug}", headers=MODERATOR, json=body)
        self.assertEqual(response.status_code, 200, response.text)
        return response.json()

    def test_unpublished_page_is_hidden_until_published(self) -> None:
        self._save_page("home")

        hidden = self.client.get("/api/content/pages/home")
        self.assertEqual(hidden.status_code, 404)
        self.assertEqual(hidden.json()["error"], "Page not found")

        self._save_page("home", published=True)
        visible = self.client.get("/api/content/pages/home")
        self.assertEqual(visible.status_code, 200)
        self.assertEqual(visible.json()["data"]["slug"], "home")
        self.assertTrue(visible.json()["data"]["published"])

    def test_authenticated_caller_reads_drafts(self) -> None:
        self._save_page("about")

        response = self.client.get("/api/content/pages/about", headers=MODERATOR)

        self.assertEqual(response.status_code, 200)
        self.assertFalse(response.json()["data"]["published"])

    def test_write_without_token_is_rejected(self) -> None:
        response = self.client.put("/api/content/pages/home", json={"title": "Home", "data": {}})

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["error"], "Authorization token required")
        self.assertEqual(self.backend.tables.rows("content_pages"), [])

    def test_upsert_is_idempotent(self) -> None:
        first = self._save_page("home", published=True)
        second = self._save_page("home", published=True)

        self.assertEqual(first["message"], "Page saved successfully")
        self.assertEqual(first["data"]["id"], second["data"]["id"])
        self.assertEqual(len(self.backend.tables.rows("content_pages")), 1)

    def test_round_trip_returns_written_fields(self) -> None:
        saved = self._save_page(
            "pricing",
            published=True,
            meta_data={"metaTitle": "Pricing", "metaDescription": "Plans and prices"},
        )

        fetched = self.client.get("/api/content/pages/pricing").json()["data"]

        self.assertEqual(fetched["title"], saved["data"]["title"])
        self.assertEqual(fetched["data"], {"hero": {"heading": "pricing"}})
        self.assertEqual(fetched["meta_data"]["metaTitle"], "Pricing")

    def test_invalid_payload_reports_all_fields_and_writes_nothing(self) -> None:
        writes_before = self.backend.tables.write_count

        response = self.client.put(
            "/api/content/pages/home",
            headers=MODERATOR,
            json={"title": "", "data": "not-an-object", "meta_data": {"metaTitle": "x" * 101}},
        )

        self.assertEqual(response.status_code, 422)
        errors = response.json()["errors"]
        self.assertIn("body.title", errors)
        self.assertIn("body.data", errors)
        self.assertIn("body.meta_data.metaTitle", errors)
        self.assertEqual(self.backend.tables.write_count, writes_before)

    def test_invalid_slug_is_a_params_error(self) -> None:
        response = self.client.put(
            "/api/content/pages/Bad_Slug",
            headers=MODERATOR,
            json={"title": "Home", "data": {}},
        )

        self.assertEqual(response.status_code, 422)
        self.assertIn("params.slug", response.json()["errors"])

    def test_listing_respects_published_filter_and_slug_order(self) -> None:
        self._save_page("zeta", published=True)
        self._save_page("alpha", published=True)
        self._save_page("draft")

        anonymous = self.client.get("/api/content/pages").json()["data"]
        everything = self.client.get("/api/content/pages", headers=MODERATOR).json()["data"]
        published = self.client.get("/api/content/pages?published=true", headers=MODERATOR).json()["data"]

        self.assertEqual([page["slug"] for page in anonymous], ["alpha", "zeta"])
        self.assertEqual([page["slug"] for page in everything], ["alpha", "draft", "zeta"])
        self.assertEqual([page["slug"] for page in published], ["alpha", "zeta"])

    def test_delete_page(self) -> None:
        self._save_page("old")

        deleted = self.client.delete("/api/content/pages/old", headers=MODERATOR)
        missing = self.client.delete("/api/content/pages/old", headers=MODERATOR)

        self.assertEqual(deleted.status_code, 200)
        self.assertEqual(deleted.json()["message"], "Page deleted successfully")
        self.assertEqual(missing.status_code, 404)


class CommonContentTests(_SettingsEnvCase):
    def test_common_content_lifecycle(self) -> None:
        saved = self.client.put(
            "/api/content/common/site_footer",
            headers=MODERATOR,
            json={"data": {"copyright": "2024"}},
        )
        self.assertEqual(saved.status_code, 200)
        self.assertEqual(saved.json()["message"], "Content saved successfully")

        fetched = self.client.get("/api/content/common/site_footer")
        self.assertEqual(fetched.status_code, 200)
        self.assertEqual(fetched.json()["data"]["data"], {"copyright": "2024"})

        listing = self.client.get("/api/content/common")
        self.assertEqual([item["key"] for item in listing.json()["data"]], ["site_footer"])

        deleted = self.client.delete("/api/content/common/site_footer", headers=MODERATOR)
        self.assertEqual(deleted.status_code, 200)

        missing = self.client.delete("/api/content/common/site_footer", headers=MODERATOR)
        self.assertEqual(missing.status_code, 404)
        self.assertEqual(missing.json()["error"], "Content not found")

    def test_unknown_key_is_not_found(self) -> None:
        response = self.client.get("/api/content/common/header")

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["code"], "NOT_FOUND")

    def test_invalid_key_is_rejected(self) -> None:
        response = self.client.put("/api/content/common/foo.bar", headers=MODERATOR, json={"data": {}})

        self.assertEqual(response.status_code, 422)
        self.assertIn("params.key", response.json()["errors"])

    def test_missing_data_is_rejected(self) -> None:
        response = self.client.put("/api/content/common/header", headers=MODERATOR, json={})

        self.assertEqual(response.status_code, 422)
        self.assertEqual(list(response.json()["errors"]), ["body.data"])


if __name__ == "__main__":
    unittest.main()
