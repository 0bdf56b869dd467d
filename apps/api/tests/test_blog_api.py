"""Blog post API tests."""

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
        identity = self.backend.identity
        identity.create_identity("author@example.com", full_name="Author", user_id="author-1")
        identity.create_identity("other@example.com", user_id="user-2")
        identity.create_identity("mod@example.com", role="moderator", user_id="mod-1")

    def tearDown(self) -> None:
        for key, value in self._old_env.items():
            if value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = value
        get_settings.cache_clear()

    def _create(self, slug: str, *, token: str = "test:author-1", **fields: object) -> dict:
        body = {"slug": slug, "title": slug.title(), "content": {"blocks": []}, **fields}
        response = self.client.post("/api/blog", headers=_bearer(token), json=body)
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()["data"]


def _bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


class CreatePostTests(_SettingsEnvCase):
    def test_create_records_author_and_publish_time(self) -> None:
        draft = self._create("draft-post")
        live = self._create("live-post", published=True, tags=["news"])

        self.assertEqual(draft["author_id"], "author-1")
        self.assertIsNone(draft["published_at"])
        self.assertTrue(live["published"])
        self.assertIsNotNone(live["published_at"])
        self.assertEqual(live["tags"], ["news"])

    def test_duplicate_slug_is_a_conflict(self) -> None:
        self._create("hello")

        response = self.client.post(
            "/api/blog",
            headers=_bearer("test:user-2"),
            json={"slug": "hello", "title": "Again", "content": {}},
        )

        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()["code"], "23505")
        self.assertEqual(response.json()["error"], "A blog post with this slug already exists")
        self.assertEqual(len(self.backend.tables.rows("blog_posts")), 1)

    def test_create_requires_authentication(self) -> None:
        response = self.client.post("/api/blog", json={"slug": "x", "title": "X", "content": {}})

        self.assertEqual(response.status_code, 401)

    def test_invalid_body_lists_each_field(self) -> None:
        response = self.client.post(
            "/api/blog",
            headers=_bearer("test:author-1"),
            json={"slug": "Not A Slug", "title": "", "featured_image": "not-a-url"},
        )

        self.assertEqual(response.status_code, 422)
        errors = response.json()["errors"]
        for field in ("body.slug", "body.title", "body.content", "body.featured_image"):
            self.assertIn(field, errors)
        self.assertEqual(self.backend.tables.rows("blog_posts"), [])


class ListPostTests(_SettingsEnvCase):
    def setUp(self) -> None:
        super().setUp()
        for index in range(3):
            self._create(f"published-{index}", published=True, tags=["news"])
        self._create("hidden-draft", tags=["news"])

    def test_anonymous_listing_shows_published_only(self) -> None:
        response = self.client.get("/api/blog")

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["pagination"], {"total": 3, "limit": 10, "offset": 0})
        self.assertNotIn("hidden-draft", [post["slug"] for post in body["data"]])

    def test_authenticated_listing_includes_drafts_unless_filtered(self) -> None:
        everything = self.client.get("/api/blog", headers=_bearer("test:user-2")).json()
        unfiltered = self.client.get("/api/blog?published=false", headers=_bearer("test:user-2")).json()
        published = self.client.get("/api/blog?published=true", headers=_bearer("test:user-2")).json()

        self.assertEqual(everything["pagination"]["total"], 4)
        self.assertEqual(unfiltered["pagination"]["total"], 4)
        self.assertEqual(published["pagination"]["total"], 3)
        self.assertNotIn("hidden-draft", [post["slug"] for post in published["data"]])

    def test_drafts_sort_ahead_of_published_posts(self) -> None:
        response = self.client.get("/api/blog", headers=_bearer("test:user-2")).json()

        self.assertEqual(response["data"][0]["slug"], "hidden-draft")

    def test_pagination_window(self) -> None:
        response = self.client.get("/api/blog?limit=2&offset=2").json()

        self.assertEqual(len(response["data"]), 1)
        self.assertEqual(response["pagination"], {"total": 3, "limit": 2, "offset": 2})

    def test_limit_outside_range_is_rejected(self) -> None:
        for query in ("limit=0", "limit=101", "offset=-1", "limit=ten"):
            with self.subTest(query=query):
                response = self.client.get(f"/api/blog?{query}")
                self.assertEqual(response.status_code, 422)
                self.assertEqual(len(response.json()["errors"]), 1)
                self.assertTrue(next(iter(response.json()["errors"])).startswith("query."))

    def test_limit_is_parsed_from_query_string(self) -> None:
        response = self.client.get("/api/blog?limit=2")

        self.assertEqual(response.json()["pagination"]["limit"], 2)

    def test_tag_listing(self) -> None:
        anonymous = self.client.get("/api/blog/tag/news").json()["data"]
        authenticated = self.client.get("/api/blog/tag/news", headers=_bearer("test:user-2")).json()["data"]
        unknown = self.client.get("/api/blog/tag/sports").json()["data"]

        self.assertEqual(len(anonymous), 3)
        self.assertEqual(len(authenticated), 4)
        self.assertEqual(unknown, [])

    def test_draft_is_not_found_for_anonymous(self) -> None:
        anonymous = self.client.get("/api/blog/hidden-draft")
        authenticated = self.client.get("/api/blog/hidden-draft", headers=_bearer("test:user-2"))

        self.assertEqual(anonymous.status_code, 404)
        self.assertEqual(anonymous.json()["error"], "Blog post not found")
        self.assertEqual(authenticated.status_code, 200)


class ModifyPostTests(_SettingsEnvCase):
    def setUp(self) -> None:
        super().setUp()
        self._create("mine")

    def test_author_updates_own_post(self) -> None:
        response = self.client.put("/api/blog/mine", headers=_bearer("test:author-1"), json={"title": "Renamed"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["message"], "Blog post updated successfully")
        self.assertEqual(response.json()["data"]["title"], "Renamed")

    def test_other_user_cannot_modify(self) -> None:
        writes_before = self.backend.tables.write_count

        update = self.client.put("/api/blog/mine", headers=_bearer("test:user-2"), json={"title": "Hijack"})
        delete = self.client.delete("/api/blog/mine", headers=_bearer("test:user-2"))

        for response in (update, delete):
            self.assertEqual(response.status_code, 403)
            self.assertEqual(response.json()["code"], "NOT_RESOURCE_OWNER")
        self.assertEqual(self.backend.tables.write_count, writes_before)

    def test_moderator_bypasses_ownership(self) -> None:
        response = self.client.put("/api/blog/mine", headers=_bearer("test:mod-1"), json={"excerpt": "Edited"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["author_id"], "author-1")

    def test_publish_and_unpublish_manage_published_at(self) -> None:
        published = self.client.put("/api/blog/mine", headers=_bearer("test:author-1"), json={"published": True})
        first_stamp = published.json()["data"]["published_at"]
        again = self.client.put("/api/blog/mine", headers=_bearer("test:author-1"), json={"published": True})
        unpublished = self.client.put("/api/blog/mine", headers=_bearer("test:author-1"), json={"published": False})

        self.assertIsNotNone(first_stamp)
        self.assertEqual(again.json()["data"]["published_at"], first_stamp)
        self.assertIsNone(unpublished.json()["data"]["published_at"])

    def test_empty_update_is_rejected(self) -> None:
        response = self.client.put("/api/blog/mine", headers=_bearer("test:author-1"), json={})

        self.assertEqual(response.status_code, 422)
        self.assertIn("body", response.json()["errors"])

    def test_null_for_required_columns_is_rejected(self) -> None:
        writes_before = self.backend.tables.write_count

        response = self.client.put(
            "/api/blog/mine",
            headers=_bearer("test:author-1"),
            json={"title": None, "content": None, "published": None, "excerpt": None},
        )

        self.assertEqual(response.status_code, 422)
        errors = response.json()["errors"]
        self.assertEqual(set(errors), {"body.title", "body.content", "body.published"})
        self.assertEqual(self.backend.tables.write_count, writes_before)

    def test_null_clears_optional_columns(self) -> None:
        response = self.client.put("/api/blog/mine", headers=_bearer("test:author-1"), json={"excerpt": None})

        self.assertEqual(response.status_code, 200)
        self.assertIsNone(response.json()["data"]["excerpt"])

    def test_update_unknown_post(self) -> None:
        response = self.client.put("/api/blog/ghost", headers=_bearer("test:mod-1"), json={"title": "Ghost"})

        self.assertEqual(response.status_code, 404)

    def test_delete_post(self) -> None:
        response = self.client.delete("/api/blog/mine", headers=_bearer("test:author-1"))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["message"], "Blog post deleted successfully")
        self.assertEqual(self.client.get("/api/blog/mine", headers=_bearer("test:author-1")).status_code, 404)


if __name__ == "__main__":
    unittest.main()
