import os
import tempfile
import unittest
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

from fastapi.testclient import TestClient
from jose import jwt

from portfolio.app import create_app
from portfolio.auth import create_access_token, hash_password
from portfolio.config import Settings, get_settings
from portfolio.content_store import ConfiguredContentStore, DisabledContentStore
from portfolio.db import SqlDbClient
from portfolio.dependencies import build_content_store, get_content_store
from portfolio.local_store import InMemoryLocalStore
from portfolio.storage import InMemoryStorageClient
from portfolio.tests.helpers import make_configured_store

UNREACHABLE_DATABASE_URL = "sqlite:////nonexistent_dir_xyz/sub/db.sqlite"


def forge_token(secret: str, email: str = "admin@portfolio.dev") -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=5)
    return jwt.encode(
        {"sub": email, "role": "admin", "exp": expire}, secret, algorithm="HS256"
    )


def make_settings(**overrides) -> Settings:
    values = {
        "admin_email": "admin@portfolio.dev",
        "admin_password_hash": hash_password("secret"),
        "jwt_secret": "test-secret",
        "static_dir": tempfile.gettempdir(),
    }
    values.update(overrides)
    return Settings(**values)


class BackendApiTestCase(unittest.TestCase):
    def make_store(self):
        return make_configured_store()

    def setUp(self):
        self.settings = make_settings()
        self.store = self.make_store()
        self.app = create_app()
        self.app.dependency_overrides[get_settings] = lambda: self.settings
        self.app.dependency_overrides[get_content_store] = lambda: self.store
        self.client = TestClient(self.app)
        token = create_access_token(self.settings.admin_email, self.settings)
        self.auth = {"Authorization": f"Bearer {token}"}

    def create_project(self, title, **extra):
        body = {"title": title, "slug": title.lower().replace(" ", "-"), "category": "Print"}
        body.update(extra)
        response = self.client.post("/api/admin/projects", json=body, headers=self.auth)
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()


class PublicRoutesTests(BackendApiTestCase):
    def test_health_reports_backend(self):
        response = self.client.get("/api/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["backend"], "configured")

    def test_project_detail_and_not_found(self):
        self.create_project("Magazine Layout", is_featured=True)

        detail = self.client.get("/api/projects/magazine-layout")
        self.assertEqual(detail.status_code, 200)
        self.assertEqual(detail.json()["title"], "Magazine Layout")

        missing = self.client.get("/api/projects/does-not-exist")
        self.assertEqual(missing.status_code, 404)
        self.assertEqual(missing.json()["detail"], "Project not found")

    def test_featured_route_not_shadowed_by_slug(self):
        self.create_project("Plain")
        self.create_project("Hero Piece", is_featured=True)
        response = self.client.get("/api/projects/featured")
        self.assertEqual(response.status_code, 200)
        self.assertEqual([p["title"] for p in response.json()], ["Hero Piece"])

    def test_contact_submission(self):
        response = self.client.post(
            "/api/contact",
            json={"name": "Ada", "email": "ada@example.com", "message": "Hi"},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"success": True, "error": None})

    def test_track_view_and_resume_download(self):
        project = self.create_project("Viewed")
        response = self.client.post(f"/api/projects/{project['id']}/views")
        self.assertEqual(response.status_code, 202)

        download = self.client.get("/api/resume/download", follow_redirects=False)
        self.assertEqual(download.status_code, 307)
        self.assertTrue(download.headers["location"].endswith("/resumes/resume.pdf"))

        stats = self.client.get("/api/admin/analytics", headers=self.auth).json()
        self.assertEqual(stats, {"resume_downloads": 1, "project_views": 1})

    def test_site_content_defaults(self):
        response = self.client.get("/api/site")
        self.assertEqual(response.status_code, 200)
        payload = response.json()
        self.assertIn("personal_info", payload)
        self.assertTrue(payload["resume_url"].endswith("/resumes/resume.pdf"))


class AuthTests(BackendApiTestCase):
    def test_login_and_session(self):
        response = self.client.post(
            "/api/auth/login",
            json={"email": "Admin@Portfolio.dev", "password": "secret"},
        )
        self.assertEqual(response.status_code, 200)
        token = response.json()["access_token"]

        session = self.client.get(
            "/api/auth/session", headers={"Authorization": f"Bearer {token}"}
        )
        self.assertEqual(session.status_code, 200)
        self.assertEqual(session.json()["email"], "admin@portfolio.dev")

    def test_bad_password(self):
        response = self.client.post(
            "/api/auth/login",
            json={"email": "admin@portfolio.dev", "password": "wrong"},
        )
        self.assertEqual(response.status_code, 401)

    def test_admin_routes_require_session(self):
        self.assertEqual(self.client.get("/api/admin/projects").status_code, 401)
        bad = {"Authorization": "Bearer not-a-token"}
        self.assertEqual(self.client.get("/api/admin/resume", headers=bad).status_code, 401)
        response = self.client.post("/api/admin/projects", json={"title": "x", "slug": "x"})
        self.assertEqual(response.status_code, 401)

    def test_token_signed_with_other_secret_rejected(self):
        forged = {"Authorization": f"Bearer {forge_token('change-me')}"}
        response = self.client.get("/api/admin/projects", headers=forged)
        self.assertEqual(response.status_code, 401)


class UnsetJwtSecretTests(BackendApiTestCase):
    def setUp(self):
        super().setUp()
        self.settings = make_settings(jwt_secret=None)

    def test_default_secret_is_unset(self):
        with patch.dict(os.environ, {}, clear=True):
            self.assertIsNone(Settings(_env_file=None).jwt_secret)

    def test_token_signed_with_old_default_rejected(self):
        forged = {"Authorization": f"Bearer {forge_token('change-me')}"}
        for path in ("/api/admin/projects", "/api/auth/session", "/api/admin/analytics"):
            response = self.client.get(path, headers=forged)
            self.assertEqual(response.status_code, 503, path)
        created = self.client.post(
            "/api/admin/projects", json={"title": "x", "slug": "x"}, headers=forged
        )
        self.assertEqual(created.status_code, 503)
        self.assertEqual(self.client.get("/api/projects").json(), [])

    def test_login_refused(self):
        response = self.client.post(
            "/api/auth/login",
            json={"email": "admin@portfolio.dev", "password": "secret"},
        )
        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()["detail"], "Admin sessions are not configured")

    def test_missing_header_still_unauthenticated(self):
        self.assertEqual(self.client.get("/api/admin/projects").status_code, 401)


class AdminRoutesTests(BackendApiTestCase):
    def test_create_assigns_order_and_nulls_empty_media(self):
        first = self.create_project("One", thumbnail_url="")
        second = self.create_project("Two")
        self.assertEqual(first["order_index"], 1)
        self.assertEqual(second["order_index"], 2)
        self.assertIsNone(first["thumbnail_url"])

        listed = self.client.get("/api/projects").json()
        self.assertEqual([p["slug"] for p in listed], ["one", "two"])

    def test_update_and_delete(self):
        project = self.create_project("Editable", video_url="https://cdn.test/v.mp4")
        response = self.client.put(
            f"/api/admin/projects/{project['id']}",
            json={"description": "Updated", "video_url": ""},
            headers=self.auth,
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["description"], "Updated")
        self.assertIsNone(response.json()["video_url"])

        deleted = self.client.delete(
            f"/api/admin/projects/{project['id']}", headers=self.auth
        )
        self.assertEqual(deleted.json(), {"deleted": True})
        self.assertEqual(self.client.get("/api/projects").json(), [])

    def test_duplicate_slug_reports_failure(self):
        self.create_project("Twice")
        response = self.client.post(
            "/api/admin/projects",
            json={"title": "Twice", "slug": "twice"},
            headers=self.auth,
        )
        self.assertEqual(response.status_code, 502)

    def test_reserved_slug_rejected(self):
        for slug in ("featured", "Featured"):
            response = self.client.post(
                "/api/admin/projects",
                json={"title": "Featured", "slug": slug},
                headers=self.auth,
            )
            self.assertEqual(response.status_code, 422, slug)

        project = self.create_project("Renamed")
        response = self.client.put(
            f"/api/admin/projects/{project['id']}",
            json={"slug": "featured"},
            headers=self.auth,
        )
        self.assertEqual(response.status_code, 422)
        self.assertEqual(
            self.client.get("/api/projects/renamed").json()["id"], project["id"]
        )

    def test_editor_state_from_query(self):
        project = self.create_project("Query Me")
        new_state = self.client.get(
            "/api/admin/projects", params={"new": "true"}, headers=self.auth
        ).json()
        self.assertTrue(new_state["editor_open"])
        self.assertIsNone(new_state["editing_id"])
        self.assertEqual(new_state["draft"]["title"], "")

        edit_state = self.client.get(
            "/api/admin/projects", params={"edit": project["id"]}, headers=self.auth
        ).json()
        self.assertEqual(edit_state["editing_id"], project["id"])
        self.assertEqual(edit_state["draft"]["slug"], "query-me")

        closed = self.client.get("/api/admin/projects", headers=self.auth).json()
        self.assertFalse(closed["editor_open"])
        self.assertEqual(len(closed["projects"]), 1)

    def test_slug_helper(self):
        response = self.client.get(
            "/api/admin/slug", params={"title": "My Project! 2024"}, headers=self.auth
        )
        self.assertEqual(response.json(), {"slug": "my-project-2024"})

    def test_media_upload_and_delete(self):
        response = self.client.post(
            "/api/admin/media/image",
            files={"file": ("Shot.PNG", b"png-bytes", "image/png")},
            headers=self.auth,
        )
        self.assertEqual(response.status_code, 200, response.text)
        url = response.json()["url"]
        self.assertIn("/project-images/", url)
        self.assertTrue(url.endswith(".png"))

        deleted = self.client.delete(
            "/api/admin/media/image", params={"url": url}, headers=self.auth
        )
        self.assertEqual(deleted.json(), {"deleted": True})

    def test_unknown_media_kind(self):
        response = self.client.post(
            "/api/admin/media/audio",
            files={"file": ("a.mp3", b"x", "audio/mpeg")},
            headers=self.auth,
        )
        self.assertEqual(response.status_code, 422)

    def test_resume_get_and_save(self):
        empty = self.client.get("/api/admin/resume", headers=self.auth).json()
        self.assertEqual(empty["experience"], [])

        body = {
            "personal_info": {"name": "Ada", "title": "Designer"},
            "summary": "Hello",
            "languages": [{"id": "l1", "name": "English", "proficiency": "Native"}],
        }
        saved = self.client.put("/api/admin/resume", json=body, headers=self.auth)
        self.assertEqual(saved.status_code, 200, saved.text)
        self.assertIsNotNone(saved.json()["id"])

        loaded = self.client.get("/api/admin/resume", headers=self.auth).json()
        self.assertEqual(loaded["personal_info"]["name"], "Ada")
        self.assertEqual(loaded["languages"][0]["proficiency"], "Native")

    def test_resume_file_upload(self):
        response = self.client.post(
            "/api/admin/resume/file",
            files={"file": ("cv.pdf", b"%PDF", "application/pdf")},
            headers=self.auth,
        )
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["url"].endswith("/resumes/resume.pdf"))

        not_pdf = self.client.post(
            "/api/admin/resume/file",
            files={"file": ("cv.docx", b"x", "application/octet-stream")},
            headers=self.auth,
        )
        self.assertEqual(not_pdf.status_code, 400)


class DisabledBackendApiTests(BackendApiTestCase):
    def make_store(self):
        return DisabledContentStore(
            InMemoryLocalStore(), static_resume_path="/assets/resume.pdf"
        )

    def test_public_reads_are_empty(self):
        self.assertEqual(self.client.get("/api/projects").json(), [])
        self.assertEqual(self.client.get("/api/projects/featured").json(), [])
        self.assertEqual(self.client.get("/api/projects/anything").status_code, 404)
        self.assertEqual(self.client.get("/api/health").json()["backend"], "disabled")

    def test_resume_download_uses_static_asset_and_counts_locally(self):
        for _ in range(3):
            response = self.client.get("/api/resume/download", follow_redirects=False)
            self.assertEqual(response.headers["location"], "/assets/resume.pdf")
        stats = self.client.get("/api/admin/analytics", headers=self.auth).json()
        self.assertEqual(stats["resume_downloads"], 3)

    def test_admin_writes_fail(self):
        response = self.client.post(
            "/api/admin/projects",
            json={"title": "X", "slug": "x"},
            headers=self.auth,
        )
        self.assertEqual(response.status_code, 502)
        upload = self.client.post(
            "/api/admin/media/video",
            files={"file": ("a.mp4", b"x", "video/mp4")},
            headers=self.auth,
        )
        self.assertEqual(upload.status_code, 502)

    def test_site_content_override_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            with open(os.path.join(tmp, "site.json"), "w", encoding="utf-8") as f:
                f.write(
                    '{"tagline": "Custom", "personal_info": {"name": "Ada"},'
                    ' "showcase": [{"title": "T", "category": "Print",'
                    ' "description": "D", "thumbnail": "/t.png"}]}'
                )
            self.settings = make_settings(static_dir=tmp)
            payload = self.client.get("/api/site").json()
        self.assertEqual(payload["tagline"], "Custom")
        self.assertEqual(payload["personal_info"]["name"], "Ada")
        self.assertEqual(payload["showcase"][0]["title"], "T")
        self.assertEqual(payload["resume_url"], "/assets/resume.pdf")

    def test_site_content_non_object_file_uses_defaults(self):
        for body in ('["a", "b"]', '"just a string"', "42", '{"tagline": ["x"]}'):
            with tempfile.TemporaryDirectory() as tmp:
                with open(os.path.join(tmp, "site.json"), "w", encoding="utf-8") as f:
                    f.write(body)
                self.settings = make_settings(static_dir=tmp)
                response = self.client.get("/api/site")
            self.assertEqual(response.status_code, 200, body)
            payload = response.json()
            self.assertEqual(payload["personal_info"]["name"], "Portfolio Owner")
            self.assertTrue(payload["tagline"].startswith("Designing"))
            self.assertEqual(payload["showcase"], [])


class UnreachableDatabaseTests(BackendApiTestCase):
    def make_store(self):
        with self.assertLogs("portfolio.db", level="ERROR"):
            db = SqlDbClient(UNREACHABLE_DATABASE_URL)
        return ConfiguredContentStore(
            db, InMemoryStorageClient(), resume_file_name="resume.pdf"
        )

    def test_public_reads_degrade_to_empty(self):
        self.assertEqual(self.client.get("/api/health").status_code, 200)
        self.assertEqual(self.client.get("/api/projects").json(), [])
        self.assertEqual(self.client.get("/api/projects/featured").json(), [])
        self.assertEqual(self.client.get("/api/projects/anything").status_code, 404)
        self.assertEqual(self.client.get("/api/site").status_code, 200)

    def test_writes_report_failure(self):
        contact = self.client.post(
            "/api/contact",
            json={"name": "Ada", "email": "ada@example.com", "message": "Hi"},
        )
        self.assertEqual(contact.status_code, 200)
        self.assertFalse(contact.json()["success"])

        created = self.client.post(
            "/api/admin/projects", json={"title": "X", "slug": "x"}, headers=self.auth
        )
        self.assertEqual(created.status_code, 502)

        stats = self.client.get("/api/admin/analytics", headers=self.auth)
        self.assertEqual(stats.json(), {"resume_downloads": 0, "project_views": 0})

    def test_build_content_store_survives_unreachable_database(self):
        settings = Settings(
            _env_file=None,
            database_url=UNREACHABLE_DATABASE_URL,
            storage_endpoint="http://localhost:9000",
            storage_region="us-east-1",
            storage_access_key="key",
            storage_secret_key="secret",
        )
        with patch("portfolio.dependencies.get_settings", return_value=settings):
            with self.assertLogs("portfolio.db", level="ERROR"):
                store = build_content_store()
        self.assertIsInstance(store, ConfiguredContentStore)
        self.assertEqual(store.list_projects(), [])
        self.assertIsNone(store.get_project_by_slug("anything"))


if __name__ == "__main__":
    unittest.main()
