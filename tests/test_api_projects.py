"""Project listing, CRUD, soft delete, template download and bulk upload over HTTP."""

from io import BytesIO
from pathlib import Path
from unittest.mock import patch

from openpyxl import load_workbook
from sqlalchemy.exc import OperationalError

from tests.support import XLSX_MEDIA_TYPE, ApiTestCase, workbook_bytes
from tests.test_ingest import DECORATED_SHEET
from tracker.core.config import settings
from tracker.services.images import PROJECT_IMAGE_SUBDIR
from tracker.services.ingest import TEMPLATE_FILENAME, TEMPLATE_HEADERS


class TestProjectCrud(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.editor = self.auth("editor")
        self.admin = self.auth("regional_admin")

    def test_create_applies_defaults(self) -> None:
        project_id = self.create_project(self.editor, sector="Water")
        body = self.client.get(f"/api/projects/{project_id}").json()
        self.assertEqual(body["sector"], "water")
        self.assertEqual(body["status"], "planned")
        self.assertEqual(body["category"], "infra")
        self.assertEqual(body["community"], "Kpalsi")
        self.assertIn("CREATE_PROJECT", self.audit_actions())

    def test_name_and_sector_required(self) -> None:
        resp = self.client.post("/api/projects", json={"name": "  "}, headers=self.editor)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "Name and Sector are required"})

    def test_invalid_status_rejected(self) -> None:
        resp = self.client.post(
            "/api/projects",
            json={"name": "Clinic", "sector": "health", "status": "abandoned"},
            headers=self.editor,
        )
        self.assertEqual(resp.status_code, 400)

    def test_multipart_create_with_image(self) -> None:
        resp = self.client.post(
            "/api/projects",
            data={"name": "Clinic", "sector": "health", "locations": "Vittin"},
            files={"image": ("clinic.png", b"\x89PNG\r\n\x1a\nfake", "image/png")},
            headers=self.editor,
        )
        self.assertEqual(resp.status_code, 201, resp.text)
        image_url = resp.json()["image_url"]
        self.assertTrue(image_url.startswith("/uploads/projects/"))
        self.assertEqual(self.client.get(image_url).status_code, 200)

    def stored_images(self) -> set[str]:
        folder = Path(settings.UPLOAD_DIR) / PROJECT_IMAGE_SUBDIR
        return {p.name for p in folder.iterdir()} if folder.exists() else set()

    def test_failed_insert_leaves_no_image_behind(self) -> None:
        before = self.stored_images()
        failure = OperationalError("INSERT INTO projects", {}, Exception("disk I/O error"))
        with patch("tracker.services.projects.create_project", side_effect=failure):
            resp = self.client.post(
                "/api/projects",
                data={"name": "Clinic", "sector": "health"},
                files={"image": ("clinic.png", b"\x89PNG\r\n\x1a\nfake", "image/png")},
                headers=self.editor,
            )
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"error": "Database error"})
        self.assertEqual(self.stored_images(), before)

    def test_rejected_update_stores_no_image(self) -> None:
        project_id = self.create_project(self.editor)
        before = self.stored_images()
        resp = self.client.put(
            f"/api/projects/{project_id}",
            data={"name": ""},
            files={"image": ("clinic.png", b"\x89PNG\r\n\x1a\nfake", "image/png")},
            headers=self.editor,
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "Name and Sector cannot be empty"})
        self.assertEqual(self.stored_images(), before)

    def test_update_of_missing_project_stores_no_image(self) -> None:
        before = self.stored_images()
        resp = self.client.put(
            "/api/projects/999",
            data={"status": "ongoing"},
            files={"image": ("clinic.png", b"\x89PNG\r\n\x1a\nfake", "image/png")},
            headers=self.editor,
        )
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(self.stored_images(), before)

    def test_partial_update(self) -> None:
        project_id = self.create_project(self.editor, project_cost="GHS 5,000")
        resp = self.client.put(
            f"/api/projects/{project_id}",
            json={"status": "ongoing", "locations": "Gurugu, Tamale"},
            headers=self.editor,
        )
        self.assertEqual(resp.status_code, 200)
        body = self.client.get(f"/api/projects/{project_id}").json()
        self.assertEqual(body["status"], "ongoing")
        self.assertEqual(body["community"], "Gurugu")
        self.assertEqual(body["name"], "Borehole")
        self.assertEqual(body["project_cost"], "5000")

    def test_update_missing_project(self) -> None:
        resp = self.client.put("/api/projects/999", json={"status": "ongoing"}, headers=self.editor)
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json(), {"error": "Project not found"})

    def test_delete_archives(self) -> None:
        project_id = self.create_project(self.editor)
        resp = self.client.delete(f"/api/projects/{project_id}", headers=self.admin)
        self.assertEqual(resp.status_code, 200)

        listing = self.client.get("/api/projects").json()
        self.assertEqual(listing["pagination"]["total"], 0)
        self.assertEqual(self.client.get(f"/api/projects/{project_id}").json()["status"], "archived")
        archived = self.client.get("/api/projects", params={"status": "archived"}).json()
        self.assertEqual([p["id"] for p in archived["projects"]], [project_id])

    def test_editor_cannot_delete(self) -> None:
        project_id = self.create_project(self.editor)
        resp = self.client.delete(f"/api/projects/{project_id}", headers=self.editor)
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.json(), {"error": "Access denied: Cannot delete records"})

    def test_analyst_cannot_create(self) -> None:
        resp = self.client.post(
            "/api/projects", json={"name": "X", "sector": "water"}, headers=self.auth("analyst")
        )
        self.assertEqual(resp.status_code, 403)


class TestProjectListing(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        editor = self.auth("editor")
        self.create_project(editor, name="Borehole", sector="water", year=2022, funding_source="MP Common Fund")
        self.create_project(editor, name="Clinic", sector="health", year=2024, status="completed")
        self.create_project(
            editor, name="Classroom Block", sector="education", year=2025, contractor="Tamale Builders"
        )

    def names(self, **params: object) -> list[str]:
        resp = self.client.get("/api/projects", params=params)
        self.assertEqual(resp.status_code, 200, resp.text)
        return [p["name"] for p in resp.json()["projects"]]

    def test_newest_first(self) -> None:
        self.assertEqual(self.names(), ["Classroom Block", "Clinic", "Borehole"])

    def test_filters(self) -> None:
        self.assertEqual(self.names(sector="health"), ["Clinic"])
        self.assertEqual(self.names(sector="all"), ["Classroom Block", "Clinic", "Borehole"])
        self.assertEqual(self.names(year_start=2024), ["Classroom Block", "Clinic"])
        self.assertEqual(self.names(year_end=2023), ["Borehole"])
        self.assertEqual(self.names(status="completed"), ["Clinic"])
        self.assertEqual(self.names(search="builders"), ["Classroom Block"])
        self.assertEqual(self.names(funding="common fund"), ["Borehole"])
        self.assertEqual(self.names(sector="water", year_start=2024), [])

    def test_pagination(self) -> None:
        resp = self.client.get("/api/projects", params={"page": 2, "limit": 2}).json()
        self.assertEqual([p["name"] for p in resp["projects"]], ["Borehole"])
        self.assertEqual(resp["pagination"], {"total": 3, "page": 2, "limit": 2, "totalPages": 2})

    def test_invalid_page(self) -> None:
        self.assertEqual(self.client.get("/api/projects", params={"page": 0}).status_code, 400)

    def test_write_invalidates_cached_listing(self) -> None:
        self.assertEqual(self.client.get("/api/projects").json()["pagination"]["total"], 3)
        self.create_project(self.auth("super_admin"), name="Market Stalls", sector="jobs")
        self.assertEqual(self.client.get("/api/projects").json()["pagination"]["total"], 4)


class TestTemplateAndBulkUpload(ApiTestCase):
    def upload(self, content: bytes, headers: dict[str, str], filename: str = "projects.xlsx"):
        return self.client.post(
            "/api/projects/bulk-upload",
            files={"file": (filename, content, XLSX_MEDIA_TYPE)},
            headers=headers,
        )

    def test_template_download_is_stable(self) -> None:
        first = self.client.get("/api/projects/template")
        second = self.client.get("/api/projects/template")
        self.assertEqual(first.status_code, 200)
        self.assertIn(TEMPLATE_FILENAME, first.headers["content-disposition"])

        def values(content: bytes) -> list[tuple]:
            wb = load_workbook(BytesIO(content), read_only=True)
            return list(wb.worksheets[0].iter_rows(values_only=True))

        self.assertEqual(values(first.content), values(second.content))
        self.assertEqual(values(first.content)[0], TEMPLATE_HEADERS)

    def test_upload_counts(self) -> None:
        resp = self.upload(workbook_bytes(DECORATED_SHEET), self.auth("analyst"))
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json(), {"message": "Upload processed", "inserted": 3, "skipped": 2})
        self.assertEqual(self.client.get("/api/projects").json()["pagination"]["total"], 3)
        self.assertIn("BULK_UPLOAD", self.audit_actions())

    def test_upload_without_header(self) -> None:
        resp = self.upload(workbook_bytes([["Project", "Ward"], ["Borehole", "Kpalsi"]]), self.auth("analyst"))
        self.assertEqual(resp.status_code, 400)
        self.assertIn("Header row", resp.json()["error"])
        self.assertEqual(self.client.get("/api/projects").json()["pagination"]["total"], 0)

    def test_editor_cannot_upload(self) -> None:
        resp = self.upload(workbook_bytes(DECORATED_SHEET), self.auth("editor"))
        self.assertEqual(resp.status_code, 403)

    def test_missing_file(self) -> None:
        resp = self.client.post(
            "/api/projects/bulk-upload", data={"note": "x"}, headers=self.auth("analyst")
        )
        self.assertEqual(resp.status_code, 400)

    def test_template_round_trip(self) -> None:
        template = self.client.get("/api/projects/template").content
        resp = self.upload(template, self.auth("super_admin"))
        self.assertEqual(resp.json()["inserted"], 1)
