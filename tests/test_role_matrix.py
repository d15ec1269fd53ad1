"""Every role against every guarded project and user operation."""

from tests.support import PASSWORD, XLSX_MEDIA_TYPE, ApiTestCase, workbook_bytes
from tests.test_ingest import DECORATED_SHEET

ROLES = ("super_admin", "regional_admin", "analyst", "editor")

# role -> expected status for (create, edit, delete, upload)
PROJECT_MATRIX = {
    "super_admin": (201, 200, 200, 200),
    "regional_admin": (201, 200, 200, 200),
    "analyst": (403, 403, 403, 200),
    "editor": (201, 200, 403, 403),
}


class TestProjectRoleMatrix(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.owner = self.auth("super_admin", "owner")
        self.headers = {role: self.auth(role) for role in ROLES}

    def attempt(self, operation: str, headers: dict[str, str]) -> int:
        if operation == "create":
            resp = self.client.post(
                "/api/projects", json={"name": "Clinic", "sector": "health"}, headers=headers
            )
        elif operation == "edit":
            project_id = self.create_project(self.owner)
            resp = self.client.put(
                f"/api/projects/{project_id}", json={"status": "ongoing"}, headers=headers
            )
        elif operation == "delete":
            project_id = self.create_project(self.owner)
            resp = self.client.delete(f"/api/projects/{project_id}", headers=headers)
        else:
            resp = self.client.post(
                "/api/projects/bulk-upload",
                files={"file": ("projects.xlsx", workbook_bytes(DECORATED_SHEET), XLSX_MEDIA_TYPE)},
                headers=headers,
            )
        return resp.status_code

    def test_matrix(self) -> None:
        for role, expected in PROJECT_MATRIX.items():
            for operation, status in zip(("create", "edit", "delete", "upload"), expected):
                with self.subTest(role=role, operation=operation):
                    self.assertEqual(self.attempt(operation, self.headers[role]), status)

    def test_denied_edit_leaves_project_unchanged(self) -> None:
        project_id = self.create_project(self.owner)
        self.client.put(
            f"/api/projects/{project_id}", json={"status": "completed"}, headers=self.headers["analyst"]
        )
        self.client.delete(f"/api/projects/{project_id}", headers=self.headers["analyst"])
        self.assertEqual(self.client.get(f"/api/projects/{project_id}").json()["status"], "planned")


class TestUserRoleMatrix(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.headers = {role: self.auth(role) for role in ROLES}
        self.target_id = self.add_user("target", "editor")

    def test_only_super_admin_manages_users(self) -> None:
        for role in ("regional_admin", "analyst", "editor"):
            headers = self.headers[role]
            with self.subTest(role=role):
                self.assertEqual(self.client.get("/api/users", headers=headers).status_code, 403)
                resp = self.client.post(
                    "/api/users",
                    json={"username": f"new-{role}", "password": PASSWORD, "role": "editor"},
                    headers=headers,
                )
                self.assertEqual(resp.status_code, 403)
                resp = self.client.put(
                    f"/api/users/{self.target_id}", json={"role": "analyst"}, headers=headers
                )
                self.assertEqual(resp.status_code, 403)
                resp = self.client.delete(f"/api/users/{self.target_id}", headers=headers)
                self.assertEqual(resp.status_code, 403)

        admin = self.headers["super_admin"]
        resp = self.client.post(
            "/api/users",
            json={"username": "new-admin-made", "password": PASSWORD, "role": "editor"},
            headers=admin,
        )
        self.assertEqual(resp.status_code, 201)
        resp = self.client.put(f"/api/users/{self.target_id}", json={"role": "analyst"}, headers=admin)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self.client.delete(f"/api/users/{self.target_id}", headers=admin).status_code, 200)
