from datetime import timedelta

from django.utils import timezone
from rest_framework.test import APIClient, APITestCase

from accounts.models import User
from accounts.tokens import issue_token
from issues.models import Issue, IssueStatus


def _client_for(user) -> APIClient:
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {issue_token(user)}")
    return client


class IssueApiTests(APITestCase):
    def setUp(self):
        self.u1 = User.objects.create_user(email="u1@example.com", password="pass12345", name="User One")
        self.u2 = User.objects.create_user(email="u2@example.com", password="pass12345", name="User Two")
        self.c1 = _client_for(self.u1)
        self.c2 = _client_for(self.u2)

    def _create(self, client=None, **body):
        body.setdefault("title", "Bug A")
        body.setdefault("description", "crashes")
        return (client or self.c1).post("/api/issues", body, format="json")

    def test_requires_token(self):
        for method, path in (
            ("get", "/api/issues"),
            ("post", "/api/issues"),
            ("get", "/api/issues/stats"),
            ("get", "/api/issues/1"),
            ("put", "/api/issues/1"),
            ("delete", "/api/issues/1"),
        ):
            with self.subTest(method=method, path=path):
                r = getattr(self.client, method)(path)
                self.assertEqual(r.status_code, 401)
                self.assertEqual(r.json()["message"], "Not authorized, no token")

    def test_owner_lifecycle_scenario(self):
        r = self._create()
        self.assertEqual(r.status_code, 201, r.content)
        body = r.json()
        self.assertEqual(body["message"], "Issue created successfully")
        data = body["data"]
        self.assertEqual(data["status"], "Open")
        self.assertEqual(data["priority"], "Medium")
        self.assertEqual(data["severity"], "Minor")
        self.assertEqual(data["createdBy"], {"_id": self.u1.pk, "email": "u1@example.com", "name": "User One"})
        issue_id = data["_id"]

        r_forbidden = self.c2.put(f"/api/issues/{issue_id}", {"status": "Closed"}, format="json")
        self.assertEqual(r_forbidden.status_code, 403)
        self.assertEqual(
            r_forbidden.json(), {"success": False, "message": "Not authorized to update this issue"}
        )
        self.assertEqual(Issue.objects.get(pk=issue_id).status, IssueStatus.OPEN)

        earlier = timezone.now() - timedelta(hours=1)
        Issue.objects.filter(pk=issue_id).update(updated_at=earlier)
        before = self.c1.get(f"/api/issues/{issue_id}").json()["data"]

        r_update = self.c1.put(f"/api/issues/{issue_id}", {"status": "Closed"}, format="json")
        self.assertEqual(r_update.status_code, 200)
        self.assertEqual(r_update.json()["message"], "Issue updated successfully")
        after = r_update.json()["data"]
        self.assertEqual(after["status"], "Closed")
        self.assertEqual(after["title"], "Bug A")
        self.assertNotEqual(after["updatedAt"], before["updatedAt"])
        self.assertEqual(after["createdAt"], before["createdAt"])

    def test_create_ignores_client_status(self):
        r = self._create(status="Closed")
        self.assertEqual(r.status_code, 201)
        self.assertEqual(r.json()["data"]["status"], "Open")

    def test_create_missing_fields(self):
        r = self.c1.post("/api/issues", {"title": "Only a title"}, format="json")
        self.assertEqual(r.status_code, 400)
        body = r.json()
        self.assertEqual(body["message"], "Please provide title and description")
        self.assertIn("description", body["errors"])
        self.assertFalse(Issue.objects.exists())

    def test_create_invalid_enum(self):
        r = self._create(priority="Urgent")
        self.assertEqual(r.status_code, 400)
        self.assertIn("priority", r.json()["errors"])

    def test_create_unknown_field(self):
        r = self._create(assignee="someone")
        self.assertEqual(r.status_code, 400)
        self.assertIn("assignee", r.json()["errors"])

    def test_create_cannot_spoof_owner(self):
        r = self._create(createdBy=self.u2.pk)
        self.assertEqual(r.status_code, 201)
        self.assertEqual(Issue.objects.get().created_by, self.u1)

    def test_any_user_can_read(self):
        issue_id = self._create().json()["data"]["_id"]
        r = self.c2.get(f"/api/issues/{issue_id}/")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["data"]["_id"], issue_id)
        self.assertTrue(r.json()["success"])

    def test_retrieve_missing_or_malformed_404(self):
        for path in ("/api/issues/999999", "/api/issues/not-an-id", "/api/issues/1.5", "/api/issues/-3"):
            with self.subTest(path=path):
                r = self.c1.get(path)
                self.assertEqual(r.status_code, 404)
                self.assertEqual(r.json(), {"success": False, "message": "Issue not found"})

    def test_patch_is_partial_update(self):
        issue_id = self._create().json()["data"]["_id"]
        r = self.c1.patch(f"/api/issues/{issue_id}", {"severity": "Critical"}, format="json")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["data"]["severity"], "Critical")
        self.assertEqual(r.json()["data"]["description"], "crashes")

    def test_update_invalid_value_400(self):
        issue_id = self._create().json()["data"]["_id"]
        r = self.c1.put(f"/api/issues/{issue_id}", {"status": "Done"}, format="json")
        self.assertEqual(r.status_code, 400)
        self.assertIn("status", r.json()["errors"])

    def test_update_missing_404(self):
        r = self.c1.put("/api/issues/999999", {"status": "Closed"}, format="json")
        self.assertEqual(r.status_code, 404)

    def test_delete_by_non_owner_403_then_owner_200(self):
        issue_id = self._create().json()["data"]["_id"]

        r = self.c2.delete(f"/api/issues/{issue_id}")
        self.assertEqual(r.status_code, 403)
        self.assertEqual(r.json()["message"], "Not authorized to delete this issue")
        self.assertTrue(Issue.objects.filter(pk=issue_id).exists())

        r = self.c1.delete(f"/api/issues/{issue_id}")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json(), {"success": True, "message": "Issue deleted successfully", "data": {}})
        self.assertFalse(Issue.objects.filter(pk=issue_id).exists())

        r = self.c1.delete(f"/api/issues/{issue_id}")
        self.assertEqual(r.status_code, 404)

    def test_deleted_issue_disappears_from_list(self):
        issue_id = self._create().json()["data"]["_id"]
        self.c1.delete(f"/api/issues/{issue_id}")
        r = self.c1.get("/api/issues")
        self.assertEqual(r.json()["total"], 0)
