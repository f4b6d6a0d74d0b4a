from __future__ import annotations

from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.test import TestCase
from rest_framework.test import APIClient
from rest_framework.throttling import ScopedRateThrottle

from accounts.tokens import issue_token

User = get_user_model()


class AuthApiTests(TestCase):
    def setUp(self) -> None:
        cache.clear()
        self.user = User.objects.create_user(email="alice@example.com", password="pass12345", name="Alice")
        self.client = APIClient()

    def test_register_returns_user_and_token(self):
        r = self.client.post(
            "/api/auth/register",
            {"email": "bob@example.com", "password": "secret1", "name": "Bob"},
            format="json",
        )
        self.assertEqual(r.status_code, 201)
        body = r.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["message"], "User registered successfully")
        self.assertEqual(body["data"]["email"], "bob@example.com")
        self.assertEqual(body["data"]["name"], "Bob")
        self.assertIn("_id", body["data"])
        self.assertTrue(body["data"]["token"])
        self.assertNotIn("password", body["data"])

        stored = User.objects.get(email="bob@example.com")
        self.assertNotEqual(stored.password, "secret1")
        self.assertTrue(stored.check_password("secret1"))

    def test_register_token_authenticates_me(self):
        r = self.client.post(
            "/api/auth/register/", {"email": "carol@example.com", "password": "secret1"}, format="json"
        )
        self.assertEqual(r.status_code, 201)
        token = r.json()["data"]["token"]

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        me = self.client.get("/api/auth/me")
        self.assertEqual(me.status_code, 200)
        self.assertEqual(me.json()["data"]["email"], "carol@example.com")
        self.assertEqual(me.json()["data"]["name"], "")

    def test_register_duplicate_email_400(self):
        r = self.client.post(
            "/api/auth/register", {"email": "alice@example.com", "password": "another1"}, format="json"
        )
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json(), {"success": False, "message": "User already exists with this email"})
        self.assertEqual(User.objects.filter(email="alice@example.com").count(), 1)

    def test_register_missing_password_400(self):
        r = self.client.post("/api/auth/register", {"email": "dave@example.com"}, format="json")
        self.assertEqual(r.status_code, 400)
        body = r.json()
        self.assertFalse(body["success"])
        self.assertIn("password", body["errors"])
        self.assertFalse(User.objects.filter(email="dave@example.com").exists())

    def test_register_missing_email_400(self):
        r = self.client.post("/api/auth/register", {"password": "secret1", "name": "Nobody"}, format="json")
        self.assertEqual(r.status_code, 400)
        body = r.json()
        self.assertEqual(body["message"], "Please provide email and password")
        self.assertIn("email", body["errors"])

    def test_register_short_password_400(self):
        r = self.client.post("/api/auth/register", {"email": "erin@example.com", "password": "abc"}, format="json")
        self.assertEqual(r.status_code, 400)
        self.assertIn("password", r.json()["errors"])

    def test_register_unknown_field_400(self):
        r = self.client.post(
            "/api/auth/register",
            {"email": "frank@example.com", "password": "secret1", "isAdmin": True},
            format="json",
        )
        self.assertEqual(r.status_code, 400)
        self.assertIn("isAdmin", r.json()["errors"])

    def test_login_success(self):
        r = self.client.post(
            "/api/auth/login", {"email": "alice@example.com", "password": "pass12345"}, format="json"
        )
        self.assertEqual(r.status_code, 200)
        body = r.json()
        self.assertEqual(body["message"], "Login successful")
        self.assertEqual(body["data"]["_id"], self.user.pk)
        self.assertEqual(body["data"]["name"], "Alice")
        self.assertTrue(body["data"]["token"])

    def test_login_wrong_password_and_unknown_email_look_the_same(self):
        wrong = self.client.post(
            "/api/auth/login", {"email": "alice@example.com", "password": "nope12345"}, format="json"
        )
        unknown = self.client.post(
            "/api/auth/login", {"email": "nobody@example.com", "password": "pass12345"}, format="json"
        )
        self.assertEqual(wrong.status_code, 401)
        self.assertEqual(unknown.status_code, 401)
        self.assertEqual(wrong.json(), unknown.json())
        self.assertEqual(wrong.json()["message"], "Invalid email or password")

    def test_login_email_is_case_sensitive(self):
        r = self.client.post(
            "/api/auth/login", {"email": "ALICE@example.com", "password": "pass12345"}, format="json"
        )
        self.assertEqual(r.status_code, 401)

    def test_login_missing_fields_400(self):
        r = self.client.post("/api/auth/login", {"email": "alice@example.com"}, format="json")
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json()["message"], "Please provide email and password")

    def test_login_ignores_stale_bearer_header(self):
        self.client.credentials(HTTP_AUTHORIZATION="Bearer garbage")
        r = self.client.post(
            "/api/auth/login", {"email": "alice@example.com", "password": "pass12345"}, format="json"
        )
        self.assertEqual(r.status_code, 200)

    def test_me_returns_current_user(self):
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {issue_token(self.user)}")
        r = self.client.get("/api/auth/me/")
        self.assertEqual(r.status_code, 200)
        data = r.json()["data"]
        self.assertEqual(data["_id"], self.user.pk)
        self.assertEqual(data["email"], "alice@example.com")
        self.assertIn("createdAt", data)
        self.assertNotIn("password", data)

    def test_me_without_token_401(self):
        r = self.client.get("/api/auth/me")
        self.assertEqual(r.status_code, 401)
        self.assertEqual(r.json(), {"success": False, "message": "Not authorized, no token"})
        self.assertEqual(r.headers.get("WWW-Authenticate"), "Bearer")

    def test_me_with_bad_token_401(self):
        self.client.credentials(HTTP_AUTHORIZATION="Bearer not-a-jwt")
        r = self.client.get("/api/auth/me")
        self.assertEqual(r.status_code, 401)
        self.assertEqual(r.json()["message"], "Not authorized, token failed")

    def test_me_token_for_deleted_user_401(self):
        token = issue_token(self.user)
        self.user.delete()
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        r = self.client.get("/api/auth/me")
        self.assertEqual(r.status_code, 401)

    def test_login_throttled_429(self):
        rates = dict(ScopedRateThrottle.THROTTLE_RATES, **{"auth-login": "2/min"})
        with patch.object(ScopedRateThrottle, "THROTTLE_RATES", rates):
            for _ in range(2):
                r = self.client.post(
                    "/api/auth/login", {"email": "alice@example.com", "password": "bad"}, format="json"
                )
                self.assertEqual(r.status_code, 401)
            r3 = self.client.post(
                "/api/auth/login", {"email": "alice@example.com", "password": "bad"}, format="json"
            )
        self.assertEqual(r3.status_code, 429)
        self.assertFalse(r3.json()["success"])
