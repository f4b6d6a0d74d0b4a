from __future__ import annotations

from datetime import timedelta

from django.contrib.auth import get_user_model
from django.core.exceptions import ImproperlyConfigured
from django.test import TestCase, override_settings
from jose import jwt

from accounts.tokens import issue_token, parse_lifetime, verify_token
from core.exceptions import AuthenticationError

User = get_user_model()


class ParseLifetimeTests(TestCase):
    def test_units(self):
        self.assertEqual(parse_lifetime("30d"), timedelta(days=30))
        self.assertEqual(parse_lifetime("12h"), timedelta(hours=12))
        self.assertEqual(parse_lifetime("15m"), timedelta(minutes=15))
        self.assertEqual(parse_lifetime("90s"), timedelta(seconds=90))
        self.assertEqual(parse_lifetime("2w"), timedelta(weeks=2))
        self.assertEqual(parse_lifetime("3600"), timedelta(seconds=3600))
        self.assertEqual(parse_lifetime(60), timedelta(seconds=60))

    def test_rejects_garbage_and_zero(self):
        for value in ("", "abc", "0d", "-5m", "10y"):
            with self.subTest(value=value):
                with self.assertRaises(ImproperlyConfigured):
                    parse_lifetime(value)


class TokenTests(TestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_user(email="alice@example.com", password="pass12345")

    def test_issue_then_verify_yields_user_id(self):
        claims = verify_token(issue_token(self.user))
        self.assertEqual(claims.user_id, self.user.pk)
        self.assertTrue(claims.token_id)
        self.assertEqual(claims.expires_at - claims.issued_at, timedelta(days=30))

    def test_tokens_are_unique_per_issue(self):
        self.assertNotEqual(issue_token(self.user), issue_token(self.user))

    def test_expired_token_rejected(self):
        token = issue_token(self.user, expires_in=timedelta(seconds=-10))
        with self.assertRaises(AuthenticationError) as ctx:
            verify_token(token)
        self.assertEqual(ctx.exception.message, "Not authorized, token failed")

    def test_tampered_token_rejected(self):
        header, payload, signature = issue_token(self.user).split(".")
        tampered = ".".join([header, payload, signature[::-1]])
        with self.assertRaises(AuthenticationError):
            verify_token(tampered)

    def test_token_signed_with_other_secret_rejected(self):
        with override_settings(JWT_SECRET="some-other-secret"):
            token = issue_token(self.user)
        with self.assertRaises(AuthenticationError):
            verify_token(token)

    def test_token_without_subject_rejected(self):
        token = jwt.encode({"exp": 4102444800}, "test-jwt-secret", algorithm="HS256")
        with self.assertRaises(AuthenticationError):
            verify_token(token)

    def test_non_numeric_subject_rejected(self):
        token = jwt.encode({"sub": "abc", "exp": 4102444800}, "test-jwt-secret", algorithm="HS256")
        with self.assertRaises(AuthenticationError):
            verify_token(token)

    def test_garbage_rejected(self):
        for value in ("", "abc", "a.b.c"):
            with self.subTest(value=value):
                with self.assertRaises(AuthenticationError):
                    verify_token(value)
