from django.contrib.auth import get_user_model
from django.test import TestCase

from accounts import services
from accounts.tokens import verify_token
from core.exceptions import AuthenticationError, ConflictError, NotFoundError, ValidationError

User = get_user_model()


class RegisterUserTests(TestCase):
    def test_creates_user_with_hashed_password(self):
        result = services.register_user("bob@example.com", "secret1", "Bob")
        self.assertEqual(result.user.email, "bob@example.com")
        self.assertEqual(result.user.name, "Bob")
        self.assertTrue(result.user.check_password("secret1"))
        self.assertEqual(verify_token(result.token).user_id, result.user.pk)

    def test_name_defaults_to_blank(self):
        result = services.register_user("bob@example.com", "secret1")
        self.assertEqual(result.user.name, "")

    def test_missing_credentials(self):
        for email, password in (("", "secret1"), ("bob@example.com", ""), (None, None)):
            with self.subTest(email=email, password=password):
                with self.assertRaises(ValidationError) as ctx:
                    services.register_user(email, password)
                self.assertEqual(ctx.exception.message, services.MISSING_CREDENTIALS_MESSAGE)

    def test_duplicate_email(self):
        services.register_user("bob@example.com", "secret1")
        with self.assertRaises(ConflictError) as ctx:
            services.register_user("bob@example.com", "secret2")
        self.assertEqual(ctx.exception.message, services.DUPLICATE_EMAIL_MESSAGE)
        self.assertEqual(User.objects.count(), 1)

    def test_password_validators_apply(self):
        with self.assertRaises(ValidationError) as ctx:
            services.register_user("bob@example.com", "abc")
        self.assertIn("password", ctx.exception.errors)
        self.assertFalse(User.objects.exists())


class LoginUserTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(email="alice@example.com", password="pass12345")

    def test_valid_credentials(self):
        result = services.login_user("alice@example.com", "pass12345")
        self.assertEqual(result.user, self.user)
        self.assertEqual(verify_token(result.token).user_id, self.user.pk)

    def test_invalid_credentials(self):
        for email, password in (("alice@example.com", "wrong"), ("nobody@example.com", "pass12345")):
            with self.subTest(email=email):
                with self.assertRaises(AuthenticationError) as ctx:
                    services.login_user(email, password)
                self.assertEqual(ctx.exception.message, services.INVALID_CREDENTIALS_MESSAGE)

    def test_inactive_user_cannot_log_in(self):
        self.user.is_active = False
        self.user.save(update_fields=["is_active"])
        with self.assertRaises(AuthenticationError):
            services.login_user("alice@example.com", "pass12345")

    def test_missing_credentials(self):
        with self.assertRaises(ValidationError):
            services.login_user("alice@example.com", "")


class GetCurrentUserTests(TestCase):
    def test_found(self):
        user = User.objects.create_user(email="alice@example.com", password="pass12345")
        self.assertEqual(services.get_current_user(user.pk), user)

    def test_missing_or_malformed(self):
        for value in (999999, "abc", None):
            with self.subTest(value=value):
                with self.assertRaises(NotFoundError):
                    services.get_current_user(value)
