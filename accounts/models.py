"""Custom user model for Issue Tracker.

Identity
--------
- Users sign in with their **email** (`USERNAME_FIELD = "email"`); there is no
  username column.
- Email is unique and compared exactly as stored (no case folding), so
  `Alice@example.com` and `alice@example.com` are different accounts.
- `name` is an optional display name shown next to issues.
- `date_joined` is exposed to clients as `createdAt`.

Behavior
--------
- Passwords are stored through Django's password hashers; the plaintext never
  touches the database and no serializer ever returns the hash.
"""

from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.db import models


class UserManager(BaseUserManager):
    """Email-keyed manager; mirrors Django's `UserManager` minus the username."""

    use_in_migrations = True

    def _create_user(self, email, password, **extra_fields):
        if not email:
            raise ValueError("The email must be set")
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, email, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")
        return self._create_user(email, password, **extra_fields)


class User(AbstractUser):
    """Project user: email login plus an optional display name."""

    username = None
    email = models.EmailField("email address", unique=True)
    name = models.CharField(max_length=100, blank=True)

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS: list[str] = []

    objects = UserManager()

    def __str__(self) -> str:
        return self.name or self.email
