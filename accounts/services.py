"""
Auth gateway: registration, login and "who am I".

Every function raises a `core.exceptions` domain error instead of returning
status codes; the API views only shape responses.

Security
--------
- Login failures (unknown email, wrong password, inactive account) all raise the
  same `AuthenticationError("Invalid email or password")`. Django's ModelBackend
  still runs the password hasher for unknown emails, keeping timing similar.
- Passwords are validated with `AUTH_PASSWORD_VALIDATORS` and stored hashed.
- Emails and passwords are never logged; user ids are.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from django.contrib.auth import authenticate, get_user_model
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction

from core.exceptions import AuthenticationError, ConflictError, NotFoundError, ValidationError

from .tokens import issue_token

logger = logging.getLogger("accounts.services")

User = get_user_model()

MISSING_CREDENTIALS_MESSAGE = "Please provide email and password"
INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"
DUPLICATE_EMAIL_MESSAGE = "User already exists with this email"


@dataclass(frozen=True)
class AuthResult:
    user: User
    token: str


def register_user(email: Optional[str], password: Optional[str], name: Optional[str] = None) -> AuthResult:
    """
    Create an account and issue its first token.

    Raises:
        ValidationError: email or password missing, or password rejected by validators.
        ConflictError: an account with this exact email already exists.
    """
    if not email or not password:
        raise ValidationError(MISSING_CREDENTIALS_MESSAGE)

    if User.objects.filter(email=email).exists():
        raise ConflictError(DUPLICATE_EMAIL_MESSAGE)

    try:
        validate_password(password, user=User(email=email, name=name or ""))
    except DjangoValidationError as exc:
        raise ValidationError(" ".join(exc.messages), errors={"password": exc.messages}) from None

    try:
        with transaction.atomic():
            user = User.objects.create_user(email=email, password=password, name=name or "")
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email.
        raise ConflictError(DUPLICATE_EMAIL_MESSAGE) from None

    logger.info("user registered user_id=%s", user.pk)
    return AuthResult(user=user, token=issue_token(user))


def login_user(email: Optional[str], password: Optional[str], request=None) -> AuthResult:
    """
    Check credentials and issue a token.

    Raises:
        ValidationError: email or password missing.
        AuthenticationError: credentials do not match an active account.
    """
    if not email or not password:
        raise ValidationError(MISSING_CREDENTIALS_MESSAGE)

    user = authenticate(request, email=email, password=password)
    if user is None:
        logger.warning("login failed")
        raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

    logger.info("user logged in user_id=%s", user.pk)
    return AuthResult(user=user, token=issue_token(user))


def get_current_user(user_id) -> User:
    """
    Load the caller's account.

    Raises:
        NotFoundError: the id does not (or no longer) exist.
    """
    try:
        return User.objects.get(pk=user_id)
    except (User.DoesNotExist, TypeError, ValueError):
        raise NotFoundError("User not found") from None
