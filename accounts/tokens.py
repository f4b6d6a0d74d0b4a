"""
Bearer token issuance and verification.

Tokens are HS256 JWTs (python-jose) carrying:

    sub  user id (string)
    iat  issued-at (epoch seconds)
    exp  expiry (epoch seconds); lifetime from `settings.JWT_EXPIRE`, default 30 days
    jti  random token id (uuid4 hex), for log correlation

Verification never tells the caller *why* a token was refused: expired,
malformed, wrongly signed, or missing claims all raise the same
`AuthenticationError`. The reason is logged at DEBUG only.
"""

from __future__ import annotations

import logging
import re
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from jose import JWTError, jwt

from core.exceptions import TOKEN_FAILED_MESSAGE, AuthenticationError

logger = logging.getLogger("accounts.tokens")

_LIFETIME_RE = re.compile(r"^\s*(\d+)\s*([smhdw]?)\s*$", re.IGNORECASE)
_LIFETIME_UNITS = {
    "": "seconds",
    "s": "seconds",
    "m": "minutes",
    "h": "hours",
    "d": "days",
    "w": "weeks",
}


@dataclass(frozen=True)
class TokenClaims:
    """Verified token contents; attached to `request.auth` for the request's lifetime."""
    user_id: int
    token_id: str
    issued_at: datetime
    expires_at: datetime


def parse_lifetime(value: str | int) -> timedelta:
    """
    Parse a token lifetime such as ``"30d"``, ``"12h"``, ``"15m"``, ``"90s"``,
    ``"2w"`` or a bare number of seconds.

    Raises:
        ImproperlyConfigured: when the value is not a positive duration.
    """
    match = _LIFETIME_RE.match(str(value))
    if not match or int(match.group(1)) <= 0:
        raise ImproperlyConfigured(f"Invalid token lifetime: {value!r}")
    amount, unit = match.groups()
    return timedelta(**{_LIFETIME_UNITS[unit.lower()]: int(amount)})


def _signing_key() -> str:
    return settings.JWT_SECRET


def _algorithm() -> str:
    return getattr(settings, "JWT_ALGORITHM", "HS256")


def issue_token(user, *, expires_in: timedelta | None = None) -> str:
    """
    Create a signed bearer token for `user`.

    Args:
        user: A saved user instance.
        expires_in: Optional lifetime override (defaults to `settings.JWT_EXPIRE`).

    Returns:
        Encoded JWT string.
    """
    lifetime = expires_in if expires_in is not None else parse_lifetime(settings.JWT_EXPIRE)
    issued_at = datetime.now(timezone.utc)
    claims = {
        "sub": str(user.pk),
        "iat": int(issued_at.timestamp()),
        "exp": int((issued_at + lifetime).timestamp()),
        "jti": uuid.uuid4().hex,
    }
    return jwt.encode(claims, _signing_key(), algorithm=_algorithm())


def verify_token(token: str) -> TokenClaims:
    """
    Decode and validate a bearer token.

    Raises:
        AuthenticationError: for any invalid token, with one uniform message.
    """
    try:
        payload = jwt.decode(
            token,
            _signing_key(),
            algorithms=[_algorithm()],
            options={"require_exp": True, "require_sub": True},
        )
        user_id = int(payload["sub"])
        issued_at = datetime.fromtimestamp(int(payload.get("iat", 0)), tz=timezone.utc)
        expires_at = datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc)
    except (JWTError, KeyError, TypeError, ValueError) as exc:
        logger.debug("token rejected: %s", exc)
        raise AuthenticationError(TOKEN_FAILED_MESSAGE) from None

    return TokenClaims(
        user_id=user_id,
        token_id=str(payload.get("jti", "")),
        issued_at=issued_at,
        expires_at=expires_at,
    )
