"""
DRF authentication class for `Authorization: Bearer <token>` headers.

Behavior
--------
- No `Authorization` header, or a different scheme: returns None (anonymous);
  `IsAuthenticated` then answers 401 "Not authorized, no token".
- Malformed header, invalid/expired token, or a token whose user no longer
  exists or is inactive: 401 "Not authorized, token failed".
- Success: `request.user` is the `User`, `request.auth` the verified
  `accounts.tokens.TokenClaims`.
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from rest_framework.authentication import BaseAuthentication, get_authorization_header

from core.exceptions import TOKEN_FAILED_MESSAGE, AuthenticationError

from .tokens import verify_token

User = get_user_model()


class BearerTokenAuthentication(BaseAuthentication):
    keyword = "Bearer"

    def authenticate(self, request):
        parts = get_authorization_header(request).split()
        if not parts or parts[0].lower() != self.keyword.lower().encode():
            return None
        if len(parts) != 2:
            raise AuthenticationError(TOKEN_FAILED_MESSAGE)

        try:
            token = parts[1].decode()
        except UnicodeError:
            raise AuthenticationError(TOKEN_FAILED_MESSAGE) from None

        claims = verify_token(token)
        user = User.objects.filter(pk=claims.user_id, is_active=True).first()
        if user is None:
            raise AuthenticationError(TOKEN_FAILED_MESSAGE)
        return user, claims

    def authenticate_header(self, request):
        return self.keyword
