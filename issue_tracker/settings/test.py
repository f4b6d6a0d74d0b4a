"""
Test settings (extends dev).

- Fast password hashing; tests create many users.
- Fixed token secret so tokens minted in one test module verify in another.
- Generous throttle rates: the throttle cache outlives individual tests.
- In-memory SQLite.
"""

from .dev import *  # noqa

DEBUG = False

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

JWT_SECRET = "test-jwt-secret"
JWT_EXPIRE = "30d"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

REST_FRAMEWORK = {
    **REST_FRAMEWORK,  # type: ignore[name-defined]
    "DEFAULT_THROTTLE_RATES": {
        "user": "10000/min",
        "anon": "10000/min",
        "auth-login": "10000/min",
        "auth-register": "10000/min",
    },
}
