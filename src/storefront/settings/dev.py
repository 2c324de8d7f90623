"""Development settings."""

from .base import *  # noqa: F401,F403

DEBUG = True

SECRET_KEY = SECRET_KEY or "dev-secret-key-not-for-production"  # noqa: F405

ALLOWED_HOSTS = ["localhost", "127.0.0.1"]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "db.sqlite3",  # noqa: F405
    }
}
