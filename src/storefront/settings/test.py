"""Test settings."""

from pathlib import Path

from .base import *  # noqa: F401,F403

SECRET_KEY = "test-secret-key-not-for-production"
DEBUG = False

ALLOWED_HOSTS = ["testserver", "localhost"]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

STOREFRONT_CATALOG_DIR = Path(__file__).resolve().parent.parent / "catalog" / "tests" / "data"

LOGGING["loggers"]["storefront"]["level"] = "WARNING"  # noqa: F405
LOGGING["loggers"]["storefront"]["propagate"] = True  # noqa: F405
