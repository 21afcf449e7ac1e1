"""
With these settings, tests run faster.
"""

from .base import *  # noqa: F403
from .base import env

# GENERAL
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#secret-key
SECRET_KEY = env(
    "DJANGO_SECRET_KEY",
    default="Jq0tfLk6uVZ3p1W9dSgH2mXbR7cYeN4aT8oKwE5iUvC0xMzQ",
)
# https://docs.djangoproject.com/en/dev/ref/settings/#test-runner
TEST_RUNNER = "django.test.runner.DiscoverRunner"

# DATABASES
# ------------------------------------------------------------------------------
DATABASES = {"default": {"ENGINE": "django.db.backends.sqlite3", "NAME": ":memory:"}}

# JWT
# ------------------------------------------------------------------------------
SIMPLE_JWT = {**SIMPLE_JWT, "SIGNING_KEY": SECRET_KEY}  # noqa: F405

# REALTIME
# ------------------------------------------------------------------------------
REALTIME_CORS_ALLOWED_ORIGINS = ["http://testserver"]
# Your stuff...
# ------------------------------------------------------------------------------
