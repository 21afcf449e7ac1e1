from .base import *  # noqa: F403
from .base import env

# GENERAL
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#debug
DEBUG = True
# https://docs.djangoproject.com/en/dev/ref/settings/#secret-key
SECRET_KEY = env(
    "DJANGO_SECRET_KEY",
    default="local-only-3sV8nQ1rT6yZ0bW4mK9pJ2hX7cF5gD1e",
)
# https://docs.djangoproject.com/en/dev/ref/settings/#allowed-hosts
ALLOWED_HOSTS = ["localhost", "0.0.0.0", "127.0.0.1"]  # noqa: S104

SIMPLE_JWT = {**SIMPLE_JWT, "SIGNING_KEY": env("JWT_SECRET", default=SECRET_KEY)}  # noqa: F405

REALTIME_LOG_LEVEL = "DEBUG"
LOGGING["loggers"]["taskflow.realtime"]["level"] = REALTIME_LOG_LEVEL  # noqa: F405
