"""
Base settings to build other settings files upon.
"""

from datetime import timedelta
from pathlib import Path

import environ

BASE_DIR = Path(__file__).resolve(strict=True).parent.parent.parent
# taskflow/
APPS_DIR = BASE_DIR / "taskflow"
env = environ.Env()

READ_DOT_ENV_FILE = env.bool("DJANGO_READ_DOT_ENV_FILE", default=False)
if READ_DOT_ENV_FILE:
    # OS environment variables take precedence over variables from .env
    env.read_env(str(BASE_DIR / ".env"))

# GENERAL
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#debug
DEBUG = env.bool("DJANGO_DEBUG", False)
# https://docs.djangoproject.com/en/dev/ref/settings/#secret-key
SECRET_KEY = env("DJANGO_SECRET_KEY", default="change-me-in-production")
# https://docs.djangoproject.com/en/dev/ref/settings/#allowed-hosts
ALLOWED_HOSTS = env.list("DJANGO_ALLOWED_HOSTS", default=["localhost", "127.0.0.1"])
TIME_ZONE = "UTC"
LANGUAGE_CODE = "en-us"
USE_I18N = True
USE_TZ = True

# DATABASES
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#databases
DATABASES = {
    "default": env.db(
        "DATABASE_URL",
        default=f"sqlite:///{BASE_DIR / 'db.sqlite3'}",
    ),
}
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# URLS
# ------------------------------------------------------------------------------
ROOT_URLCONF = "config.urls"
ASGI_APPLICATION = "config.asgi.application"

# APPS
# ------------------------------------------------------------------------------
DJANGO_APPS = [
    "django.contrib.auth",
    "django.contrib.contenttypes",
]
THIRD_PARTY_APPS = [
    "rest_framework",
    "rest_framework_simplejwt",
]
LOCAL_APPS = [
    "taskflow.realtime",
]
INSTALLED_APPS = DJANGO_APPS + THIRD_PARTY_APPS + LOCAL_APPS

# MIDDLEWARE
# ------------------------------------------------------------------------------
MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

# TEMPLATES
# ------------------------------------------------------------------------------
TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {"context_processors": []},
    },
]

# LOGGING
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#logging
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "%(levelname)s %(asctime)s %(module)s %(process)d %(thread)d %(message)s",
        },
    },
    "handlers": {
        "console": {
            "level": "DEBUG",
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {"level": env("DJANGO_LOG_LEVEL", default="INFO"), "handlers": ["console"]},
    "loggers": {
        "taskflow.realtime": {
            "level": env("REALTIME_LOG_LEVEL", default="INFO"),
            "propagate": True,
        },
        # python-socketio / python-engineio are noisy at INFO
        "socketio": {"level": "WARNING", "propagate": True},
        "engineio": {"level": "WARNING", "propagate": True},
    },
}

# django-rest-framework
# -------------------------------------------------------------------------------
# django-rest-framework - https://www.django-rest-framework.org/api-guide/settings/
REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": (
        "taskflow.users.authentication.BearerTokenAuthentication",
    ),
    "DEFAULT_PERMISSION_CLASSES": ("rest_framework.permissions.IsAuthenticated",),
}

# djangorestframework-simplejwt
# ------------------------------------------------------------------------------
# Tokens carry the subject under `userId`, the claim name the frontend already
# reads from its tokens.
SIMPLE_JWT = {
    "SIGNING_KEY": env("JWT_SECRET", default=SECRET_KEY),
    "ACCESS_TOKEN_LIFETIME": timedelta(days=env.int("JWT_EXPIRY_DAYS", default=7)),
    "REFRESH_TOKEN_LIFETIME": timedelta(days=30),
    "USER_ID_CLAIM": "userId",
    "AUTH_HEADER_TYPES": ("Bearer",),
}
JWT_AUTH_COOKIE = env("JWT_AUTH_COOKIE", default="token")

# REALTIME (python-socketio)
# ------------------------------------------------------------------------------
REALTIME_SOCKETIO_PATH = env("REALTIME_SOCKETIO_PATH", default="socket.io")
REALTIME_CORS_ALLOWED_ORIGINS = env.list(
    "FRONTEND_URL",
    default=["http://localhost:5173", "http://localhost:5174"],
)
# A second login for the same user only redirects unicasts by default.
REALTIME_CLOSE_SUPERSEDED = env.bool("REALTIME_CLOSE_SUPERSEDED", default=False)
REALTIME_RECONNECTION = {
    "DELAY": env.float("REALTIME_RECONNECTION_DELAY", default=1.0),
    "DELAY_MAX": env.float("REALTIME_RECONNECTION_DELAY_MAX", default=5.0),
    "ATTEMPTS": env.int("REALTIME_RECONNECTION_ATTEMPTS", default=5),
    "RANDOMIZATION_FACTOR": 0.5,
}
