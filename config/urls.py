from django.urls import include
from django.urls import path

from .health import health as health_view

urlpatterns = [
    path("health/", health_view, name="health"),
    # API v1 (namespace 'api_v1')
    path("api/v1/", include(("config.api_router", "api"), namespace="api_v1")),
]
