from django.urls import include
from django.urls import path

app_name = "api"
urlpatterns = [
    path(
        "realtime/",
        include(("taskflow.realtime.api.urls", "realtime"), namespace="realtime"),
    ),
]
