from django.urls import path

from .views import PresenceView

app_name = "realtime"
urlpatterns = [
    path("presence/", PresenceView.as_view(), name="presence"),
]
