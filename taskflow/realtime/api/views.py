from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from taskflow.realtime.socketio import gateway


class PresenceView(APIView):
    """Users currently connected to the realtime gateway."""

    permission_classes = [IsAuthenticated]

    def get(self, request):
        online = gateway.presence.online_users()
        return Response({"online": online, "count": len(online)})
