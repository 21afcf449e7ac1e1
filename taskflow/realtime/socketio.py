"""Global Socket.IO server for the frontend.

Frontend convention:
- URL base: ws://<host>:<port>
- Socket.IO path: ``settings.REALTIME_SOCKETIO_PATH`` (``/socket.io`` by default)
- Auth: ``auth.token`` (JWT access token), ``query.token`` as fallback

Handlers run inline (``async_handlers=False``) so events from one connection
are processed in the order they arrive.
"""

from __future__ import annotations

import socketio
from django.conf import settings

from taskflow.realtime.gateway import RealtimeGateway

sio = socketio.AsyncServer(
    async_mode="asgi",
    cors_allowed_origins=settings.REALTIME_CORS_ALLOWED_ORIGINS,
    async_handlers=False,
    logger=False,
    engineio_logger=False,
)

gateway = RealtimeGateway(
    sio,
    close_superseded=settings.REALTIME_CLOSE_SUPERSEDED,
)
gateway.install()
