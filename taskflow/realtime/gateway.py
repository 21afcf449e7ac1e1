"""Connection gateway: handshake, presence bookkeeping and event intake.

Lifecycle of one Socket.IO connection::

    (handshake) --auth ok--> OPEN --transport close--> CLOSED
         |
         +--auth fails--> refused (never registered, nothing broadcast)

Only OPEN connections are registered, and inbound events from any other sid
are dropped, so no handler acts on behalf of an unauthenticated peer.
"""

from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING
from typing import Any
from urllib.parse import parse_qs

from asgiref.sync import sync_to_async
from django.utils import timezone
from socketio.exceptions import ConnectionRefusedError as HandshakeRefused

from taskflow.users.tokens import AuthError
from taskflow.users.tokens import default_verifier

from .messages import EventDecodeError
from .messages import EventKind
from .presence import PresenceTable
from .router import EventRouter
from .serializers import INBOUND_SERIALIZERS
from .serializers import decode_inbound

if TYPE_CHECKING:  # import for type checking only
    from collections.abc import Awaitable
    from collections.abc import Callable
    from datetime import datetime

    import socketio

    from taskflow.users.tokens import TokenVerifier

logger = logging.getLogger(__name__)

HANDSHAKE_FAILED = "Authentication failed"


class ConnectionState(str, enum.Enum):
    OPEN = "open"
    CLOSED = "closed"


class Connection:
    """One admitted client. The user id is fixed at handshake."""

    __slots__ = ("_user_id", "connected_at", "sid", "state")

    def __init__(self, sid: str, user_id: str, connected_at: datetime) -> None:
        self.sid = sid
        self._user_id = user_id
        self.connected_at = connected_at
        self.state = ConnectionState.OPEN

    @property
    def user_id(self) -> str:
        return self._user_id

    @property
    def is_open(self) -> bool:
        return self.state is ConnectionState.OPEN

    def close(self) -> None:
        self.state = ConnectionState.CLOSED

    def __repr__(self) -> str:
        return f"<Connection {self.sid} user={self._user_id} {self.state.value}>"


def extract_token(environ: dict[str, Any], auth: Any | None) -> str | None:
    """Pull the bearer token out of handshake-time metadata.

    ``auth.token`` is the primary source. The connection query string
    (``?token=``) is accepted as a fallback; it is handshake-time too.
    python-socketio passes different ``environ`` shapes depending on the
    server:
    - ASGI: the ASGI scope with ``query_string: bytes``
    - WSGI: a WSGI environ with ``QUERY_STRING: str``
    - some servers nest the scope under ``asgi.scope``
    """
    if isinstance(auth, dict):
        auth_token = auth.get("token")
        if isinstance(auth_token, str) and auth_token:
            return auth_token

    scope = environ.get("asgi.scope", environ) if isinstance(environ, dict) else {}
    if not isinstance(scope, dict):
        return None
    query_string = scope.get("query_string", scope.get("QUERY_STRING", ""))
    if isinstance(query_string, (bytes, bytearray)):
        query_string = query_string.decode(errors="ignore")
    tokens = parse_qs(str(query_string)).get("token")
    return tokens[0] if tokens else None


class RealtimeGateway:
    """Owns the connection registry and the presence table for one server."""

    def __init__(
        self,
        sio: socketio.AsyncServer,
        verifier: TokenVerifier | None = None,
        *,
        clock: Callable[[], datetime] | None = None,
        close_superseded: bool = False,
    ) -> None:
        self.sio = sio
        self.verifier = verifier or default_verifier
        self.clock = clock or timezone.now
        self.close_superseded = close_superseded
        self.presence = PresenceTable()
        self.router = EventRouter(sio, self.presence, clock=self.clock)
        self._connections: dict[str, Connection] = {}
        # sids whose token is still being verified
        self._pending: set[str] = set()

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    def get_connection(self, sid: str) -> Connection | None:
        return self._connections.get(sid)

    def install(self) -> None:
        """Register connect/disconnect and every inbound task event on ``sio``."""
        self.sio.on("connect", self.on_connect)
        self.sio.on("disconnect", self.on_disconnect)
        for event_name in INBOUND_SERIALIZERS:
            self.sio.on(event_name, self._inbound_handler(event_name))

    async def authenticate(self, environ: dict[str, Any], auth: Any | None) -> str:
        token = extract_token(environ, auth)
        if not token:
            msg = "No authentication token provided"
            raise AuthError(msg)
        # Token verification is sync; keep the loop free for other sockets.
        return await sync_to_async(self.verifier.verify)(token)

    async def on_connect(
        self,
        sid: str,
        environ: dict[str, Any],
        auth: Any | None = None,
    ) -> None:
        self._pending.add(sid)
        try:
            user_id = await self.authenticate(environ, auth)
        except AuthError as exc:
            logger.info("Refused realtime connection %s: %s", sid, exc)
            # The verifier's reason stays server-side.
            raise HandshakeRefused(HANDSHAKE_FAILED) from None
        finally:
            still_pending = sid in self._pending
            self._pending.discard(sid)

        if not still_pending:
            # The transport closed while the token was being verified.
            logger.info("Connection %s closed during handshake", sid)
            raise HandshakeRefused(HANDSHAKE_FAILED)

        connection = Connection(sid, user_id, self.clock())
        self._connections[sid] = connection
        superseded = self.presence.set(user_id, sid)
        logger.info("User connected: %s (userId: %s)", sid, user_id)

        await self.router.announce(EventKind.ONLINE, user_id, skip_sid=sid)

        if superseded is not None and superseded != sid and self.close_superseded:
            logger.info(
                "Closing superseded connection %s of user %s",
                superseded,
                user_id,
            )
            await self.sio.disconnect(superseded)

    async def on_disconnect(self, sid: str, reason: Any = None) -> None:
        self._pending.discard(sid)
        connection = self._connections.pop(sid, None)
        if connection is None:
            # Refused at handshake, or already cleaned up.
            return
        connection.close()
        self.presence.delete_if_matches(connection.user_id, sid)
        logger.info(
            "User disconnected: %s (userId: %s, reason: %s)",
            sid,
            connection.user_id,
            reason,
        )
        await self.router.announce(EventKind.OFFLINE, connection.user_id, skip_sid=sid)

    async def handle_event(self, event_name: str, sid: str, data: Any) -> None:
        connection = self._connections.get(sid)
        if connection is None or not connection.is_open:
            logger.warning("Dropping %s from unauthenticated sid %s", event_name, sid)
            return
        try:
            event = decode_inbound(event_name, data)
        except EventDecodeError as exc:
            logger.warning(
                "Dropping malformed %s from user %s: %s",
                event_name,
                connection.user_id,
                exc.detail,
            )
            return
        await self.router.route(event, connection.user_id)

    def _inbound_handler(self, event_name: str) -> Callable[..., Awaitable[None]]:
        async def handler(sid: str, *args: Any) -> None:
            await self.handle_event(event_name, sid, args[0] if args else None)

        handler.__name__ = f"on_{event_name.replace(':', '_')}"
        return handler
