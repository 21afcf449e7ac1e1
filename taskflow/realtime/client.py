"""Python client for the realtime gateway.

Used by workers and scripts that need live task updates, and as the reference
for how clients are expected to behave: the token goes in the handshake
``auth`` payload, reconnects back off exponentially up to a cap, and after a
bounded number of attempts the client gives up and reports that it cannot
connect.
"""

from __future__ import annotations

import asyncio
import logging
import random
import uuid
from dataclasses import dataclass
from typing import TYPE_CHECKING
from typing import Any

import socketio
from django.conf import settings

if TYPE_CHECKING:  # import for type checking only
    from collections.abc import Awaitable
    from collections.abc import Callable

logger = logging.getLogger(__name__)


class RealtimeUnavailableError(ConnectionError):
    """The gateway could not be reached within the reconnection policy."""


@dataclass(frozen=True)
class ReconnectPolicy:
    delay: float = 1.0
    delay_max: float = 5.0
    attempts: int = 5
    randomization_factor: float = 0.5

    @classmethod
    def from_settings(cls) -> ReconnectPolicy:
        conf = getattr(settings, "REALTIME_RECONNECTION", {})
        return cls(
            delay=float(conf.get("DELAY", cls.delay)),
            delay_max=float(conf.get("DELAY_MAX", cls.delay_max)),
            attempts=int(conf.get("ATTEMPTS", cls.attempts)),
            randomization_factor=float(
                conf.get("RANDOMIZATION_FACTOR", cls.randomization_factor),
            ),
        )

    def delay_for(
        self,
        attempt: int,
        rand: Callable[[], float] = random.random,
    ) -> float:
        """Seconds to wait before retry number ``attempt`` (1-based).

        Same schedule python-socketio uses for its own reconnects:
        ``min(delay * 2 ** (attempt - 1), delay_max)`` jittered by
        ``randomization_factor``.
        """
        base = min(self.delay * 2 ** (max(attempt, 1) - 1), self.delay_max)
        jitter = self.randomization_factor * (2 * rand() - 1) * base
        return max(0.0, base + jitter)

    def client_kwargs(self) -> dict[str, Any]:
        return {
            "reconnection": True,
            "reconnection_attempts": self.attempts,
            "reconnection_delay": self.delay,
            "reconnection_delay_max": self.delay_max,
            "randomization_factor": self.randomization_factor,
        }


class TaskEventsClient:
    """Thin wrapper around ``socketio.AsyncClient`` for task events.

    Assignment notifications addressed to this user are kept in
    :attr:`notifications`, newest first, until marked read.
    """

    def __init__(
        self,
        url: str,
        token: str,
        *,
        policy: ReconnectPolicy | None = None,
        socketio_path: str | None = None,
        client: socketio.AsyncClient | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self.url = url
        self.token = token
        self.policy = policy or ReconnectPolicy.from_settings()
        self.socketio_path = socketio_path or settings.REALTIME_SOCKETIO_PATH
        self.sio = client or socketio.AsyncClient(**self.policy.client_kwargs())
        self._sleep = sleep
        self.notifications: list[dict[str, Any]] = []
        self.error: str | None = None

        self.sio.on("connect", self._on_connect)
        self.sio.on("disconnect", self._on_disconnect)
        self.sio.on("connect_error", self._on_connect_error)
        self.sio.on("notification:taskAssigned", self._on_task_assigned)

    @property
    def is_connected(self) -> bool:
        return bool(self.sio.connected)

    @property
    def unread_count(self) -> int:
        return sum(1 for n in self.notifications if not n["read"])

    async def connect(self) -> None:
        """Connect, retrying per the policy; raise if every attempt fails."""
        last_exc: Exception | None = None
        for attempt in range(self.policy.attempts + 1):
            if attempt:
                await self._sleep(self.policy.delay_for(attempt))
            try:
                await self.sio.connect(
                    self.url,
                    auth={"token": self.token},
                    socketio_path=self.socketio_path,
                )
            except socketio.exceptions.ConnectionError as exc:
                last_exc = exc
                self.error = str(exc)
                logger.warning(
                    "Realtime connect attempt %s/%s failed: %s",
                    attempt + 1,
                    self.policy.attempts + 1,
                    exc,
                )
                continue
            return

        msg = "cannot connect"
        raise RealtimeUnavailableError(msg) from last_exc

    async def disconnect(self) -> None:
        await self.sio.disconnect()

    def subscribe(self, event: str, callback: Callable[..., Any]) -> None:
        self.sio.on(event, callback)

    def unsubscribe(self, event: str) -> None:
        self.sio.handlers.get("/", {}).pop(event, None)

    async def emit(self, event: str, data: dict[str, Any]) -> None:
        await self.sio.emit(event, data)

    def mark_all_read(self) -> None:
        for notification in self.notifications:
            notification["read"] = True

    async def _on_connect(self) -> None:
        logger.info("Socket connected")
        self.error = None

    async def _on_disconnect(self, reason: Any = None) -> None:
        logger.info("Socket disconnected (%s)", reason)

    async def _on_connect_error(self, data: Any = None) -> None:
        self.error = data.get("message") if isinstance(data, dict) else str(data)
        logger.warning("Socket connection error: %s", self.error)

    async def _on_task_assigned(self, data: dict[str, Any]) -> None:
        logger.info("Task assigned notification: %s", data)
        self.notifications.insert(
            0,
            {**data, "id": uuid.uuid4().hex, "type": "info", "read": False},
        )
