from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from typing import Any

from django.utils import timezone

from .messages import DomainEvent
from .messages import EventKind
from .messages import TaskAssigned

if TYPE_CHECKING:  # import for type checking only
    from collections.abc import Callable
    from datetime import datetime

    import socketio

    from .messages import InboundEvent
    from .presence import PresenceTable

logger = logging.getLogger(__name__)


class EventRouter:
    """Enrich events with sender and time, then fan them out.

    Task events go to every connection, the sender included. Assignments also
    produce a unicast ``notification:taskAssigned`` to the assignee's current
    connection when the presence table knows one; an offline assignee gets
    nothing queued.
    """

    def __init__(
        self,
        sio: socketio.AsyncServer,
        presence: PresenceTable,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.sio = sio
        self.presence = presence
        self.clock = clock or timezone.now

    async def route(self, event: InboundEvent, sender_user_id: str) -> DomainEvent:
        now = self.clock()
        domain_event = DomainEvent(
            kind=event.kind,
            payload=event.payload(),
            sender_user_id=sender_user_id,
            timestamp=now,
        )
        if isinstance(event, TaskAssigned):
            await self._notify_assignee(event, sender_user_id, now)

        await self.deliver(domain_event)
        logger.info(
            "Routed %s for task %s from user %s",
            domain_event.event_name,
            domain_event.payload.get("taskId"),
            sender_user_id,
        )
        return domain_event

    async def announce(
        self,
        kind: EventKind,
        user_id: str,
        *,
        skip_sid: str | None = None,
    ) -> DomainEvent:
        """Broadcast a presence change for ``user_id`` to everyone but ``skip_sid``."""
        domain_event = DomainEvent(
            kind=kind,
            payload={"userId": user_id},
            sender_user_id=user_id,
            timestamp=self.clock(),
        )
        await self.deliver(domain_event, skip_sid=skip_sid)
        return domain_event

    async def deliver(
        self,
        domain_event: DomainEvent,
        *,
        to: str | None = None,
        skip_sid: str | None = None,
    ) -> bool:
        """Emit one event; failures are logged, never raised.

        A recipient that vanished mid-send must not stop the rest of a fan-out,
        so callers can chain deliveries without guarding each one.
        """
        kwargs: dict[str, Any] = {}
        if to is not None:
            kwargs["to"] = to
        if skip_sid is not None:
            kwargs["skip_sid"] = skip_sid
        try:
            await self.sio.emit(domain_event.event_name, domain_event.to_wire(), **kwargs)
        except Exception:  # noqa: BLE001 - one bad recipient must not abort the fan-out
            logger.warning(
                "Failed to deliver %s (to=%s)",
                domain_event.event_name,
                to or "*",
                exc_info=True,
            )
            return False
        return True

    async def _notify_assignee(
        self,
        event: TaskAssigned,
        sender_user_id: str,
        now: datetime,
    ) -> None:
        connection_id = self.presence.get(event.assigned_to_id)
        if connection_id is None:
            logger.debug(
                "Assignee %s of task %s is offline; no notification",
                event.assigned_to_id,
                event.task_id,
            )
            return

        notification = DomainEvent(
            kind=EventKind.NOTIFICATION,
            payload=event.notification_payload(sender_user_id),
            sender_user_id=sender_user_id,
            timestamp=now,
        )
        if await self.deliver(notification, to=connection_id):
            logger.info(
                "Task %s assigned to user %s - notification sent",
                event.task_id,
                event.assigned_to_id,
            )
