from __future__ import annotations

from typing import TYPE_CHECKING
from typing import Any

from asgiref.sync import async_to_sync

from taskflow.realtime.serializers import decode_inbound
from taskflow.realtime.socketio import gateway

if TYPE_CHECKING:  # import for type checking only
    from taskflow.realtime.messages import DomainEvent


def publish_task_event(
    event_name: str,
    payload: dict[str, Any],
    actor_id: str | int,
) -> DomainEvent:
    """Publish a task event on behalf of ``actor_id`` from sync Django code.

    The payload takes the same shape a client would send for ``event_name``
    and goes through the same router, so an assignment published here also
    notifies the assignee if they are online. Raises ``EventDecodeError`` for
    an invalid payload.
    """

    event = decode_inbound(event_name, payload)
    return async_to_sync(gateway.router.route)(event, str(actor_id))
