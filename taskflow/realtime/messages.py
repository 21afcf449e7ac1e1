"""Event records exchanged over the realtime gateway.

Inbound events form a closed set: one frozen dataclass per client event name,
decoded from raw payloads by
:func:`taskflow.realtime.serializers.decode_inbound`. Outbound traffic is always a
:class:`DomainEvent`, which knows its wire name and how to stamp sender
identity and time onto its payload.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from dataclasses import field
from datetime import UTC
from datetime import datetime
from typing import Any
from typing import ClassVar


class EventDecodeError(ValueError):
    """An inbound event has an unknown name or an invalid payload."""

    def __init__(self, event_name: str, detail: Any) -> None:
        self.event_name = event_name
        self.detail = detail
        super().__init__(f"{event_name}: {detail}")


class EventKind(str, enum.Enum):
    STATUS_CHANGED = "status-changed"
    PRIORITY_CHANGED = "priority-changed"
    ASSIGNED = "assigned"
    CREATED = "created"
    DELETED = "deleted"
    ONLINE = "online"
    OFFLINE = "offline"
    NOTIFICATION = "notification"

    @property
    def event_name(self) -> str:
        return EVENT_NAMES[self]


EVENT_NAMES: dict[EventKind, str] = {
    EventKind.STATUS_CHANGED: "task:statusChanged",
    EventKind.PRIORITY_CHANGED: "task:priorityChanged",
    EventKind.ASSIGNED: "task:assigned",
    EventKind.CREATED: "task:created",
    EventKind.DELETED: "task:deleted",
    EventKind.ONLINE: "user:online",
    EventKind.OFFLINE: "user:offline",
    EventKind.NOTIFICATION: "notification:taskAssigned",
}

# Field that carries the sender's user id on the wire, per kind.
STAMP_FIELDS: dict[EventKind, str] = {
    EventKind.STATUS_CHANGED: "updatedBy",
    EventKind.PRIORITY_CHANGED: "updatedBy",
    EventKind.ASSIGNED: "updatedBy",
    EventKind.CREATED: "createdBy",
    EventKind.DELETED: "deletedBy",
}

PRESENCE_KINDS = frozenset({EventKind.ONLINE, EventKind.OFFLINE})


def format_timestamp(value: datetime) -> str:
    """ISO-8601 UTC with milliseconds and a ``Z`` suffix, like a JS ``Date``."""
    return (
        value.astimezone(UTC)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


@dataclass(frozen=True)
class TaskStatusChanged:
    kind: ClassVar[EventKind] = EventKind.STATUS_CHANGED

    task_id: str
    new_status: str

    def payload(self) -> dict[str, Any]:
        return {"taskId": self.task_id, "newStatus": self.new_status}


@dataclass(frozen=True)
class TaskPriorityChanged:
    kind: ClassVar[EventKind] = EventKind.PRIORITY_CHANGED

    task_id: str
    new_priority: str

    def payload(self) -> dict[str, Any]:
        return {"taskId": self.task_id, "newPriority": self.new_priority}


@dataclass(frozen=True)
class TaskAssigned:
    kind: ClassVar[EventKind] = EventKind.ASSIGNED

    task_id: str
    assigned_to_id: str
    task_title: str = ""
    assigned_by: str = ""

    def payload(self) -> dict[str, Any]:
        return {"taskId": self.task_id, "assignedToId": self.assigned_to_id}

    def notification_payload(self, sender_user_id: str) -> dict[str, Any]:
        return {
            "taskId": self.task_id,
            "taskTitle": self.task_title,
            "assignedBy": self.assigned_by or sender_user_id,
        }


@dataclass(frozen=True)
class TaskCreated:
    kind: ClassVar[EventKind] = EventKind.CREATED

    task_id: str
    fields: dict[str, Any] = field(default_factory=dict)

    def payload(self) -> dict[str, Any]:
        return {**self.fields, "taskId": self.task_id}


@dataclass(frozen=True)
class TaskDeleted:
    kind: ClassVar[EventKind] = EventKind.DELETED

    task_id: str

    def payload(self) -> dict[str, Any]:
        return {"taskId": self.task_id}


InboundEvent = (
    TaskStatusChanged
    | TaskPriorityChanged
    | TaskAssigned
    | TaskCreated
    | TaskDeleted
)


@dataclass(frozen=True)
class DomainEvent:
    kind: EventKind
    payload: dict[str, Any]
    sender_user_id: str
    timestamp: datetime

    @property
    def event_name(self) -> str:
        return self.kind.event_name

    def to_wire(self) -> dict[str, Any]:
        """Payload as sent to clients.

        Presence events carry only ``userId``. Everything else gets a
        ``timestamp`` and, for task events, the sender under the kind's stamp
        field. Stamps are applied last so a client cannot forge them.
        """
        data = dict(self.payload)
        if self.kind in PRESENCE_KINDS:
            return data
        stamp_field = STAMP_FIELDS.get(self.kind)
        if stamp_field is not None:
            data[stamp_field] = self.sender_user_id
        data["timestamp"] = format_timestamp(self.timestamp)
        return data
