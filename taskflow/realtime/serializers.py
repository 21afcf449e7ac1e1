from __future__ import annotations

from typing import Any

from rest_framework import serializers

from .messages import EventDecodeError
from .messages import InboundEvent
from .messages import TaskAssigned
from .messages import TaskCreated
from .messages import TaskDeleted
from .messages import TaskPriorityChanged
from .messages import TaskStatusChanged


class TaskEventSerializer(serializers.Serializer):
    """Base for inbound task events; every one names a task."""

    taskId = serializers.CharField(max_length=255)  # noqa: N815


class TaskStatusChangedSerializer(TaskEventSerializer):
    newStatus = serializers.CharField(max_length=64)  # noqa: N815

    def create(self, validated_data):
        return TaskStatusChanged(
            task_id=validated_data["taskId"],
            new_status=validated_data["newStatus"],
        )


class TaskPriorityChangedSerializer(TaskEventSerializer):
    newPriority = serializers.CharField(max_length=64)  # noqa: N815

    def create(self, validated_data):
        return TaskPriorityChanged(
            task_id=validated_data["taskId"],
            new_priority=validated_data["newPriority"],
        )


class TaskAssignedSerializer(TaskEventSerializer):
    assignedToId = serializers.CharField(max_length=255)  # noqa: N815
    taskTitle = serializers.CharField(  # noqa: N815
        required=False,
        allow_blank=True,
        default="",
    )
    assignedBy = serializers.CharField(  # noqa: N815
        required=False,
        allow_blank=True,
        default="",
    )

    def create(self, validated_data):
        return TaskAssigned(
            task_id=validated_data["taskId"],
            assigned_to_id=validated_data["assignedToId"],
            task_title=validated_data["taskTitle"],
            assigned_by=validated_data["assignedBy"],
        )


class TaskCreatedSerializer(TaskEventSerializer):
    """Only ``taskId`` is checked; every other field is echoed back as sent."""

    def create(self, validated_data):
        extra = {
            key: value
            for key, value in self.initial_data.items()
            if key != "taskId"
        }
        return TaskCreated(task_id=validated_data["taskId"], fields=extra)


class TaskDeletedSerializer(TaskEventSerializer):
    def create(self, validated_data):
        return TaskDeleted(task_id=validated_data["taskId"])


INBOUND_SERIALIZERS: dict[str, type[TaskEventSerializer]] = {
    "task:statusChanged": TaskStatusChangedSerializer,
    "task:priorityChanged": TaskPriorityChangedSerializer,
    "task:assigned": TaskAssignedSerializer,
    "task:created": TaskCreatedSerializer,
    "task:deleted": TaskDeletedSerializer,
}


def decode_inbound(event_name: str, data: Any) -> InboundEvent:
    """Turn a raw client event into its typed record.

    Raises :class:`EventDecodeError` for unknown names, non-object payloads
    and payloads that fail validation.
    """

    serializer_class = INBOUND_SERIALIZERS.get(event_name)
    if serializer_class is None:
        raise EventDecodeError(event_name, "unknown event")
    if not isinstance(data, dict):
        raise EventDecodeError(event_name, "payload must be an object")

    serializer = serializer_class(data=data)
    if not serializer.is_valid():
        raise EventDecodeError(event_name, serializer.errors)
    return serializer.save()
