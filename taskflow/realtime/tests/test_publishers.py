from unittest import mock

import pytest

from taskflow.realtime.events.tasks import publish_task_event
from taskflow.realtime.messages import EventDecodeError
from taskflow.realtime.messages import EventKind
from taskflow.realtime.socketio import gateway
from taskflow.realtime.socketio import sio


@pytest.fixture
def emit():
    with mock.patch.object(sio, "emit", new_callable=mock.AsyncMock) as emit_mock:
        yield emit_mock


@pytest.fixture
def online_assignee():
    gateway.presence.set("u2", "sid-u2")
    yield "sid-u2"
    gateway.presence.delete_if_matches("u2", "sid-u2")


def test_publish_broadcasts_enriched_event(emit):
    event = publish_task_event(
        "task:statusChanged",
        {"taskId": "t1", "newStatus": "Done"},
        actor_id=7,
    )

    assert event.kind is EventKind.STATUS_CHANGED
    emit.assert_awaited_once()
    name, data = emit.await_args.args
    assert name == "task:statusChanged"
    assert data["updatedBy"] == "7"
    assert data["newStatus"] == "Done"
    assert data["timestamp"].endswith("Z")


def test_publish_assignment_notifies_online_assignee(emit, online_assignee):
    publish_task_event(
        "task:assigned",
        {"taskId": "t1", "taskTitle": "Report", "assignedToId": "u2"},
        actor_id="u1",
    )

    calls = [(c.args[0], c.kwargs.get("to")) for c in emit.await_args_list]
    assert calls == [
        ("notification:taskAssigned", online_assignee),
        ("task:assigned", None),
    ]


def test_publish_rejects_invalid_payload(emit):
    with pytest.raises(EventDecodeError):
        publish_task_event("task:deleted", {}, actor_id="u1")
    emit.assert_not_awaited()
