from unittest import mock

import pytest
import socketio

from taskflow.realtime.client import RealtimeUnavailableError
from taskflow.realtime.client import ReconnectPolicy
from taskflow.realtime.client import TaskEventsClient


def no_jitter():
    return 0.5


class TestReconnectPolicy:
    def test_backoff_doubles_up_to_cap(self):
        policy = ReconnectPolicy(delay=1.0, delay_max=5.0, attempts=5)
        delays = [policy.delay_for(n, rand=no_jitter) for n in range(1, 6)]
        assert delays == [1.0, 2.0, 4.0, 5.0, 5.0]

    @pytest.mark.parametrize("rand_value", [0.0, 0.25, 0.99])
    def test_jitter_stays_within_factor(self, rand_value):
        policy = ReconnectPolicy(delay=1.0, delay_max=5.0, randomization_factor=0.5)
        delay = policy.delay_for(3, rand=lambda: rand_value)
        assert 2.0 <= delay <= 6.0  # noqa: PLR2004

    def test_from_settings(self, settings):
        settings.REALTIME_RECONNECTION = {
            "DELAY": 0.5,
            "DELAY_MAX": 3,
            "ATTEMPTS": 2,
            "RANDOMIZATION_FACTOR": 0,
        }
        assert ReconnectPolicy.from_settings() == ReconnectPolicy(
            delay=0.5,
            delay_max=3.0,
            attempts=2,
            randomization_factor=0.0,
        )

    def test_defaults_match_frontend_policy(self):
        policy = ReconnectPolicy.from_settings()
        assert policy.client_kwargs() == {
            "reconnection": True,
            "reconnection_attempts": 5,
            "reconnection_delay": 1.0,
            "reconnection_delay_max": 5.0,
            "randomization_factor": 0.5,
        }


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def make_client(sleeps):
    async def fake_sleep(seconds):
        sleeps.append(seconds)

    def factory(side_effect=None, attempts=2):
        sio = socketio.AsyncClient(reconnection=False)
        sio.connect = mock.AsyncMock(side_effect=side_effect)
        policy = ReconnectPolicy(attempts=attempts, randomization_factor=0)
        return TaskEventsClient(
            "http://localhost:8000",
            "tok",
            policy=policy,
            client=sio,
            sleep=fake_sleep,
        )

    return factory


@pytest.mark.asyncio
class TestTaskEventsClient:
    async def test_token_sent_in_handshake_auth(self, make_client, sleeps):
        client = make_client()

        await client.connect()

        client.sio.connect.assert_awaited_once_with(
            "http://localhost:8000",
            auth={"token": "tok"},
            socketio_path="socket.io",
        )
        assert sleeps == []

    async def test_retries_with_backoff_then_connects(self, make_client, sleeps):
        refused = socketio.exceptions.ConnectionError("Authentication failed")
        client = make_client(side_effect=[refused, refused, None], attempts=3)

        await client.connect()

        assert client.sio.connect.await_count == 3  # noqa: PLR2004
        assert sleeps == [1.0, 2.0]

    async def test_gives_up_after_attempts(self, make_client, sleeps):
        refused = socketio.exceptions.ConnectionError("Authentication failed")
        client = make_client(side_effect=refused, attempts=2)

        with pytest.raises(RealtimeUnavailableError, match="cannot connect"):
            await client.connect()

        assert client.sio.connect.await_count == 3  # noqa: PLR2004
        assert sleeps == [1.0, 2.0]
        assert client.error == "Authentication failed"

    async def test_assignment_notifications_collected_newest_first(self, make_client):
        client = make_client()
        handler = client.sio.handlers["/"]["notification:taskAssigned"]

        await handler({"taskId": "t1", "taskTitle": "A"})
        await handler({"taskId": "t2", "taskTitle": "B"})

        assert [n["taskId"] for n in client.notifications] == ["t2", "t1"]
        assert client.unread_count == 2  # noqa: PLR2004
        assert all(n["type"] == "info" for n in client.notifications)

        client.mark_all_read()
        assert client.unread_count == 0

    async def test_connect_error_recorded(self, make_client):
        client = make_client()
        handler = client.sio.handlers["/"]["connect_error"]

        await handler({"message": "Authentication failed"})

        assert client.error == "Authentication failed"

    async def test_subscribe_and_unsubscribe(self, make_client):
        client = make_client()

        def callback(data):
            return data

        client.subscribe("task:statusChanged", callback)
        assert client.sio.handlers["/"]["task:statusChanged"] is callback

        client.unsubscribe("task:statusChanged")
        assert "task:statusChanged" not in client.sio.handlers["/"]

    async def test_emit_delegates(self, make_client):
        client = make_client()
        client.sio.emit = mock.AsyncMock()

        await client.emit("task:deleted", {"taskId": "t1"})

        client.sio.emit.assert_awaited_once_with("task:deleted", {"taskId": "t1"})
