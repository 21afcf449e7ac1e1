import pytest

from taskflow.realtime.gateway import RealtimeGateway

from .fakes import FROZEN_NOW
from .fakes import FakeSocketServer


@pytest.fixture
def frozen_clock():
    return lambda: FROZEN_NOW


@pytest.fixture
def server():
    return FakeSocketServer()


@pytest.fixture
def gateway(server, frozen_clock):
    gw = RealtimeGateway(server, clock=frozen_clock)
    gw.install()
    return gw
