"""
Pytest configuration and shared fixtures.
"""
import io
from typing import Callable

import pytest

from docktails.models.container import ContainerInfo
from docktails.services.colors import ColorAllocator
from docktails.services.connection_manager import ConnectionManager
from docktails.services.orchestrator import Orchestrator
from tests.utils import FakeHostClient


@pytest.fixture
def make_container() -> Callable[..., ContainerInfo]:
    """Factory for ContainerInfo with sensible defaults."""

    def _make(
        container_id: str = "abc123def4567890",
        name: str = "/foo",
        image: str = "busybox:latest",
        running: bool = True,
        tty: bool = False,
    ) -> ContainerInfo:
        return ContainerInfo(id=container_id, name=name, image=image, running=running, tty=tty)

    return _make


@pytest.fixture
def sinks():
    """A pair of in-memory stdout/stderr byte sinks."""
    return io.BytesIO(), io.BytesIO()


@pytest.fixture
def colors() -> ColorAllocator:
    return ColorAllocator()


@pytest.fixture
def make_orchestrator():
    """
    Build an orchestrator connected through the given clients, in order.

    Retries are immediate so tests never sleep.
    """

    def _make(*clients: FakeHostClient, prefix: str = "", **kwargs) -> Orchestrator:
        pending = iter(clients)
        connection = ConnectionManager(lambda: next(pending), endpoint="fake host", retry_interval=0)
        return Orchestrator(connection, prefix=prefix, retry_interval=0, **kwargs)

    return _make
