"""
Tests for the orchestrator: bootstrap, lifecycle events and reconnection.
"""
import asyncio
import io
from functools import partial

from docktails.models.events import LifecycleEvent
from docktails.services.orchestrator import OrchestratorState
from docktails.services.tail_session import TailSession
from tests.utils import FakeHostClient, wait_until

ABC = "abc123def456abc123def456"
DEF = "def456abc123def456abc123"
XYZ = "xyz789xyz789xyz789xyz789"


def _quiet_sessions():
    return partial(TailSession, stdout=io.BytesIO(), stderr=io.BytesIO())


def _run(orchestrator, timeout: float = 5):
    asyncio.run(asyncio.wait_for(orchestrator.run(), timeout=timeout))


def _sessions_done(orchestrator) -> bool:
    return wait_until(lambda: len(orchestrator.sessions) == 0)


class TestBootstrap:
    """Initial scan of existing containers."""

    def test_tails_only_running_container(self, make_container, make_orchestrator):
        client = FakeHostClient(
            [
                make_container(container_id=ABC, name="/foo", running=True),
                make_container(container_id=DEF, name="/bar", running=False),
            ]
        )
        orchestrator = make_orchestrator(client, session_factory=_quiet_sessions())
        asyncio.run(orchestrator.bootstrap(client))
        assert _sessions_done(orchestrator)
        assert client.streamed == [ABC]

    def test_prefix_filter_applies(self, make_container, make_orchestrator):
        client = FakeHostClient(
            [
                make_container(container_id=ABC, name="/web-1"),
                make_container(container_id=DEF, name="/api-1"),
            ]
        )
        orchestrator = make_orchestrator(client, prefix="web", session_factory=_quiet_sessions())
        asyncio.run(orchestrator.bootstrap(client))
        assert _sessions_done(orchestrator)
        assert client.streamed == [ABC]

    def test_no_containers(self, make_orchestrator, caplog):
        caplog.set_level("INFO", logger="docktails")
        client = FakeHostClient([])
        orchestrator = make_orchestrator(client)
        asyncio.run(orchestrator.bootstrap(client))
        assert "no containers running" in caplog.text
        assert client.streamed == []

    def test_list_failure_is_retried(self, make_container, make_orchestrator):
        client = FakeHostClient([make_container(container_id=ABC)], list_failures=2)
        orchestrator = make_orchestrator(client, session_factory=_quiet_sessions())
        asyncio.run(asyncio.wait_for(orchestrator.bootstrap(client), timeout=5))
        assert client.list_calls == 3
        assert _sessions_done(orchestrator)
        assert client.streamed == [ABC]


class TestEvents:
    """Lifecycle event handling."""

    def test_start_event_matching_prefix_starts_session(self, make_container, make_orchestrator):
        client = FakeHostClient([make_container(container_id=XYZ, name="/bar-2")])
        orchestrator = make_orchestrator(client, prefix="bar", session_factory=_quiet_sessions())
        event = LifecycleEvent(kind="start", container_id=XYZ, image="bar:latest")
        asyncio.run(orchestrator.handle_event(client, event))
        assert _sessions_done(orchestrator)
        assert client.streamed == [XYZ]

    def test_start_event_not_matching_prefix_is_ignored(self, make_container, make_orchestrator):
        client = FakeHostClient([make_container(container_id=XYZ, name="/bar-2")])
        orchestrator = make_orchestrator(client, prefix="api", session_factory=_quiet_sessions())
        asyncio.run(orchestrator.handle_event(client, LifecycleEvent(kind="start", container_id=XYZ)))
        assert len(orchestrator.sessions) == 0
        assert client.streamed == []

    def test_other_events_are_only_logged(self, make_container, make_orchestrator, caplog):
        caplog.set_level("INFO", logger="docktails")
        client = FakeHostClient([make_container(container_id=XYZ, name="/bar-2")])
        orchestrator = make_orchestrator(client, session_factory=_quiet_sessions())
        for kind in ("create", "stop", "die"):
            asyncio.run(orchestrator.handle_event(client, LifecycleEvent(kind=kind, container_id=XYZ)))
        assert len(orchestrator.sessions) == 0
        assert client.streamed == []
        assert "container=xyz789xyz789" in caplog.text

    def test_inspect_failure_skips_event(self, make_orchestrator, caplog):
        caplog.set_level("INFO", logger="docktails")
        client = FakeHostClient([])
        orchestrator = make_orchestrator(client)
        asyncio.run(orchestrator.handle_event(client, LifecycleEvent(kind="destroy", container_id=XYZ)))
        assert "error inspecting container=xyz789xyz789" in caplog.text

    def test_duplicate_launch_is_ignored(self, make_container, make_orchestrator):
        client = FakeHostClient([make_container(container_id=ABC)])
        orchestrator = make_orchestrator(client)
        orchestrator.sessions.claim(ABC)
        assert orchestrator.launch(client, ABC) is None
        assert client.streamed == []


class TestRun:
    """Full state machine."""

    def test_event_stream_closure_reconnects_and_bootstraps_again(
        self, make_container, make_orchestrator, caplog
    ):
        caplog.set_level("INFO", logger="docktails")
        first = FakeHostClient([make_container(container_id=ABC, name="/foo")])
        second = FakeHostClient([make_container(container_id=ABC, name="/foo")])
        orchestrator = make_orchestrator(first, second, session_factory=_quiet_sessions())
        second.on_list = orchestrator.stop

        _run(orchestrator)

        assert orchestrator.cycles == 2
        assert first.list_calls == 1
        assert second.list_calls == 1
        assert orchestrator.state is OrchestratorState.STOPPED
        assert "event stream closed" in caplog.text
        assert caplog.text.count("connection succeeded") == 2

    def test_start_event_during_streaming(self, make_container, make_orchestrator):
        first = FakeHostClient(
            [make_container(container_id=XYZ, name="/bar-2")],
            events=[
                LifecycleEvent(kind="create", container_id=XYZ, image="bar"),
                LifecycleEvent(kind="start", container_id=XYZ, image="bar"),
            ],
        )
        # Started after the initial scan, so only the start event can find it.
        first.unlisted.add(XYZ)
        second = FakeHostClient([])
        orchestrator = make_orchestrator(first, second, prefix="bar", session_factory=_quiet_sessions())
        second.on_list = orchestrator.stop

        _run(orchestrator)

        assert _sessions_done(orchestrator)
        assert XYZ in first.streamed
        assert first.streamed.count(XYZ) == 1
