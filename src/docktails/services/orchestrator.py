"""
Orchestrator: discovers containers and keeps a tail session on each of them.

Runs an explicit state machine:

    CONNECTING -> BOOTSTRAPPING -> STREAMING -> (event stream closed) -> CONNECTING

Bootstrapping tails every existing container matching the name prefix;
streaming then follows lifecycle events and tails containers as they start.
When the host drops the event stream the whole cycle starts over.
"""
import asyncio
import logging
from enum import Enum
from typing import Callable, Optional

from ..models.container import SHORT_ID_LENGTH
from ..models.events import LifecycleEvent
from .colors import ColorAllocator, Colors
from .connection_manager import ConnectionManager
from .event_stream import EventStream
from .host_client import HostClient, HostError
from .tail_session import SessionRegistry, TailSession

logger = logging.getLogger(__name__)
event_logger = logging.getLogger("docktails.events")


class OrchestratorState(str, Enum):
    CONNECTING = "connecting"
    BOOTSTRAPPING = "bootstrapping"
    STREAMING = "streaming"
    STOPPED = "stopped"


class Orchestrator:
    """
    Top level loop of the tailer.

    Args:
        connection: Connection manager for the docker host.
        colors: Color allocator shared by all sessions.
        prefix: Only containers whose name starts with this are tailed.
        pretty_json: Expand JSON embedded in container output.
        retry_interval: Seconds to wait before retrying a failed container listing.
        session_factory: Builds tail sessions; defaults to `TailSession`.

    Attributes:
        state: Current OrchestratorState.
        sessions: Registry of containers with a live tail session.
        cycles: Number of completed connections.
    """

    def __init__(
        self,
        connection: ConnectionManager,
        colors: Optional[ColorAllocator] = None,
        prefix: str = "",
        pretty_json: bool = True,
        retry_interval: float = 5.0,
        session_factory: Optional[Callable[..., TailSession]] = None,
    ) -> None:
        self.connection = connection
        self.colors = colors or ColorAllocator()
        self.prefix = prefix
        self.pretty_json = pretty_json
        self.retry_interval = retry_interval
        self.session_factory = session_factory or TailSession
        self.sessions = SessionRegistry()
        self.state = OrchestratorState.CONNECTING
        self.cycles = 0
        self._running = False
        self._events: Optional[EventStream] = None

    def launch(self, client: HostClient, container_id: str) -> Optional[TailSession]:
        """
        Start a tail session for a container without waiting for it.

        A container that already has a live session is not tailed twice.

        Returns:
            The started session, or None if the container is already tailed.
        """
        if not self.sessions.claim(container_id):
            logger.debug(f"already tailing {container_id[:SHORT_ID_LENGTH]}")
            return None
        session = self.session_factory(
            client,
            container_id,
            self.colors,
            pretty_json=self.pretty_json,
            registry=self.sessions,
        )
        try:
            session.start()
        except RuntimeError as e:
            self.sessions.release(container_id)
            logger.error(f"unable to start tail session for {container_id[:SHORT_ID_LENGTH]}: {e}")
            return None
        return session

    async def bootstrap(self, client: HostClient) -> None:
        """Tail every existing container that matches the name prefix."""
        while True:
            logger.info("getting container list...")
            try:
                containers = await asyncio.to_thread(client.list_containers)
                break
            except HostError as e:
                logger.warning(
                    f"error listing containers: {e}; retrying in {self.retry_interval:g}s"
                )
                await asyncio.sleep(self.retry_interval)

        if not containers:
            logger.info("no containers running")

        logger.info("starting logs")
        for container in containers:
            if container.matches_prefix(self.prefix):
                self.launch(client, container.id)

    async def handle_event(self, client: HostClient, event: LifecycleEvent) -> None:
        """Log one lifecycle event and tail the container if it just started."""
        event_logger.info(
            f"event {Colors.bold(event.kind)} {event.image} container={event.short_id}"
        )
        try:
            container = await asyncio.to_thread(client.inspect_container, event.container_id)
        except HostError as e:
            logger.info(f"error inspecting container={event.short_id}: {e}")
            return

        if event.is_start and container.matches_prefix(self.prefix):
            self.launch(client, event.container_id)

    async def stream_events(self, client: HostClient, events: EventStream) -> None:
        """Consume lifecycle events until the host closes the stream."""
        while self._running:
            event = await events.get_event()
            if event is None:
                break
            await self.handle_event(client, event)

    async def run(self) -> None:
        """
        Run the tailer until `stop()` is called.

        Never raises for host failures: connection problems lead back to
        CONNECTING, everything else is logged.
        """
        self._running = True
        self.state = OrchestratorState.CONNECTING
        client: Optional[HostClient] = None

        while self._running:
            if self.state is OrchestratorState.CONNECTING:
                client, self._events = await self.connection.connect()
                self.cycles += 1
                self.state = OrchestratorState.BOOTSTRAPPING

            elif self.state is OrchestratorState.BOOTSTRAPPING:
                await self.bootstrap(client)
                self.state = OrchestratorState.STREAMING

            elif self.state is OrchestratorState.STREAMING:
                await self.stream_events(client, self._events)
                if self._running:
                    logger.warning(
                        "event stream closed, probably lost connection to docker host; retrying..."
                    )
                    self.state = OrchestratorState.CONNECTING

        self.state = OrchestratorState.STOPPED
        logger.debug("Orchestrator: stopped")

    def stop(self) -> None:
        """End `run()` at the next state transition."""
        self._running = False
        if self._events is not None:
            self._events.close()
