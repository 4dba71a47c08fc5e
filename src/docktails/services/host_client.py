"""
Docker host client used by the tailer.

Wraps a python_on_whales `DockerClient` behind the handful of operations the
tailer needs, converting results into docktails models and every docker
failure into `HostError`.
"""
import logging
from typing import BinaryIO, Iterator, List, Protocol

from python_on_whales import DockerClient
from python_on_whales.exceptions import DockerException

from ..models.container import ContainerInfo, SHORT_ID_LENGTH
from ..models.events import LifecycleEvent
from .event_stream import EventStream

logger = logging.getLogger(__name__)


class HostError(Exception):
    """Raised when the docker host cannot be reached or rejects a request."""


class HostClient(Protocol):
    """Operations the tailer consumes from a container runtime host."""

    def ping(self) -> None: ...

    def list_containers(self) -> List[ContainerInfo]: ...

    def inspect_container(self, container_id: str) -> ContainerInfo: ...

    def stream_logs(self, container_id: str, stdout: BinaryIO, stderr: BinaryIO) -> None: ...

    def subscribe_events(self) -> EventStream: ...


def _to_container_info(container) -> ContainerInfo:
    """Convert a python_on_whales Container into a ContainerInfo."""
    config = container.config
    state = container.state
    return ContainerInfo(
        id=container.id,
        name="/" + container.name.lstrip("/"),
        image=(config.image if config else None) or "",
        running=bool(state and state.running),
        tty=bool(config and config.tty),
    )


class DockerHostClient:
    """
    HostClient backed by python_on_whales.

    Args:
        docker: Configured python_on_whales client.
    """

    def __init__(self, docker: DockerClient) -> None:
        self.docker = docker

    def ping(self) -> None:
        """Check that the daemon answers. Raises HostError otherwise."""
        try:
            self.docker.system.info()
        except DockerException as e:
            raise HostError(f"docker host did not answer: {e}") from e

    def list_containers(self) -> List[ContainerInfo]:
        """List all containers, running or not."""
        try:
            containers = self.docker.container.list(all=True)
            return [_to_container_info(c) for c in containers]
        except DockerException as e:
            raise HostError(f"unable to list containers: {e}") from e

    def inspect_container(self, container_id: str) -> ContainerInfo:
        try:
            return _to_container_info(self.docker.container.inspect(container_id))
        except DockerException as e:
            raise HostError(
                f"unable to inspect container {container_id[:SHORT_ID_LENGTH]}: {e}"
            ) from e

    def stream_logs(self, container_id: str, stdout: BinaryIO, stderr: BinaryIO) -> None:
        """
        Follow a container's output from now on, routing each stream to its sink.

        Blocks until the container stops or the connection drops.

        Args:
            container_id: Full container id.
            stdout: Sink for the container's standard output.
            stderr: Sink for the container's standard error.
        """
        try:
            log_stream = self.docker.container.logs(
                container_id,
                follow=True,
                stream=True,
                tail=0,
            )
            for source, chunk in log_stream:
                if source == "stderr":
                    stderr.write(chunk)
                else:
                    stdout.write(chunk)
        except DockerException as e:
            raise HostError(
                f"log stream for {container_id[:SHORT_ID_LENGTH]} failed: {e}"
            ) from e

    def _iter_events(self) -> Iterator[LifecycleEvent]:
        try:
            for event in self.docker.system.events(filters={"type": "container"}):
                actor = event.actor
                if actor is None or not actor.id:
                    continue
                attributes = actor.attributes or {}
                yield LifecycleEvent(
                    kind=event.action or "",
                    container_id=actor.id,
                    image=attributes.get("image", ""),
                    time=event.time,
                )
        except DockerException as e:
            raise HostError(f"event stream failed: {e}") from e

    def subscribe_events(self) -> EventStream:
        """Open a new lifecycle event subscription and start buffering it."""
        return EventStream(self._iter_events()).start()
