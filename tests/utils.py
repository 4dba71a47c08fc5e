"""
Test helper utilities.
"""
from typing import Callable, Dict, Iterable, List, Optional, Set, Tuple
import threading
import time

from docktails.models.container import ContainerInfo
from docktails.models.events import LifecycleEvent
from docktails.services.event_stream import EventStream
from docktails.services.host_client import HostError


def wait_until(predicate: Callable[[], bool], timeout: float = 5.0, interval: float = 0.01) -> bool:
    """
    Poll a condition until it holds or the timeout expires.

    Returns:
        True if the condition held before the timeout, False otherwise.
    """
    start_time = time.time()
    while time.time() - start_time < timeout:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


class FakeHostClient:
    """
    In-memory stand-in for a docker host.

    Args:
        containers: Containers known to the host.
        events: Lifecycle events delivered on subscription; the stream closes
            once they are exhausted.
        list_failures: Number of initial list_containers calls that fail.
        ping_error: Raised by every ping when set.
    """

    def __init__(
        self,
        containers: Optional[Iterable[ContainerInfo]] = None,
        events: Optional[Iterable[LifecycleEvent]] = None,
        list_failures: int = 0,
        ping_error: Optional[Exception] = None,
    ) -> None:
        self.containers: Dict[str, ContainerInfo] = {c.id: c for c in containers or []}
        self.events: List[LifecycleEvent] = list(events or [])
        self.list_failures = list_failures
        self.ping_error = ping_error
        self.log_chunks: Dict[str, List[Tuple[str, bytes]]] = {}
        self.stream_error: Optional[Exception] = None
        self.on_list: Optional[Callable[[], None]] = None
        self.unlisted: Set[str] = set()
        self.streamed: List[str] = []
        self.list_calls = 0
        self.ping_calls = 0
        self.subscriptions: List[EventStream] = []
        self._lock = threading.Lock()

    def ping(self) -> None:
        self.ping_calls += 1
        if self.ping_error is not None:
            raise self.ping_error

    def list_containers(self) -> List[ContainerInfo]:
        self.list_calls += 1
        if self.list_failures > 0:
            self.list_failures -= 1
            raise HostError("connection reset by peer")
        if self.on_list is not None:
            self.on_list()
        return [c for c in self.containers.values() if c.id not in self.unlisted]

    def inspect_container(self, container_id: str) -> ContainerInfo:
        try:
            return self.containers[container_id]
        except KeyError:
            raise HostError(f"No such container: {container_id}")

    def stream_logs(self, container_id, stdout, stderr) -> None:
        with self._lock:
            self.streamed.append(container_id)
        for source, chunk in self.log_chunks.get(container_id, []):
            if source == "stderr":
                stderr.write(chunk)
            else:
                stdout.write(chunk)
        if self.stream_error is not None:
            raise self.stream_error

    def subscribe_events(self) -> EventStream:
        stream = EventStream(iter(self.events)).start()
        self.subscriptions.append(stream)
        return stream
