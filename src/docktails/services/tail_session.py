"""
Tail sessions: one thread per container streaming its output to the terminal.

Sessions are launched fire-and-forget. Nobody joins them; they end when the
container's log stream ends or fails, and their failures are only observed
through logging.
"""
import logging
import sys
import threading
from typing import BinaryIO, Optional, Set

from ..models.container import SHORT_ID_LENGTH
from .colors import ColorAllocator, make_prefix
from .host_client import HostClient, HostError
from .prefix_writer import PrefixWriter

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Tracks which containers currently have a live tail session."""

    def __init__(self) -> None:
        self._active: Set[str] = set()
        self._lock = threading.Lock()

    def claim(self, container_id: str) -> bool:
        """Reserve a container id. Returns False if it is already being tailed."""
        with self._lock:
            if container_id in self._active:
                return False
            self._active.add(container_id)
            return True

    def release(self, container_id: str) -> None:
        with self._lock:
            self._active.discard(container_id)

    def __contains__(self, container_id: str) -> bool:
        with self._lock:
            return container_id in self._active

    def __len__(self) -> int:
        with self._lock:
            return len(self._active)


class TailSession(threading.Thread):
    """
    Streams one container's stdout and stderr with a colored name prefix.

    The container is inspected first; sessions for containers that are not
    running, or that have a tty (whose output cannot be split per stream),
    end immediately without output. Logs are followed from the moment the
    session starts, without replaying history.

    Args:
        client: Host client of the current connection.
        container_id: Full container id.
        colors: Shared color allocator.
        pretty_json: Expand JSON objects embedded in output.
        registry: Registry holding this session's claim, released on exit.
        stdout: Sink for container stdout, defaults to the process stdout.
        stderr: Sink for container stderr, defaults to the process stderr.
    """

    def __init__(
        self,
        client: HostClient,
        container_id: str,
        colors: ColorAllocator,
        pretty_json: bool = True,
        registry: Optional[SessionRegistry] = None,
        stdout: Optional[BinaryIO] = None,
        stderr: Optional[BinaryIO] = None,
    ) -> None:
        super().__init__(name=f"tail-{container_id[:SHORT_ID_LENGTH]}", daemon=True)
        self.client = client
        self.container_id = container_id
        self.colors = colors
        self.pretty_json = pretty_json
        self.registry = registry
        self.stdout = stdout if stdout is not None else sys.stdout.buffer
        self.stderr = stderr if stderr is not None else sys.stderr.buffer

    def run(self) -> None:
        try:
            self._tail()
        except Exception as e:
            logger.error(
                f"tail session for {self.container_id[:SHORT_ID_LENGTH]} crashed: {e}",
                exc_info=True,
            )
        finally:
            if self.registry is not None:
                self.registry.release(self.container_id)

    def _tail(self) -> None:
        try:
            container = self.client.inspect_container(self.container_id)
        except HostError as e:
            logger.info(f"unable to get container: {e}")
            return

        if not container.tailable:
            logger.debug(
                f"skipping {container.short_id}: running={container.running} tty={container.tty}"
            )
            return

        logger.info(f"starting docker logs for {container.short_id} {container.image}")

        prefix = make_prefix(self.colors.next(), container.display_name)
        stdout = PrefixWriter(self.stdout, prefix, self.pretty_json)
        stderr = PrefixWriter(self.stderr, prefix, self.pretty_json)

        try:
            self.client.stream_logs(container.id, stdout, stderr)
        except HostError as e:
            logger.warning(f"unable to stream docker logs for {container.image}: {e}")
            return
        logger.debug(f"log stream for {container.short_id} ended")
