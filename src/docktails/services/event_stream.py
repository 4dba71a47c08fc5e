"""
EventStream: a lifecycle event subscription consumable from asyncio.

The docker events feed is a blocking iterator. A daemon thread drains it into
an asyncio queue owned by the running loop; a sentinel is queued once the
iterator is exhausted or fails, which is how a lost host connection shows up.
"""
import asyncio
import logging
import threading
from typing import Iterable, Optional

from ..models.events import LifecycleEvent

logger = logging.getLogger(__name__)

_CLOSED = object()


class EventStream:
    """
    Ordered, unbounded sequence of lifecycle events from one host connection.

    Events are buffered from the moment `start()` is called, so subscribing
    before listing containers does not lose start events that happen in between.
    """

    def __init__(self, source: Iterable[LifecycleEvent]) -> None:
        self._source = source
        self._queue: Optional[asyncio.Queue] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def start(self) -> "EventStream":
        """Start pumping events. Must be called from within the running loop."""
        if self._thread is not None:
            return self
        self._loop = asyncio.get_running_loop()
        self._queue = asyncio.Queue()
        self._thread = threading.Thread(
            target=self._pump, name="docktails-events", daemon=True
        )
        self._thread.start()
        logger.debug("EventStream: subscription started")
        return self

    def _pump(self) -> None:
        try:
            for event in self._source:
                if self._closed:
                    break
                self._put(event)
        except Exception as e:
            logger.warning(f"EventStream: event feed failed: {e}")
        finally:
            self._put(_CLOSED)
            logger.debug("EventStream: event feed ended")

    def _put(self, item: object) -> None:
        try:
            self._loop.call_soon_threadsafe(self._queue.put_nowait, item)
        except RuntimeError:
            # Loop already closed; nobody is listening any more.
            pass

    async def get_event(self) -> Optional[LifecycleEvent]:
        """
        Wait for the next event.

        Returns:
            The next LifecycleEvent, or None once the stream has closed.
        """
        if self._queue is None:
            self.start()
        if self._closed:
            return None
        item = await self._queue.get()
        if item is _CLOSED:
            self._closed = True
            return None
        return item

    def close(self) -> None:
        """Stop delivering events. The feed thread exits on its next event."""
        if self._closed:
            return
        self._closed = True
        if self._queue is not None:
            self._put(_CLOSED)
