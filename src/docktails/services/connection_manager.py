"""
ConnectionManager: (re)connects to the docker host, retrying forever.
"""
import asyncio
import logging
from typing import Callable, Tuple

from .event_stream import EventStream
from .host_client import HostClient

logger = logging.getLogger(__name__)


class ConnectionManager:
    """
    Establishes a live host connection plus a fresh event subscription.

    There is nobody to report a connection failure to, so `connect()` never
    fails: construction and ping errors are logged and retried after a fixed
    interval until the host answers.

    Args:
        client_factory: Builds a new host client, e.g. `ConfigService.get_docker_client`.
        endpoint: Endpoint description used in log messages.
        retry_interval: Seconds to wait between attempts.
    """

    def __init__(
        self,
        client_factory: Callable[[], HostClient],
        endpoint: str = "docker host",
        retry_interval: float = 5.0,
    ) -> None:
        self.client_factory = client_factory
        self.endpoint = endpoint
        self.retry_interval = retry_interval
        self.attempts = 0

    async def connect(self) -> Tuple[HostClient, EventStream]:
        """
        Connect to the host, blocking until it succeeds.

        Returns:
            Tuple of (client, event stream). The subscription is already
            buffering events when this returns.
        """
        logger.info(f"connecting to {self.endpoint}")
        while True:
            self.attempts += 1
            try:
                client = self.client_factory()
            except Exception as e:
                logger.warning(
                    f"error connecting to docker host, retrying in {self.retry_interval:g}s: {e}"
                )
                await asyncio.sleep(self.retry_interval)
                continue

            try:
                await asyncio.to_thread(client.ping)
            except Exception as e:
                logger.warning(
                    f"error pinging docker host, retrying in {self.retry_interval:g}s: {e}"
                )
                await asyncio.sleep(self.retry_interval)
                continue

            logger.info("connection succeeded")
            return client, client.subscribe_events()
