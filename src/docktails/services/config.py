"""
ConfigService: holds tailer settings and builds docker host clients from them.
"""
import logging
from typing import Optional

from python_on_whales import DockerClient

from ..models.settings import TailerSettings
from .host_client import DockerHostClient, HostError

logger = logging.getLogger(__name__)


class ConfigService:
    """
    Configuration access for the tailer.

    Args:
        settings: Settings to use, read from the environment when omitted.

    Attributes:
        settings: The active TailerSettings.
    """

    def __init__(self, settings: Optional[TailerSettings] = None) -> None:
        self.settings = settings or TailerSettings.from_env()

    @property
    def endpoint(self) -> str:
        """Human readable endpoint for log messages."""
        return self.settings.docker_host or "default docker host"

    def get_docker_client(self) -> DockerHostClient:
        """
        Build a client for the configured docker host.

        Uses TLS when both a host and a certificate directory are configured,
        the explicit host without TLS when only the host is set, and the
        ambient docker configuration otherwise.

        Returns:
            DockerHostClient ready to ping.

        Raises:
            HostError: If TLS is configured but certificate files are missing.
        """
        settings = self.settings
        if settings.use_tls:
            missing = [
                str(path)
                for path in (settings.tls_ca, settings.tls_cert, settings.tls_key)
                if not path.is_file()
            ]
            if missing:
                raise HostError(f"missing TLS material: {', '.join(missing)}")
            logger.debug(f"Building TLS docker client for {settings.docker_host}")
            docker = DockerClient(
                host=settings.docker_host,
                tls=True,
                tlsverify=True,
                tlscacert=settings.tls_ca,
                tlscert=settings.tls_cert,
                tlskey=settings.tls_key,
            )
        elif settings.docker_host:
            logger.debug(f"Building docker client for {settings.docker_host}")
            docker = DockerClient(host=settings.docker_host)
        else:
            logger.debug("Building docker client from ambient configuration")
            docker = DockerClient()
        return DockerHostClient(docker)
