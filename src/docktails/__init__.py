"""docktails package entry point."""
from typing import Optional

from .models.settings import TailerSettings
from .services.colors import ColorAllocator
from .services.config import ConfigService
from .services.connection_manager import ConnectionManager
from .services.orchestrator import Orchestrator

__version__ = "1.1.3"


def create_tailer(settings: Optional[TailerSettings] = None) -> Orchestrator:
    """
    Factory function to create a preconfigured log tailer.

    Args:
        settings: Tailer settings; read from the environment when omitted.

    Returns:
        Orchestrator ready to `run()`.
    """
    config = ConfigService(settings)
    connection = ConnectionManager(
        config.get_docker_client,
        endpoint=config.endpoint,
        retry_interval=config.settings.retry_interval,
    )
    return Orchestrator(
        connection,
        colors=ColorAllocator(),
        prefix=config.settings.prefix,
        pretty_json=config.settings.pretty_json,
        retry_interval=config.settings.retry_interval,
    )


__all__ = [
    "ConfigService",
    "Orchestrator",
    "TailerSettings",
    "create_tailer",
    "__version__",
]
