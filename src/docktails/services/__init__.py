"""Services for docktails: host access, output formatting and orchestration."""

from .colors import ColorAllocator, Colors
from .config import ConfigService
from .connection_manager import ConnectionManager
from .event_stream import EventStream
from .host_client import DockerHostClient, HostClient, HostError
from .orchestrator import Orchestrator, OrchestratorState
from .prefix_writer import PrefixWriter
from .tail_session import SessionRegistry, TailSession

__all__ = [
    "ColorAllocator",
    "Colors",
    "ConfigService",
    "ConnectionManager",
    "DockerHostClient",
    "EventStream",
    "HostClient",
    "HostError",
    "Orchestrator",
    "OrchestratorState",
    "PrefixWriter",
    "SessionRegistry",
    "TailSession",
]
