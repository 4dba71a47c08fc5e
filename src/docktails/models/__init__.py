"""Pydantic models for docktails."""

from .container import ContainerInfo
from .events import EventKind, LifecycleEvent
from .settings import TailerSettings

__all__ = [
    "ContainerInfo",
    "EventKind",
    "LifecycleEvent",
    "TailerSettings",
]
