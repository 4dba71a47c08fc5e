"""Lifecycle event models."""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from .container import SHORT_ID_LENGTH


class EventKind(str, Enum):
    """Container actions reported by the docker events stream."""

    CREATE = "create"
    START = "start"
    RESTART = "restart"
    STOP = "stop"
    KILL = "kill"
    DIE = "die"
    DESTROY = "destroy"
    PAUSE = "pause"
    UNPAUSE = "unpause"


class LifecycleEvent(BaseModel):
    """A container state transition emitted by the docker host."""

    kind: str = Field(..., description="Event action, e.g. 'start' or 'die'")
    container_id: str = Field(..., description="Full container id")
    image: str = Field("", description="Image the container was created from")
    time: Optional[datetime] = Field(None, description="Event timestamp")

    @property
    def short_id(self) -> str:
        return self.container_id[:SHORT_ID_LENGTH]

    @property
    def is_start(self) -> bool:
        return self.kind == EventKind.START.value
