"""Container models."""
from pydantic import BaseModel, Field

SHORT_ID_LENGTH = 12


class ContainerInfo(BaseModel):
    """Read-only view of a container as reported by the docker host."""

    id: str = Field(..., description="Full container id")
    name: str = Field(..., description="Raw container name, with leading '/'")
    image: str = Field("", description="Container image reference")
    running: bool = Field(False, description="Whether the container is running")
    tty: bool = Field(False, description="Whether a pseudo-terminal is allocated")

    @property
    def short_id(self) -> str:
        return self.id[:SHORT_ID_LENGTH]

    @property
    def display_name(self) -> str:
        return self.name.strip("/")

    @property
    def tailable(self) -> bool:
        """A container can be tailed only while running and without a tty."""
        return self.running and not self.tty

    def matches_prefix(self, prefix: str) -> bool:
        """
        Check the raw name against an operator supplied name prefix.

        Plain prefix match, no globbing. An empty prefix matches every name.
        """
        return self.name.startswith("/" + prefix)
