"""ContainerIdentity value object"""

from dataclasses import dataclass
import re

from ..exceptions.validation_exceptions import UsageError
from .host_connection import HostConnection

# Same character set the docker and podman CLIs accept for container names
_CONTAINER_NAME = re.compile(r'^[a-zA-Z0-9][a-zA-Z0-9_.-]*$')


@dataclass(frozen=True)
class ContainerIdentity:
    """The container being migrated and where it is going.

    Fixed for the whole run: the source side is always the local engine.
    """

    name: str
    target: HostConnection
    source_host: str = "localhost"

    def __post_init__(self):
        if not self.name:
            raise UsageError("Container name cannot be empty", field="container")
        if not _CONTAINER_NAME.match(self.name):
            raise UsageError(f"Invalid container name: {self.name}", field="container")

    def __str__(self) -> str:
        return f"{self.name} ({self.source_host} -> {self.target})"
