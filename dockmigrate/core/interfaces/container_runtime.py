"""Container runtime capability interfaces"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict, List, Optional, Sequence

from .command_executor import CommandResult


@dataclass(frozen=True)
class BindMount:
    """A host path bind-mounted into a helper container"""
    source: str
    target: str
    read_only: bool = False

    def to_volume_arg(self) -> str:
        arg = f"{self.source}:{self.target}"
        return f"{arg}:ro" if self.read_only else arg


class SourceRuntime(ABC):
    """The runtime on the host the container leaves"""

    @abstractmethod
    async def inspect(self, container: str) -> Dict[str, Any]:
        """Return the container's metadata document; NotFoundError if absent"""
        pass

    @abstractmethod
    async def stop(self, container: str, timeout: int = 10) -> None:
        pass

    @abstractmethod
    async def commit(self, container: str, image_name: str) -> None:
        pass

    @abstractmethod
    def save(self, image_name: str) -> AsyncIterator[bytes]:
        """Stream the image as a tar archive"""
        pass

    @abstractmethod
    async def run_helper(self, command: Sequence[str], volumes_from: str,
                         binds: Sequence[BindMount] = (),
                         input: Optional[bytes] = None) -> CommandResult:
        """Run ``command`` in a throwaway container that mounts ``volumes_from``'s volumes"""
        pass


class TargetRuntime(ABC):
    """The runtime on the host the container moves to"""

    @abstractmethod
    async def load(self, chunks: AsyncIterator[bytes]) -> None:
        """Load an image from a streamed tar archive"""
        pass

    @abstractmethod
    async def volume_exists(self, name: str) -> bool:
        pass

    @abstractmethod
    async def volume_create(self, name: str) -> None:
        pass

    @abstractmethod
    async def network_exists(self, name: str) -> bool:
        pass

    @abstractmethod
    async def network_create(self, name: str) -> None:
        pass

    @abstractmethod
    async def compose_create(self, compose_file: str) -> None:
        """Create (but do not start) the containers a compose file describes"""
        pass

    @abstractmethod
    async def start(self, container: str) -> None:
        pass

    @abstractmethod
    async def run_helper(self, command: Sequence[str], volumes_from: str,
                         binds: Sequence[BindMount] = (),
                         input: Optional[bytes] = None) -> CommandResult:
        pass

    async def ensure_volume(self, name: str) -> bool:
        """Create ``name`` unless it exists; True when a volume was created"""
        if await self.volume_exists(name):
            return False
        await self.volume_create(name)
        return True

    async def ensure_network(self, name: str) -> bool:
        """Create ``name`` unless it exists; True when a network was created"""
        if await self.network_exists(name):
            return False
        await self.network_create(name)
        return True
