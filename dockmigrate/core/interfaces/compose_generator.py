from abc import ABC, abstractmethod


class ComposeGenerator(ABC):
    """Maps a container's run configuration to a compose document"""

    @abstractmethod
    async def generate(self, container: str) -> str:
        pass
