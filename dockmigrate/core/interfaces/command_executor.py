from abc import ABC, abstractmethod
from typing import AsyncIterator, List, Optional
from dataclasses import dataclass


@dataclass
class CommandResult:
    """Result of a command execution"""
    returncode: int
    stdout: str
    stderr: str
    success: Optional[bool] = None

    def __post_init__(self):
        if self.success is None:
            self.success = self.returncode == 0


class ICommandExecutor(ABC):
    """Runs commands on the local host"""

    @abstractmethod
    async def execute(self, command: List[str], input: Optional[bytes] = None) -> CommandResult:
        """Run a command to completion, optionally feeding ``input`` on stdin"""
        pass

    @abstractmethod
    async def execute_streaming(self, command: List[str],
                                chunks: AsyncIterator[bytes]) -> CommandResult:
        """Run a command while streaming ``chunks`` into its stdin"""
        pass
