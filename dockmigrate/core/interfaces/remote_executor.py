from abc import ABC, abstractmethod
from typing import AsyncIterator, List, Optional

from ..value_objects.host_connection import HostConnection
from .command_executor import CommandResult


class IRemoteExecutor(ABC):
    """Runs commands and copies files on a remote host over an authenticated channel.

    Every call blocks until the remote side finishes. Credentials are assumed
    to be in place already (key-based or interactive).
    """

    @abstractmethod
    async def run(self, host: HostConnection, command: List[str],
                  input: Optional[bytes] = None) -> CommandResult:
        pass

    @abstractmethod
    async def run_streaming(self, host: HostConnection, command: List[str],
                            chunks: AsyncIterator[bytes]) -> CommandResult:
        """Run a remote command with ``chunks`` piped to its stdin"""
        pass

    @abstractmethod
    async def copy(self, host: HostConnection, local_path: str, remote_path: str) -> CommandResult:
        """Copy a local file to ``remote_path``, overwriting what is there.

        Not atomic: a failed copy can leave a partial file behind.
        """
        pass
